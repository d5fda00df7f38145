# wellnest/safety/tables.py
# -*- coding: utf-8 -*-
"""
Static crisis tables: patterns, supportive messages, helplines, care steps.

Loaded from the YAML files in wellnest/policies/ (or WELLNEST_POLICY_DIR) once,
validated, compiled, and then treated as read-only for the life of the process.
Tests build alternate tables with CrisisTables.from_mapping().

Fallback chain for every per-language lookup: requested language -> 'en'.
"""
from __future__ import annotations

import logging
import os
import re
import unicodedata
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple, Union

import yaml

from wellnest.safety.types import EVALUATION_ORDER, HelplineEntry, RiskTier

log = logging.getLogger("wellnest.policies")

POLICY_DIR = Path(__file__).resolve().parent.parent / "policies"
DEFAULT_LANG = "en"

PATTERNS_FILE = "crisis_patterns.yaml"
HELPLINES_FILE = "helplines.yaml"
MESSAGES_FILE = "crisis_messages.yaml"

# Python 're' has no \p{M}: Indic vowel signs/viramas are not \w, so treat the
# Devanagari..Sinhala blocks as word chars (minus the danda punctuation U+0964/5).
_WORD_CHARS = r"\w\u0900-\u0963\u0966-\u0DFF"
_LEFT = rf"(?<![{_WORD_CHARS}])"
_RIGHT = rf"(?![{_WORD_CHARS}])"


class PolicyTableError(ValueError):
    """A crisis table file is missing, malformed, or incomplete."""


@dataclass(frozen=True)
class PatternEntry:
    language: str
    tier: RiskTier
    source: str
    regex: re.Pattern

    def search(self, text: str) -> Optional[str]:
        m = self.regex.search(text)
        return m.group(0) if m else None


PatternTable = Mapping[RiskTier, Tuple[PatternEntry, ...]]


def compile_pattern(source: str, language: str, tier: RiskTier) -> PatternEntry:
    src = unicodedata.normalize("NFC", source.strip())
    if not src:
        raise PolicyTableError(f"empty pattern for {language}/{tier}")
    try:
        rx = re.compile(_LEFT + "(?:" + src + ")" + _RIGHT, re.IGNORECASE)
    except re.error as e:
        raise PolicyTableError(f"bad pattern for {language}/{tier}: {source!r} ({e})") from e
    return PatternEntry(language=language, tier=tier, source=src, regex=rx)


def split_language_tag(tag: Optional[str]) -> Tuple[str, Optional[str]]:
    """
    'hi-IN' -> ('hi', 'IN'); 'en_gb' -> ('en', 'GB'); 'xx-unknown' -> ('xx', None).
    Only a two-letter second subtag is read as a region.
    """
    t = (tag or "").strip().replace("_", "-")
    if not t:
        return DEFAULT_LANG, None
    parts = [p for p in t.split("-") if p]
    primary = parts[0].lower()
    region = None
    if len(parts) > 1 and len(parts[1]) == 2 and parts[1].isalpha():
        region = parts[1].upper()
    return primary, region


def _tier_key(raw: Any, where: str) -> RiskTier:
    try:
        return RiskTier.parse(raw)
    except ValueError as e:
        raise PolicyTableError(f"{where}: {e}") from e


def _section(data: Any, key: str, where: str) -> Dict[str, Any]:
    if not isinstance(data, dict) or not isinstance(data.get(key), dict):
        raise PolicyTableError(f"{where}: missing '{key}' mapping")
    return data[key]


@dataclass(frozen=True)
class CrisisTables:
    patterns: Mapping[str, PatternTable]
    messages: Mapping[str, Mapping[RiskTier, str]]
    helplines: Mapping[str, Tuple[HelplineEntry, ...]]
    language_regions: Mapping[str, str]
    default_region: str
    region_aliases: Mapping[str, str]
    care_steps: Mapping[RiskTier, Tuple[str, ...]]

    # ---------- construction ----------
    @classmethod
    def from_mapping(cls, patterns: Dict[str, Any], helplines: Dict[str, Any],
                     messages: Dict[str, Any]) -> "CrisisTables":
        """Build from already-parsed YAML documents. Raises PolicyTableError on bad input."""
        # patterns
        langs = _section(patterns, "languages", PATTERNS_FILE)
        compiled: Dict[str, PatternTable] = {}
        for lang, tiers in langs.items():
            lang = str(lang).lower()
            if not isinstance(tiers, dict):
                raise PolicyTableError(f"{PATTERNS_FILE}: '{lang}' must map tiers to lists")
            table: Dict[RiskTier, Tuple[PatternEntry, ...]] = {t: () for t in EVALUATION_ORDER}
            for raw_tier, items in tiers.items():
                tier = _tier_key(raw_tier, f"{PATTERNS_FILE}:{lang}")
                if tier is RiskTier.LOW:
                    if items:
                        raise PolicyTableError(f"{PATTERNS_FILE}:{lang}: 'low' cannot carry patterns")
                    continue
                table[tier] = tuple(compile_pattern(str(p), lang, tier) for p in (items or []))
            compiled[lang] = MappingProxyType(table)
        if DEFAULT_LANG not in compiled:
            raise PolicyTableError(f"{PATTERNS_FILE}: fallback language '{DEFAULT_LANG}' is required")

        # messages + care steps
        msg_langs = _section(messages, "messages", MESSAGES_FILE)
        msgs: Dict[str, Mapping[RiskTier, str]] = {}
        for lang, per_tier in msg_langs.items():
            lang = str(lang).lower()
            if per_tier is not None and not isinstance(per_tier, dict):
                raise PolicyTableError(f"{MESSAGES_FILE}: '{lang}' must map tiers to messages")
            row = {}
            for raw_tier, text in (per_tier or {}).items():
                text = str(text or "").strip()
                if text:
                    row[_tier_key(raw_tier, f"{MESSAGES_FILE}:{lang}")] = text
            msgs[lang] = MappingProxyType(row)
        missing = [t.value for t in RiskTier if t not in msgs.get(DEFAULT_LANG, {})]
        if missing:
            raise PolicyTableError(f"{MESSAGES_FILE}: '{DEFAULT_LANG}' lacks messages for {missing}")

        steps_raw = messages.get("care_steps") or {}
        if not isinstance(steps_raw, dict):
            raise PolicyTableError(f"{MESSAGES_FILE}: 'care_steps' must map tiers to lists")
        steps = {t: () for t in RiskTier}
        for raw_tier, items in steps_raw.items():
            where = f"{MESSAGES_FILE}:care_steps"
            tier = _tier_key(raw_tier, where)
            if items is not None and not isinstance(items, list):
                raise PolicyTableError(f"{where}: '{tier.value}' must be a list of steps")
            steps[tier] = tuple(str(s) for s in (items or []))

        # helplines
        regions_raw = _section(helplines, "regions", HELPLINES_FILE)
        regions: Dict[str, Tuple[HelplineEntry, ...]] = {}
        for code, entries in regions_raw.items():
            code = str(code).upper()
            rows = []
            for e in entries or []:
                if not isinstance(e, dict) or not e.get("name") or not e.get("number"):
                    raise PolicyTableError(f"{HELPLINES_FILE}:{code}: each helpline needs name and number")
                rows.append(HelplineEntry(
                    name=str(e["name"]),
                    number=str(e["number"]),
                    text=str(e["text"]) if e.get("text") else None,
                    website=str(e["website"]) if e.get("website") else None,
                ))
            if rows:
                regions[code] = tuple(rows)

        default_region = str(helplines.get("default_region") or "").upper()
        if default_region not in regions:
            raise PolicyTableError(f"{HELPLINES_FILE}: default_region {default_region!r} has no helplines")
        lang_regions = {str(k).lower(): str(v).upper() for k, v in (helplines.get("language_regions") or {}).items()}
        aliases = {str(k).upper(): str(v).upper() for k, v in (helplines.get("region_aliases") or {}).items()}

        return cls(
            patterns=MappingProxyType(compiled),
            messages=MappingProxyType(msgs),
            helplines=MappingProxyType(regions),
            language_regions=MappingProxyType(lang_regions),
            default_region=default_region,
            region_aliases=MappingProxyType(aliases),
            care_steps=MappingProxyType(steps),
        )

    @classmethod
    def from_dir(cls, policy_dir: Union[str, Path, None] = None) -> "CrisisTables":
        d = Path(policy_dir) if policy_dir else POLICY_DIR
        docs = []
        for name in (PATTERNS_FILE, HELPLINES_FILE, MESSAGES_FILE):
            p = d / name
            if not p.exists():
                raise PolicyTableError(f"policy file not found: {p}")
            try:
                docs.append(yaml.safe_load(p.read_text(encoding="utf-8")) or {})
            except yaml.YAMLError as e:
                raise PolicyTableError(f"cannot parse {p}: {e}") from e
        tables = cls.from_mapping(*docs)
        log.info(
            "crisis tables loaded from %s: languages=%s patterns=%d regions=%s",
            d, sorted(tables.patterns), tables.pattern_count(), sorted(tables.helplines),
        )
        return tables

    # ---------- lookups ----------
    def pattern_count(self) -> int:
        return sum(len(v) for table in self.patterns.values() for v in table.values())

    def has_language(self, language: Optional[str]) -> bool:
        return split_language_tag(language)[0] in self.patterns

    def patterns_for(self, language: Optional[str]) -> PatternTable:
        primary, _ = split_language_tag(language)
        return self.patterns.get(primary) or self.patterns[DEFAULT_LANG]

    def message_for(self, tier: RiskTier, language: Optional[str]) -> str:
        primary, _ = split_language_tag(language)
        row = self.messages.get(primary) or {}
        return row.get(tier) or self.messages[DEFAULT_LANG][tier]

    def region_for(self, language: Optional[str]) -> str:
        primary, region = split_language_tag(language)
        if region:
            code = self.region_aliases.get(region, region)
            if code in self.helplines:
                return code
        code = self.language_regions.get(primary, self.default_region)
        return code if code in self.helplines else self.default_region

    def helplines_for(self, language: Optional[str]) -> Tuple[HelplineEntry, ...]:
        return self.helplines[self.region_for(language)]

    def steps_for(self, tier: RiskTier) -> Tuple[str, ...]:
        return self.care_steps.get(tier, ())


@lru_cache(maxsize=None)
def load_tables(policy_dir: Optional[str] = None) -> CrisisTables:
    """Process-wide read-only tables; WELLNEST_POLICY_DIR overrides the packaged ones."""
    return CrisisTables.from_dir(policy_dir or os.getenv("WELLNEST_POLICY_DIR") or POLICY_DIR)
