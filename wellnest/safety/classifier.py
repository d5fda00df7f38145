# wellnest/safety/classifier.py
"""
Regex crisis classifier (pre-LLM).

Checks tiers most-severe first (imminent -> high -> moderate) and returns on the
first matching pattern; no match means 'low'. Over-escalation is preferred to
under-escalation, so lower-tier hits never pull the result down.
"""
from __future__ import annotations

import re
import unicodedata
from typing import FrozenSet, Iterable, List, Optional

from wellnest.safety.tables import CrisisTables, PatternTable, split_language_tag
from wellnest.safety.types import EVALUATION_ORDER, RiskTier

_INVISIBLE = dict.fromkeys(map(ord, "\u200b\u200c\u200d\u2060\ufeff"))
_APOSTROPHES = {ord(c): "'" for c in "\u2018\u2019\u02bc\u2032`"}
_WS_RE = re.compile(r"\s+")


def normalize_text(text: Optional[str]) -> str:
    """NFC, strip zero-width chars, unify apostrophes, collapse whitespace, casefold."""
    t = unicodedata.normalize("NFC", text or "")
    t = t.translate(_INVISIBLE).translate(_APOSTROPHES)
    return _WS_RE.sub(" ", t).strip().casefold()


def _first_tier(text: str, table: PatternTable) -> RiskTier:
    for tier in EVALUATION_ORDER:
        for entry in table.get(tier, ()):
            if entry.regex.search(text):
                return tier
    return RiskTier.LOW


class CrisisClassifier:
    def __init__(self, tables: CrisisTables, scan_all_languages: bool = False) -> None:
        self.tables = tables
        # off: only the requested language's table is consulted (mixed script leaks past it)
        self.scan_all_languages = scan_all_languages

    def _tables_for(self, language: Optional[str]) -> List[PatternTable]:
        first = self.tables.patterns_for(language)
        if not self.scan_all_languages:
            return [first]
        primary, _ = split_language_tag(language)
        rest = [t for lang, t in sorted(self.tables.patterns.items()) if t is not first and lang != primary]
        return [first] + rest

    def classify(self, text: Optional[str], language: Optional[str] = "en") -> RiskTier:
        t = normalize_text(text)
        if not t:
            return RiskTier.LOW
        worst = RiskTier.LOW
        for table in self._tables_for(language):
            worst = max(worst, _first_tier(t, table))
            if worst is RiskTier.IMMINENT:
                break
        return worst

    def extract_matches(self, text: Optional[str], language: Optional[str] = "en") -> FrozenSet[str]:
        """
        Every matched fragment across all tiers, taken from the normalized
        (NFC, casefolded, whitespace-collapsed) text rather than the raw input.
        Audit trail only; does not decide the tier.
        """
        t = normalize_text(text)
        if not t:
            return frozenset()
        found = set()
        for table in self._tables_for(language):
            for entries in table.values():
                found.update(_hits(t, entries))
        return frozenset(found)


def _hits(text: str, entries: Iterable) -> List[str]:
    out = []
    for entry in entries:
        frag = entry.search(text)
        if frag:
            out.append(frag)
    return out
