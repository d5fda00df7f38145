# wellnest/safety/engine.py
# -*- coding: utf-8 -*-
"""
Crisis assessment engine: classify -> compose, plus escalation logging.

The engine holds only immutable tables, so one instance is shared by all
requests without locking. default_engine() caches one over the packaged tables
(or WELLNEST_POLICY_DIR); tests construct their own with alternate tables.
"""
from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import FrozenSet, List, Optional, Tuple, Union

from wellnest.redaction import redact_all
from wellnest.safety.classifier import CrisisClassifier
from wellnest.safety.composer import ResponseComposer
from wellnest.safety.escalation import should_escalate
from wellnest.safety.tables import CrisisTables, load_tables, split_language_tag
from wellnest.safety.types import CrisisAssessment, HelplineEntry, RiskTier

log = logging.getLogger("wellnest.safety")


class CrisisEngine:
    def __init__(self, tables: CrisisTables, scan_all_languages: bool = False) -> None:
        self.tables = tables
        self.classifier = CrisisClassifier(tables, scan_all_languages=scan_all_languages)
        self.composer = ResponseComposer(tables)

    # ---- building blocks ----
    def classify(self, text: Optional[str], language: Optional[str] = "en") -> RiskTier:
        return self.classifier.classify(text, language)

    def compose(self, tier: Union[RiskTier, str], language: Optional[str] = "en") -> CrisisAssessment:
        return self.composer.compose(tier, language)

    def extract_matches(self, text: Optional[str], language: Optional[str] = "en") -> FrozenSet[str]:
        return self.classifier.extract_matches(text, language)

    def helplines_for(self, language: Optional[str]) -> Tuple[HelplineEntry, ...]:
        return self.composer.helplines_for(language)

    def care_steps(self, tier: Union[RiskTier, str]) -> Tuple[str, ...]:
        return self.composer.care_steps(tier)

    # ---- main entry ----
    def assess(self, text: Optional[str], language: Optional[str] = "en") -> CrisisAssessment:
        tier = self.classify(text, language)
        result = self.compose(tier, language)
        if should_escalate(tier):
            matches: List[str] = redact_all(self.extract_matches(text, language))
            log.warning(
                "CRISIS_ESCALATION tier=%s lang=%s known_lang=%s matches=%s",
                tier.value, split_language_tag(language)[0], self.tables.has_language(language), matches,
            )
        else:
            log.debug("crisis assess tier=%s lang=%s", tier.value, language)
        return result


@lru_cache(maxsize=None)
def default_engine() -> CrisisEngine:
    scan_all = os.getenv("WELLNEST_CRISIS_SCAN_ALL", "0") == "1"
    return CrisisEngine(load_tables(), scan_all_languages=scan_all)


# ---- module-level API (chat backend / UI callers) ----
def detect_crisis(text: Optional[str], language: Optional[str] = "en") -> CrisisAssessment:
    return default_engine().assess(text, language)


def extract_keywords(text: Optional[str], language: Optional[str] = "en") -> FrozenSet[str]:
    return default_engine().extract_matches(text, language)


def get_care_steps(tier: Union[RiskTier, str]) -> Tuple[str, ...]:
    return default_engine().care_steps(tier)
