# wellnest/safety/composer.py
from __future__ import annotations

from typing import Optional, Tuple, Union

from wellnest.safety.tables import CrisisTables
from wellnest.safety.types import CrisisActions, CrisisAssessment, HelplineEntry, RiskTier

_URGENT = frozenset({RiskTier.HIGH, RiskTier.IMMINENT})
_GROUNDING = frozenset({RiskTier.MODERATE, RiskTier.HIGH})


def actions_for(tier: Union[RiskTier, str]) -> CrisisActions:
    """
    Pure function of tier:
      - call/text prompts at high and imminent
      - grounding exercise at moderate and high (imminent goes straight to help)
      - resources always
    """
    t = RiskTier.parse(tier)
    urgent = t in _URGENT
    return CrisisActions(call=urgent, text=urgent, grounding=t in _GROUNDING, resources=True)


class ResponseComposer:
    """Maps (tier, language) to a CrisisAssessment. No I/O, no randomness."""

    def __init__(self, tables: CrisisTables) -> None:
        self.tables = tables

    def helplines_for(self, language: Optional[str]) -> Tuple[HelplineEntry, ...]:
        return self.tables.helplines_for(language)

    def compose(self, tier: Union[RiskTier, str], language: Optional[str] = "en") -> CrisisAssessment:
        t = RiskTier.parse(tier)
        return CrisisAssessment(
            tier=t,
            message=self.tables.message_for(t, language),
            helplines=self.helplines_for(language),
            actions=actions_for(t),
        )

    def care_steps(self, tier: Union[RiskTier, str]) -> Tuple[str, ...]:
        return self.tables.steps_for(RiskTier.parse(tier))
