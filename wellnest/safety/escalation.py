# wellnest/safety/escalation.py
from __future__ import annotations

from typing import Union

from wellnest.safety.types import RiskTier

ESCALATION_THRESHOLD = RiskTier.HIGH


def should_escalate(tier: Union[RiskTier, str]) -> bool:
    """
    True for high/imminent: notify a human reviewer / log with elevated priority.
    Accepts a tier from any source (enum or wire string); unknown values raise ValueError.
    """
    return RiskTier.parse(tier) >= ESCALATION_THRESHOLD
