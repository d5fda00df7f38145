# wellnest/safety/types.py
from __future__ import annotations
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class RiskTier(str, Enum):
    """
    Ordered crisis severity: low < moderate < high < imminent.

    Members compare equal to their wire strings ("high" == RiskTier.HIGH),
    while <, <=, >, >= follow severity rather than alphabetical order, also
    against plain strings ("moderate" < "high"). Unknown strings raise ValueError.
    """
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    IMMINENT = "imminent"

    @property
    def rank(self) -> int:
        return _RANK[self]

    @classmethod
    def parse(cls, value: Any) -> "RiskTier":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise ValueError(f"unknown risk tier: {value!r}")

    def _other_rank(self, other):
        if isinstance(other, str):
            return RiskTier.parse(other).rank
        return NotImplemented

    def __lt__(self, other):
        r = self._other_rank(other)
        return r if r is NotImplemented else self.rank < r

    def __le__(self, other):
        r = self._other_rank(other)
        return r if r is NotImplemented else self.rank <= r

    def __gt__(self, other):
        r = self._other_rank(other)
        return r if r is NotImplemented else self.rank > r

    def __ge__(self, other):
        r = self._other_rank(other)
        return r if r is NotImplemented else self.rank >= r

    def __str__(self) -> str:
        return self.value


_RANK: Dict[RiskTier, int] = {t: i for i, t in enumerate(RiskTier)}

# Most severe first; 'low' is the no-match result and has no patterns.
EVALUATION_ORDER: Tuple[RiskTier, ...] = (RiskTier.IMMINENT, RiskTier.HIGH, RiskTier.MODERATE)


class HelplineEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Service name")
    number: str = Field(..., description="Phone number to dial")
    text: Optional[str] = Field(None, description="SMS / text line, if any")
    website: Optional[str] = None


class CrisisActions(BaseModel):
    model_config = ConfigDict(frozen=True)

    call: bool
    text: bool
    grounding: bool
    resources: bool = True


class CrisisAssessment(BaseModel):
    """Engine output for one utterance. Serializes as {level, message, helplines, actions}."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    tier: RiskTier = Field(..., alias="level")
    message: str = Field(..., min_length=1)
    helplines: Tuple[HelplineEntry, ...] = Field(..., min_length=1)
    actions: CrisisActions

    def to_wire(self) -> Dict[str, Any]:
        """JSON-ready dict using the chat API field names; optional helpline fields are dropped."""
        return {
            "level": self.tier.value,
            "message": self.message,
            "helplines": helplines_wire(self.helplines),
            "actions": self.actions.model_dump(),
        }


def helplines_wire(entries) -> List[Dict[str, Any]]:
    return [h.model_dump(exclude_none=True) for h in entries]
