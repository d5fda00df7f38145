# wellnest/safety/__init__.py
"""
Crisis assessment: regex tier detection, localized supportive message,
regional helplines and follow-up action flags.

    from wellnest.safety import detect_crisis
    detect_crisis("I want to kill myself", "en").to_wire()
"""
from wellnest.safety.types import (
    EVALUATION_ORDER,
    CrisisActions,
    CrisisAssessment,
    HelplineEntry,
    RiskTier,
)
from wellnest.safety.tables import CrisisTables, PatternEntry, PolicyTableError, load_tables
from wellnest.safety.classifier import CrisisClassifier, normalize_text
from wellnest.safety.composer import ResponseComposer, actions_for
from wellnest.safety.escalation import should_escalate
from wellnest.safety.engine import (
    CrisisEngine,
    default_engine,
    detect_crisis,
    extract_keywords,
    get_care_steps,
)

__all__ = [
    "EVALUATION_ORDER", "CrisisActions", "CrisisAssessment", "HelplineEntry", "RiskTier",
    "CrisisTables", "PatternEntry", "PolicyTableError", "load_tables",
    "CrisisClassifier", "normalize_text", "ResponseComposer", "actions_for",
    "should_escalate", "CrisisEngine", "default_engine", "detect_crisis",
    "extract_keywords", "get_care_steps",
]
