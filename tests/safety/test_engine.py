# -*- coding: utf-8 -*-
import logging

from wellnest.safety import (
    CrisisEngine,
    RiskTier,
    default_engine,
    detect_crisis,
    extract_keywords,
    get_care_steps,
    load_tables,
)


def test_detect_crisis_end_to_end():
    out = detect_crisis("I want to kill myself", "en")
    assert out.tier is RiskTier.IMMINENT
    assert out.helplines[0].number == "988"
    assert out.actions.call and out.actions.text
    assert not out.actions.grounding


def test_detect_crisis_defaults_to_english():
    assert detect_crisis("I hate my life").tier is RiskTier.MODERATE


def test_unknown_language_never_raises():
    out = detect_crisis("I want to kill myself", "xx-unknown")
    assert out.tier is RiskTier.IMMINENT
    # English message, Indian helplines
    assert out.message == detect_crisis("I want to kill myself", "en").message
    assert out.helplines[0].name == "AASRA"


def test_default_engine_is_shared():
    assert default_engine() is default_engine()


def test_extract_keywords():
    assert extract_keywords("मुझे मरना है", "hi") == frozenset({"मुझे मरना है"})


def test_get_care_steps():
    assert get_care_steps("imminent")[-1] == "Get immediate help"


def test_escalation_is_logged_without_pii(caplog):
    engine = CrisisEngine(load_tables())
    text = "I want to kill myself, call me on +91 98765 43210 or mail a.b@example.com"
    with caplog.at_level(logging.WARNING, logger="wellnest.safety"):
        out = engine.assess(text, "en")
    assert out.tier is RiskTier.IMMINENT
    logged = " ".join(r.getMessage() for r in caplog.records)
    assert "CRISIS_ESCALATION" in logged
    assert "tier=imminent" in logged
    assert "98765" not in logged
    assert "example.com" not in logged


def test_non_escalating_assess_does_not_warn(caplog):
    engine = CrisisEngine(load_tables())
    with caplog.at_level(logging.WARNING, logger="wellnest.safety"):
        engine.assess("I hate my life", "en")
    assert not [r for r in caplog.records if r.levelno >= logging.WARNING]
