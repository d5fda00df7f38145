# -*- coding: utf-8 -*-
import pytest

from wellnest.safety import CrisisClassifier, RiskTier, load_tables, normalize_text


@pytest.fixture(scope="module")
def clf():
    return CrisisClassifier(load_tables())


def test_imminent_en(clf):
    assert clf.classify("I want to kill myself", "en") is RiskTier.IMMINENT

def test_moderate_en(clf):
    assert clf.classify("I hate my life", "en") is RiskTier.MODERATE

def test_low_en(clf):
    assert clf.classify("I had a wonderful day", "en") is RiskTier.LOW

def test_imminent_hi(clf):
    assert clf.classify("मुझे मरना है", "hi") is RiskTier.IMMINENT

def test_imminent_ta(clf):
    assert clf.classify("நான் இறக்க வேண்டும்", "ta") is RiskTier.IMMINENT

def test_high_en(clf):
    assert clf.classify("Some days I feel like I can't go on", "en") is RiskTier.HIGH


def test_imminent_wins_over_lower_tiers(clf):
    text = "I hate my life, I'm a burden, I can't go on and I want to kill myself"
    assert clf.classify(text, "en") is RiskTier.IMMINENT


def test_word_boundary_blocks_substrings(clf):
    # "i want to die" must not fire inside "i want to diet"
    assert clf.classify("I want to diet before summer", "en") is RiskTier.LOW
    assert clf.classify("I want to die", "en") is RiskTier.IMMINENT


def test_hindi_with_danda_and_region_tag(clf):
    assert clf.classify("मुझे जीना नहीं है।", "hi-IN") is RiskTier.IMMINENT


def test_hindi_vowel_sign_is_not_a_boundary(clf):
    # "है" followed directly by another Devanagari letter is a different word
    assert clf.classify("मुझे मरना हैरान", "hi") is RiskTier.LOW


def test_case_whitespace_and_curly_apostrophe(clf):
    assert clf.classify("  I’M   GOING TO\tJUMP  ", "en") is RiskTier.IMMINENT


def test_empty_and_none_are_low(clf):
    assert clf.classify("", "en") is RiskTier.LOW
    assert clf.classify("   ", "hi") is RiskTier.LOW
    assert clf.classify(None, "en") is RiskTier.LOW


@pytest.mark.parametrize("lang", ["xx-unknown", "", None, "fr", "ZZ_zz"])
def test_unknown_language_falls_back_to_english(clf, lang):
    assert clf.classify("I want to kill myself", lang) is RiskTier.IMMINENT


def test_mixed_script_only_uses_requested_table(clf):
    text = "today was ok but मुझे मरना है"
    assert clf.classify(text, "en") is RiskTier.LOW
    assert clf.classify(text, "hi") is RiskTier.IMMINENT


def test_scan_all_languages_takes_most_severe():
    clf = CrisisClassifier(load_tables(), scan_all_languages=True)
    assert clf.classify("I hate my life. मुझे मरना है", "en") is RiskTier.IMMINENT
    assert clf.classify("I hate my life", "ta") is RiskTier.MODERATE


def test_extract_matches_all_tiers_deduplicated(clf):
    text = "I hate my life. I hate my life. I want to kill myself"
    found = clf.extract_matches(text, "en")
    assert found == frozenset({"i hate my life", "i want to kill myself"})


def test_extract_matches_empty(clf):
    assert clf.extract_matches("", "en") == frozenset()
    assert clf.extract_matches("lovely weather", "en") == frozenset()


def test_normalize_text():
    assert normalize_text("  Hello\u200b  World\u2019s ") == "hello world's"
    assert normalize_text(None) == ""


def test_extract_matches_returns_normalized_fragments(clf):
    got = clf.extract_matches("I  Want To KILL\u200b Myself", "en")
    assert "i want to kill myself" in got
    assert "I  Want To KILL\u200b Myself" not in got
