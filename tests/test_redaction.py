from wellnest.redaction import redact_all, redact_text


def test_redacts_email_and_phone():
    s = redact_text("reach me at jane.doe+x@mail.example.org or +91 98765 43210")
    assert "[REDACTED_EMAIL]" in s
    assert "[REDACTED_PHONE]" in s
    assert "98765" not in s


def test_keeps_short_numbers_and_plain_text():
    # helpline short codes are not PII
    assert redact_text("call 988 now") == "call 988 now"
    assert redact_text("") == ""
    assert redact_text(None) == ""


def test_redact_all_sorted():
    assert redact_all(["b", "a"]) == ["a", "b"]
