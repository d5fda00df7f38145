# wellnest/redaction.py
# -*- coding: utf-8 -*-
"""
PII scrubbing for anything that reaches the logs.

Crisis messages often carry phone numbers, emails or addresses; log lines must
only ever see the redacted form.
"""
from __future__ import annotations
import re
from typing import Iterable, List

EMAIL_RE = re.compile(r"\b[\w\.+-]+@[\w\.-]+\.\w+\b")
PHONE_RE = re.compile(r"(?<!\w)\+?\d[\d\s\-]{8,}\d\b")


def redact_text(s: str) -> str:
    s = EMAIL_RE.sub("[REDACTED_EMAIL]", s or "")
    s = PHONE_RE.sub("[REDACTED_PHONE]", s)
    return s


def redact_all(items: Iterable[str]) -> List[str]:
    return sorted(redact_text(x) for x in items)
