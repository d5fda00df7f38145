# wellnest/api/server.py  (crisis assessment service: assess / helplines / chat screening)
from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel, Field

from wellnest.api.middleware import PIIRedactionMiddleware
from wellnest.safety import RiskTier, default_engine, should_escalate
from wellnest.safety.types import helplines_wire

log = logging.getLogger("wellnest.server")

VERSION = "0.1.0"

# ---------------- Feature flags ----------------
DEBUG = os.getenv("WELLNEST_DEBUG", "0") == "1"
DEFAULT_LANG = os.getenv("WELLNEST_DEFAULT_LANG", "en")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(level=logging.INFO)
    # load + validate tables before the first request; a broken table fails startup
    engine = default_engine()
    log.info("Server starting... crisis patterns=%d", engine.tables.pattern_count())
    yield
    log.info("Server stopping...")


app = FastAPI(title="WellNest", lifespan=lifespan)
app.add_middleware(PIIRedactionMiddleware)


class AssessIn(BaseModel):
    text: str = ""
    language: Optional[str] = Field(None, description="en | hi | ta | … (BCP-47 style tags accepted)")


class ScreenIn(BaseModel):
    message: str = Field(..., min_length=1)
    language: Optional[str] = None


class EscalateIn(BaseModel):
    level: RiskTier


@app.get("/healthz")
def healthz():
    return {"status": "ok", "engine": "crisis"}


@app.get("/version")
def version():
    return {"name": "WellNest", "version": VERSION}


@app.post("/api/crisis/assess")
def assess(body: AssessIn) -> Dict[str, Any]:
    lang = body.language or DEFAULT_LANG
    engine = default_engine()
    result = engine.assess(body.text, lang)
    out = result.to_wire()
    out["escalate"] = should_escalate(result.tier)
    out["care_steps"] = list(engine.care_steps(result.tier))
    if DEBUG:
        out["matched_terms"] = sorted(engine.extract_matches(body.text, lang))
    return out


@app.post("/api/crisis/escalate")
def escalate(body: EscalateIn) -> Dict[str, Any]:
    """Policy check for a tier obtained elsewhere (e.g. a stored message's crisisLevel)."""
    return {"level": body.level.value, "escalate": should_escalate(body.level)}


@app.get("/api/crisis/helplines")
def helplines(language: Optional[str] = Query(default=None)):
    engine = default_engine()
    lang = language or DEFAULT_LANG
    return {
        "region": engine.tables.region_for(lang),
        "helplines": helplines_wire(engine.helplines_for(lang)),
    }


@app.post("/api/chat/screen")
def chat_screen(body: ScreenIn) -> Dict[str, Any]:
    """
    Screening step of the chat route. The caller persists the message and, when
    nothing is detected, generates the companion reply itself.
    """
    result = default_engine().assess(body.message, body.language or DEFAULT_LANG)
    detected = result.tier is not RiskTier.LOW
    out: Dict[str, Any] = {"crisisDetected": detected, "message": result.message if detected else None}
    if detected:
        out["crisisLevel"] = result.tier.value
    return out


@app.get("/api/debug/crisis")
def debug_crisis(q: Optional[str] = Query(default=None, description="probe text"),
                 language: Optional[str] = Query(default=None)):
    if not DEBUG:
        raise HTTPException(status_code=404, detail="Not found")
    engine = default_engine()
    lang = language or DEFAULT_LANG
    out: Dict[str, Any] = {
        "languages": sorted(engine.tables.patterns),
        "known_language": engine.tables.has_language(lang),
        "scan_all_languages": engine.classifier.scan_all_languages,
    }
    if q is not None:
        out["probe"] = {
            "level": engine.classify(q, lang).value,
            "matched_terms": sorted(engine.extract_matches(q, lang)),
        }
    return out
