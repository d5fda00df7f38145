"""
PII-safe logging middleware.

- Request bodies are never logged, only their size.
- For JSON responses under /api/, logs the decision shape only (level,
  escalate, helpline count), passed through the PII redactor.
"""
from __future__ import annotations
import json
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from wellnest.redaction import redact_text

log = logging.getLogger("wellnest.middleware")


def _summarize(path: str, status: int, payload: dict) -> dict:
    level = payload.get("level") or payload.get("crisisLevel")
    return {
        "path": path,
        "status": status,
        "level": level,
        "escalate": payload.get("escalate"),
        "crisis_detected": payload.get("crisisDetected"),
        "helplines_len": len(payload.get("helplines") or []),
    }


class PIIRedactionMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        try:
            body = (await request.body()).decode("utf-8", "ignore")
        except Exception:
            body = ""

        response: Response = await call_next(request)

        if request.url.path.startswith("/api/"):
            # streaming responses: drain, log, rebuild
            raw = b"".join([chunk async for chunk in response.body_iterator])
            try:
                is_json = response.headers.get("content-type", "").startswith("application/json")
                payload = json.loads(raw.decode("utf-8")) if is_json else None
            except ValueError:
                payload = None
            if isinstance(payload, dict):
                summary = _summarize(request.url.path, response.status_code, payload)
                log.info("CRISIS_JSON %s", redact_text(json.dumps(summary)))
            else:
                log.info("REQ %s body_bytes=%d", request.url.path, len(body))
            rebuilt = Response(content=raw, status_code=response.status_code)
            # keep repeated headers (set-cookie) intact
            rebuilt.raw_headers = list(response.raw_headers)
            return rebuilt

        log.info("REQ %s body_bytes=%d", request.url.path, len(body))
        return response
