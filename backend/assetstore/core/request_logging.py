"""Structured request logging: request_id, route, status, latency. Token paths are redacted."""
import json
import logging
import time
import uuid
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from assetstore.core.logging_redaction import redact_for_log, redact_path
from assetstore.core.metrics import record_request

logger = logging.getLogger("assetstore.request")

_UNMETERED_PATHS = ("/metrics", "/healthz", "/ping")


def _safe_extra(request: Request, status_code: int, latency_ms: float) -> dict[str, Any]:
    extra: dict[str, Any] = {
        "request_id": getattr(request.state, "request_id", None),
        "method": request.method,
        "path": redact_path(request.url.path),
        "status_code": status_code,
        "latency_ms": round(latency_ms, 2),
    }
    if request.client is not None:
        extra["client_ip"] = request.client.host
    return redact_for_log(extra)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Assign request_id and log one structured line per request (route, status, latency)."""

    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
        start = time.perf_counter()
        response = await call_next(request)
        latency_ms = (time.perf_counter() - start) * 1000
        extra = _safe_extra(request, response.status_code, latency_ms)
        # Single JSON line when log_json; else standard log with extra
        if request.app.state.settings.log_json:
            logger.info(json.dumps({"event": "request", **extra}))
        else:
            logger.info("request %s %s %s %.2fms", request.method, extra["path"], response.status_code, latency_ms, extra=extra)
        response.headers["X-Request-ID"] = request_id
        # Skip health and metrics endpoints to avoid noise
        if not request.url.path.endswith(_UNMETERED_PATHS):
            record_request(request.method, request.url.path, response.status_code, latency_ms / 1000.0)
        return response
