"""Redact sensitive data from structured logs. Asset tokens are bearer credentials: never log them."""
import re
from typing import Any

# Keys (case-insensitive, substring match) whose values are always redacted
REDACT_KEYS = frozenset({
    "token", "secret", "authorization", "cookie", "password", "api_key", "x-api-key",
})

# Request paths that embed a token: /asset-token/<token>
_TOKEN_PATH = re.compile(r"(/asset-token/)[^/]+")


def _redact_key(key: str) -> bool:
    k = key.lower()
    return any(r in k for r in REDACT_KEYS)


def redact_for_log(obj: Any) -> Any:
    """Return a copy of obj safe for logging: sensitive keys replaced with '[REDACTED]'."""
    if obj is None:
        return None
    if isinstance(obj, dict):
        return {
            k: "[REDACTED]" if _redact_key(str(k)) else redact_for_log(v)
            for k, v in obj.items()
        }
    if isinstance(obj, (list, tuple)):
        return type(obj)(redact_for_log(x) for x in obj)
    if isinstance(obj, str):
        if _looks_like_secret(obj):
            return "[REDACTED]"
        return redact_path(obj)
    return obj


def redact_path(path: str) -> str:
    """/api/asset-token/abc -> /api/asset-token/[REDACTED]"""
    return _TOKEN_PATH.sub(r"\1[REDACTED]", path)


def _looks_like_secret(s: str) -> bool:
    """Heuristic: bearer header or JWT-like string."""
    if s.lower().startswith("bearer "):
        return True
    if len(s) > 64 and re.match(r"^[A-Za-z0-9_-]+\.([A-Za-z0-9_-]+)\.", s):
        return True
    return False
