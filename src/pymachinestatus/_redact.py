"""Helpers for safe debug logging.

pymachinestatus carries a bearer credential on every request and live
connection. :func:`redact_for_log` masks it (and similar secrets) before
request/response bodies are emitted at DEBUG.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

REDACTED = "<redacted>"

# Compared after lowercasing and dropping "-" / "_".
_SENSITIVE_KEYS: frozenset[str] = frozenset(
    {"password", "token", "accesstoken", "refreshtoken", "authorization", "cookie", "setcookie"}
)

_BEARER_RE = re.compile(r"(?i)\bbearer\s+\S+")

_MAX_DEPTH = 20


def _is_sensitive(key: Any) -> bool:
    return re.sub(r"[-_]", "", str(key)).lower() in _SENSITIVE_KEYS


def _scrub_text(text: str, max_string: int) -> str:
    text = _BEARER_RE.sub(f"Bearer {REDACTED}", text)
    if len(text) > max_string:
        return f"{text[:max_string]}…<truncated>"
    return text


def redact_for_log(value: Any, *, max_string: int = 512, _depth: int = 0) -> Any:
    """Return a copy of *value* with credentials masked and long strings cut.

    Mappings keep their keys; values under credential-like keys become
    ``"<redacted>"``. Bearer tokens embedded in any string are masked too.
    """
    if _depth > _MAX_DEPTH:
        return "<max-depth>"

    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, str):
        return _scrub_text(value, max_string)
    if isinstance(value, (bytes, bytearray)):
        return f"<bytes:{len(value)}b>"
    if isinstance(value, Mapping):
        redacted: dict[str, Any] = {}
        for key, item in value.items():
            if _is_sensitive(key):
                redacted[str(key)] = REDACTED
            else:
                redacted[str(key)] = redact_for_log(item, max_string=max_string, _depth=_depth + 1)
        return redacted
    if isinstance(value, (list, tuple)):
        return [redact_for_log(item, max_string=max_string, _depth=_depth + 1) for item in value]
    return repr(value)
