"""Normalization helpers.

Centralizes defensive parsing and placeholder handling.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

# Values the collaborator uses for "not available".
PLACEHOLDERS = frozenset({"", "--"})

_TWO_PLACES = Decimal("0.01")


def is_meaningful(value: Any) -> bool:
    """Return True if the value should win over a field default."""
    if value is None:
        return False
    if isinstance(value, str) and value.strip() in PLACEHOLDERS:
        return False
    return not (isinstance(value, float) and math.isnan(value))


def safe_float(value: Any) -> float | None:
    if not is_meaningful(value) or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def safe_int(value: Any) -> int | None:
    parsed = safe_float(value)
    if parsed is None:
        return None
    return int(parsed)


def safe_str(value: Any) -> str | None:
    if not is_meaningful(value):
        return None
    text = str(value).strip()
    return text if text else None


def non_negative_or_zero(value: Any) -> int:
    parsed = safe_int(value)
    if parsed is None or parsed < 0:
        return 0
    return parsed


def two_decimals(value: Any) -> Decimal:
    """Parse *value* as a non-negative decimal quantized to two places.

    Missing, unparsable and negative inputs yield ``Decimal("0.00")``.
    """
    parsed = safe_float(value)
    if parsed is None or parsed < 0:
        return Decimal("0.00")
    try:
        return Decimal(str(parsed)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return Decimal("0.00")


def normalize_timestamp_seconds(value: Any) -> float | None:
    """Normalize epoch timestamps to seconds.

    - Empty/missing -> None
    - <= 0 -> None
    - Milliseconds (> 1e11) -> seconds
    """

    ts = safe_float(value)
    if ts is None or ts <= 0:
        return None
    if ts > 1e11:
        ts /= 1000.0
    return ts


def format_duration(value: Any) -> str | None:
    """Render a duration for display.

    Strings pass through unchanged; numbers are taken as seconds and
    rendered as ``"<hours>h <minutes>m"``.
    """
    if not is_meaningful(value):
        return None
    if isinstance(value, str):
        return value.strip()
    seconds = safe_int(value)
    if seconds is None or seconds < 0:
        return None
    hours, remainder = divmod(seconds, 3600)
    return f"{hours}h {remainder // 60}m"
