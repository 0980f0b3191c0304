"""Raw payload → :class:`TelemetryRecord` mapping.

Snapshot timeline items (``start_time``, ``device_id`` on the envelope)
and live push events (``deviceId``, ``createdAt``/``startTime``) describe
the same observation with different keys. :data:`RECORD_FIELDS` lists,
per canonical field, the raw keys tried in order; the first one holding a
parsable value wins, otherwise the field default applies.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

from pymachinestatus._constants import (
    DEFAULT_DESIGN,
    DEFAULT_DEVICE_ID,
    DEFAULT_DURATION,
    DEFAULT_SHIFT,
    DEFAULT_STATUS,
)
from pymachinestatus.ingestion.normalize import format_duration, safe_float, safe_int, safe_str, two_decimals
from pymachinestatus.models._base import parse_timestamp
from pymachinestatus.models.record import MachineState, TelemetryRecord


def _count(value: Any) -> int | None:
    parsed = safe_int(value)
    if parsed is None:
        return None
    return max(parsed, 0)


def _efficiency(value: Any) -> Decimal | None:
    if safe_float(value) is None:
        return None
    return two_decimals(value)


def _status(value: Any) -> MachineState | None:
    text = safe_str(value)
    if text is None:
        return None
    return MachineState(text)


@dataclass(frozen=True)
class FieldRule:
    """Where a canonical field comes from and what it defaults to."""

    keys: tuple[str, ...]
    parse: Callable[[Any], Any]
    default: Any = None


RECORD_FIELDS: dict[str, FieldRule] = {
    # device_id / timestamp defaults depend on the call and are filled in below.
    "device_id": FieldRule(("deviceId", "device_id"), safe_str),
    "timestamp": FieldRule(("createdAt", "created_at", "startTime", "start_time"), parse_timestamp),
    "shift": FieldRule(("shift",), safe_str, DEFAULT_SHIFT),
    "design": FieldRule(("design",), safe_str, DEFAULT_DESIGN),
    "count": FieldRule(("count",), _count, 0),
    "efficiency": FieldRule(("efficiency",), _efficiency, Decimal("0.00")),
    "error1": FieldRule(("error1",), _count, 0),
    "error2": FieldRule(("error2",), _count, 0),
    "status": FieldRule(("status",), _status, MachineState(DEFAULT_STATUS)),
    "duration": FieldRule(("duration",), format_duration, DEFAULT_DURATION),
}


def _resolve(payload: Mapping[str, Any], rule: FieldRule) -> Any:
    for key in rule.keys:
        if key not in payload:
            continue
        parsed = rule.parse(payload[key])
        if parsed is not None:
            return parsed
    return None


def normalize_record(
    raw: Any,
    *,
    fallback_device_id: str | None = None,
    now: datetime | None = None,
) -> TelemetryRecord:
    """Map a snapshot item or a live event onto a :class:`TelemetryRecord`.

    Never raises: non-mapping input is treated as an empty payload and
    every missing field takes its default. ``deviceId`` falls back to
    *fallback_device_id* (then ``DEFAULT_DEVICE_ID``), the timestamp to
    *now* (then the current UTC time).
    """
    payload: Mapping[str, Any] = raw if isinstance(raw, Mapping) else {}

    values: dict[str, Any] = {}
    for name, rule in RECORD_FIELDS.items():
        resolved = _resolve(payload, rule)
        values[name] = resolved if resolved is not None else rule.default

    if values["device_id"] is None:
        values["device_id"] = safe_str(fallback_device_id) or DEFAULT_DEVICE_ID
    if values["timestamp"] is None:
        values["timestamp"] = now if now is not None else datetime.now(UTC)

    return TelemetryRecord.model_validate(values)


def normalize_timeline(
    items: Any,
    *,
    device_id: str,
    now: datetime | None = None,
) -> list[TelemetryRecord]:
    """Normalize a snapshot timeline, keeping the delivered order.

    Non-object entries are skipped; a missing timeline yields ``[]``.
    """
    if not isinstance(items, list):
        return []
    return [
        normalize_record(item, fallback_device_id=device_id, now=now) for item in items if isinstance(item, Mapping)
    ]
