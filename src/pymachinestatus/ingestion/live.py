"""Live event ingestion helpers.

This module translates Socket.IO event payloads into normalized records.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pymachinestatus._constants import STATUS_UPDATE_EVENT
from pymachinestatus.ingestion.records import normalize_record
from pymachinestatus.models.record import TelemetryRecord


def extract_status_update(payload: dict[str, Any]) -> dict[str, Any] | None:
    """Return the record object carried by a live payload.

    Accepts the ``{"event": "machineStatusUpdate", "data": {...}}``
    envelope or a bare record object. Other events yield ``None``.
    """
    event = payload.get("event")
    if event is None:
        return payload
    if event != STATUS_UPDATE_EVENT:
        return None
    data = payload.get("data")
    return data if isinstance(data, dict) else None


def record_from_live_event(
    payload: dict[str, Any],
    *,
    fallback_device_id: str,
    now: datetime | None = None,
) -> TelemetryRecord | None:
    """Build a record from a live payload, or ``None`` if it carries none."""
    data = extract_status_update(payload)
    if data is None:
        return None
    return normalize_record(data, fallback_device_id=fallback_device_id, now=now)
