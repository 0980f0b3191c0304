"""Snapshot ingestion + parsing.

The HTTP endpoint lives in :mod:`pymachinestatus._api.machine_data`. This
module turns its payload into normalized records plus a summary. Staleness
is decided by the engine, which knows the current selection.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from pymachinestatus._api._common import resolve_device_id
from pymachinestatus._api.machine_data import fetch_machine_data
from pymachinestatus._transport import Transport
from pymachinestatus.config import MachineStatusConfig
from pymachinestatus.ingestion.normalize import safe_str
from pymachinestatus.ingestion.records import normalize_timeline
from pymachinestatus.models.record import TelemetryRecord
from pymachinestatus.models.summary import SnapshotSummary


@dataclass(frozen=True)
class Snapshot:
    """Authoritative history of one device."""

    device_id: str
    records: tuple[TelemetryRecord, ...]
    summary: SnapshotSummary


async def fetch_snapshot(
    config: MachineStatusConfig,
    transport: Transport,
    device_id: str | None,
    *,
    now: datetime | None = None,
) -> Snapshot:
    """Fetch and normalize the snapshot for *device_id*.

    ``"all"`` resolves to ``config.default_device_id``. Records keep the
    order the collaborator delivered them in.
    """
    target = resolve_device_id(config, device_id)
    data = await fetch_machine_data(transport, target)

    envelope_device = safe_str(data.get("device_id")) or target
    records = normalize_timeline(data.get("complete_status_timeline"), device_id=envelope_device, now=now)
    summary = SnapshotSummary.from_api(data, device_id=envelope_device)
    return Snapshot(device_id=target, records=tuple(records), summary=summary)
