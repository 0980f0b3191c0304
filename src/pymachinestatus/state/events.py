"""Outcome and state types shared by the engine and its adapters."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from pymachinestatus.exceptions import MachineStatusError
from pymachinestatus.models.record import TelemetryRecord
from pymachinestatus.models.summary import SnapshotSummary


class FetchStatus(StrEnum):
    APPLIED = "applied"
    STALE = "stale"
    FAILED = "failed"


class ChannelState(StrEnum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    JOINED = "joined"


@dataclass(frozen=True)
class FetchResult:
    """Result of one snapshot refresh.

    ``STALE`` results were superseded (selection moved on, or a newer
    request already landed) and were dropped without touching state.
    ``FAILED`` results carry the error; state is left as it was.
    """

    status: FetchStatus
    device_id: str
    records: tuple[TelemetryRecord, ...] = ()
    summary: SnapshotSummary | None = None
    error: MachineStatusError | None = None

    @property
    def applied(self) -> bool:
        return self.status == FetchStatus.APPLIED
