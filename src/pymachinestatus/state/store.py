"""Bounded in-memory timeline.

This is the only component allowed to hold the current known history.
Snapshots replace it wholesale; live events are prepended.
"""

from __future__ import annotations

from collections.abc import Iterable

from pymachinestatus._constants import MAX_RECORDS
from pymachinestatus.models.record import TelemetryRecord


def _most_recent(records: list[TelemetryRecord], limit: int) -> list[TelemetryRecord]:
    """Keep the *limit* newest records by timestamp, in their given order.

    Ties between equal timestamps favour later positions.
    """
    if len(records) <= limit:
        return records
    ranked = sorted(range(len(records)), key=lambda idx: (records[idx].timestamp, idx))
    keep = sorted(ranked[-limit:])
    return [records[idx] for idx in keep]


class TimelineStore:
    """Newest-first buffer of at most ``max_records`` telemetry records.

    Records are never deduplicated: a live event is trusted to be a new
    observation even if an identical one arrived in the last snapshot.
    """

    def __init__(self, *, max_records: int = MAX_RECORDS) -> None:
        if max_records <= 0:
            raise ValueError(f"max_records must be positive, got {max_records}")
        self._max_records = max_records
        self._records: list[TelemetryRecord] = []

    @property
    def max_records(self) -> int:
        return self._max_records

    def __len__(self) -> int:
        return len(self._records)

    def replace_all(self, records: Iterable[TelemetryRecord]) -> None:
        """Set the content to exactly *records* (truncated to the newest N)."""
        self._records = _most_recent(list(records), self._max_records)

    def prepend(self, record: TelemetryRecord) -> None:
        """Insert *record* at the front and evict from the tail beyond N."""
        self._records.insert(0, record)
        del self._records[self._max_records :]

    def snapshot(self) -> tuple[TelemetryRecord, ...]:
        """Read-only view of the current content."""
        return tuple(self._records)
