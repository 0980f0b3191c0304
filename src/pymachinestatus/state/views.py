"""Read-side derivations over a timeline snapshot.

Everything here is a pure function of its arguments; nothing holds state
between calls.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from pymachinestatus.models.filters import ALL, FilterSelection
from pymachinestatus.models.record import TelemetryRecord
from pymachinestatus.models.summary import SnapshotSummary


@dataclass(frozen=True)
class Facets:
    """Distinct filter values, in order of first appearance."""

    devices: tuple[str, ...]
    shifts: tuple[str, ...]
    designs: tuple[str, ...]
    statuses: tuple[str, ...]


@dataclass(frozen=True)
class ChartPoint:
    """One plotted sample derived from a record."""

    timestamp: datetime
    label: str
    count: int
    efficiency: Decimal
    errors: int


def _distinct(values: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(values))


def _matches(record: TelemetryRecord, selection: FilterSelection) -> bool:
    if selection.device != ALL and record.device_id != selection.device:
        return False
    if selection.shift != ALL and record.shift != selection.shift:
        return False
    if selection.design != ALL and record.design != selection.design:
        return False
    return selection.status == ALL or record.status.value == selection.status


def filter_records(
    records: Sequence[TelemetryRecord],
    selection: FilterSelection,
) -> tuple[TelemetryRecord, ...]:
    """Records passing every non-``ALL`` field of *selection*."""
    if selection.is_unfiltered:
        return tuple(records)
    return tuple(record for record in records if _matches(record, selection))


def facets(
    records: Sequence[TelemetryRecord],
    summary: SnapshotSummary | None = None,
) -> Facets:
    """Distinct devices, shifts, designs and statuses visible right now.

    Designs come from the summary when it carries a list, otherwise from
    the records.
    """
    if summary is not None and summary.designs:
        designs = summary.designs
    else:
        designs = _distinct(record.design for record in records)
    return Facets(
        devices=_distinct(record.device_id for record in records),
        shifts=_distinct(record.shift for record in records),
        designs=designs,
        statuses=_distinct(record.status.value for record in records),
    )


def chart_points(records: Sequence[TelemetryRecord]) -> list[ChartPoint]:
    return [
        ChartPoint(
            timestamp=record.timestamp,
            label=record.timestamp.strftime("%H:%M:%S"),
            count=record.count,
            efficiency=record.efficiency,
            errors=record.total_errors,
        )
        for record in records
    ]
