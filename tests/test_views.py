from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal

from pymachinestatus.models.filters import ALL, FilterSelection
from pymachinestatus.models.record import MachineState, TelemetryRecord
from pymachinestatus.models.summary import SnapshotSummary
from pymachinestatus.state.views import chart_points, facets, filter_records


def _records() -> list[TelemetryRecord]:
    base = {"timestamp": datetime(2026, 1, 1, 10, 15, 30, tzinfo=UTC)}
    return [
        TelemetryRecord(device_id="PC-001", shift="Shift-A", design="D1", status=MachineState.ON, **base),
        TelemetryRecord(device_id="PC-002", shift="Shift-B", design="D2", status=MachineState.OFF, **base),
        TelemetryRecord(device_id="PC-001", shift="Shift-B", design="D1", status=MachineState.OFF, **base),
        TelemetryRecord(device_id="PC-003", shift="Shift-A", design="D3", status=MachineState.ON, **base),
    ]


def test_all_selection_is_identity() -> None:
    records = _records()

    assert filter_records(records, FilterSelection()) == tuple(records)


def test_filters_combine() -> None:
    records = _records()
    selection = FilterSelection(device="PC-001", status="OFF")

    assert filter_records(records, selection) == (records[2],)


def test_filter_is_case_sensitive() -> None:
    assert filter_records(_records(), FilterSelection(shift="shift-a")) == ()


def test_filter_is_idempotent() -> None:
    selection = FilterSelection(shift="Shift-B")
    once = filter_records(_records(), selection)

    assert filter_records(once, selection) == once


def test_blank_filter_values_mean_all() -> None:
    selection = FilterSelection(device="", shift=None)

    assert selection.device == ALL
    assert selection.shift == ALL
    assert selection.is_unfiltered


def test_facets_in_first_appearance_order() -> None:
    result = facets(_records())

    assert result.devices == ("PC-001", "PC-002", "PC-003")
    assert result.shifts == ("Shift-A", "Shift-B")
    assert result.designs == ("D1", "D2", "D3")
    assert result.statuses == ("ON", "OFF")


def test_facets_prefer_summary_designs() -> None:
    summary = SnapshotSummary.from_api({"designs": ["X1", "X2", "X1"]}, device_id="PC-001")

    assert facets(_records(), summary).designs == ("X1", "X2")
    assert facets(_records(), SnapshotSummary(device_id="PC-001")).designs == ("D1", "D2", "D3")


def test_chart_points_follow_records() -> None:
    record = TelemetryRecord(
        device_id="PC-001",
        timestamp=datetime(2026, 1, 1, 10, 15, 30, tzinfo=UTC),
        count=9,
        efficiency=Decimal("1.25"),
        error1=2,
        error2=1,
    )

    (point,) = chart_points([record])

    assert point.label == "10:15:30"
    assert point.count == 9
    assert point.efficiency == Decimal("1.25")
    assert point.errors == 3
