from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal

import pytest

from pymachinestatus.ingestion.live import extract_status_update, record_from_live_event
from pymachinestatus.ingestion.normalize import format_duration, non_negative_or_zero, two_decimals
from pymachinestatus.ingestion.records import normalize_record, normalize_timeline
from pymachinestatus.models.record import MachineState


def _now() -> datetime:
    return datetime(2026, 1, 1, 8, 0, tzinfo=UTC)


def test_empty_payload_takes_every_default() -> None:
    record = normalize_record({}, now=_now())

    assert record.device_id == "PC-001"
    assert record.timestamp == _now()
    assert record.shift == "Shift-A"
    assert record.design == "Design123"
    assert record.count == 0
    assert record.efficiency == Decimal("0.00")
    assert record.error1 == 0
    assert record.error2 == 0
    assert record.status == MachineState.OFF
    assert record.duration == "0h 0m"


def test_non_mapping_payload_is_treated_as_empty() -> None:
    record = normalize_record("garbage", fallback_device_id="PC-009", now=_now())

    assert record.device_id == "PC-009"
    assert record.count == 0


def test_live_event_shape_is_mapped() -> None:
    record = normalize_record(
        {
            "deviceId": "PC-002",
            "createdAt": "2026-01-01T09:30:00Z",
            "shift": "Shift-B",
            "design": "D-7",
            "count": 42,
            "efficiency": "3.5",
            "error1": 1,
            "error2": 2,
            "status": "on",
            "duration": "1h 5m",
        },
        fallback_device_id="PC-001",
    )

    assert record.device_id == "PC-002"
    assert record.timestamp == datetime(2026, 1, 1, 9, 30, tzinfo=UTC)
    assert record.count == 42
    assert str(record.efficiency) == "3.50"
    assert record.total_errors == 3
    assert record.status == MachineState.ON
    assert record.duration == "1h 5m"


def test_snapshot_item_shape_uses_envelope_device() -> None:
    records = normalize_timeline(
        [
            {"start_time": 1_767_225_600, "status": "OFF", "count": 3},
            "not-an-object",
            {"start_time": 1_767_225_600_000, "status": "ON", "duration": 3_900},
        ],
        device_id="PC-003",
        now=_now(),
    )

    assert [record.device_id for record in records] == ["PC-003", "PC-003"]
    assert records[0].timestamp == datetime(2026, 1, 1, tzinfo=UTC)
    assert records[1].timestamp == records[0].timestamp
    assert records[1].status == MachineState.ON
    assert records[1].duration == "1h 5m"


def test_missing_timeline_yields_empty_list() -> None:
    assert normalize_timeline(None, device_id="PC-001") == []
    assert normalize_timeline({"not": "a list"}, device_id="PC-001") == []


def test_live_key_wins_over_snapshot_key() -> None:
    record = normalize_record(
        {"createdAt": "2026-01-02T00:00:00Z", "startTime": "2026-01-01T00:00:00Z"},
        now=_now(),
    )

    assert record.timestamp == datetime(2026, 1, 2, tzinfo=UTC)


def test_locale_timestamp_is_parsed() -> None:
    record = normalize_record({"createdAt": "01/02/2026, 03:04:05 PM"}, now=_now())

    assert record.timestamp == datetime(2026, 1, 2, 15, 4, 5, tzinfo=UTC)


def test_unparsable_values_fall_back_to_defaults() -> None:
    record = normalize_record(
        {
            "createdAt": "yesterday-ish",
            "count": "many",
            "efficiency": "--",
            "error1": -4,
            "status": "MAINTENANCE",
            "shift": "",
        },
        now=_now(),
    )

    assert record.timestamp == _now()
    assert record.count == 0
    assert record.efficiency == Decimal("0.00")
    assert record.error1 == 0
    assert record.status == MachineState.OFF
    assert record.shift == "Shift-A"


@pytest.mark.parametrize(
    ("value", "expected"),
    [(None, "0.00"), ("abc", "0.00"), (-1, "0.00"), (2.345, "2.35"), ("7", "7.00")],
)
def test_two_decimals(value: object, expected: str) -> None:
    assert str(two_decimals(value)) == expected


def test_non_negative_or_zero() -> None:
    assert non_negative_or_zero("12") == 12
    assert non_negative_or_zero(-3) == 0
    assert non_negative_or_zero(True) == 0


def test_format_duration() -> None:
    assert format_duration("2h 10m") == "2h 10m"
    assert format_duration(7_260) == "2h 1m"
    assert format_duration(None) is None


def test_extract_status_update_accepts_envelope_and_bare_record() -> None:
    bare = {"deviceId": "PC-001", "count": 1}
    envelope = {"event": "machineStatusUpdate", "data": bare}

    assert extract_status_update(bare) is bare
    assert extract_status_update(envelope) is bare
    assert extract_status_update({"event": "somethingElse", "data": bare}) is None
    assert extract_status_update({"event": "machineStatusUpdate", "data": [1, 2]}) is None


def test_live_event_without_device_uses_fallback() -> None:
    record = record_from_live_event({"count": 5}, fallback_device_id="PC-004", now=_now())

    assert record is not None
    assert record.device_id == "PC-004"
    assert record.timestamp == _now()


@pytest.mark.parametrize("text", ["NaN", "nan"])
def test_nan_text_is_a_real_value(text: str) -> None:
    record = normalize_record(
        {"deviceId": text, "shift": text, "design": text, "count": 1, "efficiency": text},
        fallback_device_id="PC-001",
        now=_now(),
    )

    assert record.device_id == text
    assert record.shift == text
    assert record.design == text
    assert record.count == 1
    assert record.efficiency == Decimal("0.00")


def test_nan_device_from_live_event() -> None:
    record = record_from_live_event({"deviceId": "NaN"}, fallback_device_id="PC-004", now=_now())

    assert record is not None
    assert record.device_id == "NaN"
