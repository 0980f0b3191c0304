from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from pymachinestatus.ingestion.records import normalize_record
from pymachinestatus.models.record import TelemetryRecord
from pymachinestatus.state.store import TimelineStore


def _record(minute: int, *, count: int = 0, device: str = "PC-001") -> TelemetryRecord:
    return TelemetryRecord(
        device_id=device,
        timestamp=datetime(2026, 1, 1, tzinfo=UTC) + timedelta(minutes=minute),
        count=count,
    )


def test_replace_all_keeps_given_order() -> None:
    store = TimelineStore()
    records = [_record(3), _record(1), _record(2)]

    store.replace_all(records)

    assert store.snapshot() == tuple(records)


def test_replace_all_truncates_to_newest_records() -> None:
    store = TimelineStore(max_records=3)
    records = [_record(minute) for minute in (5, 1, 4, 2, 3)]

    store.replace_all(records)

    assert [r.timestamp.minute for r in store.snapshot()] == [5, 4, 3]


def test_replace_all_discards_previous_content() -> None:
    store = TimelineStore()
    store.prepend(_record(0, device="PC-009"))

    store.replace_all([_record(1)])

    assert len(store) == 1
    assert store.snapshot()[0].device_id == "PC-001"


def test_prepend_puts_newest_first_and_evicts_tail() -> None:
    store = TimelineStore(max_records=2)
    first, second, third = _record(1), _record(2), _record(3)

    store.prepend(first)
    store.prepend(second)
    store.prepend(third)

    assert store.snapshot() == (third, second)


def test_prepend_does_not_deduplicate() -> None:
    store = TimelineStore()
    record = _record(1)

    store.replace_all([record])
    store.prepend(record)

    assert store.snapshot() == (record, record)


def test_store_never_exceeds_capacity() -> None:
    store = TimelineStore()
    store.replace_all(_record(minute) for minute in range(150))
    assert len(store) == 100

    for minute in range(200, 260):
        store.prepend(_record(minute))
        assert len(store) <= 100


def test_full_store_live_event_lands_at_head() -> None:
    store = TimelineStore()
    store.replace_all(_record(minute) for minute in range(100, 0, -1))
    oldest = store.snapshot()[-1]

    event = normalize_record(
        {"deviceId": "PC-001", "status": "ON", "count": 42, "efficiency": "3.50"},
        now=datetime(2026, 1, 2, tzinfo=UTC),
    )
    store.prepend(event)

    snapshot = store.snapshot()
    assert len(snapshot) == 100
    assert snapshot[0].count == 42
    assert str(snapshot[0].efficiency) == "3.50"
    assert oldest not in snapshot


def test_invalid_capacity_rejected() -> None:
    with pytest.raises(ValueError):
        TimelineStore(max_records=0)
