from __future__ import annotations

import random
from decimal import Decimal

import pytest
from pydantic import ValidationError

from pymachinestatus._constants import validate_refresh_interval
from pymachinestatus.config import MachineStatusConfig
from pymachinestatus.exceptions import MachineConfigError
from pymachinestatus.models.filters import FilterSelection
from pymachinestatus.models.record import MachineState, TelemetryRecord
from pymachinestatus.models.requests import MachineStatusSubmission
from pymachinestatus.models.summary import SnapshotSummary


def test_summary_from_api_lifts_status_counters() -> None:
    data = {
        "device_id": "PC-001",
        "total_production": 120,
        "avg_efficiency": "2.456",
        "total_errors": 7,
        "error1_count": 4,
        "error2_count": 3,
        "status_summary": {"total_status_changes": 10, "total_on_cycles": 6, "total_off_cycles": 4},
        "designs": ["D1", "", "D2"],
        "complete_status_timeline": [],
    }

    summary = SnapshotSummary.from_api(data)

    assert summary.device_id == "PC-001"
    assert summary.total_production == 120
    assert summary.avg_efficiency == Decimal("2.46")
    assert summary.total_errors == 7
    assert summary.total_status_changes == 10
    assert summary.total_on_cycles == 6
    assert summary.total_off_cycles == 4
    assert summary.designs == ("D1", "D2")
    assert summary.raw == data


def test_summary_from_api_tolerates_missing_fields() -> None:
    summary = SnapshotSummary.from_api({"total_production": -5, "status_summary": "?"}, device_id="PC-002")

    assert summary.device_id == "PC-002"
    assert summary.total_production == 0
    assert summary.avg_efficiency == Decimal("0.00")
    assert summary.total_on_cycles == 0
    assert summary.designs == ()


def test_summary_numeric_device_id_is_stringified() -> None:
    assert SnapshotSummary.from_api({"device_id": 7}).device_id == "7"


def test_record_rejects_empty_device() -> None:
    with pytest.raises(ValidationError):
        TelemetryRecord(device_id="  ", timestamp=1_767_225_600)


def test_machine_state_lookup_is_lenient() -> None:
    assert MachineState("on") is MachineState.ON
    assert MachineState(" Off ") is MachineState.OFF
    assert MachineState("IDLE") is MachineState.OFF


def test_filter_selection_with_changes() -> None:
    selection = FilterSelection(device="PC-001")

    changed = selection.with_changes(status="ON", device="all")

    assert changed.device == "all"
    assert changed.status == "ON"
    assert selection.device == "PC-001"


def test_filter_selection_strips_whitespace() -> None:
    selection = FilterSelection(device=" PC-002 ", shift="   ")

    assert selection.device == "PC-002"
    assert selection.shift == "all"


def test_submission_payload_is_camel_case() -> None:
    submission = MachineStatusSubmission(
        device_id="PC-001",
        count=12,
        efficiency=3.456,
        power_consumption=120.5,
    )

    payload = submission.to_payload()

    assert payload["deviceId"] == "PC-001"
    assert payload["status"] == "ON"
    assert payload["efficiency"] == "3.46"
    assert payload["powerConsumption"] == 120.5
    assert "temperature" not in payload


def test_submission_rejects_negative_count() -> None:
    with pytest.raises(ValidationError):
        MachineStatusSubmission(device_id="PC-001", count=-1)


def test_random_sample_is_reproducible() -> None:
    first = MachineStatusSubmission.random_sample("PC-002", random.Random(7))
    second = MachineStatusSubmission.random_sample("PC-002", random.Random(7))

    assert first == second
    assert first.device_id == "PC-002"
    assert 0 <= first.count < 100


def test_config_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MACHINE_STATUS_ACCESS_TOKEN", "tok")
    monkeypatch.setenv("MACHINE_STATUS_DEFAULT_DEVICE", "PC-007")
    monkeypatch.setenv("MACHINE_STATUS_REFRESH_INTERVAL", "60")
    monkeypatch.setenv("MACHINE_STATUS_AUTO_REFRESH", "yes")
    monkeypatch.setenv("MACHINE_STATUS_LIVE_ENABLED", "off")

    config = MachineStatusConfig.from_env(live_connect_timeout=5.0)

    assert config.access_token == "tok"
    assert config.default_device_id == "PC-007"
    assert config.refresh_interval == 60
    assert config.auto_refresh is True
    assert config.live_enabled is False
    assert config.live_connect_timeout == 5.0
    assert config.socket_url == "http://localhost:8096"


def test_config_live_url_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MACHINE_STATUS_BASE_URL", "https://plant.example.test/api")
    assert MachineStatusConfig.from_env().socket_url == "https://plant.example.test"

    monkeypatch.setenv("MACHINE_STATUS_LIVE_URL", "https://live.example.test")
    assert MachineStatusConfig.from_env().socket_url == "https://live.example.test"


def test_config_from_env_rejects_bad_number(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MACHINE_STATUS_MAX_RECORDS", "lots")

    with pytest.raises(MachineConfigError, match="MACHINE_STATUS_MAX_RECORDS"):
        MachineStatusConfig.from_env()


@pytest.mark.parametrize(
    "kwargs",
    [{"max_records": 0}, {"refresh_interval": 45}, {"live_connect_timeout": 0}, {"default_device_id": " "}],
)
def test_config_validation(kwargs: dict[str, object]) -> None:
    with pytest.raises(MachineConfigError):
        MachineStatusConfig(**kwargs)  # type: ignore[arg-type]


def test_config_url_for() -> None:
    config = MachineStatusConfig(base_url="https://example.test/api/")

    assert config.url_for("/dashboard/machine-data") == "https://example.test/api/dashboard/machine-data"


def test_validate_refresh_interval() -> None:
    assert validate_refresh_interval(300) == 300
    with pytest.raises(ValueError):
        validate_refresh_interval(15)
    with pytest.raises(ValueError):
        validate_refresh_interval(10.5)
