"""Data models for collaborator payloads."""

from pymachinestatus.models._base import MachineBaseModel, MachineTimestamp, parse_timestamp
from pymachinestatus.models.filters import ALL, FilterSelection
from pymachinestatus.models.record import MachineState, TelemetryRecord
from pymachinestatus.models.requests import DeviceRequest, MachineStatusSubmission
from pymachinestatus.models.responses import SubmissionAck
from pymachinestatus.models.summary import SnapshotSummary

__all__ = [
    "ALL",
    "DeviceRequest",
    "FilterSelection",
    "MachineBaseModel",
    "MachineState",
    "MachineStatusSubmission",
    "MachineTimestamp",
    "SnapshotSummary",
    "SubmissionAck",
    "TelemetryRecord",
    "parse_timestamp",
]
