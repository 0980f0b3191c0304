"""pymachinestatus - Async Python client for machine status telemetry dashboards."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pymachinestatus")
except PackageNotFoundError:
    __version__ = "0+local"
from pymachinestatus.client import MachineStatusClient
from pymachinestatus.config import MachineStatusConfig
from pymachinestatus.exceptions import (
    MachineApiError,
    MachineChannelError,
    MachineConfigError,
    MachineStatusError,
    MachineTransportError,
)
from pymachinestatus.models import (
    ALL,
    FilterSelection,
    MachineState,
    MachineStatusSubmission,
    SnapshotSummary,
    SubmissionAck,
    TelemetryRecord,
)
from pymachinestatus.state.events import ChannelState, FetchResult, FetchStatus
from pymachinestatus.state.views import ChartPoint, Facets

__all__ = [
    "__version__",
    "ALL",
    "ChannelState",
    "ChartPoint",
    "Facets",
    "FetchResult",
    "FetchStatus",
    "FilterSelection",
    "MachineApiError",
    "MachineChannelError",
    "MachineConfigError",
    "MachineState",
    "MachineStatusClient",
    "MachineStatusConfig",
    "MachineStatusError",
    "MachineStatusSubmission",
    "MachineTransportError",
    "SnapshotSummary",
    "SubmissionAck",
    "TelemetryRecord",
]
