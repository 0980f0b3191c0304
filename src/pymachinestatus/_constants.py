"""Internal constants shared across the library."""

BASE_URL = "http://localhost:8096/api/"
USER_AGENT = "pymachinestatus"

#: Device used when a request addresses the "all devices" selection.
DEFAULT_DEVICE_ID = "PC-001"

#: Upper bound on the number of records kept in the timeline.
MAX_RECORDS = 100

# ------------------------------------------------------------------
# REST endpoints (relative to ``base_url``)
# ------------------------------------------------------------------

MACHINE_DATA_ENDPOINT = "dashboard/machine-data"
SAVE_MACHINE_STATUS_ENDPOINT = "machine-status/save-machine-status"

# ------------------------------------------------------------------
# Live channel
# ------------------------------------------------------------------

ROOM = "machineStatusDashboard"
JOIN_EVENT = "joinMachineStatusDashboard"
STATUS_UPDATE_EVENT = "machineStatusUpdate"

# ------------------------------------------------------------------
# Record defaults applied when a raw payload omits a field
# ------------------------------------------------------------------

DEFAULT_SHIFT = "Shift-A"
DEFAULT_DESIGN = "Design123"
DEFAULT_STATUS = "OFF"
DEFAULT_DURATION = "0h 0m"

# ------------------------------------------------------------------
# Auto-refresh intervals (seconds)
# ------------------------------------------------------------------

REFRESH_INTERVALS: tuple[int, ...] = (10, 30, 60, 300)


def validate_refresh_interval(seconds: float) -> int:
    """Return *seconds* as an int if it is a recognized refresh interval.

    Raises :class:`ValueError` for anything else.
    """
    value = int(seconds)
    if value != seconds or value not in REFRESH_INTERVALS:
        raise ValueError(f"refresh interval must be one of {REFRESH_INTERVALS} seconds, got {seconds}")
    return value
