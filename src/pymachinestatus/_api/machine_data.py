"""Device snapshot endpoint: ``dashboard/machine-data``."""

from __future__ import annotations

from typing import Any

from pymachinestatus._api._common import ensure_success
from pymachinestatus._constants import MACHINE_DATA_ENDPOINT
from pymachinestatus._transport import Transport


async def fetch_machine_data(transport: Transport, device_id: str) -> dict[str, Any]:
    """Fetch the snapshot payload for one concrete device.

    Returns
    -------
    dict
        The ``data`` object: ``complete_status_timeline`` plus the
        aggregate fields. Empty when the collaborator sends none.

    Raises
    ------
    MachineTransportError
        Network failure or non-2xx status.
    MachineApiError
        The payload reports ``success: false``.
    """
    response = await transport.get_json(MACHINE_DATA_ENDPOINT, {"device_id": device_id})
    ensure_success(response, endpoint=MACHINE_DATA_ENDPOINT, default_message="Failed to fetch machine data")
    data = response.get("data")
    return data if isinstance(data, dict) else {}
