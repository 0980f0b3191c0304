"""Event submission endpoint: ``machine-status/save-machine-status``."""

from __future__ import annotations

from pymachinestatus._api._common import ensure_success
from pymachinestatus._constants import SAVE_MACHINE_STATUS_ENDPOINT
from pymachinestatus._transport import Transport
from pymachinestatus.models.requests import MachineStatusSubmission
from pymachinestatus.models.responses import SubmissionAck


async def save_machine_status(transport: Transport, submission: MachineStatusSubmission) -> SubmissionAck:
    """Post one observation and return the acknowledgement.

    Raises
    ------
    MachineTransportError
        Network failure or non-2xx status.
    MachineApiError
        The payload reports ``success: false``.
    """
    response = await transport.post_json(SAVE_MACHINE_STATUS_ENDPOINT, submission.to_payload())
    ensure_success(
        response,
        endpoint=SAVE_MACHINE_STATUS_ENDPOINT,
        default_message="Failed to save machine status",
    )
    message = response.get("message")
    return SubmissionAck(
        device_id=submission.device_id,
        success=True,
        message=message if isinstance(message, str) else "",
        raw=response,
    )
