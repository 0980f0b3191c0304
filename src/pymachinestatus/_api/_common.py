"""Shared helpers for REST endpoint modules.

It is internal to pymachinestatus and may change at any time.
"""

from __future__ import annotations

from typing import Any

from pymachinestatus.config import MachineStatusConfig
from pymachinestatus.exceptions import MachineApiError
from pymachinestatus.models.filters import ALL


def resolve_device_id(config: MachineStatusConfig, device_id: str | None) -> str:
    """Map the "all devices" selection onto the configured default device.

    The collaborator addresses one device per request.
    """
    if device_id is None:
        return config.default_device_id
    value = device_id.strip()
    if not value or value == ALL:
        return config.default_device_id
    return value


def ensure_success(response: dict[str, Any], *, endpoint: str, default_message: str) -> None:
    """Raise :class:`MachineApiError` when the payload reports ``success: false``.

    Payloads without a ``success`` key are treated as successful.
    """
    if response.get("success", True) is False:
        message = response.get("message")
        text = message if isinstance(message, str) and message.strip() else default_message
        raise MachineApiError(f"{endpoint} failed: {text}", endpoint=endpoint)
