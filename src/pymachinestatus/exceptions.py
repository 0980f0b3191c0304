"""Custom exception hierarchy for pymachinestatus."""

from __future__ import annotations


class MachineStatusError(Exception):
    """Base exception for all pymachinestatus errors."""


class MachineConfigError(MachineStatusError):
    """Invalid or missing configuration."""


class MachineTransportError(MachineStatusError):
    """HTTP-level failure (network, timeout, non-2xx, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class MachineApiError(MachineStatusError):
    """Collaborator was reachable but reported failure in its payload."""

    def __init__(
        self,
        message: str,
        *,
        endpoint: str = "",
    ) -> None:
        self.endpoint = endpoint
        super().__init__(message)


class MachineChannelError(MachineStatusError):
    """Live channel connection was refused or lost.

    Recovery is left to the Socket.IO reconnect loop; the room join is
    re-issued once the connection comes back.
    """

    def __init__(self, message: str, *, reason: str = "") -> None:
        self.reason = reason
        super().__init__(message)
