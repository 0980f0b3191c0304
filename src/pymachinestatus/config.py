"""Client configuration for pymachinestatus."""

from __future__ import annotations

import dataclasses
import os
import re
from typing import Any

from pymachinestatus._constants import (
    BASE_URL,
    DEFAULT_DEVICE_ID,
    MAX_RECORDS,
    REFRESH_INTERVALS,
)
from pymachinestatus.exceptions import MachineConfigError

_API_SUFFIX_RE = re.compile(r"/api/?$")


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class MachineStatusConfig:
    """Client configuration.

    Parameters
    ----------
    access_token : str
        Bearer credential supplied by the surrounding application. Sent
        with every HTTP request and in the live channel handshake. Never
        refreshed by the client.
    base_url : str
        REST collaborator base URL (with trailing ``/api/``).
    default_device_id : str
        Device addressed when the selection is "all devices", and the
        fallback identity for live events that omit ``deviceId``.
    max_records : int
        Timeline capacity.
    request_timeout : float
        Total HTTP request timeout in seconds.
    auto_refresh : bool
        Arm the refresh scheduler when the client starts.
    refresh_interval : int
        Auto-refresh interval in seconds; one of 10, 30, 60, 300.
    live_enabled : bool
        Start the Socket.IO live channel when the client starts.
    live_url : str
        Socket.IO server URL. Empty means ``base_url`` without its
        ``/api`` suffix.
    live_path : str
        Socket.IO endpoint path on the server.
    live_connect_timeout : float
        Seconds to wait for the handshake on each connection attempt.
    live_reconnect_max_delay : int
        Upper bound of the reconnect backoff in seconds.
    api_trace_enabled : bool
        Log redacted request/response bodies at DEBUG, and let the
        Socket.IO client log through the library logger.
    """

    access_token: str = ""
    base_url: str = BASE_URL
    default_device_id: str = DEFAULT_DEVICE_ID
    max_records: int = MAX_RECORDS
    request_timeout: float = 15.0
    auto_refresh: bool = False
    refresh_interval: int = 30
    live_enabled: bool = True
    live_url: str = ""
    live_path: str = "socket.io"
    live_connect_timeout: float = 10.0
    live_reconnect_max_delay: int = 30
    api_trace_enabled: bool = False

    def __post_init__(self) -> None:
        if self.max_records <= 0:
            raise MachineConfigError(f"max_records must be positive, got {self.max_records}")
        if self.refresh_interval not in REFRESH_INTERVALS:
            raise MachineConfigError(
                f"refresh_interval must be one of {REFRESH_INTERVALS} seconds, got {self.refresh_interval}"
            )
        if not self.default_device_id.strip():
            raise MachineConfigError("default_device_id must be non-empty")
        if self.live_connect_timeout <= 0:
            raise MachineConfigError(f"live_connect_timeout must be positive, got {self.live_connect_timeout}")
        if self.live_reconnect_max_delay < 1:
            raise MachineConfigError(
                f"live_reconnect_max_delay must be at least 1 second, got {self.live_reconnect_max_delay}"
            )

    @property
    def socket_url(self) -> str:
        """URL the live channel connects to."""
        if self.live_url.strip():
            return self.live_url.strip()
        return _API_SUFFIX_RE.sub("", self.base_url.strip())

    def url_for(self, endpoint: str) -> str:
        """Join *endpoint* onto ``base_url``."""
        return f"{self.base_url.rstrip('/')}/{endpoint.lstrip('/')}"

    @classmethod
    def from_env(cls, **overrides: Any) -> MachineStatusConfig:
        """Create configuration from environment variables.

        Reads ``MACHINE_STATUS_*`` variables. Explicit keyword arguments
        override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        MachineStatusConfig
            Populated configuration.

        Raises
        ------
        MachineConfigError
            If a numeric variable cannot be parsed or a value is invalid.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "MACHINE_STATUS_ACCESS_TOKEN": "access_token",
            "MACHINE_STATUS_BASE_URL": "base_url",
            "MACHINE_STATUS_DEFAULT_DEVICE": "default_device_id",
            "MACHINE_STATUS_LIVE_URL": "live_url",
            "MACHINE_STATUS_LIVE_PATH": "live_path",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        _ENV_NUMERIC_MAP: dict[str, tuple[str, type]] = {
            "MACHINE_STATUS_MAX_RECORDS": ("max_records", int),
            "MACHINE_STATUS_REQUEST_TIMEOUT": ("request_timeout", float),
            "MACHINE_STATUS_REFRESH_INTERVAL": ("refresh_interval", int),
            "MACHINE_STATUS_LIVE_CONNECT_TIMEOUT": ("live_connect_timeout", float),
            "MACHINE_STATUS_LIVE_RECONNECT_MAX_DELAY": ("live_reconnect_max_delay", int),
        }
        for env_key, (field_name, caster) in _ENV_NUMERIC_MAP.items():
            val = env.get(env_key)
            if val is None or field_name in overrides:
                continue
            try:
                config_kwargs[field_name] = caster(val)
            except ValueError as exc:
                raise MachineConfigError(f"{env_key} is not a valid {caster.__name__}: {val!r}") from exc

        _ENV_BOOL_MAP = {
            "MACHINE_STATUS_AUTO_REFRESH": ("auto_refresh", False),
            "MACHINE_STATUS_LIVE_ENABLED": ("live_enabled", True),
            "MACHINE_STATUS_API_TRACE_ENABLED": ("api_trace_enabled", False),
        }
        for env_key, (field_name, default) in _ENV_BOOL_MAP.items():
            if field_name not in overrides:
                config_kwargs[field_name] = _env_bool(env.get(env_key), default)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
