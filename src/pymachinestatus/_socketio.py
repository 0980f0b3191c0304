"""Internal Socket.IO runtime for the live telemetry channel."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import socketio
from socketio.exceptions import ConnectionError as SocketConnectionError

from pymachinestatus._constants import JOIN_EVENT, ROOM, STATUS_UPDATE_EVENT
from pymachinestatus.config import MachineStatusConfig
from pymachinestatus.state.events import ChannelState


@dataclass(frozen=True)
class LiveEvent:
    """Inbound event received while in the dashboard room."""

    name: str
    payload: dict[str, Any]


def build_connect_headers(config: MachineStatusConfig) -> dict[str, str]:
    """Headers sent with the Socket.IO handshake."""
    if not config.access_token:
        return {}
    return {"Authorization": f"Bearer {config.access_token}"}


class LiveRuntime:
    """Socket.IO runtime that reports events and channel state on the loop.

    Once a session is up, the Socket.IO client owns reconnection. The room
    join is emitted from the ``connect`` handler and therefore repeated
    after every reconnect, since the server drops room membership with
    the old session. Initial connection attempts are retried here with the
    same capped backoff.
    """

    def __init__(
        self,
        *,
        config: MachineStatusConfig,
        on_event: Callable[[LiveEvent], None],
        on_state: Callable[[ChannelState, str], None],
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        logger: logging.Logger | None = None,
    ) -> None:
        self._config = config
        self._on_event = on_event
        self._on_state = on_state
        self._sleep = sleep
        self._logger = logger or logging.getLogger(__name__)
        self._client: socketio.AsyncClient | None = None
        self._connect_task: asyncio.Task[None] | None = None
        self._running = False

    @property
    def is_running(self) -> bool:
        """Whether the runtime is started (connected or still trying)."""
        return self._running

    def _build_client(self) -> socketio.AsyncClient:
        config = self._config
        client = socketio.AsyncClient(
            reconnection=True,
            reconnection_delay=1,
            reconnection_delay_max=config.live_reconnect_max_delay,
            logger=self._logger if config.api_trace_enabled else False,
        )
        client.on("connect", self._handle_connect)
        client.on("connect_error", self._handle_connect_error)
        client.on("disconnect", self._handle_disconnect)
        client.on(STATUS_UPDATE_EVENT, self._handle_status_update)
        return client

    async def _handle_connect(self) -> None:
        client = self._client
        if client is None or not self._running:
            return
        self._logger.debug("Live channel connected; joining room=%s", ROOM)
        await client.emit(JOIN_EVENT)
        self._on_state(ChannelState.JOINED, "joined")

    async def _handle_connect_error(self, data: Any = None) -> None:
        if self._running:
            self._logger.debug("Live channel connect error: %s", data)
            self._on_state(ChannelState.DISCONNECTED, f"connect error: {data}")

    async def _handle_disconnect(self, reason: Any = None) -> None:
        if self._running:
            self._logger.debug("Live channel disconnected: %s", reason)
            self._on_state(ChannelState.DISCONNECTED, str(reason or "transport closed"))

    async def _handle_status_update(self, data: Any = None) -> None:
        if not self._running:
            return
        if not isinstance(data, dict):
            self._logger.debug("Ignoring %s payload of type %s", STATUS_UPDATE_EVENT, type(data).__name__)
            return
        self._on_event(LiveEvent(name=STATUS_UPDATE_EVENT, payload=data))

    async def _connect(self, client: socketio.AsyncClient) -> None:
        config = self._config
        delay = 1.0
        while self._running:
            try:
                await client.connect(
                    config.socket_url,
                    headers=build_connect_headers(config),
                    socketio_path=config.live_path,
                    wait_timeout=config.live_connect_timeout,
                )
                return
            except SocketConnectionError as exc:
                self._logger.debug("Live channel connect attempt failed: %s", exc)
                self._on_state(ChannelState.DISCONNECTED, f"connect failed: {exc}")
            await self._sleep(delay)
            delay = min(delay * 2, config.live_reconnect_max_delay)
            if self._running:
                self._on_state(ChannelState.CONNECTING, "connect attempt")

    async def start(self) -> None:
        """Start connecting in the background; returns immediately."""
        await self.stop()
        config = self._config
        self._logger.debug("Live runtime start requested url=%s path=%s", config.socket_url, config.live_path)

        client = self._build_client()
        self._client = client
        self._running = True
        self._connect_task = asyncio.get_running_loop().create_task(
            self._connect(client),
            name="machine-status-live-connect",
        )

    async def stop(self) -> None:
        """Abort pending connection attempts and close the session."""
        client = self._client
        task = self._connect_task
        self._client = None
        self._connect_task = None
        self._running = False

        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        if client is not None:
            self._logger.debug("Live channel disconnect requested")
            await client.shutdown()
