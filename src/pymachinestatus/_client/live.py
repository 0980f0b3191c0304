"""Internal live-channel coordination for MachineStatusClient.

Owns:
- starting/stopping the Socket.IO runtime
- the ``DISCONNECTED → CONNECTING → JOINED`` channel state
- translating live events into records handed to the engine
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from pymachinestatus._socketio import LiveEvent, LiveRuntime
from pymachinestatus.config import MachineStatusConfig
from pymachinestatus.exceptions import MachineChannelError
from pymachinestatus.ingestion.live import record_from_live_event
from pymachinestatus.models.record import TelemetryRecord
from pymachinestatus.state.events import ChannelState


class LiveCoordinator:
    def __init__(
        self,
        *,
        config: MachineStatusConfig,
        ingest: Callable[[TelemetryRecord], None],
        clock: Callable[[], datetime],
        logger: logging.Logger,
    ) -> None:
        self._config = config
        self._ingest = ingest
        self._clock = clock
        self._logger = logger
        self._runtime: LiveRuntime | None = None
        self._state = ChannelState.DISCONNECTED
        self._last_error: MachineChannelError | None = None
        self._join_count = 0

    @property
    def runtime(self) -> LiveRuntime | None:
        return self._runtime

    @property
    def state(self) -> ChannelState:
        return self._state

    @property
    def last_error(self) -> MachineChannelError | None:
        """Most recent unexpected disconnect, if any."""
        return self._last_error

    @property
    def join_count(self) -> int:
        """How many times the room has been joined (initial join + rejoins)."""
        return self._join_count

    def build_runtime(self) -> LiveRuntime:
        return LiveRuntime(
            config=self._config,
            on_event=self.handle_event,
            on_state=self.handle_state,
            logger=self._logger,
        )

    async def start(self) -> None:
        if not self._config.live_enabled:
            return
        await self.stop()

        runtime = self.build_runtime()
        self.handle_state(ChannelState.CONNECTING, "start")
        try:
            await runtime.start()
        except Exception as exc:
            self._logger.warning("Live channel start failed: %s", exc)
            self._logger.debug("Live channel start failure details", exc_info=True)
            self._state = ChannelState.DISCONNECTED
            self._last_error = MachineChannelError(f"Live channel start failed: {exc}", reason="start")
            return
        self._runtime = runtime

    async def stop(self) -> None:
        runtime = self._runtime
        self._runtime = None
        if runtime is not None:
            try:
                await runtime.stop()
            except Exception:
                self._logger.debug("Live runtime stop failed", exc_info=True)
        if self._state != ChannelState.DISCONNECTED:
            self._logger.debug("Live channel %s -> %s (stopped)", self._state, ChannelState.DISCONNECTED)
        self._state = ChannelState.DISCONNECTED

    def handle_state(self, state: ChannelState, reason: str) -> None:
        previous = self._state
        if state == previous:
            return
        if state == ChannelState.DISCONNECTED:
            self._last_error = MachineChannelError(f"Live channel disconnected: {reason}", reason=reason)
            self._logger.warning("Live channel lost (%s); waiting for reconnect", reason)
        elif state == ChannelState.JOINED:
            self._join_count += 1
        self._logger.debug("Live channel %s -> %s (%s)", previous, state, reason)
        self._state = state

    def handle_event(self, event: LiveEvent) -> None:
        if self._state != ChannelState.JOINED:
            self._logger.debug("Dropping %s received while %s", event.name, self._state)
            return
        record = record_from_live_event(
            event.payload,
            fallback_device_id=self._config.default_device_id,
            now=self._clock(),
        )
        if record is None:
            return
        self._ingest(record)
