"""High-level async client for the machine status dashboard backend."""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import Any

import aiohttp

from pymachinestatus._api._common import resolve_device_id
from pymachinestatus._api.machine_status import save_machine_status
from pymachinestatus._client.live import LiveCoordinator
from pymachinestatus._constants import validate_refresh_interval
from pymachinestatus._transport import HttpTransport, Transport
from pymachinestatus.config import MachineStatusConfig
from pymachinestatus.exceptions import (
    MachineApiError,
    MachineChannelError,
    MachineStatusError,
    MachineTransportError,
)
from pymachinestatus.ingestion.snapshot import fetch_snapshot
from pymachinestatus.models.filters import ALL, FilterSelection
from pymachinestatus.models.record import TelemetryRecord
from pymachinestatus.models.requests import MachineStatusSubmission
from pymachinestatus.models.responses import SubmissionAck
from pymachinestatus.models.summary import SnapshotSummary
from pymachinestatus.scheduler import RefreshScheduler
from pymachinestatus.state.events import ChannelState, FetchResult, FetchStatus
from pymachinestatus.state.store import TimelineStore
from pymachinestatus.state.summary import SummaryAggregator
from pymachinestatus.state.views import ChartPoint, Facets, chart_points, facets, filter_records

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class MachineStatusClient:
    """Async client that reconciles snapshots and live events into one timeline.

    Usage::

        async with MachineStatusClient(config) as client:
            await client.refresh()
            for record in client.view():
                ...

    Snapshot fetches replace the timeline wholesale; live events are
    prepended. A snapshot that completes after the device selection has
    moved on (or after a newer snapshot landed) is discarded.
    """

    def __init__(
        self,
        config: MachineStatusConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        on_record: Callable[[TelemetryRecord], None] | None = None,
        on_warning: Callable[[MachineStatusError], None] | None = None,
        clock: Callable[[], datetime] = _utcnow,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport: Transport | None = None
        self._live: LiveCoordinator | None = None
        self._on_record = on_record
        self._on_warning = on_warning
        self._clock = clock

        self._store = TimelineStore(max_records=config.max_records)
        self._summary = SummaryAggregator()
        self._selection = FilterSelection()
        self._last_updated: datetime | None = None
        self._request_seq = 0
        self._applied_seq = 0
        self._in_flight = 0
        self._scheduler = RefreshScheduler(
            self._scheduled_refresh,
            interval=config.refresh_interval,
            sleep=sleep,
            logger=_logger,
        )

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> MachineStatusClient:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = HttpTransport(self._config, self._http_session)
        self._live = LiveCoordinator(
            config=self._config,
            clock=self._clock,
            ingest=self._ingest_live_record,
            logger=_logger,
        )
        await self._live.start()
        if self._config.auto_refresh:
            self._scheduler.configure(enabled=True)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self._scheduler.aclose()
        if self._live is not None:
            await self._live.stop()
            self._live = None
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise MachineStatusError("Client not initialized. Use 'async with MachineStatusClient(...) as client:'")
        return self._transport

    def _touch(self) -> None:
        self._last_updated = self._clock()

    def _warn(self, error: MachineStatusError) -> None:
        if self._on_warning is None:
            return
        try:
            self._on_warning(error)
        except Exception:
            _logger.debug("on_warning callback failed", exc_info=True)

    def _is_superseded(self, seq: int, selected_device: str) -> bool:
        return self._selection.device != selected_device or seq < self._applied_seq

    def _ingest_live_record(self, record: TelemetryRecord) -> None:
        """Prepend a live record (called on the loop via the coordinator)."""
        self._store.prepend(record)
        self._touch()
        _logger.debug(
            "Live record device=%s status=%s count=%s (timeline=%d)",
            record.device_id,
            record.status,
            record.count,
            len(self._store),
        )
        if self._on_record is not None:
            try:
                self._on_record(record)
            except Exception:
                _logger.debug("on_record callback failed", exc_info=True)

    async def _scheduled_refresh(self) -> None:
        await self.refresh()

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def config(self) -> MachineStatusConfig:
        return self._config

    @property
    def store(self) -> TimelineStore:
        return self._store

    @property
    def selection(self) -> FilterSelection:
        return self._selection

    @property
    def summary(self) -> SnapshotSummary | None:
        """Summary of the last applied snapshot; not updated by live events."""
        return self._summary.current

    @property
    def last_updated(self) -> datetime | None:
        """When the timeline last changed (snapshot applied or live record)."""
        return self._last_updated

    @property
    def is_loading(self) -> bool:
        """Whether at least one snapshot fetch is in flight."""
        return self._in_flight > 0

    @property
    def channel_state(self) -> ChannelState:
        if self._live is None:
            return ChannelState.DISCONNECTED
        return self._live.state

    @property
    def channel_error(self) -> MachineChannelError | None:
        """Most recent live-channel loss, if any."""
        if self._live is None:
            return None
        return self._live.last_error

    @property
    def auto_refresh(self) -> bool:
        return self._scheduler.enabled

    @property
    def refresh_interval(self) -> float:
        return self._scheduler.interval

    def records(self) -> tuple[TelemetryRecord, ...]:
        """Full timeline, newest first."""
        return self._store.snapshot()

    def view(self) -> tuple[TelemetryRecord, ...]:
        """Timeline filtered by the current selection."""
        return filter_records(self._store.snapshot(), self._selection)

    def facets(self) -> Facets:
        return facets(self._store.snapshot(), self._summary.current)

    def chart_points(self) -> list[ChartPoint]:
        """Chart series over the filtered view."""
        return chart_points(self.view())

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def set_filters(
        self,
        *,
        shift: str | None = None,
        design: str | None = None,
        status: str | None = None,
    ) -> FilterSelection:
        """Update non-device filters. ``None`` leaves a field unchanged; pass ``"all"`` to clear it."""
        changes = {
            name: value
            for name, value in (("shift", shift), ("design", design), ("status", status))
            if value is not None
        }
        if changes:
            self._selection = self._selection.with_changes(**changes)
        return self._selection

    async def select_device(self, device_id: str | None) -> FetchResult:
        """Change the device selection and fetch its snapshot.

        ``None`` or ``"all"`` selects every device; the fetch then targets
        ``config.default_device_id``.
        """
        self._selection = self._selection.with_changes(device=device_id or ALL)
        _logger.debug("Device selection -> %s", self._selection.device)
        return await self.refresh()

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    async def refresh(self, device_id: str | None = None) -> FetchResult:
        """Fetch the snapshot for *device_id* (default: the selected device).

        Returns
        -------
        FetchResult
            ``APPLIED`` when the timeline and summary were replaced,
            ``STALE`` when a newer request or a selection change
            superseded this one, ``FAILED`` when the fetch failed (state
            is left untouched and ``on_warning`` is invoked).
        """
        transport = self._require_transport()
        selected_device = self._selection.device
        target = resolve_device_id(self._config, device_id if device_id is not None else selected_device)
        self._request_seq += 1
        seq = self._request_seq

        self._in_flight += 1
        try:
            snapshot = await fetch_snapshot(self._config, transport, target, now=self._clock())
        except (MachineTransportError, MachineApiError) as exc:
            if self._is_superseded(seq, selected_device):
                _logger.debug("Discarding failed snapshot for %s (superseded)", target)
                return FetchResult(status=FetchStatus.STALE, device_id=target)
            _logger.warning("Snapshot fetch for %s failed: %s", target, exc)
            self._warn(exc)
            return FetchResult(status=FetchStatus.FAILED, device_id=target, error=exc)
        finally:
            self._in_flight -= 1

        if self._is_superseded(seq, selected_device):
            _logger.debug(
                "Discarding stale snapshot for %s (selection=%s, seq=%d, applied=%d)",
                target,
                self._selection.device,
                seq,
                self._applied_seq,
            )
            return FetchResult(status=FetchStatus.STALE, device_id=target)

        self._store.replace_all(snapshot.records)
        self._summary.replace(snapshot.summary)
        self._applied_seq = seq
        self._touch()
        _logger.debug("Applied snapshot for %s: %d records", target, len(self._store))
        return FetchResult(
            status=FetchStatus.APPLIED,
            device_id=target,
            records=self._store.snapshot(),
            summary=snapshot.summary,
        )

    def set_auto_refresh(self, enabled: bool, interval: int | None = None) -> None:
        """Enable, disable or re-time periodic snapshot refreshes.

        The previous timer is always cancelled first. *interval* must be
        one of 10, 30, 60 or 300 seconds.
        """
        if interval is not None:
            interval = validate_refresh_interval(interval)
        self._scheduler.configure(enabled=enabled, interval=interval)

    # ------------------------------------------------------------------
    # Submissions
    # ------------------------------------------------------------------

    async def submit_status(self, submission: MachineStatusSubmission) -> SubmissionAck:
        """Post one observation to the collaborator.

        Failures are reported through the returned acknowledgement and the
        warning callback rather than raised. The timeline is not touched;
        if the collaborator broadcasts the saved record it arrives through
        the live channel.
        """
        transport = self._require_transport()
        try:
            return await save_machine_status(transport, submission)
        except (MachineTransportError, MachineApiError) as exc:
            _logger.warning("Status submission for %s failed: %s", submission.device_id, exc)
            self._warn(exc)
            return SubmissionAck(device_id=submission.device_id, success=False, message=str(exc))

    async def submit_sample(
        self,
        device_id: str | None = None,
        *,
        rng: random.Random | None = None,
    ) -> SubmissionAck:
        """Post a randomized test observation for *device_id* (default: selected device)."""
        target = resolve_device_id(self._config, device_id if device_id is not None else self._selection.device)
        return await self.submit_status(MachineStatusSubmission.random_sample(target, rng))
