"""Holder for the last applied snapshot summary."""

from __future__ import annotations

from pymachinestatus.models.summary import SnapshotSummary


class SummaryAggregator:
    """Keeps exactly the summary of the most recent applied snapshot.

    Nothing is derived here: live events that reach the timeline after the
    snapshot are not folded into these figures.
    """

    def __init__(self) -> None:
        self._current: SnapshotSummary | None = None

    @property
    def current(self) -> SnapshotSummary | None:
        return self._current

    def replace(self, summary: SnapshotSummary) -> None:
        self._current = summary
