"""Snapshot summary model.

Mapped from the ``data`` object of ``dashboard/machine-data``. The
collaborator precomputes these aggregates; they are displayed as-is and
never recomputed from the timeline.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from pydantic import Field, field_validator

from pymachinestatus.ingestion.normalize import non_negative_or_zero, safe_str, two_decimals
from pymachinestatus.models._base import MachineBaseModel


class SnapshotSummary(MachineBaseModel):
    """Aggregate figures attached to a successful snapshot fetch."""

    device_id: str = ""
    total_production: int = 0
    avg_efficiency: Decimal = Decimal("0.00")
    """Average efficiency, two decimal places."""
    total_errors: int = 0
    """error1 + error2 over the snapshot window."""
    error1_count: int = 0
    error2_count: int = 0
    total_status_changes: int = 0
    total_on_cycles: int = 0
    total_off_cycles: int = 0
    designs: tuple[str, ...] = ()
    """Design identifiers known for the device (may be empty)."""

    raw: dict[str, Any] = Field(default_factory=dict, repr=False)
    """Full ``data`` payload."""

    @field_validator(
        "total_production",
        "total_errors",
        "error1_count",
        "error2_count",
        "total_status_changes",
        "total_on_cycles",
        "total_off_cycles",
        mode="before",
    )
    @classmethod
    def _coerce_count(cls, value: Any) -> int:
        return non_negative_or_zero(value)

    @field_validator("avg_efficiency", mode="before")
    @classmethod
    def _coerce_efficiency(cls, value: Any) -> Decimal:
        return two_decimals(value)

    @field_validator("designs", mode="before")
    @classmethod
    def _coerce_designs(cls, value: Any) -> tuple[str, ...]:
        if not isinstance(value, (list, tuple)):
            return ()
        designs: list[str] = []
        for item in value:
            text = safe_str(item)
            if text is not None and text not in designs:
                designs.append(text)
        return tuple(designs)

    @classmethod
    def from_api(cls, data: dict[str, Any], *, device_id: str = "") -> SnapshotSummary:
        """Build a summary from the snapshot ``data`` object.

        Status counters live in a nested ``status_summary`` object and are
        lifted to the top level here.
        """
        status_summary = data.get("status_summary")
        nested = status_summary if isinstance(status_summary, dict) else {}
        values: dict[str, Any] = {
            **data,
            "total_status_changes": nested.get("total_status_changes"),
            "total_on_cycles": nested.get("total_on_cycles"),
            "total_off_cycles": nested.get("total_off_cycles"),
            "raw": data,
        }
        values["device_id"] = safe_str(values.get("device_id")) or device_id
        return cls.model_validate(values)
