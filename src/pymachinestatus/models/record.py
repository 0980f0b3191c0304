"""Canonical telemetry record.

Snapshot timeline items and live push events carry different field names
for the same concepts; both are mapped onto :class:`TelemetryRecord` by
:func:`pymachinestatus.ingestion.records.normalize_record` so nothing
downstream branches on origin.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from enum import StrEnum
from typing import Any

from pydantic import Field, field_validator, model_validator

from pymachinestatus._constants import DEFAULT_DESIGN, DEFAULT_DURATION, DEFAULT_SHIFT
from pymachinestatus.models._base import MachineBaseModel, MachineTimestamp


class MachineState(StrEnum):
    """Machine run state.

    Lookup is case-insensitive; any value without a member resolves to
    ``OFF``.
    """

    ON = "ON"
    OFF = "OFF"

    @classmethod
    def _missing_(cls, value: object) -> MachineState:
        if isinstance(value, str):
            upper = value.strip().upper()
            for member in cls:
                if member.value == upper:
                    return member
        return cls.OFF


class TelemetryRecord(MachineBaseModel):
    """One observed machine status sample."""

    device_id: str
    """Device identifier (non-empty)."""
    timestamp: MachineTimestamp
    """Observation time, UTC."""
    shift: str = DEFAULT_SHIFT
    design: str = DEFAULT_DESIGN
    count: int = Field(default=0, ge=0)
    """Production count."""
    efficiency: Decimal = Field(default=Decimal("0.00"), ge=0)
    """Efficiency with two-decimal precision."""
    error1: int = Field(default=0, ge=0)
    error2: int = Field(default=0, ge=0)
    status: MachineState = MachineState.OFF
    duration: str = DEFAULT_DURATION
    """Display duration, e.g. ``"3h 12m"``."""

    @model_validator(mode="before")
    @classmethod
    def _clean_values(cls, values: Any) -> Any:
        """Take values as given.

        Records are built by ``normalize_record``, which has already turned
        placeholders into defaults. A second pass here would drop real
        values such as a ``"NaN"`` shift or device name.
        """
        return values

    @field_validator("device_id")
    @classmethod
    def _device_id_non_empty(cls, value: str) -> str:
        device_id = value.strip()
        if not device_id:
            raise ValueError("device_id must be non-empty")
        return device_id

    @field_validator("efficiency")
    @classmethod
    def _two_places(cls, value: Decimal) -> Decimal:
        return value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

    @field_validator("status", mode="before")
    @classmethod
    def _coerce_status(cls, value: Any) -> MachineState:
        return MachineState(value) if not isinstance(value, MachineState) else value

    @property
    def total_errors(self) -> int:
        """Sum of both error counters."""
        return self.error1 + self.error2
