"""Pydantic request models for client entrypoints.

These models provide a consistent "validate → normalize → execute" flow.
They are used internally by :class:`pymachinestatus.client.MachineStatusClient`.
"""

from __future__ import annotations

import random
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from pymachinestatus._constants import DEFAULT_DESIGN, DEFAULT_DURATION, DEFAULT_SHIFT
from pymachinestatus.models.record import MachineState


class DeviceRequest(BaseModel):
    """Request addressing a single device."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
        str_strip_whitespace=True,
    )

    device_id: str

    @field_validator("device_id")
    @classmethod
    def _device_id_non_empty(cls, value: str) -> str:
        device_id = value.strip()
        if not device_id:
            raise ValueError("device_id must be non-empty")
        return device_id


class MachineStatusSubmission(DeviceRequest):
    """One telemetry observation posted to the collaborator write endpoint.

    Serialize with :meth:`to_payload` to get the camelCase body the
    collaborator expects.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
        str_strip_whitespace=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    status: MachineState = MachineState.ON
    shift: str = DEFAULT_SHIFT
    design: str = DEFAULT_DESIGN
    count: int = Field(default=0, ge=0)
    efficiency: float = Field(default=0.0, ge=0)
    error1: int = Field(default=0, ge=0)
    error2: int = Field(default=0, ge=0)
    duration: str = DEFAULT_DURATION
    temperature: float | None = None
    vibration: float | None = None
    power_consumption: float | None = None

    def to_payload(self) -> dict[str, Any]:
        """JSON body with camelCase keys; unset environmental fields omitted."""
        payload = self.model_dump(mode="json", by_alias=True, exclude_none=True)
        payload["efficiency"] = f"{self.efficiency:.2f}"
        return payload

    @classmethod
    def random_sample(cls, device_id: str, rng: random.Random | None = None) -> MachineStatusSubmission:
        """Build a randomized test observation for *device_id*."""
        gen = rng or random.Random()
        return cls(
            device_id=device_id,
            status=MachineState.ON,
            shift=DEFAULT_SHIFT,
            design=DEFAULT_DESIGN,
            count=gen.randrange(100),
            efficiency=round(gen.random() * 5, 2),
            error1=gen.randrange(5),
            error2=gen.randrange(3),
            duration=f"{gen.randrange(8)}h {gen.randrange(60)}m",
            temperature=float(25 + gen.randrange(10)),
            vibration=gen.random() * 10,
            power_consumption=100 + gen.random() * 50,
        )
