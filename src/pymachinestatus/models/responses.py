"""Typed responses for write endpoints.

The save endpoint returns a small acknowledgement payload, or nothing at
all when the request fails. The raw payload is kept for forward
compatibility.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SubmissionAck(BaseModel):
    """Outcome of posting one telemetry observation."""

    model_config = ConfigDict(frozen=True)

    device_id: str
    success: bool
    message: str = ""
    raw: dict[str, Any] = Field(default_factory=dict)
