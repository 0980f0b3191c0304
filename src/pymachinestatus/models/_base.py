"""Base model and timestamp parsing for collaborator payloads.

Every response model inherits from :class:`MachineBaseModel` which
provides:

* A ``model_validator(mode="before")`` that strips placeholder values
  (``""``, ``"--"``, NaN) so the field default is used.
* A ``raw`` dict that captures the original payload, for models that
  declare one.
"""

from __future__ import annotations

import math
from datetime import UTC, datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, model_validator

from pymachinestatus.ingestion.normalize import PLACEHOLDERS, normalize_timestamp_seconds, safe_float

# Placeholder strings the collaborator uses for "not available". Shared with
# the ingestion parsers so both layers agree on what counts as missing.
_SENTINELS = PLACEHOLDERS

# Locale renderings seen in stored payloads, tried after ISO-8601.
_TEXT_FORMATS: tuple[str, ...] = (
    "%m/%d/%Y, %I:%M:%S %p",
    "%m/%d/%Y %I:%M:%S %p",
    "%d/%m/%Y, %H:%M:%S",
    "%Y/%m/%d %H:%M:%S",
)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def parse_timestamp(value: Any) -> datetime | None:
    """Convert a payload timestamp to a UTC datetime.

    Accepts datetimes, epoch seconds or milliseconds (numbers or numeric
    strings), ISO-8601 strings and a few locale renderings. Naive values
    are taken as UTC. Returns ``None`` for anything unparsable.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return _as_utc(value)

    if safe_float(value) is not None:
        seconds = normalize_timestamp_seconds(value)
        if seconds is None:
            return None
        try:
            return datetime.fromtimestamp(seconds, tz=UTC)
        except (OverflowError, OSError, ValueError):
            return None

    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None
    try:
        return _as_utc(datetime.fromisoformat(text))
    except ValueError:
        pass
    for fmt in _TEXT_FORMATS:
        try:
            return _as_utc(datetime.strptime(text, fmt))
        except ValueError:
            continue
    return None


def _require_timestamp(value: Any) -> datetime:
    parsed = parse_timestamp(value)
    if parsed is None:
        raise ValueError(f"unparsable timestamp: {value!r}")
    return parsed


MachineTimestamp = Annotated[datetime, BeforeValidator(_require_timestamp)]
"""Annotated type that coerces epoch/ISO/locale timestamps to UTC datetimes."""


class MachineBaseModel(BaseModel):
    """Base for collaborator payload models.

    Handles:
    * placeholder values (``""``, ``"--"``, NaN) → dropped so the field
      default is used instead
    * stashes the original payload dict in ``raw`` when the model has one
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    @staticmethod
    def _clean_dict(values: dict[str, Any]) -> dict[str, Any]:
        cleaned: dict[str, Any] = {}
        for key, value in values.items():
            if value is None:
                continue
            if isinstance(value, str) and value.strip() in _SENTINELS:
                continue
            if isinstance(value, float) and math.isnan(value):
                continue
            cleaned[key] = value
        return cleaned

    @model_validator(mode="before")
    @classmethod
    def _clean_values(cls, values: Any) -> Any:
        """Strip placeholder values and stash the raw payload."""
        if not isinstance(values, dict):
            return values
        cleaned = MachineBaseModel._clean_dict(values)
        # Only auto-stash raw when not explicitly provided.
        if "raw" in cls.model_fields and "raw" not in values:
            cleaned["raw"] = dict(values)
        return cleaned
