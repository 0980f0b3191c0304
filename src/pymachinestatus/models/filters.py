"""Filter selection model."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

#: Sentinel meaning "do not filter on this field".
ALL = "all"


class FilterSelection(BaseModel):
    """Current filter choice for each filterable dimension.

    Each field is either :data:`ALL` or a concrete value compared with
    exact, case-sensitive equality.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
    )

    device: str = ALL
    shift: str = ALL
    design: str = ALL
    status: str = ALL

    @field_validator("device", "shift", "design", "status", mode="before")
    @classmethod
    def _blank_is_all(cls, value: Any) -> str:
        if value is None:
            return ALL
        # Record fields are stored stripped, so selections are too.
        text = str(value).strip()
        return text or ALL

    @property
    def is_unfiltered(self) -> bool:
        """Whether every field is :data:`ALL`."""
        return all(value == ALL for value in (self.device, self.shift, self.design, self.status))

    def with_changes(self, **fields: Any) -> FilterSelection:
        """Return a copy with *fields* replaced (validated)."""
        return FilterSelection.model_validate({**self.model_dump(), **fields})
