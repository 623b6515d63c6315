from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ozonator.constants import (
    COLUMN_FALLBACK_WIDTH,
    COLUMN_MAX_WIDTH,
    COLUMN_MIN_WIDTH,
)
from ozonator.enums import HiddenBucket


class BaseSchema(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class PersistedColumnLayoutDTO(BaseSchema):
    """One entry of a saved grid layout: order, width and visibility."""

    id: str
    w: int = COLUMN_FALLBACK_WIDTH
    visible: bool = True
    hidden_bucket: HiddenBucket = Field(HiddenBucket.MAIN, alias="hiddenBucket")

    @field_validator("id", mode="before")
    @classmethod
    def _normalize_id(cls, value: Any) -> str:
        text = "" if value is None else str(value).strip()
        if not text:
            raise ValueError("column id is empty")
        return text

    @field_validator("w", mode="before")
    @classmethod
    def _clamp_width(cls, value: Any) -> int:
        try:
            width = float(value)
        except (TypeError, ValueError):
            return COLUMN_FALLBACK_WIDTH
        if not math.isfinite(width):
            return COLUMN_FALLBACK_WIDTH
        # Half-up rounding, like the width the UI measured
        rounded = math.floor(width + 0.5)
        return max(COLUMN_MIN_WIDTH, min(COLUMN_MAX_WIDTH, rounded))

    @field_validator("visible", mode="before")
    @classmethod
    def _strict_visible(cls, value: Any) -> bool:
        return value if isinstance(value, bool) else True

    @field_validator("hidden_bucket", mode="before")
    @classmethod
    def _known_bucket(cls, value: Any) -> HiddenBucket:
        return HiddenBucket.ADD if value == HiddenBucket.ADD else HiddenBucket.MAIN


class DateRangeDTO(BaseSchema):
    """Report date filter; both ends are ``YYYY-MM-DD`` or empty."""

    date_from: str = Field("", alias="from")
    date_to: str = Field("", alias="to")
