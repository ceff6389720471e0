"""Three-day price response models."""

from __future__ import annotations

import datetime as dt
import enum
from typing import Any

from pydantic import Field, field_validator

from fuelpanel.models._base import FuelBaseModel

FuelType = str
"""Opaque fuel type selector (e.g. ``"E10"``), owned by the surrounding application."""


class PriceSlot(enum.StrEnum):
    """Day slot relative to the reference date, in display order."""

    YESTERDAY = "yesterday"
    TODAY = "today"
    TOMORROW = "tomorrow"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class PreviousPrice(FuelBaseModel):
    """A price that was replaced, and when the replacement was detected."""

    detection_timestamp: dt.datetime
    price: float


class DayPrice(FuelBaseModel):
    """Published price for one calendar day.

    ``prev_prices`` is in detection order. A non-empty history means the
    price was revised after it was first published.
    """

    date: dt.date
    price: float
    prev_prices: tuple[PreviousPrice, ...] = Field(default=())

    @field_validator("prev_prices", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return () if value is None else value

    @property
    def has_changed(self) -> bool:
        return len(self.prev_prices) > 0


class PriceSlots(FuelBaseModel):
    """Records for the three slots; ``None`` means no data for that day."""

    yesterday: DayPrice | None = None
    today: DayPrice | None = None
    tomorrow: DayPrice | None = None

    def get(self, slot: PriceSlot) -> DayPrice | None:
        record: DayPrice | None = getattr(self, slot.value)
        return record


class PriceResponse(FuelBaseModel):
    """Body of a three-day price lookup."""

    message: str = ""
    prices: PriceSlots = Field(default_factory=PriceSlots)

    @field_validator("message", mode="before")
    @classmethod
    def _message_default(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("prices", mode="before")
    @classmethod
    def _prices_default(cls, value: Any) -> Any:
        return {} if value is None else value
