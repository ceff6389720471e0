"""Named panel events.

User actions and context changes are converted into these events so the
expansion state can be driven by a pure reducer.
"""

from __future__ import annotations

import datetime as dt
import enum

from pydantic import BaseModel, ConfigDict, Field

from fuelpanel.models.prices import PreviousPrice, PriceSlot

__all__ = ["DateChanged", "Direction", "FuelTypeChanged", "PanelEvent", "PriceSlot", "ToggleSlot"]


class Direction(enum.StrEnum):
    BACK = "back"
    FORWARD = "forward"


class ToggleSlot(BaseModel):
    """The user clicked a price slot."""

    model_config = ConfigDict(frozen=True)

    slot: PriceSlot
    prev_prices: tuple[PreviousPrice, ...] = Field(default=())


class DateChanged(BaseModel):
    """The reference date moved to ``reference_date``."""

    model_config = ConfigDict(frozen=True)

    reference_date: dt.date


class FuelTypeChanged(BaseModel):
    """The surrounding application selected another fuel type."""

    model_config = ConfigDict(frozen=True)

    fuel_type: str


PanelEvent = ToggleSlot | DateChanged | FuelTypeChanged
