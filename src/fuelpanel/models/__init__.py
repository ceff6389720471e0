"""Typed models for price service payloads."""

from fuelpanel.models.appearance import Appearance
from fuelpanel.models.prices import DayPrice, FuelType, PreviousPrice, PriceResponse, PriceSlot, PriceSlots

__all__ = [
    "Appearance",
    "DayPrice",
    "FuelType",
    "PreviousPrice",
    "PriceResponse",
    "PriceSlot",
    "PriceSlots",
]
