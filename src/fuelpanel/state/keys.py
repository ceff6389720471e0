"""Cache keys addressing three-day price records."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict

from fuelpanel._constants import NOW_PARAM, TYPE_PARAM


class CacheKey(BaseModel):
    """Structural key of a price lookup.

    ``date`` is the ISO-8601 calendar string of the reference date, so equal
    calendar days always produce equal (and equally hashed) keys.
    """

    model_config = ConfigDict(frozen=True)

    date: str
    fuel_type: str

    def as_params(self) -> dict[str, str]:
        """Query parameters for the price service."""
        return {NOW_PARAM: self.date, TYPE_PARAM: self.fuel_type}

    def __str__(self) -> str:
        return f"{self.date}/{self.fuel_type}"


def derive_key(value: date | datetime, fuel_type: str) -> CacheKey:
    """Derive the cache key for a reference date and fuel type.

    A ``datetime`` contributes its own calendar date; its tzinfo is not
    converted, so two datetimes on the same calendar day give the same key.
    """
    if isinstance(value, datetime):
        value = value.date()
    return CacheKey(date=value.isoformat(), fuel_type=fuel_type)
