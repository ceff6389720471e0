"""Cosmetic URL parameters passed through by the panel."""

from __future__ import annotations

from pydantic import Field

from fuelpanel.models._base import FuelBaseModel


class Appearance(FuelBaseModel):
    """Colours chosen by the embedding page.

    The values are never interpreted, only carried back into the URL.
    """

    bg_color: str | None = Field(default=None)
    text_color: str | None = Field(default=None)
