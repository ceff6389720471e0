"""URL query synchronisation helpers.

The panel reads its initial date from the ``now`` parameter and writes the
current date back after every navigation, passing the cosmetic colour
parameters through untouched.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import date

from fuelpanel._constants import BG_COLOR_PARAM, NOW_PARAM, TEXT_COLOR_PARAM
from fuelpanel.models.appearance import Appearance

QuerySink = Callable[[dict[str, str]], None]
"""Receives the query to publish after a date change."""


def read_now_param(query: Mapping[str, str | list[str]]) -> str | None:
    """Return the raw ``now`` value of a parsed query string, if any.

    Accepts both flat mappings and the ``{key: [values]}`` shape of
    :func:`urllib.parse.parse_qs`; the first value wins.
    """
    value = query.get(NOW_PARAM)
    if isinstance(value, list):
        return value[0] if value else None
    return value


def appearance_from_query(query: Mapping[str, str | list[str]]) -> Appearance:
    def _first(name: str) -> str | None:
        value = query.get(name)
        if isinstance(value, list):
            return value[0] if value else None
        return value

    return Appearance(bg_color=_first(BG_COLOR_PARAM), text_color=_first(TEXT_COLOR_PARAM))


def build_query(reference_date: date, appearance: Appearance | None = None) -> dict[str, str]:
    """Query to publish for *reference_date*.

    Colour parameters are omitted when absent or empty and copied verbatim
    otherwise.
    """
    query = {NOW_PARAM: reference_date.isoformat()}
    if appearance is not None:
        if appearance.bg_color:
            query[BG_COLOR_PARAM] = appearance.bg_color
        if appearance.text_color:
            query[TEXT_COLOR_PARAM] = appearance.text_color
    return query
