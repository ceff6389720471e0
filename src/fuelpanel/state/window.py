"""Reference date arithmetic for the three-day window.

The panel is centred on a reference date that starts at an optional
override (the ``now`` URL parameter) or today, and moves one day at a
time. It never moves past today.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date, datetime, timedelta

from fuelpanel._constants import DATE_FORMAT
from fuelpanel.state.events import Direction

_logger = logging.getLogger(__name__)

_ONE_DAY = timedelta(days=1)


def parse_calendar_date(value: str | None) -> date | None:
    """Parse ``YYYY-MM-DD``; ``None`` for missing or malformed input."""
    if value is None:
        return None
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT).date()
    except ValueError:
        return None


def initial_reference_date(query_override: str | None, *, today: date) -> date:
    """Return the first reference date of a panel session.

    A malformed override falls back to *today* without surfacing an error.
    An override in the future is clamped to *today*.
    """
    parsed = parse_calendar_date(query_override)
    if parsed is None:
        if query_override is not None:
            _logger.debug("Ignoring malformed date override %r", query_override)
        return today
    if parsed > today:
        _logger.debug("Clamping future date override %s to %s", parsed, today)
        return today
    return parsed


def step(current: date, direction: Direction, *, today: date) -> date:
    """Move *current* one day in *direction*.

    A forward step that would land after *today* returns *current* unchanged.
    """
    if direction == Direction.BACK:
        return current - _ONE_DAY
    candidate = current + _ONE_DAY
    if candidate > today:
        return current
    return candidate


class DateWindow:
    """Mutable reference date with change notification.

    Listeners are called synchronously with the new date after every
    successful step, before :meth:`navigate` returns.
    """

    def __init__(
        self,
        *,
        query_override: str | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._today = today
        self._reference_date = initial_reference_date(query_override, today=today())
        self._listeners: list[Callable[[date], None]] = []

    @property
    def reference_date(self) -> date:
        return self._reference_date

    @property
    def today(self) -> date:
        return self._today()

    def add_listener(self, listener: Callable[[date], None]) -> None:
        self._listeners.append(listener)

    def can_navigate(self, direction: Direction) -> bool:
        return step(self._reference_date, direction, today=self._today()) != self._reference_date

    def navigate(self, direction: Direction) -> bool:
        """Step the window. Returns ``True`` when the reference date changed."""
        new_date = step(self._reference_date, direction, today=self._today())
        if new_date == self._reference_date:
            _logger.debug("Rejected %s step from %s", direction, self._reference_date)
            return False
        self._reference_date = new_date
        for listener in list(self._listeners):
            listener(new_date)
        return True
