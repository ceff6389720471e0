"""Expansion state for revision histories.

At most one slot is expanded at a time. The state is ``None`` (collapsed)
or an :class:`Expansion`; transitions are defined by :func:`reduce_expansion`.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict

from fuelpanel.models.prices import PreviousPrice, PriceSlot
from fuelpanel.state.events import DateChanged, FuelTypeChanged, PanelEvent, ToggleSlot

_logger = logging.getLogger(__name__)


class Expansion(BaseModel):
    """The slot whose revision history is shown."""

    model_config = ConfigDict(frozen=True)

    slot: PriceSlot
    prev_prices: tuple[PreviousPrice, ...]


def reduce_expansion(state: Expansion | None, event: PanelEvent) -> Expansion | None:
    """Return the expansion state after *event*.

    Toggling a slot without revisions is ignored. Toggling the expanded slot
    collapses it; toggling any other slot expands that one. Date and fuel
    type changes always collapse.
    """
    if isinstance(event, ToggleSlot):
        if not event.prev_prices:
            return state
        if state is not None and state.slot == event.slot:
            return None
        return Expansion(slot=event.slot, prev_prices=event.prev_prices)
    if isinstance(event, (DateChanged, FuelTypeChanged)):
        return None
    raise TypeError(f"Unsupported panel event: {event!r}")


class ChangeTracker:
    """Holds the expansion state and applies events to it."""

    def __init__(self) -> None:
        self._state: Expansion | None = None

    @property
    def state(self) -> Expansion | None:
        return self._state

    @property
    def expanded_slot(self) -> PriceSlot | None:
        return None if self._state is None else self._state.slot

    def dispatch(self, event: PanelEvent) -> Expansion | None:
        return self._transition(reduce_expansion(self._state, event), type(event).__name__)

    def toggle(self, slot: PriceSlot, prev_prices: Sequence[PreviousPrice]) -> bool:
        """Toggle *slot*. Returns ``False`` when ignored for lack of revisions."""
        if not prev_prices:
            return False
        self.dispatch(ToggleSlot(slot=slot, prev_prices=tuple(prev_prices)))
        return True

    def reset(self) -> None:
        self._transition(None, "reset")

    def _transition(self, state: Expansion | None, cause: str) -> Expansion | None:
        previous, self._state = self._state, state
        if state != previous:
            _logger.debug("Expansion %s -> %s on %s", _describe(previous), _describe(state), cause)
        return state


def _describe(state: Expansion | None) -> str:
    return "collapsed" if state is None else f"expanded({state.slot})"
