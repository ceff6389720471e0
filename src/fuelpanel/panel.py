"""Three-day price panel.

:class:`PricePanel` composes the date window, cache keys, the record store
and the change tracker, and turns their state into a :class:`PanelView`
that a renderer can draw without further logic.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict

from fuelpanel._constants import (
    CHANGED_TITLE,
    CURRENCY_SUFFIX,
    DATE_LABEL_FORMAT,
    DETECTION_FORMAT,
    ERROR_NOTICE,
    UNKNOWN_PRICE,
)
from fuelpanel.models.appearance import Appearance
from fuelpanel.models.prices import DayPrice, FuelType, PreviousPrice, PriceSlot
from fuelpanel.query import QuerySink, build_query
from fuelpanel.state.events import DateChanged, Direction, FuelTypeChanged
from fuelpanel.state.keys import CacheKey, derive_key
from fuelpanel.state.store import FetchFn, FetchStatus, PriceRecordStore
from fuelpanel.state.tracker import ChangeTracker, Expansion
from fuelpanel.state.window import DateWindow

_logger = logging.getLogger(__name__)


def format_price(price: float | None) -> str:
    """``"21.45 kr"``; the unknown-price placeholder when *price* is ``None``."""
    if price is None:
        return f"{UNKNOWN_PRICE} {CURRENCY_SUFFIX}"
    return f"{price:.2f} {CURRENCY_SUFFIX}"


def format_detection(timestamp: datetime) -> str:
    """Detection time in the timestamp's own offset."""
    return timestamp.strftime(DETECTION_FORMAT)


class _View(BaseModel):
    model_config = ConfigDict(frozen=True)


class RevisionRow(_View):
    detected_at: str
    price_label: str


class RevisionTable(_View):
    """Revision history of the expanded slot."""

    slot: PriceSlot
    rows: tuple[RevisionRow, ...]

    @classmethod
    def from_expansion(cls, expansion: Expansion) -> RevisionTable:
        return cls(slot=expansion.slot, rows=tuple(_row(prev) for prev in expansion.prev_prices))


def _row(prev: PreviousPrice) -> RevisionRow:
    return RevisionRow(detected_at=format_detection(prev.detection_timestamp), price_label=format_price(prev.price))


class SlotView(_View):
    slot: PriceSlot
    label: str
    record: DayPrice | None
    price_label: str
    has_changed: bool
    expanded: bool
    loading: bool

    @property
    def clickable(self) -> bool:
        return self.has_changed

    @property
    def title(self) -> str:
        return CHANGED_TITLE if self.has_changed else ""


class PanelView(_View):
    """Everything needed to draw the panel.

    When ``error`` is set the renderer shows only ``error_message``.
    """

    reference_date: date
    date_label: str
    fuel_type: FuelType
    can_go_forward: bool
    loading: bool
    error: bool
    error_message: str | None
    slots: tuple[SlotView, ...]
    history: RevisionTable | None


class PricePanel:
    """View model for the three-day price panel.

    Mutating methods (:meth:`navigate`, :meth:`set_fuel_type`,
    :meth:`refresh`) schedule fetches on the running event loop and must be
    called from inside it.
    """

    def __init__(
        self,
        fuel_type: FuelType,
        fetch_fn: FetchFn,
        *,
        query_override: str | None = None,
        appearance: Appearance | None = None,
        store: PriceRecordStore | None = None,
        today: Callable[[], date] = date.today,
        on_query_change: QuerySink | None = None,
    ) -> None:
        self._fuel_type = fuel_type
        self._fetch_fn = fetch_fn
        self._appearance = appearance or Appearance()
        self._store = store or PriceRecordStore()
        self._on_query_change = on_query_change
        self._tracker = ChangeTracker()
        self._window = DateWindow(query_override=query_override, today=today)
        self._window.add_listener(self._on_date_changed)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def fuel_type(self) -> FuelType:
        return self._fuel_type

    @property
    def reference_date(self) -> date:
        return self._window.reference_date

    @property
    def key(self) -> CacheKey:
        return derive_key(self._window.reference_date, self._fuel_type)

    @property
    def status(self) -> FetchStatus:
        return self._store.status(self.key)

    @property
    def tracker(self) -> ChangeTracker:
        return self._tracker

    @property
    def store(self) -> PriceRecordStore:
        return self._store

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def refresh(self) -> FetchStatus:
        """Resolve the current key (fetching only when needed)."""
        return self._store.resolve(self.key, self._fetch_fn)

    def revalidate(self) -> FetchStatus:
        return self._store.revalidate(self.key, self._fetch_fn)

    async def wait(self) -> FetchStatus:
        """Wait for the current key's fetch to settle."""
        return await self._store.wait(self.key)

    def navigate(self, direction: Direction) -> bool:
        """Step one day. Returns ``False`` when the step would enter the future."""
        return self._window.navigate(direction)

    def set_fuel_type(self, fuel_type: FuelType) -> bool:
        """Switch fuel type. Returns ``False`` when it is unchanged."""
        if fuel_type == self._fuel_type:
            return False
        self._fuel_type = fuel_type
        self._tracker.dispatch(FuelTypeChanged(fuel_type=fuel_type))
        self.refresh()
        return True

    def click(self, slot: PriceSlot) -> bool:
        """Handle a click on *slot*; only slots with revisions react."""
        record = self._record(slot)
        if record is None or not record.has_changed:
            return False
        return self._tracker.toggle(slot, record.prev_prices)

    def _on_date_changed(self, reference_date: date) -> None:
        self._tracker.dispatch(DateChanged(reference_date=reference_date))
        if self._on_query_change is not None:
            self._on_query_change(build_query(reference_date, self._appearance))
        _logger.debug("Reference date now %s", reference_date)
        self.refresh()

    # ------------------------------------------------------------------
    # Composition
    # ------------------------------------------------------------------

    def _record(self, slot: PriceSlot) -> DayPrice | None:
        data = self.status.data
        return None if data is None else data.prices.get(slot)

    def view(self) -> PanelView:
        status = self.status
        waiting = status.data is None and status.error is None
        expanded = self._tracker.expanded_slot
        slots = []
        for slot in PriceSlot:
            record = self._record(slot)
            slots.append(
                SlotView(
                    slot=slot,
                    label=slot.label,
                    record=record,
                    price_label=format_price(None if record is None else record.price),
                    has_changed=record is not None and record.has_changed,
                    expanded=expanded == slot,
                    loading=waiting,
                )
            )
        expansion = self._tracker.state
        return PanelView(
            reference_date=self._window.reference_date,
            date_label=self._window.reference_date.strftime(DATE_LABEL_FORMAT),
            fuel_type=self._fuel_type,
            can_go_forward=self._window.can_navigate(Direction.FORWARD),
            loading=waiting,
            error=status.error is not None,
            error_message=ERROR_NOTICE if status.error is not None else None,
            slots=tuple(slots),
            history=None if expansion is None else RevisionTable.from_expansion(expansion),
        )
