"""pyfuelpanel - date-windowed fuel price panel with revision tracking."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyfuelpanel")
except PackageNotFoundError:
    __version__ = "0+local"
from fuelpanel.client import FuelPriceClient
from fuelpanel.config import PanelConfig
from fuelpanel.exceptions import (
    FuelPanelApiError,
    FuelPanelConfigError,
    FuelPanelError,
    FuelPanelTransportError,
)
from fuelpanel.models import (
    Appearance,
    DayPrice,
    FuelType,
    PreviousPrice,
    PriceResponse,
    PriceSlot,
    PriceSlots,
)
from fuelpanel.panel import PanelView, PricePanel, RevisionRow, RevisionTable, SlotView
from fuelpanel.state.events import DateChanged, Direction, FuelTypeChanged, ToggleSlot
from fuelpanel.state.keys import CacheKey, derive_key
from fuelpanel.state.store import FetchStatus, PriceRecordStore
from fuelpanel.state.tracker import ChangeTracker, Expansion, reduce_expansion
from fuelpanel.state.window import DateWindow, initial_reference_date, step

__all__ = [
    "__version__",
    "Appearance",
    "CacheKey",
    "ChangeTracker",
    "DateChanged",
    "DateWindow",
    "DayPrice",
    "Direction",
    "Expansion",
    "FetchStatus",
    "FuelPanelApiError",
    "FuelPanelConfigError",
    "FuelPanelError",
    "FuelPanelTransportError",
    "FuelPriceClient",
    "FuelType",
    "FuelTypeChanged",
    "PanelConfig",
    "PanelView",
    "PreviousPrice",
    "PriceRecordStore",
    "PricePanel",
    "PriceResponse",
    "PriceSlot",
    "PriceSlots",
    "RevisionRow",
    "RevisionTable",
    "SlotView",
    "ToggleSlot",
    "derive_key",
    "initial_reference_date",
    "reduce_expansion",
    "step",
]
