"""High-level async client for the fuel price service."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any

import aiohttp

from fuelpanel._api import prices as _prices_api
from fuelpanel._transport import HttpTransport
from fuelpanel.config import PanelConfig
from fuelpanel.exceptions import FuelPanelError
from fuelpanel.models.prices import FuelType, PriceResponse
from fuelpanel.state.keys import CacheKey, derive_key

_logger = logging.getLogger(__name__)


class FuelPriceClient:
    """Async client for the three-day price lookup.

    Usage::

        async with FuelPriceClient(config) as client:
            prices = await client.get_prices(key)

    :meth:`get_prices` has the fetch signature expected by
    :class:`fuelpanel.state.store.PriceRecordStore`.
    """

    def __init__(
        self,
        config: PanelConfig | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._config = config or PanelConfig()
        self._external_session = session is not None
        self._http_session = session
        self._transport: HttpTransport | None = None

    @property
    def config(self) -> PanelConfig:
        return self._config

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> FuelPriceClient:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = HttpTransport(self._config, self._http_session)
        _logger.debug("Price client using %s", self._config.base_url)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None

    def _require_transport(self) -> HttpTransport:
        if self._transport is None:
            raise FuelPanelError("Client not initialized. Use 'async with FuelPriceClient(...) as client:'")
        return self._transport

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    async def get_prices(self, key: CacheKey) -> PriceResponse:
        """Fetch the three-day prices addressed by *key*."""
        transport = self._require_transport()
        return await _prices_api.fetch_prices(self._config, transport, key)

    async def get_prices_for(self, fuel_type: FuelType | None = None, *, now: date | datetime | None = None) -> PriceResponse:
        """Convenience lookup by date and fuel type.

        *now* defaults to today in the configured time zone.
        """
        key = derive_key(now if now is not None else self._config.today(), fuel_type or self._config.default_fuel_type)
        return await self.get_prices(key)
