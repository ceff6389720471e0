"""Three-day price lookup.

Endpoint:
  - GET /api/prices?now=YYYY-MM-DD&type=<fuel type>
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from fuelpanel._transport import Transport
from fuelpanel.config import PanelConfig
from fuelpanel.exceptions import FuelPanelApiError
from fuelpanel.models.prices import PriceResponse, PriceSlot
from fuelpanel.state.keys import CacheKey

_logger = logging.getLogger(__name__)


def parse_price_response(endpoint: str, body: Any) -> PriceResponse:
    """Validate a decoded body into a :class:`PriceResponse`."""
    if not isinstance(body, dict):
        raise FuelPanelApiError(
            f"{endpoint} returned {type(body).__name__}, expected an object",
            endpoint=endpoint,
        )
    try:
        return PriceResponse.model_validate(body)
    except ValidationError as exc:
        raise FuelPanelApiError(
            f"{endpoint} returned an unexpected price payload: {exc.error_count()} error(s)",
            endpoint=endpoint,
        ) from exc


async def fetch_prices(
    config: PanelConfig,
    transport: Transport,
    key: CacheKey,
) -> PriceResponse:
    """Fetch the yesterday/today/tomorrow prices addressed by *key*.

    Raises
    ------
    FuelPanelTransportError
        If the request fails or the body is not JSON.
    FuelPanelApiError
        If the body does not have the price response shape.
    """
    endpoint = config.prices_endpoint
    body = await transport.get_json(endpoint, key.as_params())
    response = parse_price_response(endpoint, body)
    _logger.debug(
        "Prices for %s: %s",
        key,
        [slot.value for slot in PriceSlot if response.prices.get(slot) is not None],
    )
    return response
