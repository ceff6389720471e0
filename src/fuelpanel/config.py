"""Panel configuration for pyfuelpanel."""

from __future__ import annotations

import dataclasses
import os
from datetime import date, datetime
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fuelpanel._constants import BASE_URL, PRICES_ENDPOINT
from fuelpanel.exceptions import FuelPanelConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class PanelConfig:
    """Panel configuration.

    Parameters
    ----------
    base_url : str
        Base URL of the price service.
    prices_endpoint : str
        Path of the three-day price lookup.
    request_timeout : float
        Total timeout in seconds for a single price lookup.
    time_zone : str or None
        IANA time zone used to decide what "today" is. ``None`` uses the
        host's local calendar date.
    default_fuel_type : str
        Fuel type shown when the surrounding application does not pick one.
    api_trace_enabled : bool
        Log decoded response bodies at DEBUG level.
    """

    base_url: str = BASE_URL
    prices_endpoint: str = PRICES_ENDPOINT
    request_timeout: float = 10.0
    time_zone: str | None = None
    default_fuel_type: str = "E10"
    api_trace_enabled: bool = False

    def __post_init__(self) -> None:
        if self.request_timeout <= 0:
            raise FuelPanelConfigError(f"request_timeout must be positive, got {self.request_timeout}")
        if self.time_zone is not None:
            try:
                ZoneInfo(self.time_zone)
            except (ZoneInfoNotFoundError, ValueError) as exc:
                raise FuelPanelConfigError(f"Unknown time zone: {self.time_zone!r}") from exc

    def today(self) -> date:
        """Current calendar date in the configured time zone."""
        if self.time_zone is None:
            return date.today()
        return datetime.now(ZoneInfo(self.time_zone)).date()

    @classmethod
    def from_env(cls, **overrides: Any) -> PanelConfig:
        """Create configuration from environment variables.

        Reads optional ``FUELPANEL_*`` variables. Explicit keyword
        arguments override environment values.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "FUELPANEL_BASE_URL": "base_url",
            "FUELPANEL_PRICES_ENDPOINT": "prices_endpoint",
            "FUELPANEL_TIME_ZONE": "time_zone",
            "FUELPANEL_DEFAULT_FUEL_TYPE": "default_fuel_type",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        # request_timeout is numeric, handle separately
        timeout_env = env.get("FUELPANEL_REQUEST_TIMEOUT")
        if timeout_env is not None and "request_timeout" not in overrides:
            try:
                config_kwargs["request_timeout"] = float(timeout_env)
            except ValueError as exc:
                raise FuelPanelConfigError(f"FUELPANEL_REQUEST_TIMEOUT is not a number: {timeout_env!r}") from exc

        if "api_trace_enabled" not in overrides:
            config_kwargs["api_trace_enabled"] = _env_bool(
                env.get("FUELPANEL_API_TRACE_ENABLED"),
                False,
            )

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
