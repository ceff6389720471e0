"""Custom exception hierarchy for pyfuelpanel."""

from __future__ import annotations


class FuelPanelError(Exception):
    """Base exception for all pyfuelpanel errors."""


class FuelPanelConfigError(FuelPanelError):
    """Invalid or missing configuration."""


class FuelPanelTransportError(FuelPanelError):
    """HTTP-level failure (network, non-200, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class FuelPanelApiError(FuelPanelError):
    """The price service answered with a body that does not match the response shape."""

    def __init__(
        self,
        message: str,
        *,
        endpoint: str = "",
    ) -> None:
        self.endpoint = endpoint
        super().__init__(message)
