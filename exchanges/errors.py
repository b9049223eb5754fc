"""
Error kinds raised by exchange adapters.

Callers can tell apart failures worth retrying (``NetworkError``) from
definite rejections by the exchange (``BusinessError``), unusable responses
(``ParseError``), missing data (``NotFoundError``) and setup mistakes
(``ConfigError``).
"""

from __future__ import annotations

from typing import Any


class ExchangeAdapterError(RuntimeError):
    """Base class; also used to wrap unexpected failures (see ``__cause__``)."""

    def __init__(self, message: str, payload: Any | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.payload = payload


class ConfigError(ExchangeAdapterError):
    """Missing or invalid credentials/options. Not retryable."""


class NetworkError(ExchangeAdapterError):
    """The transport could not complete the request."""

    def __init__(
        self,
        message: str = "Failed to connect to exchange",
        status_code: int | None = None,
        payload: Any | None = None,
    ) -> None:
        super().__init__(message, payload=payload)
        self.status_code = status_code


class BusinessError(ExchangeAdapterError):
    """The exchange answered with a non-zero response code."""

    def __init__(
        self,
        code: int,
        message: str,
        name: str | None = None,
        payload: Any | None = None,
    ) -> None:
        super().__init__(message, payload=payload)
        self.code = code
        self.name = name

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class ParseError(ExchangeAdapterError):
    """The response body (or a record inside it) could not be interpreted."""


class NotFoundError(ExchangeAdapterError):
    """A successful response did not contain the requested item."""

    def __init__(self, message: str, market: str | None = None, payload: Any | None = None) -> None:
        super().__init__(message, payload=payload)
        self.market = market
