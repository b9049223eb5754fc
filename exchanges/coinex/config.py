"""
Immutable configuration for the CoinEx adapter.

Options use the names of the adapter's configuration file entries
(``access-id``, ``secret-key``, ``base-url``, ``market-depth-merge``,
``connection-timeout``, ``non-fatal-error-codes``).
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from exchanges.base_client import ExchangeCredentials
from exchanges.errors import ConfigError

BASE_URL = "https://api.coinex.com/v1"
DEFAULT_MARKET_DEPTH_MERGE = Decimal("0.1")
DEFAULT_CONNECTION_TIMEOUT = 30.0
# Gateway and Cloudflare origin errors are worth retrying upstream.
DEFAULT_NON_FATAL_ERROR_CODES: tuple[int, ...] = (502, 503, 504, 520, 522, 525)

CONFIG_ACCESS_ID = "access-id"
CONFIG_SECRET_KEY = "secret-key"
CONFIG_BASE_URL = "base-url"
CONFIG_MARKET_DEPTH_MERGE = "market-depth-merge"
CONFIG_CONNECTION_TIMEOUT = "connection-timeout"
CONFIG_NON_FATAL_ERROR_CODES = "non-fatal-error-codes"

ENV_PREFIX = "COINEX_"


@dataclass(frozen=True, slots=True)
class CoinexConfig:
    """Settings established once when the client is created."""

    credentials: ExchangeCredentials
    base_url: str = BASE_URL
    market_depth_merge: Decimal = DEFAULT_MARKET_DEPTH_MERGE
    connection_timeout: float = DEFAULT_CONNECTION_TIMEOUT
    non_fatal_error_codes: tuple[int, ...] = field(default=DEFAULT_NON_FATAL_ERROR_CODES)

    def __post_init__(self) -> None:
        if not self.credentials.access_id or not self.credentials.access_id.strip():
            raise ConfigError(f"'{CONFIG_ACCESS_ID}' must be provided")
        if not self.credentials.secret_key or not self.credentials.secret_key.strip():
            raise ConfigError(f"'{CONFIG_SECRET_KEY}' must be provided")
        if not self.base_url.startswith(("http://", "https://")):
            raise ConfigError(f"'{CONFIG_BASE_URL}' must be an http(s) URL: {self.base_url!r}")
        if not self.market_depth_merge.is_finite() or self.market_depth_merge < 0:
            raise ConfigError(f"'{CONFIG_MARKET_DEPTH_MERGE}' must not be negative")
        if not math.isfinite(self.connection_timeout) or self.connection_timeout <= 0:
            raise ConfigError(f"'{CONFIG_CONNECTION_TIMEOUT}' must be positive")

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "CoinexConfig":
        """Build a config from raw option values (strings or native types)."""
        credentials = ExchangeCredentials(
            access_id=_required(options, CONFIG_ACCESS_ID),
            secret_key=_required(options, CONFIG_SECRET_KEY),
        )
        base_url = options.get(CONFIG_BASE_URL) or BASE_URL
        return cls(
            credentials=credentials,
            base_url=str(base_url).rstrip("/"),
            market_depth_merge=_decimal_option(
                options, CONFIG_MARKET_DEPTH_MERGE, DEFAULT_MARKET_DEPTH_MERGE
            ),
            connection_timeout=_float_option(
                options, CONFIG_CONNECTION_TIMEOUT, DEFAULT_CONNECTION_TIMEOUT
            ),
            non_fatal_error_codes=_codes_option(
                options, CONFIG_NON_FATAL_ERROR_CODES, DEFAULT_NON_FATAL_ERROR_CODES
            ),
        )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "CoinexConfig":
        """Read ``COINEX_ACCESS_ID``, ``COINEX_SECRET_KEY`` and friends."""
        environ = os.environ if environ is None else environ
        options = {}
        for key in (
            CONFIG_ACCESS_ID,
            CONFIG_SECRET_KEY,
            CONFIG_BASE_URL,
            CONFIG_MARKET_DEPTH_MERGE,
            CONFIG_CONNECTION_TIMEOUT,
            CONFIG_NON_FATAL_ERROR_CODES,
        ):
            env_name = ENV_PREFIX + key.replace("-", "_").upper()
            if environ.get(env_name):
                options[key] = environ[env_name]
        return cls.from_mapping(options)


def _required(options: Mapping[str, Any], key: str) -> str:
    value = options.get(key)
    if value is None or not str(value).strip():
        raise ConfigError(f"Required option '{key}' is missing")
    return str(value).strip()


def _decimal_option(options: Mapping[str, Any], key: str, default: Decimal) -> Decimal:
    value = options.get(key)
    if value is None or value == "":
        return default
    try:
        return Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ConfigError(f"Option '{key}' is not a number: {value!r}") from exc


def _float_option(options: Mapping[str, Any], key: str, default: float) -> float:
    value = options.get(key)
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Option '{key}' is not a number: {value!r}") from exc


def _codes_option(options: Mapping[str, Any], key: str, default: tuple[int, ...]) -> tuple[int, ...]:
    value = options.get(key)
    if value is None or value == "":
        return default
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple, set, frozenset)):
        items = value
    else:
        # A single code, e.g. ``503`` from a YAML or dict config.
        items = [value]
    try:
        return tuple(int(str(item).strip()) for item in items if str(item).strip())
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Option '{key}' must list integer HTTP status codes: {value!r}") from exc
