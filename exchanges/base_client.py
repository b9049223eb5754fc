"""
Abstract client definitions for centralized exchange integrations.

Concrete adapters (e.g. CoinEx) implement `TradingAdapter` on top of a
`Transport` collaborator that performs the actual HTTP exchange.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Mapping, Protocol, runtime_checkable

from trading.schemas import BalanceInfo, MarketOrderBook, OpenOrder, OrderType


@dataclass(frozen=True, slots=True)
class ExchangeCredentials:
    """Typed container for exchange authentication data."""

    access_id: str
    secret_key: str = field(repr=False)


@dataclass(frozen=True, slots=True)
class HttpResponse:
    """Status code and raw body returned by a transport."""

    status_code: int
    payload: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


@runtime_checkable
class Transport(Protocol):
    """Executes one HTTP request; raises `NetworkError` on connection/IO failure."""

    def request(
        self,
        url: str,
        method: str,
        body: str | None,
        headers: Mapping[str, str],
    ) -> HttpResponse:
        """Send the request and return the response without interpreting it."""

    def close(self) -> None:
        """Release network resources."""


@runtime_checkable
class TradingAdapter(Protocol):
    """Protocol describing the surface area for exchange integrations."""

    name: str

    def get_market_orders(self, market_id: str) -> MarketOrderBook:
        """Return the current order book for `market_id`."""

    def get_your_open_orders(self, market_id: str) -> list[OpenOrder]:
        """Return the account's unexecuted orders on `market_id`."""

    def create_order(
        self, market_id: str, order_type: OrderType, quantity: Decimal, price: Decimal
    ) -> OpenOrder:
        """Place a limit order and return it as recorded by the exchange."""

    def cancel_order(self, order_id: str, market_id: str) -> bool:
        """Cancel an order; False when the exchange refuses."""

    def get_latest_market_price(self, market_id: str) -> Decimal:
        """Price of the most recent trade on `market_id`."""

    def get_balance_info(self) -> BalanceInfo:
        """Return wallet balances keyed by currency."""

    def get_percentage_of_buy_order_taken_for_exchange_fee(self, market_id: str) -> Decimal:
        """Fee rate applied to buy orders."""

    def get_percentage_of_sell_order_taken_for_exchange_fee(self, market_id: str) -> Decimal:
        """Fee rate applied to sell orders."""

    def close(self) -> None:
        """Release network resources (sessions, etc.)."""
