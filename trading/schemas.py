"""
Generic trading types populated by exchange adapters.

Amounts are kept as ``Decimal`` so derived values (level totals, remaining
quantities) are exact.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum


class OrderType(str, Enum):
    """Side of an order or book level."""

    BUY = "buy"
    SELL = "sell"


@dataclass(frozen=True, slots=True)
class MarketOrder:
    """Single price level in a market order book."""

    order_type: OrderType
    price: Decimal
    quantity: Decimal
    total: Decimal


@dataclass(frozen=True, slots=True)
class MarketOrderBook:
    """Snapshot of the book for one market, best level first as sent by the exchange."""

    market_id: str
    sell_orders: list[MarketOrder] = field(default_factory=list)
    buy_orders: list[MarketOrder] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class OpenOrder:
    """Normalized view of one of the account's orders."""

    id: str
    market_id: str
    order_type: OrderType
    price: Decimal
    original_quantity: Decimal
    filled_quantity: Decimal
    status: str
    creation_date: datetime | None = None
    client_order_id: str | None = None

    @property
    def quantity(self) -> Decimal:
        """Quantity still waiting to be filled."""
        return self.original_quantity - self.filled_quantity

    @property
    def total(self) -> Decimal:
        return self.original_quantity * self.price


@dataclass(frozen=True, slots=True)
class BalanceInfo:
    """Wallet balances split into spendable funds and funds held by open orders."""

    available: dict[str, Decimal] = field(default_factory=dict)
    on_hold: dict[str, Decimal] = field(default_factory=dict)
