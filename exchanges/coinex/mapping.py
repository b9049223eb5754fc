"""
Pure conversions from CoinEx records to the generic trading types.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Mapping

from exchanges.coinex.messages import CoinexOrder, Deal, MarketDepth, MarketInfo, OrdersPage, Wallet
from exchanges.errors import NotFoundError
from trading.schemas import BalanceInfo, MarketOrder, MarketOrderBook, OpenOrder, OrderType


def to_market_orders(levels: Iterable[tuple[Decimal, Decimal]], order_type: OrderType) -> list[MarketOrder]:
    return [
        MarketOrder(order_type=order_type, price=price, quantity=amount, total=price * amount)
        for price, amount in levels
    ]


def to_market_order_book(market_id: str, depth: MarketDepth) -> MarketOrderBook:
    """Asks become SELL levels and bids BUY levels, in the order received."""
    return MarketOrderBook(
        market_id=market_id,
        sell_orders=to_market_orders(depth.asks, OrderType.SELL),
        buy_orders=to_market_orders(depth.bids, OrderType.BUY),
    )


def to_order_type(side: str) -> OrderType:
    return OrderType.BUY if side.lower() == "buy" else OrderType.SELL


def to_open_order(order: CoinexOrder) -> OpenOrder:
    return OpenOrder(
        id=order.id,
        market_id=order.market,
        order_type=to_order_type(order.type),
        price=order.price,
        original_quantity=order.amount,
        filled_quantity=order.deal_amount,
        status=order.status,
        creation_date=order.create_time,
        client_order_id=order.client_id,
    )


def to_open_orders(page: OrdersPage) -> list[OpenOrder]:
    """Orders of a single page; later pages are not fetched."""
    return [to_open_order(order) for order in page.orders]


def to_balance_info(wallets: Mapping[str, Wallet]) -> BalanceInfo:
    available: dict[str, Decimal] = {}
    on_hold: dict[str, Decimal] = {}
    for currency, wallet in wallets.items():
        available[currency] = wallet.available
        on_hold[currency] = wallet.frozen
    return BalanceInfo(available=available, on_hold=on_hold)


def market_info_for(market_id: str, markets: Mapping[str, MarketInfo]) -> MarketInfo:
    info = markets.get(market_id)
    if info is None:
        raise NotFoundError(f"Market '{market_id}' not found in market info", market=market_id)
    return info


def fee_rate_for(market_id: str, markets: Mapping[str, MarketInfo]) -> Decimal:
    """Maker fee rate; CoinEx charges the same rate on both sides of a market."""
    return market_info_for(market_id, markets).maker_fee_rate


def latest_price(market_id: str, deals: list[Deal]) -> Decimal:
    if not deals:
        raise NotFoundError(f"No trades returned for market '{market_id}'", market=market_id)
    return deals[0].price
