from decimal import Decimal

import pytest

from trading.schemas import BalanceInfo, MarketOrder, OpenOrder, OrderType


def test_open_order_remaining_quantity_never_negative_for_partial_fill():
    order = OpenOrder(
        id="1",
        market_id="BTCUSDT",
        order_type=OrderType.BUY,
        price=Decimal("100"),
        original_quantity=Decimal("0.3"),
        filled_quantity=Decimal("0.1"),
        status="part_deal",
    )

    assert order.quantity == Decimal("0.2")
    assert order.quantity >= 0
    assert order.total == Decimal("30")


def test_types_are_frozen():
    level = MarketOrder(OrderType.SELL, Decimal("1"), Decimal("2"), Decimal("2"))

    with pytest.raises(AttributeError):
        level.price = Decimal("3")


def test_order_type_values_match_wire_strings():
    assert OrderType("buy") is OrderType.BUY
    assert OrderType.SELL.value == "sell"


def test_balance_info_defaults_to_empty_buckets():
    balance = BalanceInfo()

    assert balance.available == {}
    assert balance.on_hold == {}
