from datetime import datetime, timezone
from decimal import Decimal

import pytest

from exchanges.coinex.messages import (
    decode_envelope,
    parse_deals,
    parse_market_depth,
    parse_market_list,
    parse_markets,
    parse_order,
    parse_orders_page,
    parse_wallets,
)
from exchanges.errors import BusinessError, ParseError

ORDER = {
    "id": 13,
    "market": "BTCUSDT",
    "type": "buy",
    "order_type": "limit",
    "amount": "2.5",
    "price": "100.10",
    "deal_amount": "1",
    "status": "part_deal",
    "create_time": 1513865441,
    "maker_fee_rate": "0.001",
    "client_id": "abc",
}


def test_success_envelope_unwraps_data():
    envelope = decode_envelope('{"code": 0, "message": "Ok", "data": ["BTCUSDT"]}')

    assert envelope.success
    assert envelope.unwrap() == ["BTCUSDT"]


@pytest.mark.parametrize("code", [1, 2, 24, 107, 227, 600])
def test_nonzero_code_raises_business_error(code):
    envelope = decode_envelope(f'{{"code": {code}, "message": "rejected", "data": {{"junk": true}}}}')

    with pytest.raises(BusinessError) as excinfo:
        envelope.unwrap()

    assert excinfo.value.code == code
    assert excinfo.value.message == "rejected"


def test_business_error_carries_symbolic_name():
    with pytest.raises(BusinessError) as excinfo:
        decode_envelope('{"code": 227, "message": "tonce check error"}').unwrap()

    assert excinfo.value.name == "ERROR_TONCE_CHECK"
    assert str(excinfo.value) == "[227] tonce check error"


@pytest.mark.parametrize(
    "raw",
    ["", "<html>502 Bad Gateway</html>", "[1, 2]", '{"message": "no code"}', '{"code": "0"}'],
)
def test_malformed_body_raises_parse_error(raw):
    with pytest.raises(ParseError):
        decode_envelope(raw)


def test_deeply_nested_body_raises_parse_error():
    with pytest.raises(ParseError):
        decode_envelope("[" * 200000)


def test_parse_error_is_not_business_error():
    assert not issubclass(ParseError, BusinessError)


def test_numbers_are_parsed_as_decimals():
    envelope = decode_envelope('{"code": 0, "data": {"asks": [[100.1, 0.3]], "bids": []}}')

    depth = parse_market_depth(envelope.unwrap())

    assert depth.asks == [(Decimal("100.1"), Decimal("0.3"))]


def test_parse_market_depth_keeps_source_order():
    depth = parse_market_depth(
        {"last": "100", "time": 1520000000000, "asks": [["101", "1"], ["102", "2"]], "bids": [["99", "3"]]}
    )

    assert [price for price, _ in depth.asks] == [Decimal("101"), Decimal("102")]
    assert depth.bids == [(Decimal("99"), Decimal("3"))]
    assert depth.last == Decimal("100")
    assert depth.time == 1520000000000


def test_parse_market_depth_rejects_bad_level():
    with pytest.raises(ParseError):
        parse_market_depth({"asks": [["100"]], "bids": []})


def test_parse_order_renames_wire_fields():
    order = parse_order(ORDER)

    assert order.id == "13"
    assert order.market == "BTCUSDT"
    assert order.amount == Decimal("2.5")
    assert order.deal_amount == Decimal("1")
    assert order.maker_fee_rate == Decimal("0.001")
    assert order.client_id == "abc"
    assert order.taker_fee_rate is None


def test_parse_order_converts_times_to_utc_datetimes():
    order = parse_order({**ORDER, "finished_time": 1513865500})

    assert order.create_time == datetime(2017, 12, 21, 14, 10, 41, tzinfo=timezone.utc)
    assert order.finished_time == datetime(2017, 12, 21, 14, 11, 40, tzinfo=timezone.utc)


def test_parse_order_rejects_out_of_range_create_time():
    with pytest.raises(ParseError, match="create_time"):
        parse_order({**ORDER, "create_time": 1513865441000000})


def test_parse_order_requires_amount():
    record = dict(ORDER)
    del record["amount"]

    with pytest.raises(ParseError, match="amount"):
        parse_order(record)


def test_parse_order_rejects_non_numeric_price():
    with pytest.raises(ParseError, match="price"):
        parse_order({**ORDER, "price": "abc"})


def test_parse_orders_page():
    page = parse_orders_page({"count": 1, "curr_page": 1, "has_next": True, "data": [ORDER]})

    assert page.has_next
    assert len(page.orders) == 1


def test_parse_wallets():
    wallets = parse_wallets({"BTC": {"available": "1.5", "frozen": "0.5"}, "USDT": {"available": "10"}})

    assert wallets["BTC"].frozen == Decimal("0.5")
    assert wallets["USDT"].frozen == Decimal("0")


def test_parse_markets_accepts_flat_and_nested_tables():
    record = {
        "name": "BTCUSDT",
        "taker_fee_rate": "0.002",
        "maker_fee_rate": "0.001",
        "min_amount": "0.001",
        "trading_name": "BTC",
        "trading_decimal": 8,
        "pricing_name": "USDT",
        "pricing_decimal": 2,
    }

    flat = parse_markets({"BTCUSDT": record})
    nested = parse_markets({"markets": {"BTCUSDT": record}})

    assert flat == nested
    assert flat["BTCUSDT"].pricing_decimal == 2
    assert parse_markets({"markets": {}}) == {}


def test_parse_deals_and_market_list():
    deals = parse_deals([{"id": 1, "type": "sell", "price": "100", "amount": "0.1", "date": 1513865441}])

    assert deals[0].price == Decimal("100")
    assert deals[0].date == datetime(2017, 12, 21, 14, 10, 41, tzinfo=timezone.utc)
    assert parse_deals(None) == []
    assert parse_market_list(["BTCUSDT", "ETHUSDT"]) == ["BTCUSDT", "ETHUSDT"]
