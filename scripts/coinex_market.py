"""
Command-line helper for querying and trading on CoinEx.

Usage examples:
    python scripts/coinex_market.py book --market BTCUSDT
    python scripts/coinex_market.py price --market BTCUSDT
    python scripts/coinex_market.py balances
    python scripts/coinex_market.py place \
        --market BTCUSDT --side buy --amount 0.001 --price 24000
    python scripts/coinex_market.py cancel --market BTCUSDT --order-id 123456

Environment variables:
    COINEX_ACCESS_ID
    COINEX_SECRET_KEY
    COINEX_BASE_URL (optional)
    COINEX_MARKET_DEPTH_MERGE (optional, defaults to 0.1)
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from decimal import Decimal

from exchanges.coinex import CoinexClient, CoinexConfig
from exchanges.errors import ConfigError, ExchangeAdapterError


def main() -> None:
    parser = argparse.ArgumentParser(description="CoinEx Trade Helper")
    parser.add_argument("--verbose", action="store_true", help="Log requests and responses")
    subparsers = parser.add_subparsers(dest="command", required=True)

    book_parser = subparsers.add_parser("book", help="Show the order book")
    book_parser.add_argument("--market", required=True, help="CoinEx market, e.g. BTCUSDT")

    price_parser = subparsers.add_parser("price", help="Show the latest trade price")
    price_parser.add_argument("--market", required=True, help="CoinEx market")

    fee_parser = subparsers.add_parser("fee", help="Show the fee rate of a market")
    fee_parser.add_argument("--market", required=True, help="CoinEx market")

    orders_parser = subparsers.add_parser("orders", help="List open orders")
    orders_parser.add_argument("--market", required=True, help="CoinEx market")

    subparsers.add_parser("markets", help="List market names")
    subparsers.add_parser("balances", help="Show wallet balances")

    place_parser = subparsers.add_parser("place", help="Submit a limit order")
    place_parser.add_argument("--market", required=True, help="CoinEx market")
    place_parser.add_argument("--side", required=True, choices=["buy", "sell"], help="Order side")
    place_parser.add_argument("--amount", required=True, type=Decimal, help="Order amount")
    place_parser.add_argument("--price", required=True, type=Decimal, help="Limit price")

    cancel_parser = subparsers.add_parser("cancel", help="Cancel an order")
    cancel_parser.add_argument("--market", required=True, help="CoinEx market")
    cancel_parser.add_argument("--order-id", required=True, help="CoinEx order id")

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s | %(levelname)s %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    try:
        config = CoinexConfig.from_env()
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        sys.exit(2)

    try:
        with CoinexClient(config) as client:
            if args.command == "book":
                result = client.get_market_orders(args.market)
            elif args.command == "price":
                result = client.get_latest_market_price(args.market)
            elif args.command == "fee":
                result = client.get_percentage_of_sell_order_taken_for_exchange_fee(args.market)
            elif args.command == "orders":
                result = client.get_your_open_orders(args.market)
            elif args.command == "markets":
                result = client.get_market_list()
            elif args.command == "balances":
                result = client.get_balance_info()
            elif args.command == "place":
                result = client.create_order(args.market, args.side, args.amount, args.price)
            else:  # cancel
                result = {"cancelled": client.cancel_order(args.order_id, args.market)}
    except ExchangeAdapterError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    print(json.dumps(_to_jsonable(result), indent=2))


def _to_jsonable(value):
    if dataclasses.is_dataclass(value):
        return {f.name: _to_jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, dict):
        return {key: _to_jsonable(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_to_jsonable(item) for item in value]
    if isinstance(value, Decimal):
        return format(value, "f")
    if hasattr(value, "isoformat"):
        return value.isoformat()
    if hasattr(value, "value"):
        return value.value
    return value


if __name__ == "__main__":
    main()
