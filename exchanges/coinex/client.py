"""
CoinEx spot trading client (API v1).

Every operation is a single signed request: parameters are built here,
signed and encoded by ``request.build_request``, sent through the
``Transport`` collaborator, checked by ``messages.decode_envelope`` and
converted by ``mapping``. The client holds no mutable state beyond its
transport, so one instance can be shared between threads.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Callable, Mapping, TypeVar

from exchanges.base_client import Transport
from exchanges.coinex.config import CoinexConfig
from exchanges.coinex.mapping import (
    fee_rate_for,
    latest_price,
    market_info_for,
    to_balance_info,
    to_market_order_book,
    to_open_order,
    to_open_orders,
)
from exchanges.coinex.messages import (
    Envelope,
    MarketInfo,
    decode_envelope,
    parse_deals,
    parse_market_depth,
    parse_market_list,
    parse_markets,
    parse_order,
    parse_orders_page,
    parse_wallets,
)
from exchanges.coinex.request import build_request
from exchanges.coinex.signing import format_value
from exchanges.coinex.transport import HttpxTransport
from exchanges.errors import BusinessError, ExchangeAdapterError, NetworkError, ParseError
from trading.schemas import BalanceInfo, MarketOrderBook, OpenOrder, OrderType

logger = logging.getLogger(__name__)

T = TypeVar("T")

UNEXPECTED_ERROR_MSG = "Unexpected error has occurred in CoinEx exchange adapter."

DEPTH_LIMIT = 50
OPEN_ORDERS_PAGE = 1
OPEN_ORDERS_LIMIT = 100
# Main account; sub accounts are not supported.
ACCOUNT_ID = 0


class CoinexClient:
    """CoinEx implementation of ``TradingAdapter``."""

    name = "coinex"
    impl_name = "CoinEx Quantitative Trading API V1"

    def __init__(self, config: CoinexConfig, transport: Transport | None = None) -> None:
        self._config = config
        self._owns_transport = transport is None
        self._transport: Transport = transport or HttpxTransport(
            timeout=config.connection_timeout,
            non_fatal_error_codes=config.non_fatal_error_codes,
        )
        logger.info(
            "CoinEx client ready: base_url=%s market_depth_merge=%s",
            config.base_url,
            config.market_depth_merge,
        )

    @classmethod
    def from_options(
        cls, options: Mapping[str, Any], transport: Transport | None = None
    ) -> "CoinexClient":
        return cls(CoinexConfig.from_mapping(options), transport=transport)

    @property
    def config(self) -> CoinexConfig:
        return self._config

    def get_impl_name(self) -> str:
        return self.impl_name

    # ---------------------------------------------------------------------
    # Market data
    # ---------------------------------------------------------------------
    def get_market_orders(self, market_id: str) -> MarketOrderBook:
        params = {
            "market": market_id,
            "limit": DEPTH_LIMIT,
            "merge": self._config.market_depth_merge,
        }
        return self._call(
            "GET",
            "/market/depth",
            params,
            lambda data: to_market_order_book(market_id, parse_market_depth(data)),
        )

    def get_latest_market_price(self, market_id: str) -> Decimal:
        params = {"market": market_id, "limit": 1}
        return self._call(
            "GET",
            "/market/deals",
            params,
            lambda data: latest_price(market_id, parse_deals(data)),
        )

    def get_market_list(self) -> list[str]:
        return self._call("GET", "/market/list", None, parse_market_list)

    def get_market_info(self, market_id: str) -> MarketInfo:
        return self._call(
            "GET",
            "/market/info",
            {"market": market_id},
            lambda data: market_info_for(market_id, parse_markets(data)),
        )

    # ---------------------------------------------------------------------
    # Account and trading
    # ---------------------------------------------------------------------
    def get_your_open_orders(self, market_id: str) -> list[OpenOrder]:
        """Open orders on ``market_id``; only the first page of 100 is returned."""
        params = {
            "market": market_id,
            "page": OPEN_ORDERS_PAGE,
            "limit": OPEN_ORDERS_LIMIT,
            "account_id": ACCOUNT_ID,
        }
        return self._call(
            "GET",
            "/order/pending",
            params,
            lambda data: to_open_orders(parse_orders_page(data)),
        )

    def create_order(
        self,
        market_id: str,
        order_type: OrderType | str,
        quantity: Decimal,
        price: Decimal,
    ) -> OpenOrder:
        """Place a limit order; the returned order's ``id`` is the exchange order id.

        ``order_type`` may also be ``"buy"`` or ``"sell"`` in any case; any other
        side raises ``ExchangeAdapterError`` before a request is sent.
        """
        side = _order_side(order_type)
        params = {
            "market": market_id,
            "type": side.value,
            "amount": format_value(Decimal(str(quantity))),
            "price": format_value(Decimal(str(price))),
            "account_id": ACCOUNT_ID,
        }
        order = self._call(
            "POST",
            "/order/limit",
            params,
            lambda data: to_open_order(parse_order(data)),
        )
        logger.info("Created CoinEx %s order %s on %s", side.value, order.id, market_id)
        return order

    def cancel_order(self, order_id: str, market_id: str) -> bool:
        """True when CoinEx confirms the cancel; False when it refuses."""
        params = {"market": market_id, "id": order_id, "account_id": ACCOUNT_ID}
        try:
            self._call("DELETE", "/order/pending", params, lambda data: data)
        except BusinessError as exc:
            logger.info("CoinEx refused to cancel order %s on %s: %s", order_id, market_id, exc)
            return False
        return True

    def get_balance_info(self) -> BalanceInfo:
        return self._call(
            "GET",
            "/balance/info",
            None,
            lambda data: to_balance_info(parse_wallets(data)),
        )

    def get_percentage_of_buy_order_taken_for_exchange_fee(self, market_id: str) -> Decimal:
        # CoinEx buy fee equals sell fee.
        return self.get_percentage_of_sell_order_taken_for_exchange_fee(market_id)

    def get_percentage_of_sell_order_taken_for_exchange_fee(self, market_id: str) -> Decimal:
        return self._call(
            "GET",
            "/market/info",
            {"market": market_id},
            lambda data: fee_rate_for(market_id, parse_markets(data)),
        )

    def close(self) -> None:
        if self._owns_transport:
            self._transport.close()

    def __enter__(self) -> "CoinexClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _call(
        self,
        method: str,
        path: str,
        params: Mapping[str, Any] | None,
        mapper: Callable[[Any], T],
    ) -> T:
        try:
            envelope = self._request(method, path, params)
            return mapper(envelope.unwrap())
        except ExchangeAdapterError:
            raise
        except Exception as exc:
            logger.exception("%s %s %s", UNEXPECTED_ERROR_MSG, method, path)
            raise ExchangeAdapterError(UNEXPECTED_ERROR_MSG) from exc

    def _request(self, method: str, path: str, params: Mapping[str, Any] | None) -> Envelope:
        request = build_request(
            self._config.base_url,
            path,
            params,
            method,
            self._config.credentials,
        )
        logger.debug("CoinEx request: %s %s", request.method, path)
        try:
            response = self._transport.request(
                request.url, request.method, request.body, request.headers
            )
        except OSError as exc:
            raise NetworkError(f"Failed to connect to exchange: {exc}") from exc
        logger.debug(
            "CoinEx response: %s %s -> HTTP %s %s",
            request.method,
            path,
            response.status_code,
            response.payload,
        )

        try:
            return decode_envelope(response.payload)
        except ParseError as exc:
            if not response.ok:
                raise ExchangeAdapterError(
                    f"CoinEx {method} {path} failed with HTTP {response.status_code}",
                    payload=response.payload,
                ) from exc
            raise


def _order_side(order_type: OrderType | str) -> OrderType:
    if isinstance(order_type, OrderType):
        return order_type
    try:
        return OrderType(str(order_type).lower())
    except ValueError as exc:
        raise ExchangeAdapterError(f"Unknown order side: {order_type!r}") from exc
