"""
CoinEx response envelope and wire records.

Every CoinEx response is ``{"code": int, "message": str, "data": ...}``; the
call succeeded only when ``code == 0``. Wire field names are translated to
record attributes here, through the ``FIELDS`` table of each record, so that
exchange naming never leaks past this module.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, ClassVar, Mapping

from exchanges.errors import BusinessError, ParseError

SUCCESS = 0

ERROR_CODES: dict[int, str] = {
    SUCCESS: "SUCCESS",
    1: "ERROR_UNKNOWN",
    2: "ERROR_PARAMETER",
    3: "ERROR_INTERNAL",
    25: "ERROR_SIGNATURE",
    35: "ERROR_SERVICE_UNAVAILABLE",
    36: "ERROR_TIMEOUT",
    40: "ERROR_MAIN_SUB_ACCOUNTS",
    49: "ERROR_TRANSFER_SUB_ACCOUNT_REJECTED",
    107: "ERROR_INSUFFICIENT_BALANCE",
    115: "ERROR_FORBID_TRADING",
    227: "ERROR_TONCE_CHECK",
    600: "ERROR_ORDER_NUMBER_NOT_EXIST",
    601: "ERROR_BAD_USER_ORDER",
    602: "ERROR_BELOW_MIN_LIMIT",
    606: "ERROR_PRICE_DEVIATION_IS_TOO_LARGE",
    651: "ERROR_MERGE_DEPTH",
}


@dataclass(frozen=True, slots=True)
class Envelope:
    """Decoded ``{code, message, data}`` wrapper."""

    code: int
    message: str
    data: Any = None

    @property
    def success(self) -> bool:
        return self.code == SUCCESS

    def unwrap(self) -> Any:
        """Return ``data`` or raise ``BusinessError`` for a non-zero code."""
        if not self.success:
            raise BusinessError(
                self.code,
                self.message,
                name=ERROR_CODES.get(self.code),
                payload={"code": self.code, "message": self.message},
            )
        return self.data


def decode_envelope(raw: str | None) -> Envelope:
    if raw is None or not raw.strip():
        raise ParseError("Empty response body")
    try:
        payload = json.loads(raw, parse_float=Decimal)
    except (ValueError, RecursionError) as exc:
        raise ParseError(f"Response is not valid JSON: {exc}", payload=raw) from exc
    if not isinstance(payload, dict):
        raise ParseError("Response is not a JSON object", payload=raw)

    code = payload.get("code")
    if isinstance(code, bool) or not isinstance(code, int):
        raise ParseError(f"Response has no integer code: {code!r}", payload=raw)
    message = payload.get("message") or ""
    return Envelope(code=code, message=str(message), data=payload.get("data"))


# ---------------------------------------------------------------------------
# Field converters
# ---------------------------------------------------------------------------
def to_decimal(value: Any) -> Decimal:
    if isinstance(value, bool) or value is None:
        raise ParseError(f"Expected a number, got {value!r}")
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation as exc:
        raise ParseError(f"Expected a number, got {value!r}") from exc
    if not result.is_finite():
        raise ParseError(f"Expected a finite number, got {value!r}")
    return result


def to_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ParseError(f"Expected an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ParseError(f"Expected an integer, got {value!r}") from exc


def to_timestamp(value: Any) -> datetime:
    """Epoch seconds to an aware UTC datetime."""
    seconds = to_int(value)
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as exc:
        raise ParseError(f"Timestamp out of range: {value!r}") from exc


def to_str(value: Any) -> str:
    if isinstance(value, (dict, list)):
        raise ParseError(f"Expected a string, got {value!r}")
    return str(value)


def to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value in (0, 1):
        return bool(value)
    raise ParseError(f"Expected a boolean, got {value!r}")


# wire name -> (attribute, converter, required)
FieldTable = Mapping[str, tuple[str, Callable[[Any], Any], bool]]


def read_fields(record: Any, fields: FieldTable, kind: str) -> dict[str, Any]:
    """Convert one wire object into constructor keyword arguments."""
    if not isinstance(record, dict):
        raise ParseError(f"Expected a {kind} object, got {type(record).__name__}")
    values: dict[str, Any] = {}
    for wire_name, (attribute, convert, required) in fields.items():
        raw = record.get(wire_name)
        if raw is None or raw == "":
            if required:
                raise ParseError(f"{kind} is missing '{wire_name}'")
            continue
        try:
            values[attribute] = convert(raw)
        except ParseError as exc:
            raise ParseError(f"{kind}.{wire_name}: {exc.message}") from exc
    return values


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class Wallet:
    """Balance of one currency; ``frozen`` is held by open orders."""

    available: Decimal
    frozen: Decimal = Decimal("0")

    FIELDS: ClassVar[FieldTable] = {
        "available": ("available", to_decimal, True),
        "frozen": ("frozen", to_decimal, False),
    }


@dataclass(frozen=True, slots=True)
class MarketDepth:
    asks: list[tuple[Decimal, Decimal]] = field(default_factory=list)
    bids: list[tuple[Decimal, Decimal]] = field(default_factory=list)
    last: Decimal | None = None
    time: int | None = None

    FIELDS: ClassVar[FieldTable] = {
        "last": ("last", to_decimal, False),
        "time": ("time", to_int, False),
    }


@dataclass(frozen=True, slots=True)
class CoinexOrder:
    """An order as reported by the ``/order`` endpoints."""

    id: str
    market: str
    type: str
    amount: Decimal
    price: Decimal
    deal_amount: Decimal = Decimal("0")
    status: str = ""
    order_type: str | None = None
    create_time: datetime | None = None
    finished_time: datetime | None = None
    avg_price: Decimal | None = None
    deal_fee: Decimal | None = None
    deal_money: Decimal | None = None
    maker_fee_rate: Decimal | None = None
    taker_fee_rate: Decimal | None = None
    client_id: str | None = None

    FIELDS: ClassVar[FieldTable] = {
        "id": ("id", to_str, True),
        "market": ("market", to_str, True),
        "type": ("type", to_str, True),
        "amount": ("amount", to_decimal, True),
        "price": ("price", to_decimal, True),
        "deal_amount": ("deal_amount", to_decimal, False),
        "status": ("status", to_str, False),
        "order_type": ("order_type", to_str, False),
        "create_time": ("create_time", to_timestamp, False),
        "finished_time": ("finished_time", to_timestamp, False),
        "avg_price": ("avg_price", to_decimal, False),
        "deal_fee": ("deal_fee", to_decimal, False),
        "deal_money": ("deal_money", to_decimal, False),
        "maker_fee_rate": ("maker_fee_rate", to_decimal, False),
        "taker_fee_rate": ("taker_fee_rate", to_decimal, False),
        "client_id": ("client_id", to_str, False),
    }


@dataclass(frozen=True, slots=True)
class OrdersPage:
    """One page of ``/order/pending`` results."""

    orders: list[CoinexOrder] = field(default_factory=list)
    count: int = 0
    curr_page: int = 1
    has_next: bool = False

    FIELDS: ClassVar[FieldTable] = {
        "count": ("count", to_int, False),
        "curr_page": ("curr_page", to_int, False),
        "has_next": ("has_next", to_bool, False),
    }


@dataclass(frozen=True, slots=True)
class MarketInfo:
    name: str
    taker_fee_rate: Decimal
    maker_fee_rate: Decimal
    min_amount: Decimal | None = None
    trading_name: str | None = None
    trading_decimal: int | None = None
    pricing_name: str | None = None
    pricing_decimal: int | None = None

    FIELDS: ClassVar[FieldTable] = {
        "name": ("name", to_str, True),
        "taker_fee_rate": ("taker_fee_rate", to_decimal, True),
        "maker_fee_rate": ("maker_fee_rate", to_decimal, True),
        "min_amount": ("min_amount", to_decimal, False),
        "trading_name": ("trading_name", to_str, False),
        "trading_decimal": ("trading_decimal", to_int, False),
        "pricing_name": ("pricing_name", to_str, False),
        "pricing_decimal": ("pricing_decimal", to_int, False),
    }


@dataclass(frozen=True, slots=True)
class Deal:
    """A public trade tick from ``/market/deals``."""

    id: str
    type: str
    price: Decimal
    amount: Decimal
    date: datetime | None = None

    FIELDS: ClassVar[FieldTable] = {
        "id": ("id", to_str, True),
        "type": ("type", to_str, True),
        "price": ("price", to_decimal, True),
        "amount": ("amount", to_decimal, True),
        "date": ("date", to_timestamp, False),
    }


# ---------------------------------------------------------------------------
# Payload parsers, one per endpoint family
# ---------------------------------------------------------------------------
def parse_wallets(data: Any) -> dict[str, Wallet]:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ParseError("Balance data is not an object")
    return {
        currency: Wallet(**read_fields(record, Wallet.FIELDS, f"wallet {currency}"))
        for currency, record in data.items()
    }


def parse_market_depth(data: Any) -> MarketDepth:
    values = read_fields(data, MarketDepth.FIELDS, "market depth")
    return MarketDepth(
        asks=_parse_levels(data.get("asks"), "asks"),
        bids=_parse_levels(data.get("bids"), "bids"),
        **values,
    )


def _parse_levels(levels: Any, side: str) -> list[tuple[Decimal, Decimal]]:
    if levels is None:
        return []
    if not isinstance(levels, list):
        raise ParseError(f"Depth {side} is not a list")
    parsed = []
    for level in levels:
        if not isinstance(level, list) or len(level) < 2:
            raise ParseError(f"Depth {side} level is not a [price, amount] pair: {level!r}")
        parsed.append((to_decimal(level[0]), to_decimal(level[1])))
    return parsed


def parse_order(data: Any) -> CoinexOrder:
    return CoinexOrder(**read_fields(data, CoinexOrder.FIELDS, "order"))


def parse_orders_page(data: Any) -> OrdersPage:
    values = read_fields(data, OrdersPage.FIELDS, "orders page")
    records = data.get("data") or []
    if not isinstance(records, list):
        raise ParseError("Orders page data is not a list")
    return OrdersPage(orders=[parse_order(record) for record in records], **values)


def parse_markets(data: Any) -> dict[str, MarketInfo]:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ParseError("Market info data is not an object")
    # Some responses nest the table under "markets".
    if set(data) == {"markets"} and isinstance(data["markets"], dict):
        data = data["markets"]
    return {
        market: MarketInfo(**read_fields(record, MarketInfo.FIELDS, f"market {market}"))
        for market, record in data.items()
    }


def parse_deals(data: Any) -> list[Deal]:
    if data is None:
        return []
    if not isinstance(data, list):
        raise ParseError("Deals data is not a list")
    return [Deal(**read_fields(record, Deal.FIELDS, "deal")) for record in data]


def parse_market_list(data: Any) -> list[str]:
    if data is None:
        return []
    if not isinstance(data, list):
        raise ParseError("Market list data is not a list")
    return [to_str(name) for name in data]
