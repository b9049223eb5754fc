"""
Builds signed CoinEx requests ready for a transport.
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass
from typing import Any, Mapping

from exchanges.base_client import ExchangeCredentials
from exchanges.coinex.signing import canonical_query, format_value, sign

CONTENT_TYPE = "application/json"
ACCEPT_TYPE = "*/*"
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 6.1; WOW64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/39.0.2171.71 Safari/537.36"
)

BODY_METHODS = frozenset({"POST"})
QUERY_METHODS = frozenset({"GET", "DELETE"})


@dataclass(frozen=True, slots=True)
class PreparedRequest:
    """Everything a transport needs to execute one call."""

    url: str
    method: str
    headers: dict[str, str]
    body: str | None = None


def current_tonce() -> int:
    """Milliseconds since the Unix epoch.

    CoinEx rejects a tonce more than 60 seconds away from its own clock
    (error 227), so the host clock must be kept in sync.
    """
    return int(time.time() * 1000)


def build_request(
    base_url: str,
    path: str,
    params: Mapping[str, Any] | None,
    method: str,
    credentials: ExchangeCredentials,
    tonce: int | None = None,
) -> PreparedRequest:
    method = method.upper()
    if method not in BODY_METHODS | QUERY_METHODS:
        raise ValueError(f"Unsupported HTTP method: {method}")

    signed_params: dict[str, Any] = dict(params or {})
    signed_params["access_id"] = credentials.access_id
    signed_params["tonce"] = current_tonce() if tonce is None else tonce

    headers = {
        "Content-Type": CONTENT_TYPE,
        "Accept": ACCEPT_TYPE,
        "User-Agent": USER_AGENT,
        "authorization": sign(signed_params, credentials.secret_key),
    }

    url = f"{base_url}{path}"
    body = None
    if method in BODY_METHODS:
        body = json.dumps(signed_params, separators=(",", ":"), default=format_value)
    else:
        url = f"{url}?{canonical_query(signed_params)}"
    return PreparedRequest(url=url, method=method, headers=headers, body=body)
