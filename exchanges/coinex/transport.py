"""
Default transport for the CoinEx adapter, backed by ``httpx``.
"""

from __future__ import annotations

import logging
from typing import Iterable, Mapping

import httpx

from exchanges.base_client import HttpResponse
from exchanges.coinex.config import DEFAULT_CONNECTION_TIMEOUT, DEFAULT_NON_FATAL_ERROR_CODES
from exchanges.errors import NetworkError

logger = logging.getLogger(__name__)


class HttpxTransport:
    """Sends requests through a single ``httpx.Client``; no retries."""

    def __init__(
        self,
        timeout: float = DEFAULT_CONNECTION_TIMEOUT,
        non_fatal_error_codes: Iterable[int] = DEFAULT_NON_FATAL_ERROR_CODES,
    ) -> None:
        self._client = httpx.Client(timeout=timeout)
        self._non_fatal_error_codes = frozenset(non_fatal_error_codes)

    def request(
        self,
        url: str,
        method: str,
        body: str | None,
        headers: Mapping[str, str],
    ) -> HttpResponse:
        try:
            response = self._client.request(
                method,
                url,
                content=body.encode("utf-8") if body is not None else None,
                headers=dict(headers),
            )
        except httpx.TransportError as exc:
            logger.warning("%s %s failed: %s", method, _strip_query(url), exc)
            raise NetworkError(f"Failed to connect to exchange: {exc}") from exc

        if response.status_code in self._non_fatal_error_codes:
            logger.warning(
                "%s %s returned HTTP %s", method, _strip_query(url), response.status_code
            )
            raise NetworkError(
                f"Exchange unavailable (HTTP {response.status_code})",
                status_code=response.status_code,
                payload=response.text,
            )
        return HttpResponse(status_code=response.status_code, payload=response.text)

    def close(self) -> None:
        self._client.close()


def _strip_query(url: str) -> str:
    # Query strings carry the access id.
    return url.split("?", 1)[0]
