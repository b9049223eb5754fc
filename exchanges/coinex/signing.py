"""
CoinEx request signing.

The signature is the MD5 digest of the canonical query string followed by
``&secret_key=<secret>``, rendered as 32 uppercase hex characters and sent in
the ``authorization`` header.
"""

from __future__ import annotations

import hashlib
from datetime import datetime
from decimal import Decimal
from typing import Any, Mapping

from exchanges.errors import ConfigError

DIGEST_NAME = "md5"


def format_value(value: Any) -> str:
    """Render a parameter value the way it appears in query strings and signatures."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Decimal):
        return format(value, "f")
    if isinstance(value, datetime):
        return str(int(value.timestamp() * 1000))
    return str(value)


def canonical_query(params: Mapping[str, Any]) -> str:
    """Join ``key=value`` pairs with ``&`` in ascending key order."""
    return "&".join(f"{key}={format_value(params[key])}" for key in sorted(params))


def signature_payload(params: Mapping[str, Any], secret_key: str) -> str:
    """String fed to the digest; contains the secret and must never be logged."""
    return f"{canonical_query(params)}&secret_key={secret_key}"


def sign(params: Mapping[str, Any], secret_key: str) -> str:
    if not secret_key:
        raise ConfigError("Cannot sign request without a secret key")
    try:
        digest = hashlib.new(DIGEST_NAME)
    except ValueError as exc:
        # Never fall back to an unsigned request.
        raise ConfigError(f"Digest algorithm '{DIGEST_NAME}' is unavailable") from exc
    digest.update(signature_payload(params, secret_key).encode("utf-8"))
    return digest.hexdigest().upper()
