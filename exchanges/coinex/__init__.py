"""
CoinEx exchange adapter (REST API v1).

Submodules split signing, request building, response decoding and mapping
into the generic trading types.
"""

from .client import CoinexClient  # noqa: F401
from .config import CoinexConfig  # noqa: F401
from .transport import HttpxTransport  # noqa: F401
