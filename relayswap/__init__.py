"""RelaySwap - pricing, routing and liquidity math for bonding-curve relays."""

from relayswap.errors import RelaySwapError
from relayswap.models.types import Quantity, Symbol, TokenId
from relayswap.pools.registry import PoolRegistry
from relayswap.routing.router import Router
from relayswap.service import QuoteService

__version__ = "0.1.0"
__all__ = [
    "Quantity",
    "Symbol",
    "TokenId",
    "PoolRegistry",
    "Router",
    "QuoteService",
    "RelaySwapError",
    "__version__",
]
