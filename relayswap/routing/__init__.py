"""Conversion routing logic.

Module structure:
- types.py: Path, HopResult and ConvertResult
- pathfinding.py: TokenGraph and PathFinder for route discovery
- multihop.py: find_return / find_cost along a sequence of relays
- router.py: Router facade over a PoolRegistry
"""

from relayswap.routing.multihop import find_cost, find_return
from relayswap.routing.pathfinding import PathFinder, TokenGraph
from relayswap.routing.router import Quote, Router
from relayswap.routing.types import ConvertResult, HopResult, Path

__all__ = [
    "ConvertResult",
    "HopResult",
    "Path",
    "PathFinder",
    "Quote",
    "Router",
    "TokenGraph",
    "find_cost",
    "find_return",
]
