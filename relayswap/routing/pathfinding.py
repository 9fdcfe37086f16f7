"""Token graph and pathfinding for multi-hop routing.

Nodes are token identities and every routable relay contributes one
undirected edge between its two reserve tokens, labelled with the relay
id. The graph is built from the registry's dry relays, so paths can be
found before any balances are fetched.
"""

from __future__ import annotations

from collections import OrderedDict, deque
from collections.abc import Iterable
from typing import TYPE_CHECKING

import structlog

from relayswap.constants import DEFAULT_MAX_HOPS, PATH_CACHE_SIZE
from relayswap.models.types import TokenId, as_token_id
from relayswap.pools.relay import DryRelay
from relayswap.routing.types import Path

logger = structlog.get_logger()

if TYPE_CHECKING:
    from relayswap.pools.registry import PoolRegistry


class TokenGraph:
    """Graph of tokens connected by relays.

    Adjacency maps each token to its neighbors and, per neighbor, the ids
    of the relays trading that pair. This is a pure data structure with no
    caching; caching is handled by PathFinder.
    """

    def __init__(self) -> None:
        self._adjacency: dict[TokenId, dict[TokenId, set[str]]] = {}
        self._relays: dict[str, DryRelay] = {}

    @classmethod
    def from_registry(cls, registry: PoolRegistry) -> TokenGraph:
        """Build a TokenGraph from the routable relays of a registry."""
        graph = cls()
        for relay in registry.dry_relays():
            if not registry.is_routable(relay.id):
                logger.warning(
                    "relay_excluded_from_graph",
                    relay=relay.id,
                    reason="invalid reserves" if not relay.is_valid else "disabled",
                )
                continue
            graph.add_relay(relay)
        return graph

    def add_relay(self, relay: DryRelay) -> None:
        """Add a bidirectional edge for a valid relay."""
        token_a, token_b = relay.reserves
        self._relays[relay.id] = relay
        self._adjacency.setdefault(token_a, {}).setdefault(token_b, set()).add(relay.id)
        self._adjacency.setdefault(token_b, {}).setdefault(token_a, set()).add(relay.id)

    def get_neighbors(self, token: TokenId | str) -> set[TokenId]:
        return set(self._adjacency.get(as_token_id(token), {}))

    def get_edge_relays(self, token_a: TokenId, token_b: TokenId) -> list[DryRelay]:
        """Relays trading a token pair, ordered by relay id."""
        relay_ids = self._adjacency.get(token_a, {}).get(token_b, set())
        return [self._relays[relay_id] for relay_id in sorted(relay_ids)]

    def has_token(self, token: TokenId | str) -> bool:
        return as_token_id(token) in self._adjacency

    @property
    def token_count(self) -> int:
        return len(self._adjacency)

    @property
    def relay_count(self) -> int:
        return len(self._relays)

    def _sorted_neighbors(self, token: TokenId) -> list[TokenId]:
        return sorted(self._adjacency.get(token, {}), key=str)


class PathFinder:
    """Facade for pathfinding operations with caching.

    PathFinder owns a TokenGraph built lazily from the registry and is
    invalidated whenever the registry's relays change.

    Usage:
        finder = registry.pathfinder
        path = finder.find_path(token_in, token_out)
    """

    def __init__(self, registry: PoolRegistry, cache_size: int = PATH_CACHE_SIZE) -> None:
        self._registry = registry
        self._graph: TokenGraph | None = None
        # LRU cache for path queries: (token_in, token_out, max_hops, excluded) -> path or None
        self._path_cache: OrderedDict[tuple[TokenId, TokenId, int, frozenset[str]], Path | None] = (
            OrderedDict()
        )
        self._cache_size = cache_size

    def invalidate(self) -> None:
        """Drop the cached graph and paths."""
        self._graph = None
        self._path_cache.clear()

    @property
    def graph(self) -> TokenGraph:
        """Get or build the token graph (lazy initialization)."""
        if self._graph is None:
            self._graph = TokenGraph.from_registry(self._registry)
        return self._graph

    def find_path(
        self,
        token_in: TokenId | str,
        token_out: TokenId | str,
        max_hops: int = DEFAULT_MAX_HOPS,
        exclude: Iterable[str] = (),
    ) -> Path | None:
        """Find a path with the fewest hops from token_in to token_out.

        BFS over tokens; ties are broken by token and relay id so the same
        graph always yields the same path.

        Args:
            token_in: Source token
            token_out: Destination token
            max_hops: Maximum number of relays on the path
            exclude: Relay ids that must not be used

        Returns:
            Path, or None if no path exists (or the tokens are equal)
        """
        source = as_token_id(token_in)
        target = as_token_id(token_out)
        excluded = frozenset(exclude)
        if source == target:
            return None

        cache_key = (source, target, max_hops, excluded)
        if cache_key in self._path_cache:
            self._path_cache.move_to_end(cache_key)
            return self._path_cache[cache_key]

        graph = self.graph
        result: Path | None = None
        if graph.has_token(source) and graph.has_token(target):
            result = self._bfs(graph, source, target, max_hops, excluded)

        self._path_cache[cache_key] = result
        if len(self._path_cache) > self._cache_size:
            self._path_cache.popitem(last=False)
        return result

    @staticmethod
    def _bfs(
        graph: TokenGraph,
        source: TokenId,
        target: TokenId,
        max_hops: int,
        excluded: frozenset[str],
    ) -> Path | None:
        queue: deque[tuple[TokenId, tuple[DryRelay, ...]]] = deque([(source, ())])
        visited = {source}

        while queue:
            current, hops = queue.popleft()
            if len(hops) >= max_hops:
                continue
            for neighbor in graph._sorted_neighbors(current):
                if neighbor in visited:
                    continue
                usable = [r for r in graph.get_edge_relays(current, neighbor) if r.id not in excluded]
                if not usable:
                    continue
                new_hops = hops + (usable[0],)
                if neighbor == target:
                    return Path(token_in=source, hops=new_hops)
                visited.add(neighbor)
                queue.append((neighbor, new_hops))
        return None


__all__ = ["TokenGraph", "PathFinder"]
