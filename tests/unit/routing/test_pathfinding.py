"""Tests for the token graph and path search."""

from relayswap.models.types import TokenId
from relayswap.pools import PoolRegistry
from relayswap.routing.pathfinding import PathFinder, TokenGraph
from tests.helpers import (
    PBTC,
    PBTC_PETH,
    PETH,
    TLOS,
    TLOS_PBTC,
    TLOS_USDT,
    USDT,
    USDT_PETH,
    make_dry_relay,
    make_relay,
    qty,
)

# Second TLOS/USDT relay with an id sorting after TLOSUSD
TLOS_USDT_ALT = TokenId("relays.swaps", "TLOSUSX")


def chain_registry() -> PoolRegistry:
    """USDT - TLOS - PBTC - PETH."""
    return PoolRegistry(
        [
            make_dry_relay(TLOS, USDT, share=TLOS_USDT),
            make_dry_relay(TLOS, PBTC, share=TLOS_PBTC),
            make_dry_relay(PBTC, PETH, share=PBTC_PETH),
        ]
    )


class TestTokenGraph:
    def test_empty_registry(self) -> None:
        graph = TokenGraph.from_registry(PoolRegistry())
        assert graph.token_count == 0
        assert graph.relay_count == 0

    def test_edges_are_bidirectional(self) -> None:
        graph = TokenGraph.from_registry(chain_registry())
        assert graph.token_count == 4
        assert graph.relay_count == 3
        assert graph.get_neighbors(TLOS) == {USDT, PBTC}
        assert graph.get_neighbors(PBTC) == {TLOS, PETH}

    def test_edge_relays_sorted_by_id(self) -> None:
        registry = PoolRegistry(
            [
                make_dry_relay(TLOS, USDT, share=TLOS_USDT_ALT),
                make_dry_relay(USDT, TLOS, share=TLOS_USDT),
            ]
        )
        graph = TokenGraph.from_registry(registry)
        assert [relay.id for relay in graph.get_edge_relays(TLOS, USDT)] == [
            str(TLOS_USDT),
            str(TLOS_USDT_ALT),
        ]

    def test_disabled_relay_excluded(self) -> None:
        registry = chain_registry()
        registry.add_relay(make_relay(qty(1, TLOS), qty(1, USDT), share=TLOS_USDT, enabled=False))
        graph = TokenGraph.from_registry(registry)
        assert not graph.has_token(USDT)
        assert graph.relay_count == 2

    def test_invalid_relay_excluded(self) -> None:
        registry = PoolRegistry([make_dry_relay(TLOS, TLOS)])
        assert TokenGraph.from_registry(registry).token_count == 0


class TestFindPath:
    def test_direct(self) -> None:
        path = PathFinder(chain_registry()).find_path(TLOS, USDT)
        assert path is not None
        assert path.relay_ids == [str(TLOS_USDT)]

    def test_multi_hop(self) -> None:
        path = PathFinder(chain_registry()).find_path(USDT, PETH)
        assert path is not None
        assert path.tokens == [USDT, TLOS, PBTC, PETH]
        assert path.token_out == PETH
        assert len(path) == 3

    def test_string_token_ids(self) -> None:
        path = PathFinder(chain_registry()).find_path("tokens.swaps-USDT", "eth.ptokens-PETH")
        assert path is not None
        assert len(path) == 3

    def test_fewest_hops_preferred(self) -> None:
        registry = chain_registry()
        registry.add_dry(make_dry_relay(USDT, PETH, share=USDT_PETH))
        path = PathFinder(registry).find_path(USDT, PETH)
        assert path is not None
        assert path.relay_ids == [str(USDT_PETH)]

    def test_max_hops_bound(self) -> None:
        finder = PathFinder(chain_registry())
        assert finder.find_path(USDT, PETH, max_hops=2) is None
        assert finder.find_path(USDT, PETH, max_hops=3) is not None

    def test_same_token(self) -> None:
        assert PathFinder(chain_registry()).find_path(TLOS, TLOS) is None

    def test_unknown_token(self) -> None:
        assert PathFinder(chain_registry()).find_path(TLOS, TokenId("nowhere", "NOPE")) is None

    def test_exclude_relays(self) -> None:
        finder = PathFinder(chain_registry())
        assert finder.find_path(USDT, PETH, exclude=[str(TLOS_PBTC)]) is None

    def test_exclude_falls_back_to_parallel_relay(self) -> None:
        registry = chain_registry()
        registry.add_dry(make_dry_relay(TLOS, USDT, share=TLOS_USDT_ALT))
        finder = PathFinder(registry)
        assert finder.find_path(TLOS, USDT).relay_ids == [str(TLOS_USDT)]
        path = finder.find_path(TLOS, USDT, exclude=[str(TLOS_USDT)])
        assert path.relay_ids == [str(TLOS_USDT_ALT)]

    def test_deterministic(self) -> None:
        registry = chain_registry()
        registry.add_dry(make_dry_relay(TLOS, USDT, share=TLOS_USDT_ALT))
        first = PathFinder(registry).find_path(USDT, PETH)
        second = PathFinder(registry).find_path(USDT, PETH)
        assert first == second

    def test_results_cached_until_invalidated(self) -> None:
        finder = PathFinder(chain_registry())
        assert finder.find_path(USDT, PETH) is finder.find_path(USDT, PETH)
        graph = finder.graph
        finder.invalidate()
        assert finder.graph is not graph

    def test_cache_evicts_least_recently_used(self) -> None:
        finder = PathFinder(chain_registry(), cache_size=2)
        usdt_peth = finder.find_path(USDT, PETH)
        tlos_peth = finder.find_path(TLOS, PETH)
        assert finder.find_path(USDT, PETH) is usdt_peth
        finder.find_path(USDT, PBTC)
        # TLOS -> PETH was the least recently used entry
        assert finder.find_path(USDT, PETH) is usdt_peth
        recomputed = finder.find_path(TLOS, PETH)
        assert recomputed == tlos_peth
        assert recomputed is not tlos_peth

