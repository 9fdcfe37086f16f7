"""Tests for multi-hop conversion along a path."""

import pytest

from relayswap.amm import bancor
from relayswap.errors import InsufficientLiquidityError, InvalidInputError
from relayswap.routing.multihop import find_cost, find_return
from tests.helpers import (
    PBTC,
    PBTC_PETH,
    PETH,
    TLOS,
    TLOS_PBTC,
    TLOS_USDT,
    USDT,
    make_relay,
    qty,
)


@pytest.fixture
def three_hops():
    """TLOS -> USDT -> PBTC -> PETH with a shallow middle relay."""
    return [
        make_relay(qty(1_000_000, TLOS), qty(1_000_000, USDT), share=TLOS_USDT),
        make_relay(qty(1_000, USDT), qty(1_000, PBTC), share=TLOS_PBTC),
        make_relay(qty(1_000_000, PBTC), qty(1_000_000, PETH), share=PBTC_PETH),
    ]


class TestFindReturn:
    def test_single_hop_matches_relay(self, tlos_usdt_relay) -> None:
        result = find_return(qty(100), [tlos_usdt_relay])
        assert result.amount == bancor.simulate_swap(tlos_usdt_relay, qty(100)).amount_out
        assert not result.is_multihop

    def test_outputs_chain(self, three_hops) -> None:
        result = find_return(qty(10, TLOS), three_hops)
        assert [hop.amount_in.token for hop in result.hops] == [TLOS, USDT, PBTC]
        for previous, current in zip(result.hops, result.hops[1:], strict=False):
            assert current.amount_in == previous.amount_out
        assert result.amount == result.amount_out
        assert result.amount.token == PETH
        assert result.amount_in == qty(10, TLOS)
        assert result.path == [str(TLOS_USDT), str(TLOS_PBTC), str(PBTC_PETH)]

    def test_slippage_is_worst_hop(self, three_hops) -> None:
        result = find_return(qty(10, TLOS), three_hops)
        worst = result.hops[1]
        assert result.slippage == worst.slippage
        assert all(hop.slippage < worst.slippage for hop in (result.hops[0], result.hops[2]))

    def test_empty_path(self) -> None:
        with pytest.raises(InvalidInputError):
            find_return(qty(1), [])

    def test_broken_chain(self, tlos_usdt_relay, pbtc_peth_relay) -> None:
        with pytest.raises(InvalidInputError):
            find_return(qty(1), [tlos_usdt_relay, pbtc_peth_relay])

    def test_dust_output_rejected(self) -> None:
        shallow = [make_relay(qty(1, TLOS), qty("0.0001", USDT), share=TLOS_USDT)]
        with pytest.raises(InvalidInputError, match="too small"):
            find_return(qty("0.0001", TLOS), shallow)

    def test_insufficient_liquidity_propagates(self) -> None:
        amplified = make_relay(
            qty(1_000, TLOS), qty(10, USDT), share=TLOS_USDT, depths=(1_000, 1_000), amplifier=10
        )
        with pytest.raises(InsufficientLiquidityError):
            find_return(qty(500, TLOS), [amplified])


class TestFindCost:
    def test_output_exact_and_input_sufficient(self, three_hops) -> None:
        target = qty(5, PETH)
        result = find_cost(target, three_hops)
        assert result.amount_out == target
        assert result.amount.token == TLOS
        assert find_return(result.amount, three_hops).amount >= target

    def test_hops_in_path_order(self, three_hops) -> None:
        result = find_cost(qty(5, PETH), three_hops)
        assert result.path == [relay.id for relay in three_hops]
        for previous, current in zip(result.hops, result.hops[1:], strict=False):
            assert current.amount_in == previous.amount_out

    def test_slippage_is_worst_hop(self, three_hops) -> None:
        result = find_cost(qty(5, PETH), three_hops)
        assert result.slippage == max(hop.slippage for hop in result.hops)
        assert result.slippage == result.hops[1].slippage

    def test_with_fees(self, tlos_usdt_relay, tlos_pbtc_relay) -> None:
        relays = [tlos_usdt_relay, tlos_pbtc_relay]
        target = qty("0.01", PBTC, 8)
        result = find_cost(target, relays)
        assert result.amount.token == USDT
        assert all(hop.fee.is_zero for hop in result.hops[:1])
        assert result.hops[1].fee.is_positive
        assert find_return(result.amount, relays).amount >= target

    def test_target_not_reachable(self, tlos_usdt_relay) -> None:
        with pytest.raises(InvalidInputError):
            find_cost(qty(1, PBTC, 8), [tlos_usdt_relay])
