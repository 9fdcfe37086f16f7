"""Multi-hop conversion through a sequence of hydrated relays."""

from __future__ import annotations

from collections.abc import Sequence

from relayswap.amm.bancor import BancorAMM, bancor
from relayswap.amm.base import SwapResult
from relayswap.errors import InvalidInputError
from relayswap.models.types import Quantity
from relayswap.pools.relay import Relay
from relayswap.routing.types import ConvertResult, HopResult, walk_tokens


def _hop_result(result: SwapResult) -> HopResult:
    return HopResult(
        relay_id=result.relay_id,
        amount_in=result.amount_in,
        amount_out=result.amount_out,
        fee=result.fee,
        slippage=result.slippage,
    )


def find_return(
    amount_in: Quantity,
    relays: Sequence[Relay],
    amm: BancorAMM = bancor,
) -> ConvertResult:
    """Convert an exact input along ``relays``.

    Each hop's truncated output is the next hop's input. The result's
    slippage is the highest single-hop slippage on the path.

    Raises:
        InvalidInputError: Empty path, or relays that do not chain from the input token
        InsufficientLiquidityError: A hop cannot serve its input
    """
    if not relays:
        raise InvalidInputError("Cannot convert along an empty path")
    walk_tokens(relays, amount_in.token)

    hops: list[HopResult] = []
    current = amount_in
    for relay in relays:
        hop = _hop_result(amm.simulate_swap(relay, current))
        hops.append(hop)
        current = hop.amount_out

    return ConvertResult(
        amount=current,
        hops=tuple(hops),
        slippage=max(hop.slippage for hop in hops),
    )


def find_cost(
    amount_out: Quantity,
    relays: Sequence[Relay],
    amm: BancorAMM = bancor,
) -> ConvertResult:
    """Input required to receive an exact output along ``relays``.

    Works backward from the last hop: each hop's required (fee-inclusive)
    input is the previous hop's desired output.

    Raises:
        InvalidInputError: Empty path, or relays that do not chain into the output token
        InsufficientLiquidityError: A hop cannot supply its output
    """
    if not relays:
        raise InvalidInputError("Cannot convert along an empty path")
    # Walk from the output so the path is validated against the target token
    tokens = list(reversed(walk_tokens(list(reversed(relays)), amount_out.token)))

    hops: list[HopResult] = []
    current = amount_out
    for index in range(len(relays) - 1, -1, -1):
        hop = _hop_result(amm.simulate_swap_exact_output(relays[index], tokens[index], current))
        hops.append(hop)
        current = hop.amount_in
    hops.reverse()

    return ConvertResult(
        amount=current,
        hops=tuple(hops),
        slippage=max(hop.slippage for hop in hops),
    )


__all__ = ["find_return", "find_cost"]
