"""Relay price feeds derived from externally known token prices.

Given a unit price for at least one reserve of a two-reserve relay, the
other reserve's unit price follows from the reserve balance ratio, and the
relay's liquidity depth is the known side's balance valued at its price.
"""

from __future__ import annotations

import decimal
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal

from relayswap.errors import InvalidInputError, UnavailableDataError
from relayswap.math.decimal_utils import DECIMAL_HIGH_PREC_CONTEXT, to_decimal
from relayswap.models.types import TokenId
from relayswap.pools.relay import Relay, ReserveSide


@dataclass(frozen=True)
class RelayFeed:
    """Unit price of one reserve token as seen through a relay."""

    relay_id: str
    token: TokenId
    unit_price: Decimal
    liquidity_depth: Decimal
    apr: Decimal = Decimal(0)


def _known_price(side: ReserveSide, known_prices: Mapping[str, Decimal]) -> Decimal | None:
    price = known_prices.get(side.token.symbol)
    return None if price is None else to_decimal(price)


def _anchor(
    relay: Relay, known_prices: Mapping[str, Decimal]
) -> tuple[ReserveSide, Decimal, ReserveSide]:
    """Pick the first reserve with a known price as (known, price, other)."""
    if len(relay.reserves) != 2:
        raise InvalidInputError(f"Relay {relay.id} must have exactly two reserves for price feeds")
    first, second = relay.reserves
    for known, other in ((first, second), (second, first)):
        price = _known_price(known, known_prices)
        if price is not None:
            return known, price, other
    raise UnavailableDataError(
        f"No known price for either reserve of relay {relay.id} "
        f"({first.token.symbol}, {second.token.symbol})"
    )


def calculate_price_both_ways(
    relay: Relay, known_prices: Mapping[str, Decimal]
) -> dict[TokenId, Decimal]:
    """Unit prices of both reserves, anchored on a reserve of known price.

    Raises:
        InvalidInputError: Relay does not have exactly two reserves
        UnavailableDataError: No reserve has a known price, or a reserve is empty
    """
    known, known_price, other = _anchor(relay, known_prices)
    if not relay.has_reserve_balances:
        raise UnavailableDataError(f"Relay {relay.id} has a zero reserve balance")

    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        # Known tokens received per unit of the other token
        known_per_other = known.balance.amount / other.balance.amount
        other_price = known_per_other * known_price

    return {known.token: known_price, other.token: other_price}


def calculate_liquidity_depth(relay: Relay, known_prices: Mapping[str, Decimal]) -> Decimal:
    """Value of the relay's known-price reserve."""
    known, known_price, _ = _anchor(relay, known_prices)
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        return known.balance.amount * known_price


def build_relay_feeds(relay: Relay, known_prices: Mapping[str, Decimal]) -> list[RelayFeed]:
    """One feed per reserve token of a two-reserve relay.

    Args:
        relay: Hydrated relay with positive reserve balances
        known_prices: Unit prices keyed by symbol code

    Returns:
        Feeds in reserve order
    """
    prices = calculate_price_both_ways(relay, known_prices)
    depth = calculate_liquidity_depth(relay, known_prices)
    return [
        RelayFeed(
            relay_id=relay.id,
            token=side.token,
            unit_price=prices[side.token],
            liquidity_depth=depth,
            apr=relay.apr,
        )
        for side in relay.reserves
    ]


__all__ = [
    "RelayFeed",
    "calculate_price_both_ways",
    "calculate_liquidity_depth",
    "build_relay_feeds",
]
