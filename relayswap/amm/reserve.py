"""Reserve model for amplified bonding curves.

A reserve's configured depth separates its nominal liquidity from the
amplifier-scaled curve steepness. The virtual upper balance fed to the
constant-product formula is:

    ratio = balance / depth
    upper = amplifier * depth - depth + depth * ratio
          = depth * (amplifier - 1 + ratio)

With amplifier 1 the upper balance equals the live balance. Higher
amplifiers add virtual liquidity and flatten the curve.
"""

from __future__ import annotations

import decimal
from decimal import Decimal
from typing import TYPE_CHECKING

from relayswap.errors import ConfigurationError, InsufficientLiquidityError
from relayswap.math.decimal_utils import DECIMAL_HIGH_PREC_CONTEXT

if TYPE_CHECKING:
    from relayswap.models.types import TokenId
    from relayswap.pools.relay import Relay, ReserveSide


def get_upper(balance: Decimal, depth: Decimal, amplifier: Decimal) -> Decimal:
    """Compute the virtual upper balance of one reserve.

    Args:
        balance: Live reserve balance
        depth: Configured depth (must be strictly positive)
        amplifier: Curve amplifier from the settings snapshot

    Returns:
        Virtual upper balance

    Raises:
        ConfigurationError: If depth is zero or negative
    """
    if depth <= 0:
        raise ConfigurationError(f"Reserve depth must be positive, got {depth}")
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        ratio = balance / depth
        return amplifier * depth - depth + depth * ratio


def get_uppers(
    base_balance: Decimal,
    base_depth: Decimal,
    quote_balance: Decimal,
    quote_depth: Decimal,
    amplifier: Decimal,
) -> tuple[Decimal, Decimal]:
    """Virtual upper balances for both sides as (base_upper, quote_upper)."""
    return (
        get_upper(base_balance, base_depth, amplifier),
        get_upper(quote_balance, quote_depth, amplifier),
    )


def _side_upper(side: ReserveSide, amplifier: Decimal, relay_id: str) -> Decimal:
    # An unconfigured depth falls back to the balance, so an empty side is a
    # liquidity problem rather than a configuration one.
    if side.depth is None and not side.balance.is_positive:
        raise InsufficientLiquidityError(f"{side.token} reserve of relay {relay_id} is empty")
    upper = get_upper(side.balance.amount, side.effective_depth, amplifier)
    if upper <= 0:
        raise InsufficientLiquidityError(f"{side.token} reserve of relay {relay_id} is empty")
    return upper


def relay_uppers(relay: Relay, token_in: TokenId | str) -> tuple[Decimal, Decimal]:
    """Virtual upper balances of a relay ordered as (upper_in, upper_out)."""
    side_in, side_out = relay.get_reserves(token_in)
    return (
        _side_upper(side_in, relay.amplifier, relay.id),
        _side_upper(side_out, relay.amplifier, relay.id),
    )


__all__ = ["get_upper", "get_uppers", "relay_uppers"]
