"""Pricing over swap-contract snapshots.

This package provides:
- Forward and inverse conversion fees, fee-scale normalization
- Spot, maker spot and quoted prices over a token table
- Fee-adjusted rates and slippage
- Relay price feeds from externally known prices

Usage:
    from relayswap.pricing import get_rate, get_slippage

    out = get_rate(quantity, "USDT", tokens, settings)
    slippage = get_slippage(quantity, "USDT", tokens, settings)
"""

from relayswap.pricing.feeds import (
    RelayFeed,
    build_relay_feeds,
    calculate_liquidity_depth,
    calculate_price_both_ways,
)
from relayswap.pricing.fees import get_fee, get_inverse_fee, normalize_fee
from relayswap.pricing.price import (
    check_quantity,
    check_remaining_reserve,
    get_inverse_price,
    get_inverse_rate,
    get_maker_spot_price,
    get_pool_balance,
    get_price,
    get_rate,
    get_slippage,
    get_spot_price,
)

__all__ = [
    # Fees
    "get_fee",
    "get_inverse_fee",
    "normalize_fee",
    # Prices
    "check_quantity",
    "check_remaining_reserve",
    "get_spot_price",
    "get_maker_spot_price",
    "get_pool_balance",
    "get_price",
    "get_inverse_price",
    "get_rate",
    "get_inverse_rate",
    "get_slippage",
    # Feeds
    "RelayFeed",
    "build_relay_feeds",
    "calculate_price_both_ways",
    "calculate_liquidity_depth",
]
