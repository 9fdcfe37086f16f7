"""Test helpers module for shared test utilities.

This module consolidates common test utilities to reduce duplication:
- constants: Token identities and contracts
- factories: Quantity, relay, token table and settings factory functions
"""

from tests.helpers.constants import (
    MAKER_CODE,
    MULTI_CONTRACT,
    PBTC,
    PBTC_PETH,
    PETH,
    SHARE_CONTRACT,
    SWAP_CONTRACT,
    TLOS,
    TLOS_PBTC,
    TLOS_USDT,
    USDT,
    USDT_PETH,
)
from tests.helpers.factories import (
    make_dry_relay,
    make_entry,
    make_maker_entry,
    make_relay,
    make_settings,
    make_tokens,
    qty,
)

__all__ = [
    # Constants
    "TLOS",
    "USDT",
    "PBTC",
    "PETH",
    "TLOS_USDT",
    "TLOS_PBTC",
    "PBTC_PETH",
    "USDT_PETH",
    "SWAP_CONTRACT",
    "MULTI_CONTRACT",
    "SHARE_CONTRACT",
    "MAKER_CODE",
    # Factories
    "qty",
    "make_relay",
    "make_dry_relay",
    "make_entry",
    "make_maker_entry",
    "make_tokens",
    "make_settings",
]
