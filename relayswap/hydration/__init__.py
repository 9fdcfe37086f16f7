"""Ledger reads and relay hydration."""

from relayswap.hydration.hydrator import (
    HydrationResult,
    hydrate_dry_relays,
    hydrate_legacy_relay,
    hydrate_multi_relays,
    hydrate_relays,
)
from relayswap.hydration.reader import HttpLedgerReader, LedgerReader

__all__ = [
    "LedgerReader",
    "HttpLedgerReader",
    "HydrationResult",
    "hydrate_legacy_relay",
    "hydrate_dry_relays",
    "hydrate_multi_relays",
    "hydrate_relays",
]
