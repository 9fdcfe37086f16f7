"""Core value types and swap-contract snapshots.

Ledger row models live in ``relayswap.models.rows``.
"""

from relayswap.models.snapshot import Settings, TokenEntry, TokenTable, TokenType
from relayswap.models.types import Quantity, Symbol, TokenId, as_token_id

__all__ = [
    # Types
    "Symbol",
    "TokenId",
    "Quantity",
    "as_token_id",
    # Snapshots
    "Settings",
    "TokenEntry",
    "TokenTable",
    "TokenType",
]
