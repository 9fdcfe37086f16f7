"""Settings snapshot and token registry of a swap contract.

Both are read once per top-level operation and handed to the pricing
functions as immutable inputs.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from relayswap.constants import DEFAULT_AMPLIFIER, FEE_DENOMINATOR
from relayswap.errors import InvalidInputError, UnknownTokenError
from relayswap.models.types import Quantity, Symbol, TokenId, normalize_symbol_code


class TokenType(str, Enum):
    """How a token in the registry is priced."""

    CONNECTOR = "connector"
    LIQUIDITY = "liquidity"


@dataclass(frozen=True)
class Settings:
    """Swap contract settings.

    Attributes:
        fee: Conversion fee in parts-per-ten-thousand (30 = 0.3%)
        amplifier: Curve steepness; 1 is plain constant product
        proxy_contract: Contract holding the proxy token
        proxy_token: Token that maker prices are expressed against
        maker_token: The liquidity (maker) token
    """

    fee: Decimal
    proxy_contract: str
    proxy_token: Symbol
    maker_token: Symbol
    amplifier: Decimal = DEFAULT_AMPLIFIER

    def __post_init__(self) -> None:
        fee = Decimal(self.fee)
        if not 0 <= fee < FEE_DENOMINATOR:
            raise InvalidInputError(f"Fee must be in [0, {FEE_DENOMINATOR}): {self.fee}")
        object.__setattr__(self, "fee", fee)
        object.__setattr__(self, "amplifier", Decimal(self.amplifier))


@dataclass(frozen=True)
class TokenEntry:
    """One row of the swap contract's token table."""

    sym: Symbol
    contract: str
    balance: Quantity
    depth: Quantity
    reserve: Quantity
    maker_pool: Quantity
    token_type: TokenType

    @property
    def token_id(self) -> TokenId:
        return TokenId(self.contract, self.sym.code)

    @property
    def is_maker(self) -> bool:
        return self.token_type is TokenType.LIQUIDITY

    @property
    def is_connector(self) -> bool:
        return self.token_type is TokenType.CONNECTOR


def _symbol_key(key: str | Symbol | TokenId) -> str:
    if isinstance(key, Symbol):
        return key.code
    if isinstance(key, TokenId):
        return key.symbol
    return normalize_symbol_code(key)


class TokenTable(Mapping[str, TokenEntry]):
    """Read-only token registry keyed by symbol code.

    ``get()`` returns None for unknown symbols; ``require()`` raises
    UnknownTokenError. Keys may be given as a code string, a Symbol or a
    TokenId; lookups are case-insensitive.
    """

    def __init__(self, entries: Iterable[TokenEntry] = ()) -> None:
        self._entries: dict[str, TokenEntry] = {}
        for entry in entries:
            self._entries[entry.sym.code] = entry

    def __getitem__(self, key: str | Symbol | TokenId) -> TokenEntry:  # type: ignore[override]
        return self._entries[_symbol_key(key)]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str | Symbol | TokenId):
            return False
        try:
            return _symbol_key(key) in self._entries
        except InvalidInputError:
            return False

    def get(self, key: str | Symbol | TokenId, default: TokenEntry | None = None) -> TokenEntry | None:  # type: ignore[override]
        try:
            return self._entries.get(_symbol_key(key), default)
        except InvalidInputError:
            return default

    def require(self, key: str | Symbol | TokenId) -> TokenEntry:
        """Look up a token, raising UnknownTokenError when it is missing."""
        entry = self.get(key)
        if entry is None:
            raise UnknownTokenError(f"[symcode] token does not exist: {key}")
        return entry

    def connectors(self) -> list[TokenEntry]:
        return [entry for entry in self._entries.values() if entry.is_connector]


__all__ = ["TokenType", "Settings", "TokenEntry", "TokenTable"]
