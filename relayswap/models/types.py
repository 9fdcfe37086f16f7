"""Core value types: symbols, token identities and quantities.

A token is identified by the contract that issues it plus its symbol code.
Quantities carry that identity and a fixed precision; arithmetic between
quantities of different tokens fails loudly.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from relayswap.errors import InvalidInputError, TokenMismatchError
from relayswap.math.decimal_utils import quantize_down, to_decimal

# Symbol codes are 1-7 uppercase letters
SYMBOL_CODE_PATTERN = re.compile(r"^[A-Z]{1,7}$")

# Account names: up to 12 chars of a-z, 1-5 and dots
ACCOUNT_NAME_PATTERN = re.compile(r"^[a-z1-5.]{1,12}$")

MAX_PRECISION = 18


def normalize_symbol_code(code: str, *, validate: bool = True) -> str:
    """Normalize a symbol code to its canonical uppercase form.

    Args:
        code: Symbol code in any case, surrounding whitespace allowed
        validate: If True (default), raises InvalidInputError for codes that
                  are not 1-7 letters.

    Returns:
        Uppercase symbol code
    """
    normalized = code.strip().upper()
    if validate and not SYMBOL_CODE_PATTERN.match(normalized):
        raise InvalidInputError(f"Invalid symbol code: {code!r}")
    return normalized


def normalize_account(name: str) -> str:
    """Normalize an account (contract) name to lowercase."""
    normalized = name.strip().lower()
    if not ACCOUNT_NAME_PATTERN.match(normalized):
        raise InvalidInputError(f"Invalid account name: {name!r}")
    return normalized


@dataclass(frozen=True)
class Symbol:
    """A symbol code with its on-ledger precision (e.g. ``4,TLOS``)."""

    code: str
    precision: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "code", normalize_symbol_code(self.code))
        if not 0 <= self.precision <= MAX_PRECISION:
            raise InvalidInputError(f"Invalid precision {self.precision} for {self.code}")

    @classmethod
    def parse(cls, text: str) -> Symbol:
        """Parse the ``precision,CODE`` form used by ledger tables."""
        try:
            precision, code = text.split(",")
            return cls(code=code, precision=int(precision))
        except ValueError as err:
            raise InvalidInputError(f"Invalid symbol: {text!r}") from err

    def __str__(self) -> str:
        return f"{self.precision},{self.code}"


@dataclass(frozen=True)
class TokenId:
    """Immutable (contract, symbol code) identity of a token."""

    contract: str
    symbol: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "contract", normalize_account(self.contract))
        object.__setattr__(self, "symbol", normalize_symbol_code(self.symbol))

    @classmethod
    def parse(cls, token_id: str) -> TokenId:
        """Parse the ``contract-SYMBOL`` string form."""
        contract, sep, symbol = token_id.rpartition("-")
        if not sep or not contract:
            raise InvalidInputError(f"Invalid token id: {token_id!r}")
        return cls(contract=contract, symbol=symbol)

    def __str__(self) -> str:
        return f"{self.contract}-{self.symbol}"


def as_token_id(value: TokenId | str) -> TokenId:
    """Accept either a TokenId or its string form."""
    if isinstance(value, TokenId):
        return value
    return TokenId.parse(value)


@dataclass(frozen=True)
class Quantity:
    """Fixed-precision amount of a specific token.

    The amount is truncated to ``precision`` decimal places on construction,
    matching how the ledger stores integer minimal units.
    """

    amount: Decimal
    token: TokenId
    precision: int

    def __post_init__(self) -> None:
        if not 0 <= self.precision <= MAX_PRECISION:
            raise InvalidInputError(f"Invalid precision {self.precision} for {self.token}")
        object.__setattr__(
            self, "amount", quantize_down(to_decimal(self.amount), self.precision)
        )

    @classmethod
    def zero(cls, token: TokenId, precision: int) -> Quantity:
        return cls(Decimal(0), token, precision)

    @classmethod
    def parse(cls, text: str, contract: str) -> Quantity:
        """Parse a ledger asset string such as ``"1.0000 TLOS"``.

        Precision is taken from the number of decimal places.
        """
        try:
            amount_text, code = text.strip().split(" ")
        except ValueError as err:
            raise InvalidInputError(f"Invalid asset: {text!r}") from err
        _, _, fraction = amount_text.partition(".")
        return cls(
            amount=to_decimal(amount_text),
            token=TokenId(contract=contract, symbol=code),
            precision=len(fraction),
        )

    @property
    def symbol(self) -> Symbol:
        return Symbol(self.token.symbol, self.precision)

    @property
    def is_positive(self) -> bool:
        return self.amount > 0

    @property
    def is_zero(self) -> bool:
        return self.amount == 0

    def with_amount(self, amount: Decimal | int | str) -> Quantity:
        """Same token and precision, different amount (truncated)."""
        return Quantity(to_decimal(amount), self.token, self.precision)

    def times(self, multiplier: Decimal | int | str) -> Quantity:
        return self.with_amount(self.amount * to_decimal(multiplier))

    def _check_compatible(self, other: Any) -> Quantity:
        if not isinstance(other, Quantity):
            raise TypeError(f"Expected Quantity, got {type(other).__name__}")
        if other.token != self.token or other.precision != self.precision:
            raise TokenMismatchError(
                f"Cannot combine {self.symbol} of {self.token.contract} "
                f"with {other.symbol} of {other.token.contract}"
            )
        return other

    def __add__(self, other: Quantity) -> Quantity:
        return self.with_amount(self.amount + self._check_compatible(other).amount)

    def __sub__(self, other: Quantity) -> Quantity:
        return self.with_amount(self.amount - self._check_compatible(other).amount)

    def __lt__(self, other: Quantity) -> bool:
        return self.amount < self._check_compatible(other).amount

    def __le__(self, other: Quantity) -> bool:
        return self.amount <= self._check_compatible(other).amount

    def __gt__(self, other: Quantity) -> bool:
        return self.amount > self._check_compatible(other).amount

    def __ge__(self, other: Quantity) -> bool:
        return self.amount >= self._check_compatible(other).amount

    def __str__(self) -> str:
        return f"{self.amount:.{self.precision}f} {self.token.symbol}"


__all__ = [
    "Symbol",
    "TokenId",
    "Quantity",
    "as_token_id",
    "normalize_symbol_code",
    "normalize_account",
]
