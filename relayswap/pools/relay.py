"""Relay (pool) representations.

A relay is a two-sided bonding-curve market identified by its share token.
It exists in two forms:

- DryRelay: identity and reserve token identities only, as discovered.
- Relay: hydrated with live reserve balances, fee and amplifier, ready for
  pricing. Pricing functions treat a Relay as an immutable snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from relayswap.constants import DEFAULT_AMPLIFIER, FEE_DENOMINATOR
from relayswap.errors import InvalidInputError, UnknownTokenError
from relayswap.models.types import Quantity, TokenId, as_token_id


@dataclass(frozen=True)
class DryRelay:
    """A relay known only by identity, awaiting balance hydration."""

    contract: str
    smart_token: TokenId
    reserves: tuple[TokenId, ...]
    # Modern relays live in one multi-relay contract and hydrate natively;
    # legacy relays each have their own contract and need balance lookups.
    is_multi_contract: bool = False

    @property
    def id(self) -> str:
        return str(self.smart_token)

    @property
    def is_valid(self) -> bool:
        """Exactly two distinct reserve tokens."""
        return len(self.reserves) == 2 and self.reserves[0] != self.reserves[1]


@dataclass(frozen=True)
class ReserveSide:
    """One reserve of a hydrated relay.

    Attributes:
        balance: Live reserve balance
        contract: Token contract that issues the reserve token
        depth: Configured curve depth. None means the live balance is used,
               which reduces the amplified curve to plain constant product.
    """

    balance: Quantity
    depth: Decimal | None = None

    @property
    def token(self) -> TokenId:
        return self.balance.token

    @property
    def contract(self) -> str:
        return self.balance.token.contract

    @property
    def precision(self) -> int:
        return self.balance.precision

    @property
    def effective_depth(self) -> Decimal:
        return self.balance.amount if self.depth is None else self.depth


@dataclass(frozen=True)
class Relay:
    """A hydrated relay with live balances."""

    contract: str
    smart_token: TokenId
    reserves: tuple[ReserveSide, ...]
    # Fee in parts-per-ten-thousand (30 = 0.3%)
    fee: Decimal = Decimal(0)
    amplifier: Decimal = DEFAULT_AMPLIFIER
    smart_precision: int = 4
    is_multi_contract: bool = True
    enabled: bool = True
    apr: Decimal = field(default=Decimal(0), compare=False)

    def __post_init__(self) -> None:
        fee = Decimal(self.fee)
        if not 0 <= fee < FEE_DENOMINATOR:
            raise InvalidInputError(f"Relay fee must be in [0, {FEE_DENOMINATOR}): {self.fee}")
        object.__setattr__(self, "fee", fee)
        object.__setattr__(self, "amplifier", Decimal(self.amplifier))
        for side in self.reserves:
            if side.balance.amount < 0:
                raise InvalidInputError(f"Negative reserve balance on relay {self.id}: {side.balance}")

    @property
    def id(self) -> str:
        return str(self.smart_token)

    @property
    def reserve_ids(self) -> tuple[TokenId, ...]:
        return tuple(side.token for side in self.reserves)

    @property
    def is_valid(self) -> bool:
        """Exactly two distinct reserve tokens."""
        ids = self.reserve_ids
        return len(ids) == 2 and ids[0] != ids[1]

    @property
    def has_reserve_balances(self) -> bool:
        return all(side.balance.is_positive for side in self.reserves)

    def side(self, token: TokenId | str) -> ReserveSide:
        """Get the reserve side holding a token."""
        token_id = as_token_id(token)
        for side in self.reserves:
            if side.token == token_id:
                return side
        raise UnknownTokenError(f"Token {token_id} not in relay {self.id}")

    def get_reserves(self, token_in: TokenId | str) -> tuple[ReserveSide, ReserveSide]:
        """Get reserve sides ordered as (side_in, side_out)."""
        token_id = as_token_id(token_in)
        if not self.is_valid:
            raise InvalidInputError(f"Relay {self.id} does not have two distinct reserves")
        first, second = self.reserves
        if token_id == first.token:
            return first, second
        if token_id == second.token:
            return second, first
        raise UnknownTokenError(f"Token {token_id} not in relay {self.id}")

    def get_token_out(self, token_in: TokenId | str) -> TokenId:
        """Get the output token for a given input token."""
        return self.get_reserves(token_in)[1].token

    def to_dry(self) -> DryRelay:
        return DryRelay(
            contract=self.contract,
            smart_token=self.smart_token,
            reserves=self.reserve_ids,
            is_multi_contract=self.is_multi_contract,
        )


__all__ = ["DryRelay", "ReserveSide", "Relay"]
