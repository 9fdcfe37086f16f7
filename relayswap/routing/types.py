"""Type definitions for routing module."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

from relayswap.errors import InvalidInputError
from relayswap.models.types import Quantity, TokenId, as_token_id
from relayswap.pools.relay import DryRelay, Relay

AnyRelay = DryRelay | Relay


def _reserve_ids(relay: AnyRelay) -> tuple[TokenId, ...]:
    if isinstance(relay, Relay):
        return relay.reserve_ids
    return relay.reserves


def walk_tokens(relays: Sequence[AnyRelay], start: TokenId | str) -> list[TokenId]:
    """Tokens visited walking ``relays`` in order from ``start``.

    Consecutive hops must share exactly one token: the output of one hop
    is the input of the next.

    Raises:
        InvalidInputError: A hop does not hold the current token, or has
            other than two distinct reserves
    """
    current = as_token_id(start)
    tokens = [current]
    previous: set[TokenId] | None = None
    for relay in relays:
        reserves = _reserve_ids(relay)
        if len(reserves) != 2 or reserves[0] == reserves[1]:
            raise InvalidInputError(f"Relay {relay.id} does not have two distinct reserves")
        if current not in reserves:
            raise InvalidInputError(f"Relay {relay.id} does not convert {current}")
        if previous is not None and len(previous & set(reserves)) != 1:
            raise InvalidInputError(f"Relay {relay.id} shares more than one token with the previous hop")
        current = reserves[1] if reserves[0] == current else reserves[0]
        tokens.append(current)
        previous = set(reserves)
    return tokens


@dataclass(frozen=True)
class Path:
    """Ordered relays connecting a source token to a destination token."""

    token_in: TokenId
    hops: tuple[AnyRelay, ...]

    def __post_init__(self) -> None:
        if not self.hops:
            raise InvalidInputError("A path needs at least one hop")
        walk_tokens(self.hops, self.token_in)

    @property
    def tokens(self) -> list[TokenId]:
        return walk_tokens(self.hops, self.token_in)

    @property
    def token_out(self) -> TokenId:
        return self.tokens[-1]

    @property
    def relay_ids(self) -> list[str]:
        return [relay.id for relay in self.hops]

    def __len__(self) -> int:
        return len(self.hops)


@dataclass(frozen=True)
class HopResult:
    """Result of a single hop in a multi-hop conversion."""

    relay_id: str
    amount_in: Quantity
    amount_out: Quantity
    fee: Quantity
    slippage: Decimal

    @property
    def token_in(self) -> TokenId:
        return self.amount_in.token

    @property
    def token_out(self) -> TokenId:
        return self.amount_out.token


@dataclass(frozen=True)
class ConvertResult:
    """Composed result of converting along a path.

    ``amount`` is the final output for a return quote and the required
    input for a cost quote. ``slippage`` is the worst single-hop slippage.
    """

    amount: Quantity
    hops: tuple[HopResult, ...]
    slippage: Decimal

    @property
    def amount_in(self) -> Quantity:
        return self.hops[0].amount_in

    @property
    def amount_out(self) -> Quantity:
        return self.hops[-1].amount_out

    @property
    def path(self) -> list[str]:
        return [hop.relay_id for hop in self.hops]

    @property
    def is_multihop(self) -> bool:
        return len(self.hops) > 1


__all__ = ["AnyRelay", "Path", "HopResult", "ConvertResult", "walk_tokens"]
