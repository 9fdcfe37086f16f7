"""Conversion routing over a pool registry snapshot.

The router finds a path between two tokens over the registry's dry relays,
swaps in the hydrated relays for pricing and composes the per-hop results.
Relays on a candidate path that are not hydrated are excluded and the path
search is repeated, so one unavailable relay never aborts the whole quote.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from relayswap.amm.bancor import BancorAMM, bancor
from relayswap.constants import DEFAULT_MAX_HOPS
from relayswap.errors import InvalidInputError, NoRouteError
from relayswap.models.types import Quantity, TokenId, as_token_id
from relayswap.pools.registry import PoolRegistry
from relayswap.pools.relay import Relay
from relayswap.routing.multihop import find_cost, find_return
from relayswap.routing.types import ConvertResult, Path

logger = structlog.get_logger()


@dataclass(frozen=True)
class Quote:
    """Priced conversion along a path."""

    path: Path
    result: ConvertResult

    @property
    def relay_ids(self) -> list[str]:
        return self.path.relay_ids


class Router:
    """Routes conversions through the relays of a PoolRegistry.

    Args:
        registry: Registry holding dry and hydrated relays
        amm: Curve implementation. Defaults to the bancor singleton.
        max_hops: Maximum number of relays on a path
    """

    def __init__(
        self,
        registry: PoolRegistry,
        amm: BancorAMM | None = None,
        max_hops: int = DEFAULT_MAX_HOPS,
    ) -> None:
        self.registry = registry
        self.amm = amm if amm is not None else bancor
        self.max_hops = max_hops

    def find_path(
        self,
        token_in: TokenId | str,
        token_out: TokenId | str,
        exclude: frozenset[str] = frozenset(),
    ) -> Path:
        """Find a path between two tokens.

        Raises:
            InvalidInputError: token_in and token_out are the same token
            NoRouteError: No path connects the tokens
        """
        source = as_token_id(token_in)
        target = as_token_id(token_out)
        if source == target:
            raise InvalidInputError(f"Cannot convert {source} to itself")

        path = self.registry.pathfinder.find_path(source, target, self.max_hops, exclude)
        if path is None:
            logger.info("quote_no_route", token_in=str(source), token_out=str(target))
            raise NoRouteError(f"No route from {source} to {target}")
        return path

    def find_hydrated_path(
        self,
        token_in: TokenId | str,
        token_out: TokenId | str,
    ) -> tuple[Path, list[Relay]]:
        """Find a path whose relays are all hydrated.

        Returns:
            The path and its hydrated relays, in hop order
        """
        excluded: frozenset[str] = frozenset()
        while True:
            path = self.find_path(token_in, token_out, excluded)
            missing = [rid for rid in path.relay_ids if not self.registry.is_hydrated(rid)]
            if not missing:
                return path, self.registry.hydrated(path.relay_ids)
            logger.info("relays_not_hydrated_excluded", relays=missing)
            excluded = excluded | frozenset(missing)

    def find_return(self, amount_in: Quantity, token_out: TokenId | str) -> Quote:
        """Output received for an exact input."""
        path, relays = self.find_hydrated_path(amount_in.token, token_out)
        result = find_return(amount_in, relays, self.amm)
        logger.debug(
            "quote_return",
            amount_in=str(amount_in),
            amount_out=str(result.amount),
            hops=len(relays),
            slippage=str(result.slippage),
        )
        return Quote(path=path, result=result)

    def find_cost(self, amount_out: Quantity, token_in: TokenId | str) -> Quote:
        """Input required for an exact output."""
        path, relays = self.find_hydrated_path(token_in, amount_out.token)
        result = find_cost(amount_out, relays, self.amm)
        logger.debug(
            "quote_cost",
            amount_out=str(amount_out),
            amount_in=str(result.amount),
            hops=len(relays),
            slippage=str(result.slippage),
        )
        return Quote(path=path, result=result)


__all__ = ["Quote", "Router"]
