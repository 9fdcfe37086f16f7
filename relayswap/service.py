"""Async quote service over live ledger data.

Ties the boundary and the core together: find a path over the registry's
dry relays, hydrate the relays on it that are not hydrated yet, exclude
any that failed and search again, then price the hydrated snapshot with
the pure multi-hop functions.
"""

from __future__ import annotations

import structlog

from relayswap.config import DEFAULT_CONFIG, RelaySwapConfig
from relayswap.errors import HydrationError, UnavailableDataError
from relayswap.hydration.hydrator import hydrate_relays
from relayswap.hydration.reader import LedgerReader
from relayswap.liquidity.math import OpposingLiquidity, calculate_opposing_deposit, max_withdrawals
from relayswap.liquidity.withdrawal import WithdrawalPlan, plan_withdrawal
from relayswap.models.types import Quantity, TokenId
from relayswap.pools.registry import PoolRegistry
from relayswap.pools.relay import Relay
from relayswap.routing.multihop import find_cost, find_return
from relayswap.routing.router import Quote, Router
from relayswap.routing.types import Path

logger = structlog.get_logger()


class QuoteService:
    """Quotes conversions and sizes liquidity against live relays.

    Args:
        reader: Ledger reader used for hydration, supplies and balances
        registry: Registry of known relays; hydrated relays are added to it
        config: Hydration and routing configuration
    """

    def __init__(
        self,
        reader: LedgerReader,
        registry: PoolRegistry,
        config: RelaySwapConfig = DEFAULT_CONFIG,
    ) -> None:
        self.reader = reader
        self.registry = registry
        self.config = config
        self.router = Router(registry, max_hops=config.max_hops)

    async def hydrated_path(
        self,
        token_in: TokenId | str,
        token_out: TokenId | str,
    ) -> tuple[Path, list[Relay]]:
        """Find a path and make sure every relay on it is hydrated and enabled.

        Raises:
            InvalidInputError: token_in equals token_out
            NoRouteError: No path remains after excluding unavailable relays
        """
        excluded: frozenset[str] = frozenset()
        while True:
            path = self.router.find_path(token_in, token_out, excluded)
            pending = [relay for relay in path.hops if not self.registry.is_hydrated(relay.id)]
            if pending:
                result = await hydrate_relays(self.reader, pending, self.config)
                for relay in result.relays:
                    self.registry.add_relay(relay)

            unusable = [
                rid
                for rid in path.relay_ids
                if not self.registry.is_hydrated(rid) or not self.registry.is_routable(rid)
            ]
            if not unusable:
                return path, self.registry.hydrated(path.relay_ids)

            logger.info("relays_excluded_from_quote", relays=unusable)
            excluded = excluded | frozenset(unusable)

    async def find_return(self, amount_in: Quantity, token_out: TokenId | str) -> Quote:
        """Output received for an exact input."""
        path, relays = await self.hydrated_path(amount_in.token, token_out)
        return Quote(path=path, result=find_return(amount_in, relays, self.router.amm))

    async def find_cost(self, amount_out: Quantity, token_in: TokenId | str) -> Quote:
        """Input required for an exact output."""
        path, relays = await self.hydrated_path(token_in, amount_out.token)
        return Quote(path=path, result=find_cost(amount_out, relays, self.router.amm))

    async def get_relay(self, relay_id: str) -> Relay:
        """Hydrated form of one relay, hydrating it if needed.

        Raises:
            UnavailableDataError: Unknown relay or hydration failure
        """
        relay = self.registry.get_relay(relay_id)
        if relay is not None:
            return relay
        dry = self.registry.get_dry(relay_id)
        if dry is None:
            raise UnavailableDataError(f"Relay {relay_id} is unknown")

        result = await hydrate_relays(self.reader, [dry], self.config)
        if relay_id in result.failed:
            raise HydrationError(result.failed[relay_id])
        for hydrated in result.relays:
            self.registry.add_relay(hydrated)
        return self.registry.require_relay(relay_id)

    async def get_supply(self, relay: Relay) -> Quantity:
        supply = await self.reader.get_supply(relay.smart_token)
        if supply is None:
            raise UnavailableDataError(f"No supply row for share token {relay.smart_token}")
        return supply

    async def get_owned(self, relay: Relay, owner: str) -> Quantity:
        """Share tokens held by ``owner``; zero when there is no balance row."""
        owned = await self.reader.get_balance(relay.smart_token, owner)
        if owned is None:
            return Quantity.zero(relay.smart_token, relay.smart_precision)
        return owned

    async def opposing_deposit(self, relay_id: str, deposit: Quantity) -> OpposingLiquidity:
        relay = await self.get_relay(relay_id)
        return calculate_opposing_deposit(relay, deposit, await self.get_supply(relay))

    async def plan_withdrawal(self, relay_id: str, withdraw: Quantity, owner: str) -> WithdrawalPlan:
        relay = await self.get_relay(relay_id)
        supply = await self.get_supply(relay)
        owned = await self.get_owned(relay, owner)
        return plan_withdrawal(relay, withdraw, supply, owned)

    async def user_balances(self, relay_id: str, owner: str) -> tuple[Quantity, list[Quantity]]:
        """Owned share tokens and the per-reserve maximum withdrawals."""
        relay = await self.get_relay(relay_id)
        supply = await self.get_supply(relay)
        owned = await self.get_owned(relay, owner)
        return owned, max_withdrawals(relay, owned, supply)


__all__ = ["QuoteService"]
