"""In-memory market snapshot: a pool registry plus share supplies.

A Market is what the API serves quotes from. It is built from a
MarketSnapshot file and is never refreshed in place; load a new one to
pick up new balances.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path as FilePath

import structlog

from relayswap.config import DEFAULT_CONFIG, RelaySwapConfig
from relayswap.errors import ConfigurationError, UnavailableDataError
from relayswap.liquidity.math import OpposingLiquidity, calculate_opposing_deposit, max_withdrawals
from relayswap.liquidity.withdrawal import WithdrawalPlan, plan_withdrawal
from relayswap.models.rows import MarketSnapshot
from relayswap.models.types import Quantity, TokenId
from relayswap.pools.registry import PoolRegistry
from relayswap.pools.relay import Relay
from relayswap.routing.router import Quote, Router

logger = structlog.get_logger()


@dataclass
class Market:
    """Registry, share supplies and known prices of one snapshot."""

    registry: PoolRegistry
    supplies: dict[str, Quantity] = field(default_factory=dict)
    known_prices: dict[str, Decimal] = field(default_factory=dict)
    max_hops: int = DEFAULT_CONFIG.max_hops

    @classmethod
    def from_snapshot(
        cls, snapshot: MarketSnapshot, config: RelaySwapConfig = DEFAULT_CONFIG
    ) -> Market:
        registry = PoolRegistry(
            token_meta=snapshot.token_meta,
            blacklist=config.blacklisted_tokens,
        )
        supplies: dict[str, Quantity] = {}
        for model in snapshot.relays:
            admitted = registry.add_relay(model.to_relay()) if model.hydrated else registry.add_dry(model.to_dry())
            supply = model.supply_quantity()
            if admitted and supply is not None:
                supplies[str(supply.token)] = supply

        logger.info(
            "market_loaded",
            relays=registry.relay_count,
            hydrated=registry.hydrated_count,
            supplies=len(supplies),
        )
        return cls(
            registry=registry,
            supplies=supplies,
            known_prices=dict(snapshot.known_prices),
            max_hops=config.max_hops,
        )

    @property
    def router(self) -> Router:
        return Router(self.registry, max_hops=self.max_hops)

    def require_supply(self, relay: Relay) -> Quantity:
        supply = self.supplies.get(relay.id)
        if supply is None:
            raise UnavailableDataError(f"No share supply known for relay {relay.id}")
        return supply

    def quote_return(self, amount_in: Quantity, token_out: TokenId | str) -> Quote:
        return self.router.find_return(amount_in, token_out)

    def quote_cost(self, amount_out: Quantity, token_in: TokenId | str) -> Quote:
        return self.router.find_cost(amount_out, token_in)

    def opposing_deposit(self, relay_id: str, deposit: Quantity) -> OpposingLiquidity:
        relay = self.registry.require_relay(relay_id)
        return calculate_opposing_deposit(relay, deposit, self.require_supply(relay))

    def plan_withdrawal(self, relay_id: str, withdraw: Quantity, owned: Quantity) -> WithdrawalPlan:
        relay = self.registry.require_relay(relay_id)
        return plan_withdrawal(relay, withdraw, self.require_supply(relay), owned)

    def max_withdrawals(self, relay_id: str, owned: Quantity) -> list[Quantity]:
        relay = self.registry.require_relay(relay_id)
        return max_withdrawals(relay, owned, self.require_supply(relay))


def load_market(path: str | FilePath, config: RelaySwapConfig = DEFAULT_CONFIG) -> Market:
    """Load a Market from a MarketSnapshot JSON file.

    Raises:
        ConfigurationError: File missing or not a valid snapshot
    """
    try:
        snapshot = MarketSnapshot.model_validate_json(FilePath(path).read_text())
    except OSError as err:
        raise ConfigurationError(f"Cannot read market snapshot {path}: {err}") from err
    except ValueError as err:
        raise ConfigurationError(f"Invalid market snapshot {path}: {err}") from err
    return Market.from_snapshot(snapshot, config)


__all__ = ["Market", "load_market"]
