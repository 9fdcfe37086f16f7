"""Pool registry holding dry and hydrated relays.

Relays are discovered in dry form (identity and reserve tokens only) and
later hydrated with live balances. The registry keeps both forms keyed by
relay id, applies admission filters when relays are added, and hands a
PathFinder over its dry relays to the router.

Pathfinding operations are delegated to PathFinder
(relayswap.routing.pathfinding).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import TYPE_CHECKING

import structlog

from relayswap.constants import DEFAULT_BLACKLISTED_TOKENS
from relayswap.errors import RelaySwapError, UnavailableDataError
from relayswap.models.types import TokenId, as_token_id
from relayswap.pools.relay import DryRelay, Relay

logger = structlog.get_logger()

if TYPE_CHECKING:
    from relayswap.pricing.feeds import RelayFeed
    from relayswap.routing.pathfinding import PathFinder


class PoolRegistry:
    """Registry of relays for routing and pricing.

    Admission filters:
    - Relays holding a blacklisted reserve token are dropped.
    - When token metadata is given, relays whose reserves are not all known
      are dropped.

    Disabled relays are registered but excluded from routing by the graph.
    """

    def __init__(
        self,
        relays: Iterable[DryRelay | Relay] | None = None,
        *,
        token_meta: Iterable[TokenId | str] | None = None,
        blacklist: Iterable[TokenId | str] = DEFAULT_BLACKLISTED_TOKENS,
    ) -> None:
        """Initialize the registry with optional relays.

        Args:
            relays: Initial relays, dry or hydrated
            token_meta: Known tokens. If None, reserve tokens are not checked.
            blacklist: Tokens whose relays are never admitted
        """
        self._dry: dict[str, DryRelay] = {}
        self._hydrated: dict[str, Relay] = {}
        self._token_meta: frozenset[TokenId] | None = (
            None if token_meta is None else frozenset(as_token_id(t) for t in token_meta)
        )
        self._blacklist: frozenset[TokenId] = frozenset(as_token_id(t) for t in blacklist)
        # Lazy-initialized PathFinder for graph operations
        self._pathfinder: PathFinder | None = None

        if relays:
            for relay in relays:
                if isinstance(relay, Relay):
                    self.add_relay(relay)
                else:
                    self.add_dry(relay)

    @property
    def pathfinder(self) -> PathFinder:
        """Get the PathFinder for this registry (lazy initialization).

        It is automatically invalidated when relays are added or removed.
        """
        if self._pathfinder is None:
            from relayswap.routing.pathfinding import PathFinder

            self._pathfinder = PathFinder(self)
        return self._pathfinder

    def _invalidate_pathfinder(self) -> None:
        if self._pathfinder is not None:
            self._pathfinder.invalidate()

    def admits(self, relay: DryRelay | Relay) -> bool:
        """Check the admission filters for a relay."""
        reserves = relay.reserves if isinstance(relay, DryRelay) else relay.reserve_ids
        blacklisted = [str(token) for token in reserves if token in self._blacklist]
        if blacklisted:
            logger.debug("relay_blacklisted", relay=relay.id, tokens=blacklisted)
            return False
        if self._token_meta is not None:
            unknown = [str(token) for token in reserves if token not in self._token_meta]
            if unknown:
                logger.warning("relay_unknown_reserves", relay=relay.id, tokens=unknown)
                return False
        return True

    def add_dry(self, relay: DryRelay) -> bool:
        """Add a dry relay.

        Returns:
            True if the relay passed the admission filters
        """
        if not self.admits(relay):
            return False
        if relay.id in self._dry:
            logger.debug("relay_replaced", relay=relay.id)
        self._dry[relay.id] = relay
        self._invalidate_pathfinder()
        return True

    def add_relay(self, relay: Relay) -> bool:
        """Add or refresh a hydrated relay, registering its dry form too."""
        if not self.admits(relay):
            return False
        self._dry[relay.id] = relay.to_dry()
        self._hydrated[relay.id] = relay
        self._invalidate_pathfinder()
        return True

    def remove(self, relay_id: str) -> None:
        """Drop a relay in both forms."""
        removed = self._dry.pop(relay_id, None)
        self._hydrated.pop(relay_id, None)
        if removed is not None:
            self._invalidate_pathfinder()

    def get_dry(self, relay_id: str) -> DryRelay | None:
        return self._dry.get(relay_id)

    def get_relay(self, relay_id: str) -> Relay | None:
        """Get the hydrated form of a relay, None if not hydrated."""
        return self._hydrated.get(relay_id)

    def require_relay(self, relay_id: str) -> Relay:
        """Get a hydrated relay.

        Raises:
            UnavailableDataError: Unknown relay, or known but not hydrated
        """
        relay = self._hydrated.get(relay_id)
        if relay is None:
            state = "not hydrated" if relay_id in self._dry else "unknown"
            raise UnavailableDataError(f"Relay {relay_id} is {state}")
        return relay

    def is_hydrated(self, relay_id: str) -> bool:
        return relay_id in self._hydrated

    def hydrated(self, relay_ids: Iterable[str]) -> list[Relay]:
        """Hydrated relays for ``relay_ids``, in order."""
        return [self.require_relay(relay_id) for relay_id in relay_ids]

    def dry_relays(self) -> list[DryRelay]:
        return list(self._dry.values())

    def relays(self) -> list[Relay]:
        """All hydrated relays."""
        return list(self._hydrated.values())

    def relays_for_token(self, token: TokenId | str) -> list[DryRelay]:
        token_id = as_token_id(token)
        return [relay for relay in self._dry.values() if token_id in relay.reserves]

    def is_routable(self, relay_id: str) -> bool:
        """Valid and not known to be disabled."""
        dry = self._dry.get(relay_id)
        if dry is None or not dry.is_valid:
            return False
        hydrated = self._hydrated.get(relay_id)
        return hydrated is None or hydrated.enabled

    def feeds(self, known_prices: Mapping[str, Decimal]) -> list[RelayFeed]:
        """Price feeds for every hydrated relay with positive reserve balances.

        Relays that cannot be priced from ``known_prices`` are skipped.
        """
        from relayswap.pricing.feeds import build_relay_feeds

        feeds: list[RelayFeed] = []
        for relay in self._hydrated.values():
            if not relay.has_reserve_balances:
                continue
            try:
                feeds.extend(build_relay_feeds(relay, known_prices))
            except RelaySwapError as err:
                logger.debug("relay_feed_skipped", relay=relay.id, reason=str(err))
        return feeds

    @property
    def relay_count(self) -> int:
        return len(self._dry)

    @property
    def hydrated_count(self) -> int:
        return len(self._hydrated)


__all__ = ["PoolRegistry"]
