"""Hydration of dry relays with live balances.

Legacy relays each live in their own contract: the fee comes from the
relay's ``settings`` row (parts-per-million) and every reserve balance from
the reserve token's ``accounts`` table scoped to the relay contract. They
are hydrated in fixed-size concurrent chunks with a pause between chunks to
respect node rate limits.

Modern relays share one multi-relay contract and are read in bulk, then
matched to the requested dry relays by share token.

A relay that fails to hydrate is logged and reported in the result; the
rest of the batch still completes.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass, field

import structlog

from relayswap.config import DEFAULT_CONFIG, RelaySwapConfig
from relayswap.constants import LEGACY_SHARE_PRECISION
from relayswap.errors import HydrationError, RelaySwapError
from relayswap.hydration.reader import LedgerReader
from relayswap.pools.relay import DryRelay, Relay, ReserveSide

logger = structlog.get_logger()


@dataclass
class HydrationResult:
    """Relays hydrated by a batch and the ones that failed, with reasons."""

    relays: list[Relay] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)

    def merge(self, other: HydrationResult) -> None:
        self.relays.extend(other.relays)
        self.failed.update(other.failed)

    @property
    def hydrated_ids(self) -> set[str]:
        return {relay.id for relay in self.relays}


async def hydrate_legacy_relay(reader: LedgerReader, relay: DryRelay) -> Relay:
    """Hydrate one legacy relay.

    Raises:
        HydrationError: Missing settings row or reserve balance
        UnavailableDataError: Ledger read failed
    """
    if not relay.is_valid:
        raise HydrationError(f"Relay {relay.id} does not have two distinct reserves")

    settings, balances = await asyncio.gather(
        reader.get_relay_settings(relay.contract),
        asyncio.gather(*(reader.get_balance(token, relay.contract) for token in relay.reserves)),
    )
    if any(balance is None for balance in balances):
        raise HydrationError(f"Failed to find both reserve balances on legacy relay {relay.contract}")

    return Relay(
        contract=relay.contract,
        smart_token=relay.smart_token,
        reserves=tuple(ReserveSide(balance=balance) for balance in balances),
        fee=settings.fee_bps,
        smart_precision=LEGACY_SHARE_PRECISION,
        is_multi_contract=False,
        enabled=settings.enabled,
    )


async def hydrate_dry_relays(
    reader: LedgerReader,
    relays: Sequence[DryRelay],
    *,
    chunk_size: int = DEFAULT_CONFIG.hydration_chunk_size,
    wait_seconds: float = DEFAULT_CONFIG.hydration_wait_seconds,
) -> HydrationResult:
    """Hydrate legacy relays in concurrent chunks.

    Args:
        reader: Ledger reader
        relays: Dry legacy relays
        chunk_size: Relays hydrated concurrently per chunk
        wait_seconds: Pause between chunks
    """
    result = HydrationResult()
    chunks = [relays[i : i + chunk_size] for i in range(0, len(relays), chunk_size)]

    for index, chunk in enumerate(chunks):
        if index > 0 and wait_seconds > 0:
            await asyncio.sleep(wait_seconds)

        outcomes = await asyncio.gather(
            *(hydrate_legacy_relay(reader, relay) for relay in chunk),
            return_exceptions=True,
        )
        for relay, outcome in zip(chunk, outcomes, strict=True):
            if isinstance(outcome, Relay):
                result.relays.append(outcome)
            elif isinstance(outcome, RelaySwapError):
                logger.warning("relay_hydration_failed", relay=relay.id, error=str(outcome))
                result.failed[relay.id] = str(outcome)
            else:
                raise outcome

        logger.debug(
            "hydration_chunk_complete",
            chunk=index + 1,
            chunks=len(chunks),
            hydrated=len(result.relays),
            failed=len(result.failed),
        )

    return result


async def hydrate_multi_relays(
    reader: LedgerReader,
    relays: Sequence[DryRelay],
    config: RelaySwapConfig = DEFAULT_CONFIG,
) -> HydrationResult:
    """Hydrate modern relays from one bulk read of the multi-relay contract."""
    result = HydrationResult()
    if not relays:
        return result

    try:
        available = await reader.get_multi_relays(config.multi_contract, config.multi_token_contract)
    except RelaySwapError as err:
        logger.warning("multi_relay_read_failed", relays=len(relays), error=str(err))
        result.failed.update({relay.id: str(err) for relay in relays})
        return result

    by_id = {relay.id: relay for relay in available}
    for dry in relays:
        hydrated = by_id.get(dry.id)
        if hydrated is None:
            reason = f"Relay {dry.id} not found in {config.multi_contract}"
            logger.warning("relay_hydration_failed", relay=dry.id, error=reason)
            result.failed[dry.id] = reason
        else:
            result.relays.append(hydrated)
    return result


async def hydrate_relays(
    reader: LedgerReader,
    relays: Sequence[DryRelay],
    config: RelaySwapConfig = DEFAULT_CONFIG,
) -> HydrationResult:
    """Hydrate a mix of legacy and modern dry relays."""
    legacy = [relay for relay in relays if not relay.is_multi_contract]
    modern = [relay for relay in relays if relay.is_multi_contract]

    result = await hydrate_multi_relays(reader, modern, config)
    result.merge(
        await hydrate_dry_relays(
            reader,
            legacy,
            chunk_size=config.hydration_chunk_size,
            wait_seconds=config.hydration_wait_seconds,
        )
    )
    logger.info(
        "relays_hydrated",
        requested=len(relays),
        hydrated=len(result.relays),
        failed=len(result.failed),
    )
    return result


__all__ = [
    "HydrationResult",
    "hydrate_legacy_relay",
    "hydrate_dry_relays",
    "hydrate_multi_relays",
    "hydrate_relays",
]
