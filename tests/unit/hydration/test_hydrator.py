"""Tests for legacy and multi-relay hydration."""

from decimal import Decimal

import pytest

from relayswap.config import RelaySwapConfig
from relayswap.errors import HydrationError, UnavailableDataError
from relayswap.hydration import hydrator
from relayswap.hydration.hydrator import (
    hydrate_dry_relays,
    hydrate_legacy_relay,
    hydrate_multi_relays,
    hydrate_relays,
)
from relayswap.models.types import TokenId
from tests.helpers import PBTC, TLOS, TLOS_PBTC, TLOS_USDT, USDT, make_dry_relay, make_relay, qty


def legacy_relay(index: int, *, balance: int = 1_000):
    """Legacy TLOS/USDT relay in its own contract."""
    return make_relay(
        qty(balance, TLOS),
        qty(balance, USDT),
        share=TokenId("relays.swaps", f"TLOSU{'ABCDEFGH'[index]}"),
        contract=f"relay{index + 1}.swaps",
        is_multi_contract=False,
    )


@pytest.fixture
def sleeps(monkeypatch) -> list[float]:
    """Record pauses between hydration chunks instead of sleeping."""
    recorded: list[float] = []

    async def fake_sleep(seconds: float) -> None:
        recorded.append(seconds)

    monkeypatch.setattr(hydrator.asyncio, "sleep", fake_sleep)
    return recorded


class TestHydrateLegacyRelay:
    @pytest.mark.asyncio
    async def test_fee_and_balances(self, ledger) -> None:
        relay = legacy_relay(0)
        ledger.add_legacy_relay(relay, fee_ppm=2_500)

        hydrated = await hydrate_legacy_relay(ledger, relay.to_dry())
        assert hydrated.id == relay.id
        assert hydrated.fee == Decimal(25)
        assert hydrated.reserves == relay.reserves
        assert not hydrated.is_multi_contract
        assert hydrated.enabled

    @pytest.mark.asyncio
    async def test_disabled_relay(self, ledger) -> None:
        relay = legacy_relay(0)
        ledger.add_legacy_relay(relay, enabled=False)
        assert not (await hydrate_legacy_relay(ledger, relay.to_dry())).enabled

    @pytest.mark.asyncio
    async def test_missing_balance(self, ledger) -> None:
        relay = legacy_relay(0)
        ledger.add_legacy_relay(relay)
        del ledger.balances[(USDT, relay.contract)]
        with pytest.raises(HydrationError, match="both reserve balances"):
            await hydrate_legacy_relay(ledger, relay.to_dry())

    @pytest.mark.asyncio
    async def test_missing_settings(self, ledger) -> None:
        with pytest.raises(HydrationError):
            await hydrate_legacy_relay(ledger, legacy_relay(0).to_dry())

    @pytest.mark.asyncio
    async def test_invalid_dry_relay(self, ledger) -> None:
        dry = make_dry_relay(TLOS, TLOS, contract="relay1.swaps", is_multi_contract=False)
        with pytest.raises(HydrationError, match="two distinct"):
            await hydrate_legacy_relay(ledger, dry)


class TestHydrateDryRelays:
    @pytest.mark.asyncio
    async def test_chunks_with_pause(self, ledger, sleeps) -> None:
        relays = [legacy_relay(i) for i in range(5)]
        for relay in relays:
            ledger.add_legacy_relay(relay)

        result = await hydrate_dry_relays(
            ledger, [relay.to_dry() for relay in relays], chunk_size=2, wait_seconds=0.5
        )
        assert [relay.id for relay in result.relays] == [relay.id for relay in relays]
        assert result.failed == {}
        # Three chunks, two pauses
        assert sleeps == [0.5, 0.5]

    @pytest.mark.asyncio
    async def test_no_pause_when_wait_is_zero(self, ledger, sleeps) -> None:
        relays = [legacy_relay(i) for i in range(3)]
        for relay in relays:
            ledger.add_legacy_relay(relay)
        await hydrate_dry_relays(
            ledger, [relay.to_dry() for relay in relays], chunk_size=1, wait_seconds=0
        )
        assert sleeps == []

    @pytest.mark.asyncio
    async def test_partial_failure(self, ledger, sleeps) -> None:
        healthy, broken = legacy_relay(0), legacy_relay(1)
        ledger.add_legacy_relay(healthy)

        result = await hydrate_dry_relays(ledger, [broken.to_dry(), healthy.to_dry()])
        assert result.hydrated_ids == {healthy.id}
        assert list(result.failed) == [broken.id]

    @pytest.mark.asyncio
    async def test_empty(self, ledger) -> None:
        result = await hydrate_dry_relays(ledger, [])
        assert result.relays == []
        assert ledger.calls == []


class TestHydrateMultiRelays:
    @pytest.mark.asyncio
    async def test_matched_by_share_token(self, ledger, tlos_usdt_relay) -> None:
        ledger.multi_relays.append(tlos_usdt_relay)
        missing = make_dry_relay(TLOS, PBTC, share=TLOS_PBTC)

        result = await hydrate_multi_relays(ledger, [tlos_usdt_relay.to_dry(), missing])
        assert result.relays == [tlos_usdt_relay]
        assert "not found" in result.failed[missing.id]

    @pytest.mark.asyncio
    async def test_read_failure_fails_every_relay(self, ledger) -> None:
        ledger.multi_error = UnavailableDataError("node down")
        dries = [make_dry_relay(TLOS, USDT), make_dry_relay(TLOS, PBTC, share=TLOS_PBTC)]

        result = await hydrate_multi_relays(ledger, dries)
        assert result.relays == []
        assert result.failed == {str(TLOS_USDT): "node down", str(TLOS_PBTC): "node down"}

    @pytest.mark.asyncio
    async def test_no_relays_no_read(self, ledger) -> None:
        await hydrate_multi_relays(ledger, [])
        assert ledger.calls == []


class TestHydrateRelays:
    @pytest.mark.asyncio
    async def test_mixed_batch(self, ledger, sleeps, tlos_usdt_relay) -> None:
        legacy = legacy_relay(0)
        ledger.add_legacy_relay(legacy, fee_ppm=3_000)
        ledger.multi_relays.append(tlos_usdt_relay)
        config = RelaySwapConfig(multi_contract="custom.swaps")

        result = await hydrate_relays(ledger, [legacy.to_dry(), tlos_usdt_relay.to_dry()], config)
        assert result.hydrated_ids == {legacy.id, tlos_usdt_relay.id}
        assert ("get_multi_relays", "custom.swaps") in ledger.calls
