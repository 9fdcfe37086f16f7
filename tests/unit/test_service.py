"""Tests for QuoteService over a fake ledger."""

import pytest

from relayswap.amm import bancor
from relayswap.errors import (
    HydrationError,
    InsufficientShareBalanceError,
    NoRouteError,
    UnavailableDataError,
)
from relayswap.models.types import TokenId
from relayswap.pools import PoolRegistry
from relayswap.service import QuoteService
from tests.helpers import TLOS, TLOS_PBTC, TLOS_USDT, USDT, make_dry_relay, make_relay, qty

TLOS_USDT_ALT = TokenId("relays.swaps", "TLOSUSX")


@pytest.fixture
def service(ledger, tlos_usdt_relay) -> QuoteService:
    """Service over a registry holding only the dry TLOS/USDT relay."""
    ledger.multi_relays.append(tlos_usdt_relay)
    ledger.supplies[TLOS_USDT] = qty(10_000, TLOS_USDT)
    return QuoteService(ledger, PoolRegistry([tlos_usdt_relay.to_dry()]))


class TestQuotes:
    @pytest.mark.asyncio
    async def test_hydrates_path_before_quoting(self, service, ledger, tlos_usdt_relay) -> None:
        quote = await service.find_return(qty(100), USDT)
        assert quote.result.amount == bancor.simulate_swap(tlos_usdt_relay, qty(100)).amount_out
        assert service.registry.is_hydrated(tlos_usdt_relay.id)
        assert ("get_multi_relays", "tlosdx.swaps") in ledger.calls

    @pytest.mark.asyncio
    async def test_hydrated_relays_reused(self, service, ledger) -> None:
        await service.find_return(qty(100), USDT)
        calls = len(ledger.calls)
        await service.find_cost(qty(10, USDT), TLOS)
        assert len(ledger.calls) == calls

    @pytest.mark.asyncio
    async def test_failed_relay_excluded_for_alternative(self, ledger) -> None:
        alternative = make_relay(qty(50_000, TLOS), qty(10_000, USDT), share=TLOS_USDT_ALT)
        registry = PoolRegistry([make_dry_relay(TLOS, USDT, share=TLOS_USDT), alternative])
        service = QuoteService(ledger, registry)

        quote = await service.find_return(qty(100), USDT)
        assert quote.relay_ids == [alternative.id]

    @pytest.mark.asyncio
    async def test_disabled_relay_excluded(self, ledger) -> None:
        disabled = make_relay(qty(100_000, TLOS), qty(20_000, USDT), enabled=False)
        ledger.multi_relays.append(disabled)
        service = QuoteService(ledger, PoolRegistry([disabled.to_dry()]))
        with pytest.raises(NoRouteError):
            await service.find_return(qty(100), USDT)

    @pytest.mark.asyncio
    async def test_no_hydratable_route(self, ledger) -> None:
        service = QuoteService(ledger, PoolRegistry([make_dry_relay(TLOS, USDT)]))
        with pytest.raises(NoRouteError):
            await service.find_cost(qty(10, USDT), TLOS)


class TestRelays:
    @pytest.mark.asyncio
    async def test_get_relay_hydrates_once(self, service, ledger, tlos_usdt_relay) -> None:
        assert await service.get_relay(tlos_usdt_relay.id) == tlos_usdt_relay
        await service.get_relay(tlos_usdt_relay.id)
        assert ledger.calls.count(("get_multi_relays", "tlosdx.swaps")) == 1

    @pytest.mark.asyncio
    async def test_unknown_relay(self, service) -> None:
        with pytest.raises(UnavailableDataError, match="unknown"):
            await service.get_relay("relays.swaps-NOPE")

    @pytest.mark.asyncio
    async def test_hydration_failure(self, ledger) -> None:
        dry = make_dry_relay(TLOS, USDT, share=TLOS_PBTC)
        service = QuoteService(ledger, PoolRegistry([dry]))
        with pytest.raises(HydrationError, match="not found"):
            await service.get_relay(dry.id)


class TestLiquidity:
    @pytest.mark.asyncio
    async def test_opposing_deposit(self, service) -> None:
        sizing = await service.opposing_deposit(str(TLOS_USDT), qty(1_000))
        assert sizing.opposing_amount == qty(200, USDT)
        assert sizing.share_amount == qty(100, TLOS_USDT)

    @pytest.mark.asyncio
    async def test_missing_supply(self, service, ledger) -> None:
        del ledger.supplies[TLOS_USDT]
        with pytest.raises(UnavailableDataError, match="supply"):
            await service.opposing_deposit(str(TLOS_USDT), qty(1_000))

    @pytest.mark.asyncio
    async def test_plan_withdrawal_reads_owned_balance(self, service, ledger) -> None:
        ledger.balances[(TLOS_USDT, "alice")] = qty(250, TLOS_USDT)
        plan = await service.plan_withdrawal(str(TLOS_USDT), qty(2_500), "alice")
        assert plan.share_amount == qty(250, TLOS_USDT)
        assert len(plan.steps) == 3

    @pytest.mark.asyncio
    async def test_withdrawal_without_shares(self, service) -> None:
        with pytest.raises(InsufficientShareBalanceError):
            await service.plan_withdrawal(str(TLOS_USDT), qty(2_500), "alice")

    @pytest.mark.asyncio
    async def test_user_balances(self, service, ledger) -> None:
        ledger.balances[(TLOS_USDT, "alice")] = qty(250, TLOS_USDT)
        owned, withdrawals = await service.user_balances(str(TLOS_USDT), "alice")
        assert owned == qty(250, TLOS_USDT)
        assert withdrawals == [qty(2_500, TLOS), qty(500, USDT)]

    @pytest.mark.asyncio
    async def test_user_without_balance_owns_zero(self, service) -> None:
        owned, withdrawals = await service.user_balances(str(TLOS_USDT), "bob")
        assert owned.is_zero
        assert all(amount.is_zero for amount in withdrawals)
