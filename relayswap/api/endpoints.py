"""API endpoints for the relay quote service."""

from __future__ import annotations

import os
from functools import lru_cache

import structlog
from fastapi import APIRouter, Depends

from relayswap.config import RelaySwapConfig
from relayswap.errors import UnavailableDataError
from relayswap.hydration.reader import HttpLedgerReader
from relayswap.market import Market, load_market
from relayswap.models.quote import (
    AccountWithdrawRequest,
    BalancesResponse,
    CostRequest,
    DepositRequest,
    FeedModel,
    LiquidityResponse,
    QuoteResponse,
    ReturnRequest,
    WithdrawRequest,
    WithdrawResponse,
)
from relayswap.pools.registry import PoolRegistry
from relayswap.service import QuoteService

logger = structlog.get_logger()

router = APIRouter()

SNAPSHOT_PATH_ENV = "RELAYSWAP_SNAPSHOT_PATH"


@lru_cache(maxsize=1)
def _default_market() -> Market:
    path = os.environ.get(SNAPSHOT_PATH_ENV)
    if not path:
        raise UnavailableDataError(f"No market snapshot configured ({SNAPSHOT_PATH_ENV} is unset)")
    return load_market(path, RelaySwapConfig.from_env())


def get_market() -> Market:
    """Dependency provider for the market snapshot.

    Override this in tests to inject a fixed market:
        app.dependency_overrides[get_market] = lambda: market
    """
    return _default_market()


@lru_cache(maxsize=1)
def _default_service() -> QuoteService:
    config = RelaySwapConfig.from_env()
    # Live quotes start from the snapshot's relay identities and hydrate on demand
    registry = PoolRegistry(_default_market().registry.dry_relays(), blacklist=config.blacklisted_tokens)
    reader = HttpLedgerReader(config.rpc_url, timeout=config.request_timeout_seconds)
    logger.info("live_service_created", rpc_url=config.rpc_url, relays=registry.relay_count)
    return QuoteService(reader, registry, config)


def get_service() -> QuoteService:
    """Dependency provider for the live quote service.

    Override this in tests to inject a service over a fake reader:
        app.dependency_overrides[get_service] = lambda: service
    """
    return _default_service()


async def close_service() -> None:
    """Close the live service's ledger client, if one was created."""
    if _default_service.cache_info().currsize == 0:
        return
    reader = _default_service().reader
    if isinstance(reader, HttpLedgerReader):
        await reader.aclose()
    _default_service.cache_clear()


@router.post("/quote/return", response_model_exclude_none=True)
async def quote_return(request: ReturnRequest, market: Market = Depends(get_market)) -> QuoteResponse:
    """Output received for an exact input, routed across relays."""
    amount_in = request.amount_in.to_quantity()
    quote = market.quote_return(amount_in, request.token_out)
    logger.info(
        "quote_return_served",
        amount_in=str(amount_in),
        token_out=request.token_out,
        amount_out=str(quote.result.amount),
        hops=len(quote.result.hops),
    )
    return QuoteResponse.from_quote(quote)


@router.post("/quote/cost", response_model_exclude_none=True)
async def quote_cost(request: CostRequest, market: Market = Depends(get_market)) -> QuoteResponse:
    """Input required for an exact output, routed across relays."""
    amount_out = request.amount_out.to_quantity()
    quote = market.quote_cost(amount_out, request.token_in)
    logger.info(
        "quote_cost_served",
        amount_out=str(amount_out),
        token_in=request.token_in,
        amount_in=str(quote.result.amount),
        hops=len(quote.result.hops),
    )
    return QuoteResponse.from_quote(quote)


@router.post("/liquidity/deposit")
async def liquidity_deposit(
    request: DepositRequest, market: Market = Depends(get_market)
) -> LiquidityResponse:
    """Opposing reserve amount and share tokens minted for a one-sided deposit."""
    sizing = market.opposing_deposit(request.relay_id, request.deposit.to_quantity())
    return LiquidityResponse.from_sizing(sizing)


@router.post("/liquidity/withdraw")
async def liquidity_withdraw(
    request: WithdrawRequest, market: Market = Depends(get_market)
) -> WithdrawResponse:
    """Multi-step withdrawal plan for a one-sided withdrawal amount."""
    plan = market.plan_withdrawal(
        request.relay_id,
        request.withdraw.to_quantity(),
        request.owned.to_quantity(),
    )
    logger.info(
        "withdrawal_planned",
        relay=request.relay_id,
        share_amount=str(plan.share_amount),
        steps=len(plan.steps),
    )
    return WithdrawResponse.from_plan(plan)


@router.get("/feeds")
async def feeds(market: Market = Depends(get_market)) -> list[FeedModel]:
    """Price feeds of every hydrated relay priceable from the known prices."""
    return [FeedModel.from_feed(feed) for feed in market.registry.feeds(market.known_prices)]


@router.post("/live/quote/return", response_model_exclude_none=True)
async def live_quote_return(
    request: ReturnRequest, service: QuoteService = Depends(get_service)
) -> QuoteResponse:
    """Exact-input quote over relays hydrated from the ledger on demand."""
    amount_in = request.amount_in.to_quantity()
    quote = await service.find_return(amount_in, request.token_out)
    logger.info(
        "live_quote_return_served",
        amount_in=str(amount_in),
        token_out=request.token_out,
        amount_out=str(quote.result.amount),
        hops=len(quote.result.hops),
    )
    return QuoteResponse.from_quote(quote)


@router.post("/live/quote/cost", response_model_exclude_none=True)
async def live_quote_cost(
    request: CostRequest, service: QuoteService = Depends(get_service)
) -> QuoteResponse:
    amount_out = request.amount_out.to_quantity()
    quote = await service.find_cost(amount_out, request.token_in)
    logger.info(
        "live_quote_cost_served",
        amount_out=str(amount_out),
        token_in=request.token_in,
        amount_in=str(quote.result.amount),
        hops=len(quote.result.hops),
    )
    return QuoteResponse.from_quote(quote)


@router.post("/live/liquidity/deposit")
async def live_liquidity_deposit(
    request: DepositRequest, service: QuoteService = Depends(get_service)
) -> LiquidityResponse:
    sizing = await service.opposing_deposit(request.relay_id, request.deposit.to_quantity())
    return LiquidityResponse.from_sizing(sizing)


@router.post("/live/liquidity/withdraw")
async def live_liquidity_withdraw(
    request: AccountWithdrawRequest, service: QuoteService = Depends(get_service)
) -> WithdrawResponse:
    """Withdrawal plan against the account's share balance and the live supply."""
    plan = await service.plan_withdrawal(
        request.relay_id, request.withdraw.to_quantity(), request.account
    )
    logger.info(
        "live_withdrawal_planned",
        relay=request.relay_id,
        account=request.account,
        share_amount=str(plan.share_amount),
        steps=len(plan.steps),
    )
    return WithdrawResponse.from_plan(plan)


@router.get("/live/balances/{relay_id}/{account}")
async def live_balances(
    relay_id: str, account: str, service: QuoteService = Depends(get_service)
) -> BalancesResponse:
    """Share tokens held by ``account`` and the most it can withdraw per reserve."""
    owned, withdrawals = await service.user_balances(relay_id, account)
    return BalancesResponse.from_balances(owned, withdrawals)
