"""Pydantic models for the quote API requests and responses."""

from __future__ import annotations

from pydantic import BaseModel, Field

from relayswap.liquidity.math import OpposingLiquidity
from relayswap.liquidity.withdrawal import WithdrawalPlan
from relayswap.models.types import Quantity
from relayswap.pricing.feeds import RelayFeed
from relayswap.routing.router import Quote
from relayswap.routing.types import HopResult


class TokenAmount(BaseModel):
    """A ledger asset string and the contract issuing it."""

    contract: str = Field(description="Token contract account, e.g. eosio.token")
    quantity: str = Field(description="Ledger asset string, e.g. '1.0000 TLOS'")

    def to_quantity(self) -> Quantity:
        return Quantity.parse(self.quantity, self.contract)

    @classmethod
    def from_quantity(cls, quantity: Quantity) -> TokenAmount:
        return cls(contract=quantity.token.contract, quantity=str(quantity))


class ReturnRequest(BaseModel):
    amount_in: TokenAmount = Field(alias="amountIn")
    token_out: str = Field(alias="tokenOut", description="Token id, contract-SYMBOL")

    model_config = {"populate_by_name": True}


class CostRequest(BaseModel):
    amount_out: TokenAmount = Field(alias="amountOut")
    token_in: str = Field(alias="tokenIn", description="Token id, contract-SYMBOL")

    model_config = {"populate_by_name": True}


class HopModel(BaseModel):
    relay_id: str = Field(alias="relayId")
    amount_in: TokenAmount = Field(alias="amountIn")
    amount_out: TokenAmount = Field(alias="amountOut")
    fee: TokenAmount
    slippage: str

    model_config = {"populate_by_name": True}

    @classmethod
    def from_hop(cls, hop: HopResult) -> HopModel:
        return cls(
            relay_id=hop.relay_id,
            amount_in=TokenAmount.from_quantity(hop.amount_in),
            amount_out=TokenAmount.from_quantity(hop.amount_out),
            fee=TokenAmount.from_quantity(hop.fee),
            slippage=str(hop.slippage),
        )


class QuoteResponse(BaseModel):
    """Quoted conversion.

    ``amount`` is the output for a return quote and the required input for
    a cost quote. ``slippage`` is the worst single-hop slippage.
    """

    amount: TokenAmount
    path: list[str]
    hops: list[HopModel]
    slippage: str

    @classmethod
    def from_quote(cls, quote: Quote) -> QuoteResponse:
        return cls(
            amount=TokenAmount.from_quantity(quote.result.amount),
            path=quote.relay_ids,
            hops=[HopModel.from_hop(hop) for hop in quote.result.hops],
            slippage=str(quote.result.slippage),
        )


class DepositRequest(BaseModel):
    relay_id: str = Field(alias="relayId")
    deposit: TokenAmount

    model_config = {"populate_by_name": True}


class LiquidityResponse(BaseModel):
    opposing_amount: TokenAmount = Field(alias="opposingAmount")
    share_amount: TokenAmount = Field(alias="shareAmount")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_sizing(cls, sizing: OpposingLiquidity) -> LiquidityResponse:
        return cls(
            opposing_amount=TokenAmount.from_quantity(sizing.opposing_amount),
            share_amount=TokenAmount.from_quantity(sizing.share_amount),
        )


class WithdrawRequest(BaseModel):
    relay_id: str = Field(alias="relayId")
    withdraw: TokenAmount
    owned: TokenAmount = Field(description="Share tokens held by the caller")

    model_config = {"populate_by_name": True}


class AccountWithdrawRequest(BaseModel):
    """Withdrawal sized against the share balance the ledger holds for ``account``."""

    relay_id: str = Field(alias="relayId")
    withdraw: TokenAmount
    account: str = Field(description="Account whose share tokens are burned")

    model_config = {"populate_by_name": True}


class BalancesResponse(BaseModel):
    owned: TokenAmount
    max_withdrawals: list[TokenAmount] = Field(alias="maxWithdrawals")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_balances(cls, owned: Quantity, withdrawals: list[Quantity]) -> BalancesResponse:
        return cls(
            owned=TokenAmount.from_quantity(owned),
            max_withdrawals=[TokenAmount.from_quantity(amount) for amount in withdrawals],
        )


class BurnModel(BaseModel):
    reserve: str
    share_amount: TokenAmount = Field(alias="shareAmount")

    model_config = {"populate_by_name": True}


class StepModel(BaseModel):
    index: int
    description: str
    share_amount: TokenAmount = Field(alias="shareAmount")
    burns: list[BurnModel]

    model_config = {"populate_by_name": True}


class WithdrawResponse(LiquidityResponse):
    supply_fraction: str = Field(alias="supplyFraction")
    steps: list[StepModel]

    @classmethod
    def from_plan(cls, plan: WithdrawalPlan) -> WithdrawResponse:
        return cls(
            opposing_amount=TokenAmount.from_quantity(plan.sizing.opposing_amount),
            share_amount=TokenAmount.from_quantity(plan.share_amount),
            supply_fraction=str(plan.supply_fraction),
            steps=[
                StepModel(
                    index=step.index,
                    description=step.description,
                    share_amount=TokenAmount.from_quantity(step.share_amount),
                    burns=[
                        BurnModel(
                            reserve=str(burn.reserve),
                            share_amount=TokenAmount.from_quantity(burn.share_amount),
                        )
                        for burn in step.burns
                    ],
                )
                for step in plan.steps
            ],
        )


class FeedModel(BaseModel):
    relay_id: str = Field(alias="relayId")
    token: str
    unit_price: str = Field(alias="unitPrice")
    liquidity_depth: str = Field(alias="liquidityDepth")
    apr: str

    model_config = {"populate_by_name": True}

    @classmethod
    def from_feed(cls, feed: RelayFeed) -> FeedModel:
        return cls(
            relay_id=feed.relay_id,
            token=str(feed.token),
            unit_price=str(feed.unit_price),
            liquidity_depth=str(feed.liquidity_depth),
            apr=str(feed.apr),
        )


__all__ = [
    "TokenAmount",
    "ReturnRequest",
    "CostRequest",
    "HopModel",
    "QuoteResponse",
    "DepositRequest",
    "LiquidityResponse",
    "WithdrawRequest",
    "BurnModel",
    "StepModel",
    "WithdrawResponse",
    "FeedModel",
]
