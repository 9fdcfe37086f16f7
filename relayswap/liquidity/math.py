"""Proportional liquidity sizing against a relay's share supply.

Deposits and withdrawals are sized from one reserve side:

    percent  = amount / side_reserve
    opposing = percent * opposing_reserve

Deposits mint the lower of the two sides' fund returns
(``side_amount / side_reserve * supply``) so a mismatched ratio never
earns excess shares. Minted shares are truncated; burned shares are
rounded up, so rounding always favours the pool.
"""

from __future__ import annotations

import decimal
import math
from dataclasses import dataclass
from decimal import Decimal

from relayswap.constants import (
    MAX_WITHDRAW_SUPPLY_FRACTION,
    OWNED_SHARE_TOLERANCE,
    WITHDRAW_STEP_FRACTION,
)
from relayswap.errors import (
    ConcentrationGuardError,
    InsufficientLiquidityError,
    InsufficientShareBalanceError,
    InvalidInputError,
    TokenMismatchError,
)
from relayswap.math.decimal_utils import DECIMAL_HIGH_PREC_CONTEXT, quantize_up
from relayswap.models.types import Quantity
from relayswap.pools.relay import Relay, ReserveSide


@dataclass(frozen=True)
class OpposingLiquidity:
    """Result of sizing one side of a deposit or withdrawal.

    Attributes:
        opposing_amount: Matching amount of the other reserve
        share_amount: Share tokens minted (deposit) or burned (withdrawal)
    """

    opposing_amount: Quantity
    share_amount: Quantity


def _check_supply(relay: Relay, supply: Quantity) -> None:
    if supply.token != relay.smart_token:
        raise TokenMismatchError(f"Supply {supply.symbol} is not the share token of relay {relay.id}")
    if not supply.is_positive:
        raise InsufficientLiquidityError(f"Relay {relay.id} has no share supply")


def _sides(relay: Relay, amount: Quantity) -> tuple[ReserveSide, ReserveSide]:
    if not amount.is_positive:
        raise InvalidInputError(f"[quantity] amount must be positive: {amount}")
    same, opposing = relay.get_reserves(amount.token)
    if amount.precision != same.precision:
        raise TokenMismatchError(f"{amount} does not match relay precision {same.precision}")
    if not same.balance.is_positive:
        raise InsufficientLiquidityError(f"{same.token} reserve of relay {relay.id} is empty")
    return same, opposing


def calculate_fund_return(amount: Quantity, reserve: Quantity, supply: Quantity) -> Quantity:
    """Share tokens proportional to ``amount`` relative to one reserve.

    fund_return = amount / reserve * supply, truncated to the share precision.
    """
    if amount.token != reserve.token:
        raise TokenMismatchError(f"Cannot size {amount.symbol} against a {reserve.symbol} reserve")
    if not reserve.is_positive:
        raise InsufficientLiquidityError(f"{reserve.token} reserve is empty")
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        return supply.with_amount(amount.amount / reserve.amount * supply.amount)


def calculate_opposing_deposit(relay: Relay, deposit: Quantity, supply: Quantity) -> OpposingLiquidity:
    """Size a two-sided deposit from the amount of one reserve.

    Args:
        relay: Hydrated relay
        deposit: Amount of one reserve token the caller wants to add
        supply: Current share token supply

    Returns:
        Opposing reserve amount and the lower of the two fund returns
    """
    _check_supply(relay, supply)
    same, opposing = _sides(relay, deposit)

    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        percent = deposit.amount / same.balance.amount
        opposing_amount = opposing.balance.with_amount(percent * opposing.balance.amount)

    same_return = calculate_fund_return(deposit, same.balance, supply)
    if opposing_amount.is_positive:
        opposing_return = calculate_fund_return(opposing_amount, opposing.balance, supply)
    else:
        opposing_return = Quantity.zero(supply.token, supply.precision)

    return OpposingLiquidity(
        opposing_amount=opposing_amount,
        share_amount=min(same_return, opposing_return),
    )


def calculate_opposing_withdraw(
    relay: Relay,
    withdraw: Quantity,
    supply: Quantity,
    owned: Quantity,
) -> OpposingLiquidity:
    """Size a two-sided withdrawal from the amount of one reserve.

    The share amount is the total to burn across both single-asset burns.
    Amounts within ``OWNED_SHARE_TOLERANCE`` of the owned balance settle as
    exactly the owned balance.

    Raises:
        InsufficientLiquidityError: Withdrawal exceeds the reserve
        InsufficientShareBalanceError: Needs more shares than owned
    """
    _check_supply(relay, supply)
    if owned.token != supply.token:
        raise TokenMismatchError(f"Owned {owned.symbol} is not the share token of relay {relay.id}")
    same, opposing = _sides(relay, withdraw)
    if withdraw > same.balance:
        raise InsufficientLiquidityError(
            f"{same.token.symbol} insufficient remaining reserve on relay {relay.id}"
        )
    if not owned.is_positive:
        raise InsufficientShareBalanceError(f"No {owned.symbol.code} owned in relay {relay.id}")

    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        percent = withdraw.amount / same.balance.amount
        opposing_amount = opposing.balance.with_amount(percent * opposing.balance.amount)
        share = percent * supply.amount
        owned_ratio = share / owned.amount

    if owned_ratio > 1 + OWNED_SHARE_TOLERANCE:
        raise InsufficientShareBalanceError(
            f"Withdrawal needs {share} {owned.symbol.code} but only {owned} is owned"
        )
    if owned_ratio > 1 - OWNED_SHARE_TOLERANCE:
        share_amount = owned
    else:
        share_amount = owned.with_amount(quantize_up(share, owned.precision))

    return OpposingLiquidity(opposing_amount=opposing_amount, share_amount=share_amount)


def check_withdrawal_concentration(share_amount: Quantity, supply: Quantity) -> Decimal:
    """Fraction of the share supply a withdrawal burns.

    Raises:
        ConcentrationGuardError: The fraction is 30% or more
    """
    if share_amount.token != supply.token:
        raise TokenMismatchError(f"Cannot compare {share_amount.symbol} with {supply.symbol} supply")
    if not supply.is_positive:
        raise InsufficientLiquidityError(f"{supply.token} has no supply")
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        fraction = share_amount.amount / supply.amount
    if fraction >= MAX_WITHDRAW_SUPPLY_FRACTION:
        raise ConcentrationGuardError(
            f"Withdrawal burns {fraction:.2%} of the pool supply; withdrawals of "
            f"{MAX_WITHDRAW_SUPPLY_FRACTION:.0%} or more must be split into a "
            f"multi-step withdrawal"
        )
    return fraction


def withdrawal_step_count(fraction: Decimal, share_amount: Quantity) -> int:
    """Number of steps for a withdrawal burning ``fraction`` of the supply.

    One step per ~1% of pool ownership, at least one. Collapses to a single
    step when the per-step share amount would truncate to zero.
    """
    steps = max(1, math.ceil(fraction / WITHDRAW_STEP_FRACTION))
    if steps > 1:
        with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
            per_step = share_amount.with_amount(share_amount.amount / steps)
        if per_step.is_zero:
            steps = 1
    return steps


def max_withdrawals(relay: Relay, owned: Quantity, supply: Quantity) -> list[Quantity]:
    """Per-reserve amounts redeemable for ``owned`` shares, in reserve order.

    max_withdrawal = reserve_balance * owned / supply
    """
    _check_supply(relay, supply)
    if owned.token != supply.token:
        raise TokenMismatchError(f"Owned {owned.symbol} is not the share token of relay {relay.id}")
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        percent = owned.amount / supply.amount
        return [side.balance.with_amount(side.balance.amount * percent) for side in relay.reserves]


__all__ = [
    "OpposingLiquidity",
    "calculate_fund_return",
    "calculate_opposing_deposit",
    "calculate_opposing_withdraw",
    "check_withdrawal_concentration",
    "withdrawal_step_count",
    "max_withdrawals",
]
