"""Liquidity provisioning math and withdrawal plans."""

from relayswap.liquidity.math import (
    OpposingLiquidity,
    calculate_fund_return,
    calculate_opposing_deposit,
    calculate_opposing_withdraw,
    check_withdrawal_concentration,
    max_withdrawals,
    withdrawal_step_count,
)
from relayswap.liquidity.withdrawal import (
    LiquidateBurn,
    PlanStatus,
    StepOutcome,
    StepStatus,
    WithdrawalPlan,
    WithdrawalStep,
    plan_withdrawal,
    split_burns,
)

__all__ = [
    # Sizing
    "OpposingLiquidity",
    "calculate_fund_return",
    "calculate_opposing_deposit",
    "calculate_opposing_withdraw",
    "check_withdrawal_concentration",
    "withdrawal_step_count",
    "max_withdrawals",
    # Withdrawal plans
    "LiquidateBurn",
    "PlanStatus",
    "StepOutcome",
    "StepStatus",
    "WithdrawalPlan",
    "WithdrawalStep",
    "plan_withdrawal",
    "split_burns",
]
