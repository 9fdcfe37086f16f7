"""Multi-step liquidity withdrawal plans.

A withdrawal is settled as a sequence of independent steps. Each step burns
its share amount as two single-asset burns of half the amount, one per
reserve. The caller executes the steps in order and reports each outcome
back to the plan before asking for the next one:

    plan = plan_withdrawal(relay, withdraw, supply, owned)
    while (step := plan.next_step()) is not None:
        try:
            tx_id = submit(step)
        except LedgerError as err:
            plan.record_failure(str(err))
            break
        plan.record_success(tx_id)

There is no rollback: steps completed before a failure stay settled, and
a failed plan is not retried by the plan itself.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from relayswap.errors import InvalidInputError
from relayswap.liquidity.math import (
    OpposingLiquidity,
    calculate_opposing_withdraw,
    check_withdrawal_concentration,
    withdrawal_step_count,
)
from relayswap.models.types import Quantity, TokenId
from relayswap.pools.relay import Relay


class StepStatus(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class PlanStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class LiquidateBurn:
    """Burn of share tokens redeemed for a single reserve."""

    reserve: TokenId
    share_amount: Quantity


@dataclass(frozen=True)
class WithdrawalStep:
    index: int
    share_amount: Quantity
    burns: tuple[LiquidateBurn, ...]

    @property
    def description(self) -> str:
        return f"Withdrawing liquidity stage {self.index + 1}"


@dataclass(frozen=True)
class StepOutcome:
    step: WithdrawalStep
    status: StepStatus
    tx_id: str | None = None
    error: str | None = None


def split_burns(relay: Relay, share_amount: Quantity) -> tuple[LiquidateBurn, ...]:
    """Split a share amount into one half-sized burn per reserve.

    The second burn takes the remainder so the burns sum to ``share_amount``.
    """
    if len(relay.reserves) != 2:
        raise InvalidInputError(f"Relay {relay.id} must have exactly two reserves to withdraw")
    first, second = relay.reserve_ids
    half = share_amount.with_amount(share_amount.amount / 2)
    return (
        LiquidateBurn(reserve=first, share_amount=half),
        LiquidateBurn(reserve=second, share_amount=share_amount - half),
    )


@dataclass
class WithdrawalPlan:
    """Explicit sequence of withdrawal steps driven by the caller.

    Attributes:
        relay_id: Relay the shares belong to
        sizing: Opposing amount and total share amount of the withdrawal
        supply_fraction: Share of the pool supply burned overall
        steps: Steps in execution order
        outcomes: Result of each executed step, in order
    """

    relay_id: str
    sizing: OpposingLiquidity
    supply_fraction: Decimal
    steps: tuple[WithdrawalStep, ...]
    outcomes: list[StepOutcome] = field(default_factory=list)

    @property
    def share_amount(self) -> Quantity:
        return self.sizing.share_amount

    @property
    def status(self) -> PlanStatus:
        if any(outcome.status is StepStatus.FAILED for outcome in self.outcomes):
            return PlanStatus.FAILED
        if len(self.outcomes) == len(self.steps):
            return PlanStatus.COMPLETED
        if self.outcomes:
            return PlanStatus.IN_PROGRESS
        return PlanStatus.PENDING

    @property
    def is_complete(self) -> bool:
        return self.status is PlanStatus.COMPLETED

    @property
    def completed_steps(self) -> list[WithdrawalStep]:
        return [o.step for o in self.outcomes if o.status is StepStatus.SUCCEEDED]

    @property
    def pending_steps(self) -> list[WithdrawalStep]:
        if self.status is PlanStatus.FAILED:
            return []
        return list(self.steps[len(self.outcomes) :])

    def next_step(self) -> WithdrawalStep | None:
        """Next step to execute, or None when the plan is finished."""
        pending = self.pending_steps
        return pending[0] if pending else None

    def _record(self, outcome_status: StepStatus, tx_id: str | None, error: str | None) -> StepOutcome:
        step = self.next_step()
        if step is None:
            raise InvalidInputError(f"Withdrawal plan for {self.relay_id} is already {self.status.value}")
        outcome = StepOutcome(step=step, status=outcome_status, tx_id=tx_id, error=error)
        self.outcomes.append(outcome)
        return outcome

    def record_success(self, tx_id: str) -> StepOutcome:
        return self._record(StepStatus.SUCCEEDED, tx_id, None)

    def record_failure(self, error: str) -> StepOutcome:
        """Mark the current step failed. Earlier steps remain settled."""
        return self._record(StepStatus.FAILED, None, error)


def plan_withdrawal(
    relay: Relay,
    withdraw: Quantity,
    supply: Quantity,
    owned: Quantity,
) -> WithdrawalPlan:
    """Size a withdrawal and split it into steps of ~1% of the pool.

    Raises:
        ConcentrationGuardError: The withdrawal burns 30% or more of supply
        InsufficientShareBalanceError: Needs more shares than owned
        InsufficientLiquidityError: Withdrawal exceeds the reserve
    """
    sizing = calculate_opposing_withdraw(relay, withdraw, supply, owned)
    fraction = check_withdrawal_concentration(sizing.share_amount, supply)
    count = withdrawal_step_count(fraction, sizing.share_amount)

    total = sizing.share_amount
    per_step = total.with_amount(total.amount / count)
    steps = []
    remaining = total
    for index in range(count):
        # Last step absorbs the truncation remainder
        amount = remaining if index == count - 1 else per_step
        steps.append(
            WithdrawalStep(index=index, share_amount=amount, burns=split_burns(relay, amount))
        )
        remaining = remaining - amount

    return WithdrawalPlan(
        relay_id=relay.id,
        sizing=sizing,
        supply_fraction=fraction,
        steps=tuple(steps),
    )


__all__ = [
    "StepStatus",
    "PlanStatus",
    "LiquidateBurn",
    "WithdrawalStep",
    "StepOutcome",
    "WithdrawalPlan",
    "split_burns",
    "plan_withdrawal",
]
