"""Base classes for AMM implementations."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal

from relayswap.models.types import Quantity, TokenId


@dataclass(frozen=True)
class SwapResult:
    """Result of simulating a conversion through one relay.

    ``amount_in`` is the gross input including the fee; ``fee`` is the part
    of it retained by the relay. ``slippage`` is the price impact of the
    priced (net) amount relative to the relay's spot rate.
    """

    amount_in: Quantity
    amount_out: Quantity
    fee: Quantity
    slippage: Decimal
    relay_id: str

    @property
    def token_in(self) -> TokenId:
        return self.amount_in.token

    @property
    def token_out(self) -> TokenId:
        return self.amount_out.token


class AMM(ABC):
    """Abstract base class for bonding-curve math.

    Implementations work on the balances their curve prices against; for
    amplified relays these are virtual upper balances, not raw reserves.
    """

    @abstractmethod
    def get_amount_out(
        self,
        amount_in: Decimal,
        balance_in: Decimal,
        balance_out: Decimal,
    ) -> Decimal:
        """Calculate output amount for a given input.

        Args:
            amount_in: Input token amount (after fees)
            balance_in: Curve balance of the input token
            balance_out: Curve balance of the output token

        Returns:
            Output token amount, never negative
        """
        ...

    @abstractmethod
    def get_amount_in(
        self,
        amount_out: Decimal,
        balance_in: Decimal,
        balance_out: Decimal,
    ) -> Decimal:
        """Calculate required input for a desired output.

        Args:
            amount_out: Desired output token amount
            balance_in: Curve balance of the input token
            balance_out: Curve balance of the output token

        Returns:
            Required input amount (before fees), never negative
        """
        ...
