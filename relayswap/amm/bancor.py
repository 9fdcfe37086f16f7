"""Bancor relay conversions.

Simulates conversions through a single hydrated relay: fee handling,
amplified reserve balances and the bonding curve from ``curve.py``.
"""

from __future__ import annotations

import decimal
from decimal import Decimal

from relayswap.amm.base import AMM, SwapResult
from relayswap.amm.curve import get_bancor_input, get_bancor_output
from relayswap.amm.reserve import relay_uppers
from relayswap.errors import InsufficientLiquidityError, InvalidInputError, TokenMismatchError
from relayswap.math.decimal_utils import DECIMAL_HIGH_PREC_CONTEXT, quantize_up
from relayswap.models.types import Quantity, TokenId
from relayswap.pools.relay import Relay
from relayswap.pricing.fees import get_fee, get_inverse_fee


class BancorAMM(AMM):
    """Bancor curve math and single-relay conversion simulation."""

    def get_amount_out(
        self,
        amount_in: Decimal,
        balance_in: Decimal,
        balance_out: Decimal,
    ) -> Decimal:
        return get_bancor_output(balance_in, balance_out, amount_in)

    def get_amount_in(
        self,
        amount_out: Decimal,
        balance_in: Decimal,
        balance_out: Decimal,
    ) -> Decimal:
        return get_bancor_input(balance_in, balance_out, amount_out)

    def simulate_swap(self, relay: Relay, amount_in: Quantity) -> SwapResult:
        """Simulate a conversion through a relay (exact input).

        The relay fee is deducted from the input before pricing. The output
        is truncated to the output token's precision.

        Raises:
            InvalidInputError: Non-positive input, or nothing left after fees
            InsufficientLiquidityError: Curve clamp or reserve would go negative
        """
        if not amount_in.is_positive:
            raise InvalidInputError(f"[quantity] amount must be positive: {amount_in}")

        side_in, side_out = relay.get_reserves(amount_in.token)
        if amount_in.precision != side_in.precision:
            raise TokenMismatchError(
                f"{amount_in} does not match relay precision {side_in.precision}"
            )
        upper_in, upper_out = relay_uppers(relay, amount_in.token)

        fee = get_fee(amount_in, relay)
        net = amount_in - fee
        if not net.is_positive:
            raise InvalidInputError(f"{amount_in} is too small to convert after fees")

        raw_out = self.get_amount_out(net.amount, upper_in, upper_out)
        if raw_out <= 0:
            raise InsufficientLiquidityError(
                f"Relay {relay.id} cannot price {net} into {side_out.token.symbol}"
            )
        amount_out = Quantity(raw_out, side_out.token, side_out.precision)
        if amount_out.is_zero:
            raise InvalidInputError(f"{amount_in} is too small to convert into {side_out.token.symbol}")
        if amount_out > side_out.balance:
            raise InsufficientLiquidityError(
                f"{side_out.token.symbol} insufficient remaining reserve on relay {relay.id}"
            )

        with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
            spot_out = net.amount * upper_out / upper_in
            slippage = spot_out / raw_out - 1

        return SwapResult(
            amount_in=amount_in,
            amount_out=amount_out,
            fee=fee,
            slippage=slippage,
            relay_id=relay.id,
        )

    def simulate_swap_exact_output(
        self,
        relay: Relay,
        token_in: TokenId | str,
        amount_out: Quantity,
    ) -> SwapResult:
        """Simulate a conversion to receive an exact output amount.

        The required net input is rounded up to the input precision, then
        grossed up by the inverse fee.

        Raises:
            InvalidInputError: Non-positive output or wrong output token
            InsufficientLiquidityError: Output exceeds the reserve or the curve
        """
        if not amount_out.is_positive:
            raise InvalidInputError(f"[quantity] amount must be positive: {amount_out}")

        side_in, side_out = relay.get_reserves(token_in)
        if amount_out.token != side_out.token or amount_out.precision != side_out.precision:
            raise TokenMismatchError(
                f"Relay {relay.id} converts {side_in.token} into {side_out.balance.symbol}, "
                f"not {amount_out.symbol}"
            )
        if amount_out > side_out.balance:
            raise InsufficientLiquidityError(
                f"{side_out.token.symbol} insufficient remaining reserve on relay {relay.id}"
            )
        upper_in, upper_out = relay_uppers(relay, side_in.token)

        raw_in = self.get_amount_in(amount_out.amount, upper_in, upper_out)
        if raw_in <= 0:
            raise InsufficientLiquidityError(
                f"Relay {relay.id} cannot supply {amount_out}"
            )
        net = Quantity(quantize_up(raw_in, side_in.precision), side_in.token, side_in.precision)
        fee = get_inverse_fee(net, relay)

        with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
            spot_out = raw_in * upper_out / upper_in
            slippage = spot_out / amount_out.amount - 1

        return SwapResult(
            amount_in=net + fee,
            amount_out=amount_out,
            fee=fee,
            slippage=slippage,
            relay_id=relay.id,
        )


# Singleton instance
bancor = BancorAMM()


__all__ = ["BancorAMM", "bancor"]
