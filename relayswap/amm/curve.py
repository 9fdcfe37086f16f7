"""Bancor V1 bonding curve formulas.

Pure functions over virtual upper balances:

    out = (quantity * quote_upper) / (base_upper + quantity)
    inp = (base_upper * out) / (quote_upper - out)

Both clamp to zero instead of returning a negative amount. A clamp on a
positive request means the curve cannot serve it; callers report that as
insufficient liquidity, never as a free trade.
"""

from __future__ import annotations

import decimal
from decimal import Decimal

from relayswap.math.decimal_utils import DECIMAL_HIGH_PREC_CONTEXT

ZERO = Decimal(0)


def get_bancor_output(base_upper: Decimal, quote_upper: Decimal, quantity: Decimal) -> Decimal:
    """Output of quote token for ``quantity`` of base token.

    Args:
        base_upper: Virtual upper balance of the input side
        quote_upper: Virtual upper balance of the output side
        quantity: Net input amount

    Returns:
        Output amount, clamped to zero
    """
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        denominator = base_upper + quantity
        if denominator <= 0:
            return ZERO
        out = (quantity * quote_upper) / denominator
    return out if out > 0 else ZERO


def get_bancor_input(base_upper: Decimal, quote_upper: Decimal, out: Decimal) -> Decimal:
    """Input of base token needed to receive ``out`` of quote token.

    Args:
        base_upper: Virtual upper balance of the input side
        quote_upper: Virtual upper balance of the output side
        out: Desired output amount

    Returns:
        Net input amount, clamped to zero when the curve cannot supply ``out``
    """
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        denominator = quote_upper - out
        if denominator <= 0:
            return ZERO
        inp = (base_upper * out) / denominator
    return inp if inp > 0 else ZERO


__all__ = ["get_bancor_output", "get_bancor_input"]
