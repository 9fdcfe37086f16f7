"""Shared high-precision Decimal utilities for settlement arithmetic.

Curve and fee math runs under a wide context so intermediate ratios never
lose digits that later survive quantization to a token's precision.
"""

from __future__ import annotations

import decimal
from decimal import ROUND_DOWN, ROUND_UP, Decimal, InvalidOperation

from relayswap.errors import InvalidInputError

# 50 digits covers 18-decimal amounts up to ~10^31 with room for ratios
DECIMAL_HIGH_PREC_CONTEXT = decimal.Context(prec=50)


def to_decimal(value: Decimal | int | str | float) -> Decimal:
    """Convert a number to Decimal without binary float artifacts.

    Floats go through str() so 0.1 becomes Decimal("0.1").

    Raises:
        InvalidInputError: If the value is not a finite number
    """
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except (InvalidOperation, ValueError) as err:
            raise InvalidInputError(f"Not a number: {value!r}") from err
    if not result.is_finite():
        raise InvalidInputError(f"Not a finite number: {value!r}")
    return result


def unit(precision: int) -> Decimal:
    """Smallest representable amount at a precision (1e-precision)."""
    return Decimal(1).scaleb(-precision)


def quantize_down(value: Decimal, precision: int) -> Decimal:
    """Truncate toward zero to the given number of decimal places."""
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        return value.quantize(unit(precision), rounding=ROUND_DOWN)


def quantize_up(value: Decimal, precision: int) -> Decimal:
    """Round away from zero to the given number of decimal places."""
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        return value.quantize(unit(precision), rounding=ROUND_UP)


__all__ = [
    "DECIMAL_HIGH_PREC_CONTEXT",
    "to_decimal",
    "unit",
    "quantize_down",
    "quantize_up",
]
