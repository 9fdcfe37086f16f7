"""Mathematical utilities for relay pricing.

This package provides the decimal primitives every settlement value uses.
"""

from relayswap.math.decimal_utils import (
    DECIMAL_HIGH_PREC_CONTEXT,
    quantize_down,
    quantize_up,
    to_decimal,
)

__all__ = ["DECIMAL_HIGH_PREC_CONTEXT", "quantize_down", "quantize_up", "to_decimal"]
