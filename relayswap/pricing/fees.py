"""Conversion fee math.

Forward conversions deduct the fee from the input before pricing. Inverse
conversions start from a net amount and gross it up so that, after the
forward fee is deducted, the priced amount still reaches the target:

    fee          = amount * fee_bps / 10000
    inverse_fee  = net / ((10000 - fee_bps) / 10000) - net
"""

from __future__ import annotations

import decimal
from decimal import Decimal
from typing import Protocol

from relayswap.constants import FEE_DENOMINATOR, LEGACY_FEE_DENOMINATOR
from relayswap.errors import InvalidInputError
from relayswap.math.decimal_utils import DECIMAL_HIGH_PREC_CONTEXT, quantize_up, to_decimal
from relayswap.models.types import Quantity


class HasFee(Protocol):
    """Anything carrying a fee in parts-per-ten-thousand (Settings, Relay)."""

    @property
    def fee(self) -> Decimal: ...


def _fee_bps(settings: HasFee | Decimal | int) -> Decimal:
    fee = to_decimal(settings) if isinstance(settings, Decimal | int) else settings.fee
    if not 0 <= fee < FEE_DENOMINATOR:
        raise InvalidInputError(f"Fee must be in [0, {FEE_DENOMINATOR}): {fee}")
    return fee


def get_fee(quantity: Quantity, settings: HasFee | Decimal) -> Quantity:
    """Fee charged on a forward conversion of ``quantity``.

    Truncated to the token's precision, like any on-ledger amount.
    """
    fee = _fee_bps(settings)
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        return quantity.with_amount(fee * quantity.amount / FEE_DENOMINATOR)


def get_inverse_fee(out: Quantity, settings: HasFee | Decimal) -> Quantity:
    """Fee to add to a net amount so the gross amount nets ``out`` after fees.

    Rounded up to the token's precision: truncating would leave the gross
    amount one unit short of covering the forward fee.
    """
    fee = _fee_bps(settings)
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        gross = out.amount / ((FEE_DENOMINATOR - fee) / FEE_DENOMINATOR)
        return Quantity(quantize_up(gross - out.amount, out.precision), out.token, out.precision)


def normalize_fee(raw_fee: Decimal | int | str, *, legacy: bool) -> Decimal:
    """Convert a raw ledger fee to parts-per-ten-thousand.

    Legacy relay settings store fees per million; modern relays already use
    parts-per-ten-thousand.
    """
    value = to_decimal(raw_fee)
    if value < 0:
        raise InvalidInputError(f"Fee cannot be negative: {raw_fee}")
    if legacy:
        with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
            value = value * FEE_DENOMINATOR / LEGACY_FEE_DENOMINATOR
    return value


__all__ = ["HasFee", "get_fee", "get_inverse_fee", "normalize_fee"]
