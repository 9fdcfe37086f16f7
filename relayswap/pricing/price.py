"""Pricing over a swap contract's token table.

Every function is pure over a (TokenTable, Settings) snapshot. Token
arguments accept a symbol code, a Symbol or a TokenId.

Spot prices follow the ledger convention: ``get_spot_price(base, quote)``
is the amount of ``base`` that one unit of ``quote`` is worth at the
current virtual balances (``base_upper / quote_upper``). A quote of the
maker (liquidity) token is priced off the proxy token and the connector
balances held for the maker pool instead of its own reserves.
"""

from __future__ import annotations

import decimal
from decimal import Decimal

from relayswap.amm.curve import get_bancor_input, get_bancor_output
from relayswap.amm.reserve import get_uppers as reserve_uppers
from relayswap.errors import (
    ConfigurationError,
    InsufficientLiquidityError,
    InvalidInputError,
    TokenMismatchError,
    UnavailableDataError,
)
from relayswap.math.decimal_utils import DECIMAL_HIGH_PREC_CONTEXT, quantize_up
from relayswap.models.snapshot import Settings, TokenEntry, TokenTable
from relayswap.models.types import Quantity, Symbol, TokenId
from relayswap.pricing.fees import get_fee, get_inverse_fee

TokenKey = str | Symbol | TokenId


def check_quantity(quantity: Quantity) -> None:
    """Reject non-positive quantities."""
    if not quantity.is_positive:
        raise InvalidInputError(f"[quantity] amount must be positive: {quantity}")


def _entry_for(quantity: Quantity, tokens: TokenTable) -> TokenEntry:
    entry = tokens.require(quantity.token)
    if entry.contract != quantity.token.contract or entry.sym.precision != quantity.precision:
        raise TokenMismatchError(
            f"{quantity} of {quantity.token.contract} does not match registered "
            f"{entry.sym} of {entry.contract}"
        )
    return entry


def check_remaining_reserve(out: Quantity, tokens: TokenTable) -> None:
    """Verify the reserve can pay out ``out`` without going negative.

    Raises:
        UnknownTokenError: If the token is not registered
        InsufficientLiquidityError: If reserve - out < 0
    """
    entry = _entry_for(out, tokens)
    remaining = entry.reserve - out
    if remaining.amount < 0:
        raise InsufficientLiquidityError(
            f"{entry.sym.code} insufficient remaining reserve ({entry.reserve} < {out})"
        )


def get_uppers(
    base: TokenKey,
    quote: TokenKey,
    tokens: TokenTable,
    settings: Settings,
) -> tuple[Decimal, Decimal]:
    """Virtual upper balances of two registered tokens as (base, quote).

    Raises:
        InsufficientLiquidityError: If either upper balance is not positive
    """
    base_entry = tokens.require(base)
    quote_entry = tokens.require(quote)
    uppers = reserve_uppers(
        base_entry.balance.amount,
        base_entry.depth.amount,
        quote_entry.balance.amount,
        quote_entry.depth.amount,
        settings.amplifier,
    )
    for entry, upper in zip((base_entry, quote_entry), uppers):
        if upper <= 0:
            raise InsufficientLiquidityError(f"{entry.sym.code} has no liquidity")
    return uppers


def is_maker_token(quote: TokenKey, tokens: TokenTable) -> bool:
    return tokens.require(quote).is_maker


def is_connector_token(quote: TokenKey, tokens: TokenTable) -> bool:
    return tokens.require(quote).is_connector


def _proxy_code(tokens: TokenTable, settings: Settings) -> str:
    proxy = settings.proxy_token.code
    if is_maker_token(proxy, tokens):
        raise ConfigurationError(f"Proxy token {proxy} cannot be the maker token")
    return proxy


def get_pool_balance(tokens: TokenTable, settings: Settings) -> Decimal:
    """Value of every connector's maker-pool balance, in proxy token units."""
    proxy = _proxy_code(tokens, settings)

    total = Decimal(0)
    for entry in tokens.values():
        if entry.is_maker or entry.maker_pool.is_zero:
            continue
        with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
            total += entry.maker_pool.amount * get_spot_price(proxy, entry.sym, tokens, settings)
    return total


def get_maker_balance(tokens: TokenTable, settings: Settings) -> Decimal:
    """Registry balance of the maker token."""
    return tokens.require(settings.maker_token).balance.amount


def get_maker_spot_price(base: TokenKey, tokens: TokenTable, settings: Settings) -> Decimal:
    """Price of one maker token in ``base`` units.

    maker_price = proxy_spot_price * pool_balance / maker_balance

    Raises:
        UnavailableDataError: If the maker token balance is zero
    """
    maker_balance = get_maker_balance(tokens, settings)
    if maker_balance <= 0:
        raise UnavailableDataError(
            f"Maker token {settings.maker_token.code} has no balance to price against"
        )
    proxy_spot_price = get_spot_price(base, _proxy_code(tokens, settings), tokens, settings)
    pool_balance = get_pool_balance(tokens, settings)
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        return (proxy_spot_price * pool_balance) / maker_balance


def get_spot_price(
    base: TokenKey,
    quote: TokenKey,
    tokens: TokenTable,
    settings: Settings,
) -> Decimal:
    """Price of one ``quote`` in ``base`` units, without fee or slippage."""
    if is_maker_token(quote, tokens):
        return get_maker_spot_price(base, tokens, settings)
    base_upper, quote_upper = get_uppers(base, quote, tokens, settings)
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        return base_upper / quote_upper


def get_price(
    quantity: Quantity,
    symcode: TokenKey,
    tokens: TokenTable,
    settings: Settings,
) -> Decimal:
    """Amount of ``symcode`` received for ``quantity``, before fees.

    Raises:
        InvalidInputError: Non-positive quantity or unknown/mismatched token
        InsufficientLiquidityError: The curve cannot price the quantity
    """
    check_quantity(quantity)
    _entry_for(quantity, tokens)
    base_upper, quote_upper = get_uppers(quantity.token, symcode, tokens, settings)

    out = get_bancor_output(base_upper, quote_upper, quantity.amount)
    if out <= 0:
        raise InsufficientLiquidityError(f"Cannot price {quantity} into {symcode}")
    return out


def get_inverse_price(
    out: Quantity,
    symcode: TokenKey,
    tokens: TokenTable,
    settings: Settings,
) -> Quantity:
    """Amount of ``symcode`` required to receive ``out``, before fees.

    Rounded up to the paying token's precision.

    Raises:
        InvalidInputError: Non-positive quantity or unknown/mismatched token
        InsufficientLiquidityError: ``out`` exceeds what the curve can supply
    """
    check_quantity(out)
    _entry_for(out, tokens)
    quote_entry = tokens.require(symcode)
    # The paying token is the input side of the curve
    base_upper, quote_upper = get_uppers(symcode, out.token, tokens, settings)

    in_amount = get_bancor_input(base_upper, quote_upper, out.amount)
    if in_amount <= 0:
        raise InsufficientLiquidityError(f"Cannot supply {out} for {quote_entry.sym.code}")
    return Quantity(
        quantize_up(in_amount, quote_entry.sym.precision),
        quote_entry.token_id,
        quote_entry.sym.precision,
    )


def get_rate(
    quantity: Quantity,
    symcode: TokenKey,
    tokens: TokenTable,
    settings: Settings,
) -> Quantity:
    """Amount of ``symcode`` received for ``quantity`` after the fee."""
    quote_entry = tokens.require(symcode)
    check_quantity(quantity)
    fee = get_fee(quantity, settings)
    price = get_price(quantity - fee, symcode, tokens, settings)
    return Quantity(price, quote_entry.token_id, quote_entry.sym.precision)


def get_inverse_rate(
    out: Quantity,
    symcode: TokenKey,
    tokens: TokenTable,
    settings: Settings,
) -> Quantity:
    """Amount of ``symcode`` to pay, fee included, to receive ``out``."""
    price = get_inverse_price(out, symcode, tokens, settings)
    fee = get_inverse_fee(price, settings)
    return price + fee


def get_slippage(
    quantity: Quantity,
    symcode: TokenKey,
    tokens: TokenTable,
    settings: Settings,
) -> Decimal:
    """Fractional shortfall of the quoted price versus the spot price.

    slippage = spot_price_per_unit / quoted_price - 1

    Positive values mean the conversion executes worse than spot.

    Raises:
        InsufficientLiquidityError: If the spot price is not positive
    """
    price = get_price(quantity, symcode, tokens, settings)
    spot = get_spot_price(quantity.token, symcode, tokens, settings)
    if spot <= 0:
        raise InsufficientLiquidityError(f"Cannot price {quantity.token.symbol} against {symcode}")
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        spot_price_per_unit = quantity.amount / spot
        return spot_price_per_unit / price - 1


__all__ = [
    "check_quantity",
    "check_remaining_reserve",
    "get_uppers",
    "is_maker_token",
    "is_connector_token",
    "get_pool_balance",
    "get_maker_balance",
    "get_maker_spot_price",
    "get_spot_price",
    "get_price",
    "get_inverse_price",
    "get_rate",
    "get_inverse_rate",
    "get_slippage",
]
