"""Factory functions for creating test objects.

Usage:
    from tests.helpers import make_relay, qty
    # or
    from tests.helpers.factories import make_relay, qty

    relay = make_relay(qty(100_000, TLOS), qty(20_000, USDT))
"""

from decimal import Decimal

from relayswap.models.snapshot import Settings, TokenEntry, TokenTable, TokenType
from relayswap.models.types import Quantity, Symbol, TokenId
from relayswap.pools.relay import DryRelay, Relay, ReserveSide
from tests.helpers.constants import MAKER_CODE, MULTI_CONTRACT, SWAP_CONTRACT, TLOS, TLOS_USDT


def qty(amount: Decimal | int | str, token: TokenId = TLOS, precision: int = 4) -> Quantity:
    """Create a quantity; defaults to a 4-decimal TLOS amount."""
    return Quantity(Decimal(str(amount)), token, precision)


def make_relay(
    reserve_a: Quantity,
    reserve_b: Quantity,
    *,
    share: TokenId = TLOS_USDT,
    fee: Decimal | int = 0,
    amplifier: Decimal | int = 1,
    depths: tuple[Decimal | int | None, Decimal | int | None] = (None, None),
    enabled: bool = True,
    is_multi_contract: bool = True,
    contract: str = MULTI_CONTRACT,
    smart_precision: int = 4,
) -> Relay:
    """Create a hydrated two-reserve relay.

    Args:
        reserve_a: Balance of the first reserve
        reserve_b: Balance of the second reserve
        share: Share token identifying the relay
        fee: Fee in parts-per-ten-thousand
        amplifier: Curve amplifier (1 = constant product)
        depths: Configured depth per reserve; None uses the balance
    """
    depth_a, depth_b = depths
    return Relay(
        contract=contract,
        smart_token=share,
        reserves=(
            ReserveSide(balance=reserve_a, depth=None if depth_a is None else Decimal(depth_a)),
            ReserveSide(balance=reserve_b, depth=None if depth_b is None else Decimal(depth_b)),
        ),
        fee=Decimal(fee),
        amplifier=Decimal(amplifier),
        smart_precision=smart_precision,
        is_multi_contract=is_multi_contract,
        enabled=enabled,
    )


def make_dry_relay(
    token_a: TokenId,
    token_b: TokenId,
    *,
    share: TokenId = TLOS_USDT,
    contract: str = MULTI_CONTRACT,
    is_multi_contract: bool = True,
) -> DryRelay:
    return DryRelay(
        contract=contract,
        smart_token=share,
        reserves=(token_a, token_b),
        is_multi_contract=is_multi_contract,
    )


def make_entry(
    token: TokenId,
    balance: Decimal | int | str,
    *,
    depth: Decimal | int | str | None = None,
    reserve: Decimal | int | str | None = None,
    maker_pool: Decimal | int | str = 0,
    token_type: TokenType = TokenType.CONNECTOR,
    precision: int = 4,
) -> TokenEntry:
    """Create a token table row. Depth and reserve default to the balance."""
    return TokenEntry(
        sym=Symbol(token.symbol, precision),
        contract=token.contract,
        balance=qty(balance, token, precision),
        depth=qty(balance if depth is None else depth, token, precision),
        reserve=qty(balance if reserve is None else reserve, token, precision),
        maker_pool=qty(maker_pool, token, precision),
        token_type=token_type,
    )


def make_maker_entry(balance: Decimal | int | str, *, precision: int = 4) -> TokenEntry:
    """Maker token row with zero depth and reserve."""
    return make_entry(
        TokenId(SWAP_CONTRACT, MAKER_CODE),
        balance,
        depth=0,
        reserve=0,
        token_type=TokenType.LIQUIDITY,
        precision=precision,
    )


def make_tokens(*entries: TokenEntry) -> TokenTable:
    return TokenTable(entries)


def make_settings(
    fee: Decimal | int = 0,
    amplifier: Decimal | int = 1,
    proxy: TokenId = TLOS,
    proxy_precision: int = 4,
) -> Settings:
    return Settings(
        fee=Decimal(fee),
        proxy_contract=proxy.contract,
        proxy_token=Symbol(proxy.symbol, proxy_precision),
        maker_token=Symbol(MAKER_CODE, 4),
        amplifier=Decimal(amplifier),
    )
