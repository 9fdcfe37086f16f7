"""Shared pytest fixtures and fakes for relayswap tests."""

from decimal import Decimal

import pytest

from relayswap.errors import HydrationError, RelaySwapError, UnavailableDataError
from relayswap.market import Market
from relayswap.models.rows import RelaySettingsRow
from relayswap.models.snapshot import Settings, TokenTable
from relayswap.models.types import Quantity, TokenId
from relayswap.pools.registry import PoolRegistry
from relayswap.pools.relay import Relay
from tests.helpers import (
    PBTC,
    PBTC_PETH,
    PETH,
    TLOS,
    TLOS_PBTC,
    TLOS_USDT,
    USDT,
    make_relay,
    qty,
)

# =============================================================================
# Fake ledger reader
# =============================================================================


class FakeLedgerReader:
    """In-memory LedgerReader.

    Usage:
        ledger = FakeLedgerReader()
        ledger.add_legacy_relay(relay, fee_ppm=3000)
        ledger.multi_relays.append(modern_relay)
        ledger.supplies[relay.smart_token] = qty(10_000, relay.smart_token)
    """

    def __init__(self) -> None:
        self.settings: dict[str, Settings] = {}
        self.tokens: dict[str, TokenTable] = {}
        self.relay_settings: dict[str, RelaySettingsRow] = {}
        self.balances: dict[tuple[TokenId, str], Quantity] = {}
        self.supplies: dict[TokenId, Quantity] = {}
        self.multi_relays: list[Relay] = []
        # Raised by get_multi_relays when set
        self.multi_error: RelaySwapError | None = None
        self.calls: list[tuple[str, str]] = []  # Track calls for assertions

    def add_legacy_relay(self, relay: Relay, fee_ppm: int = 0, enabled: bool = True) -> None:
        """Expose a legacy relay's settings row and reserve balances."""
        self.relay_settings[relay.contract] = RelaySettingsRow(
            smart_contract=relay.smart_token.contract,
            smart_currency=f"4,{relay.smart_token.symbol}",
            enabled=enabled,
            fee=fee_ppm,
        )
        for side in relay.reserves:
            self.balances[(side.token, relay.contract)] = side.balance

    async def get_settings(self, contract: str) -> Settings:
        self.calls.append(("get_settings", contract))
        if contract not in self.settings:
            raise UnavailableDataError("contract is unavailable or currently disabled for maintenance")
        return self.settings[contract]

    async def get_tokens(self, contract: str) -> TokenTable:
        self.calls.append(("get_tokens", contract))
        return self.tokens.get(contract, TokenTable())

    async def get_relay_settings(self, relay_contract: str) -> RelaySettingsRow:
        self.calls.append(("get_relay_settings", relay_contract))
        row = self.relay_settings.get(relay_contract)
        if row is None:
            raise HydrationError(f"Relay contract {relay_contract} has no settings row")
        return row

    async def get_balance(self, token: TokenId, account: str) -> Quantity | None:
        self.calls.append(("get_balance", f"{token}@{account}"))
        return self.balances.get((token, account))

    async def get_supply(self, token: TokenId) -> Quantity | None:
        self.calls.append(("get_supply", str(token)))
        return self.supplies.get(token)

    async def get_multi_relays(self, contract: str, share_contract: str) -> list[Relay]:
        self.calls.append(("get_multi_relays", contract))
        if self.multi_error is not None:
            raise self.multi_error
        return list(self.multi_relays)


@pytest.fixture
def ledger() -> FakeLedgerReader:
    return FakeLedgerReader()


# =============================================================================
# Relay fixtures
# =============================================================================


@pytest.fixture
def tlos_usdt_relay() -> Relay:
    """100,000 TLOS / 20,000 USDT, no fee, constant product."""
    return make_relay(qty(100_000, TLOS), qty(20_000, USDT), share=TLOS_USDT)


@pytest.fixture
def tlos_pbtc_relay() -> Relay:
    """100,000 TLOS / 10 PBTC (8 decimals), 0.2% fee."""
    return make_relay(
        qty(100_000, TLOS),
        qty(10, PBTC, precision=8),
        share=TLOS_PBTC,
        fee=20,
    )


@pytest.fixture
def pbtc_peth_relay() -> Relay:
    """10 PBTC / 150 PETH, 0.3% fee, amplified."""
    return make_relay(
        qty(10, PBTC, precision=8),
        qty(150, PETH, precision=8),
        share=PBTC_PETH,
        fee=30,
        amplifier=2,
        depths=(10, 150),
    )


@pytest.fixture
def share_supply() -> Quantity:
    """Share supply of the TLOS/USDT relay."""
    return qty(10_000, TLOS_USDT)


@pytest.fixture
def registry(
    tlos_usdt_relay: Relay, tlos_pbtc_relay: Relay, pbtc_peth_relay: Relay
) -> PoolRegistry:
    """Hydrated USDT - TLOS - PBTC - PETH chain."""
    return PoolRegistry([tlos_usdt_relay, tlos_pbtc_relay, pbtc_peth_relay])


@pytest.fixture
def market(registry: PoolRegistry, share_supply: Quantity) -> Market:
    return Market(
        registry=registry,
        supplies={str(TLOS_USDT): share_supply},
        known_prices={"USDT": Decimal(1)},
    )
