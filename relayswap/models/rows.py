"""Pydantic models for ledger table rows and market snapshot files.

Row models mirror the JSON returned by ``/v1/chain/get_table_rows`` for
the tables the hydration layer reads. Each converts to the immutable core
types used by the pricing and routing code.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field, field_validator

from relayswap.constants import DEFAULT_AMPLIFIER, LEGACY_SHARE_PRECISION
from relayswap.models.snapshot import Settings, TokenEntry, TokenType
from relayswap.models.types import Quantity, Symbol, TokenId
from relayswap.pools.relay import DryRelay, Relay, ReserveSide
from relayswap.pricing.fees import normalize_fee


class TableRows(BaseModel):
    """Envelope of a get_table_rows response."""

    rows: list[dict[str, Any]] = Field(default_factory=list)
    more: bool = False
    next_key: str | None = None


class SettingsRow(BaseModel):
    """Row of a swap contract's ``settings`` table."""

    fee: int = Field(ge=0)
    amplifier: Decimal = DEFAULT_AMPLIFIER
    proxy_contract: str
    proxy_token: str
    maker_token: str

    def to_settings(self) -> Settings:
        return Settings(
            fee=Decimal(self.fee),
            amplifier=self.amplifier,
            proxy_contract=self.proxy_contract,
            proxy_token=Symbol.parse(self.proxy_token),
            maker_token=Symbol.parse(self.maker_token),
        )


class TokenRow(BaseModel):
    """Row of a swap contract's ``tokens`` table."""

    sym: str
    contract: str
    balance: str
    depth: str
    reserve: str
    maker_pool: str
    token_type: TokenType

    def to_entry(self) -> TokenEntry:
        return TokenEntry(
            sym=Symbol.parse(self.sym),
            contract=self.contract,
            balance=Quantity.parse(self.balance, self.contract),
            depth=Quantity.parse(self.depth, self.contract),
            reserve=Quantity.parse(self.reserve, self.contract),
            maker_pool=Quantity.parse(self.maker_pool, self.contract),
            token_type=self.token_type,
        )


class RelaySettingsRow(BaseModel):
    """Row of a legacy relay contract's ``settings`` table.

    The fee is stored in parts-per-million.
    """

    smart_contract: str
    smart_currency: str = ""
    smart_enabled: bool = True
    enabled: bool = True
    network: str = ""
    max_fee: int = 0
    fee: int = Field(ge=0)

    @property
    def fee_bps(self) -> Decimal:
        return normalize_fee(self.fee, legacy=True)


class AccountRow(BaseModel):
    """Row of a token contract's ``accounts`` table."""

    balance: str

    def to_quantity(self, contract: str) -> Quantity:
        return Quantity.parse(self.balance, contract)


class StatRow(BaseModel):
    """Row of a token contract's ``stat`` table."""

    supply: str
    max_supply: str = ""
    issuer: str = ""

    def to_quantity(self, contract: str) -> Quantity:
        return Quantity.parse(self.supply, contract)


class MultiReserveRow(BaseModel):
    contract: str
    balance: str
    ratio: int = 500000


class MultiRelayRow(BaseModel):
    """Row of the multi-relay contract's converter table.

    One contract holds every modern relay; the fee is already in
    parts-per-ten-thousand.
    """

    currency: str
    enabled: bool = True
    fee: int = Field(ge=0)
    reserves: list[MultiReserveRow]

    @property
    def symbol(self) -> Symbol:
        return Symbol.parse(self.currency)

    def to_relay(self, relay_contract: str, share_contract: str) -> Relay:
        symbol = self.symbol
        return Relay(
            contract=relay_contract,
            smart_token=TokenId(share_contract, symbol.code),
            reserves=tuple(
                ReserveSide(balance=Quantity.parse(r.balance, r.contract)) for r in self.reserves
            ),
            fee=normalize_fee(self.fee, legacy=False),
            smart_precision=symbol.precision,
            is_multi_contract=True,
            enabled=self.enabled,
        )


class ReserveModel(BaseModel):
    """Reserve side of a relay in a market snapshot file."""

    contract: str
    balance: str
    depth: Decimal | None = None

    def to_side(self) -> ReserveSide:
        return ReserveSide(balance=Quantity.parse(self.balance, self.contract), depth=self.depth)


class RelayModel(BaseModel):
    """Relay in a market snapshot file.

    ``smart_token`` uses the ``contract-SYMBOL`` form. A relay with
    ``hydrated`` false is registered in dry form only.
    """

    contract: str
    smart_token: str
    smart_precision: int = LEGACY_SHARE_PRECISION
    reserves: list[ReserveModel]
    fee: Decimal = Decimal(0)
    amplifier: Decimal = DEFAULT_AMPLIFIER
    enabled: bool = True
    is_multi_contract: bool = True
    hydrated: bool = True
    supply: str | None = None
    apr: Decimal = Decimal(0)

    @field_validator("smart_token")
    @classmethod
    def check_smart_token(cls, value: str) -> str:
        return str(TokenId.parse(value))

    def to_relay(self) -> Relay:
        return Relay(
            contract=self.contract,
            smart_token=TokenId.parse(self.smart_token),
            reserves=tuple(r.to_side() for r in self.reserves),
            fee=self.fee,
            amplifier=self.amplifier,
            smart_precision=self.smart_precision,
            is_multi_contract=self.is_multi_contract,
            enabled=self.enabled,
            apr=self.apr,
        )

    def to_dry(self) -> DryRelay:
        return DryRelay(
            contract=self.contract,
            smart_token=TokenId.parse(self.smart_token),
            reserves=tuple(TokenId(r.contract, r.balance.split(" ")[-1]) for r in self.reserves),
            is_multi_contract=self.is_multi_contract,
        )

    def supply_quantity(self) -> Quantity | None:
        if self.supply is None:
            return None
        return Quantity.parse(self.supply, TokenId.parse(self.smart_token).contract)


class MarketSnapshot(BaseModel):
    """JSON file shape of a market snapshot served by the API."""

    relays: list[RelayModel] = Field(default_factory=list)
    token_meta: list[str] | None = None
    known_prices: dict[str, Decimal] = Field(default_factory=dict)


__all__ = [
    "TableRows",
    "SettingsRow",
    "TokenRow",
    "RelaySettingsRow",
    "AccountRow",
    "StatRow",
    "MultiReserveRow",
    "MultiRelayRow",
    "ReserveModel",
    "RelayModel",
    "MarketSnapshot",
]
