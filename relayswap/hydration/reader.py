"""Ledger table reads.

The hydration layer talks to the ledger only through the LedgerReader
protocol. HttpLedgerReader implements it against a node's
``/v1/chain/get_table_rows`` endpoint with httpx.

Absence is reported distinctly from failure: a missing balance or supply
row returns None, while transport errors and malformed rows raise
UnavailableDataError.
"""

from __future__ import annotations

from typing import Any, Protocol, TypeVar

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from relayswap.errors import HydrationError, InvalidInputError, UnavailableDataError
from relayswap.models.rows import (
    AccountRow,
    MultiRelayRow,
    RelaySettingsRow,
    SettingsRow,
    StatRow,
    TableRows,
    TokenRow,
)
from relayswap.models.snapshot import Settings, TokenTable
from relayswap.models.types import Quantity, TokenId
from relayswap.pools.relay import Relay

logger = structlog.get_logger()

GET_TABLE_ROWS_PATH = "/v1/chain/get_table_rows"

# Table of the multi-relay contract holding every modern relay
MULTI_RELAY_TABLE = "converters"


class LedgerReader(Protocol):
    """Read access to the ledger tables used for pricing and hydration."""

    async def get_settings(self, contract: str) -> Settings: ...

    async def get_tokens(self, contract: str) -> TokenTable: ...

    async def get_relay_settings(self, relay_contract: str) -> RelaySettingsRow: ...

    async def get_balance(self, token: TokenId, account: str) -> Quantity | None: ...

    async def get_supply(self, token: TokenId) -> Quantity | None: ...

    async def get_multi_relays(self, contract: str, share_contract: str) -> list[Relay]: ...


M = TypeVar("M", bound=BaseModel)


def _parse_rows(model: type[M], rows: list[dict[str, Any]], table: str) -> list[M]:
    try:
        return [model.model_validate(row) for row in rows]
    except ValidationError as err:
        raise UnavailableDataError(f"Malformed {table} row: {err}") from err


class HttpLedgerReader:
    """LedgerReader over HTTP.

    Args:
        rpc_url: Base URL of the ledger node
        timeout: Per-request timeout in seconds
        client: Optional pre-built client (tests pass one with a MockTransport)
    """

    def __init__(
        self,
        rpc_url: str,
        *,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.rpc_url = rpc_url.rstrip("/")
        self._client = client if client is not None else httpx.AsyncClient(timeout=timeout)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> HttpLedgerReader:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def get_table_rows(
        self,
        code: str,
        scope: str,
        table: str,
        *,
        limit: int = 100,
        lower_bound: str | None = None,
    ) -> list[dict[str, Any]]:
        """Fetch rows of one table.

        Raises:
            UnavailableDataError: Transport failure or non-2xx response
        """
        payload: dict[str, Any] = {
            "json": True,
            "code": code,
            "scope": scope,
            "table": table,
            "limit": limit,
        }
        if lower_bound is not None:
            payload["lower_bound"] = lower_bound

        try:
            response = await self._client.post(self.rpc_url + GET_TABLE_ROWS_PATH, json=payload)
            response.raise_for_status()
            envelope = TableRows.model_validate(response.json())
        except httpx.HTTPError as err:
            logger.warning("table_read_failed", code=code, scope=scope, table=table, error=str(err))
            raise UnavailableDataError(f"Failed to read {code}/{scope}/{table}: {err}") from err
        except (ValidationError, ValueError) as err:
            raise UnavailableDataError(f"Malformed response for {code}/{scope}/{table}") from err
        return envelope.rows

    async def get_settings(self, contract: str) -> Settings:
        rows = await self.get_table_rows(contract, contract, "settings", limit=1)
        if not rows:
            raise UnavailableDataError("contract is unavailable or currently disabled for maintenance")
        row = _parse_rows(SettingsRow, rows, "settings")[0]
        try:
            return row.to_settings()
        except InvalidInputError as err:
            raise UnavailableDataError(f"Malformed settings row of {contract}: {err}") from err

    async def get_tokens(self, contract: str) -> TokenTable:
        rows = await self.get_table_rows(contract, contract, "tokens", limit=50)
        try:
            return TokenTable(row.to_entry() for row in _parse_rows(TokenRow, rows, "tokens"))
        except InvalidInputError as err:
            raise UnavailableDataError(f"Malformed tokens row of {contract}: {err}") from err

    async def get_relay_settings(self, relay_contract: str) -> RelaySettingsRow:
        rows = await self.get_table_rows(relay_contract, relay_contract, "settings", limit=1)
        if not rows:
            raise HydrationError(f"Relay contract {relay_contract} has no settings row")
        return _parse_rows(RelaySettingsRow, rows, "settings")[0]

    async def get_balance(self, token: TokenId, account: str) -> Quantity | None:
        """Balance of ``token`` held by ``account``; None when there is no row."""
        rows = await self.get_table_rows(token.contract, account, "accounts")
        for row in _parse_rows(AccountRow, rows, "accounts"):
            try:
                balance = row.to_quantity(token.contract)
            except InvalidInputError as err:
                raise UnavailableDataError(f"Malformed accounts row of {account}: {err}") from err
            if balance.token == token:
                return balance
        return None

    async def get_supply(self, token: TokenId) -> Quantity | None:
        """Current supply of ``token``; None when the token has no stat row."""
        rows = await self.get_table_rows(token.contract, token.symbol, "stat", limit=1)
        if not rows:
            return None
        try:
            return _parse_rows(StatRow, rows, "stat")[0].to_quantity(token.contract)
        except InvalidInputError as err:
            raise UnavailableDataError(f"Malformed stat row of {token}: {err}") from err

    async def get_multi_relays(self, contract: str, share_contract: str) -> list[Relay]:
        rows = await self.get_table_rows(contract, contract, MULTI_RELAY_TABLE, limit=1000)
        relays = []
        for row in _parse_rows(MultiRelayRow, rows, MULTI_RELAY_TABLE):
            try:
                relays.append(row.to_relay(contract, share_contract))
            except InvalidInputError as err:
                logger.warning("multi_relay_row_skipped", currency=row.currency, error=str(err))
        return relays


__all__ = ["LedgerReader", "HttpLedgerReader", "GET_TABLE_ROWS_PATH", "MULTI_RELAY_TABLE"]
