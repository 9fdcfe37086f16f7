"""Deployment configuration.

Example:
    config = RelaySwapConfig.from_env()
    reader = HttpLedgerReader(config.rpc_url, timeout=config.request_timeout_seconds)
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from relayswap.constants import DEFAULT_BLACKLISTED_TOKENS, DEFAULT_MAX_HOPS
from relayswap.errors import ConfigurationError

ENV_PREFIX = "RELAYSWAP_"


@dataclass(frozen=True)
class RelaySwapConfig:
    """Configuration for ledger access, hydration and routing.

    Attributes:
        rpc_url: Ledger RPC node
        swap_contract: Contract holding the settings and tokens tables
        multi_contract: Contract holding every modern relay
        multi_token_contract: Contract issuing modern relay share tokens
        hydration_chunk_size: Legacy relays hydrated concurrently per chunk
        hydration_wait_seconds: Pause between legacy hydration chunks
        request_timeout_seconds: Timeout of each ledger request
        max_hops: Path-search depth bound
        blacklisted_tokens: Token ids never admitted to the registry
    """

    rpc_url: str = "https://mainnet.telos.net"
    swap_contract: str = "telosd.swaps"
    multi_contract: str = "tlosdx.swaps"
    multi_token_contract: str = "relays.swaps"
    hydration_chunk_size: int = 4
    hydration_wait_seconds: float = 0.25
    request_timeout_seconds: float = 10.0
    max_hops: int = DEFAULT_MAX_HOPS
    blacklisted_tokens: tuple[str, ...] = DEFAULT_BLACKLISTED_TOKENS

    def __post_init__(self) -> None:
        if self.hydration_chunk_size < 1:
            raise ConfigurationError(f"hydration_chunk_size must be >= 1: {self.hydration_chunk_size}")
        if self.hydration_wait_seconds < 0:
            raise ConfigurationError(f"hydration_wait_seconds must be >= 0: {self.hydration_wait_seconds}")
        if self.max_hops < 1:
            raise ConfigurationError(f"max_hops must be >= 1: {self.max_hops}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> RelaySwapConfig:
        """Build a config from ``RELAYSWAP_*`` environment variables.

        Unset variables keep their defaults. ``RELAYSWAP_BLACKLISTED_TOKENS``
        is a comma-separated list of ``contract-SYMBOL`` ids.
        """
        env = os.environ if environ is None else environ
        default = DEFAULT_CONFIG

        def get(name: str) -> str | None:
            return env.get(ENV_PREFIX + name)

        try:
            blacklist = get("BLACKLISTED_TOKENS")
            return cls(
                rpc_url=get("RPC_URL") or default.rpc_url,
                swap_contract=get("SWAP_CONTRACT") or default.swap_contract,
                multi_contract=get("MULTI_CONTRACT") or default.multi_contract,
                multi_token_contract=get("MULTI_TOKEN_CONTRACT") or default.multi_token_contract,
                hydration_chunk_size=int(get("HYDRATION_CHUNK_SIZE") or default.hydration_chunk_size),
                hydration_wait_seconds=float(
                    get("HYDRATION_WAIT_SECONDS") or default.hydration_wait_seconds
                ),
                request_timeout_seconds=float(
                    get("REQUEST_TIMEOUT_SECONDS") or default.request_timeout_seconds
                ),
                max_hops=int(get("MAX_HOPS") or default.max_hops),
                blacklisted_tokens=(
                    default.blacklisted_tokens
                    if blacklist is None
                    else tuple(t.strip() for t in blacklist.split(",") if t.strip())
                ),
            )
        except ValueError as err:
            raise ConfigurationError(f"Invalid {ENV_PREFIX}* setting: {err}") from err


# Default configuration instance
DEFAULT_CONFIG = RelaySwapConfig()


__all__ = ["RelaySwapConfig", "DEFAULT_CONFIG", "ENV_PREFIX"]
