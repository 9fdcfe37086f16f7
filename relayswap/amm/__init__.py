"""AMM (Automated Market Maker) implementations."""

from relayswap.amm.bancor import BancorAMM, bancor
from relayswap.amm.curve import get_bancor_input, get_bancor_output
from relayswap.amm.base import AMM, SwapResult
from relayswap.amm.reserve import get_upper, get_uppers, relay_uppers

__all__ = [
    # Base classes
    "AMM",
    "SwapResult",
    # Reserve model
    "get_upper",
    "get_uppers",
    "relay_uppers",
    # Bancor curve
    "BancorAMM",
    "bancor",
    "get_bancor_output",
    "get_bancor_input",
]
