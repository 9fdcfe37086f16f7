"""Protocol constants for relay pricing and liquidity math.

Centralizes fee scales and the liquidity safety thresholds.
"""

from decimal import Decimal

# Fees are expressed in parts-per-ten-thousand (30 = 0.3%)
FEE_DENOMINATOR = Decimal(10000)

# Legacy relay settings store the fee in parts-per-million
LEGACY_FEE_DENOMINATOR = Decimal(1_000_000)

# Amplifier that reduces the amplified curve to plain constant product
DEFAULT_AMPLIFIER = Decimal(1)

# Token type names used by the swap contract's token table
TOKEN_TYPE_CONNECTOR = "connector"
TOKEN_TYPE_LIQUIDITY = "liquidity"

# Single withdrawals may not burn this share of the pool supply or more
MAX_WITHDRAW_SUPPLY_FRACTION = Decimal("0.3")

# Multi-step withdrawals take roughly 1% of pool ownership per step
WITHDRAW_STEP_FRACTION = Decimal("0.01")

# Share amounts within 1% of the owned balance settle as the owned balance
OWNED_SHARE_TOLERANCE = Decimal("0.01")

# Legacy relays advertise their share token with a fixed precision
LEGACY_SHARE_PRECISION = 4

# Tokens never admitted to the registry
DEFAULT_BLACKLISTED_TOKENS = ("therealkarma-KARMA", "wizznetwork1-WIZZ")

# Path-search depth bound (number of relays)
DEFAULT_MAX_HOPS = 4

# Path queries remembered per pathfinder before the oldest is evicted
PATH_CACHE_SIZE = 1024
