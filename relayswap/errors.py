"""Relay pricing error classes.

Every recoverable condition is signalled to the immediate caller with one of
these types so it can decide whether to retry, resize or give up. Only
ConfigurationError describes a data defect rather than a runtime condition.
"""


class RelaySwapError(Exception):
    """Base error for relay pricing, routing and liquidity operations."""

    pass


class InvalidInputError(RelaySwapError, ValueError):
    """Malformed, non-positive or otherwise unusable input."""

    pass


class UnknownTokenError(InvalidInputError):
    """Symbol or token identity is not present in the registry."""

    pass


class TokenMismatchError(InvalidInputError):
    """Arithmetic or comparison between quantities of different tokens."""

    pass


class InsufficientShareBalanceError(InvalidInputError):
    """Withdrawal needs more share tokens than the caller owns."""

    pass


class InsufficientLiquidityError(RelaySwapError):
    """Pool cannot supply the requested amount; a smaller size may succeed."""

    pass


class UnavailableDataError(RelaySwapError):
    """Pool, settings, balance or price data could not be obtained."""

    pass


class HydrationError(UnavailableDataError):
    """A dry relay could not be hydrated with live balances."""

    pass


class ConcentrationGuardError(RelaySwapError):
    """Withdrawal would burn too large a share of the pool in one call."""

    pass


class NoRouteError(RelaySwapError):
    """No sequence of relays connects the requested tokens."""

    pass


class ConfigurationError(RelaySwapError):
    """Relay configuration violates a data invariant (e.g. zero depth)."""

    pass


__all__ = [
    "RelaySwapError",
    "InvalidInputError",
    "UnknownTokenError",
    "TokenMismatchError",
    "InsufficientShareBalanceError",
    "InsufficientLiquidityError",
    "UnavailableDataError",
    "HydrationError",
    "ConcentrationGuardError",
    "NoRouteError",
    "ConfigurationError",
]
