"""Relay management package.

Provides the relay types and PoolRegistry for managing dry and hydrated relays.
"""

from .relay import DryRelay, Relay, ReserveSide
from .registry import PoolRegistry

__all__ = [
    "PoolRegistry",
    "DryRelay",
    "Relay",
    "ReserveSide",
]
