"""Adapters - I/O implementations of ports."""

from .clock import FixedClock, SystemClock
from .sqlite_store import SQLiteStore

__all__ = [
    "FixedClock",
    "SystemClock",
    "SQLiteStore",
]
