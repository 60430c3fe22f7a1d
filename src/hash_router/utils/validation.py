"""Validation helpers for Discord snowflakes and trade hashes."""

from __future__ import annotations

from typing import Any

SNOWFLAKE_MAX = 2**64 - 1


def is_snowflake(value: Any) -> bool:
    """Return True if value is an int in 1..2**64-1 (Discord ids are unsigned 64-bit)."""
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return 0 < value <= SNOWFLAKE_MAX


def normalize_trade_hash(value: Any) -> str | None:
    """Return the stripped trade hash, or None if it is not a non-empty string."""
    if not isinstance(value, str):
        return None
    s = value.strip()
    return s or None


def mask_trade_hash(trade_hash: str | None) -> str:
    """Return a masked trade hash for logging (e.g. 0x12ab...cd34)."""
    if not trade_hash or len(trade_hash) < 12:
        return "***"
    return f"{trade_hash[:6]}...{trade_hash[-4:]}"
