# -*- coding: utf-8 -*-
"""Utility modules."""

from hash_router.utils.validation import (
    SNOWFLAKE_MAX,
    is_snowflake,
    mask_trade_hash,
    normalize_trade_hash,
)

__all__ = ["SNOWFLAKE_MAX", "is_snowflake", "mask_trade_hash", "normalize_trade_hash"]
