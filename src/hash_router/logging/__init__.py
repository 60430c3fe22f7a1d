"""Logging setup."""

from hash_router.logging.config import configure_logging

__all__ = ["configure_logging"]
