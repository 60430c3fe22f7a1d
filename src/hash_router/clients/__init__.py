"""HTTP clients."""

from hash_router.clients.http import AsyncHttpClient

__all__ = ["AsyncHttpClient"]
