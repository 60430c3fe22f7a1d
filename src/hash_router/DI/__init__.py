"""Dependency injection."""

from hash_router.DI.container import Container

__all__ = ["Container"]
