# -*- coding: utf-8 -*-
"""
Startup for the hash router.

bootstrap() configures logging, checks required configuration, builds the
container and pings the store. Any failure there is fatal at boot; a host
process (e.g. the Discord bot) calls it once and then uses
container.hash_router() for every request.

Run with: python -m hash_router.main  (startup health check)

Embedding:
    from hash_router.main import bootstrap, shutdown
    container = await bootstrap()
    router = container.hash_router()
    ...
    await shutdown(container)
"""
from __future__ import annotations

import asyncio
import sys
import structlog
from dependency_injector import providers
from typing import Optional

from hash_router.DI import Container
from hash_router.config import Settings, get_settings
from hash_router.exceptions import MissingRequiredConfigError, StoreError
from hash_router.logging.config import configure_logging


async def bootstrap(settings: Optional[Settings] = None) -> Container:
    """Build a ready-to-use container or raise.

    Raises:
        MissingRequiredConfigError: A required setting (URL, key) is missing.
        StoreError: The store could not be reached with the given settings.
    """
    settings = settings or get_settings()
    configure_logging(settings)
    logger = structlog.get_logger("main")

    try:
        settings.require_store_config()
    except MissingRequiredConfigError as e:
        logger.error("main_missing_required_config", setting=str(e))
        raise

    container = Container()
    container.config.override(providers.Object(settings))
    store = container.association_store()
    try:
        await store.ping()
    except StoreError as e:
        logger.error(
            "main_store_unreachable",
            store_backend=settings.store.backend,
            error_type=type(e).__name__,
        )
        await shutdown(container)
        raise

    logger.info("main_router_ready", store_backend=settings.store.backend)
    return container


async def shutdown(container: Container) -> None:
    """Release the HTTP session held by the container."""
    await container.http_client().aclose()
    structlog.get_logger("main").info("main_shutdown_complete")


async def run() -> None:
    container = await bootstrap()
    await shutdown(container)


def main() -> None:
    try:
        asyncio.run(run())
    except (MissingRequiredConfigError, StoreError):
        sys.exit(1)


__all__ = ["bootstrap", "shutdown", "run", "main"]

if __name__ == "__main__":
    main()
