# -*- coding: utf-8 -*-
"""Dependency injection container (dependency-injector)."""

from __future__ import annotations

from dependency_injector import containers, providers

from hash_router.clients.http import AsyncHttpClient
from hash_router.config import Settings, get_settings
from hash_router.persistence.repositories.in_memory import InMemoryAssociationStore
from hash_router.persistence.repositories.supabase import SupabaseAssociationStore
from hash_router.services.router import HashRouter


def _store_backend(settings: Settings) -> str:
    return settings.store.backend


class Container(containers.DeclarativeContainer):
    """Application container. Wires settings, HTTP client, association store and router.

    Every provider is a Singleton: one long-lived store handle per process.
    """

    config = providers.Callable(get_settings)

    http_client = providers.Singleton(
        AsyncHttpClient,
        settings=config,
    )

    association_store = providers.Selector(
        providers.Callable(_store_backend, config),
        supabase=providers.Singleton(
            SupabaseAssociationStore,
            http_client=http_client,
            settings=config,
        ),
        memory=providers.Singleton(InMemoryAssociationStore),
    )

    hash_router = providers.Singleton(
        HashRouter,
        association_store=association_store,
    )
