# -*- coding: utf-8 -*-
"""Repositories: interfaces (abstractions) and implementations (in_memory, supabase)."""

from hash_router.persistence.repositories.interfaces import (
    IAssociationStore,
    InsertResult,
)
from hash_router.persistence.repositories.in_memory import InMemoryAssociationStore
from hash_router.persistence.repositories.supabase import SupabaseAssociationStore

__all__ = [
    "IAssociationStore",
    "InsertResult",
    "InMemoryAssociationStore",
    "SupabaseAssociationStore",
]
