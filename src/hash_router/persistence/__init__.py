"""Persistence layer (repositories, etc.)."""

from hash_router.persistence.repositories import (
    IAssociationStore,
    InMemoryAssociationStore,
    InsertResult,
    SupabaseAssociationStore,
)

__all__ = [
    "IAssociationStore",
    "InsertResult",
    "InMemoryAssociationStore",
    "SupabaseAssociationStore",
]
