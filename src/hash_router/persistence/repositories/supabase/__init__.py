"""Supabase (PostgREST) repository implementations."""

from hash_router.persistence.repositories.supabase.association_store import (
    SupabaseAssociationStore,
)

__all__ = ["SupabaseAssociationStore"]
