"""In-memory repository implementations."""

from hash_router.persistence.repositories.in_memory.association_store import (
    InMemoryAssociationStore,
)

__all__ = ["InMemoryAssociationStore"]
