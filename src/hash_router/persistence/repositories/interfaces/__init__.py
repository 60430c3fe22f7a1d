# -*- coding: utf-8 -*-
"""Repository interfaces (abstractions). Implementations live in in_memory/, supabase/."""

from hash_router.persistence.repositories.interfaces.association_store import (
    IAssociationStore,
    InsertResult,
)

__all__ = ["IAssociationStore", "InsertResult"]
