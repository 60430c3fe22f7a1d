"""Hash router: route Discord message ids to trade hashes and back."""

from hash_router.config import get_settings
from hash_router.DI import Container
from hash_router.models import AssociationRecord
from hash_router.persistence import (
    IAssociationStore,
    InMemoryAssociationStore,
    SupabaseAssociationStore,
)
from hash_router.services import HashRouter

__version__ = "0.1.0"
__all__ = [
    "AssociationRecord",
    "Container",
    "HashRouter",
    "IAssociationStore",
    "InMemoryAssociationStore",
    "SupabaseAssociationStore",
    "get_settings",
]
