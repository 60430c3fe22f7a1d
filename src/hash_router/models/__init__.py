# -*- coding: utf-8 -*-
"""Domain models."""

from hash_router.models.association_record import AssociationRecord

__all__ = ["AssociationRecord"]
