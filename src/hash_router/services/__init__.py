# -*- coding: utf-8 -*-
"""Application services."""

from hash_router.services.router import HashRouter

__all__ = ["HashRouter"]
