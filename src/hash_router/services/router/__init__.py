from hash_router.services.router.hash_router import HashRouter

__all__ = ["HashRouter"]
