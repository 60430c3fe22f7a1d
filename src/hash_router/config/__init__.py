"""Configuration subpackage."""

from hash_router.config.config import (
    AppSettings,
    LoggingSettings,
    Settings,
    StoreSettings,
    SupabaseSettings,
    get_settings,
)

__all__ = [
    "AppSettings",
    "LoggingSettings",
    "Settings",
    "StoreSettings",
    "SupabaseSettings",
    "get_settings",
]
