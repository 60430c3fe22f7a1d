# -*- coding: utf-8 -*-
"""Configuration loaded from environment via Pydantic Settings.

Nested env vars use <section>__<key>, e.g. LOGGING__CONSOLE_LEVEL, SUPABASE__PUBLIC_URL.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from hash_router.exceptions import MissingRequiredConfigError


class AppSettings(BaseSettings):
    """General application configuration."""

    model_config = SettingsConfigDict(extra="ignore")

    app_name: str = "hash-router"
    service_name: Optional[str] = None
    service_version: Optional[str] = None
    environment: Literal["development", "test", "production"] = "development"


class LoggingSettings(BaseSettings):
    """Structured logging configuration for structlog/stdlib/Logfire."""

    model_config = SettingsConfigDict(extra="ignore")

    console_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    file_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    logfire_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    log_to_console: bool = True
    log_to_file: bool = False
    log_file_path: str = "logs/hash_router.log"
    # TimedRotatingFileHandler: when to rotate (S/M/H/D/W0–W6/midnight), interval, backups to keep
    log_file_when: Literal[
        "S", "M", "H", "D", "W0", "W1", "W2", "W3", "W4", "W5", "W6", "midnight"
    ] = "midnight"
    log_file_interval: int = 1
    log_file_backup_count: int = 30
    log_file_utc: bool = True

    # Main output format: JSONRenderer if True, ConsoleRenderer if False
    json_format: bool = False

    logfire_enabled: bool = False
    logfire_token: Optional[str] = None


class StoreSettings(BaseSettings):
    """Which association store backs the router."""

    model_config = SettingsConfigDict(extra="ignore")

    backend: Literal["supabase", "memory"] = Field(
        default="supabase",
        description="supabase for the remote table, memory for local development.",
    )


class SupabaseSettings(BaseSettings):
    """Supabase project access (from env SUPABASE__*)."""

    model_config = SettingsConfigDict(extra="ignore")

    public_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL, e.g. https://xyz.supabase.co.",
    )
    anon_key: Optional[str] = Field(default=None, description="Supabase anon (or service) key.")
    table: str = Field(default="hash_router", description="Table holding the routes.")
    timeout_seconds: float = Field(
        default=10.0,
        ge=1.0,
        le=120.0,
        description="HTTP request timeout in seconds.",
    )
    max_retries: int = Field(
        default=3,
        ge=1,
        le=20,
        description="Maximum attempts for read requests. Inserts are attempted once.",
    )

    @property
    def rest_url(self) -> str:
        """PostgREST base URL of the project."""
        return f"{(self.public_url or '').rstrip('/')}/rest/v1"


class Settings(BaseSettings):
    """Root application configuration.

    Groups all sub-configurations so the rest of the code does not
    read environment variables directly. Nested overrides use
    <section>__<key>, e.g. LOGGING__CONSOLE_LEVEL, SUPABASE__ANON_KEY.
    """

    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    app: AppSettings = Field(default_factory=AppSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    store: StoreSettings = Field(default_factory=StoreSettings)
    supabase: SupabaseSettings = Field(default_factory=SupabaseSettings)

    @classmethod
    def from_env(cls, **overrides: Any) -> Settings:
        """Build settings from environment (and .env), with optional overrides.

        Nested overrides can be passed as nested dicts, e.g.:
        - from_env(supabase={"public_url": "https://xyz.supabase.co"})

        Returns:
            A new Settings instance.
        """
        return cls(**overrides)

    def require_store_config(self) -> None:
        """Check that the selected store backend has everything it needs.

        Raises:
            MissingRequiredConfigError: Naming the first missing env var.
        """
        if self.store.backend != "supabase":
            return
        if not (self.supabase.public_url or "").strip():
            raise MissingRequiredConfigError("SUPABASE__PUBLIC_URL")
        if not (self.supabase.anon_key or "").strip():
            raise MissingRequiredConfigError("SUPABASE__ANON_KEY")


@lru_cache
def get_settings() -> Settings:
    """Return a single cached instance of Settings.

    Typical usage:

        from hash_router.config import get_settings

        settings = get_settings()
        table = settings.supabase.table
    """
    return Settings()
