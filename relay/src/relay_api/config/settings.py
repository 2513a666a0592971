"""Relay configuration using pydantic-settings."""

from __future__ import annotations

from functools import lru_cache
from typing import ClassVar, Literal

from pydantic import Field, PositiveFloat, PositiveInt
from pydantic_settings import BaseSettings, SettingsConfigDict


class RelayApiSettings(BaseSettings):
    """Process/runtime settings for the relay HTTP server."""

    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(
        env_prefix="RELAY_API_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="127.0.0.1", description="Bind address for the relay API.")
    port: PositiveInt = Field(default=8080, description="Port for the relay API.")
    reload: bool = Field(default=False, description="Enable uvicorn auto-reload (dev only).")
    log_level: Literal["critical", "error", "warning", "info", "debug", "trace"] = Field(
        default="info",
        description="Log level for relay API / uvicorn.",
    )


class RelaySettings(BaseSettings):
    """Validated settings for message delivery and persistence."""

    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(
        env_prefix="RELAY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_url: str | None = Field(
        default=None,
        description="SQLAlchemy URL for message history (defaults to var/data/relay.db).",
    )
    migrate_on_startup: bool = Field(
        default=True,
        description="Run Alembic migrations when the application starts.",
    )
    send_timeout_seconds: PositiveFloat = Field(
        default=10.0,
        description="Upper bound for a single frame write to a recipient.",
    )
    store_timeout_seconds: PositiveFloat = Field(
        default=5.0,
        description="Upper bound for a durable-store append before it is abandoned.",
    )
    idle_timeout_seconds: PositiveFloat | None = Field(
        default=None,
        description="Close sessions that stay silent this long (disabled when unset).",
    )
    max_pending_per_user: PositiveInt | None = Field(
        default=None,
        description="Cap on queued messages per offline user (unbounded when unset).",
    )
    pending_overflow: Literal["drop_oldest", "reject"] = Field(
        default="drop_oldest",
        description="What to do when a capped queue is full.",
    )
    lock_shards: PositiveInt = Field(
        default=64,
        description="Number of per-user lock shards guarding registry and queues.",
    )
    close_superseded: bool = Field(
        default=True,
        description="Close the previous connection when a user reconnects.",
    )
    user_id_query_param: str = Field(
        default="user_id",
        description="Query parameter carrying the connecting user's id.",
    )
    user_id_header: str = Field(
        default="x-user-id",
        description="Header consulted when the query parameter is absent.",
    )
    history_max_limit: PositiveInt = Field(
        default=500,
        description="Largest page size accepted by the history endpoint.",
    )


@lru_cache()
def get_settings() -> RelaySettings:
    """Return memoized relay settings."""

    return RelaySettings()


@lru_cache()
def get_api_settings() -> RelayApiSettings:
    """Return memoized API process settings."""

    return RelayApiSettings()
