"""Database utilities exposed for the relay service."""

from .base import Base
from .session import create_engine_and_sessions, resolve_async_database_url, resolve_database_url

__all__ = ["Base", "create_engine_and_sessions", "resolve_async_database_url", "resolve_database_url"]
