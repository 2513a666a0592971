"""Database URL and engine helpers."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from sqlalchemy.engine.url import URL, make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from .base import Base
from . import models  # noqa: F401  # ensure models are imported for metadata

PROJECT_ROOT = Path(__file__).resolve().parents[4]
DEFAULT_DB_PATH = PROJECT_ROOT / "var" / "data" / "relay.db"


def resolve_database_url(raw_url: Optional[str] = None) -> str:
    """Return a synchronous SQLAlchemy URL, creating SQLite parent dirs as needed."""

    if not raw_url:
        DEFAULT_DB_PATH.parent.mkdir(parents=True, exist_ok=True)
        return f"sqlite:///{DEFAULT_DB_PATH.as_posix()}"

    url: URL = make_url(raw_url)
    if url.drivername.startswith("sqlite") and url.database and url.database != ":memory:":
        db_path = Path(url.database)
        if not db_path.is_absolute():
            db_path = PROJECT_ROOT / db_path
        db_path.parent.mkdir(parents=True, exist_ok=True)
        url = url.set(database=str(db_path))
    return url.render_as_string(hide_password=False)


def resolve_async_database_url(sync_url: str) -> str:
    url = make_url(sync_url)
    driver = url.drivername
    driver_map = {
        "sqlite": "sqlite+aiosqlite",
        "sqlite+pysqlite": "sqlite+aiosqlite",
        "postgresql": "postgresql+asyncpg",
        "postgresql+psycopg2": "postgresql+asyncpg",
        "postgres": "postgresql+asyncpg",
        "mysql": "mysql+aiomysql",
        "mysql+pymysql": "mysql+aiomysql",
        "mariadb": "mariadb+aiomysql",
    }
    async_driver = driver_map.get(driver, driver)
    return url.set(drivername=async_driver).render_as_string(hide_password=False)


def create_engine_and_sessions(sync_url: str) -> tuple[AsyncEngine, async_sessionmaker[AsyncSession]]:
    async_engine = create_async_engine(
        resolve_async_database_url(sync_url),
        echo=False,
        pool_pre_ping=True,
    )
    sessions = async_sessionmaker(bind=async_engine, expire_on_commit=False)
    return async_engine, sessions


__all__ = [
    "Base",
    "DEFAULT_DB_PATH",
    "create_engine_and_sessions",
    "resolve_async_database_url",
    "resolve_database_url",
]
