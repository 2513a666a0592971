"""SQLAlchemy-backed message store."""

from __future__ import annotations

import asyncio
import logging
from datetime import timezone
from typing import List, Optional

from relay_api.db.base import Base
from relay_api.db.migrations import upgrade_database
from relay_api.db.models import MessageRecord
from relay_api.db.session import create_engine_and_sessions, resolve_database_url
from relay_api.models import Message
from relay_api.repo import MessageRepository

from .base import MessageStore

LOGGER = logging.getLogger(__name__)


class SqlMessageStore(MessageStore):
    """Persists messages through an async SQLAlchemy engine."""

    def __init__(
        self,
        database_url: Optional[str] = None,
        *,
        migrate_on_startup: bool = False,
        repository: Optional[MessageRepository] = None,
    ) -> None:
        self.database_url = resolve_database_url(database_url)
        self._migrate_on_startup = migrate_on_startup
        self._repository = repository or MessageRepository()
        self._engine, self._sessions = create_engine_and_sessions(self.database_url)

    async def start(self) -> None:
        if self._migrate_on_startup:
            LOGGER.info("Applying message store migrations")
            await asyncio.to_thread(upgrade_database, self.database_url)

    async def create_schema(self) -> None:
        """Create tables straight from ORM metadata, bypassing migrations."""

        async with self._engine.begin() as connection:
            await connection.run_sync(Base.metadata.create_all)

    async def close(self) -> None:
        await self._engine.dispose()

    async def append(self, message: Message) -> None:
        async with self._sessions() as session:
            self._repository.create(
                MessageRecord(
                    sender=message.sender,
                    receiver=message.receiver,
                    content=message.content,
                    sent_at=message.timestamp.astimezone(timezone.utc),
                ),
                session=session,
            )
            await session.commit()
        LOGGER.debug("Saved message from %s to %s", message.sender, message.receiver)

    async def list_messages(
        self,
        user_id: str,
        *,
        peer: Optional[str] = None,
        limit: int = 50,
    ) -> List[Message]:
        async with self._sessions() as session:
            records = await self._repository.list_for_user(user_id, peer=peer, limit=limit, session=session)
        return [
            Message(sender=record.sender, receiver=record.receiver, content=record.content, time=record.sent_at)
            for record in records
        ]
