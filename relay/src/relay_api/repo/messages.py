"""Repository for persisted messages."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from relay_api.db.models import MessageRecord


class MessageRepository:
    def create(self, record: MessageRecord, *, session: AsyncSession) -> None:
        session.add(record)

    async def list_for_user(
        self,
        user_id: str,
        *,
        peer: Optional[str],
        limit: int,
        session: AsyncSession,
    ) -> list[MessageRecord]:
        if peer:
            condition = or_(
                and_(MessageRecord.sender == user_id, MessageRecord.receiver == peer),
                and_(MessageRecord.sender == peer, MessageRecord.receiver == user_id),
            )
        else:
            condition = or_(MessageRecord.sender == user_id, MessageRecord.receiver == user_id)
        query = (
            select(MessageRecord)
            .where(condition)
            .order_by(MessageRecord.sent_at.desc(), MessageRecord.stored_at.desc())
            .limit(limit)
        )
        result = await session.execute(query)
        return list(result.scalars().all())
