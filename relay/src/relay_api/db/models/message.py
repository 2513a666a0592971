"""ORM model for persisted chat messages."""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ..base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _uuid() -> str:
    return str(uuid4())


class MessageRecord(Base):
    """A message as relayed, kept for history and audit."""

    __tablename__ = "messages"
    __table_args__ = (
        Index("ix_messages_sender", "sender"),
        Index("ix_messages_receiver", "receiver"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_uuid)
    sender: Mapped[str] = mapped_column(String(255), nullable=False)
    receiver: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    sent_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    stored_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        nullable=False,
    )
