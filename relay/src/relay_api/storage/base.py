"""Durable store contract for relayed messages."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from relay_api.models import Message


class MessageStore(ABC):
    """Append-only persistence of every relayed message."""

    async def start(self) -> None:
        """Prepare the backend; called once at application startup."""

    async def close(self) -> None:
        """Release backend resources; called once at shutdown."""

    @abstractmethod
    async def append(self, message: Message) -> None:
        ...

    @abstractmethod
    async def list_messages(
        self,
        user_id: str,
        *,
        peer: Optional[str] = None,
        limit: int = 50,
    ) -> List[Message]:
        """Return messages sent or received by ``user_id``, newest first."""
