"""Per-user FIFO buffers for messages whose recipient is offline."""

from __future__ import annotations

import logging
from collections import deque
from typing import Deque, Dict, List, Literal, Optional

from relay_api.models import Message

LOGGER = logging.getLogger(__name__)

OverflowPolicy = Literal["drop_oldest", "reject"]


class PendingQueueStore:
    """Holds undelivered messages per recipient in arrival order.

    Unbounded unless ``max_per_user`` is set; a bounded queue applies
    ``overflow`` when full.
    """

    def __init__(self, *, max_per_user: Optional[int] = None, overflow: OverflowPolicy = "drop_oldest") -> None:
        if max_per_user is not None and max_per_user < 1:
            raise ValueError("max_per_user must be positive")
        self._max_per_user = max_per_user
        self._overflow = overflow
        self._queues: Dict[str, Deque[Message]] = {}

    def enqueue(self, user_id: str, message: Message) -> bool:
        """Append to the tail; returns False only when a ``reject`` queue is full."""

        queue = self._queues.get(user_id)
        if queue is None:
            queue = self._queues[user_id] = deque()
        if self._max_per_user is not None and len(queue) >= self._max_per_user:
            if self._overflow == "reject":
                LOGGER.warning("Pending queue for %s is full; rejecting message", user_id)
                return False
            dropped = queue.popleft()
            LOGGER.warning(
                "Pending queue for %s is full; dropped oldest message from %s",
                user_id,
                dropped.sender,
            )
        queue.append(message)
        return True

    def drain_all(self, user_id: str) -> List[Message]:
        queue = self._queues.pop(user_id, None)
        if not queue:
            return []
        return list(queue)

    def pending_count(self, user_id: str) -> int:
        queue = self._queues.get(user_id)
        return len(queue) if queue else 0

    def total_pending(self) -> int:
        return sum(len(queue) for queue in self._queues.values())
