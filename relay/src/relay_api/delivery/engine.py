"""Immediate-or-queued delivery of messages to their recipients."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Set

from relay_api import metrics
from relay_api.config.settings import RelaySettings
from relay_api.models import Message, encode_message
from relay_api.transport import BaseTransport

from .locks import UserLockTable
from .queue import PendingQueueStore
from .registry import ConnectionRegistry

LOGGER = logging.getLogger(__name__)

SUPERSEDED_CLOSE_CODE = 1011


class DeliveryOutcome(str, Enum):
    DELIVERED = "delivered"
    QUEUED = "queued"
    DROPPED = "dropped"


@dataclass
class ConnectResult:
    flushed: int = 0
    requeued: int = 0
    superseded: Optional[BaseTransport] = None


class DeliveryEngine:
    """Routes messages to live connections or to the pending queue.

    All registry and queue access for a user id happens while holding that
    user's lock, so a reconnect flush and a concurrent delivery to the same
    user never interleave.
    """

    def __init__(
        self,
        registry: Optional[ConnectionRegistry] = None,
        queue: Optional[PendingQueueStore] = None,
        *,
        locks: Optional[UserLockTable] = None,
        send_timeout: float = 10.0,
        close_superseded: bool = True,
    ) -> None:
        self._registry = registry or ConnectionRegistry()
        self._queue = queue or PendingQueueStore()
        self._locks = locks or UserLockTable()
        self._send_timeout = send_timeout
        self._close_superseded = close_superseded
        self._background: Set[asyncio.Task] = set()

    @classmethod
    def from_settings(cls, settings: RelaySettings) -> "DeliveryEngine":
        return cls(
            ConnectionRegistry(),
            PendingQueueStore(
                max_per_user=settings.max_pending_per_user,
                overflow=settings.pending_overflow,
            ),
            locks=UserLockTable(settings.lock_shards),
            send_timeout=settings.send_timeout_seconds,
            close_superseded=settings.close_superseded,
        )

    @property
    def registry(self) -> ConnectionRegistry:
        return self._registry

    @property
    def queue(self) -> PendingQueueStore:
        return self._queue

    async def deliver(self, message: Message) -> DeliveryOutcome:
        receiver = message.receiver
        async with self._locks.lock_for(receiver):
            handle = self._registry.lookup(receiver)
            if handle is None:
                outcome = self._enqueue(receiver, message)
                if outcome is DeliveryOutcome.QUEUED:
                    LOGGER.info("Recipient %s is not connected, message enqueued", receiver)
            elif await self._write(handle, receiver, message):
                outcome = DeliveryOutcome.DELIVERED
                LOGGER.debug("Message sent to %s from %s", receiver, message.sender)
            else:
                self._evict(receiver, handle)
                outcome = self._enqueue(receiver, message)
        metrics.record_message(outcome.value)
        self._refresh_gauges()
        return outcome

    async def connect(self, user_id: str, handle: BaseTransport) -> ConnectResult:
        """Bind ``handle`` and flush everything queued for ``user_id`` through it."""

        result = ConnectResult()
        async with self._locks.lock_for(user_id):
            result.superseded = self._registry.bind(user_id, handle)
            pending = self._queue.drain_all(user_id)
            for index, message in enumerate(pending):
                if await self._write(handle, user_id, message):
                    result.flushed += 1
                    continue
                remaining = pending[index:]
                for leftover in remaining:
                    self._queue.enqueue(user_id, leftover)
                result.requeued = len(remaining)
                self._registry.unbind(user_id, handle)
                self._close_later(handle, SUPERSEDED_CLOSE_CODE, "delivery failed")
                LOGGER.warning(
                    "Flush to %s aborted; %d message(s) re-queued",
                    user_id,
                    result.requeued,
                )
                break
        if result.superseded is not None and self._close_superseded:
            self._close_later(result.superseded, SUPERSEDED_CLOSE_CODE, "superseded session")
        if result.flushed:
            LOGGER.info("Flushed %d pending message(s) to %s", result.flushed, user_id)
            for _ in range(result.flushed):
                metrics.record_message("flushed")
        self._refresh_gauges()
        return result

    async def disconnect(self, user_id: str, handle: BaseTransport) -> bool:
        async with self._locks.lock_for(user_id):
            removed = self._registry.unbind(user_id, handle)
        self._refresh_gauges()
        return removed

    async def _write(self, handle: BaseTransport, user_id: str, message: Message) -> bool:
        frame = encode_message(message)
        try:
            await asyncio.wait_for(handle.send_frame(frame), timeout=self._send_timeout)
        except asyncio.TimeoutError:
            LOGGER.warning("Timed out sending message to %s", user_id)
            return False
        except Exception:  # noqa: BLE001
            LOGGER.warning("Error sending message to %s", user_id, exc_info=True)
            return False
        return True

    def _enqueue(self, user_id: str, message: Message) -> DeliveryOutcome:
        if self._queue.enqueue(user_id, message):
            return DeliveryOutcome.QUEUED
        return DeliveryOutcome.DROPPED

    def _evict(self, user_id: str, handle: BaseTransport) -> None:
        if self._registry.unbind(user_id, handle):
            LOGGER.info("Evicted dead connection for %s", user_id)
            self._close_later(handle, SUPERSEDED_CLOSE_CODE, "delivery failed")

    def _close_later(self, handle: BaseTransport, code: int, reason: str) -> None:
        task = asyncio.create_task(self._close_quietly(handle, code, reason))
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    @staticmethod
    async def _close_quietly(handle: BaseTransport, code: int, reason: str) -> None:
        try:
            await handle.close(code=code, reason=reason)
        except Exception:  # noqa: BLE001
            LOGGER.debug("Closing connection (%s) failed", reason, exc_info=True)

    def _refresh_gauges(self) -> None:
        metrics.update_gauges(sessions=len(self._registry), pending=self._queue.total_pending())
