"""Per-connection lifecycle: handshake, flush, relay loop, teardown."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from relay_api import metrics
from relay_api.config.settings import RelaySettings
from relay_api.delivery import DeliveryEngine
from relay_api.models import Message, MessageDecodeError, decode_message
from relay_api.storage import MessageStore
from relay_api.transport import BaseTransport, TransportClosed

LOGGER = logging.getLogger(__name__)

REJECT_CLOSE_CODE = 1011
REJECT_CLOSE_REASON = "internal error"
FAILED_FLUSH_CLOSE_REASON = "delivery failed"


class SessionState(str, Enum):
    CONNECTING = "connecting"
    ACTIVE = "active"
    CLOSING = "closing"


class RelaySession:
    """Drives one client connection from handshake to teardown."""

    def __init__(
        self,
        *,
        transport: BaseTransport,
        engine: DeliveryEngine,
        store: MessageStore,
        settings: RelaySettings,
    ) -> None:
        self._transport = transport
        self._engine = engine
        self._store = store
        self._settings = settings
        self.state = SessionState.CONNECTING
        self.user_id: Optional[str] = None
        self._close_code = 1000
        self._close_reason = ""

    def resolve_user_id(self) -> Optional[str]:
        user_id = self._transport.query_params.get(self._settings.user_id_query_param)
        if not user_id:
            user_id = self._transport.headers.get(self._settings.user_id_header)
        return user_id or None

    async def run(self) -> None:
        try:
            user_id = self.resolve_user_id()
            if not user_id:
                LOGGER.warning("User ID not provided in request from %s", self._transport.client)
                self.state = SessionState.CLOSING
                return
            self.user_id = user_id
            result = await self._engine.connect(user_id, self._transport)
            if result.requeued:
                LOGGER.warning("Connection for %s failed while flushing; closing", user_id)
                self._close_code, self._close_reason = REJECT_CLOSE_CODE, FAILED_FLUSH_CLOSE_REASON
                return
            self.state = SessionState.ACTIVE
            LOGGER.info("User %s connected (%d pending flushed)", user_id, result.flushed)
            await self._relay_loop()
        finally:
            await self._teardown()

    async def _relay_loop(self) -> None:
        while True:
            try:
                frame = await self._next_frame()
            except TransportClosed as exc:
                LOGGER.info("Connection for %s closed (code=%s)", self.user_id, exc.code)
                return
            except asyncio.TimeoutError:
                LOGGER.info("Connection for %s idle too long; closing", self.user_id)
                return
            try:
                message = decode_message(frame, received_at=datetime.now(timezone.utc))
            except MessageDecodeError as exc:
                LOGGER.warning("Discarding malformed frame from %s: %s", self.user_id, exc)
                metrics.record_message("invalid")
                continue
            await self._persist(message)
            await self._engine.deliver(message)

    async def _next_frame(self) -> str | bytes:
        timeout = self._settings.idle_timeout_seconds
        if timeout is None:
            return await self._transport.receive_frame()
        return await asyncio.wait_for(self._transport.receive_frame(), timeout=timeout)

    async def _persist(self, message: Message) -> None:
        try:
            await asyncio.wait_for(
                self._store.append(message),
                timeout=self._settings.store_timeout_seconds,
            )
        except asyncio.TimeoutError:
            LOGGER.error("Timed out saving message from %s", message.sender)
            metrics.record_store_failure()
        except Exception:  # noqa: BLE001
            LOGGER.exception("Error saving message from %s", message.sender)
            metrics.record_store_failure()

    async def _teardown(self) -> None:
        self.state = SessionState.CLOSING
        try:
            if self.user_id:
                await self._engine.disconnect(self.user_id, self._transport)
                LOGGER.info("User %s disconnected", self.user_id)
        finally:
            if self.user_id:
                code, reason = self._close_code, self._close_reason
            else:
                code, reason = REJECT_CLOSE_CODE, REJECT_CLOSE_REASON
            try:
                await self._transport.close(code=code, reason=reason)
            except Exception:  # noqa: BLE001
                LOGGER.debug("Transport close failed for %s", self.user_id, exc_info=True)
