"""Relay server facade wiring transports, sessions and shared services."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import WebSocket

from relay_api import metrics
from relay_api.config.settings import RelaySettings, get_settings
from relay_api.delivery import DeliveryEngine
from relay_api.session import RelaySession
from relay_api.storage import MessageStore, SqlMessageStore
from relay_api.transport import WebSocketTransport

LOGGER = logging.getLogger(__name__)


class RelayServer:
    """Owns the process-wide delivery engine and message store.

    Built once per application and shared by every connection.
    """

    def __init__(
        self,
        *,
        settings: Optional[RelaySettings] = None,
        engine: Optional[DeliveryEngine] = None,
        store: Optional[MessageStore] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self.engine = engine or DeliveryEngine.from_settings(self._settings)
        self.store = store or SqlMessageStore(
            self._settings.database_url,
            migrate_on_startup=self._settings.migrate_on_startup,
        )

    @property
    def settings(self) -> RelaySettings:
        return self._settings

    async def start(self) -> None:
        await self.store.start()

    async def stop(self) -> None:
        await self.store.close()

    async def handle_websocket(self, websocket: WebSocket) -> None:
        method = websocket.scope.get("method", "GET")
        transport = WebSocketTransport(websocket)
        try:
            await transport.accept()
        except Exception:  # noqa: BLE001
            LOGGER.exception("Error accepting WebSocket from %s", transport.client)
            metrics.record_connection_attempt(method, "error")
            return
        session = RelaySession(
            transport=transport,
            engine=self.engine,
            store=self.store,
            settings=self._settings,
        )
        metrics.record_connection_attempt(method, "accepted" if session.resolve_user_id() else "rejected")
        try:
            await session.run()
        except Exception:  # noqa: BLE001
            LOGGER.exception("Relay session for %s failed", session.user_id)
