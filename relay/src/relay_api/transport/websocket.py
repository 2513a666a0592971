"""WebSocket transport wrapper for client sessions."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from fastapi import WebSocket, WebSocketDisconnect
from starlette.websockets import WebSocketState

from .base import BaseTransport, TransportClosed

LOGGER = logging.getLogger(__name__)


class WebSocketTransport(BaseTransport):
    """Thin wrapper around FastAPI WebSocket."""

    def __init__(self, websocket: WebSocket) -> None:
        self._websocket = websocket

    @property
    def client(self) -> Any:
        return self._websocket.client

    @property
    def query_params(self) -> Mapping[str, str]:
        return self._websocket.query_params

    @property
    def headers(self) -> Mapping[str, str]:
        return self._websocket.headers

    async def accept(self) -> None:
        await self._websocket.accept()

    async def receive_frame(self) -> str | bytes:
        try:
            message = await self._websocket.receive()
        except WebSocketDisconnect as exc:
            raise TransportClosed(exc.code, exc.reason or "") from exc
        except RuntimeError as exc:
            raise TransportClosed(reason=str(exc)) from exc
        if message["type"] == "websocket.disconnect":
            raise TransportClosed(message.get("code"), message.get("reason") or "")
        text = message.get("text")
        if text is not None:
            return text
        return message.get("bytes") or b""

    async def send_frame(self, frame: str) -> None:
        await self._websocket.send_text(frame)

    async def close(self, *, code: int = 1000, reason: str = "") -> None:
        if self._websocket.application_state == WebSocketState.DISCONNECTED:
            return
        if self._websocket.client_state == WebSocketState.DISCONNECTED:
            return
        try:
            await self._websocket.close(code=code, reason=reason)
        except RuntimeError:
            LOGGER.debug("WebSocket already closed", exc_info=True)
