"""Minimal WebSocket client for talking to a relay."""

from __future__ import annotations

import logging
from typing import Any, Optional
from urllib.parse import urlencode

import websockets

from relay_api.models import Message, create_message, decode_message, encode_message

LOGGER = logging.getLogger(__name__)


class RelayClient:
    """Connects as one user and exchanges messages with others."""

    def __init__(self, base_url: str, user_id: str) -> None:
        if not user_id:
            raise ValueError("user_id is required")
        self._base_url = base_url.rstrip("/")
        self.user_id = user_id
        self._ws: Optional[Any] = None

    @property
    def url(self) -> str:
        return f"{self._base_url}/ws?{urlencode({'user_id': self.user_id})}"

    async def connect(self) -> None:
        LOGGER.info("Connecting to relay at %s", self.url)
        self._ws = await websockets.connect(self.url)

    async def send(self, receiver: str, content: str) -> Message:
        if not self._ws:
            raise RuntimeError("Relay client not connected")
        message = create_message(self.user_id, receiver, content)
        await self._ws.send(encode_message(message))
        return message

    async def receive(self) -> Message:
        if not self._ws:
            raise RuntimeError("Relay client not connected")
        raw = await self._ws.recv()
        LOGGER.debug("Relay receive: %s", raw)
        return decode_message(raw)

    async def close(self) -> None:
        if self._ws:
            LOGGER.info("Closing relay connection")
            await self._ws.close()
            self._ws = None

    async def __aenter__(self) -> "RelayClient":
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
