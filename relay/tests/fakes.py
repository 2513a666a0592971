"""In-memory stand-ins for transports and the message store."""

import asyncio
from typing import Any, List, Optional

from relay_api.models import Message
from relay_api.storage import MessageStore
from relay_api.transport import BaseTransport, TransportClosed

_CLOSE = object()


class FakeTransport(BaseTransport):
    """In-memory transport; frames pushed with ``feed`` are read by the session."""

    def __init__(self, *, user_id: Optional[str] = None, headers: Optional[dict] = None) -> None:
        self._query = {"user_id": user_id} if user_id is not None else {}
        self._headers = headers or {}
        self._incoming: asyncio.Queue = asyncio.Queue()
        self.sent: List[str] = []
        self.fail_sends = False
        self.fail_after: Optional[int] = None
        self.closed = False
        self.close_code: Optional[int] = None
        self.close_reason: Optional[str] = None

    @property
    def client(self) -> Any:
        return ("test", 0)

    @property
    def query_params(self) -> dict:
        return self._query

    @property
    def headers(self) -> dict:
        return self._headers

    async def accept(self) -> None:
        return None

    def feed(self, frame: str | bytes) -> None:
        self._incoming.put_nowait(frame)

    def hang_up(self) -> None:
        self._incoming.put_nowait(_CLOSE)

    async def receive_frame(self) -> str | bytes:
        item = await self._incoming.get()
        if item is _CLOSE:
            raise TransportClosed(1000, "bye")
        return item

    async def send_frame(self, frame: str) -> None:
        if self.fail_sends or (self.fail_after is not None and len(self.sent) >= self.fail_after):
            raise ConnectionResetError("peer gone")
        self.sent.append(frame)

    async def close(self, *, code: int = 1000, reason: str = "") -> None:
        self.closed = True
        self.close_code = code
        self.close_reason = reason


class FakeStore(MessageStore):
    def __init__(self) -> None:
        self.appended: List[Message] = []
        self.fail = False
        self.delay: float = 0.0
        self.started = False
        self.closed = False

    async def start(self) -> None:
        self.started = True

    async def close(self) -> None:
        self.closed = True

    async def append(self, message: Message) -> None:
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise RuntimeError("store offline")
        self.appended.append(message)

    async def list_messages(self, user_id, *, peer=None, limit=50):
        matches = [
            m
            for m in self.appended
            if user_id in (m.sender, m.receiver) and (peer is None or peer in (m.sender, m.receiver))
        ]
        return list(reversed(matches))[:limit]


