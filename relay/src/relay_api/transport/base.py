"""Transport abstractions for client connections."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping


class TransportClosed(Exception):
    """Raised when the peer closed the connection or a read failed."""

    def __init__(self, code: int | None = None, reason: str = "") -> None:
        super().__init__(f"transport closed (code={code}, reason={reason!r})")
        self.code = code
        self.reason = reason


class BaseTransport(ABC):
    """Duplex frame channel terminating one client connection."""

    @property
    @abstractmethod
    def client(self) -> Any:
        ...

    @property
    @abstractmethod
    def query_params(self) -> Mapping[str, str]:
        ...

    @property
    @abstractmethod
    def headers(self) -> Mapping[str, str]:
        ...

    @abstractmethod
    async def accept(self) -> None:
        ...

    @abstractmethod
    async def receive_frame(self) -> str | bytes:
        """Block until the next frame arrives; raise TransportClosed on close/error."""

    @abstractmethod
    async def send_frame(self, frame: str) -> None:
        ...

    @abstractmethod
    async def close(self, *, code: int = 1000, reason: str = "") -> None:
        ...
