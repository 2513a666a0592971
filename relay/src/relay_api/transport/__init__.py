"""Transport implementations for client connections."""

from .base import BaseTransport, TransportClosed
from .websocket import WebSocketTransport

__all__ = ["BaseTransport", "TransportClosed", "WebSocketTransport"]
