"""Connection tracking, offline queueing and message delivery."""

from .engine import ConnectResult, DeliveryEngine, DeliveryOutcome
from .locks import UserLockTable
from .queue import PendingQueueStore
from .registry import ConnectionRegistry

__all__ = [
    "ConnectResult",
    "ConnectionRegistry",
    "DeliveryEngine",
    "DeliveryOutcome",
    "PendingQueueStore",
    "UserLockTable",
]
