"""In-memory registry of live client connections, keyed by user id."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from relay_api.transport import BaseTransport

LOGGER = logging.getLogger(__name__)


class ConnectionRegistry:
    """Single source of truth for which users are reachable right now.

    Holds at most one handle per user id. Callers serialize access per user
    through the delivery engine's lock table; the registry itself does no
    locking.
    """

    def __init__(self) -> None:
        self._connections: Dict[str, BaseTransport] = {}

    def bind(self, user_id: str, handle: BaseTransport) -> Optional[BaseTransport]:
        """Install ``handle`` for ``user_id`` and return the binding it replaced."""

        previous = self._connections.get(user_id)
        self._connections[user_id] = handle
        if previous is not None and previous is not handle:
            LOGGER.info("Connection for %s superseded", user_id)
            return previous
        return None

    def lookup(self, user_id: str) -> Optional[BaseTransport]:
        return self._connections.get(user_id)

    def unbind(self, user_id: str, handle: Optional[BaseTransport] = None) -> bool:
        """Remove the binding; with ``handle`` only if it is still the current one."""

        current = self._connections.get(user_id)
        if current is None:
            return False
        if handle is not None and current is not handle:
            return False
        del self._connections[user_id]
        return True

    def is_online(self, user_id: str) -> bool:
        return user_id in self._connections

    def online_users(self) -> List[str]:
        return list(self._connections)

    def __len__(self) -> int:
        return len(self._connections)
