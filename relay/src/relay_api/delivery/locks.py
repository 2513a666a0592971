"""Sharded asyncio locks serializing work per user id."""

from __future__ import annotations

import asyncio
import zlib
from typing import List


class UserLockTable:
    """Maps user ids onto a fixed pool of locks.

    The same id always lands on the same shard; distinct ids may share one.
    """

    def __init__(self, shards: int = 64) -> None:
        if shards < 1:
            raise ValueError("shards must be positive")
        self._locks: List[asyncio.Lock] = [asyncio.Lock() for _ in range(shards)]

    def __len__(self) -> int:
        return len(self._locks)

    def shard_for(self, user_id: str) -> int:
        return zlib.crc32(user_id.encode("utf-8")) % len(self._locks)

    def lock_for(self, user_id: str) -> asyncio.Lock:
        return self._locks[self.shard_for(user_id)]
