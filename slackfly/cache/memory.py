"""
In-Process Cache Backend

Dictionary-backed cache for development and tests. Values are stored as JSON
text, so every `set` and `get` works on an independent copy. Expired entries
are dropped lazily on read and by a background sweep every five minutes.
"""

import asyncio
import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from slackfly.cache.base import CacheService

logger = logging.getLogger(__name__)

SWEEP_INTERVAL_SECONDS = 5 * 60


@dataclass
class CacheEntry:
    value: str  # JSON text
    expires_at: Optional[float] = None

    def is_expired(self, now: float) -> bool:
        return self.expires_at is not None and now > self.expires_at


class MemoryCacheService(CacheService):
    """Process-local cache with lazy expiry and a periodic sweep."""

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        sweep_interval: float = SWEEP_INTERVAL_SECONDS,
    ):
        self._entries: Dict[str, CacheEntry] = {}
        self._clock = clock
        self._sweep_interval = sweep_interval
        self._sweep_task: Optional[asyncio.Task] = None
        self.is_connected = False

    async def connect(self) -> None:
        if self._sweep_task is not None:
            return

        self.is_connected = True
        self._sweep_task = asyncio.create_task(self._sweep_loop())
        logger.info("Memory cache connected")

    async def disconnect(self) -> None:
        if self._sweep_task is not None:
            self._sweep_task.cancel()
            try:
                await self._sweep_task
            except asyncio.CancelledError:
                pass
            self._sweep_task = None

        self._entries.clear()
        self.is_connected = False
        logger.info("Memory cache disconnected")

    async def set(self, key: str, value: Any, expiration: Optional[int] = None) -> bool:
        if not self.is_connected:
            return False

        try:
            serialized = json.dumps(value)
        except (TypeError, ValueError) as e:
            logger.error(f"Memory cache SET error for {key}: {e}")
            return False

        expires_at = self._clock() + expiration if expiration else None
        self._entries[key] = CacheEntry(value=serialized, expires_at=expires_at)
        return True

    async def get(self, key: str) -> Optional[Any]:
        if not self.is_connected:
            return None

        entry = self._live_entry(key)
        if entry is None:
            return None

        try:
            return json.loads(entry.value)
        except ValueError as e:
            logger.error(f"Memory cache GET error for {key}: {e}")
            return None

    async def delete(self, key: str) -> bool:
        if not self.is_connected:
            return False

        self._entries.pop(key, None)
        return True

    async def exists(self, key: str) -> bool:
        if not self.is_connected:
            return False

        return self._live_entry(key) is not None

    def _live_entry(self, key: str) -> Optional[CacheEntry]:
        entry = self._entries.get(key)
        if entry is None:
            return None

        if entry.is_expired(self._clock()):
            del self._entries[key]
            return None

        return entry

    def sweep(self) -> int:
        """Remove every expired entry. Returns the number removed."""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        for key in expired:
            del self._entries[key]

        if expired:
            logger.debug(f"Swept {len(expired)} expired cache entries")
        return len(expired)

    async def _sweep_loop(self) -> None:
        while True:
            await asyncio.sleep(self._sweep_interval)
            self.sweep()

    def get_cache_stats(self) -> Dict[str, Any]:
        return {"total_keys": len(self._entries), "is_connected": self.is_connected}
