"""
Redis Cache Backend

Values are stored as JSON strings; expiration is delegated to Redis (SET EX).
"""

import json
import logging
from typing import Any, Optional

from redis import asyncio as aioredis
from redis.exceptions import RedisError

from slackfly.cache.base import CacheService

logger = logging.getLogger(__name__)


class RedisCacheService(CacheService):
    """Networked cache backed by a Redis server."""

    def __init__(self, url: str = "redis://localhost:6379", client: Optional[aioredis.Redis] = None):
        self.url = url
        self.client = client
        self.is_connected = False

    async def connect(self) -> None:
        """
        Open the connection and verify it with PING.

        Raises:
            RedisError: If the server cannot be reached
        """
        if self.client is None:
            self.client = aioredis.from_url(self.url, decode_responses=True)

        try:
            await self.client.ping()
        except RedisError as e:
            logger.error(f"Failed to connect to Redis at {self.url}: {e}")
            raise

        self.is_connected = True
        logger.info("Redis cache connected")

    async def disconnect(self) -> None:
        if self.client is not None:
            await self.client.aclose()
            self.client = None
        self.is_connected = False
        logger.info("Redis cache disconnected")

    async def set(self, key: str, value: Any, expiration: Optional[int] = None) -> bool:
        if not self.is_connected or self.client is None:
            return False

        try:
            serialized = json.dumps(value)
            await self.client.set(key, serialized, ex=expiration or None)
            return True
        except (TypeError, ValueError, RedisError) as e:
            logger.error(f"Redis SET error for {key}: {e}")
            return False

    async def get(self, key: str) -> Optional[Any]:
        if not self.is_connected or self.client is None:
            return None

        try:
            raw = await self.client.get(key)
            return json.loads(raw) if raw is not None else None
        except (ValueError, RedisError) as e:
            logger.error(f"Redis GET error for {key}: {e}")
            return None

    async def delete(self, key: str) -> bool:
        if not self.is_connected or self.client is None:
            return False

        try:
            await self.client.delete(key)
            return True
        except RedisError as e:
            logger.error(f"Redis DEL error for {key}: {e}")
            return False

    async def exists(self, key: str) -> bool:
        if not self.is_connected or self.client is None:
            return False

        try:
            return await self.client.exists(key) == 1
        except RedisError as e:
            logger.error(f"Redis EXISTS error for {key}: {e}")
            return False
