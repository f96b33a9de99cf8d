"""
Cache Service Contract

Key/value store with per-key expiration, plus the channel/date keyed
helpers used by the digest pipeline:

    channel:<channel_id>:<date>  -> list of message dicts
    digest:<channel_id>:<date>   -> ChannelDigest payload

Every operation is fail-soft: when the backend is not connected, or a value
cannot be serialized, or the transport fails, the error is logged and the
operation returns a negative result (False / None) instead of raising.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, List, Optional

from pydantic import ValidationError

from slackfly.models.digest import ChannelDigest, SlackMessage

logger = logging.getLogger(__name__)

# Expiration policy (seconds)
TODAY_MESSAGES_TTL = 3600  # Day still accumulating messages
CLOSED_DAY_MESSAGES_TTL = 86400  # Past days are immutable
DIGEST_TTL = 604800  # 7 days


def channel_messages_key(channel_id: str, date: str) -> str:
    return f"channel:{channel_id}:{date}"


def digest_key(channel_id: str, date: str) -> str:
    return f"digest:{channel_id}:{date}"


class CacheService(ABC):
    """Key/value cache with TTL, shared by the memory and Redis backends."""

    is_connected: bool = False

    @abstractmethod
    async def connect(self) -> None:
        ...

    @abstractmethod
    async def disconnect(self) -> None:
        ...

    @abstractmethod
    async def set(self, key: str, value: Any, expiration: Optional[int] = None) -> bool:
        """Store a JSON-serializable value. `expiration` is in seconds (None = no expiry)."""

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """Return a fresh deserialized copy of the value, or None if absent/expired."""

    @abstractmethod
    async def delete(self, key: str) -> bool:
        ...

    @abstractmethod
    async def exists(self, key: str) -> bool:
        ...

    # Digest pipeline helpers

    async def store_channel_messages(
        self,
        channel_id: str,
        messages: List[SlackMessage],
        date: str,
        expiration: int = CLOSED_DAY_MESSAGES_TTL,
    ) -> bool:
        payload = [msg.model_dump(exclude_none=True) for msg in messages]
        return await self.set(channel_messages_key(channel_id, date), payload, expiration)

    async def get_channel_messages(
        self, channel_id: str, date: str
    ) -> Optional[List[SlackMessage]]:
        key = channel_messages_key(channel_id, date)
        payload = await self.get(key)
        if payload is None:
            return None

        try:
            return [SlackMessage.model_validate(item) for item in payload]
        except (ValidationError, TypeError) as e:
            logger.warning(f"Ignoring malformed cache entry {key}: {e}")
            return None

    async def store_digest(self, channel_id: str, date: str, digest: ChannelDigest) -> bool:
        return await self.set(digest_key(channel_id, date), digest.to_payload(), DIGEST_TTL)

    async def get_digest(self, channel_id: str, date: str) -> Optional[ChannelDigest]:
        key = digest_key(channel_id, date)
        payload = await self.get(key)
        if payload is None:
            return None

        try:
            return ChannelDigest.model_validate(payload)
        except ValidationError as e:
            logger.warning(f"Ignoring malformed cache entry {key}: {e}")
            return None
