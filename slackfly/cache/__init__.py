# Cache backends
import logging
from typing import Optional

from slackfly.cache.base import (
    CacheService,
    channel_messages_key,
    digest_key,
    TODAY_MESSAGES_TTL,
    CLOSED_DAY_MESSAGES_TTL,
    DIGEST_TTL,
)
from slackfly.cache.memory import MemoryCacheService
from slackfly.cache.redis import RedisCacheService
from slackfly.config import Settings, get_settings

logger = logging.getLogger(__name__)


def create_cache_service(settings: Optional[Settings] = None) -> CacheService:
    """Build the cache backend selected by CACHE_TYPE (memory or redis)."""
    settings = settings or get_settings()

    if settings.cache_type == "redis":
        logger.info("Using Redis cache service")
        return RedisCacheService(settings.redis_url)

    logger.info("Using in-memory cache service")
    return MemoryCacheService()


__all__ = [
    "CacheService",
    "MemoryCacheService",
    "RedisCacheService",
    "create_cache_service",
    "channel_messages_key",
    "digest_key",
    "TODAY_MESSAGES_TTL",
    "CLOSED_DAY_MESSAGES_TTL",
    "DIGEST_TTL",
]
