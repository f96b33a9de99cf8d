"""
Unit Tests for RedisCacheService

Runs against fakeredis, so no Redis server is needed.
"""

from unittest.mock import AsyncMock

import fakeredis
import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from slackfly.cache.base import DIGEST_TTL, digest_key
from slackfly.cache.redis import RedisCacheService
from slackfly.models.digest import ChannelDigest
from slackfly.services.digest_orchestrator import DigestOrchestrator
from slackfly.utils.helpers import utc_now

from tests.conftest import make_message


def make_cache() -> RedisCacheService:
    return RedisCacheService(client=fakeredis.FakeAsyncRedis(decode_responses=True))


@pytest.mark.asyncio
async def test_operations_require_connection():
    cache = make_cache()

    assert await cache.set("k", 1) is False
    assert await cache.get("k") is None
    assert await cache.exists("k") is False
    assert await cache.delete("k") is False


@pytest.mark.asyncio
async def test_set_get_delete_exists():
    cache = make_cache()
    await cache.connect()

    assert await cache.set("k", {"a": [1, 2]}) is True
    assert await cache.exists("k") is True
    assert await cache.get("k") == {"a": [1, 2]}
    assert await cache.delete("k") is True
    assert await cache.exists("k") is False
    await cache.disconnect()


@pytest.mark.asyncio
async def test_expiration_is_delegated_to_redis():
    client = fakeredis.FakeAsyncRedis(decode_responses=True)
    cache = RedisCacheService(client=client)
    await cache.connect()

    await cache.set("ttl", "v", expiration=3600)
    await cache.set("no-ttl", "v")

    assert 0 < await client.ttl("ttl") <= 3600
    assert await client.ttl("no-ttl") == -1


@pytest.mark.asyncio
async def test_digest_uses_seven_day_ttl(standup_messages):
    client = fakeredis.FakeAsyncRedis(decode_responses=True)
    cache = RedisCacheService(client=client)
    await cache.connect()

    digest = ChannelDigest(
        channel_name="standup",
        date="2024-03-14",
        message_count=len(standup_messages),
        summary="summary",
        generated_at=utc_now(),
        participants=DigestOrchestrator.extract_participants(standup_messages),
    )
    await cache.store_digest("C1", "2024-03-14", digest)

    assert await cache.get_digest("C1", "2024-03-14") == digest
    assert DIGEST_TTL - 5 < await client.ttl(digest_key("C1", "2024-03-14")) <= DIGEST_TTL


@pytest.mark.asyncio
async def test_transport_errors_are_fail_soft():
    client = fakeredis.FakeAsyncRedis(decode_responses=True)
    cache = RedisCacheService(client=client)
    await cache.connect()

    client.get = AsyncMock(side_effect=RedisConnectionError("connection lost"))
    client.set = AsyncMock(side_effect=RedisConnectionError("connection lost"))

    assert await cache.get("k") is None
    assert await cache.set("k", 1) is False
    assert await cache.get_channel_messages("C1", "2024-03-14") is None


@pytest.mark.asyncio
async def test_connect_failure_raises():
    client = fakeredis.FakeAsyncRedis(decode_responses=True)
    client.ping = AsyncMock(side_effect=RedisConnectionError("refused"))
    cache = RedisCacheService(client=client)

    with pytest.raises(RedisConnectionError):
        await cache.connect()
    assert cache.is_connected is False


@pytest.mark.asyncio
async def test_corrupt_json_is_treated_as_missing():
    client = fakeredis.FakeAsyncRedis(decode_responses=True)
    cache = RedisCacheService(client=client)
    await cache.connect()

    await client.set("channel:C1:2024-03-14", "{not json")

    assert await cache.get("channel:C1:2024-03-14") is None
    assert await cache.get_channel_messages("C1", "2024-03-14") is None

    await cache.store_channel_messages("C1", [make_message("1.0", "A")], "2024-03-15")
    assert await cache.get_channel_messages("C1", "2024-03-15") == [make_message("1.0", "A")]
