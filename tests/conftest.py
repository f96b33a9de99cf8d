"""
Shared test doubles for the digest pipeline.
"""

import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import asyncio
from typing import Dict, List, Optional

import pytest

from slackfly.ai_core.summarization import SummarizationError
from slackfly.cache.memory import MemoryCacheService
from slackfly.config import Settings
from slackfly.models.digest import SlackMessage


class RecordingCache(MemoryCacheService):
    """Memory cache that remembers the expiration used for every write."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.writes: Dict[str, Optional[int]] = {}

    async def set(self, key, value, expiration=None):
        self.writes[key] = expiration
        return await super().set(key, value, expiration)


class FakeSlackClient:
    """In-memory stand-in for SlackClient."""

    def __init__(self, channels: Dict[str, str], messages: Dict[str, List[SlackMessage]]):
        self.channels = channels  # name -> id
        self.messages = messages  # id -> batch
        self.fetch_calls: List[tuple] = []
        self.sent: List[tuple] = []
        self.recent_calls: List[tuple] = []

    async def resolve_channel_id(self, channel_name: str) -> Optional[str]:
        return self.channels.get(channel_name.lstrip("#"))

    async def fetch_messages_in_range(self, channel_id, oldest, latest):
        self.fetch_calls.append((channel_id, oldest, latest))
        return list(self.messages.get(channel_id, []))

    async def get_recent_messages(self, channel_id, limit=50):
        self.recent_calls.append((channel_id, limit))
        return list(self.messages.get(channel_id, []))[-limit:]

    async def send_daily_digest(self, channel_id, summary, channel_name):
        self.sent.append((channel_id, summary, channel_name))


class FakeSummarizer:
    """Summarizer double; channels listed in `failing` fail to summarize or recap."""

    def __init__(self, failing=(), gate: Optional[asyncio.Event] = None):
        self.failing = set(failing)
        self.gate = gate
        self.started = asyncio.Event()
        self.calls: List[str] = []

    async def summarize(self, messages, channel_name):
        self.calls.append(channel_name)
        self.started.set()
        if self.gate is not None:
            await self.gate.wait()
        if channel_name in self.failing:
            raise RuntimeError(f"quota exceeded for {channel_name}")
        return f"Summary of {len(messages)} messages in #{channel_name}"

    async def quick_recap(self, messages, channel_name):
        self.calls.append(channel_name)
        if channel_name in self.failing:
            raise SummarizationError(f"quota exceeded for {channel_name}")
        return f"Recap of {len(messages)} messages"


def make_message(ts: str, user: str, text: str = "hello", thread_ts: Optional[str] = None) -> SlackMessage:
    return SlackMessage(ts=ts, user=user, text=text, thread_ts=thread_ts)


@pytest.fixture
def settings():
    """Settings with explicit digest configuration (no .env lookup)."""
    return Settings(
        _env_file=None,
        watched_channels="standup,project-x,random",
        max_messages_per_digest=100,
    )


@pytest.fixture
def standup_messages():
    return [
        make_message("100.1", "A", "Morning all"),
        make_message("100.2", "B", "Shipped the login fix"),
        make_message("100.3", "A", "Reviewing it now"),
    ]
