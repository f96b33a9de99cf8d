"""
Digest Orchestrator Service

Full pipeline orchestration for a (channel, day) pair:
Resolve channel -> Digest cache -> Message cache / Slack fetch -> Summarize
-> Participants -> Store digest

Only one generation runs at a time per orchestrator (process wide, not per
channel): a request that arrives while another is in flight gets None back
immediately and should be retried later.
"""

import asyncio
import logging
from collections import Counter
from typing import Dict, List, Optional, Tuple

from slackfly.cache.base import CacheService, TODAY_MESSAGES_TTL, CLOSED_DAY_MESSAGES_TTL
from slackfly.config import Settings, get_settings
from slackfly.models.digest import ChannelDigest, Participant, SlackMessage
from slackfly.utils.helpers import (
    day_bounds,
    parse_date,
    shift_date,
    truncate_text,
    utc_now,
    utc_today,
)

logger = logging.getLogger(__name__)

NO_RECENT_MESSAGES_TEXT = "No recent messages found in this channel."
RECAP_MESSAGE_LIMIT = 50


class DigestOrchestrator:
    """
    Orchestrates digest generation, batch runs and history lookups.
    """

    def __init__(self, cache: CacheService, slack_client, summarizer, settings: Optional[Settings] = None):
        """
        Args:
            cache: Cache backend (memory or Redis)
            slack_client: SlackClient or compatible object
            summarizer: DigestSummarizer or compatible object
            settings: Application settings (defaults to get_settings())
        """
        self.cache = cache
        self.slack_client = slack_client
        self.summarizer = summarizer
        self.settings = settings or get_settings()
        self.generation_in_flight = False

    def _try_acquire(self) -> bool:
        # No await between check and set, so this is atomic on the event loop
        if self.generation_in_flight:
            return False
        self.generation_in_flight = True
        return True

    def _release(self) -> None:
        self.generation_in_flight = False

    async def generate_daily_digest(
        self, channel_name: str, date: Optional[str] = None
    ) -> Optional[ChannelDigest]:
        """
        Generate (or fetch from cache) the digest of one channel for one day.

        Args:
            channel_name: Channel name, with or without '#'
            date: UTC calendar day (YYYY-MM-DD), defaults to today

        Returns:
            ChannelDigest, or None if another generation is in flight, the
            channel does not exist, or the day has no messages

        Raises:
            SummarizationError: If the summarizer fails
        """
        if not self._try_acquire():
            logger.info("Digest generation already in progress, skipping")
            return None

        try:
            _, digest = await self._build_digest(channel_name, date or utc_today())
            return digest
        finally:
            self._release()

    async def _build_digest(
        self, channel_name: str, target_date: str
    ) -> Tuple[Optional[str], Optional[ChannelDigest]]:
        """Run the pipeline without touching the in-flight guard."""
        parse_date(target_date)  # ValueError on malformed dates
        logger.info(f"Generating daily digest for #{channel_name} on {target_date}")

        # Step 1: Resolve channel
        channel_id = await self.slack_client.resolve_channel_id(channel_name)
        if not channel_id:
            logger.info(f"Channel #{channel_name} not found")
            return None, None

        # Step 2: Digest cache
        cached_digest = await self.cache.get_digest(channel_id, target_date)
        if cached_digest is not None:
            logger.info(f"Using cached digest for #{channel_name} on {target_date}")
            return channel_id, cached_digest

        # Step 3: Messages (message cache, then Slack)
        messages = await self.get_messages_for_date(channel_id, target_date)
        if not messages:
            logger.info(f"No messages found for #{channel_name} on {target_date}")
            return channel_id, None

        # Step 4: Summarize (errors propagate)
        logger.info(f"Processing {len(messages)} messages from #{channel_name}")
        summary = await self.summarizer.summarize(messages, channel_name)
        logger.debug(f"Summary preview for #{channel_name}: {truncate_text(summary)}")

        # Step 5: Build and store digest
        digest = ChannelDigest(
            channel_name=channel_name,
            date=target_date,
            message_count=len(messages),
            summary=summary,
            generated_at=utc_now(),
            participants=self.extract_participants(messages),
        )
        await self.cache.store_digest(channel_id, target_date, digest)

        logger.info(f"Daily digest generated for #{channel_name} on {target_date}")
        return channel_id, digest

    async def get_messages_for_date(self, channel_id: str, date: str) -> List[SlackMessage]:
        """
        Return a channel's messages for a UTC day, from cache when possible.

        Fetched batches are cached for 1 hour when `date` is today (the day is
        still accumulating messages) and 24 hours otherwise. Empty batches are
        never cached.
        """
        cached = await self.cache.get_channel_messages(channel_id, date)
        if cached is not None:
            logger.info(f"Using cached messages for {channel_id} on {date}")
            return cached

        oldest, latest = day_bounds(date)
        messages = await self.slack_client.fetch_messages_in_range(channel_id, oldest, latest)

        if messages:
            is_today = date == utc_today()
            expiration = TODAY_MESSAGES_TTL if is_today else CLOSED_DAY_MESSAGES_TTL
            await self.cache.store_channel_messages(channel_id, messages, date, expiration)
            logger.info(
                f"Cached {len(messages)} messages for {channel_id} on {date} "
                f"({'1 hour' if is_today else '24 hours'} TTL)"
            )

        return messages

    @staticmethod
    def extract_participants(messages: List[SlackMessage]) -> List[Participant]:
        """
        Count messages per author.

        Returns:
            Participants sorted by message count descending; ties keep the
            order in which authors first appear in `messages`
        """
        counts = Counter(msg.user for msg in messages)
        ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
        return [Participant(user=user, message_count=count) for user, count in ranked]

    async def generate_quick_recap(self, messages: List[SlackMessage], channel_name: str) -> str:
        """
        Short recap of recent messages (not cached).

        Raises:
            SummarizationError: If the summarizer fails
        """
        if not messages:
            return NO_RECENT_MESSAGES_TEXT

        logger.info(f"Generating quick recap for #{channel_name}")
        return await self.summarizer.quick_recap(messages, channel_name)

    async def recap_channel(self, channel_name: str, limit: int = RECAP_MESSAGE_LIMIT) -> Optional[str]:
        """
        Quick recap of a channel's latest messages.

        Returns:
            Recap text, or None if the channel does not exist

        Raises:
            SummarizationError: If the summarizer fails
        """
        channel_id = await self.slack_client.resolve_channel_id(channel_name)
        if not channel_id:
            logger.info(f"Channel #{channel_name} not found")
            return None

        messages = await self.slack_client.get_recent_messages(channel_id, limit)
        return await self.generate_quick_recap(messages, channel_name)

    async def generate_and_send_daily_digests(
        self, date: Optional[str] = None
    ) -> Dict[str, Optional[ChannelDigest]]:
        """
        Generate and post today's digest for every watched channel.

        The batch holds the in-flight guard for its whole duration; channels
        run concurrently and a failure in one channel is logged without
        affecting the others.

        Returns:
            Mapping of channel name to its digest (None when skipped or failed)
        """
        channels = self.settings.watched_channel_list
        if not self._try_acquire():
            logger.info("Digest generation already in progress, skipping batch run")
            return {}

        target_date = date or utc_today()
        logger.info(f"Starting daily digest generation for {len(channels)} channels")

        try:
            results = await asyncio.gather(
                *(self._generate_and_send(name, target_date) for name in channels)
            )
        finally:
            self._release()

        logger.info("Daily digest generation completed")
        return dict(zip(channels, results))

    async def _generate_and_send(self, channel_name: str, target_date: str) -> Optional[ChannelDigest]:
        try:
            channel_id, digest = await self._build_digest(channel_name, target_date)
            if digest is not None and channel_id:
                await self.slack_client.send_daily_digest(channel_id, digest.summary, channel_name)
            return digest
        except Exception as e:
            logger.error(f"Failed to generate digest for #{channel_name}: {e}", exc_info=True)
            return None

    async def get_digest_history(self, channel_name: str, days: int = 7) -> List[ChannelDigest]:
        """
        Cached digests of the last `days` UTC days (today included), newest
        first. Never generates; days without a cached digest are omitted.
        """
        channel_id = await self.slack_client.resolve_channel_id(channel_name)
        if not channel_id:
            return []

        today = utc_today()
        digests = []
        for i in range(days):
            digest = await self.cache.get_digest(channel_id, shift_date(today, -i))
            if digest is not None:
                digests.append(digest)

        return sorted(digests, key=lambda digest: digest.date, reverse=True)
