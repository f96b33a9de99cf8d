"""
Slack API Client

Responsibilities:
- conversations.list: Resolve channel names to ids
- conversations.history: Paginated, capped fetch of a channel's messages
- users.info: Best-effort display name resolution
- chat.postMessage: Send digests back to the channel

The blocking slack_sdk WebClient is driven through asyncio.to_thread.
"""

from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError
from slackfly.config import get_settings
from slackfly.integrations.slack.parser import MessagePage, parse_history_page
from slackfly.models.digest import SlackMessage
from slackfly.utils.helpers import format_message_count, utc_today
from typing import Any, Dict, List, Optional
import asyncio
import logging

logger = logging.getLogger(__name__)

HISTORY_PAGE_SIZE = 200
CHANNEL_LIST_PAGE_SIZE = 1000


class SlackClient:
    """Slack API client for channel history fetching and digest delivery."""

    def __init__(
        self,
        token: Optional[str] = None,
        max_messages_per_digest: Optional[int] = None,
        client: Optional[WebClient] = None,
    ):
        settings = get_settings()
        self.client = client or WebClient(token=token if token is not None else settings.slack_bot_token)
        self.max_messages_per_digest = (
            max_messages_per_digest
            if max_messages_per_digest is not None
            else settings.max_messages_per_digest
        )

    async def resolve_channel_id(self, channel_name: str) -> Optional[str]:
        """
        Look up a channel id by name.

        Args:
            channel_name: Channel name, with or without a leading '#'

        Returns:
            Channel id, or None if the channel does not exist or the lookup failed
        """
        name = channel_name.lstrip("#")
        cursor: Optional[str] = None

        try:
            while True:
                params: Dict[str, Any] = {
                    "types": "public_channel,private_channel",
                    "exclude_archived": True,
                    "limit": CHANNEL_LIST_PAGE_SIZE,
                }
                if cursor:
                    params["cursor"] = cursor

                result = await asyncio.to_thread(self.client.conversations_list, **params)

                for channel in result.get("channels", []):
                    if channel.get("name") == name:
                        return channel["id"]

                cursor = (result.get("response_metadata") or {}).get("next_cursor")
                if not cursor:
                    return None

        except SlackApiError as e:
            logger.error(f"Slack API error resolving channel #{name}: {e.response['error']}")
            return None
        except Exception as e:
            logger.error(f"Error resolving channel #{name}: {e}")
            return None

    async def list_message_page(
        self,
        channel_id: str,
        oldest: Optional[int] = None,
        latest: Optional[int] = None,
        cursor: Optional[str] = None,
        limit: int = HISTORY_PAGE_SIZE,
    ) -> MessagePage:
        """
        Fetch one page of channel history, filtered to content messages.

        Raises:
            SlackApiError: If the Slack API rejects the request
        """
        params: Dict[str, Any] = {
            "channel": channel_id,
            "inclusive": True,
            "limit": limit,
        }
        if oldest is not None:
            params["oldest"] = str(oldest)
        if latest is not None:
            params["latest"] = str(latest)
        if cursor:
            params["cursor"] = cursor

        result = await asyncio.to_thread(self.client.conversations_history, **params)
        return parse_history_page(result)

    async def fetch_messages_in_range(
        self, channel_id: str, oldest: int, latest: int
    ) -> List[SlackMessage]:
        """
        Fetch all content messages of a channel between two epoch seconds.

        Pages are requested one after another until Slack reports no more
        pages or `max_messages_per_digest` messages are collected; the cap is
        never exceeded. Authors are resolved to display names and the batch
        is returned oldest first.

        Any API failure during pagination yields an empty list: a partial
        batch would be cached as if it were complete.

        Returns:
            Messages sorted ascending by timestamp, unique by timestamp
        """
        cap = self.max_messages_per_digest
        collected: Dict[str, SlackMessage] = {}
        cursor: Optional[str] = None
        has_more = True

        try:
            while has_more and len(collected) < cap:
                page = await self.list_message_page(
                    channel_id,
                    oldest=oldest,
                    latest=latest,
                    cursor=cursor,
                    limit=min(HISTORY_PAGE_SIZE, cap - len(collected)),
                )

                for msg in page.messages:
                    if len(collected) >= cap:
                        break
                    collected.setdefault(msg.ts, msg)

                cursor = page.next_cursor
                has_more = page.has_more and cursor is not None

        except SlackApiError as e:
            logger.error(f"Slack API error fetching history for {channel_id}: {e.response['error']}")
            return []
        except Exception as e:
            logger.error(f"Error fetching messages in range for {channel_id}: {e}")
            return []

        messages = await self.enrich_with_display_names(list(collected.values()))
        messages.sort(key=lambda msg: msg.sort_key)

        logger.info(f"Fetched {format_message_count(len(messages))} from {channel_id}")
        return messages

    async def get_recent_messages(self, channel_id: str, limit: int = 50) -> List[SlackMessage]:
        """Latest content messages of a channel, oldest first. Empty list on failure."""
        try:
            page = await self.list_message_page(channel_id, limit=limit)
        except SlackApiError as e:
            logger.error(f"Slack API error fetching recent messages for {channel_id}: {e.response['error']}")
            return []
        except Exception as e:
            logger.error(f"Error fetching recent messages for {channel_id}: {e}")
            return []

        messages = await self.enrich_with_display_names(page.messages)
        messages.sort(key=lambda msg: msg.sort_key)
        return messages

    async def resolve_display_name(self, user_id: str) -> Optional[str]:
        """Return the user's real name (or handle), or None if the lookup fails."""
        try:
            result = await asyncio.to_thread(self.client.users_info, user=user_id)
        except SlackApiError as e:
            logger.warning(f"Could not resolve user {user_id}: {e.response['error']}")
            return None

        user = result.get("user") or {}
        return user.get("real_name") or user.get("name") or None

    async def enrich_with_display_names(self, messages: List[SlackMessage]) -> List[SlackMessage]:
        """Replace author ids with display names; unresolved authors keep their id."""
        user_ids = list(dict.fromkeys(msg.user for msg in messages))
        if not user_ids:
            return []

        names = await asyncio.gather(
            *(self.resolve_display_name(user_id) for user_id in user_ids),
            return_exceptions=True,
        )

        user_map = {}
        for user_id, name in zip(user_ids, names):
            if isinstance(name, Exception):
                logger.warning(f"Display name lookup failed for {user_id}: {name}")
            elif name:
                user_map[user_id] = name

        return [
            msg.model_copy(update={"user": user_map[msg.user]}) if msg.user in user_map else msg
            for msg in messages
        ]

    async def post_message(
        self, channel_id: str, text: str, blocks: Optional[List[Dict[str, Any]]] = None
    ) -> Dict[str, Any]:
        """
        Post a message to a channel.

        Raises:
            SlackApiError: If the message could not be sent
        """
        params: Dict[str, Any] = {"channel": channel_id, "text": text}
        if blocks:
            params["blocks"] = blocks

        try:
            result = await asyncio.to_thread(self.client.chat_postMessage, **params)
        except SlackApiError as e:
            logger.error(f"Failed to send message to {channel_id}: {e.response['error']}")
            raise

        return result.get("message") or {}

    async def send_daily_digest(self, channel_id: str, summary: str, channel_name: str) -> None:
        """Post a digest summary to its channel."""
        blocks = [
            {
                "type": "header",
                "text": {"type": "plain_text", "text": f"Daily Digest for #{channel_name}"},
            },
            {"type": "section", "text": {"type": "mrkdwn", "text": summary}},
            {"type": "divider"},
            {
                "type": "context",
                "elements": [
                    {
                        "type": "mrkdwn",
                        "text": f"Generated on {utc_today()} (UTC)",
                    }
                ],
            },
        ]

        await self.post_message(channel_id, f"Daily Digest for #{channel_name}", blocks)
        logger.info(f"Daily digest sent to #{channel_name}")
