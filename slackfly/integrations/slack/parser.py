"""
Slack History Parser

Converts raw conversations.history payloads into SlackMessage objects,
dropping events that carry no human-written content.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from slackfly.models.digest import SlackMessage

logger = logging.getLogger(__name__)

# Subtypes that still carry a human-written message
CONTENT_SUBTYPES = {"thread_broadcast", "file_share", "me_message"}


@dataclass
class MessagePage:
    """One page of channel history."""

    messages: List[SlackMessage] = field(default_factory=list)
    next_cursor: Optional[str] = None
    has_more: bool = False


def is_content_message(raw: Dict[str, Any]) -> bool:
    """
    Check whether a raw Slack event is a human-written message.

    Rejects bot posts, system events (joins, topic changes and other
    non-content subtypes) and messages without text or author.
    """
    if raw.get("type", "message") != "message":
        return False
    if raw.get("bot_id"):
        return False
    if raw.get("subtype") and raw["subtype"] not in CONTENT_SUBTYPES:
        return False
    return bool(raw.get("text")) and bool(raw.get("user")) and bool(raw.get("ts"))


def parse_message(raw: Dict[str, Any]) -> SlackMessage:
    return SlackMessage(
        ts=raw["ts"],
        user=raw["user"],
        text=raw["text"],
        thread_ts=raw.get("thread_ts"),
    )


def parse_history_page(response: Dict[str, Any]) -> MessagePage:
    """
    Parse a conversations.history response.

    Examples:
        {"messages": [...], "has_more": true,
         "response_metadata": {"next_cursor": "bmV4dA=="}}
        -> MessagePage(messages=[...], next_cursor="bmV4dA==", has_more=True)
    """
    raw_messages = response.get("messages") or []
    messages = [parse_message(raw) for raw in raw_messages if is_content_message(raw)]

    # Slack reports an exhausted cursor as an empty string
    next_cursor = (response.get("response_metadata") or {}).get("next_cursor") or None

    skipped = len(raw_messages) - len(messages)
    if skipped:
        logger.debug(f"Filtered {skipped} non-content events from history page")

    return MessagePage(
        messages=messages,
        next_cursor=next_cursor,
        has_more=bool(response.get("has_more", False)),
    )
