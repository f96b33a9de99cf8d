"""
Shared Utility Functions

Date handling and message formatting used across multiple modules.

All calendar days are UTC: "today", the epoch boundaries of a day, the
digest history window and the cache freshness tier are computed in UTC.
"""

import re
import logging
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterable, Optional, Tuple

from slackfly.models.digest import SlackMessage

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_today() -> str:
    """Current UTC calendar day as YYYY-MM-DD."""
    return utc_now().strftime(DATE_FORMAT)


def parse_date(value: str) -> date:
    """
    Parse a YYYY-MM-DD string.

    Raises:
        ValueError: If the value is not a valid calendar day
    """
    return datetime.strptime(value, DATE_FORMAT).date()


def shift_date(value: str, days: int) -> str:
    """Return the YYYY-MM-DD string `days` days after `value` (negative goes back)."""
    return (parse_date(value) + timedelta(days=days)).strftime(DATE_FORMAT)


def day_bounds(value: str) -> Tuple[int, int]:
    """
    Epoch-second boundaries of a UTC calendar day.

    Examples:
        "2024-01-01" -> (1704067200, 1704153599)

    Returns:
        (oldest, latest) covering 00:00:00 to 23:59:59 inclusive
    """
    day = parse_date(value)
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    end = datetime.combine(day, time.max, tzinfo=timezone.utc)
    return int(start.timestamp()), int(end.timestamp())


def format_message_time(ts: str) -> str:
    """Format a Slack timestamp as HH:MM:SS (UTC)."""
    return datetime.fromtimestamp(float(ts), tz=timezone.utc).strftime("%H:%M:%S")


def sanitize_message(text: Optional[str]) -> str:
    """
    Strip Slack markup from message text.

    Handles:
    - User mentions: <@U123> → @user
    - Channel mentions: <#C123|general> → #general
    - Labelled links: <https://x.io|Example> → Example
    - Raw links: <https://x.io> → [link]
    - HTML entities: &lt; &gt; &amp;
    """
    if not text:
        return ""

    text = re.sub(r"<@U\w+>", "@user", text)
    text = re.sub(r"<#C\w+\|([\w-]+)>", r"#\1", text)
    text = re.sub(r"<https?://[^>|]+\|([^>]+)>", r"\1", text)
    text = re.sub(r"<https?://[^>]+>", "[link]", text)
    text = text.replace("&lt;", "<").replace("&gt;", ">").replace("&amp;", "&")
    return text.strip()


def format_messages_for_prompt(messages: Iterable[SlackMessage]) -> str:
    """Render messages as `[HH:MM:SS] user: text` lines for an LLM prompt."""
    return "\n".join(
        f"[{format_message_time(msg.ts)}] {msg.user}: {sanitize_message(msg.text)}"
        for msg in messages
    )


def truncate_text(text: str, max_length: int = 100) -> str:
    if not text or len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."


def format_message_count(count: int) -> str:
    if count == 0:
        return "No messages"
    if count == 1:
        return "1 message"
    return f"{count} messages"
