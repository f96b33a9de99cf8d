"""
Utility package exports
"""

from slackfly.utils.helpers import (
    utc_now,
    utc_today,
    parse_date,
    shift_date,
    day_bounds,
    format_message_time,
    sanitize_message,
    format_messages_for_prompt,
    truncate_text,
    format_message_count,
)

__all__ = [
    "utc_now",
    "utc_today",
    "parse_date",
    "shift_date",
    "day_bounds",
    "format_message_time",
    "sanitize_message",
    "format_messages_for_prompt",
    "truncate_text",
    "format_message_count",
]
