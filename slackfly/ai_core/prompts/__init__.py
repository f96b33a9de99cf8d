"""Prompts package."""

from slackfly.ai_core.prompts.digest import (
    DIGEST_SYSTEM_PROMPT,
    DIGEST_USER_PROMPT_TEMPLATE,
    RECAP_SYSTEM_PROMPT,
    RECAP_USER_PROMPT_TEMPLATE,
)

__all__ = [
    "DIGEST_SYSTEM_PROMPT",
    "DIGEST_USER_PROMPT_TEMPLATE",
    "RECAP_SYSTEM_PROMPT",
    "RECAP_USER_PROMPT_TEMPLATE",
]
