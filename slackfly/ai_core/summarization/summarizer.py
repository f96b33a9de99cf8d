"""
Digest Summarizer Module

Turns an ordered batch of channel messages into prose via the SAP gen_ai_hub
proxy. Failures are never swallowed: callers receive SummarizationError.
"""

import logging
from typing import List, Optional

from gen_ai_hub.proxy.langchain.openai import ChatOpenAI
from gen_ai_hub.proxy.core.proxy_clients import get_proxy_client
from langchain_core.messages import HumanMessage, SystemMessage

from slackfly.models.digest import SlackMessage
from slackfly.ai_core.prompts.digest import (
    DIGEST_SYSTEM_PROMPT,
    DIGEST_USER_PROMPT_TEMPLATE,
    RECAP_SYSTEM_PROMPT,
    RECAP_USER_PROMPT_TEMPLATE,
)
from slackfly.utils.helpers import format_messages_for_prompt
from slackfly.config import get_settings

logger = logging.getLogger(__name__)

RECAP_MESSAGE_WINDOW = 20
EMPTY_SUMMARY_TEXT = "Failed to generate summary"
EMPTY_RECAP_TEXT = "Failed to generate recap"


class SummarizationError(Exception):
    """
    Raised when the language model call fails (quota, network, bad response).
    This is a system error (500) - the digest could not be generated.
    """

    pass


class DigestSummarizer:
    """
    Summarizes channel messages with an LLM.
    """

    def __init__(self, llm=None):
        """
        Args:
            llm: Chat model exposing `ainvoke`. Defaults to a gen_ai_hub ChatOpenAI
                 created on first use, so startup does not need LLM credentials.
        """
        self._llm = llm
        self.settings = get_settings()

    @property
    def llm(self):
        """Lazy initialization of the gen_ai_hub chat model."""
        if self._llm is None:
            proxy_client = get_proxy_client("gen-ai-hub")
            self._llm = ChatOpenAI(
                proxy_model_name=self.settings.openai_model,
                proxy_client=proxy_client,
                temperature=self.settings.temperature,
            )
        return self._llm

    async def summarize(self, messages: List[SlackMessage], channel_name: str) -> str:
        """
        Generate the daily digest text for a channel.

        Args:
            messages: Messages ordered oldest first
            channel_name: Channel the messages belong to

        Returns:
            Markdown summary

        Raises:
            SummarizationError: If the LLM call fails
        """
        prompt = DIGEST_USER_PROMPT_TEMPLATE.format(
            channel_name=channel_name,
            messages_text=format_messages_for_prompt(messages),
        )
        logger.info(f"Summarizing {len(messages)} messages from #{channel_name}")

        content = await self._complete(
            DIGEST_SYSTEM_PROMPT, prompt, self.settings.summary_max_tokens, "summary"
        )
        return content or EMPTY_SUMMARY_TEXT

    async def quick_recap(self, messages: List[SlackMessage], channel_name: str) -> str:
        """
        Generate a short recap of the most recent messages.

        Raises:
            SummarizationError: If the LLM call fails
        """
        recent = messages[-RECAP_MESSAGE_WINDOW:]
        prompt = RECAP_USER_PROMPT_TEMPLATE.format(
            channel_name=channel_name,
            messages_text=format_messages_for_prompt(recent),
        )
        logger.info(f"Generating quick recap of {len(recent)} messages from #{channel_name}")

        content = await self._complete(
            RECAP_SYSTEM_PROMPT, prompt, self.settings.recap_max_tokens, "quick recap"
        )
        return content or EMPTY_RECAP_TEXT

    async def _complete(
        self, system_prompt: str, user_prompt: str, max_tokens: int, purpose: str
    ) -> Optional[str]:
        messages = [
            SystemMessage(content=system_prompt),
            HumanMessage(content=user_prompt),
        ]

        try:
            response = await self.llm.ainvoke(messages, max_tokens=max_tokens)
        except Exception as e:
            logger.error(f"Error generating {purpose}: {str(e)}", exc_info=True)
            raise SummarizationError(f"Failed to generate {purpose}: {str(e)}") from e

        content = response.content if isinstance(response.content, str) else None
        return content.strip() if content else None
