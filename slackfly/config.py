from pydantic_settings import BaseSettings
from pydantic import ConfigDict
from functools import lru_cache
from typing import List, Literal


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    app_name: str = "Slack Fly"
    version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"

    # Slack
    slack_bot_token: str = ""

    # LLM (via gen_ai_hub proxy, no API key needed)
    openai_model: str = "gpt-4o"
    temperature: float = 0.3
    summary_max_tokens: int = 500
    recap_max_tokens: int = 300

    # Cache
    cache_type: Literal["memory", "redis"] = "memory"
    redis_url: str = "redis://localhost:6379"

    # Digest
    digest_schedule: str = "0 17 * * 1-5"  # 5 PM weekdays, fired by the external scheduler
    watched_channels: str = "standup,project-x"  # Comma separated channel names
    max_messages_per_digest: int = 100

    model_config = ConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @property
    def watched_channel_list(self) -> List[str]:
        """Watched channel names, stripped of whitespace and leading '#'."""
        return [
            name.strip().lstrip("#")
            for name in self.watched_channels.split(",")
            if name.strip()
        ]


@lru_cache
def get_settings() -> Settings:
    return Settings()
