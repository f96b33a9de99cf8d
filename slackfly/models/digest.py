"""
Digest Data Models

Slack messages as stored in the cache, and the ChannelDigest shape that is
persisted and returned by the HTTP API. Python attributes are snake_case;
the JSON field names (aliases) are the stable wire format.
"""

from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import List, Optional


class SlackMessage(BaseModel):
    """A single content message from a channel."""

    model_config = ConfigDict(frozen=True)

    ts: str  # Slack timestamp, unique per channel, dedup key
    user: str  # Author id, replaced by the display name once resolved
    text: str
    thread_ts: Optional[str] = None

    @property
    def sort_key(self) -> float:
        return float(self.ts)


class Participant(BaseModel):
    """Message count for one author in a digest."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    user: str
    message_count: int = Field(..., ge=1, alias="messageCount")


class ChannelDigest(BaseModel):
    """Summarized view of one channel for one UTC calendar day."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    channel_name: str = Field(..., alias="channelName")
    date: str = Field(..., pattern=r"^\d{4}-\d{2}-\d{2}$", description="YYYY-MM-DD (UTC)")
    message_count: int = Field(..., ge=0, alias="messageCount")
    summary: str
    generated_at: datetime = Field(..., alias="generatedAt")
    participants: List[Participant] = Field(default_factory=list)

    def to_payload(self) -> dict:
        """Serialize to the JSON wire shape (camelCase keys, ISO-8601 timestamp)."""
        return self.model_dump(mode="json", by_alias=True)
