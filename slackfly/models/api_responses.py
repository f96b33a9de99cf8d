"""
API Response Models

Pydantic models for the HTTP control surface.
"""

from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, List, Optional


class DigestTriggerRequest(BaseModel):
    """Request body for the manual digest trigger."""

    channel: Optional[str] = Field(
        None, description="Channel name. Omit to run the batch for all watched channels"
    )
    date: Optional[str] = Field(
        None,
        pattern=r"^\d{4}-\d{2}-\d{2}$",
        description="UTC calendar day (YYYY-MM-DD). Defaults to today",
    )

    @field_validator("date")
    @classmethod
    def date_must_exist(cls, value: Optional[str]) -> Optional[str]:
        if value is not None:
            datetime.strptime(value, "%Y-%m-%d")  # rejects days like 2024-02-30
        return value


class ApiResponse(BaseModel):
    """Envelope used by the digest endpoints."""

    success: bool = Field(..., description="Whether the request succeeded")
    data: Optional[Any] = Field(None, description="Payload, if any")
    message: Optional[str] = Field(None, description="Human readable status")
    error: Optional[str] = Field(None, description="Error message on failure")


class ConfigResponse(BaseModel):
    """Public view of the digest configuration."""

    model_config = ConfigDict(populate_by_name=True)

    watched_channels: List[str] = Field(..., alias="watchedChannels")
    schedule: str
    max_messages: int = Field(..., alias="maxMessages")
    environment: str


class HealthResponse(BaseModel):
    """Service health status."""

    status: str = Field(..., description="ok or error")
    timestamp: str = Field(..., description="Current time (ISO-8601)")
    uptime: float = Field(..., description="Seconds since startup")
    version: str
    cache: bool = Field(..., description="Whether the cache backend is connected")
    generation_in_flight: bool = Field(
        False, description="Whether a digest generation is currently running"
    )
