# Shared data models
from slackfly.models.digest import SlackMessage, Participant, ChannelDigest
from slackfly.models.api_responses import (
    ApiResponse,
    ConfigResponse,
    DigestTriggerRequest,
    HealthResponse,
)

__all__ = [
    "SlackMessage",
    "Participant",
    "ChannelDigest",
    "ApiResponse",
    "ConfigResponse",
    "DigestTriggerRequest",
    "HealthResponse",
]
