"""
Digest API Routes

1. POST /api/digest/trigger - Generate one channel's digest, or run the batch
2. GET /api/digest/{channel} - Cached digest history
3. POST /api/recap/{channel} - Quick recap of recent messages
4. GET /api/config - Digest configuration
"""

from fastapi import APIRouter, HTTPException, Query, Request
import logging

from slackfly.ai_core.summarization import SummarizationError
from slackfly.models.api_responses import ApiResponse, ConfigResponse, DigestTriggerRequest
from slackfly.services.digest_orchestrator import DigestOrchestrator

logger = logging.getLogger(__name__)
router = APIRouter()


def get_orchestrator(request: Request) -> DigestOrchestrator:
    return request.app.state.orchestrator


@router.post("/digest/trigger", response_model=ApiResponse)
async def trigger_digest(body: DigestTriggerRequest, request: Request):
    """
    Manually trigger digest generation.

    Examples:
    - POST /api/digest/trigger {"channel": "standup"}
    - POST /api/digest/trigger {"channel": "standup", "date": "2026-01-05"}
    - POST /api/digest/trigger {}  (all watched channels)
    """
    orchestrator = get_orchestrator(request)

    try:
        if body.channel:
            digest = await orchestrator.generate_daily_digest(body.channel, body.date)
            return ApiResponse(
                success=True,
                data=digest.to_payload() if digest else None,
            )

        results = await orchestrator.generate_and_send_daily_digests(body.date)
        generated = sum(1 for digest in results.values() if digest is not None)
        return ApiResponse(
            success=True,
            message=f"Daily digest generation triggered for all channels ({generated} generated)",
        )

    except Exception as e:
        logger.error(f"Error triggering digest: {e}")
        raise HTTPException(
            status_code=500,
            detail={"success": False, "error": str(e)},
        )


@router.get("/digest/{channel}", response_model=ApiResponse)
async def get_digest_history(
    channel: str,
    request: Request,
    days: int = Query(7, ge=1, le=90, description="Number of days to look back (default: 7)"),
):
    """Return cached digests for a channel, newest first."""
    orchestrator = get_orchestrator(request)

    try:
        digests = await orchestrator.get_digest_history(channel, days)
        return ApiResponse(success=True, data=[digest.to_payload() for digest in digests])

    except Exception as e:
        logger.error(f"Error fetching digest history for #{channel}: {e}")
        raise HTTPException(
            status_code=500,
            detail={"success": False, "error": str(e)},
        )


@router.post("/recap/{channel}", response_model=ApiResponse)
async def recap_channel(channel: str, request: Request):
    """Summarize a channel's latest messages. Nothing is cached."""
    orchestrator = get_orchestrator(request)

    try:
        recap = await orchestrator.recap_channel(channel)
    except SummarizationError as e:
        logger.error(f"Error generating recap for #{channel}: {e}")
        raise HTTPException(
            status_code=500,
            detail={"success": False, "error": str(e)},
        )

    if recap is None:
        raise HTTPException(
            status_code=404,
            detail={"success": False, "error": f"Channel #{channel} not found"},
        )

    return ApiResponse(success=True, data=recap)


@router.get("/config")
async def get_config(request: Request):
    settings = get_orchestrator(request).settings
    return ConfigResponse(
        watched_channels=settings.watched_channel_list,
        schedule=settings.digest_schedule,
        max_messages=settings.max_messages_per_digest,
        environment=settings.environment,
    ).model_dump(by_alias=True)
