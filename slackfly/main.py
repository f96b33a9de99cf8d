import logging
import time
from contextlib import asynccontextmanager
from fastapi import FastAPI
from slackfly.config import get_settings
from slackfly.cache import create_cache_service
from slackfly.integrations.slack import SlackClient
from slackfly.ai_core.summarization import DigestSummarizer
from slackfly.services.digest_orchestrator import DigestOrchestrator
from slackfly.models.api_responses import HealthResponse
from slackfly.utils.helpers import utc_now
from slackfly.api.routes import digest

settings = get_settings()

# Configure application logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

# Set log level for app modules
logger = logging.getLogger("slackfly")
logger.setLevel(logging.DEBUG if settings.debug else logging.INFO)


@asynccontextmanager
async def lifespan(app: FastAPI):
    cache = create_cache_service(settings)
    await cache.connect()

    app.state.started_at = time.monotonic()
    app.state.orchestrator = DigestOrchestrator(
        cache=cache,
        slack_client=SlackClient(),
        summarizer=DigestSummarizer(),
        settings=settings,
    )
    logger.info(f"Daily digest schedule: {settings.digest_schedule}")
    logger.info(f"Watching channels: {', '.join(settings.watched_channel_list)}")

    try:
        yield
    finally:
        await cache.disconnect()
        logger.info("Shutdown complete")


app = FastAPI(
    title=settings.app_name,
    description="Daily Slack channel digests",
    version=settings.version,
    lifespan=lifespan,
)

# Include routers
app.include_router(digest.router, prefix="/api", tags=["Digest"])


@app.get("/")
async def root():
    return {
        "name": settings.app_name,
        "description": "Daily Slack channel digests",
        "version": settings.version,
        "status": "running",
        "endpoints": {
            "health": "/health",
            "trigger_digest": "POST /api/digest/trigger",
            "get_digests": "GET /api/digest/{channel}",
            "recap": "POST /api/recap/{channel}",
            "config": "/api/config",
            "docs": "/docs",
        },
    }


@app.get("/health", response_model=HealthResponse)
async def health_check():
    orchestrator = app.state.orchestrator
    cache_connected = orchestrator.cache.is_connected
    return HealthResponse(
        status="ok" if cache_connected else "error",
        timestamp=utc_now().isoformat(),
        uptime=round(time.monotonic() - app.state.started_at, 2),
        version=settings.version,
        cache=cache_connected,
        generation_in_flight=orchestrator.generation_in_flight,
    )
