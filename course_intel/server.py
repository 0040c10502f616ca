"""FastAPI application exposing platform discovery and course research."""

import asyncio
from typing import AsyncIterator

import structlog
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel, Field, ValidationError

from course_intel import __version__
from course_intel.config import Settings
from course_intel.discovery import PlatformDetector, create_platform_detector
from course_intel.events import CompleteEvent, ErrorEvent, SSEEvent
from course_intel.exceptions import BrowserLaunchError, CourseIntelError
from course_intel.models import RankedPlatform, ResearchRun, SearchQueryContext
from course_intel.workflow import run_research

log = structlog.get_logger("course_intel.server")

# SSE Configuration
HEARTBEAT_INTERVAL = 30  # seconds
MAX_DURATION = 1800  # research runs take minutes per platform
MAX_QUEUE_SIZE = 100


# --- Request/Response schemas ---


class DiscoverRequest(BaseModel):
    """Incoming discovery request."""

    topic: str = Field(min_length=1, max_length=200, description="Course topic", examples=["IT programming"])
    region: str = Field(default="", max_length=100, description="Region name or code", examples=["Netherlands"])
    language: str = Field(default="en", min_length=2, max_length=5, description="ISO language code", examples=["nl"])


class ResearchRequest(DiscoverRequest):
    """Incoming research request."""

    max_concurrency: int | None = Field(
        default=None,
        ge=1,
        le=4,
        description="Platforms researched in parallel (defaults to server settings)",
    )


class DiscoverResponse(BaseModel):
    platforms: list[RankedPlatform] = Field(description="Platforms in relevance order")
    search_urls: list[str] = Field(description="Search URL per platform, same order")


class ErrorResponse(BaseModel):
    """Structured error response."""

    error: str = Field(description="Error type", examples=["BrowserLaunchError"])
    detail: str = Field(description="User-friendly error message", examples=["Unable to start the browser."])


class HealthResponse(BaseModel):
    status: str = Field(description="Service health status", examples=["ok"])
    version: str = Field(default="", description="Service version", examples=["0.1.0"])


# --- Exception handlers ---

_SAFE_ERROR_MESSAGES: dict[str, str] = {
    "BrowserLaunchError": "Unable to start the browser. Please try again later.",
}


def _get_safe_error_message(exc: Exception) -> str:
    return _SAFE_ERROR_MESSAGES.get(type(exc).__name__, "An error occurred processing your request.")


async def _handle_domain_error(request: Request, exc: CourseIntelError) -> JSONResponse:
    error_type = type(exc).__name__
    log.warning("request.domain_error", error_type=error_type, detail=str(exc))
    status_code = 503 if isinstance(exc, BrowserLaunchError) else 422
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error_type, detail=_get_safe_error_message(exc)).model_dump(),
    )


async def _handle_validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    log.warning("request.validation_error", detail=str(exc))
    return JSONResponse(
        status_code=422,
        content=ErrorResponse(error="ValidationError", detail=str(exc)).model_dump(),
    )


async def _handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    log.exception("request.unexpected_error", error=str(exc))
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(error="InternalServerError", detail="An unexpected error occurred.").model_dump(),
    )


# --- App factory ---


def get_app(detector: PlatformDetector | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    application = FastAPI(
        title="Course Intel",
        description="""
Competitive intelligence for online course platforms.

1. **Discovery** - ranks global and regional course platforms for a topic, region and language
2. **Extraction** - visits each platform's search page in a headless browser and extracts
   pricing, feature flags and curriculum shape
        """,
        version=__version__,
    )

    application.add_exception_handler(CourseIntelError, _handle_domain_error)  # type: ignore[arg-type]
    application.add_exception_handler(ValidationError, _handle_validation_error)  # type: ignore[arg-type]
    application.add_exception_handler(Exception, _handle_unexpected_error)

    platform_detector = detector or create_platform_detector(Settings.from_env())

    @application.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", version=__version__)

    @application.get("/health/liveness", response_model=HealthResponse, summary="Liveness Probe", tags=["Health"])
    async def liveness() -> HealthResponse:
        return HealthResponse(status="alive")

    @application.get(
        "/health/readiness",
        response_model=HealthResponse,
        summary="Readiness Probe",
        description="Returns 200 OK when the service can accept research requests.",
        tags=["Health"],
    )
    async def readiness() -> HealthResponse:
        return HealthResponse(status="ready")

    @application.post(
        "/discover",
        response_model=DiscoverResponse,
        status_code=status.HTTP_200_OK,
        summary="Rank course platforms for a topic",
        tags=["Discovery"],
    )
    async def discover(body: DiscoverRequest) -> DiscoverResponse:
        context = SearchQueryContext(topic=body.topic, region=body.region, language=body.language)
        platforms = await platform_detector.detect_platforms(context)
        return DiscoverResponse(platforms=platforms, search_urls=[p.search_url for p in platforms])

    @application.post(
        "/research",
        response_model=ResearchRun,
        status_code=status.HTTP_200_OK,
        summary="Research course platforms for a topic",
        description="Runs discovery, then visits every platform. Platforms that fail are listed "
        "under `failures`; only a browser start-up failure fails the request.",
        tags=["Research"],
        responses={503: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    )
    async def research(body: ResearchRequest) -> ResearchRun:
        return await run_research(
            body.topic,
            region=body.region,
            language=body.language,
            detector=platform_detector,
            max_concurrency=body.max_concurrency,
        )

    @application.post(
        "/research/stream",
        response_class=StreamingResponse,
        summary="Research course platforms with streaming progress updates",
        description="""
**Event Types:**
- `discovery_complete`: platforms about to be visited
- `platform_start` / `platform_complete` / `platform_failed`: per-platform progress
- `heartbeat`: keep-alive comment every 30s (`: keepalive`)
- `complete`: final ResearchRun
- `error`: the run itself failed

Disconnecting stops the run before the next platform starts.
        """,
        tags=["Research"],
    )
    async def research_stream(request: Request, body: ResearchRequest) -> StreamingResponse:
        async def event_generator() -> AsyncIterator[str]:
            event_queue: asyncio.Queue[SSEEvent] = asyncio.Queue(maxsize=MAX_QUEUE_SIZE)
            run_complete = asyncio.Event()
            cancel_event = asyncio.Event()

            async def event_callback(event: SSEEvent) -> None:
                try:
                    await asyncio.wait_for(event_queue.put(event), timeout=5.0)
                except asyncio.TimeoutError:
                    log.warning("event_queue_full", event_type=event.event.value)

            async def run_task() -> None:
                try:
                    result = await run_research(
                        body.topic,
                        region=body.region,
                        language=body.language,
                        detector=platform_detector,
                        max_concurrency=body.max_concurrency,
                        cancel_event=cancel_event,
                        event_callback=event_callback,
                    )
                    await event_queue.put(CompleteEvent(data=result.model_dump(mode="json")))
                except Exception as e:
                    log.error("research_error", error=str(e), exc_info=True)
                    await event_queue.put(
                        ErrorEvent(data={"error": _get_safe_error_message(e), "error_type": type(e).__name__})
                    )
                finally:
                    run_complete.set()

            task = asyncio.create_task(run_task())
            loop = asyncio.get_running_loop()
            start_time = loop.time()
            next_heartbeat = start_time + HEARTBEAT_INTERVAL

            try:
                while not (run_complete.is_set() and event_queue.empty()):
                    current_time = loop.time()
                    if current_time - start_time > MAX_DURATION:
                        log.warning("stream_timeout", max=MAX_DURATION)
                        cancel_event.set()
                        task.cancel()
                        yield ErrorEvent(data={"error": "Research timed out.", "error_type": "Timeout"}).format()
                        break

                    if await request.is_disconnected():
                        log.info("client_disconnected")
                        cancel_event.set()
                        break

                    if current_time >= next_heartbeat:
                        yield ": keepalive\n\n"
                        next_heartbeat += HEARTBEAT_INTERVAL

                    try:
                        event = await asyncio.wait_for(event_queue.get(), timeout=0.1)
                    except asyncio.TimeoutError:
                        continue
                    yield event.format()
            finally:
                if not task.done():
                    cancel_event.set()

        return StreamingResponse(
            event_generator(),
            media_type="text/event-stream",
            headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
        )

    return application
