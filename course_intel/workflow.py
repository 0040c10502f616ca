"""Research run orchestration: discover platforms, then research each one in isolation."""

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from contextlib import AsyncExitStack
from dataclasses import dataclass
from time import perf_counter
from uuid import uuid4

from course_intel.config import Settings
from course_intel.discovery import PlatformDetector
from course_intel.events import (
    DiscoveryCompleteEvent,
    PlatformCompleteEvent,
    PlatformFailedEvent,
    PlatformStartEvent,
    SSEEvent,
)
from course_intel.exceptions import ExtractionError, PlatformTimeoutError
from course_intel.extraction import ArtifactStore, BrowserSession, LocalArtifactStore, PlatformExtractor
from course_intel.extraction.browser import launch_playwright
from course_intel.logging import bind_context_vars, get_logger, platform_context
from course_intel.models import (
    PlatformFailure,
    RankedPlatform,
    ResearchRecord,
    ResearchRun,
    SearchQueryContext,
)

log = get_logger("course_intel.workflow")

EventCallback = Callable[[SSEEvent], Awaitable[None]]


@dataclass(frozen=True)
class PlatformOutcome:
    """Result of researching one platform: a record or the error that skipped it."""

    platform: RankedPlatform
    record: ResearchRecord | None = None
    error: ExtractionError | None = None
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.record is not None

    def to_failure(self) -> PlatformFailure:
        error = self.error or ExtractionError(self.platform.name, "no record produced")
        return PlatformFailure(
            platform=self.platform.name,
            url=self.platform.search_url,
            error_type=type(error).__name__,
            reason=error.reason,
        )


async def research_one(
    extractor: PlatformExtractor,
    ranked: RankedPlatform,
    topic: str,
    timeout_s: float,
) -> PlatformOutcome:
    """Research a platform without ever raising; failures become the outcome's error."""
    start = perf_counter()
    with platform_context(ranked.name):
        error: ExtractionError
        try:
            async with asyncio.timeout(timeout_s):
                record = await extractor.research_platform(ranked, topic)
        except TimeoutError:
            error = PlatformTimeoutError(ranked.name, timeout_s)
        except ExtractionError as e:
            error = e
        except Exception as e:
            error = ExtractionError(ranked.name, f"{type(e).__name__}: {e}")
        else:
            return PlatformOutcome(platform=ranked, record=record, duration_ms=int((perf_counter() - start) * 1000))

        duration_ms = int((perf_counter() - start) * 1000)
        log.warning(
            "research.platform.failed",
            url=ranked.search_url,
            error_type=type(error).__name__,
            error=error.reason,
            duration_ms=duration_ms,
        )
        return PlatformOutcome(platform=ranked, error=error, duration_ms=duration_ms)


async def _emit(event_callback: EventCallback | None, event: SSEEvent) -> None:
    if event_callback is None:
        return
    try:
        await event_callback(event)
    except Exception as e:
        log.warning("research.event_callback.failed", event_type=event.event.value, error=str(e))


async def run_research(
    topic: str,
    *,
    region: str = "",
    language: str = "en",
    platforms: Sequence[RankedPlatform] | None = None,
    detector: PlatformDetector | None = None,
    session: BrowserSession | None = None,
    store: ArtifactStore | None = None,
    extractor: PlatformExtractor | None = None,
    settings: Settings | None = None,
    max_concurrency: int | None = None,
    cancel_event: asyncio.Event | None = None,
    event_callback: EventCallback | None = None,
) -> ResearchRun:
    """Discover and research course platforms for a topic.

    Args:
        topic: Course topic to research.
        region: Free-text region used for discovery.
        language: ISO language code used for discovery.
        platforms: Skip discovery and research these platforms instead.
        detector: Override the default platform detector.
        session: Use this browser session instead of launching one; the caller owns it.
        store: Where screenshots are written; defaults to ``settings.output_dir``.
        extractor: Override the platform extractor (for testing).
        settings: Run settings; read from the environment when omitted.
        max_concurrency: Platforms researched in parallel; defaults to the settings value.
        cancel_event: When set, platforms not yet started are skipped.
        event_callback: Receives progress events.

    Returns:
        ResearchRun with one record per platform that succeeded, in ranking order.

    Raises:
        BrowserLaunchError: When the browser session cannot be started.
    """
    settings = settings or Settings.from_env()
    correlation_id = str(uuid4())[:8]
    bind_context_vars(correlation_id=correlation_id, topic=topic)

    run_start = perf_counter()
    log.info("research.started", region=region, language=language)

    if platforms is None:
        context = SearchQueryContext(topic=topic, region=region, language=language)
        platforms = await (detector or PlatformDetector()).detect_platforms(context)
    platforms = list(platforms)
    await _emit(
        event_callback,
        DiscoveryCompleteEvent(data={"platforms": [p.name for p in platforms], "total": len(platforms)}),
    )

    outcomes: list[PlatformOutcome | None] = [None] * len(platforms)
    cancelled: list[int] = []

    if platforms:
        async with AsyncExitStack() as stack:
            if extractor is None:
                if session is None:
                    session = await stack.enter_async_context(launch_playwright(headless=settings.headless))
                extractor = PlatformExtractor(session, store or LocalArtifactStore(settings.output_dir), settings)

            semaphore = asyncio.Semaphore(max_concurrency or settings.max_concurrency)
            total = len(platforms)
            completed = 0

            async def _run(index: int, ranked: RankedPlatform) -> None:
                nonlocal completed
                async with semaphore:
                    if cancel_event is not None and cancel_event.is_set():
                        cancelled.append(index)
                        return
                    await _emit(
                        event_callback,
                        PlatformStartEvent(data={"platform": ranked.name, "url": ranked.search_url}),
                    )
                    outcome = await research_one(extractor, ranked, topic, settings.platform_timeout_s)
                    outcomes[index] = outcome
                    completed += 1

                progress = {"platform": ranked.name, "completed": completed, "total": total}
                if outcome.record is not None:
                    await _emit(
                        event_callback,
                        PlatformCompleteEvent(
                            data={
                                **progress,
                                "duration_ms": outcome.duration_ms,
                                "record": outcome.record.model_dump(mode="json"),
                            }
                        ),
                    )
                else:
                    failure = outcome.to_failure()
                    await _emit(
                        event_callback,
                        PlatformFailedEvent(
                            data={**progress, "error_type": failure.error_type, "reason": failure.reason}
                        ),
                    )

            async with asyncio.TaskGroup() as tg:
                for index, ranked in enumerate(platforms):
                    tg.create_task(_run(index, ranked))

    finished = [outcome for outcome in outcomes if outcome is not None]
    run = ResearchRun(
        topic=topic,
        records=[outcome.record for outcome in finished if outcome.record is not None],
        failures=[outcome.to_failure() for outcome in finished if not outcome.ok],
        cancelled=[platforms[index].name for index in sorted(cancelled)],
        duration_ms=int((perf_counter() - run_start) * 1000),
    )
    log.info(
        "research.completed",
        succeeded=len(run.records),
        failed=len(run.failures),
        cancelled=len(run.cancelled),
        duration_ms=run.duration_ms,
    )
    return run
