"""Tests for SSE event models."""

import json

from course_intel.events import (
    CompleteEvent,
    DiscoveryCompleteEvent,
    ErrorEvent,
    HeartbeatEvent,
    PlatformCompleteEvent,
    PlatformFailedEvent,
    PlatformStartEvent,
    SSEEventType,
)
from course_intel.models import ResearchRun


def test__discovery_complete_event__formats_correctly() -> None:
    """DiscoveryCompleteEvent lists the ranked platforms."""
    event = DiscoveryCompleteEvent(data={"platforms": ["Studytube", "Udemy"], "total": 2})
    formatted = event.format()

    assert formatted.startswith("event: discovery_complete\n")
    assert '"platforms": ["Studytube", "Udemy"]' in formatted
    assert formatted.endswith("\n\n")


def test__platform_start_event__formats_correctly() -> None:
    event = PlatformStartEvent(data={"platform": "Udemy", "url": "https://www.udemy.com/courses/search/?q=python"})
    formatted = event.format()

    assert formatted.startswith("event: platform_start\n")
    assert '"platform": "Udemy"' in formatted
    assert formatted.endswith("\n\n")


def test__platform_complete_event__formats_correctly() -> None:
    """PlatformCompleteEvent formats with progress counters."""
    event = PlatformCompleteEvent(
        data={"platform": "Udemy", "completed": 1, "total": 3, "duration_ms": 8200, "record": {"platform": "Udemy"}}
    )
    formatted = event.format()

    assert formatted.startswith("event: platform_complete\n")
    assert '"completed": 1' in formatted
    assert '"total": 3' in formatted
    assert '"duration_ms": 8200' in formatted


def test__platform_failed_event__formats_correctly() -> None:
    event = PlatformFailedEvent(
        data={"platform": "LOI", "completed": 2, "total": 3, "error_type": "NavigationError", "reason": "timeout"}
    )
    formatted = event.format()

    assert formatted.startswith("event: platform_failed\n")
    assert '"error_type": "NavigationError"' in formatted
    assert formatted.endswith("\n\n")


def test__heartbeat_event__has_empty_data() -> None:
    """HeartbeatEvent has empty data dict."""
    event = HeartbeatEvent()
    assert event.data == {}
    assert event.event == SSEEventType.HEARTBEAT


def test__heartbeat_event__formats_as_comment() -> None:
    """HeartbeatEvent formats as SSE comment, not named event."""
    formatted = HeartbeatEvent().format()

    assert formatted == ": keepalive\n\n"
    assert not formatted.startswith("event:")
    assert "data:" not in formatted


def test__complete_event__serializes_full_run() -> None:
    """CompleteEvent includes the full ResearchRun."""
    run = ResearchRun(topic="python", cancelled=["LOI"], duration_ms=1200)

    formatted = CompleteEvent(data=run.model_dump(mode="json")).format()

    assert formatted.startswith("event: complete\n")
    data_line = formatted.split("\n")[1]
    assert data_line.startswith("data: ")
    parsed = json.loads(data_line[6:])
    assert parsed["topic"] == "python"
    assert parsed["cancelled"] == ["LOI"]
    assert parsed["records"] == []


def test__error_event__includes_error_type() -> None:
    event = ErrorEvent(data={"error": "Unable to start the browser.", "error_type": "BrowserLaunchError"})
    formatted = event.format()

    assert formatted.startswith("event: error\n")
    assert '"error_type": "BrowserLaunchError"' in formatted
    assert formatted.endswith("\n\n")


def test__sse_event_type__has_all_expected_types() -> None:
    """SSEEventType enum has all expected event types."""
    expected_types = {
        "discovery_complete",
        "platform_start",
        "platform_complete",
        "platform_failed",
        "heartbeat",
        "complete",
        "error",
    }

    assert {e.value for e in SSEEventType} == expected_types
