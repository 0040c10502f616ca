"""SSE event models for research run streaming."""

import json
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class SSEEventType(str, Enum):
    """SSE event types for a research run."""

    DISCOVERY_COMPLETE = "discovery_complete"
    PLATFORM_START = "platform_start"
    PLATFORM_COMPLETE = "platform_complete"
    PLATFORM_FAILED = "platform_failed"
    HEARTBEAT = "heartbeat"
    COMPLETE = "complete"
    ERROR = "error"


class SSEEvent(BaseModel):
    """Base SSE event model."""

    event: SSEEventType = Field(description="Event type identifier")
    data: dict[str, Any] = Field(description="Event payload data")

    def format(self) -> str:
        """Format as SSE message: 'event: type\\ndata: json\\n\\n'."""
        return f"event: {self.event.value}\ndata: {json.dumps(self.data)}\n\n"


class DiscoveryCompleteEvent(SSEEvent):
    """Emitted once the platforms to visit are known."""

    event: SSEEventType = SSEEventType.DISCOVERY_COMPLETE
    data: dict[str, Any] = Field(
        description="Ranked platform names",
        examples=[{"platforms": ["Studytube", "Udemy"], "total": 2}],
    )


class PlatformStartEvent(SSEEvent):
    event: SSEEventType = SSEEventType.PLATFORM_START
    data: dict[str, Any] = Field(
        description="Platform about to be visited",
        examples=[{"platform": "Udemy", "url": "https://www.udemy.com/courses/search/?q=python"}],
    )


class PlatformCompleteEvent(SSEEvent):
    """Emitted when a platform's record is ready."""

    event: SSEEventType = SSEEventType.PLATFORM_COMPLETE
    data: dict[str, Any] = Field(
        description="Progress counters and the platform's record",
        examples=[{"platform": "Udemy", "completed": 1, "total": 3, "duration_ms": 8200, "record": {}}],
    )


class PlatformFailedEvent(SSEEvent):
    """Emitted when a platform is skipped. The run continues."""

    event: SSEEventType = SSEEventType.PLATFORM_FAILED
    data: dict[str, Any] = Field(
        description="Failure details",
        examples=[{"platform": "LOI", "error_type": "NavigationError", "completed": 2, "total": 3}],
    )


class HeartbeatEvent(SSEEvent):
    """Heartbeat event to prevent proxy buffering.

    Formatted as SSE comment (': keepalive\\n\\n') instead of
    named event to avoid requiring client-side handling.
    """

    event: SSEEventType = SSEEventType.HEARTBEAT
    data: dict[str, Any] = Field(default_factory=dict, description="Empty data for heartbeat")

    def format(self) -> str:
        return ": keepalive\n\n"


class CompleteEvent(SSEEvent):
    event: SSEEventType = SSEEventType.COMPLETE
    data: dict[str, Any] = Field(description="Full ResearchRun serialized")


class ErrorEvent(SSEEvent):
    """Emitted when the run itself fails (e.g. the browser cannot start)."""

    event: SSEEventType = SSEEventType.ERROR
    data: dict[str, str] = Field(
        description="Error details",
        examples=[{"error": "Unable to start the browser.", "error_type": "BrowserLaunchError"}],
    )
