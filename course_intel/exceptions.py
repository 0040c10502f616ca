"""Domain-specific exceptions for the course research engine."""


class CourseIntelError(Exception):
    """Base exception for course research errors."""


class BrowserLaunchError(CourseIntelError):
    """Raised when the browser session cannot be started. Aborts the whole run."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Failed to start browser session: {reason}")


class ExtractionError(CourseIntelError):
    """Raised when a single platform cannot be researched."""

    def __init__(self, platform: str, reason: str) -> None:
        self.platform = platform
        self.reason = reason
        super().__init__(f"Failed to research platform '{platform}': {reason}")


class NavigationError(ExtractionError):
    """Raised when a platform's search page cannot be loaded."""

    def __init__(self, platform: str, url: str, reason: str) -> None:
        self.url = url
        super().__init__(platform, f"navigation to {url} failed: {reason}")


class PlatformTimeoutError(ExtractionError):
    """Raised when a platform exceeds its research time budget."""

    def __init__(self, platform: str, timeout_s: float) -> None:
        self.timeout_s = timeout_s
        super().__init__(platform, f"timed out after {timeout_s:g}s")
