"""Browser-driven extraction of course platform signals."""

from course_intel.extraction.browser import (
    ArtifactStore,
    BrowserPage,
    BrowserSession,
    LocalArtifactStore,
    PageElement,
    launch_playwright,
)
from course_intel.extraction.heuristics import (
    DEFAULT_FEATURES,
    DEFAULT_PRICING,
    DEFAULT_STRUCTURE,
    classify_pricing,
    detect_currency,
    detect_features,
    detect_pricing_model,
    parse_price,
    summarize_structure,
)
from course_intel.extraction.pipeline import CourseDetails, PlatformExtractor
from course_intel.extraction.selectors import DEFAULT_SELECTORS, PLATFORM_SELECTORS, SelectorSet, selectors_for

__all__ = [
    # Capabilities
    "ArtifactStore",
    "BrowserPage",
    "BrowserSession",
    "PageElement",
    "LocalArtifactStore",
    "launch_playwright",
    # Heuristics
    "DEFAULT_FEATURES",
    "DEFAULT_PRICING",
    "DEFAULT_STRUCTURE",
    "classify_pricing",
    "detect_currency",
    "detect_features",
    "detect_pricing_model",
    "parse_price",
    "summarize_structure",
    # Selectors
    "DEFAULT_SELECTORS",
    "PLATFORM_SELECTORS",
    "SelectorSet",
    "selectors_for",
    # Pipeline
    "CourseDetails",
    "PlatformExtractor",
]
