"""Course Intel - competitive research on online course platforms"""

__version__ = "0.1.0"

from course_intel.config import Settings
from course_intel.discovery import (
    AgentPlatformFinder,
    ExternalPlatformFinder,
    NullPlatformFinder,
    PlatformCatalog,
    PlatformDetector,
    QueryLocalizer,
    default_catalog,
    find_competitors,
    resolve_search_url,
)
from course_intel.exceptions import (
    BrowserLaunchError,
    CourseIntelError,
    ExtractionError,
    NavigationError,
    PlatformTimeoutError,
)
from course_intel.extraction import LocalArtifactStore, PlatformExtractor, launch_playwright
from course_intel.models import (
    Currency,
    FeatureFlags,
    PlatformFailure,
    PlatformProfile,
    PlatformScope,
    PricingModel,
    PricingSnapshot,
    RankedPlatform,
    ResearchRecord,
    ResearchRun,
    SearchQueryContext,
    StructureSnapshot,
)
from course_intel.report import render_report, write_report
from course_intel.server import get_app
from course_intel.workflow import PlatformOutcome, research_one, run_research

__all__ = [
    # Models
    "PlatformScope",
    "PlatformProfile",
    "SearchQueryContext",
    "RankedPlatform",
    "PricingModel",
    "Currency",
    "PricingSnapshot",
    "FeatureFlags",
    "StructureSnapshot",
    "ResearchRecord",
    "PlatformFailure",
    "ResearchRun",
    # Configuration
    "Settings",
    # Discovery
    "PlatformCatalog",
    "default_catalog",
    "QueryLocalizer",
    "ExternalPlatformFinder",
    "NullPlatformFinder",
    "AgentPlatformFinder",
    "PlatformDetector",
    "find_competitors",
    "resolve_search_url",
    # Extraction
    "LocalArtifactStore",
    "PlatformExtractor",
    "launch_playwright",
    # Exceptions
    "CourseIntelError",
    "BrowserLaunchError",
    "ExtractionError",
    "NavigationError",
    "PlatformTimeoutError",
    # Workflow
    "PlatformOutcome",
    "research_one",
    "run_research",
    # Report
    "render_report",
    "write_report",
    # Server
    "get_app",
]
