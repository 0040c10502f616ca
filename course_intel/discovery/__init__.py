"""Platform discovery and query localization."""

from course_intel.discovery.agents import (
    AgentPlatformFinder,
    DiscoveredPlatform,
    DiscoveredPlatforms,
    clear_agent_cache,
    create_discovery_agent,
    create_platform_detector,
    get_discovery_agent,
)
from course_intel.discovery.catalog import PlatformCatalog, default_catalog
from course_intel.discovery.detector import (
    ExternalPlatformFinder,
    NullPlatformFinder,
    PlatformDetector,
    find_competitors,
    rank_platforms,
    resolve_search_url,
)
from course_intel.discovery.localizer import QueryLocalizer

__all__ = [
    # Catalog
    "PlatformCatalog",
    "default_catalog",
    # Localization
    "QueryLocalizer",
    # Detection
    "ExternalPlatformFinder",
    "NullPlatformFinder",
    "PlatformDetector",
    "find_competitors",
    "rank_platforms",
    "resolve_search_url",
    # Live discovery
    "AgentPlatformFinder",
    "DiscoveredPlatform",
    "DiscoveredPlatforms",
    "create_discovery_agent",
    "create_platform_detector",
    "get_discovery_agent",
    "clear_agent_cache",
]
