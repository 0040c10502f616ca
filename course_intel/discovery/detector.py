"""Platform discovery: catalog matching, external discovery, dedupe, ranking and search URLs."""

import re
from collections.abc import Iterable, Mapping
from typing import Protocol, runtime_checkable
from urllib.parse import quote, urlsplit

from course_intel.discovery.catalog import PlatformCatalog, default_catalog
from course_intel.discovery.localizer import QueryLocalizer
from course_intel.logging import get_logger
from course_intel.models import (
    PlatformProfile,
    PlatformScope,
    RankedPlatform,
    SearchQueryContext,
)

log = get_logger("course_intel.discovery.detector")

FALLBACK_LANGUAGE = "en"

# host suffix -> search path; "{q}" is replaced with the encoded topic
SEARCH_PATTERNS: Mapping[str, str] = {
    "udemy.com": "/courses/search/?q={q}",
    "coursera.org": "/search?query={q}",
    "linkedin.com": "/learning/search?keywords={q}",
    "domestika.org": "/courses/search/{q}",
    "skillshare.com": "/search?query={q}",
    "platzi.com": "/buscar/?search={q}",
    "openclassrooms.com": "/search?query={q}",
}

TLD_SEARCH_PATTERNS: Mapping[str, str] = {
    ".nl": "/zoeken?q={q}",
    ".de": "/suche?q={q}",
    ".fr": "/recherche?q={q}",
}

GENERIC_SEARCH_PATTERN = "/search?q={q}"


@runtime_checkable
class ExternalPlatformFinder(Protocol):
    """Extension point for live platform discovery (e.g. a search engine).

    Implementations may be slow and non-deterministic.
    """

    async def find(self, context: SearchQueryContext) -> list[PlatformProfile]: ...


class NullPlatformFinder:
    """Finder used when no live discovery is configured."""

    async def find(self, context: SearchQueryContext) -> list[PlatformProfile]:
        return []


def _host_matches(host: str, domain: str) -> bool:
    return host == domain or host.endswith(f".{domain}")


def resolve_search_url(base_url: str, topic: str) -> str:
    """Map a platform base URL to its search page for ``topic``."""
    encoded = quote(topic, safe="")
    parts = urlsplit(base_url)
    host = parts.netloc.lower()
    root = base_url.rstrip("/")

    for domain, pattern in SEARCH_PATTERNS.items():
        if _host_matches(host, domain):
            return f"{parts.scheme}://{parts.netloc}{pattern.format(q=encoded)}"

    for tld, pattern in TLD_SEARCH_PATTERNS.items():
        if host.endswith(tld):
            return f"{root}{pattern.format(q=encoded)}"

    return f"{root}{GENERIC_SEARCH_PATTERN.format(q=encoded)}"


def speaks_language(platform: PlatformProfile, language: str) -> bool:
    return language in platform.languages or FALLBACK_LANGUAGE in platform.languages


def _contains_words(text: str, phrase: str) -> bool:
    return re.search(rf"(?<!\w){re.escape(phrase)}(?!\w)", text) is not None


def matches_specialty(platform: PlatformProfile, topic: str) -> bool:
    """Case-insensitive whole-word match between topic and specialties, in either direction.

    Short specialties such as "IT" or "AI" must not match inside "digital" or "email".
    """
    topic_lower = topic.strip().lower()
    if not platform.specialties or not topic_lower:
        return False
    return any(
        _contains_words(topic_lower, specialty.lower()) or _contains_words(specialty.lower(), topic_lower)
        for specialty in platform.specialties
    )


def dedupe_platforms(platforms: Iterable[PlatformProfile]) -> list[PlatformProfile]:
    """Keep the first platform per case-insensitive base URL."""
    seen: set[str] = set()
    unique: list[PlatformProfile] = []
    for platform in platforms:
        key = platform.base_url.lower()
        if key in seen:
            continue
        seen.add(key)
        unique.append(platform)
    return unique


def rank_platforms(platforms: Iterable[PlatformProfile], context: SearchQueryContext) -> list[PlatformProfile]:
    """Stable sort: regional first, then native language, then specialty match."""

    def _key(platform: PlatformProfile) -> tuple[bool, bool, bool]:
        return (
            platform.scope != PlatformScope.REGIONAL,
            context.language not in platform.languages,
            not matches_specialty(platform, context.topic),
        )

    return sorted(platforms, key=_key)


class PlatformDetector:
    """Resolves a query context into a ranked, deduplicated list of platforms."""

    def __init__(
        self,
        catalog: PlatformCatalog | None = None,
        finder: ExternalPlatformFinder | None = None,
        localizer: QueryLocalizer | None = None,
    ) -> None:
        self.catalog = catalog or default_catalog()
        self.finder = finder or NullPlatformFinder()
        self.localizer = localizer or QueryLocalizer()

    def global_matches(self, context: SearchQueryContext) -> list[PlatformProfile]:
        return [p for p in self.catalog.global_platforms if speaks_language(p, context.language)]

    def regional_matches(self, context: SearchQueryContext) -> list[PlatformProfile]:
        region_key = self.catalog.resolve_region(context.region)
        matches = []
        for platform in self.catalog.regional(region_key):
            if not speaks_language(platform, context.language):
                continue
            if platform.specialties and context.topic and not matches_specialty(platform, context.topic):
                continue
            matches.append(platform)
        return matches

    async def discover_external(self, context: SearchQueryContext) -> list[PlatformProfile]:
        try:
            return list(await self.finder.find(context))
        except Exception as e:
            log.warning("discovery.external.failed", finder=type(self.finder).__name__, error=str(e))
            return []

    async def detect_platforms(self, context: SearchQueryContext) -> list[RankedPlatform]:
        """Return ranked platforms with resolved search URLs. An empty list is a valid result."""
        log.debug("discovery.queries", queries=self.localizer.build_queries(context))

        global_matches = self.global_matches(context)
        regional_matches = self.regional_matches(context)
        external = await self.discover_external(context)

        unique = dedupe_platforms([*global_matches, *regional_matches, *external])
        ranked = rank_platforms(unique, context)

        log.info(
            "discovery.completed",
            region=self.catalog.resolve_region(context.region),
            language=context.language,
            global_count=len(global_matches),
            regional_count=len(regional_matches),
            external_count=len(external),
            platform_count=len(ranked),
        )
        return [
            RankedPlatform(platform=platform, search_url=resolve_search_url(platform.base_url, context.topic))
            for platform in ranked
        ]

    async def search_urls(self, context: SearchQueryContext) -> list[str]:
        return [ranked.search_url for ranked in await self.detect_platforms(context)]


async def find_competitors(region: str, language: str, topic: str) -> list[str]:
    """Search URLs of the platforms competing on ``topic`` in ``region``."""
    context = SearchQueryContext(region=region, language=language, topic=topic)
    return await PlatformDetector().search_urls(context)
