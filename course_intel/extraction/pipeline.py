"""Browser-driven extraction of one platform into a ResearchRecord."""

from collections.abc import Mapping
from dataclasses import dataclass

from course_intel.config import Settings
from course_intel.exceptions import NavigationError
from course_intel.extraction.browser import ArtifactStore, BrowserPage, BrowserSession
from course_intel.extraction.heuristics import (
    DEFAULT_FEATURES,
    DEFAULT_PRICING,
    DEFAULT_STRUCTURE,
    classify_pricing,
    detect_features,
    summarize_structure,
)
from course_intel.extraction.selectors import (
    COURSE_LINK_SELECTOR,
    DEFAULT_SELECTORS,
    DURATION_SELECTORS,
    PLATFORM_SELECTORS,
    SelectorSet,
    selectors_for,
)
from course_intel.logging import get_logger
from course_intel.models import (
    FeatureFlags,
    PricingSnapshot,
    RankedPlatform,
    ResearchRecord,
    StructureSnapshot,
)

log = get_logger("course_intel.extraction.pipeline")


@dataclass(frozen=True)
class CourseDetails:
    """Fields found on a course detail page; None means nothing found."""

    pricing: PricingSnapshot | None = None
    structure: StructureSnapshot | None = None


class PlatformExtractor:
    """Visits a platform's search page (and first course page) and builds its record."""

    def __init__(
        self,
        session: BrowserSession,
        store: ArtifactStore,
        settings: Settings | None = None,
        selector_table: Mapping[str, SelectorSet] = PLATFORM_SELECTORS,
    ) -> None:
        self.session = session
        self.store = store
        self.settings = settings or Settings()
        self.selector_table = selector_table

    async def research_platform(self, ranked: RankedPlatform, topic: str) -> ResearchRecord:
        """Research one platform. The page is closed on every exit path.

        Raises:
            NavigationError: When the search page cannot be loaded.
        """
        selectors = selectors_for(ranked.name, self.selector_table)
        screenshots: list[str] = []
        page = await self.session.new_page()
        try:
            await self._navigate(page, ranked)
            await self._capture(page, f"{ranked.name}-{topic}-search", screenshots)

            pricing = await self.extract_pricing(page, selectors)
            features = await self.extract_features(page)
            structure = await self.extract_structure(page, selectors)

            details = await self._drill_down(page, ranked.name, topic, selectors, screenshots)
            if details.pricing is not None:
                pricing = details.pricing
            if details.structure is not None:
                structure = details.structure

            log.info(
                "extraction.platform.completed",
                pricing_model=pricing.model.value,
                price_count=len(pricing.prices),
                features=features.enabled(),
                module_count=structure.module_count,
                screenshots=len(screenshots),
            )
            return ResearchRecord(
                platform=ranked.name,
                url=ranked.search_url,
                pricing=pricing,
                features=features,
                structure=structure,
                screenshots=screenshots,
            )
        finally:
            await self._close(page)

    # --- Navigation ---

    async def _navigate(self, page: BrowserPage, ranked: RankedPlatform) -> None:
        try:
            await page.goto(ranked.search_url, timeout_ms=self.settings.navigation_timeout_ms)
        except Exception as e:
            raise NavigationError(ranked.name, ranked.search_url, str(e)) from e
        # Client-rendered listings may still be painting after network idle
        await page.wait(self.settings.settle_ms)

    async def _settle(self, page: BrowserPage, extra_ms: int) -> None:
        try:
            await page.wait_for_settle(self.settings.navigation_timeout_ms)
        except Exception as e:
            log.debug("extraction.settle.timeout", error=str(e))
        await page.wait(extra_ms)

    async def _capture(self, page: BrowserPage, name: str, screenshots: list[str]) -> None:
        try:
            screenshots.append(await page.screenshot(self.store.screenshot_path(name)))
        except Exception as e:
            log.warning("extraction.screenshot.failed", name=name, error=str(e))

    async def _close(self, page: BrowserPage) -> None:
        try:
            await page.close()
        except Exception as e:
            log.warning("extraction.page_close.failed", error=str(e))

    # --- Field extraction ---

    async def _texts(self, page: BrowserPage, selector: str, limit: int) -> list[str]:
        elements = await page.query_all(selector)
        texts = []
        for element in elements[:limit]:
            text = await element.text()
            if text and text.strip():
                texts.append(text.strip())
        return texts

    async def _count(self, page: BrowserPage, selector: str) -> int:
        try:
            return len(await page.query_all(selector))
        except Exception as e:
            log.debug("extraction.selector.failed", selector=selector, error=str(e))
            return 0

    async def extract_pricing(self, page: BrowserPage, selectors: SelectorSet) -> PricingSnapshot:
        prices: list[str] = []
        for selector in selectors.price_selectors:
            try:
                prices.extend(await self._texts(page, selector, self.settings.max_prices_per_selector))
            except Exception as e:
                log.debug("extraction.selector.failed", selector=selector, error=str(e))
        if not prices:
            return DEFAULT_PRICING.model_copy(deep=True)
        return classify_pricing(prices)

    async def extract_features(self, page: BrowserPage) -> FeatureFlags:
        try:
            text = await page.visible_text()
        except Exception as e:
            log.warning("extraction.features.failed", error=str(e))
            return DEFAULT_FEATURES.model_copy(deep=True)
        return detect_features(text)

    async def extract_duration(self, page: BrowserPage) -> str | None:
        for selector in DURATION_SELECTORS:
            try:
                element = await page.query_first(selector)
                text = await element.text() if element else None
            except Exception as e:
                log.debug("extraction.selector.failed", selector=selector, error=str(e))
                continue
            if text and text.strip():
                return text.strip()
        return None

    async def extract_structure(self, page: BrowserPage, selectors: SelectorSet) -> StructureSnapshot:
        try:
            modules = await self._count(page, selectors.module_selector)
            lessons = await self._count(page, selectors.lesson_selector)
            if modules == 0 and selectors.module_selector != DEFAULT_SELECTORS.module_selector:
                modules = await self._count(page, DEFAULT_SELECTORS.module_selector)
                lessons = await self._count(page, DEFAULT_SELECTORS.lesson_selector)
            return summarize_structure(modules, lessons, await self.extract_duration(page))
        except Exception as e:
            log.warning("extraction.structure.failed", error=str(e))
            return DEFAULT_STRUCTURE.model_copy(deep=True)

    # --- Course detail page ---

    async def _drill_down(
        self,
        page: BrowserPage,
        platform: str,
        topic: str,
        selectors: SelectorSet,
        screenshots: list[str],
    ) -> CourseDetails:
        if not self.settings.drill_down:
            return CourseDetails()
        try:
            links = await page.query_all(COURSE_LINK_SELECTOR)
            if not links:
                log.debug("extraction.detail.no_course_link")
                return CourseDetails()

            await links[0].click()
            await self._settle(page, self.settings.detail_settle_ms)
            await self._capture(page, f"{platform}-{topic}-detail", screenshots)
            return await self.extract_course_details(page, selectors)
        except Exception as e:
            log.warning("extraction.detail.failed", error=str(e))
            return CourseDetails()

    async def extract_course_details(self, page: BrowserPage, selectors: SelectorSet) -> CourseDetails:
        """Extract fields from a course page; only fields actually found are returned."""
        pricing = await self.extract_pricing(page, selectors)

        structure = None
        if await self._count(page, selectors.curriculum_selector) > 0:
            modules = await self._count(page, selectors.module_selector)
            if modules > 0:
                lessons = await self._count(page, selectors.lesson_selector)
                structure = summarize_structure(modules, lessons, await self.extract_duration(page))

        return CourseDetails(pricing=pricing if pricing.prices else None, structure=structure)
