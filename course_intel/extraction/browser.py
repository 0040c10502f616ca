"""Browser and artifact capabilities used by the extraction pipeline.

Extraction code only talks to the ``BrowserSession``/``BrowserPage``
protocols; ``launch_playwright`` provides the Playwright-backed session.
"""

import re
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Protocol

from playwright.async_api import Browser, BrowserContext, ElementHandle, Page, async_playwright

from course_intel.exceptions import BrowserLaunchError
from course_intel.logging import get_logger

log = get_logger("course_intel.extraction.browser")

DEFAULT_VIEWPORT = {"width": 1920, "height": 1080}
USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


# --- Capabilities ---


class PageElement(Protocol):
    async def text(self) -> str | None: ...

    async def click(self) -> None: ...


class BrowserPage(Protocol):
    async def goto(self, url: str, timeout_ms: int) -> None: ...

    async def wait(self, ms: int) -> None: ...

    async def wait_for_settle(self, timeout_ms: int) -> None: ...

    async def screenshot(self, path: Path) -> str: ...

    async def query_all(self, selector: str) -> list[PageElement]: ...

    async def query_first(self, selector: str) -> PageElement | None: ...

    async def visible_text(self) -> str: ...

    async def close(self) -> None: ...


class BrowserSession(Protocol):
    async def new_page(self) -> BrowserPage: ...


class ArtifactStore(Protocol):
    def screenshot_path(self, name: str) -> Path: ...

    def write_text(self, name: str, content: str) -> Path: ...


# --- Local filesystem ---


_SLUG_RE = re.compile(r"[^A-Za-z0-9._-]+")


def slugify(value: str) -> str:
    return _SLUG_RE.sub("-", value).strip("-") or "untitled"


class LocalArtifactStore:
    """Writes screenshots and reports below a root directory, created on first use."""

    def __init__(self, root: Path | str = "research") -> None:
        self.root = Path(root)

    def _path(self, name: str) -> Path:
        self.root.mkdir(parents=True, exist_ok=True)
        return self.root / slugify(name)

    def screenshot_path(self, name: str) -> Path:
        return self._path(f"{name}.png")

    def write_text(self, name: str, content: str) -> Path:
        path = self._path(name)
        path.write_text(content, encoding="utf-8")
        return path


# --- Playwright ---


class PlaywrightElement:
    def __init__(self, handle: ElementHandle) -> None:
        self._handle = handle

    async def text(self) -> str | None:
        return await self._handle.text_content()

    async def click(self) -> None:
        await self._handle.click()


class PlaywrightPage:
    """Adapts a Playwright page to the ``BrowserPage`` protocol."""

    def __init__(self, page: Page) -> None:
        self._page = page

    async def goto(self, url: str, timeout_ms: int) -> None:
        await self._page.goto(url, wait_until="networkidle", timeout=timeout_ms)

    async def wait(self, ms: int) -> None:
        await self._page.wait_for_timeout(ms)

    async def wait_for_settle(self, timeout_ms: int) -> None:
        await self._page.wait_for_load_state("networkidle", timeout=timeout_ms)

    async def screenshot(self, path: Path) -> str:
        await self._page.screenshot(path=str(path), full_page=False)
        return str(path)

    async def query_all(self, selector: str) -> list[PageElement]:
        return [PlaywrightElement(handle) for handle in await self._page.query_selector_all(selector)]

    async def query_first(self, selector: str) -> PageElement | None:
        handle = await self._page.query_selector(selector)
        return PlaywrightElement(handle) if handle else None

    async def visible_text(self) -> str:
        return await self._page.inner_text("body")

    async def close(self) -> None:
        await self._page.close()


class PlaywrightSession:
    def __init__(self, browser: Browser, context: BrowserContext) -> None:
        self.browser = browser
        self.context = context

    async def new_page(self) -> BrowserPage:
        return PlaywrightPage(await self.context.new_page())


def _launch_failed(error: Exception) -> BrowserLaunchError:
    """Any start-up failure aborts the run, including a missing driver or Chromium build."""
    log.error("browser.launch.failed", error_type=type(error).__name__, error=str(error))
    return BrowserLaunchError(str(error) or type(error).__name__)


@asynccontextmanager
async def launch_playwright(
    headless: bool = True,
    viewport: dict[str, int] | None = None,
) -> AsyncIterator[PlaywrightSession]:
    """Launch Chromium for one research run and close it on exit.

    Raises:
        BrowserLaunchError: When Playwright or Chromium cannot start.
    """
    try:
        playwright = await async_playwright().start()
    except Exception as e:
        raise _launch_failed(e) from e

    try:
        try:
            browser = await playwright.chromium.launch(
                headless=headless,
                args=["--disable-dev-shm-usage", "--no-sandbox"],
            )
        except Exception as e:
            raise _launch_failed(e) from e

        try:
            try:
                context = await browser.new_context(viewport=viewport or DEFAULT_VIEWPORT, user_agent=USER_AGENT)
            except Exception as e:
                raise _launch_failed(e) from e
            log.info("browser.launched", headless=headless)
            yield PlaywrightSession(browser, context)
        finally:
            await browser.close()
            log.info("browser.closed")
    finally:
        await playwright.stop()
