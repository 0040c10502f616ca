"""Shared fixtures: an in-memory browser that stands in for Playwright."""

import asyncio
from collections.abc import Callable
from pathlib import Path
from types import SimpleNamespace

import pytest

from course_intel.config import Settings
from course_intel.extraction import LocalArtifactStore
from course_intel.extraction.selectors import COURSE_LINK_SELECTOR
from course_intel.logging import clear_context_fields, configure_structlog
from course_intel.models import PlatformProfile, PlatformScope, RankedPlatform


class FakeElement:
    def __init__(self, text: str | None = "", on_click: Callable[[], None] | None = None) -> None:
        self._text = text
        self._on_click = on_click
        self.clicked = False

    async def text(self) -> str | None:
        return self._text

    async def click(self) -> None:
        self.clicked = True
        if self._on_click:
            self._on_click()


class FakePage:
    """Serves a fixed selector -> elements mapping and page text."""

    def __init__(
        self,
        dom: dict[str, list[FakeElement]] | None = None,
        text: str = "",
        *,
        detail_dom: dict[str, list[FakeElement]] | None = None,
        detail_text: str = "",
        goto_error: Exception | None = None,
        goto_delay: float = 0.0,
        failing_selectors: tuple[str, ...] = (),
        text_error: Exception | None = None,
    ) -> None:
        self.dom = dict(dom or {})
        self.text = text
        self.goto_error = goto_error
        self.goto_delay = goto_delay
        self.failing_selectors = failing_selectors
        self.text_error = text_error
        self.visited: list[str] = []
        self.screenshots: list[str] = []
        self.waits: list[int] = []
        self.closed = False
        if detail_dom is not None:
            self._detail = (dict(detail_dom), detail_text)
            self.dom[COURSE_LINK_SELECTOR] = [FakeElement("First course", on_click=self._open_detail)]

    def _open_detail(self) -> None:
        self.dom, self.text = self._detail

    async def goto(self, url: str, timeout_ms: int) -> None:
        self.visited.append(url)
        if self.goto_delay:
            await asyncio.sleep(self.goto_delay)
        if self.goto_error:
            raise self.goto_error

    async def wait(self, ms: int) -> None:
        self.waits.append(ms)

    async def wait_for_settle(self, timeout_ms: int) -> None:
        return None

    async def screenshot(self, path: Path) -> str:
        self.screenshots.append(str(path))
        return str(path)

    async def query_all(self, selector: str) -> list[FakeElement]:
        if selector in self.failing_selectors:
            raise RuntimeError(f"bad selector {selector}")
        return list(self.dom.get(selector, []))

    async def query_first(self, selector: str) -> FakeElement | None:
        elements = await self.query_all(selector)
        return elements[0] if elements else None

    async def visible_text(self) -> str:
        if self.text_error:
            raise self.text_error
        return self.text

    async def close(self) -> None:
        self.closed = True


class FakeSession:
    """Hands out the given pages in order."""

    def __init__(self, pages: list[FakePage]) -> None:
        self.pages = list(pages)
        self.opened: list[FakePage] = []

    async def new_page(self) -> FakePage:
        page = self.pages.pop(0) if self.pages else FakePage()
        self.opened.append(page)
        return page


def elements(*texts: str | None) -> list[FakeElement]:
    return [FakeElement(text) for text in texts]


def ranked(name: str, url: str | None = None, scope: PlatformScope = PlatformScope.GLOBAL) -> RankedPlatform:
    base_url = url or f"https://www.{name.lower()}.com"
    return RankedPlatform(
        platform=PlatformProfile(name=name, base_url=base_url, scope=scope, languages=("en",)),
        search_url=f"{base_url}/search?q=python",
    )


@pytest.fixture(autouse=True)
def _logging():
    configure_structlog(testing=True)
    yield
    clear_context_fields()


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        output_dir=tmp_path,
        settle_ms=0,
        detail_settle_ms=0,
        navigation_timeout_ms=1000,
        platform_timeout_s=5,
    )


@pytest.fixture
def store(tmp_path: Path) -> LocalArtifactStore:
    return LocalArtifactStore(tmp_path / "artifacts")


@pytest.fixture
def fake() -> SimpleNamespace:
    """The fake browser classes and helpers, for tests that build pages."""
    return SimpleNamespace(Element=FakeElement, Page=FakePage, Session=FakeSession, elements=elements, ranked=ranked)
