"""Per-platform selector table. Adding a platform means adding a row here."""

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType


@dataclass(frozen=True)
class SelectorSet:
    price_selectors: tuple[str, ...]
    curriculum_selector: str
    module_selector: str
    lesson_selector: str


DEFAULT_SELECTORS = SelectorSet(
    price_selectors=('[class*="price"]', "[data-price]", ".cost"),
    curriculum_selector='[class*="curriculum"], [class*="syllabus"], [class*="outline"]',
    module_selector='[class*="module"], [class*="section"], [class*="chapter"]',
    lesson_selector='[class*="lesson"], [class*="lecture"], [class*="video"]',
)

PLATFORM_SELECTORS: Mapping[str, SelectorSet] = MappingProxyType(
    {
        "Udemy": SelectorSet(
            price_selectors=('[data-purpose="price-text"]', ".price-text", ".course-price"),
            curriculum_selector='[data-purpose="curriculum"]',
            module_selector=".section--section-title",
            lesson_selector=".lecture-title",
        ),
        "Coursera": SelectorSet(
            price_selectors=(".product-price", ".price", '[class*="ProductPrice"]'),
            curriculum_selector='[class*="syllabus"]',
            module_selector='[class*="week"], [class*="module"]',
            lesson_selector='[class*="lesson"], [class*="item"]',
        ),
    }
)

COURSE_LINK_SELECTOR = '[class*="course"] a, [class*="Course"] a'

DURATION_SELECTORS: tuple[str, ...] = (
    '[class*="duration"]',
    '[class*="length"]',
    '[class*="hours"]',
    r"text=/\d+\s*(hours?|hrs?)/i",
)


def selectors_for(platform: str, table: Mapping[str, SelectorSet] = PLATFORM_SELECTORS) -> SelectorSet:
    return table.get(platform, DEFAULT_SELECTORS)
