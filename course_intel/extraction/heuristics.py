"""Keyword heuristics that turn scraped text into pricing, feature and structure signals."""

import re
from collections.abc import Iterable, Mapping, Sequence
from decimal import ROUND_HALF_UP, Decimal

from course_intel.models import (
    Currency,
    FeatureFlags,
    PricingModel,
    PricingSnapshot,
    StructureSnapshot,
)

SUBSCRIPTION_KEYWORDS = ("/month", "/year", "monthly", "yearly", "subscription")

# Checked in this order; the first symbol found anywhere in the list wins.
CURRENCY_SYMBOLS: tuple[tuple[str, Currency], ...] = (
    ("$", Currency.USD),
    ("€", Currency.EUR),
    ("£", Currency.GBP),
)

FEATURE_KEYWORDS: Mapping[str, tuple[str, ...]] = {
    "video": ("video", "player", "watch"),
    "quizzes": ("quiz", "test", "assessment"),
    "certificate": ("certificate", "certification", "completion"),
    "downloads": ("download", "resource", "material"),
    "mobile": ("mobile", "app", "ios", "android"),
    "forums": ("forum", "discussion", "community"),
    "projects": ("project", "assignment", "hands-on"),
    "live_support": ("live", "support", "mentor", "Q&A"),
}

MAX_MODULE_COUNT = 20
DEFAULT_LESSONS_PER_MODULE = 5
DEFAULT_CONTENT_TYPES = ("video", "text", "quiz")

# Shared templates: hand out model_copy(deep=True), never the instances themselves
DEFAULT_PRICING = PricingSnapshot(model=PricingModel.ONE_TIME, prices=[], currency=Currency.USD)
DEFAULT_FEATURES = FeatureFlags(video=True)
DEFAULT_STRUCTURE = StructureSnapshot(module_count=6, average_lessons_per_module=5, content_types=["video", "text"])

_NON_NUMERIC_RE = re.compile(r"[^0-9.]")
_LEADING_NUMBER_RE = re.compile(r"\d+(?:\.\d*)?|\.\d+")


def detect_pricing_model(prices: Sequence[str]) -> PricingModel:
    lowered = [price.lower() for price in prices]
    if any(keyword in price for price in lowered for keyword in SUBSCRIPTION_KEYWORDS):
        return PricingModel.SUBSCRIPTION
    if len(set(prices)) > 2:
        return PricingModel.TIERED
    return PricingModel.ONE_TIME


def detect_currency(prices: Sequence[str]) -> Currency:
    for symbol, currency in CURRENCY_SYMBOLS:
        if any(symbol in price for price in prices):
            return currency
    return Currency.USD


def classify_pricing(prices: Sequence[str], discounts: Sequence[str] | None = None) -> PricingSnapshot:
    return PricingSnapshot(
        model=detect_pricing_model(prices),
        prices=list(prices),
        currency=detect_currency(prices),
        discounts=list(discounts) if discounts else None,
    )


def _keyword_pattern(keywords: Iterable[str]) -> re.Pattern[str]:
    return re.compile("|".join(re.escape(keyword) for keyword in keywords), re.IGNORECASE)


def detect_features(text: str, keywords: Mapping[str, tuple[str, ...]] = FEATURE_KEYWORDS) -> FeatureFlags:
    """Set a flag when any of its keywords appears anywhere in the page text.

    Matching is deliberately page-wide, so unrelated mentions (a footer
    "support" link, a legal "certificate" notice) also count.
    """
    flags = {name: bool(_keyword_pattern(words).search(text)) for name, words in keywords.items() if words}
    return FeatureFlags(**flags)


def round_half_up(value: float) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def summarize_structure(module_count: int, lesson_count: int, total_duration: str | None = None) -> StructureSnapshot:
    """Build a structure snapshot from raw element counts.

    The lesson average divides by the raw module count; only the reported
    module count is capped.
    """
    average = round_half_up(lesson_count / module_count) if module_count > 0 else DEFAULT_LESSONS_PER_MODULE
    return StructureSnapshot(
        module_count=min(module_count, MAX_MODULE_COUNT),
        average_lessons_per_module=average,
        content_types=list(DEFAULT_CONTENT_TYPES),
        total_duration=total_duration,
    )


def parse_price(raw: str) -> float | None:
    """Parse the first number left after stripping everything but digits and dots.

    "Current price: $19.99. Original price: $84.99." gives 19.99; None when no digits remain.
    """
    match = _LEADING_NUMBER_RE.match(_NON_NUMERIC_RE.sub("", raw))
    return float(match.group()) if match else None
