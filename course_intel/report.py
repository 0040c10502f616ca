"""Markdown comparison report built from research records."""

from collections.abc import Sequence
from pathlib import Path

from course_intel.extraction import ArtifactStore
from course_intel.extraction.heuristics import parse_price, round_half_up
from course_intel.models import FeatureFlags, ResearchRecord

REPORT_NAME = "research-report.md"

# Features that mark a gap in the market when most platforms lack them
OPPORTUNITY_FEATURES = ("live_support", "projects", "forums")

_FEATURE_LABELS = {
    "video": "Video",
    "quizzes": "Quizzes",
    "certificate": "Certificate",
    "downloads": "Downloads",
    "mobile": "Mobile",
    "forums": "Forums",
    "projects": "Projects",
    "live_support": "Live support",
}


def feature_label(name: str) -> str:
    return _FEATURE_LABELS.get(name, name.replace("_", " ").capitalize())


def average_module_count(records: Sequence[ResearchRecord]) -> int:
    if not records:
        return 0
    return round_half_up(sum(r.structure.module_count for r in records) / len(records))


def common_features(records: Sequence[ResearchRecord]) -> list[str]:
    """Features present on every record; empty when there are no records."""
    if not records:
        return []
    return [name for name in FeatureFlags.model_fields if all(getattr(r.features, name) for r in records)]


def price_range(records: Sequence[ResearchRecord]) -> tuple[float, float] | None:
    """Lowest and highest parseable price across all records."""
    values = [value for r in records for raw in r.pricing.prices if (value := parse_price(raw)) is not None]
    if not values:
        return None
    return min(values), max(values)


def format_price_range(bounds: tuple[float, float] | None) -> str:
    if bounds is None:
        return "Unable to determine"
    low, high = bounds
    return f"${low:g} - ${high:g}"


def opportunities(records: Sequence[ResearchRecord]) -> list[str]:
    """Gap features offered by fewer than half of the platforms."""
    found = []
    total = len(records)
    for name in OPPORTUNITY_FEATURES:
        count = sum(1 for r in records if getattr(r.features, name))
        if count < total / 2:
            found.append(f"Offer {feature_label(name).lower()} (only {count}/{total} platforms have this)")
    return found


def _render_record(record: ResearchRecord) -> str:
    enabled = record.features.enabled()
    lines = [
        f"### {record.platform}",
        "",
        f"**URL:** {record.url}",
        "",
        "**Pricing:**",
        f"- Model: {record.pricing.model.value}",
        f"- Currency: {record.pricing.currency.value}",
        f"- Prices: {', '.join(record.pricing.prices) or 'Not found'}",
        "",
        "**Features:**",
        *([f"- {feature_label(name)}" for name in enabled] or ["- None detected"]),
        "",
        "**Course Structure:**",
        f"- Modules: {record.structure.module_count}",
        f"- Lessons per module: {record.structure.average_lessons_per_module}",
    ]
    if record.structure.total_duration:
        lines.append(f"- Duration: {record.structure.total_duration}")
    lines += ["", "**Screenshots:**", *([f"- {path}" for path in record.screenshots] or ["- None"])]
    return "\n".join(lines)


def render_report(records: Sequence[ResearchRecord], topic: str = "") -> str:
    title = f"# Competitive Research Report: {topic}" if topic else "# Competitive Research Report"
    common = [feature_label(name) for name in common_features(records)]
    gaps = opportunities(records)

    sections = [
        title,
        f"## Platforms Analyzed: {len(records)}",
        "\n\n---\n\n".join(_render_record(record) for record in records),
        "## Summary",
        "\n".join(
            [
                f"- **Average module count:** {average_module_count(records)}",
                f"- **Common features:** {', '.join(common) or 'None'}",
                f"- **Pricing range:** {format_price_range(price_range(records))}",
            ]
        ),
        "## Differentiation Opportunities",
        "\n".join(f"- {gap}" for gap in gaps) or "- None identified",
    ]
    return "\n\n".join(section for section in sections if section) + "\n"


def write_report(
    records: Sequence[ResearchRecord],
    store: ArtifactStore,
    topic: str = "",
    name: str = REPORT_NAME,
) -> Path:
    return store.write_text(name, render_report(records, topic))
