"""Command-line entry point: discover platforms or run a full research pass."""

import argparse
import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv

from course_intel.config import Settings
from course_intel.discovery import create_platform_detector
from course_intel.exceptions import BrowserLaunchError
from course_intel.extraction import LocalArtifactStore
from course_intel.logging import configure_structlog, get_logger
from course_intel.models import SearchQueryContext
from course_intel.report import write_report
from course_intel.workflow import run_research

log = get_logger("course_intel.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="course-intel", description="Competitive research on online course platforms")
    subparsers = parser.add_subparsers(dest="command", required=True)

    def _add_query_args(sub: argparse.ArgumentParser) -> None:
        sub.add_argument("topic", help="Course topic, e.g. 'IT programming'")
        sub.add_argument("--region", default="", help="Region name or code, e.g. 'Netherlands'")
        sub.add_argument("--language", default="en", help="ISO language code (default: en)")
        sub.add_argument("--live", action="store_true", help="Also ask a web-search agent for platforms")

    discover = subparsers.add_parser("discover", help="List ranked platforms and their search URLs")
    _add_query_args(discover)

    research = subparsers.add_parser("research", help="Visit platforms and write a Markdown report")
    _add_query_args(research)
    research.add_argument("--output-dir", type=Path, default=None, help="Screenshots and report directory")
    research.add_argument("--concurrency", type=int, default=None, help="Platforms researched in parallel")
    research.add_argument("--headed", action="store_true", help="Show the browser window")
    research.add_argument("--no-drill-down", action="store_true", help="Only visit search result pages")
    return parser


def _settings(args: argparse.Namespace) -> Settings:
    """Environment settings with command-line overrides applied."""
    settings = Settings.from_env()
    updates: dict[str, object] = {}
    if args.live:
        updates["live_discovery"] = True
    if getattr(args, "output_dir", None) is not None:
        updates["output_dir"] = args.output_dir
    if getattr(args, "concurrency", None) is not None:
        updates["max_concurrency"] = args.concurrency
    if getattr(args, "headed", False):
        updates["headless"] = False
    if getattr(args, "no_drill_down", False):
        updates["drill_down"] = False
    return Settings.model_validate({**settings.model_dump(), **updates})


async def discover_command(args: argparse.Namespace) -> int:
    context = SearchQueryContext(topic=args.topic, region=args.region, language=args.language)
    platforms = await create_platform_detector(_settings(args)).detect_platforms(context)
    if not platforms:
        print(f"No platforms found for '{args.topic}'")
        return 0

    print(f"Found {len(platforms)} platforms for '{args.topic}':")
    for ranked in platforms:
        profile = ranked.platform
        print(f"- {profile.name} ({profile.scope.value}) [{', '.join(profile.languages)}]")
        print(f"    {ranked.search_url}")
    return 0


async def research_command(args: argparse.Namespace) -> int:
    settings = _settings(args)
    store = LocalArtifactStore(settings.output_dir)
    try:
        run = await run_research(
            args.topic,
            region=args.region,
            language=args.language,
            detector=create_platform_detector(settings),
            store=store,
            settings=settings,
        )
    except BrowserLaunchError as e:
        log.error("cli.browser_unavailable", error=str(e))
        print(f"❌ {e}", file=sys.stderr)
        return 1

    report_path = write_report(run.records, store, topic=args.topic)
    print(f"Researched {len(run.records)} platforms ({len(run.failures)} failed) in {run.duration_ms}ms")
    for failure in run.failures:
        print(f"  ⚠️  {failure.platform}: {failure.error_type} - {failure.reason}")
    print(f"Report saved to {report_path}")
    return 0


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    configure_structlog(testing=True)

    args = build_parser().parse_args(argv)
    handler = discover_command if args.command == "discover" else research_command
    return asyncio.run(handler(args))


if __name__ == "__main__":
    sys.exit(main())
