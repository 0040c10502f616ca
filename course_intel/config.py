"""Runtime settings read from COURSE_INTEL_* environment variables."""

import os
from pathlib import Path

from pydantic import BaseModel, Field

ENV_PREFIX = "COURSE_INTEL_"
DEFAULT_DISCOVERY_MODEL = "google-gla:gemini-2.5-flash"


def _env(name: str, default: str) -> str:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def _env_bool(name: str, default: bool) -> bool:
    return _env(name, str(default)).strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    """Settings for a research run."""

    output_dir: Path = Field(default=Path("research"), description="Screenshots and report directory")
    headless: bool = Field(default=True, description="Run the browser without a window")
    max_concurrency: int = Field(default=1, ge=1, le=8, description="Platforms researched in parallel")
    platform_timeout_s: float = Field(default=120.0, gt=0, description="Hard budget per platform")
    navigation_timeout_ms: int = Field(default=30_000, gt=0, description="Page navigation timeout")
    settle_ms: int = Field(default=2_000, ge=0, description="Extra wait after network idle")
    detail_settle_ms: int = Field(default=3_000, ge=0, description="Extra wait after opening a course page")
    max_prices_per_selector: int = Field(default=5, ge=1, description="Price elements read per selector")
    drill_down: bool = Field(default=True, description="Open the first course page for extra details")
    live_discovery: bool = Field(default=False, description="Also ask a web-search agent for platforms")
    discovery_model: str = Field(default=DEFAULT_DISCOVERY_MODEL, description="Model used by the web-search agent")

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            output_dir=Path(_env("OUTPUT_DIR", "research")),
            headless=_env_bool("HEADLESS", True),
            max_concurrency=int(_env("MAX_CONCURRENCY", "1")),
            platform_timeout_s=float(_env("PLATFORM_TIMEOUT_S", "120")),
            navigation_timeout_ms=int(_env("NAVIGATION_TIMEOUT_MS", "30000")),
            settle_ms=int(_env("SETTLE_MS", "2000")),
            detail_settle_ms=int(_env("DETAIL_SETTLE_MS", "3000")),
            drill_down=_env_bool("DRILL_DOWN", True),
            live_discovery=_env_bool("LIVE_DISCOVERY", False),
            discovery_model=_env("DISCOVERY_MODEL", DEFAULT_DISCOVERY_MODEL),
        )
