"""Pydantic models for platform discovery and course research records."""

from enum import Enum

from pydantic import BaseModel, Field, field_validator

_FROZEN = {"frozen": True}


class PlatformScope(str, Enum):
    """Reach of a course platform."""

    GLOBAL = "global"
    REGIONAL = "regional"
    LOCAL = "local"


class CourseType(str, Enum):
    PROFESSIONAL = "professional"
    ACADEMIC = "academic"
    HOBBY = "hobby"


class PricingModel(str, Enum):
    ONE_TIME = "one-time"
    SUBSCRIPTION = "subscription"
    TIERED = "tiered"


class Currency(str, Enum):
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"


# --- Discovery ---


class PlatformProfile(BaseModel):
    """A known or discovered course-selling website."""

    model_config = _FROZEN

    name: str = Field(min_length=1, description="Display name", examples=["Udemy"])
    base_url: str = Field(
        min_length=1,
        description="Canonical root URL, without trailing slash",
        examples=["https://www.udemy.com"],
    )
    scope: PlatformScope = Field(description="Reach of the platform", examples=["global"])
    languages: tuple[str, ...] = Field(
        min_length=1,
        description="ISO language codes the platform supports",
        examples=[("en", "nl")],
    )
    specialties: tuple[str, ...] | None = Field(
        default=None,
        description="Topical tags; None when the platform is a generalist",
        examples=[("programming", "business")],
    )

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("languages")
    @classmethod
    def _lowercase_languages(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(lang.lower() for lang in value)


class SearchQueryContext(BaseModel):
    """Normalized inputs of one discovery run."""

    model_config = _FROZEN

    topic: str = Field(default="", description="Free-text course topic", examples=["IT programming"])
    region: str = Field(default="", description="Free-text region name or code", examples=["Nederland"])
    language: str = Field(default="en", min_length=2, description="ISO language code", examples=["nl"])
    course_type: CourseType | None = Field(default=None, description="Optional course category")

    @field_validator("language")
    @classmethod
    def _normalize_language(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("topic", "region")
    @classmethod
    def _strip(cls, value: str) -> str:
        return value.strip()


class RankedPlatform(BaseModel):
    """A platform annotated with its search URL for one query.

    The position inside the containing list is the relevance rank.
    """

    model_config = _FROZEN

    platform: PlatformProfile
    search_url: str = Field(
        min_length=1,
        description="Platform search page for the query topic",
        examples=["https://www.udemy.com/courses/search/?q=python"],
    )

    @property
    def name(self) -> str:
        return self.platform.name


# --- Extraction ---


class PricingSnapshot(BaseModel):
    """Pricing signals scraped from a platform page."""

    model_config = _FROZEN

    model: PricingModel = Field(description="How the platform charges", examples=["subscription"])
    prices: list[str] = Field(
        default_factory=list,
        description="Raw price strings in DOM order, duplicates kept",
        examples=[["$19.99/month", "$199/year"]],
    )
    currency: Currency = Field(default=Currency.USD, description="Best-effort currency guess")
    discounts: list[str] | None = Field(default=None, description="Raw discount strings, if any")


class FeatureFlags(BaseModel):
    """Keyword-detected platform capabilities. Flags are independent."""

    model_config = _FROZEN

    video: bool = False
    quizzes: bool = False
    certificate: bool = False
    downloads: bool = False
    mobile: bool = False
    forums: bool = False
    projects: bool = False
    live_support: bool = False

    def enabled(self) -> list[str]:
        """Names of the flags that are set, in declaration order."""
        return [name for name, value in self.model_dump().items() if value]


class StructureSnapshot(BaseModel):
    """Curriculum shape of a course or search results page."""

    model_config = _FROZEN

    module_count: int = Field(ge=0, le=20, description="Number of modules, capped at 20", examples=[8])
    average_lessons_per_module: int = Field(ge=0, description="Rounded lessons per module", examples=[5])
    content_types: list[str] = Field(default_factory=list, examples=[["video", "text", "quiz"]])
    total_duration: str | None = Field(default=None, description="Free-text duration", examples=["12 hours"])


class ResearchRecord(BaseModel):
    """Structured result of researching one platform."""

    model_config = _FROZEN

    platform: str = Field(min_length=1, examples=["Udemy"])
    url: str = Field(min_length=1, description="Search URL that was visited")
    pricing: PricingSnapshot
    features: FeatureFlags
    structure: StructureSnapshot
    screenshots: list[str] = Field(default_factory=list, description="Screenshot file paths")


class PlatformFailure(BaseModel):
    """A platform that was skipped because its research failed."""

    model_config = _FROZEN

    platform: str
    url: str
    error_type: str = Field(examples=["NavigationError"])
    reason: str


class ResearchRun(BaseModel):
    """Complete outcome of one research run."""

    topic: str = Field(description="Topic that was researched", examples=["python"])
    records: list[ResearchRecord] = Field(
        default_factory=list,
        description="One record per successfully researched platform, in ranking order",
    )
    failures: list[PlatformFailure] = Field(default_factory=list, description="Platforms that were skipped")
    cancelled: list[str] = Field(
        default_factory=list,
        description="Platforms never attempted because the run was cancelled",
    )
    duration_ms: int = Field(default=0, ge=0, description="Wall-clock duration of the run")
