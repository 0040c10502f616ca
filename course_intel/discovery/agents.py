"""PydanticAI web-search agent backing live platform discovery."""

from functools import lru_cache
from typing import Any

from pydantic import BaseModel, Field, ValidationError
from pydantic_ai import Agent, WebSearchTool

from course_intel.config import DEFAULT_DISCOVERY_MODEL, Settings
from course_intel.discovery.detector import PlatformDetector
from course_intel.discovery.localizer import QueryLocalizer
from course_intel.logging import get_logger
from course_intel.models import PlatformProfile, PlatformScope, SearchQueryContext

log = get_logger("course_intel.discovery.agents")


class DiscoveredPlatform(BaseModel):
    """A course platform found through web search."""

    name: str = Field(description="Platform name as shown on its website", examples=["Studytube"])
    url: str = Field(description="Root URL of the platform", examples=["https://www.studytube.nl"])
    languages: list[str] = Field(
        default_factory=list,
        description="ISO codes of the languages the platform offers courses in",
        examples=[["nl", "en"]],
    )
    specialties: list[str] = Field(
        default_factory=list,
        description="Topics the platform focuses on",
        examples=[["corporate", "professional"]],
    )


class DiscoveredPlatforms(BaseModel):
    platforms: list[DiscoveredPlatform] = Field(
        default_factory=list,
        max_length=10,
        description="Course-selling platforms relevant to the searches, best first",
    )


def create_discovery_agent(model: Any = DEFAULT_DISCOVERY_MODEL) -> Agent[None, DiscoveredPlatforms]:
    """Uncached factory - use with TestModel for tests."""
    return Agent(
        model,
        instructions="""You are a market researcher looking for online course platforms.
        Run the given searches in the target language and collect websites that
        sell or host online courses.
        For every platform:
        - Use the root URL of the site, not a single course page
        - List the course languages it offers
        - List its topical specialties, if it has any
        Skip blogs, news articles, review sites and marketplaces for physical goods.
        Never invent platforms that did not appear in the search results.""",
        builtin_tools=[WebSearchTool()],
        output_type=DiscoveredPlatforms,
        instrument=True,
        name="discovery_agent",
    )


@lru_cache(maxsize=1)
def get_discovery_agent(model: str = DEFAULT_DISCOVERY_MODEL) -> Agent[None, DiscoveredPlatforms]:
    """Cached getter for production."""
    return create_discovery_agent(model)


def clear_agent_cache() -> None:
    get_discovery_agent.cache_clear()


class AgentPlatformFinder:
    """External platform finder that asks a web-search agent for local platforms."""

    def __init__(
        self,
        agent: Agent[None, DiscoveredPlatforms] | None = None,
        localizer: QueryLocalizer | None = None,
        max_queries: int = 5,
        model: str = DEFAULT_DISCOVERY_MODEL,
    ) -> None:
        self.agent = agent
        self.model = model
        self.localizer = localizer or QueryLocalizer()
        self.max_queries = max_queries

    def build_prompt(self, context: SearchQueryContext) -> str:
        queries = self.localizer.build_queries(context)[: self.max_queries]
        searches = "\n".join(f"- {query}" for query in queries)
        return (
            f"Topic: {context.topic}\n"
            f"Region: {context.region or 'any'}\n"
            f"Language: {context.language}\n"
            f"Searches:\n{searches}\n\n"
            "Find online course platforms for this topic and region."
        )

    async def find(self, context: SearchQueryContext) -> list[PlatformProfile]:
        agent = self.agent or get_discovery_agent(self.model)
        result = await agent.run(self.build_prompt(context))

        profiles: list[PlatformProfile] = []
        for found in result.output.platforms:
            if not found.url.strip():
                continue
            try:
                profiles.append(
                    PlatformProfile(
                        name=found.name.strip() or found.url,
                        base_url=found.url.strip(),
                        scope=PlatformScope.LOCAL,
                        languages=tuple(found.languages) or (context.language,),
                        specialties=tuple(found.specialties) or None,
                    )
                )
            except ValidationError as e:
                log.warning("discovery.agent.invalid_platform", url=found.url, error=str(e))

        log.info("discovery.agent.completed", found=len(profiles))
        return profiles


def create_platform_detector(settings: Settings) -> PlatformDetector:
    """Detector used by the CLI and the server. Live web-search discovery runs only when enabled."""
    if not settings.live_discovery:
        return PlatformDetector()
    log.info("discovery.live.enabled", model=settings.discovery_model)
    return PlatformDetector(finder=AgentPlatformFinder(model=settings.discovery_model))
