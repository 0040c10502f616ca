"""Tests for FastAPI server."""

from unittest.mock import AsyncMock, patch

import httpx
import pytest
from fastapi import FastAPI

from course_intel.discovery import AgentPlatformFinder, PlatformCatalog, PlatformDetector
from course_intel.exceptions import BrowserLaunchError, ExtractionError
from course_intel.models import (
    FeatureFlags,
    PlatformFailure,
    PlatformProfile,
    PlatformScope,
    PricingModel,
    PricingSnapshot,
    ResearchRecord,
    ResearchRun,
    StructureSnapshot,
)
from course_intel.server import get_app


def _make_research_run(topic: str = "python") -> ResearchRun:
    """Helper to create a valid ResearchRun for mocking."""
    return ResearchRun(
        topic=topic,
        records=[
            ResearchRecord(
                platform="Udemy",
                url="https://www.udemy.com/courses/search/?q=python",
                pricing=PricingSnapshot(model=PricingModel.TIERED, prices=["$10", "$20", "$30"]),
                features=FeatureFlags(video=True),
                structure=StructureSnapshot(module_count=8, average_lessons_per_module=5),
            )
        ],
        failures=[PlatformFailure(platform="LOI", url="https://www.loi.nl", error_type="NavigationError", reason="x")],
        duration_ms=1500,
    )


@pytest.fixture
def app() -> FastAPI:
    catalog = PlatformCatalog(
        global_platforms=(
            PlatformProfile(
                name="Udemy", base_url="https://www.udemy.com", scope=PlatformScope.GLOBAL, languages=("en",)
            ),
        ),
        regional_platforms={
            "netherlands": (
                PlatformProfile(
                    name="LOI", base_url="https://www.loi.nl", scope=PlatformScope.REGIONAL, languages=("nl",)
                ),
            )
        },
    )
    return get_app(detector=PlatformDetector(catalog=catalog))


class TestDiscoverEndpoint:
    """Tests for /discover endpoint."""

    @pytest.mark.asyncio
    async def test__valid_query__returns_ranked_platforms(self, app: FastAPI) -> None:
        async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as client:
            response = await client.post("/discover", json={"topic": "python", "region": "NL", "language": "nl"})

        assert response.status_code == 200
        data = response.json()
        assert [p["platform"]["name"] for p in data["platforms"]] == ["LOI", "Udemy"]
        assert data["search_urls"] == [
            "https://www.loi.nl/zoeken?q=python",
            "https://www.udemy.com/courses/search/?q=python",
        ]

    @pytest.mark.asyncio
    async def test__empty_topic__returns_422(self, app: FastAPI) -> None:
        async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as client:
            response = await client.post("/discover", json={"topic": ""})
            assert response.status_code == 422
            assert "detail" in response.json()

    @pytest.mark.asyncio
    async def test__live_discovery_env__adds_agent_platforms(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("COURSE_INTEL_LIVE_DISCOVERY", "true")
        found = PlatformProfile(
            name="Leerwerk", base_url="https://leerwerk.nl", scope=PlatformScope.LOCAL, languages=("nl",)
        )
        with patch.object(AgentPlatformFinder, "find", new=AsyncMock(return_value=[found])):
            live_app = get_app()
            async with httpx.AsyncClient(transport=httpx.ASGITransport(app=live_app), base_url="http://test") as client:
                response = await client.post("/discover", json={"topic": "python", "region": "Atlantis"})

        assert response.status_code == 200
        names = [p["platform"]["name"] for p in response.json()["platforms"]]
        assert "Leerwerk" in names
        assert len(names) == 4


class TestResearchEndpoint:
    """Tests for /research endpoint."""

    @pytest.mark.asyncio
    async def test__valid_query__returns_200(self, app: FastAPI) -> None:
        mock = AsyncMock(return_value=_make_research_run())
        with patch("course_intel.server.run_research", new=mock):
            async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as client:
                response = await client.post(
                    "/research", json={"topic": "python", "region": "NL", "language": "nl", "max_concurrency": 2}
                )

        assert response.status_code == 200
        data = response.json()
        assert data["topic"] == "python"
        assert data["records"][0]["pricing"]["model"] == "tiered"
        assert data["failures"][0]["platform"] == "LOI"
        assert mock.await_args.args == ("python",)
        assert mock.await_args.kwargs["region"] == "NL"
        assert mock.await_args.kwargs["max_concurrency"] == 2

    @pytest.mark.asyncio
    async def test__topic_too_long__returns_422(self, app: FastAPI) -> None:
        async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as client:
            response = await client.post("/research", json={"topic": "x" * 201})
            assert response.status_code == 422

    @pytest.mark.asyncio
    async def test__concurrency_out_of_range__returns_422(self, app: FastAPI) -> None:
        async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as client:
            response = await client.post("/research", json={"topic": "python", "max_concurrency": 10})
            assert response.status_code == 422

    @pytest.mark.asyncio
    async def test__browser_launch_error__returns_503(self, app: FastAPI) -> None:
        with patch(
            "course_intel.server.run_research",
            new=AsyncMock(side_effect=BrowserLaunchError(reason="Executable doesn't exist")),
        ):
            async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as client:
                response = await client.post("/research", json={"topic": "python"})

        assert response.status_code == 503
        data = response.json()
        assert data["error"] == "BrowserLaunchError"
        assert data["detail"] == "Unable to start the browser. Please try again later."

    @pytest.mark.asyncio
    async def test__other_domain_error__returns_422(self, app: FastAPI) -> None:
        with patch(
            "course_intel.server.run_research",
            new=AsyncMock(side_effect=ExtractionError(platform="Udemy", reason="broken")),
        ):
            async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as client:
                response = await client.post("/research", json={"topic": "python"})

        assert response.status_code == 422
        assert response.json()["detail"] == "An error occurred processing your request."

    @pytest.mark.asyncio
    async def test__unexpected_error__returns_500(self, app: FastAPI) -> None:
        with patch("course_intel.server.run_research", new=AsyncMock(side_effect=RuntimeError("Unexpected error"))):
            async with httpx.AsyncClient(
                transport=httpx.ASGITransport(app=app, raise_app_exceptions=False), base_url="http://test"
            ) as client:
                response = await client.post("/research", json={"topic": "python"})
                assert response.status_code == 500
                assert response.json()["error"] == "InternalServerError"


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    @pytest.mark.asyncio
    async def test__health__returns_ok(self, app: FastAPI) -> None:
        async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/health")
            assert response.status_code == 200
            data = response.json()
            assert data["status"] == "ok"
            assert data["version"]

    @pytest.mark.asyncio
    async def test__liveness__returns_alive(self, app: FastAPI) -> None:
        async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/health/liveness")
            assert response.json()["status"] == "alive"

    @pytest.mark.asyncio
    async def test__readiness__returns_ready(self, app: FastAPI) -> None:
        async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/health/readiness")
            assert response.json()["status"] == "ready"


class TestAppFactory:
    """Tests for app factory function."""

    def test__get_app__has_routes(self) -> None:
        routes = [route.path for route in get_app().routes]
        for path in ("/discover", "/research", "/research/stream", "/health", "/health/liveness"):
            assert path in routes
