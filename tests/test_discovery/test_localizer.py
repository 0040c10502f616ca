"""Tests for localized search phrase generation."""

from course_intel.discovery.localizer import QueryLocalizer
from course_intel.models import SearchQueryContext


class TestBuildQueries:
    def test__dutch__phrase_count_and_order(self) -> None:
        context = SearchQueryContext(topic="python", region="Amsterdam", language="nl")
        queries = QueryLocalizer().build_queries(context)

        # 3 course words x 3 online words x 2 phrases, plus 3 platform phrases
        assert len(queries) == 21
        assert queries[:4] == [
            "online cursus python",
            "cursus python Amsterdam",
            "digitaal cursus python",
            "cursus python Amsterdam",
        ]
        assert queries[-3:] == [
            "platform cursus python",
            "website cursus python",
            "portaal cursus python",
        ]

    def test__language_code_is_case_insensitive(self) -> None:
        context = SearchQueryContext(topic="Kochen", language="DE")
        assert QueryLocalizer().build_queries(context)[0] == "online Kurs Kochen"

    def test__empty_region__no_stray_whitespace(self) -> None:
        queries = QueryLocalizer().build_queries(SearchQueryContext(topic="python", language="fr"))
        assert queries[1] == "cours python"
        assert all(query == query.strip() and "  " not in query for query in queries)

    def test__unsupported_language__english_fallback(self) -> None:
        context = SearchQueryContext(topic="python", region="Tokyo", language="xx")
        assert QueryLocalizer().build_queries(context) == [
            "online courses python Tokyo",
            "e-learning platform python Tokyo",
            "training courses python Tokyo",
        ]

    def test__english__uses_fallback_templates(self) -> None:
        queries = QueryLocalizer().build_queries(SearchQueryContext(topic="python"))
        assert queries == ["online courses python", "e-learning platform python", "training courses python"]

    def test__custom_vocabulary(self) -> None:
        localizer = QueryLocalizer(
            {"sv": {"course": ("kurs",), "online": ("online",), "platform": ("plattform",), "domain": ()}}
        )
        queries = localizer.build_queries(SearchQueryContext(topic="python", region="Stockholm", language="sv"))
        assert queries == ["online kurs python", "kurs python Stockholm", "plattform kurs python"]


class TestSupports:
    def test__supported_languages(self) -> None:
        localizer = QueryLocalizer()
        assert localizer.supports("nl")
        assert localizer.supports("ES")
        assert not localizer.supports("en")
