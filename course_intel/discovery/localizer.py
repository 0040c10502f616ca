"""Localized search phrases for finding course platforms in a target language."""

from collections.abc import Mapping
from types import MappingProxyType

from course_intel.models import SearchQueryContext

# language -> vocabulary set -> synonyms; the order of synonyms drives phrase order
TRANSLATIONS: Mapping[str, Mapping[str, tuple[str, ...]]] = MappingProxyType(
    {
        "nl": {
            "course": ("cursus", "opleiding", "training"),
            "online": ("online", "digitaal", "e-learning"),
            "platform": ("platform", "website", "portaal"),
            "domain": ("IT", "ICT", "informatica", "programmeren"),
        },
        "de": {
            "course": ("Kurs", "Schulung", "Weiterbildung"),
            "online": ("online", "digital", "E-Learning"),
            "platform": ("Plattform", "Portal", "Webseite"),
            "domain": ("IT", "Informatik", "Programmierung"),
        },
        "fr": {
            "course": ("cours", "formation", "apprentissage"),
            "online": ("en ligne", "numérique", "e-learning"),
            "platform": ("plateforme", "site", "portail"),
            "domain": ("informatique", "IT", "programmation"),
        },
        "es": {
            "course": ("curso", "formación", "capacitación"),
            "online": ("en línea", "online", "digital"),
            "platform": ("plataforma", "sitio", "portal"),
            "domain": ("informática", "TI", "programación"),
        },
    }
)

ENGLISH_FALLBACK_TEMPLATES = (
    "online courses {topic} {region}",
    "e-learning platform {topic} {region}",
    "training courses {topic} {region}",
)


def _phrase(*parts: str) -> str:
    return " ".join(" ".join(parts).split())


class QueryLocalizer:
    """Builds natural-language search phrases from per-language vocabulary."""

    def __init__(self, translations: Mapping[str, Mapping[str, tuple[str, ...]]] = TRANSLATIONS) -> None:
        self.translations = translations

    def supports(self, language: str) -> bool:
        return language.lower() in self.translations

    def build_queries(self, context: SearchQueryContext) -> list[str]:
        """Return search phrases for the context, never an empty list.

        Duplicates are kept; order follows the synonym lists.
        """
        vocabulary = self.translations.get(context.language)
        if not vocabulary:
            return [
                _phrase(template.format(topic=context.topic, region=context.region))
                for template in ENGLISH_FALLBACK_TEMPLATES
            ]

        courses = vocabulary["course"]
        queries: list[str] = []
        for course_word in courses:
            for online_word in vocabulary["online"]:
                queries.append(_phrase(online_word, course_word, context.topic))
                queries.append(_phrase(course_word, context.topic, context.region))

        for platform_word in vocabulary["platform"]:
            queries.append(_phrase(platform_word, courses[0], context.topic))

        return queries
