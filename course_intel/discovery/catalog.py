"""Static knowledge base of course platforms, global and per region."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from course_intel.models import PlatformProfile, PlatformScope

REGION_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "netherlands": "netherlands",
        "nederland": "netherlands",
        "nl": "netherlands",
        "holland": "netherlands",
        "germany": "germany",
        "deutschland": "germany",
        "de": "germany",
        "france": "france",
        "fr": "france",
        "spain": "spain",
        "españa": "spain",
        "es": "spain",
        "japan": "japan",
        "jp": "japan",
        "india": "india",
        "in": "india",
        "sweden": "nordic",
        "norway": "nordic",
        "denmark": "nordic",
        "finland": "nordic",
    }
)


@dataclass(frozen=True)
class PlatformCatalog:
    """Read-only platform catalog injected into the detector."""

    global_platforms: tuple[PlatformProfile, ...] = ()
    regional_platforms: Mapping[str, tuple[PlatformProfile, ...]] = field(default_factory=dict)
    region_aliases: Mapping[str, str] = field(default_factory=lambda: REGION_ALIASES)

    def resolve_region(self, region: str) -> str:
        """Map a free-text region to its catalog key; unknown regions pass through lower-cased."""
        key = region.strip().lower()
        return self.region_aliases.get(key, key)

    def regional(self, region_key: str) -> tuple[PlatformProfile, ...]:
        return tuple(self.regional_platforms.get(region_key, ()))


def _regional(name: str, url: str, languages: tuple[str, ...], specialties: tuple[str, ...]) -> PlatformProfile:
    return PlatformProfile(
        name=name,
        base_url=url,
        scope=PlatformScope.REGIONAL,
        languages=languages,
        specialties=specialties,
    )


GLOBAL_PLATFORMS: tuple[PlatformProfile, ...] = (
    PlatformProfile(
        name="Udemy",
        base_url="https://www.udemy.com",
        scope=PlatformScope.GLOBAL,
        languages=("en", "es", "fr", "de", "it", "pt", "nl", "ja", "ko", "zh"),
        specialties=("programming", "business", "design"),
    ),
    PlatformProfile(
        name="Coursera",
        base_url="https://www.coursera.org",
        scope=PlatformScope.GLOBAL,
        languages=("en", "es", "fr", "de", "pt", "ru", "zh", "ar", "it"),
        specialties=("academic", "professional", "certificates"),
    ),
    PlatformProfile(
        name="LinkedIn Learning",
        base_url="https://www.linkedin.com/learning",
        scope=PlatformScope.GLOBAL,
        languages=("en", "es", "fr", "de", "pt", "ja", "zh"),
        specialties=("business", "technology", "creative"),
    ),
)

REGIONAL_PLATFORMS: Mapping[str, tuple[PlatformProfile, ...]] = MappingProxyType(
    {
        "netherlands": (
            _regional("Studytube", "https://www.studytube.nl", ("nl", "en"), ("corporate", "professional")),
            _regional("LOI", "https://www.loi.nl", ("nl",), ("vocational", "professional")),
            _regional("NCOI", "https://www.ncoi.nl", ("nl",), ("business", "management")),
            _regional("Computrain", "https://www.computrain.nl", ("nl", "en"), ("IT", "technology")),
            _regional("Springest", "https://www.springest.nl", ("nl",), ("aggregator", "marketplace")),
        ),
        "germany": (
            _regional("Lecturio", "https://www.lecturio.de", ("de", "en"), ("medical", "law", "business")),
            _regional("Oncampus", "https://www.oncampus.de", ("de",), ("academic", "professional")),
            _regional("ILS", "https://www.ils.de", ("de",), ("distance learning", "certificates")),
        ),
        "france": (
            _regional("OpenClassrooms", "https://openclassrooms.com", ("fr", "en"), ("programming", "digital")),
            _regional("Elephorm", "https://www.elephorm.com", ("fr",), ("creative", "design", "video")),
            _regional("Tuto.com", "https://www.tuto.com", ("fr",), ("creative", "technical")),
        ),
        "spain": (
            _regional("Tutellus", "https://www.tutellus.com", ("es",), ("general", "blockchain")),
            _regional("Domestika", "https://www.domestika.org", ("es", "en", "pt"), ("creative", "design", "crafts")),
            _regional("Platzi", "https://platzi.com", ("es", "en"), ("technology", "programming")),
        ),
        "japan": (
            _regional("Schoo", "https://schoo.jp", ("ja",), ("business", "technology")),
            _regional("Progate", "https://prog-8.com", ("ja", "en"), ("programming",)),
            _regional("Aidemy", "https://aidemy.net", ("ja",), ("AI", "data science")),
        ),
        "india": (
            _regional("Byju's", "https://byjus.com", ("en", "hi"), ("academic", "test prep")),
            _regional("UpGrad", "https://www.upgrad.com", ("en",), ("professional", "higher education")),
            _regional("Simplilearn", "https://www.simplilearn.com", ("en",), ("certifications", "professional")),
            _regional("Vedantu", "https://www.vedantu.com", ("en", "hi"), ("academic", "school")),
        ),
        "nordic": (
            _regional("Coursio", "https://coursio.com", ("sv", "no", "da", "en"), ("business", "professional")),
            _regional("Learnifier", "https://learnifier.com", ("sv", "en"), ("corporate", "training")),
        ),
    }
)


def default_catalog() -> PlatformCatalog:
    """The catalog shipped with the package."""
    return PlatformCatalog(global_platforms=GLOBAL_PLATFORMS, regional_platforms=REGIONAL_PLATFORMS)
