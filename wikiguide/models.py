"""
Data records produced by the guide engine.

All records are frozen: a CityGuide is built once, cached, and handed to every
caller by reference until it expires.
"""

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Optional, List, Dict, Any


INTRODUCTION_TITLE = "Introduction"


class SourceKind(Enum):
    """Kind of content source."""
    TRAVEL_WIKI = "travel_wiki"
    ENCYCLOPEDIA = "encyclopedia"


@dataclass(frozen=True)
class WikiSource:
    """One candidate content source (a MediaWiki site in one language)."""
    kind: SourceKind
    language: str
    domain: str

    @property
    def rest_base(self) -> str:
        return f"https://{self.domain}/api/rest_v1"

    @property
    def api_url(self) -> str:
        return f"https://{self.domain}/w/api.php"

    @property
    def is_travel_wiki(self) -> bool:
        return self.kind is SourceKind.TRAVEL_WIKI

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "language": self.language, "domain": self.domain}


@dataclass(frozen=True)
class Article:
    """Short summary record for a place, normalized across sources."""
    title: str
    extract: str
    canonical_url: str
    source: WikiSource
    thumbnail: Optional[str] = None
    last_modified: Optional[str] = None

    @property
    def source_language(self) -> str:
        """Language that actually served the article (may differ from the request)."""
        return self.source.language

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "extract": self.extract,
            "canonical_url": self.canonical_url,
            "thumbnail": self.thumbnail,
            "source_language": self.source_language,
            "last_modified": self.last_modified,
            "source": self.source.to_dict(),
        }


@dataclass(frozen=True)
class Section:
    """A titled span of an article's plain-text body."""
    title: str
    content: str
    level: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Image:
    url: str
    title: str
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class CitySearchResult:
    title: str
    description: Optional[str] = None
    thumbnail: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ClassifiedContent:
    """Semantic slots filled from an ordered section list."""
    summary: Optional[str] = None
    history: Optional[str] = None
    culture: Optional[str] = None
    tourism: Optional[str] = None


@dataclass(frozen=True)
class CityGuide:
    """Aggregate guide for one place."""
    city_name: str
    summary: str
    article: Article
    history: Optional[str] = None
    culture: Optional[str] = None
    tourism: Optional[str] = None
    tips: List[str] = field(default_factory=list)
    images: List[Image] = field(default_factory=list)
    sections: List[Section] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "city_name": self.city_name,
            "summary": self.summary,
            "history": self.history,
            "culture": self.culture,
            "tourism": self.tourism,
            "tips": list(self.tips),
            "images": [image.to_dict() for image in self.images],
            "article": self.article.to_dict(),
            "sections": [section.to_dict() for section in self.sections],
        }
