"""
Guide service: public entry points of the destination-guide engine.

GuideService wires the providers to one HTTP client and one cache and
assembles CityGuide records. Every public method returns a value or a
well-defined empty value (None / []); nothing raises to the caller.
"""

import logging
from typing import List, Optional

from wikiguide.cache import TTLCache, make_cache_key
from wikiguide.config import Config, get_config
from wikiguide.models import (
    INTRODUCTION_TITLE,
    Article,
    CityGuide,
    CitySearchResult,
    Image,
    Section,
)
from wikiguide.providers.article_provider import ArticleProvider
from wikiguide.providers.base import ProviderMetadata
from wikiguide.providers.http import WikiHttpClient
from wikiguide.providers.image_provider import ImageProvider
from wikiguide.providers.search_provider import SearchProvider
from wikiguide.providers.section_provider import SectionProvider
from wikiguide.providers.sources import SourceResolver
from wikiguide.providers.tip_provider import TipProvider
from wikiguide.src.classifier import classify_sections, first_nonempty, truncate
from wikiguide.utils.async_utils import gather_settled

logger = logging.getLogger(__name__)


class GuideService:
    """Facade over the article, section, tip, image and search providers."""

    def __init__(self, http=None, cache: Optional[TTLCache] = None, config: Optional[Config] = None):
        """
        Args:
            http: Client exposing ``async get_json(url, params=None)``;
                defaults to a WikiHttpClient on the shared session
            cache: TTL cache; defaults to a fresh 7-day cache
            config: Configuration, defaults to the global instance
        """
        self.config = config or get_config()
        self.http = http or WikiHttpClient(config=self.config)
        self.cache = cache if cache is not None else TTLCache()

        resolver = SourceResolver(self.config)
        self.articles = ArticleProvider(self.http, self.cache, resolver, self.config)
        self.sections = SectionProvider(self.http, self.cache, resolver, self.config)
        self.tips = TipProvider(self.http, self.cache, resolver, self.config)
        self.images = ImageProvider(self.http, self.cache, self.config)
        self.search = SearchProvider(self.http, self.cache, resolver, self.config)

    def provider_metadata(self) -> List[ProviderMetadata]:
        providers = (self.articles, self.sections, self.tips, self.images, self.search)
        return [provider.get_metadata() for provider in providers]

    def _language(self, language: Optional[str]) -> str:
        return (language or self.config.language_config.default).strip().lower()

    async def get_city_guide(self, city_name: str, language: Optional[str] = None) -> Optional[CityGuide]:
        """Build (or return the cached) guide for ``city_name``.

        None means no source had usable content for the place.
        """
        if not city_name or not city_name.strip():
            return None

        language = self._language(language)
        key = make_cache_key("city_guide", city_name, language)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        try:
            guide = await self._build_guide(city_name.strip(), language)
        except Exception:
            logger.exception(f"Guide assembly failed for '{city_name}'")
            return None

        if guide is not None:
            self.cache.set(key, guide)
        return guide

    async def _build_guide(self, city_name: str, language: str) -> Optional[CityGuide]:
        logger.info(f"Building guide for '{city_name}' ({language})")
        article = await self.articles.get_article(city_name, language)
        if article is None:
            logger.info(f"No article found for '{city_name}'")
            return None

        # Sub-fetches go to the source that actually served the article
        source = article.source
        sections, tips, images = await gather_settled(
            [
                self.sections.get_sections(city_name, source),
                self.tips.extract_tips(city_name, source, language),
                self.images.get_images(city_name, source.language, self.config.image_config.guide_limit),
            ],
            defaults=[[], [], []],
            names=["sections", "tips", "images"],
        )
        logger.info(
            f"Guide for '{city_name}': {len(sections)} sections, {len(tips)} tips, {len(images)} images"
        )
        return assemble_guide(article, sections, tips, images)

    async def search_cities(self, query: str, language: Optional[str] = None, limit: int = 10) -> List[CitySearchResult]:
        try:
            return await self.search.search_cities(query, self._language(language), limit)
        except Exception:
            logger.exception(f"City search failed for '{query}'")
            return []

    async def get_wikipedia_article(self, city_name: str, language: Optional[str] = None) -> Optional[Article]:
        try:
            return await self.articles.get_article(city_name, self._language(language))
        except Exception:
            logger.exception(f"Article lookup failed for '{city_name}'")
            return None

    async def get_article_sections(self, city_name: str, language: Optional[str] = None) -> List[Section]:
        try:
            return await self.sections.get_article_sections(city_name, self._language(language))
        except Exception:
            logger.exception(f"Section lookup failed for '{city_name}'")
            return []

    async def get_article_images(self, city_name: str, language: Optional[str] = None, limit: int = 10) -> List[Image]:
        try:
            return await self.images.get_images(city_name, self._language(language), limit)
        except Exception:
            logger.exception(f"Image lookup failed for '{city_name}'")
            return []

    async def get_travel_tips(self, city_name: str, language: Optional[str] = None) -> List[str]:
        try:
            return await self.tips.get_travel_tips(city_name, self._language(language))
        except Exception:
            logger.exception(f"Tip lookup failed for '{city_name}'")
            return []


def assemble_guide(article: Article, sections: List[Section], tips: List[str], images: List[Image]) -> CityGuide:
    """Compose the aggregate from the independently fetched parts."""
    if not sections:
        sections = [Section(title=INTRODUCTION_TITLE, content=article.extract, level=1)]

    slots = classify_sections(sections)
    return CityGuide(
        city_name=article.title,
        summary=first_nonempty(slots.summary, truncate(article.extract)),
        history=slots.history,
        culture=slots.culture,
        tourism=slots.tourism,
        tips=list(tips),
        images=list(images),
        article=article,
        sections=list(sections),
    )
