"""
Article fetcher backed by the MediaWiki REST summary endpoint.

The same endpoint shape is served by the travel wiki and the encyclopedia, so
one normalizer produces Article records for either.
"""

import re
from typing import Any, Dict, Optional
from urllib.parse import quote

from wikiguide.cache import make_cache_key
from wikiguide.models import Article, WikiSource
from wikiguide.providers.base import ProviderMetadata, WikiProvider
from wikiguide.providers.sources import SourceResolver


def title_slug(title: str) -> str:
    """Path segment for a page title: spaces become underscores, the rest is percent-encoded."""
    slug = re.sub(r"\s+", "_", title.strip())
    return quote(slug, safe="")


class ArticleProvider(WikiProvider):
    """Fetch short summary records for places."""

    metadata = ProviderMetadata(
        name="article",
        description="REST page summary from the travel wiki or encyclopedia",
        capabilities=["summary", "thumbnail"],
    )

    def __init__(self, http, cache, resolver: Optional[SourceResolver] = None, config=None):
        super().__init__(http, cache, config)
        self.resolver = resolver or SourceResolver(self.config)

    async def fetch(self, place: str, source: WikiSource) -> Optional[Article]:
        """One summary request against one source.

        Returns None when the record is unusable (no title, no text, or a
        disambiguation page). Upstream errors propagate as ProviderError; the
        resolver decides whether to move on.
        """
        url = f"{source.rest_base}/page/summary/{title_slug(place)}"
        data = await self.http.get_json(url)
        if not isinstance(data, dict):
            return None
        return self._to_article(data, source, url)

    def _to_article(self, data: Dict[str, Any], source: WikiSource, request_url: str) -> Optional[Article]:
        if data.get("type") == "disambiguation":
            self.logger.info(f"Skipping disambiguation page on {source.domain}: {data.get('title')}")
            return None

        title = (data.get("title") or "").strip()
        extract = (data.get("extract") or data.get("description") or "").strip()
        if not title or not extract:
            return None

        canonical_url = (
            (data.get("content_urls") or {}).get("desktop", {}).get("page")
            or request_url
        )
        thumbnail = (
            (data.get("thumbnail") or {}).get("source")
            or (data.get("originalimage") or {}).get("source")
        )
        return Article(
            title=title,
            extract=extract,
            canonical_url=canonical_url,
            source=source,
            thumbnail=thumbnail,
            last_modified=data.get("timestamp"),
        )

    async def get_article(self, place: str, language: Optional[str]) -> Optional[Article]:
        """Resolve ``place`` across the source chain, with caching."""
        if not place or not place.strip():
            return None

        language = (language or self.config.language_config.default).strip().lower()
        key = make_cache_key("article", place, language)
        cached = self._cached(key)
        if cached is not None:
            return cached

        resolved = await self.resolver.resolve(language, lambda source: self.fetch(place, source))
        if resolved is None:
            self.logger.info(f"No article for '{place}' in any source")
            return None

        article = resolved.value
        if article.source_language != language:
            self.logger.info(
                f"Article for '{place}' served by fallback {article.source.domain}"
            )
        self._store(key, article)
        return article
