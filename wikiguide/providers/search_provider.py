"""
Typeahead city search over the source chain.

Travel-wiki results are already place-scoped and are returned as-is. The
encyclopedia is only a last resort, so its results go through a topical
filter that drops films, bands, people, companies and disambiguation pages.
"""

import re
from typing import Any, Dict, List, Optional, Tuple

from wikiguide.cache import make_cache_key
from wikiguide.models import CitySearchResult, WikiSource
from wikiguide.providers.base import ProviderError, ProviderMetadata, WikiProvider
from wikiguide.providers.sources import SourceResolver
from wikiguide.providers.utils import query_pages

SEARCH_BLACKLIST = (
    'anime', 'manga', 'filme', 'movie', 'série', 'series', 'personagem',
    'banda', 'álbum', 'jogador', 'ator', 'cantor', '(desambiguação)',
    'desambiguação', 'disambiguation', 'empresa', 'partido', 'film', 'band',
    'album', 'singer', 'actor', 'company', 'footballer',
)
SEARCH_WHITELIST = (
    'cidade', 'city', 'capital', 'país', 'country', 'estado', 'state', 'ilha',
    'island', 'localizada', 'located', 'turística', 'tourist', 'destino',
    'destination', 'town', 'município', 'municipality',
)
# Bare names this short are usually places ("Porto", "Rio de Janeiro")
MAX_UNQUALIFIED_TITLE_WORDS = 3
ENCYCLOPEDIA_OVERFETCH = 3


def _word_pattern(words) -> re.Pattern:
    # Whole words only: "band" must not reject "Bandung"
    alternatives = '|'.join(re.escape(w) for w in sorted(words, key=len, reverse=True))
    return re.compile(rf'(?<!\w)(?:{alternatives})(?!\w)', re.IGNORECASE)


_BLACKLIST_RE = _word_pattern(SEARCH_BLACKLIST)
_WHITELIST_RE = _word_pattern(SEARCH_WHITELIST)


def looks_like_destination(title: str, description: str = '') -> bool:
    """Topical filter applied to encyclopedia search hits."""
    combined = f"{title} {description}"
    if _BLACKLIST_RE.search(combined):
        return False
    if _WHITELIST_RE.search(combined):
        return True
    return len(title.split()) <= MAX_UNQUALIFIED_TITLE_WORDS


def parse_opensearch(data: Any) -> List[Tuple[str, str]]:
    """OpenSearch payload ``[query, [titles], [descriptions], [urls]]`` -> (title, description) pairs."""
    if not isinstance(data, list) or len(data) < 2:
        return []
    titles = data[1] or []
    descriptions = data[2] if len(data) > 2 and data[2] else []
    pairs = []
    for i, title in enumerate(titles):
        if not title:
            continue
        description = descriptions[i] if i < len(descriptions) else ''
        pairs.append((title, description or ''))
    return pairs


class SearchProvider(WikiProvider):
    """City name search for autocomplete."""

    metadata = ProviderMetadata(
        name="search",
        description="OpenSearch over travel wiki with filtered encyclopedia fallback",
        capabilities=["search", "thumbnails"],
    )

    def __init__(self, http, cache, resolver: Optional[SourceResolver] = None, config=None):
        super().__init__(http, cache, config)
        self.resolver = resolver or SourceResolver(self.config)

    async def _search_source(self, query: str, source: WikiSource, limit: int) -> List[Tuple[str, str]]:
        request_limit = limit if source.is_travel_wiki else limit * ENCYCLOPEDIA_OVERFETCH
        data = await self.http.get_json(source.api_url, params={
            "action": "opensearch",
            "format": "json",
            "search": query,
            "limit": str(request_limit),
            "namespace": "0",
            "redirects": "resolve",
        })
        pairs = parse_opensearch(data)
        if not source.is_travel_wiki:
            pairs = [(t, d) for t, d in pairs if looks_like_destination(t, d)]
        return pairs[:limit]

    async def _thumbnails(self, source: WikiSource, titles: List[str]) -> Dict[str, str]:
        try:
            data = await self.http.get_json(source.api_url, params={
                "action": "query",
                "format": "json",
                "formatversion": "2",
                "prop": "pageimages",
                "titles": "|".join(titles),
                "pithumbsize": "100",
                "pilimit": str(len(titles)),
            })
        except ProviderError as e:
            self.logger.warning(f"Thumbnail lookup failed on {source.domain}: {e}")
            return {}
        if not isinstance(data, dict):
            return {}

        normalized = {
            n.get("to"): n.get("from")
            for n in ((data.get("query") or {}).get("normalized") or [])
        }
        thumbs = {}
        for page in query_pages(data):
            source_url = (page.get("thumbnail") or {}).get("source")
            if source_url:
                title = page.get("title")
                thumbs[normalized.get(title, title)] = source_url
        return thumbs

    async def search_cities(self, query: str, language: Optional[str], limit: int = 10) -> List[CitySearchResult]:
        if not query or not query.strip() or limit <= 0:
            return []

        language = (language or self.config.language_config.default).strip().lower()
        key = make_cache_key("search_cities", query, language, limit)
        cached = self._cached(key)
        if cached is not None:
            return cached

        resolved = await self.resolver.resolve(
            language, lambda source: self._search_source(query.strip(), source, limit)
        )
        if resolved is None:
            return []

        pairs = resolved.value
        thumbs = await self._thumbnails(resolved.source, [title for title, _ in pairs])
        results = [
            CitySearchResult(title=title, description=description or None, thumbnail=thumbs.get(title))
            for title, description in pairs
        ]
        self._store(key, results)
        return results
