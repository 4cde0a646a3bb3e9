"""
Section parser: plain-text article body -> ordered sections.

The body comes from the TextExtracts API with ``exsectionformat=wiki``, which
keeps headings as ``== Title ==`` lines. Heading depth is ignored: everything
under the page title is level 2 and the lead text is the level 1
"Introduction".
"""

import re
from typing import List, Optional

from wikiguide.cache import make_cache_key
from wikiguide.models import INTRODUCTION_TITLE, Section, WikiSource
from wikiguide.providers.base import ProviderError, ProviderMetadata, WikiProvider
from wikiguide.providers.sources import SourceResolver
from wikiguide.providers.utils import first_page

HEADING_RE = re.compile(r"^[ \t]*==+[ \t]*(.+?)[ \t]*==+[ \t]*$", re.MULTILINE)


def parse_sections(text: Optional[str]) -> List[Section]:
    """Split a plain-text body on heading lines.

    ``HEADING_RE.split`` alternates [lead, title1, body1, title2, body2, ...].
    The lead always becomes the first section, even when empty, so callers can
    rely on ``sections[0]`` being the introduction. Headings with no body text
    are dropped.
    """
    if not text or not text.strip():
        return []

    parts = HEADING_RE.split(text)
    sections = [Section(title=INTRODUCTION_TITLE, content=parts[0].strip(), level=1)]

    for i in range(1, len(parts), 2):
        title = parts[i].strip()
        content = parts[i + 1].strip() if i + 1 < len(parts) else ""
        if title and content:
            sections.append(Section(title=title, content=content, level=2))
    return sections


class SectionProvider(WikiProvider):
    """Fetch the plain-text body of an article and parse it into sections."""

    metadata = ProviderMetadata(
        name="sections",
        description="Plain-text extract split on heading markers",
        capabilities=["sections"],
    )

    def __init__(self, http, cache, resolver: Optional[SourceResolver] = None, config=None):
        super().__init__(http, cache, config)
        self.resolver = resolver or SourceResolver(self.config)

    async def fetch_text(self, place: str, source: WikiSource) -> Optional[str]:
        params = {
            "action": "query",
            "format": "json",
            "formatversion": "2",
            "prop": "extracts",
            "titles": place,
            "explaintext": "1",
            "exsectionformat": "wiki",
            "redirects": "1",
        }
        data = await self.http.get_json(source.api_url, params=params)
        page = first_page(data)
        if not page:
            return None
        return page.get("extract") or None

    async def get_sections(self, place: str, source: WikiSource) -> List[Section]:
        """Sections of ``place`` on an already resolved source. Failures yield []."""
        key = make_cache_key("sections", place, source.domain)
        cached = self._cached(key)
        if cached is not None:
            return cached

        try:
            text = await self.fetch_text(place, source)
        except ProviderError as e:
            self.logger.warning(f"Section fetch failed for '{place}' on {source.domain}: {e}")
            return []

        sections = parse_sections(text)
        self._store(key, sections)
        return sections

    async def get_article_sections(self, place: str, language: Optional[str]) -> List[Section]:
        """Sections of ``place`` from the first source in the chain that has a body."""
        language = (language or self.config.language_config.default).strip().lower()
        key = make_cache_key("article_sections", place, language)
        cached = self._cached(key)
        if cached is not None:
            return cached

        resolved = await self.resolver.resolve(language, lambda source: self.fetch_text(place, source))
        if resolved is None:
            return []

        sections = parse_sections(resolved.value)
        self._store(key, sections)
        self._store(make_cache_key("sections", place, resolved.source.domain), sections)
        return sections
