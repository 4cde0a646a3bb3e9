"""
Image resolver backed by Wikimedia Commons.

Commons is searched in the file namespace with pre-sized thumbnails; the
results are filtered down to photographs. When Commons itself cannot be
reached, the encyclopedia's page image and in-article file list are used
instead.
"""

import re
from typing import Any, Dict, Iterable, List, Optional

from bs4 import BeautifulSoup

from wikiguide.cache import make_cache_key
from wikiguide.models import Image
from wikiguide.providers.base import ProviderError, ProviderMetadata, WikiProvider
from wikiguide.providers.sources import encyclopedia
from wikiguide.providers.utils import first_page, query_pages, strip_namespace

ACCEPTED_MIME_RE = re.compile(r'^image/(?:jpeg|jpg|png|webp)$', re.IGNORECASE)
RASTER_EXTENSION_RE = re.compile(r'\.(?:jpg|jpeg|png|webp)$', re.IGNORECASE)
NON_PHOTO_TITLE_RE = re.compile(r'logo|flag|coat|map', re.IGNORECASE)

# MediaWiki caps generator/list limits at 50 for anonymous clients
MAX_API_LIMIT = 50


def dedupe_images(images: Iterable[Image], limit: int) -> List[Image]:
    """Keep discovery order, drop repeated titles, stop at ``limit``."""
    seen = set()
    unique = []
    for image in images:
        if image.title in seen:
            continue
        seen.add(image.title)
        unique.append(image)
        if len(unique) >= limit:
            break
    return unique


def _plain_description(info: Dict[str, Any]) -> Optional[str]:
    value = ((info.get("extmetadata") or {}).get("ImageDescription") or {}).get("value")
    if not value:
        return None
    text = BeautifulSoup(value, "html.parser").get_text(" ", strip=True)
    return text or None


class ImageProvider(WikiProvider):
    """Curated image sets for places."""

    metadata = ProviderMetadata(
        name="images",
        description="Wikimedia Commons search with encyclopedia fallback",
        capabilities=["images"],
    )

    def _format_candidate(self, page: Dict[str, Any]) -> Optional[Image]:
        """Turn one Commons search hit into an Image, or None if it is filtered out."""
        infos = page.get("imageinfo") or []
        if not infos:
            return None
        info = infos[0]

        if not ACCEPTED_MIME_RE.match(info.get("mime") or ""):
            return None

        images = self.config.image_config
        if (info.get("width") or 0) < images.min_width or (info.get("height") or 0) < images.min_height:
            return None

        raw_title = page.get("title") or ""
        if NON_PHOTO_TITLE_RE.search(raw_title):
            return None

        url = info.get("thumburl") or info.get("url")
        if not url:
            return None
        return Image(url=url, title=strip_namespace(raw_title), description=_plain_description(info))

    async def search_repository(self, place: str, limit: int) -> List[Image]:
        """Primary path. Raises ProviderError when Commons cannot be queried."""
        params = {
            "action": "query",
            "format": "json",
            "formatversion": "2",
            "generator": "search",
            "gsrsearch": place,
            "gsrnamespace": "6",
            "gsrlimit": str(min(limit * 2, MAX_API_LIMIT)),
            "prop": "imageinfo",
            "iiprop": "url|size|mime|extmetadata",
            "iiurlwidth": str(self.config.image_config.thumb_width),
        }
        data = await self.http.get_json(self.config.source_config.media_repository_api, params=params)

        pages = sorted(query_pages(data), key=lambda p: p.get("index", 0))
        candidates = []
        for page in pages:
            image = self._format_candidate(page)
            if image is not None:
                candidates.append(image)
        return dedupe_images(candidates, limit)

    async def images_from_encyclopedia(self, place: str, language: str, limit: int) -> List[Image]:
        """Fallback path: page thumbnail first, then raster files used in the article."""
        source = encyclopedia(language, self.config)
        thumb_width = str(self.config.image_config.thumb_width)
        images: List[Image] = []

        try:
            data = await self.http.get_json(source.api_url, params={
                "action": "query",
                "format": "json",
                "formatversion": "2",
                "prop": "pageimages|images",
                "titles": place,
                "pithumbsize": thumb_width,
                "imlimit": str(min(limit, MAX_API_LIMIT)),
                "redirects": "1",
            })
        except ProviderError as e:
            self.logger.warning(f"Encyclopedia image fallback failed for '{place}': {e}")
            return []

        page = first_page(data)
        if not page:
            return []

        thumbnail = (page.get("thumbnail") or {}).get("source")
        if thumbnail:
            images.append(Image(url=thumbnail, title=place))

        file_titles = [img.get("title") for img in (page.get("images") or []) if img.get("title")][:limit]
        if file_titles:
            images.extend(await self._file_images(source.api_url, file_titles, thumb_width))

        return dedupe_images(images, limit)

    async def _file_images(self, api_url: str, file_titles: List[str], thumb_width: str) -> List[Image]:
        """Resolve file titles to URLs in one batched imageinfo request."""
        try:
            data = await self.http.get_json(api_url, params={
                "action": "query",
                "format": "json",
                "formatversion": "2",
                "titles": "|".join(file_titles),
                "prop": "imageinfo",
                "iiprop": "url|size",
                "iiurlwidth": thumb_width,
            })
        except ProviderError as e:
            self.logger.warning(f"Image info lookup failed: {e}")
            return []
        if not isinstance(data, dict):
            return []

        normalized = {
            n.get("from"): n.get("to")
            for n in ((data.get("query") or {}).get("normalized") or [])
        }
        by_title = {page.get("title"): page for page in query_pages(data)}

        images = []
        for title in file_titles:
            page = by_title.get(normalized.get(title, title))
            infos = (page or {}).get("imageinfo") or []
            if not infos:
                continue
            info = infos[0]
            original = info.get("url") or ""
            if not RASTER_EXTENSION_RE.search(original):
                continue
            images.append(Image(url=info.get("thumburl") or original, title=strip_namespace(title)))
        return images

    async def get_images(self, place: str, language: Optional[str], limit: int = 10) -> List[Image]:
        """Bounded, deduplicated image set for ``place``."""
        if not place or not place.strip() or limit <= 0:
            return []

        language = (language or self.config.language_config.default).strip().lower()
        key = make_cache_key("images", place, language, limit)
        cached = self._cached(key)
        if cached is not None:
            return cached

        try:
            images = await self.search_repository(place, limit)
        except ProviderError as e:
            self.logger.info(f"Commons search failed for '{place}', using encyclopedia images: {e}")
            images = await self.images_from_encyclopedia(place, language, limit)

        self._store(key, images)
        return images
