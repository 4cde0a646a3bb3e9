"""
Destination-guide extraction engine.

Builds normalized city guides from Wikivoyage, Wikipedia and Wikimedia
Commons.
"""

from wikiguide.cache import GUIDE_CACHE_TTL, TTLCache
from wikiguide.models import Article, CityGuide, CitySearchResult, Image, Section
from wikiguide.services.guide_service import GuideService

__all__ = [
    "GUIDE_CACHE_TTL",
    "TTLCache",
    "Article",
    "CityGuide",
    "CitySearchResult",
    "Image",
    "Section",
    "GuideService",
]
