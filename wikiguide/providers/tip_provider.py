"""
Tip extractor: practical travel advice from rendered travel-wiki markup.

Unlike the section parser this pass needs the rendered HTML, because the
useful signal is structural: which paragraphs and list items sit under the
"Eat", "Sleep", "Stay safe"... headings. Each category contributes at most two
tips, and every candidate goes through the listing-noise filters.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from wikiguide.cache import make_cache_key
from wikiguide.models import WikiSource
from wikiguide.providers.base import ProviderError, ProviderMetadata, WikiProvider
from wikiguide.providers.sources import SourceResolver
from wikiguide.providers.utils import parse_text
from wikiguide.src.snippet_filters import (
    LIST_ITEM_DIGIT_RATIO,
    PARAGRAPH_DIGIT_RATIO,
    clean_tip_text,
)
from wikiguide.utils.block_walker import PARAGRAPH, BlockWalker, SoupBlockWalker

MAX_TIPS_PER_CATEGORY = 2


@dataclass(frozen=True)
class TipCategory:
    key: str
    icon: str
    labels: Dict[str, str]
    anchors: Tuple[str, ...]

    def label(self, language: Optional[str]) -> str:
        return self.labels.get((language or "").lower()) or self.labels["en"]


TIP_CATEGORIES: Tuple[TipCategory, ...] = (
    TipCategory("eat", "🍽️", {"pt": "Onde Comer", "en": "Where to Eat"},
                ("Eat", "Coma", "Comer", "Gastronomia")),
    TipCategory("sleep", "🏨", {"pt": "Onde Dormir", "en": "Where to Sleep"},
                ("Sleep", "Durma", "Dormir", "Hospedagem")),
    TipCategory("get_around", "🚇", {"pt": "Como se Locomover", "en": "Getting Around"},
                ("Get_around", "Locomover", "Circular", "Transporte")),
    TipCategory("get_in", "✈️", {"pt": "Como Chegar", "en": "Getting There"},
                ("Get_in", "Chegar", "Chegada")),
    TipCategory("do", "🎯", {"pt": "O que Fazer", "en": "What to Do"},
                ("Do", "Faça", "Fazer", "Atividades")),
    TipCategory("see", "👀", {"pt": "O que Ver", "en": "What to See"},
                ("See", "Veja", "Ver", "Atrações")),
    TipCategory("stay_safe", "🛡️", {"pt": "Segurança e Emergências", "en": "Safety and Emergencies"},
                ("Stay_safe", "Segurança", "Safety")),
    TipCategory("budget", "💰", {"pt": "Quanto Custa", "en": "Costs"},
                ("Budget", "Orçamento", "Preços", "Costs")),
    TipCategory("climate", "☀️", {"pt": "Melhor Época", "en": "Best Time to Go"},
                ("Climate", "Clima", "Tempo")),
    TipCategory("drink", "🍺", {"pt": "Vida Noturna", "en": "Nightlife"},
                ("Drink", "Beber", "Vida_noturna")),
    TipCategory("buy", "🛍️", {"pt": "Onde Comprar", "en": "Shopping"},
                ("Buy", "Comprar", "Compras", "Shopping")),
    TipCategory("connect", "📱", {"pt": "Internet e Conexão", "en": "Internet and Connectivity"},
                ("Connect", "Internet", "Conectar", "Comunicar")),
    TipCategory("respect", "🙏", {"pt": "Respeito e Cultura", "en": "Respect and Culture"},
                ("Respect", "Respeito", "Etiquette")),
    TipCategory("cope", "⚠️", {"pt": "Dicas Importantes", "en": "Important Tips"},
                ("Cope", "Dicas", "Tips")),
)


def format_tip(category: TipCategory, language: Optional[str], text: str) -> str:
    return f"{category.icon} {category.label(language)}: {text}"


def extract_tips_from_walker(
    walker: BlockWalker,
    language: Optional[str],
    categories: Tuple[TipCategory, ...] = TIP_CATEGORIES,
) -> List[str]:
    """Run the heading table over a document and collect qualifying tips."""
    tips = []
    for category in categories:
        heading = walker.find_heading(category.anchors)
        if heading is None:
            continue

        count = 0
        for block in walker.blocks_after(heading):
            ratio = PARAGRAPH_DIGIT_RATIO if block.kind == PARAGRAPH else LIST_ITEM_DIGIT_RATIO
            for text in block.texts:
                cleaned = clean_tip_text(text, ratio)
                if cleaned is None:
                    continue
                tips.append(format_tip(category, language, cleaned))
                count += 1
                if count >= MAX_TIPS_PER_CATEGORY:
                    break
            if count >= MAX_TIPS_PER_CATEGORY:
                break
    return tips


class TipProvider(WikiProvider):
    """Extract categorized practical tips from an article's rendered HTML."""

    metadata = ProviderMetadata(
        name="tips",
        description="Practical tips from travel-wiki section markup",
        capabilities=["tips"],
    )

    def __init__(self, http, cache, resolver: Optional[SourceResolver] = None, config=None):
        super().__init__(http, cache, config)
        self.resolver = resolver or SourceResolver(self.config)

    async def fetch_html(self, place: str, source: WikiSource) -> Optional[str]:
        params = {
            "action": "parse",
            "format": "json",
            "formatversion": "2",
            "page": place,
            "prop": "text",
            "redirects": "1",
            "disableeditsection": "1",
        }
        data = await self.http.get_json(source.api_url, params=params)
        return parse_text(data)

    def _extract(self, html: str, language: Optional[str], place: str) -> List[str]:
        try:
            return extract_tips_from_walker(SoupBlockWalker(html), language)
        except Exception as e:
            self.logger.warning(f"Tip extraction failed for '{place}': {e}")
            return []

    async def extract_tips(self, place: str, source: WikiSource, language: Optional[str] = None) -> List[str]:
        """Tips for ``place`` on an already resolved source. Any failure yields []."""
        language = language or source.language
        key = make_cache_key("tips", place, source.domain, language)
        cached = self._cached(key)
        if cached is not None:
            return cached

        try:
            html = await self.fetch_html(place, source)
        except ProviderError as e:
            self.logger.warning(f"Tip fetch failed for '{place}' on {source.domain}: {e}")
            return []
        if not html:
            return []

        tips = self._extract(html, language, place)
        self._store(key, tips)
        return tips

    async def get_travel_tips(self, place: str, language: Optional[str]) -> List[str]:
        """Tips from the first source in the chain that renders the page."""
        language = (language or self.config.language_config.default).strip().lower()
        key = make_cache_key("travel_tips", place, language)
        cached = self._cached(key)
        if cached is not None:
            return cached

        resolved = await self.resolver.resolve(language, lambda source: self.fetch_html(place, source))
        if resolved is None:
            return []
        tips = self._extract(resolved.value, language, place)
        self._store(key, tips)
        return tips
