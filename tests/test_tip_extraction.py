import pytest

from wikiguide.models import SourceKind, WikiSource
from wikiguide.providers.base import ProviderTimeoutError
from wikiguide.providers.tip_provider import (
    MAX_TIPS_PER_CATEGORY,
    TIP_CATEGORIES,
    TipProvider,
    extract_tips_from_walker,
)
from wikiguide.utils.block_walker import LIST, PARAGRAPH, Block, BlockWalker, HeadingRef, SoupBlockWalker

EAT_1 = "Os pastéis de nata são a sobremesa mais famosa da cidade e valem cada fila na padaria."
EAT_2 = "As tascas dos bairros antigos servem almoços simples e baratos durante a semana inteira."
EAT_3 = "O mercado da Ribeira reúne bancas de vários chefs conhecidos num só espaço coberto."
DRINK_1 = "A vida noturna concentra-se no Bairro Alto, onde se bebe na rua até de madrugada."
SLEEP_1 = "Ficar na Baixa deixa quase todos os museus e miradouros a uma caminhada de distância."
LISTING = "Hotel Example, Rua das Flores 123, (+55) 11 4002-8922"

LEGACY_HTML = f"""
<div class="mw-parser-output">
<p>Introdução da página.</p>
<h2><span class="mw-headline" id="Coma">Coma</span></h2>
<p>{LISTING}</p>
<h3><span class="mw-headline" id="Barato">Barato</span></h3>
<p>{EAT_1}<sup class="reference">[1]</sup></p>
<p>{EAT_2}</p>
<p>{EAT_3}</p>
<h2><span class="mw-headline" id="Beber">Beber</span></h2>
<p>{DRINK_1}</p>
<h2><span class="mw-headline" id="Durma">Durma</span></h2>
<ul><li>{SLEEP_1}</li><li>{LISTING}</li></ul>
</div>
"""

PARSOID_HTML = f"""
<section data-mw-section-id="0"><p>Introdução.</p></section>
<section data-mw-section-id="1">
<div class="mw-heading mw-heading2"><h2 id="Coma">Coma</h2></div>
<p>{EAT_1}</p>
<section data-mw-section-id="2">
<div class="mw-heading mw-heading3"><h3 id="Barato">Barato</h3></div>
<p>{EAT_2}</p>
</section>
</section>
<section data-mw-section-id="3">
<div class="mw-heading mw-heading2"><h2 id="Beber">Beber</h2></div>
<p>{DRINK_1}</p>
</section>
"""


def tips_for(html, language="pt"):
    return extract_tips_from_walker(SoupBlockWalker(html), language)


def test_legacy_markup_caps_each_category():
    tips = tips_for(LEGACY_HTML)

    eat = [t for t in tips if t.startswith("🍽️ Onde Comer: ")]
    assert eat == [f"🍽️ Onde Comer: {EAT_1}", f"🍽️ Onde Comer: {EAT_2}"]
    assert len(eat) == MAX_TIPS_PER_CATEGORY


def test_walk_stops_at_next_same_rank_heading():
    tips = tips_for(LEGACY_HTML)
    assert [t for t in tips if t.startswith("🍺")] == [f"🍺 Vida Noturna: {DRINK_1}"]


def test_list_items_are_candidates_and_listings_are_dropped():
    tips = tips_for(LEGACY_HTML)
    assert f"🏨 Onde Dormir: {SLEEP_1}" in tips
    assert not any("Rua das Flores" in t for t in tips)


def test_tips_follow_category_table_order():
    tips = tips_for(LEGACY_HTML)
    keys = [t.split(" ", 1)[0] for t in tips]
    assert keys == ["🍽️", "🍽️", "🏨", "🍺"]


def test_current_heading_markup_with_section_wrappers():
    tips = tips_for(PARSOID_HTML)
    assert tips == [
        f"🍽️ Onde Comer: {EAT_1}",
        f"🍽️ Onde Comer: {EAT_2}",
        f"🍺 Vida Noturna: {DRINK_1}",
    ]


def test_labels_follow_language():
    tips = tips_for(PARSOID_HTML, language="en")
    assert tips[0] == f"🍽️ Where to Eat: {EAT_1}"
    # unknown languages use English labels
    assert tips_for(PARSOID_HTML, language="de")[0].startswith("🍽️ Where to Eat: ")


def test_no_matching_headings():
    assert tips_for("<p>Nothing to see here at all, just a plain paragraph.</p>") == []


class FakeWalker(BlockWalker):
    def __init__(self, blocks_by_anchor):
        self.blocks_by_anchor = blocks_by_anchor

    def find_heading(self, anchor_ids):
        for anchor in anchor_ids:
            if anchor in self.blocks_by_anchor:
                return HeadingRef(node=anchor, level=2)
        return None

    def blocks_after(self, heading):
        return iter(self.blocks_by_anchor[heading.node])


def test_extractor_runs_over_any_walker():
    walker = FakeWalker({
        "Stay_safe": [
            Block(kind=PARAGRAPH, texts=("Curto.",)),
            Block(kind=LIST, texts=(LISTING, SLEEP_1, EAT_1, EAT_2)),
        ],
    })
    tips = extract_tips_from_walker(walker, "en", TIP_CATEGORIES)
    assert tips == [
        f"🛡️ Safety and Emergencies: {SLEEP_1}",
        f"🛡️ Safety and Emergencies: {EAT_1}",
    ]


LISBOA_VOYAGE = WikiSource(kind=SourceKind.TRAVEL_WIKI, language="pt", domain="pt.wikivoyage.org")


@pytest.mark.asyncio
async def test_provider_returns_empty_when_fetch_fails(fake_http, cache, config):
    http = fake_http(lambda url, params: ProviderTimeoutError("slow"))
    provider = TipProvider(http, cache, config=config)

    assert await provider.extract_tips("Lisboa", LISBOA_VOYAGE, "pt") == []
    assert len(cache) == 0


@pytest.mark.asyncio
async def test_provider_parses_and_caches(fake_http, cache, config):
    http = fake_http(lambda url, params: {"parse": {"title": "Lisboa", "text": PARSOID_HTML}})
    provider = TipProvider(http, cache, config=config)

    first = await provider.extract_tips("Lisboa", LISBOA_VOYAGE, "pt")
    second = await provider.extract_tips("Lisboa", LISBOA_VOYAGE, "pt")

    assert first == second
    assert len(first) == 3
    assert len(http.calls) == 1
    url, params = http.calls[0]
    assert url == "https://pt.wikivoyage.org/w/api.php"
    assert params["action"] == "parse"
    assert params["page"] == "Lisboa"
