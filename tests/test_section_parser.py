import pytest

from wikiguide.models import INTRODUCTION_TITLE
from wikiguide.providers.base import ProviderNotAvailableError
from wikiguide.providers.section_provider import SectionProvider, parse_sections
from wikiguide.providers.sources import travel_wiki

BODY = """Lisboa é a capital e a maior cidade de Portugal.

== Compreenda ==
Cidade de sete colinas à beira do Tejo.

=== Clima ===
Verões quentes e secos.

== Chegar ==

== Veja ==
Torre de Belém e Mosteiro dos Jerónimos.
"""


def test_intro_then_headed_sections_in_order():
    sections = parse_sections(BODY)

    assert [s.title for s in sections] == [INTRODUCTION_TITLE, "Compreenda", "Clima", "Veja"]
    assert sections[0].level == 1
    assert sections[0].content == "Lisboa é a capital e a maior cidade de Portugal."
    assert all(s.level == 2 for s in sections[1:])
    assert sections[3].content == "Torre de Belém e Mosteiro dos Jerónimos."


def test_heading_without_body_is_dropped():
    titles = [s.title for s in parse_sections(BODY)]
    assert "Chegar" not in titles


def test_empty_lead_still_yields_introduction():
    sections = parse_sections("== História ==\nFundada pelos fenícios.")
    assert sections[0].title == INTRODUCTION_TITLE
    assert sections[0].content == ""
    assert sections[1].title == "História"


def test_body_without_headings():
    sections = parse_sections("Só um parágrafo.")
    assert len(sections) == 1
    assert sections[0].content == "Só um parágrafo."


def test_empty_body():
    assert parse_sections("") == []
    assert parse_sections(None) == []
    assert parse_sections("   \n") == []


def test_equals_signs_inside_text_are_not_headings():
    sections = parse_sections("Intro\n\n== Dicas ==\nA fórmula x == y não é um título.")
    assert [s.title for s in sections] == [INTRODUCTION_TITLE, "Dicas"]
    assert "x == y" in sections[1].content


@pytest.mark.asyncio
async def test_resolved_sections_are_cached_by_language_and_by_source(fake_http, cache, config):
    def handler(url, params):
        if "pt.wikivoyage.org" in url:
            return ProviderNotAvailableError("404")
        return {"query": {"pages": [{"title": "Sintra", "extract": BODY}]}}

    http = fake_http(handler)
    provider = SectionProvider(http, cache, config=config)

    sections = await provider.get_article_sections("Sintra", "pt")

    assert cache.get("article_sections:sintra:pt") == sections
    assert cache.get("sections:sintra:en.wikivoyage.org") == sections
    calls = len(http.calls)
    assert await provider.get_sections("Sintra", travel_wiki("en", config)) == sections
    assert len(http.calls) == calls
