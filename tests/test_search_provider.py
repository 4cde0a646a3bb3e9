import pytest

from wikiguide.providers.base import ProviderNotAvailableError
from wikiguide.providers.search_provider import SearchProvider, looks_like_destination, parse_opensearch


def opensearch(query, titles, descriptions=None):
    descriptions = descriptions or [""] * len(titles)
    return [query, titles, descriptions, [f"https://example.org/wiki/{t}" for t in titles]]


@pytest.mark.parametrize("title,description,expected", [
    ("Porto", "", True),
    ("Bandung", "", True),
    ("Rio de Janeiro", "", True),
    ("Lisboa (filme)", "", False),
    ("Queen (band)", "", False),
    ("Paris", "página de desambiguação", False),
    ("Greater Lisbon Metropolitan Area Region", "region around the capital", True),
    ("List of tallest buildings in Lisbon", "", False),
])
def test_destination_filter(title, description, expected):
    assert looks_like_destination(title, description) is expected


def test_parse_opensearch_tolerates_short_payloads():
    assert parse_opensearch(["Lis", ["Lisboa", "Lisburn"]]) == [("Lisboa", ""), ("Lisburn", "")]
    assert parse_opensearch({"error": "x"}) == []
    assert parse_opensearch(["Lis"]) == []


def thumbnails(titles, normalized=None):
    return {"query": {
        "normalized": normalized or [],
        "pages": [{"title": t, "thumbnail": {"source": f"https://img/{t}.jpg"}} for t in titles],
    }}


@pytest.mark.asyncio
async def test_travel_wiki_results_are_not_filtered(fake_http, cache, config):
    def handler(url, params):
        assert "pt.wikivoyage.org" in url
        if params["action"] == "opensearch":
            assert params["limit"] == "5"
            return opensearch("Lis", ["Lisboa", "Lisboa (filme)"])
        return thumbnails(["Lisboa"])

    results = await SearchProvider(fake_http(handler), cache, config=config).search_cities("Lis", "pt", 5)

    assert [r.title for r in results] == ["Lisboa", "Lisboa (filme)"]
    assert results[0].thumbnail == "https://img/Lisboa.jpg"
    assert results[1].thumbnail is None
    assert results[0].description is None


@pytest.mark.asyncio
async def test_encyclopedia_results_are_filtered_and_capped(fake_http, cache, config):
    def handler(url, params):
        if "wikivoyage" in url:
            return opensearch("Lis", [])
        if params["action"] == "opensearch":
            assert params["limit"] == "6"
            return opensearch(
                "Lis",
                ["Lisboa", "Lisboa (filme)", "Lisburn", "Lisbon Story"],
                ["capital de Portugal", "filme de 1994", "city in Northern Ireland", "filme de Wim Wenders"],
            )
        return ProviderNotAvailableError("thumbnails down")

    http = fake_http(handler)
    results = await SearchProvider(http, cache, config=config).search_cities("Lis", "pt", 2)

    assert [r.title for r in results] == ["Lisboa", "Lisburn"]
    assert results[0].description == "capital de Portugal"
    assert all(r.thumbnail is None for r in results)
    assert http.count("wikivoyage", action="opensearch") == 2


@pytest.mark.asyncio
async def test_thumbnail_titles_map_back_through_normalization(fake_http, cache, config):
    def handler(url, params):
        if params["action"] == "opensearch":
            return opensearch("lis", ["lisboa"])
        return thumbnails(["Lisboa"], normalized=[{"from": "lisboa", "to": "Lisboa"}])

    results = await SearchProvider(fake_http(handler), cache, config=config).search_cities("lis", "pt")
    assert results[0].thumbnail == "https://img/Lisboa.jpg"


@pytest.mark.asyncio
async def test_nothing_found(fake_http, cache, config):
    http = fake_http(lambda url, params: opensearch("zzz", []))
    assert await SearchProvider(http, cache, config=config).search_cities("zzz", "pt") == []
    assert await SearchProvider(http, cache, config=config).search_cities("   ", "pt") == []
