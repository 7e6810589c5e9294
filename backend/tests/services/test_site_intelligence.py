"""Site Intelligence — sitemap index following, caching and failure handling.

Invariants:
    - Index children are fetched once each; a failing child is skipped
    - A failing root sitemap raises; initialize_user_sitemap never does
    - get_sitemap serves repeat calls from the cache
    - Link suggestions are cached per sitemap, never shared across sites
    - A page slower than the breaker deadline yields an empty analysis
"""

import asyncio

import pytest

from lamontai.config import get_settings
from lamontai.core.errors import UpstreamFetchError
from lamontai.core.sitemap import SitemapData, SitemapUrl
from lamontai.infrastructure import web_fetcher
from lamontai.infrastructure.circuit_breaker import reset_breakers
from lamontai.services import site_intelligence

NS = 'xmlns="http://www.sitemaps.org/schemas/sitemap/0.9"'

DOCUMENTS = {
    "https://ex.com/sitemap.xml": (
        f"<sitemapindex {NS}>"
        "<sitemap><loc>https://ex.com/posts.xml</loc></sitemap>"
        "<sitemap><loc>https://ex.com/pages.xml</loc></sitemap>"
        "<sitemap><loc>https://ex.com/broken.xml</loc></sitemap>"
        "</sitemapindex>"
    ),
    "https://ex.com/posts.xml": (
        f"<urlset {NS}>"
        "<url><loc>https://ex.com/blog/a</loc></url>"
        "<url><loc>https://ex.com/blog/b</loc></url>"
        "</urlset>"
    ),
    "https://ex.com/pages.xml": (
        f"<urlset {NS}><url><loc>https://ex.com/about</loc></url></urlset>"
    ),
}


@pytest.fixture
def fetched(monkeypatch):
    calls: list[str] = []

    async def fake_fetch(url):
        calls.append(url)
        if url not in DOCUMENTS:
            raise UpstreamFetchError(f"Failed to fetch {url}: HTTP 404", url)
        return DOCUMENTS[url]

    monkeypatch.setattr(web_fetcher, "fetch_sitemap_xml", fake_fetch)
    return calls


async def test_index_children_are_merged_and_failures_skipped(fetched):
    sitemap = await site_intelligence.fetch_and_parse_sitemap("https://ex.com/sitemap.xml")
    assert sitemap.is_index
    assert sorted(u.loc for u in sitemap.urls) == [
        "https://ex.com/about", "https://ex.com/blog/a", "https://ex.com/blog/b",
    ]
    assert len(fetched) == 4


async def test_root_failure_raises(fetched):
    with pytest.raises(UpstreamFetchError):
        await site_intelligence.fetch_and_parse_sitemap("https://ex.com/missing.xml")


async def test_get_sitemap_is_cached(fetched, cache):
    first = await site_intelligence.get_sitemap(cache, "https://ex.com/posts.xml")
    second = await site_intelligence.get_sitemap(cache, "https://ex.com/posts.xml")
    assert first == second
    assert fetched == ["https://ex.com/posts.xml"]


async def test_initialize_user_sitemap_swallows_failures(fetched, cache, user):
    ok = await site_intelligence.initialize_user_sitemap(
        cache, user.id, "https://ex.com/missing.xml",
    )
    assert ok is False
    assert await cache.get(f"user_sitemap:{user.id}") is None


async def test_relevant_links_are_isolated_per_sitemap(cache):
    for site in ("a.example", "b.example"):
        sitemap = SitemapData(urls=[SitemapUrl(loc=f"https://{site}/seo-tips")])
        await cache.set(f"sitemap:https://{site}/sitemap.xml", sitemap.to_dict())

    a_links = await site_intelligence.relevant_links(
        cache, "https://a.example/sitemap.xml", "seo",
    )
    b_links = await site_intelligence.relevant_links(
        cache, "https://b.example/sitemap.xml", "seo",
    )
    assert a_links == ["https://a.example/seo-tips"]
    assert b_links == ["https://b.example/seo-tips"]


async def test_slow_page_yields_empty_analysis(cache, monkeypatch):
    reset_breakers()
    monkeypatch.setattr(get_settings(), "page_fetch_timeout_seconds", 0.01)

    async def slow_get(url, timeout, accept, user_agent):
        await asyncio.sleep(1.5)
        return "<title>late</title>"

    monkeypatch.setattr(web_fetcher, "_get", slow_get)
    try:
        result = await site_intelligence.analyze_url(cache, "https://slow.example/")
    finally:
        reset_breakers()
    assert result["title"] is None
    assert result["keywords"] == []
    assert await cache.get("url_analysis:https://slow.example/") is None
