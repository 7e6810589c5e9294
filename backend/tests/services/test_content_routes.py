"""Content Routes — internal-link suggestions and page analysis."""

from lamontai.core.errors import UpstreamFetchError
from lamontai.core.sitemap import SitemapData, SitemapUrl
from lamontai.infrastructure import web_fetcher

SITEMAP_URL = "https://ex.com/sitemap.xml"


async def _configure_sitemap(user, test_db, cache):
    await test_db.refresh(user, ["settings"])
    user.settings.sitemap_url = SITEMAP_URL
    await test_db.commit()
    sitemap = SitemapData(urls=[
        SitemapUrl(loc="https://ex.com/espresso", priority="0.4"),
        SitemapUrl(loc="https://ex.com/blog/espresso-machines", priority="0.8"),
        SitemapUrl(loc="https://ex.com/tea"),
    ])
    await cache.set(f"sitemap:{SITEMAP_URL}", sitemap.to_dict())


async def test_relevant_links_requires_sitemap(client, headers):
    res = await client.post(
        "/api/v1/content/relevant-links", json={"topic": "espresso"}, headers=headers,
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "SITEMAP_NOT_CONFIGURED"


async def test_relevant_links_ranked_and_cached(client, user, headers, test_db, cache):
    await _configure_sitemap(user, test_db, cache)
    res = await client.post(
        "/api/v1/content/relevant-links",
        json={"topic": "Espresso", "max_results": 5},
        headers=headers,
    )
    assert res.status_code == 200
    assert res.json()["links"] == [
        "https://ex.com/blog/espresso-machines", "https://ex.com/espresso",
    ]
    assert await cache.get(
        f"relevant_links:{SITEMAP_URL}:Espresso:5:3",
    ) == res.json()["links"]


async def test_relevant_links_fetches_uncached_sitemap(
    client, user, headers, test_db, monkeypatch,
):
    await test_db.refresh(user, ["settings"])
    user.settings.sitemap_url = SITEMAP_URL
    await test_db.commit()

    async def fake_fetch(url):
        return (
            '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">'
            "<url><loc>https://ex.com/latte-art</loc></url></urlset>"
        )

    monkeypatch.setattr(web_fetcher, "fetch_sitemap_xml", fake_fetch)
    res = await client.post(
        "/api/v1/content/relevant-links", json={"topic": "latte art"}, headers=headers,
    )
    assert res.json()["links"] == ["https://ex.com/latte-art"]


async def test_analyze_url_returns_page_summary(client, headers, cache, monkeypatch):
    async def fake_fetch(url):
        return (
            "<title>Espresso Guide</title><h1>Pulling shots</h1>"
            "<p>Espresso shots need fresh espresso beans.</p>"
        )

    monkeypatch.setattr(web_fetcher, "fetch_page_html", fake_fetch)
    res = await client.post(
        "/api/v1/content/analyze-url",
        json={"url": "https://ex.com/espresso"},
        headers=headers,
    )
    assert res.status_code == 200
    body = res.json()
    assert body["title"] == "Espresso Guide"
    assert body["headings"] == ["Pulling shots"]
    assert body["keywords"][0] == "espresso"
    assert await cache.get("url_analysis:https://ex.com/espresso") == body


async def test_analyze_url_unreachable_page_returns_empty_analysis(
    client, headers, cache, monkeypatch,
):
    async def unreachable(url):
        raise UpstreamFetchError("Failed to fetch", url)

    monkeypatch.setattr(web_fetcher, "fetch_page_html", unreachable)
    res = await client.post(
        "/api/v1/content/analyze-url",
        json={"url": "https://ex.com/down"},
        headers=headers,
    )
    assert res.status_code == 200
    body = res.json()
    assert body["title"] is None
    assert body["keywords"] == []
    assert body["word_count"] == 0
    assert await cache.get("url_analysis:https://ex.com/down") is None


async def test_writing_style_requires_sitemap(client, headers):
    res = await client.get("/api/v1/content/analyze-writing-style", headers=headers)
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_writing_style_analyzes_most_recent_pages(
    client, user, headers, test_db, cache, monkeypatch,
):
    await test_db.refresh(user, ["settings"])
    user.settings.sitemap_url = SITEMAP_URL
    await test_db.commit()
    sitemap = SitemapData(urls=[
        SitemapUrl(loc="https://ex.com/old", lastmod="2023-01-01"),
        SitemapUrl(loc="https://ex.com/undated"),
        SitemapUrl(loc="https://ex.com/new", lastmod="2024-06-01"),
    ])
    await cache.set(f"sitemap:{SITEMAP_URL}", sitemap.to_dict())
    pages = {
        "https://ex.com/new": "<h2>Grinding beans</h2><p>espresso grinding beans</p>",
        "https://ex.com/old": "<h2>Milk</h2><p>espresso milk</p>",
    }
    fetched: list[str] = []

    async def fake_fetch(url):
        fetched.append(url)
        return pages[url]

    monkeypatch.setattr(web_fetcher, "fetch_page_html", fake_fetch)
    res = await client.get(
        "/api/v1/content/analyze-writing-style",
        params={"max_articles": 2},
        headers=headers,
    )
    assert res.status_code == 200
    data = res.json()["data"]
    assert sorted(fetched) == ["https://ex.com/new", "https://ex.com/old"]
    assert [d["url"] for d in data["analysis_details"]] == [
        "https://ex.com/new", "https://ex.com/old",
    ]
    style = data["writing_style"]
    assert style["top_keywords"][0] == "espresso"
    assert style["analyzed_articles"] == 2
    assert style["heading_count"] == 2
    assert style["sample_headings"] == ["Grinding beans", "Milk"]


async def test_writing_style_rejects_more_than_ten_articles(client, headers):
    res = await client.get(
        "/api/v1/content/analyze-writing-style",
        params={"max_articles": 11},
        headers=headers,
    )
    assert res.status_code == 400
