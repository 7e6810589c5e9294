"""Onboarding Routes — step-by-step setup and background sitemap initialisation.

Invariants:
    - Each step returns the recomputed onboarding status
    - Saving a sitemap schedules initialisation that records its URL count
    - A blank sitemap URL clears the step
"""

from sqlalchemy import select

from lamontai.infrastructure import web_fetcher
from lamontai.models.user_settings import UserSettings

SITEMAP = """<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">
  <url><loc>https://ex.com/</loc></url>
  <url><loc>https://ex.com/blog/coffee</loc></url>
  <url><loc>https://ex.com/shop</loc></url>
</urlset>"""


async def _settings_column(test_db, user_id, column):
    return await test_db.scalar(
        select(column).where(UserSettings.user_id == user_id),
    )


async def test_website_and_description_complete_onboarding(client, headers):
    res = await client.post(
        "/api/v1/user/website-url",
        json={"website_url": "https://ex.com"},
        headers=headers,
    )
    assert res.status_code == 200
    assert res.json()["onboarding"]["completed_steps"] == ["website_url"]
    assert res.json()["onboarding"]["onboarded"] is False

    res = await client.post(
        "/api/v1/user/business-description",
        json={"business_description": "  Specialty coffee roastery  "},
        headers=headers,
    )
    status = res.json()["onboarding"]
    assert status["onboarded"] is True
    assert status["next_step"] == "competitors"


async def test_website_url_must_be_http(client, headers):
    res = await client.post(
        "/api/v1/user/website-url",
        json={"website_url": "ftp://ex.com"},
        headers=headers,
    )
    assert res.status_code == 400


async def test_competitors_round_trip(client, headers):
    competitors = [
        {"name": "Bean Co", "website": "https://beanco.com/"},
        {"name": "Roast Ltd", "website": "https://roast.example/"},
    ]
    res = await client.post(
        "/api/v1/user/competitors", json={"competitors": competitors}, headers=headers,
    )
    assert res.status_code == 200
    assert "competitors" in res.json()["onboarding"]["completed_steps"]

    res = await client.get("/api/v1/user/competitors", headers=headers)
    assert res.json()["competitors"] == competitors


async def test_more_than_ten_competitors_rejected(client, headers):
    competitors = [
        {"name": f"C{i}", "website": f"https://c{i}.com"} for i in range(11)
    ]
    res = await client.post(
        "/api/v1/user/competitors", json={"competitors": competitors}, headers=headers,
    )
    assert res.status_code == 400


async def test_sitemap_initialised_in_background(
    client, user, headers, test_db, cache, monkeypatch,
):
    fetched = []

    async def fake_fetch(url):
        fetched.append(url)
        return SITEMAP

    monkeypatch.setattr(web_fetcher, "fetch_sitemap_xml", fake_fetch)
    url = "https://ex.com/sitemap.xml"
    res = await client.post(
        "/api/v1/user/sitemap", json={"sitemap_url": url}, headers=headers,
    )
    assert res.status_code == 200
    assert "sitemap" in res.json()["onboarding"]["completed_steps"]

    assert fetched == [url]
    assert await _settings_column(test_db, user.id, UserSettings.sitemap_url_count) == 3
    assert await cache.get(f"user_sitemap:{user.id}") == {"url": url, "url_count": 3}
    assert len((await cache.get(f"sitemap:{url}"))["urls"]) == 3


async def test_sitemap_failure_leaves_count_empty(
    client, user, headers, test_db, monkeypatch,
):
    async def broken(url):
        return "<not-a-sitemap"

    monkeypatch.setattr(web_fetcher, "fetch_sitemap_xml", broken)
    res = await client.post(
        "/api/v1/user/sitemap",
        json={"sitemap_url": "https://ex.com/sitemap.xml"},
        headers=headers,
    )
    assert res.status_code == 200
    assert await _settings_column(
        test_db, user.id, UserSettings.sitemap_url_count,
    ) is None


async def test_blank_sitemap_clears_step(client, user, headers, test_db, monkeypatch):
    async def fake_fetch(url):
        return SITEMAP

    monkeypatch.setattr(web_fetcher, "fetch_sitemap_xml", fake_fetch)
    await client.post(
        "/api/v1/user/sitemap",
        json={"sitemap_url": "https://ex.com/sitemap.xml"},
        headers=headers,
    )
    res = await client.post(
        "/api/v1/user/sitemap", json={"sitemap_url": ""}, headers=headers,
    )
    assert "sitemap" not in res.json()["onboarding"]["completed_steps"]
    assert await _settings_column(test_db, user.id, UserSettings.sitemap_url) is None


async def test_target_audience(client, headers):
    res = await client.post(
        "/api/v1/user/target-audience",
        json={
            "target_languages": ["en", "pt"],
            "audience_size": "medium",
            "target_audiences": ["home baristas"],
        },
        headers=headers,
    )
    assert res.status_code == 200
    assert "target_audience" in res.json()["onboarding"]["completed_steps"]


async def test_target_audience_requires_a_language(client, headers):
    res = await client.post(
        "/api/v1/user/target-audience",
        json={"target_languages": [], "audience_size": "small"},
        headers=headers,
    )
    assert res.status_code == 400
