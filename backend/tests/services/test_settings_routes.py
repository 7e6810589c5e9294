"""Settings Routes — defaults, upserts and partial updates."""

import pytest


@pytest.fixture
async def user_without_settings(user, test_db):
    await test_db.delete(user.settings)
    await test_db.commit()
    return user


async def test_get_returns_stored_settings(client, headers):
    res = await client.get("/api/v1/settings", headers=headers)
    assert res.status_code == 200
    body = res.json()
    assert body["theme"] == "light"
    assert body["language"] == "english"
    assert body["notifications"] is True
    assert body["competitors"] == []


async def test_get_returns_defaults_without_row(client, user_without_settings, auth_headers):
    res = await client.get(
        "/api/v1/settings", headers=auth_headers(user_without_settings),
    )
    assert res.status_code == 200
    assert res.json()["theme"] == "light"


async def test_put_creates_missing_row(client, user_without_settings, auth_headers):
    res = await client.put(
        "/api/v1/settings",
        json={"theme": "dark", "language": "spanish"},
        headers=auth_headers(user_without_settings),
    )
    assert res.status_code == 200
    assert res.json()["theme"] == "dark"
    assert res.json()["language"] == "spanish"


async def test_patch_updates_only_given_fields(client, headers):
    await client.put("/api/v1/settings", json={"theme": "dark"}, headers=headers)
    res = await client.patch(
        "/api/v1/settings", json={"notifications": False}, headers=headers,
    )
    assert res.status_code == 200
    body = res.json()
    assert body["theme"] == "dark"
    assert body["notifications"] is False


async def test_patch_without_fields_is_rejected(client, headers):
    res = await client.patch("/api/v1/settings", json={}, headers=headers)
    assert res.status_code == 400
    assert res.json()["error"]["message"] == "No settings provided"


async def test_unknown_theme_is_rejected(client, headers):
    res = await client.put("/api/v1/settings", json={"theme": "neon"}, headers=headers)
    assert res.status_code == 400
