"""User Routes — self-service profile and password, admin user management.

Invariants:
    - Profile updates cannot change password or role
    - Password change needs the current password and returns a fresh token
    - Admin routes answer 403 to everyone else
    - Deleting a user removes the rows it owns
"""

from uuid import uuid4

import pytest
from sqlalchemy import func, select

from lamontai.models.article import Article
from lamontai.models.user import User


@pytest.fixture
async def admin_headers(make_user, auth_headers):
    admin = await make_user(email="admin@example.com", role="admin")
    return auth_headers(admin)


async def test_update_profile_name_email_and_preferences(client, headers):
    res = await client.put(
        "/api/v1/users/profile",
        json={
            "name": "  New Name ",
            "email": "New@Example.com",
            "preferences": {"theme": "dark"},
        },
        headers=headers,
    )
    assert res.status_code == 200
    body = res.json()
    assert body["name"] == "New Name"
    assert body["email"] == "new@example.com"
    assert body["preferences"]["theme"] == "dark"
    assert body["preferences"]["content_type"] == "blog"


@pytest.mark.parametrize("field,value", [("password", "hunter22"), ("role", "admin")])
async def test_profile_rejects_privileged_fields(client, headers, field, value):
    res = await client.put(
        "/api/v1/users/profile", json={field: value}, headers=headers,
    )
    assert res.status_code == 400


async def test_profile_email_must_stay_unique(client, headers, make_user):
    await make_user(email="taken@example.com")
    res = await client.put(
        "/api/v1/users/profile", json={"email": "taken@example.com"}, headers=headers,
    )
    assert res.status_code == 409


async def test_change_password(client, user, headers):
    wrong = await client.put(
        "/api/v1/users/password",
        json={"current_password": "nope", "new_password": "changed1"},
        headers=headers,
    )
    assert wrong.status_code == 401

    res = await client.put(
        "/api/v1/users/password",
        json={"current_password": "secret123", "new_password": "changed1"},
        headers=headers,
    )
    assert res.status_code == 200
    assert res.json()["token"]

    login = await client.post(
        "/api/v1/auth/login", json={"email": user.email, "password": "changed1"},
    )
    assert login.status_code == 200


async def test_admin_routes_forbidden_for_users(client, user, headers):
    assert (await client.get("/api/v1/users", headers=headers)).status_code == 403
    res = await client.delete(f"/api/v1/users/{user.id}", headers=headers)
    assert res.status_code == 403


async def test_admin_lists_users(client, user, admin_headers):
    res = await client.get("/api/v1/users", headers=admin_headers)
    assert res.status_code == 200
    body = res.json()
    assert body["count"] == 2
    assert {u["email"] for u in body["data"]} == {user.email, "admin@example.com"}


async def test_admin_gets_user_and_404_for_unknown(client, user, admin_headers):
    res = await client.get(f"/api/v1/users/{user.id}", headers=admin_headers)
    assert res.json()["email"] == user.email
    missing = await client.get(f"/api/v1/users/{uuid4()}", headers=admin_headers)
    assert missing.status_code == 404


async def test_admin_updates_plan_role_and_credits(client, user, admin_headers):
    res = await client.put(
        f"/api/v1/users/{user.id}",
        json={"plan": "professional", "role": "editor", "credits": 500},
        headers=admin_headers,
    )
    assert res.status_code == 200
    body = res.json()
    assert (body["plan"], body["role"], body["credits"]) == ("professional", "editor", 500)


@pytest.mark.parametrize("payload", [
    {"password": "hunter22"},
    {"credits": -1},
    {"plan": "platinum"},
])
async def test_admin_update_validation(client, user, admin_headers, payload):
    res = await client.put(
        f"/api/v1/users/{user.id}", json=payload, headers=admin_headers,
    )
    assert res.status_code == 400


async def test_admin_deletes_user_and_owned_rows(
    client, user, headers, admin_headers, test_db,
):
    await client.post(
        "/api/v1/articles",
        json={
            "title": "Doomed article",
            "content": "Content that will be removed with its owner. " * 3,
            "keywords": ["doomed"],
        },
        headers=headers,
    )
    res = await client.delete(f"/api/v1/users/{user.id}", headers=admin_headers)
    assert res.status_code == 200

    users = await test_db.scalar(
        select(func.count()).select_from(User).where(User.id == user.id),
    )
    articles = await test_db.scalar(
        select(func.count()).select_from(Article).where(Article.user_id == user.id),
    )
    assert users == 0
    assert articles == 0
