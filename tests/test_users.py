"""
User endpoint tests: listing, admin-only creation, profile reads,
self/admin updates and the deletion rules.

Users are committed by the ``seeded_users`` fixture; each request
authenticates with a bearer token minted for one of them.
"""
import uuid

import pytest
from httpx import AsyncClient

from conftest import auth_headers


# ---------------------------------------------------------------------------
# List users
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_list_users_requires_auth(async_client: AsyncClient):
    resp = await async_client.get("/api/v1/users")
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_list_users_paginated(async_client: AsyncClient, seeded_users):
    headers = auth_headers(seeded_users["alice"])

    resp = await async_client.get("/api/v1/users?page=1&limit=2", headers=headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["total"] == 3
    assert data["page"] == 1
    assert data["limit"] == 2
    assert data["total_pages"] == 2
    assert data["has_next_page"] is True
    assert data["has_previous_page"] is False
    # Newest first: seeded in admin, alice, bob order.
    assert [u["email"] for u in data["items"]] == ["bob@example.com", "alice@example.com"]


@pytest.mark.asyncio
async def test_list_users_defaults(async_client: AsyncClient, seeded_users):
    resp = await async_client.get("/api/v1/users", headers=auth_headers(seeded_users["bob"]))
    data = resp.json()
    assert data["page"] == 1
    assert data["limit"] == 10
    assert len(data["items"]) == 3


@pytest.mark.asyncio
async def test_list_users_rejects_zero_limit(async_client: AsyncClient, seeded_users):
    resp = await async_client.get(
        "/api/v1/users?limit=0", headers=auth_headers(seeded_users["bob"])
    )
    assert resp.status_code == 422


# ---------------------------------------------------------------------------
# Create user (admin only)
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_admin_creates_user_with_role(async_client: AsyncClient, seeded_users):
    resp = await async_client.post(
        "/api/v1/users",
        json={
            "email": "editor@example.com",
            "first_name": "Ed",
            "last_name": "Itor",
            "password": "secret1",
            "role": "admin",
        },
        headers=auth_headers(seeded_users["admin"]),
    )
    assert resp.status_code == 201
    data = resp.json()
    assert data["email"] == "editor@example.com"
    assert data["role"] == "admin"
    assert "password_hash" not in data


@pytest.mark.asyncio
async def test_non_admin_cannot_create_user(async_client: AsyncClient, seeded_users):
    resp = await async_client.post(
        "/api/v1/users",
        json={"email": "x@example.com", "first_name": "X", "last_name": "Y", "password": "secret1"},
        headers=auth_headers(seeded_users["alice"]),
    )
    assert resp.status_code == 403
    assert resp.json()["message"] == "Admin access required"


@pytest.mark.asyncio
async def test_admin_create_duplicate_email(async_client: AsyncClient, seeded_users):
    resp = await async_client.post(
        "/api/v1/users",
        json={"email": "bob@example.com", "first_name": "B", "last_name": "B", "password": "secret1"},
        headers=auth_headers(seeded_users["admin"]),
    )
    assert resp.status_code == 409


# ---------------------------------------------------------------------------
# Read
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_me_includes_own_posts(async_client: AsyncClient, seeded_users):
    headers = auth_headers(seeded_users["alice"])
    await async_client.post("/api/v1/posts", json={"title": "Mine", "content": "C"}, headers=headers)

    resp = await async_client.get("/api/v1/users/me", headers=headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["email"] == "alice@example.com"
    assert [p["title"] for p in data["posts"]] == ["Mine"]


@pytest.mark.asyncio
async def test_get_user_detail(async_client: AsyncClient, seeded_users):
    bob = seeded_users["bob"]
    resp = await async_client.get(
        f"/api/v1/users/{bob.id}", headers=auth_headers(seeded_users["alice"])
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["id"] == str(bob.id)
    assert data["first_name"] == "Bob"
    assert data["posts"] == []


@pytest.mark.asyncio
async def test_get_user_not_found(async_client: AsyncClient, seeded_users):
    resp = await async_client.get(
        f"/api/v1/users/{uuid.uuid4()}", headers=auth_headers(seeded_users["alice"])
    )
    assert resp.status_code == 404
    body = resp.json()
    assert body["code"] == "NOT_FOUND"
    assert body["path"].startswith("GET /api/v1/users/")
    assert "timestamp" in body


# ---------------------------------------------------------------------------
# Update
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_update_own_profile(async_client: AsyncClient, seeded_users):
    alice = seeded_users["alice"]
    resp = await async_client.put(
        f"/api/v1/users/{alice.id}",
        json={"last_name": "Liddell"},
        headers=auth_headers(alice),
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["last_name"] == "Liddell"
    assert data["first_name"] == "Alice"


@pytest.mark.asyncio
async def test_update_other_profile_forbidden(async_client: AsyncClient, seeded_users):
    resp = await async_client.put(
        f"/api/v1/users/{seeded_users['bob'].id}",
        json={"first_name": "Mallory"},
        headers=auth_headers(seeded_users["alice"]),
    )
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_update_own_role_forbidden(async_client: AsyncClient, seeded_users):
    alice = seeded_users["alice"]
    resp = await async_client.put(
        f"/api/v1/users/{alice.id}", json={"role": "admin"}, headers=auth_headers(alice)
    )
    assert resp.status_code == 403
    assert resp.json()["message"] == "Only admins can change user roles"


@pytest.mark.asyncio
async def test_admin_promotes_user(async_client: AsyncClient, seeded_users):
    resp = await async_client.put(
        f"/api/v1/users/{seeded_users['bob'].id}",
        json={"role": "admin"},
        headers=auth_headers(seeded_users["admin"]),
    )
    assert resp.status_code == 200
    assert resp.json()["role"] == "admin"


@pytest.mark.asyncio
async def test_update_email_conflict(async_client: AsyncClient, seeded_users):
    alice = seeded_users["alice"]
    resp = await async_client.put(
        f"/api/v1/users/{alice.id}",
        json={"email": "bob@example.com"},
        headers=auth_headers(alice),
    )
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_password_change_takes_effect(async_client: AsyncClient, seeded_users):
    alice = seeded_users["alice"]
    resp = await async_client.put(
        f"/api/v1/users/{alice.id}", json={"password": "rotated1"}, headers=auth_headers(alice)
    )
    assert resp.status_code == 200

    login = await async_client.post(
        "/api/v1/auth/login", json={"email": "alice@example.com", "password": "rotated1"}
    )
    assert login.status_code == 200


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_admin_deletes_other_user(async_client: AsyncClient, seeded_users):
    admin_headers = auth_headers(seeded_users["admin"])
    bob = seeded_users["bob"]

    resp = await async_client.delete(f"/api/v1/users/{bob.id}", headers=admin_headers)
    assert resp.status_code == 204

    resp = await async_client.get(f"/api/v1/users/{bob.id}", headers=admin_headers)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_admin_cannot_delete_self(async_client: AsyncClient, seeded_users):
    admin = seeded_users["admin"]
    resp = await async_client.delete(f"/api/v1/users/{admin.id}", headers=auth_headers(admin))
    assert resp.status_code == 403
    assert resp.json()["message"] == "You cannot delete your own account"


@pytest.mark.asyncio
async def test_user_cannot_delete_self(async_client: AsyncClient, seeded_users):
    alice = seeded_users["alice"]
    resp = await async_client.delete(f"/api/v1/users/{alice.id}", headers=auth_headers(alice))
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_delete_user_who_owns_posts_fails(async_client: AsyncClient, seeded_users):
    alice_headers = auth_headers(seeded_users["alice"])
    await async_client.post("/api/v1/posts", json={"title": "T", "content": "C"}, headers=alice_headers)

    resp = await async_client.delete(
        f"/api/v1/users/{seeded_users['alice'].id}", headers=auth_headers(seeded_users["admin"])
    )
    assert resp.status_code == 500
    body = resp.json()
    assert body["code"] == "INTERNAL_SERVER_ERROR"
    assert body["message"] == "Failed to delete user"

    # Nothing was removed.
    resp = await async_client.get("/api/v1/users/me", headers=alice_headers)
    assert resp.status_code == 200
    assert len(resp.json()["posts"]) == 1
