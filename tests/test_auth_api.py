"""
tests.test_auth_api

End-to-end authentication and principal management through the HTTP surface.
"""

from __future__ import annotations

import httpx
import pytest

from helpers import PASSWORD, bearer, register_admin, register_user


@pytest.mark.asyncio
async def test_register_whoami_and_gates(client: httpx.AsyncClient) -> None:
    r = await client.post(
        "/api/user/register",
        json={
            "username": "ruth",
            "email": "ruth@gracechurch.org",
            "password": PASSWORD,
            "confirmPassword": PASSWORD,
        },
    )
    assert r.status_code == 201
    body = r.json()
    token = body["token"]
    assert "passwordHash" not in body["user"]
    assert body["user"]["role"] == "user"

    r = await client.get("/api/whoami", headers=bearer(token))
    assert r.status_code == 200
    assert r.json() == {"id": body["user"]["id"], "role": "user", "kind": "user"}

    r = await client.get("/api/whoami")
    assert r.status_code == 401
    assert r.json() == {"message": "No token provided"}

    r = await client.get("/api/user/getall", headers=bearer(token))
    assert r.status_code == 403


@pytest.mark.asyncio
async def test_bad_tokens_get_fixed_message(client: httpx.AsyncClient) -> None:
    for header in ("Bearer not-a-token", "Bearer a.b.c"):
        r = await client.get("/api/whoami", headers={"Authorization": header})
        assert r.status_code == 401
        assert r.json() == {"message": "Invalid or expired token"}


@pytest.mark.asyncio
async def test_deleted_user_token_stops_working(client: httpx.AsyncClient, admin) -> None:
    _, admin_token = admin
    user, token = await register_user(client, "ruth@gracechurch.org")

    r = await client.delete(f"/api/user/{user['id']}", headers=bearer(admin_token))
    assert r.status_code == 200

    r = await client.get("/api/whoami", headers=bearer(token))
    assert r.status_code == 401
    assert r.json() == {"message": "Authentication failed"}


@pytest.mark.asyncio
async def test_login_failures_are_uniform(client: httpx.AsyncClient, admin) -> None:
    await register_user(client, "ruth@gracechurch.org")

    attempts = [
        ("/api/user/login", "ruth@gracechurch.org", "wrong-password"),
        ("/api/user/login", "nobody@gracechurch.org", PASSWORD),
        ("/api/admins/login", "admin@gracechurch.org", "wrong-password"),
        ("/api/admins/login", "nobody@gracechurch.org", PASSWORD),
    ]
    for path, email, password in attempts:
        r = await client.post(path, json={"email": email, "password": password})
        assert r.status_code == 401, path
        assert r.json() == {"message": "Invalid email or password"}


@pytest.mark.asyncio
async def test_login_returns_working_token(client: httpx.AsyncClient, admin) -> None:
    r = await client.post(
        "/api/admins/login", json={"email": "ADMIN@gracechurch.org", "password": PASSWORD}
    )
    assert r.status_code == 200
    token = r.json()["token"]

    r = await client.get("/api/whoami", headers=bearer(token))
    assert r.json()["role"] == "admin"
    assert r.json()["kind"] == "admin"


@pytest.mark.asyncio
async def test_registration_validation(client: httpx.AsyncClient) -> None:
    r = await client.post(
        "/api/user/register",
        json={
            "username": "ruth",
            "email": "ruth@gracechurch.org",
            "password": PASSWORD,
            "confirmPassword": "something-else",
        },
    )
    assert r.status_code == 400
    assert r.json() == {"message": "Passwords do not match"}

    r = await client.post(
        "/api/user/register",
        json={"username": "ruth", "email": "not-an-email", "password": PASSWORD},
    )
    assert r.status_code == 400
    assert r.json()["errors"]

    await register_user(client, "ruth@gracechurch.org")
    r = await client.post(
        "/api/user/register",
        json={
            "username": "ruth2",
            "email": "ruth@gracechurch.org",
            "password": PASSWORD,
            "confirmPassword": PASSWORD,
        },
    )
    assert r.status_code == 400
    assert r.json() == {"message": "Email already exists"}


@pytest.mark.asyncio
async def test_admin_registration_is_bootstrap_then_admin_only(
    client: httpx.AsyncClient,
) -> None:
    _, first_token = await register_admin(client, "first@gracechurch.org")

    r = await client.post(
        "/api/admins/register",
        json={
            "username": "intruder",
            "email": "intruder@gracechurch.org",
            "password": PASSWORD,
            "confirmPassword": PASSWORD,
        },
    )
    assert r.status_code == 403

    await register_admin(client, "second@gracechurch.org", headers=bearer(first_token))


@pytest.mark.asyncio
async def test_user_cannot_escalate_via_register_or_update(
    client: httpx.AsyncClient, admin
) -> None:
    r = await client.post(
        "/api/user/register",
        json={
            "username": "eve",
            "email": "eve@gracechurch.org",
            "password": PASSWORD,
            "confirmPassword": PASSWORD,
            "role": "admin",
        },
    )
    assert r.status_code == 403

    user, token = await register_user(client, "eve@gracechurch.org")
    r = await client.put(
        f"/api/user/update/{user['id']}",
        json={"role": "admin", "department": "Choir", "phoneNumber": "555-0101"},
        headers=bearer(token),
    )
    assert r.status_code == 200
    updated = r.json()["user"]
    assert updated["role"] == "user"
    assert updated["department"] == "Choir"
    assert updated["phoneNumber"] == "555-0101"

    _, admin_token = admin
    r = await client.put(
        f"/api/user/update/{user['id']}", json={"role": "admin"}, headers=bearer(admin_token)
    )
    assert r.json()["user"]["role"] == "admin"

    # Re-fetch resolution picks up the promotion on the very next request.
    r = await client.get("/api/user/getall", headers=bearer(token))
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_profile_access_is_self_or_admin(client: httpx.AsyncClient, admin) -> None:
    ruth, ruth_token = await register_user(
        client,
        "ruth@gracechurch.org",
        age=30,
        address={"street": "2 Elm St", "city": "Springfield", "zipCode": "62701"},
    )
    boaz, _ = await register_user(client, "boaz@gracechurch.org")

    r = await client.get("/api/user/me", headers=bearer(ruth_token))
    assert r.status_code == 200
    assert r.json()["address"]["zipCode"] == "62701"

    r = await client.get(f"/api/user/{boaz['id']}", headers=bearer(ruth_token))
    assert r.status_code == 403

    _, admin_token = admin
    r = await client.get(f"/api/user/{ruth['id']}", headers=bearer(admin_token))
    assert r.status_code == 200
    assert r.json()["age"] == 30


@pytest.mark.asyncio
async def test_underage_registration_is_rejected(client: httpx.AsyncClient) -> None:
    r = await client.post(
        "/api/user/register",
        json={
            "username": "kid",
            "email": "kid@gracechurch.org",
            "password": PASSWORD,
            "confirmPassword": PASSWORD,
            "age": 12,
        },
    )
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_change_password_endpoint(client: httpx.AsyncClient) -> None:
    user, token = await register_user(client, "ruth@gracechurch.org")
    url = f"/api/user/{user['id']}/password"

    r = await client.put(
        url,
        json={"newPassword": "brand-new-password", "confirmPassword": "mismatch!"},
        headers=bearer(token),
    )
    assert r.status_code == 400

    r = await client.put(
        url,
        json={"newPassword": "brand-new-password", "confirmPassword": "brand-new-password"},
        headers=bearer(token),
    )
    assert r.status_code == 200

    r = await client.post(
        "/api/user/login",
        json={"email": "ruth@gracechurch.org", "password": "brand-new-password"},
    )
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_admin_management(client: httpx.AsyncClient, admin, member) -> None:
    admin_record, admin_token = admin
    _, member_token = member

    r = await client.get("/api/admins/", headers=bearer(member_token))
    assert r.status_code == 403

    r = await client.get("/api/admins/", headers=bearer(admin_token))
    assert r.status_code == 200
    assert r.json()["total"] == 1
    assert r.json()["admins"][0]["email"] == "admin@gracechurch.org"

    r = await client.put(
        f"/api/admins/update/{admin_record['id']}",
        json={"role": "user"},
        headers=bearer(admin_token),
    )
    assert r.status_code == 403
    assert r.json() == {"message": "Not authorized to update admin role"}

    r = await client.put(
        f"/api/admins/update/{admin_record['id']}",
        json={"username": "shepherd"},
        headers=bearer(admin_token),
    )
    assert r.status_code == 200
    assert r.json()["admin"]["username"] == "shepherd"


@pytest.mark.asyncio
async def test_null_username_update_is_a_validation_error(
    client: httpx.AsyncClient, member
) -> None:
    user, token = member
    r = await client.put(
        f"/api/user/update/{user['id']}", json={"username": None}, headers=bearer(token)
    )
    assert r.status_code == 400
    assert r.json()["message"] != "Email already exists"
    assert r.json()["message"].startswith("username")

    r = await client.get("/api/user/me", headers=bearer(token))
    assert r.json()["username"] == "member"


@pytest.mark.asyncio
async def test_last_admin_cannot_delete_itself(client: httpx.AsyncClient, admin) -> None:
    admin_record, token = admin
    r = await client.delete(f"/api/admins/{admin_record['id']}", headers=bearer(token))
    assert r.status_code == 400
    assert r.json() == {"message": "Cannot delete the last admin"}

    r = await client.post(
        "/api/admins/register",
        json={
            "username": "intruder",
            "email": "intruder@gracechurch.org",
            "password": PASSWORD,
            "confirmPassword": PASSWORD,
        },
    )
    assert r.status_code == 403
