"""
tests.test_branches_api

Branch CRUD, role gates and the pagination envelope.
"""

from __future__ import annotations

import httpx
import pytest

from helpers import bearer


def _branch(name: str) -> dict[str, str]:
    return {
        "branchName": name,
        "address": "1 Main St",
        "city": "Springfield",
        "state": "IL",
        "country": "US",
        "email": "office@gracechurch.org",
        "phone": "555-0100",
    }


@pytest.mark.asyncio
async def test_pagination_envelope(client: httpx.AsyncClient, admin) -> None:
    _, token = admin
    for i in range(25):
        r = await client.post(
            "/api/branches/", json=_branch(f"Branch {i:02d}"), headers=bearer(token)
        )
        assert r.status_code == 201

    r = await client.get("/api/branches/getAll?page=2&limit=10", headers=bearer(token))
    assert r.status_code == 200
    body = r.json()
    assert body["page"] == 2
    assert body["limit"] == 10
    assert body["total"] == 25
    assert body["totalPages"] == 3
    assert len(body["branches"]) == 10

    r = await client.get("/api/branches/getAll?page=3&limit=10", headers=bearer(token))
    assert len(r.json()["branches"]) == 5


@pytest.mark.asyncio
async def test_pagination_params_are_validated(client: httpx.AsyncClient, admin) -> None:
    _, token = admin
    r = await client.get("/api/branches/getAll?page=0", headers=bearer(token))
    assert r.status_code == 400

    r = await client.get("/api/branches/getAll?limit=1000", headers=bearer(token))
    assert r.status_code == 200
    assert r.json()["limit"] == 100


@pytest.mark.asyncio
async def test_branch_reads_need_authentication(client: httpx.AsyncClient, branch) -> None:
    r = await client.get("/api/branches/getAll")
    assert r.status_code == 401

    r = await client.get(f"/api/branches/{branch['id']}")
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_members_cannot_mutate_branches(
    client: httpx.AsyncClient, branch, member
) -> None:
    _, token = member
    r = await client.post("/api/branches/", json=_branch("Rogue"), headers=bearer(token))
    assert r.status_code == 403

    r = await client.delete(f"/api/branches/{branch['id']}", headers=bearer(token))
    assert r.status_code == 403

    r = await client.get(f"/api/branches/{branch['id']}", headers=bearer(token))
    assert r.status_code == 200
    assert r.json()["branchName"] == "Downtown"


@pytest.mark.asyncio
async def test_branch_lifecycle(client: httpx.AsyncClient, admin, branch) -> None:
    admin_record, token = admin
    assert branch["createdBy"] == admin_record["id"]

    r = await client.post("/api/branches/", json=_branch("Downtown"), headers=bearer(token))
    assert r.status_code == 400
    assert r.json() == {"message": "Branch with this name already exists"}

    r = await client.put(
        f"/api/branches/{branch['id']}",
        json={
            "branchName": "Uptown",
            "address": "9 Hill Rd",
            "city": "Springfield",
            "country": "US",
            "leadPastor": "Rev. Naomi",
        },
        headers=bearer(token),
    )
    assert r.status_code == 200
    updated = r.json()["branch"]
    assert updated["branchName"] == "Uptown"
    assert updated["leadPastor"] == "Rev. Naomi"
    assert updated["state"] == "IL"

    r = await client.delete(f"/api/branches/{branch['id']}", headers=bearer(token))
    assert r.status_code == 200

    r = await client.get(f"/api/branches/{branch['id']}", headers=bearer(token))
    assert r.status_code == 404
    assert r.json() == {"message": "Branch not found"}


@pytest.mark.asyncio
async def test_rename_carries_over_to_event_branch_lookup(
    client: httpx.AsyncClient, admin, member, branch
) -> None:
    _, admin_token = admin
    user, member_token = member
    r = await client.post(
        "/api/events",
        data={
            "title": "Harvest Supper",
            "date": "2024-10-05T18:00:00",
            "location": branch["id"],
            "organizer": user["id"],
        },
        headers=bearer(member_token),
    )
    assert r.status_code == 201, r.text

    r = await client.put(
        f"/api/branches/{branch['id']}",
        json={
            "branchName": "Riverside",
            "address": "1 Main St",
            "city": "Springfield",
            "country": "US",
        },
        headers=bearer(admin_token),
    )
    assert r.status_code == 200

    r = await client.get("/api/events/branch", params={"branchName": "Riverside"})
    assert [e["title"] for e in r.json()] == ["Harvest Supper"]
    assert r.json()[0]["branchName"] == "Riverside"

    r = await client.get("/api/events/branch", params={"branchName": "Downtown"})
    assert r.json() == []
