"""
tests.helpers

Test helpers shared across API tests.
"""

from __future__ import annotations

from typing import Any

import httpx

PASSWORD = "correct-horse-battery"


class FakeBlobStore:
    def __init__(self) -> None:
        self.uploads: list[tuple[str, str, int]] = []

    async def upload(self, *, filename: str, content: bytes, content_type: str) -> str:
        self.uploads.append((filename, content_type, len(content)))
        return f"https://blobs.example.org/events/{filename}"


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


async def register_user(
    client: httpx.AsyncClient,
    email: str,
    *,
    username: str = "member",
    password: str = PASSWORD,
    headers: dict[str, str] | None = None,
    **extra: Any,
) -> tuple[dict[str, Any], str]:
    r = await client.post(
        "/api/user/register",
        json={
            "username": username,
            "email": email,
            "password": password,
            "confirmPassword": password,
            **extra,
        },
        headers=headers,
    )
    assert r.status_code == 201, r.text
    body = r.json()
    return body["user"], body["token"]


async def register_admin(
    client: httpx.AsyncClient,
    email: str,
    *,
    username: str = "pastor",
    password: str = PASSWORD,
    headers: dict[str, str] | None = None,
) -> tuple[dict[str, Any], str]:
    r = await client.post(
        "/api/admins/register",
        json={
            "username": username,
            "email": email,
            "password": password,
            "confirmPassword": password,
        },
        headers=headers,
    )
    assert r.status_code == 201, r.text
    body = r.json()
    return body["admin"], body["token"]
