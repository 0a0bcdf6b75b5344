"""
church_api.auth.passwords

Password hashing helpers (bcrypt).

Responsibilities:
- Hash passwords with a random per-record salt and a configurable cost factor.
- Verify candidate passwords against stored hashes.
- Run the CPU-bound work off the event loop.
"""

from __future__ import annotations

import bcrypt
from starlette.concurrency import run_in_threadpool

from church_api.errors import ValidationFailed

# bcrypt only looks at the first 72 bytes; longer inputs are rejected instead of truncated.
MAX_PASSWORD_BYTES = 72


def _encode(password: str) -> bytes:
    raw = password.encode("utf-8")
    if len(raw) > MAX_PASSWORD_BYTES:
        raise ValidationFailed(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return raw


def hash_password(password: str, *, rounds: int) -> str:
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(_encode(password), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    raw = password.encode("utf-8")
    if len(raw) > MAX_PASSWORD_BYTES:
        return False
    try:
        return bcrypt.checkpw(raw, password_hash.encode("utf-8"))
    except ValueError:
        # Corrupt or foreign hash format.
        return False


async def hash_password_async(password: str, *, rounds: int) -> str:
    return await run_in_threadpool(hash_password, password, rounds=rounds)


async def verify_password_async(password: str, password_hash: str) -> bool:
    return await run_in_threadpool(verify_password, password, password_hash)


# --- Module Notes -----------------------------------------------------------
# Cost factor 10 is roughly 100ms per hash on commodity hardware; tests lower it to 4.
