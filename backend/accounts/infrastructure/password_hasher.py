"""Password Hasher — bcrypt with a per-call work factor, run off the event loop.

Invariants:
    - Output is a salted bcrypt hash (str); the same plaintext never hashes identically twice
    - Hashing runs in a worker thread: the event loop keeps serving other requests
    - Plaintext is never logged

Design Decisions:
    - asyncio.to_thread over a dedicated executor: bcrypt releases the GIL while hashing,
      the default pool is enough for the request concurrency we expect
    - Cancellation while the thread runs: the await raises CancelledError, the caller
      skips its write; the thread finishes in the background and its result is dropped
"""

import asyncio

import bcrypt


def _hash_sync(plaintext: str, work_factor: int) -> str:
    salt = bcrypt.gensalt(rounds=work_factor)
    return bcrypt.hashpw(plaintext.encode("utf-8"), salt).decode("utf-8")


class BcryptPasswordHasher:
    """PasswordHasher implementation backed by the bcrypt library."""

    async def hash(self, plaintext: str, work_factor: int) -> str:
        return await asyncio.to_thread(_hash_sync, plaintext, work_factor)
