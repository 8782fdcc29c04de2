"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Every UserRepository read is active-only; callers cannot opt out
    - soft_delete returns the number of rows it retired (0 or 1)
    - save returns None when an existing row changed or was retired after it was read

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: implementations do IO (database, bcrypt in a worker thread)
    - UserCriteria is equality-only on id and/or email; the active-only predicate is
      added by the repository, so a new read path cannot forget it
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID


class UserLike(Protocol):
    """Structural contract for User objects handled by the lifecycle service.

    Avoids coupling the core to the ORM model while giving mypy
    real type information (unlike Any).
    """
    id: UUID
    name: str
    email: str
    password_hash: str
    deleted_at: datetime | None


@dataclass(frozen=True)
class UserCriteria:
    """Equality filter on active users. Empty criteria match every active user."""
    id: UUID | None = None
    email: str | None = None


class UserRepository(Protocol):
    """Contract for user persistence — implemented by shell."""
    async def find_one(self, criteria: UserCriteria) -> UserLike | None: ...
    async def find(
        self, criteria: UserCriteria,
        limit: int | None = None, offset: int = 0,
    ) -> list[UserLike]: ...
    async def save(self, user: UserLike) -> UserLike | None: ...
    async def soft_delete(self, user_id: UUID) -> int: ...


class PasswordHasher(Protocol):
    """Contract for one-way password hashing — implemented by shell.

    Output is salted, so two calls with the same plaintext differ.
    """
    async def hash(self, plaintext: str, work_factor: int) -> str: ...
