"""Concurrent Writes — the lifecycle service over the real repository, two sessions.

Invariants:
    - A remove that commits while an update is hashing wins: the update raises
      ResourceNotFoundError and the retired row keeps its name and hash
    - Two updates racing on an active user: the later one raises ConcurrencyError
"""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy import select

from accounts.core.errors import ConcurrencyError, ResourceNotFoundError
from accounts.core.user_changes import UserChanges
from accounts.models.user import User
from accounts.repositories.user_repository import SqlAlchemyUserRepository
from accounts.services.user_lifecycle import UserLifecycleService


class _InterleavingHasher:
    """Runs `interleave` in its own session before returning a fixed hash."""

    def __init__(self, session_factory, interleave):
        self.session_factory = session_factory
        self.interleave = interleave

    async def hash(self, plaintext: str, work_factor: int) -> str:
        async with self.session_factory() as other:
            await self.interleave(SqlAlchemyUserRepository(other))
        return "new-hash"


@pytest.fixture
async def user_id(test_db):
    user = await SqlAlchemyUserRepository(test_db).save(
        User(name="Juan", email="juan@example.com", password_hash="original-hash"),
    )
    return user.id


async def _row(session_factory, user_id):
    async with session_factory() as fresh:
        return (await fresh.execute(
            select(User.name, User.password_hash, User.deleted_at)
            .where(User.id == user_id),
        )).one()


async def test_remove_during_update_hashing_leaves_retired_row_untouched(
    test_db, test_session_factory, user_id,
):
    async def remove(repository):
        assert await repository.soft_delete(user_id) == 1

    service = UserLifecycleService(
        SqlAlchemyUserRepository(test_db),
        _InterleavingHasher(test_session_factory, remove),
    )

    with pytest.raises(ResourceNotFoundError):
        await service.update(
            user_id, UserChanges(name="Mutated", password="passwordNuevo"),
        )

    row = await _row(test_session_factory, user_id)
    assert row.name == "Juan"
    assert row.password_hash == "original-hash"
    assert row.deleted_at is not None


async def test_update_during_update_hashing_raises_concurrency_conflict(
    test_db, test_session_factory, user_id,
):
    async def rename(repository):
        other = UserLifecycleService(repository, AsyncMock())
        await other.update(user_id, UserChanges(name="First"))

    service = UserLifecycleService(
        SqlAlchemyUserRepository(test_db),
        _InterleavingHasher(test_session_factory, rename),
    )

    with pytest.raises(ConcurrencyError):
        await service.update(
            user_id, UserChanges(name="Second", password="passwordNuevo"),
        )

    row = await _row(test_session_factory, user_id)
    assert row.name == "First"
    assert row.password_hash == "original-hash"
    assert row.deleted_at is None
