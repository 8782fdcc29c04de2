"""User Repository — SQLAlchemy implementation of the UserRepository Protocol.

Invariants:
    - active_only() is the single definition of "not soft-deleted"; every read and
      soft_delete go through it
    - save() is insert-or-update: new (transient) users are added, loaded users are flushed
    - A flushed update matches on User.version; soft_delete bumps the version, so an
      update prepared before a concurrent retirement writes nothing and save() returns None
    - soft_delete() only touches active rows, so retiring twice reports 0 affected rows
    - Every commit runs inside translate_db_errors: SQLAlchemy failures leave as DatabaseError

Design Decisions:
    - One repository per request-scoped AsyncSession (injected, never created here)
    - Bulk UPDATE for soft_delete: one round trip and an affected-row count, no load first
    - A stale write is reported as None rather than raised: the service decides whether
      it means NotFound (row retired) or a concurrent edit
"""

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import ColumnElement, Select, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from accounts.core.repository_protocols import UserCriteria
from accounts.infrastructure.database import translate_db_errors
from accounts.models.user import User

logger = logging.getLogger(__name__)


def active_only() -> ColumnElement[bool]:
    """Predicate shared by every query: the row has not been soft-deleted."""
    return User.deleted_at.is_(None)


def select_active(criteria: UserCriteria) -> Select:
    """Build the SELECT for active users matching the equality criteria."""
    query = select(User).where(active_only())
    if criteria.id is not None:
        query = query.where(User.id == criteria.id)
    if criteria.email is not None:
        query = query.where(User.email == criteria.email)
    return query


class SqlAlchemyUserRepository:
    """Persists users through a request-scoped AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_one(self, criteria: UserCriteria) -> User | None:
        async with translate_db_errors(self.db):
            result = await self.db.execute(select_active(criteria).limit(1))
            return result.scalar_one_or_none()

    async def find(
        self, criteria: UserCriteria,
        limit: int | None = None, offset: int = 0,
    ) -> list[User]:
        query = select_active(criteria).order_by(User.created_at, User.id)
        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        async with translate_db_errors(self.db):
            result = await self.db.execute(query)
            return list(result.scalars().all())

    async def save(self, user: User) -> User | None:
        """Insert or update. None when the loaded row changed underneath the write."""
        user_id = user.id
        async with translate_db_errors(self.db):
            self.db.add(user)
            try:
                await self.db.commit()
            except StaleDataError:
                await self.db.rollback()
                logger.warning(
                    "Stale user write discarded",
                    extra={"user_id": user_id, "operation": "save"},
                )
                return None
            await self.db.refresh(user)
        return user

    async def soft_delete(self, user_id: UUID) -> int:
        now = datetime.now(timezone.utc)
        statement = (
            update(User)
            .where(User.id == user_id, active_only())
            .values(deleted_at=now, updated_at=now, version=User.version + 1)
        )
        async with translate_db_errors(self.db):
            result = await self.db.execute(statement)
            await self.db.commit()
        affected = result.rowcount or 0
        logger.debug(
            f"Soft delete affected {affected} row(s)",
            extra={"user_id": user_id, "operation": "soft_delete"},
        )
        return affected
