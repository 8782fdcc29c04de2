"""User ORM — persists user accounts with soft-delete retirement.

Invariants:
    - id is UUID primary key (client-side default uuid4)
    - deleted_at IS NULL means active; a non-null value means retired, never cleared
    - uq_users_email_active: at most one ACTIVE row per email (partial unique index);
      retired rows keep their email, so it can be reused by a new account
    - password_hash only ever holds hasher output

Design Decisions:
    - Partial unique index is the storage back-stop for the service-level email pre-check:
      two concurrent requests can both pass the pre-check, only one insert survives
    - sqlite_where mirrors postgresql_where so the in-memory test DB enforces the same rule
    - updated_at maintained by onupdate: no service code touches it
    - version is the ORM version counter: every flushed UPDATE matches on it, and
      soft_delete bumps it, so a write prepared before a retirement matches no row
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, Index, Integer, text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from accounts.core.domain_types import UserStatus
from accounts.core.enforce_user_rules import status_of
from accounts.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """User account — ACTIVE until soft-deleted."""
    __tablename__ = "users"
    __table_args__ = (
        Index(
            "uq_users_email_active", "email", unique=True,
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
        default=_utcnow, onupdate=_utcnow,
    )
    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, default=None,
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    @property
    def status(self) -> UserStatus:
        return status_of(self.deleted_at)

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r} status={self.status.value}>"
