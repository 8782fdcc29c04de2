"""User Lifecycle Service — create, read, update and soft-delete users under the account rules.

Invariants:
    - At most one ACTIVE user per email (service pre-check + partial unique index)
    - password_hash is always hasher output for a plaintext that passed the policy
    - Soft-deleted users are invisible to every lookup here and never mutated again: the
      update write matches on the row version, which soft delete bumps, so a remove that
      commits while an update is hashing turns that update into ResourceNotFoundError
    - Checks run before side effects, in this order: existence, email uniqueness,
      password policy, then hashing, then the single write
    - A failed check aborts with no write; an email conflict never reaches the hasher
    - find_by_email returns None on absence; find_one raises ResourceNotFoundError

Design Decisions:
    - Stateless: no locks, no caches. The email check is check-then-act and NOT atomic:
      two requests racing on the same email can both pass the pre-check. The partial
      unique index rejects the second insert, which surfaces as DatabaseError (503) and is
      not retried. The pre-check exists for the friendly 409 in the common case.
    - Two updates racing on the same active user: the later write matches no row version
      and fails with ConcurrencyError (409) instead of silently overwriting the first
    - Hashing awaits a worker thread; cancellation at any await before save() means no write
    - Store failures propagate unchanged: retrying create without deduplication could
      register the same account twice
"""

import logging
from uuid import UUID

from accounts.core.enforce_user_rules import (
    MIN_PASSWORD_LENGTH,
    check_password_policy,
    email_change_requested,
    is_email_conflict,
)
from accounts.core.errors import (
    ConcurrencyError,
    EmailAlreadyRegisteredError,
    ErrorContext,
    PasswordPolicyError,
    ResourceNotFoundError,
)
from accounts.core.repository_protocols import (
    PasswordHasher, UserCriteria, UserRepository,
)
from accounts.core.user_changes import UNSET, UserChanges, is_set
from accounts.models.user import User

logger = logging.getLogger(__name__)

DEFAULT_WORK_FACTOR: int = 10


class UserLifecycleService:
    """Business rules for the user entity, over an injected repository and hasher."""

    def __init__(
        self,
        repository: UserRepository,
        hasher: PasswordHasher,
        work_factor: int = DEFAULT_WORK_FACTOR,
        min_password_length: int = MIN_PASSWORD_LENGTH,
    ):
        self.repository = repository
        self.hasher = hasher
        self.work_factor = work_factor
        self.min_password_length = min_password_length

    # ─── Create ──────────────────────────────────────────────────

    async def create(self, name: str, email: str, password: str) -> User:
        """Register a new active user. Conflict if the email is taken by an active user."""
        holder = await self.find_by_email(email)
        if is_email_conflict(holder.id if holder else None, None):
            logger.info(
                "Registration rejected: email already registered",
                extra={"operation": "create", "error_code": "EMAIL_ALREADY_REGISTERED"},
            )
            raise EmailAlreadyRegisteredError(
                email, ErrorContext(operation="create"),
            )

        self._enforce_password_policy(password, ErrorContext(operation="create"))
        password_hash = await self.hasher.hash(password, self.work_factor)

        user = User(
            name=name, email=email,
            password_hash=password_hash, deleted_at=None,
        )
        saved = await self.repository.save(user)
        logger.info(
            "User created", extra={"user_id": saved.id, "operation": "create"},
        )
        return saved

    # ─── Read ────────────────────────────────────────────────────

    async def find_all(
        self, limit: int | None = None, offset: int = 0,
    ) -> list[User]:
        """All active users. Without limit/offset the whole active set is returned."""
        return await self.repository.find(
            UserCriteria(), limit=limit, offset=offset,
        )

    async def find_one(self, user_id: UUID) -> User:
        user = await self.repository.find_one(UserCriteria(id=user_id))
        if user is None:
            raise ResourceNotFoundError(
                "User", str(user_id),
                ErrorContext(user_id=str(user_id), operation="find_one"),
            )
        return user

    async def find_by_email(self, email: str) -> User | None:
        """Active user holding the email, or None. Absence is not an error."""
        return await self.repository.find_one(UserCriteria(email=email))

    # ─── Update ──────────────────────────────────────────────────

    async def update(self, user_id: UUID, changes: UserChanges) -> User:
        """Apply a partial update. Fields left UNSET in `changes` are not touched."""
        user = await self.find_one(user_id)
        context = ErrorContext(user_id=str(user_id), operation="update")

        if is_set(changes.email) and email_change_requested(user.email, changes.email):
            holder = await self.find_by_email(changes.email)
            if is_email_conflict(holder.id if holder else None, user.id):
                logger.info(
                    "Update rejected: email held by another active user",
                    extra={
                        "user_id": user_id, "operation": "update",
                        "error_code": "EMAIL_ALREADY_REGISTERED",
                    },
                )
                raise EmailAlreadyRegisteredError(changes.email, context)

        new_hash = UNSET
        if is_set(changes.password):
            self._enforce_password_policy(changes.password, context)
            new_hash = await self.hasher.hash(changes.password, self.work_factor)

        # Nothing below can fail: staged values are applied together
        if is_set(changes.name):
            user.name = changes.name
        if is_set(changes.email):
            user.email = changes.email
        if is_set(new_hash):
            user.password_hash = new_hash

        saved = await self.repository.save(user)
        if saved is None:
            await self._reject_lost_write(user_id, context)
        logger.info(
            f"User updated ({', '.join(sorted(changes.provided())) or 'no fields'})",
            extra={"user_id": user_id, "operation": "update"},
        )
        return saved

    # ─── Remove ──────────────────────────────────────────────────

    async def remove(self, user_id: UUID) -> None:
        """Soft-delete an active user. NotFound when nothing was retired."""
        affected = await self.repository.soft_delete(user_id)
        if affected == 0:
            raise ResourceNotFoundError(
                "User", str(user_id),
                ErrorContext(user_id=str(user_id), operation="remove"),
            )
        logger.info(
            "User soft-deleted", extra={"user_id": user_id, "operation": "remove"},
        )

    # ─── Helpers ─────────────────────────────────────────────────

    async def _reject_lost_write(self, user_id: UUID, context: ErrorContext) -> None:
        """The row changed after it was read. NotFound if it was retired meanwhile."""
        if await self.repository.find_one(UserCriteria(id=user_id)) is None:
            logger.info(
                "Update discarded: user was removed concurrently",
                extra={"user_id": user_id, "operation": "update"},
            )
            raise ResourceNotFoundError("User", str(user_id), context)
        raise ConcurrencyError(
            "User was modified by another request, retry the update", context,
        )

    def _enforce_password_policy(
        self, password: str, context: ErrorContext,
    ) -> None:
        """Raise PasswordPolicyError before any hashing happens."""
        rejection = check_password_policy(password, self.min_password_length)
        if rejection is None:
            return
        logger.info(
            "Password rejected by policy",
            extra={
                "user_id": context.user_id, "operation": context.operation,
                "reason": rejection.value,
            },
        )
        raise PasswordPolicyError(rejection, self.min_password_length, context)
