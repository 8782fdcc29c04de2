"""User Rule Enforcement — pure checks the lifecycle service runs before any side effect.

Invariants:
    - Every check is PURE: returns a verdict, never raises, never touches IO
    - Shell decides what to do with the verdict (raise, hash, write)
    - MIN_PASSWORD_LENGTH (8) is the default policy; Settings may override it
    - An empty password is reported as EMPTY, never as TOO_SHORT

Design Decisions:
    - Verdicts instead of exceptions: the service owns the error taxonomy and ordering,
      so these functions can be tested without mocks
"""

from datetime import datetime
from uuid import UUID

from accounts.core.domain_types import PasswordRejection, UserStatus


MIN_PASSWORD_LENGTH: int = 8
MAX_PASSWORD_BYTES: int = 72  # bcrypt input limit


def check_password_policy(
    plaintext: str, min_length: int = MIN_PASSWORD_LENGTH,
) -> PasswordRejection | None:
    """Return why the password is rejected, or None when it is acceptable."""
    if plaintext == "":
        return PasswordRejection.EMPTY
    if len(plaintext) < min_length:
        return PasswordRejection.TOO_SHORT
    if len(plaintext.encode("utf-8")) > MAX_PASSWORD_BYTES:
        return PasswordRejection.TOO_LONG
    return None


def email_change_requested(current_email: str, requested_email: str) -> bool:
    """True when an update carries an email different from the stored one."""
    return requested_email != current_email


def is_email_conflict(holder_id: UUID | None, target_id: UUID | None) -> bool:
    """True when the active holder of an email is someone other than the target.

    holder_id is None when nobody holds the email. target_id is None on create,
    so any holder conflicts.
    """
    if holder_id is None:
        return False
    return holder_id != target_id


def status_of(deleted_at: datetime | None) -> UserStatus:
    return UserStatus.ACTIVE if deleted_at is None else UserStatus.DELETED
