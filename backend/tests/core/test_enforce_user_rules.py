"""User Rule Enforcement — tests for the pure password, email and status checks.

Tests cover:
    - check_password_policy: empty vs too short vs too long vs acceptable
    - Minimum length boundary and custom minimum
    - email_change_requested / is_email_conflict including the self-holder case
    - status_of derives ACTIVE/DELETED from deleted_at
"""

from datetime import datetime, timezone
from uuid import uuid4

from accounts.core.domain_types import PasswordRejection, UserStatus
from accounts.core.enforce_user_rules import (
    MAX_PASSWORD_BYTES,
    MIN_PASSWORD_LENGTH,
    check_password_policy,
    email_change_requested,
    is_email_conflict,
    status_of,
)


# ─── check_password_policy ───────────────────────────────────────

def test_empty_password_is_reported_as_empty_not_too_short():
    assert check_password_policy("") is PasswordRejection.EMPTY


def test_short_password_is_too_short():
    assert check_password_policy("short") is PasswordRejection.TOO_SHORT


def test_password_one_below_minimum_is_too_short():
    assert check_password_policy("x" * (MIN_PASSWORD_LENGTH - 1)) is PasswordRejection.TOO_SHORT


def test_password_at_minimum_is_accepted():
    assert MIN_PASSWORD_LENGTH == 8
    assert check_password_policy("x" * MIN_PASSWORD_LENGTH) is None


def test_whitespace_password_counts_its_characters():
    assert check_password_policy(" " * 8) is None


def test_custom_minimum_length():
    assert check_password_policy("abcdefgh", min_length=12) is PasswordRejection.TOO_SHORT
    assert check_password_policy("abcdefghijkl", min_length=12) is None


def test_password_over_bcrypt_limit_is_too_long():
    assert check_password_policy("x" * (MAX_PASSWORD_BYTES + 1)) is PasswordRejection.TOO_LONG
    assert check_password_policy("x" * MAX_PASSWORD_BYTES) is None


def test_byte_limit_counts_utf8_bytes():
    # 37 two-byte characters = 74 bytes
    assert check_password_policy("é" * 37) is PasswordRejection.TOO_LONG


# ─── email checks ────────────────────────────────────────────────

def test_same_email_is_not_a_change():
    assert not email_change_requested("a@example.com", "a@example.com")


def test_different_email_is_a_change():
    assert email_change_requested("a@example.com", "b@example.com")


def test_no_holder_is_no_conflict():
    assert not is_email_conflict(None, uuid4())


def test_holder_is_the_target_is_no_conflict():
    uid = uuid4()
    assert not is_email_conflict(uid, uid)


def test_other_holder_is_a_conflict():
    assert is_email_conflict(uuid4(), uuid4())


def test_any_holder_conflicts_when_creating():
    assert is_email_conflict(uuid4(), None)


# ─── status_of ───────────────────────────────────────────────────

def test_status_of_null_deleted_at_is_active():
    assert status_of(None) is UserStatus.ACTIVE


def test_status_of_timestamp_is_deleted():
    assert status_of(datetime.now(timezone.utc)) is UserStatus.DELETED
