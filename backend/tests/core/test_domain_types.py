"""Domain Types — verifies rich type definitions and enum values.

Tests:
    - UserStatus has exactly the two lifecycle states
    - PasswordRejection keeps empty and too-short as distinct reasons
"""

from accounts.core.domain_types import UserStatus, PasswordRejection


def test_user_status_has_two_states():
    assert set(UserStatus) == {UserStatus.ACTIVE, UserStatus.DELETED}


def test_password_rejection_reasons_are_distinct():
    assert PasswordRejection.EMPTY != PasswordRejection.TOO_SHORT
    assert PasswordRejection.EMPTY.value == "empty"
    assert PasswordRejection.TOO_SHORT.value == "too_short"
    assert PasswordRejection.TOO_LONG.value == "too_long"


def test_enums_compare_equal_to_their_string_value():
    assert UserStatus.ACTIVE == "active"
    assert PasswordRejection.TOO_SHORT == "too_short"
