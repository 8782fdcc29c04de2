"""User Schemas — boundary shape validation and tri-state conversion.

Tests cover:
    - UserCreate strips names and rejects whitespace-only names and malformed emails
    - UserCreate does not enforce password length (the service does)
    - UserUpdate.to_changes() only carries fields the client sent
    - UserUpdate rejects explicit null and unknown fields
    - UserResponse has no password field
"""

import pytest
from pydantic import ValidationError

from accounts.core.user_changes import UNSET
from accounts.schemas.user import UserCreate, UserResponse, UserUpdate


def test_user_create_strips_name():
    body = UserCreate(name="  Juan  ", email="juan@example.com", password="x")
    assert body.name == "Juan"


def test_user_create_rejects_blank_name():
    with pytest.raises(ValidationError):
        UserCreate(name="   ", email="juan@example.com", password="passwordSeguro")


def test_user_create_rejects_malformed_email():
    with pytest.raises(ValidationError):
        UserCreate(name="Juan", email="juan.example.com", password="passwordSeguro")


def test_user_create_accepts_short_password_for_service_to_judge():
    assert UserCreate(name="Juan", email="j@example.com", password="").password == ""


def test_update_to_changes_omits_unsent_fields():
    changes = UserUpdate.model_validate({"name": "X"}).to_changes()
    assert changes.name == "X"
    assert changes.email is UNSET
    assert changes.password is UNSET


def test_update_to_changes_keeps_empty_password():
    changes = UserUpdate.model_validate({"password": ""}).to_changes()
    assert changes.password == ""


def test_update_empty_body_is_an_empty_patch():
    assert UserUpdate.model_validate({}).to_changes().provided() == {}


def test_update_rejects_explicit_null():
    with pytest.raises(ValidationError, match="cannot be null"):
        UserUpdate.model_validate({"email": None})


def test_update_rejects_unknown_fields():
    with pytest.raises(ValidationError):
        UserUpdate.model_validate({"password_hash": "forged"})


def test_response_has_no_password_fields():
    assert "password_hash" not in UserResponse.model_fields
    assert "password" not in UserResponse.model_fields
