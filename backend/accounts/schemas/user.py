"""User Schemas — Pydantic models with field-level validation for API boundaries.

Invariants:
    - UserCreate/UserUpdate check shape only (types, lengths, whitespace); password
      policy is enforced by the service so every caller gets the same rule
    - UserUpdate distinguishes "field not sent" from "field sent": only sent fields
      reach UserChanges, and explicit null is rejected
    - UserResponse never carries password_hash

Design Decisions:
    - model_fields_set drives the tri-state conversion: Pydantic already tracks which
      fields the client actually sent
    - Plain str for email with a minimal pattern: address syntax is the transport's concern
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from accounts.core.user_changes import UserChanges

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+$"


def _strip_required(v: str, field_name: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError(f"{field_name} cannot be empty or whitespace")
    return v


class UserCreate(BaseModel):
    """User registration — name, email and plaintext password."""
    name: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=3, max_length=320, pattern=EMAIL_PATTERN)
    password: str

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return _strip_required(v, "name")


class UserUpdate(BaseModel):
    """Partial update — any subset of name, email, password."""
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(None, min_length=1, max_length=255)
    email: str | None = Field(
        None, min_length=3, max_length=320, pattern=EMAIL_PATTERN,
    )
    password: str | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        return v if v is None else _strip_required(v, "name")

    @model_validator(mode="after")
    def reject_explicit_null(self):
        nulled = sorted(
            name for name in self.model_fields_set if getattr(self, name) is None
        )
        if nulled:
            raise ValueError(
                f"fields cannot be null (omit them instead): {', '.join(nulled)}",
            )
        return self

    def to_changes(self) -> UserChanges:
        """Only fields the client sent become present in the patch."""
        return UserChanges(**{
            name: getattr(self, name) for name in self.model_fields_set
        })


class UserResponse(BaseModel):
    """User response — public-facing user data."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str
    created_at: datetime
    updated_at: datetime
