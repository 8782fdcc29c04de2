"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum


# ─── Enums ───────────────────────────────────────────────────────

class UserStatus(str, Enum):
    """User lifecycle states — derived from the `deleted_at` column.

    ACTIVE -> DELETED is the only transition, and it is one-way.
    """
    ACTIVE = "active"
    DELETED = "deleted"


class PasswordRejection(str, Enum):
    """Why a plaintext password failed the policy. All map to BadRequest."""
    EMPTY = "empty"
    TOO_SHORT = "too_short"
    TOO_LONG = "too_long"
