"""User Changes — explicit tri-state patch for partial updates.

Invariants:
    - Each field is either UNSET (not provided) or a concrete value
    - UNSET is never conflated with "" or None: an empty password is present and gets rejected
    - UserChanges is immutable (frozen) once built

Design Decisions:
    - Sentinel singleton over Optional: None and "" are both legitimate "provided" values
      at the boundary, so absence needs its own marker
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Literal


class _Unset(Enum):
    """Marker for a field the caller did not send."""
    UNSET = "UNSET"

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET = _Unset.UNSET
UnsetType = Literal[_Unset.UNSET]


@dataclass(frozen=True)
class UserChanges:
    """Partial update request for a user. Absent fields stay untouched."""
    name: str | UnsetType = UNSET
    email: str | UnsetType = UNSET
    password: str | UnsetType = UNSET

    def provided(self) -> dict[str, Any]:
        """Fields the caller actually supplied, keyed by name."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not UNSET
        }

    def __repr__(self) -> str:
        # The plaintext password must never end up in logs or tracebacks
        shown = {
            key: ("***" if key == "password" else value)
            for key, value in self.provided().items()
        }
        return f"UserChanges({shown})"


def is_set(value: object) -> bool:
    return value is not UNSET
