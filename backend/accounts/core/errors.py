"""Error Hierarchy — typed, categorized exceptions for all Accounts failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are caller-correctable; infrastructure errors (500-level) are critical
    - to_response() produces the REST envelope
    - No internal details leaked in user-facing messages (never the password or its hash)

Design Decisions:
    - Single hierarchy with AccountsError base: FastAPI global handler catches all
    - Conflict / NotFound / BadRequest / StoreFailure are the four kinds callers branch on;
      concrete subclasses refine them without changing the kind
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone

from accounts.core.domain_types import PasswordRejection
from accounts.core.enforce_user_rules import MAX_PASSWORD_BYTES


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: str | None = None
    operation: str | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None


class AccountsError(Exception):
    """Base exception for all Accounts errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.context.user_message or self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "user_id": self.context.user_id,
                    "operation": self.context.operation,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class BadRequestError(AccountsError):
    """Caller-supplied data failed a policy check."""
    def __init__(
        self, message: str, code: str = "BAD_REQUEST",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


class PasswordPolicyError(BadRequestError):
    """Password is empty, shorter than the minimum, or beyond the hasher's input limit."""

    _CODES = {
        PasswordRejection.EMPTY: "PASSWORD_EMPTY",
        PasswordRejection.TOO_SHORT: "PASSWORD_TOO_SHORT",
        PasswordRejection.TOO_LONG: "PASSWORD_TOO_LONG",
    }

    def __init__(
        self, reason: PasswordRejection, min_length: int,
        context: ErrorContext | None = None,
    ):
        if reason is PasswordRejection.EMPTY:
            message = "Password must not be empty"
        elif reason is PasswordRejection.TOO_SHORT:
            message = f"Password must be at least {min_length} characters long"
        else:
            message = f"Password must be at most {MAX_PASSWORD_BYTES} bytes long"
        super().__init__(message, self._CODES[reason], context)
        self.reason = reason
        self.min_length = min_length


class ResourceNotFoundError(AccountsError):
    """Requested resource does not exist among active entities."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class ConflictError(AccountsError):
    """A uniqueness invariant would be violated."""
    def __init__(
        self, message: str, code: str = "CONFLICT",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


class EmailAlreadyRegisteredError(ConflictError):
    """Another active user already holds this email."""
    def __init__(self, email: str, context: ErrorContext | None = None):
        super().__init__(
            "Email already registered", "EMAIL_ALREADY_REGISTERED", context,
        )
        self.email = email


class ConcurrencyError(ConflictError):
    """The row changed between read and write; the caller may retry."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(message, "CONCURRENCY_CONFLICT", context)


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(AccountsError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
