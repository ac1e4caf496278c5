"""Error Hierarchy — typed, categorized exceptions for all TaskVault failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the uniform {success: false, message} envelope
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with TaskVaultError base: FastAPI global handler catches all (ADR: uniform error shape)
    - Authentication failures carry fixed messages chosen by the caller, so a
      missing account and a wrong password are indistinguishable on the wire
"""

from dataclasses import dataclass, field
from enum import Enum
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    AUTHENTICATION = "authentication"
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    RATE_LIMIT = "rate_limit"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    resource_id: str | None = None
    retry_after_seconds: int | None = None


class TaskVaultError(Exception):
    """Base exception for all TaskVault errors."""

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
        """Convert to the uniform REST error envelope."""
        return {"success": False, "message": self.message}


DUPLICATE_EMAIL_MESSAGE = "Email already registered. Please login."


# ─── Domain Errors (400-level) ──────────────────────────────────

class UnauthenticatedError(TaskVaultError):
    """Session cookie missing, invalid, expired, or its identity vanished."""
    def __init__(
        self,
        message: str = "Not authorized. Please login.",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "UNAUTHENTICATED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class InvalidCredentialsError(TaskVaultError):
    """Login rejected. Same message for unknown email and wrong password."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Invalid email or password",
            "INVALID_CREDENTIALS", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class ConflictError(TaskVaultError):
    """Duplicate value for a unique field."""
    def __init__(self, message: str, field: str | None = None, context: ErrorContext | None = None):
        super().__init__(
            message, "CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )
        self.field = field


class ValidationFailedError(TaskVaultError):
    """Field constraints violated."""
    def __init__(self, messages: list[str], context: ErrorContext | None = None):
        super().__init__(
            ". ".join(messages),
            "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.messages = messages


class InvalidPayloadError(TaskVaultError):
    """Encrypted envelope could not be decrypted or parsed."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Invalid encrypted payload",
            "INVALID_PAYLOAD", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


class InvalidIdentifierError(TaskVaultError):
    """Resource id is not a well-formed identifier."""
    def __init__(self, raw_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.resource_id = raw_id
        super().__init__(
            "Invalid ID format",
            "INVALID_ID", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx, 400,
        )


class ResourceNotFoundError(TaskVaultError):
    """Requested resource does not exist or is not owned by the caller."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.resource_id = resource_id
        super().__init__(
            f"{resource_type} not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )


class RateLimitExceededError(TaskVaultError):
    """Client exceeded the request budget for the current window."""
    def __init__(self, retry_after_seconds: int, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.retry_after_seconds = retry_after_seconds
        super().__init__(
            "Too many requests, please try again later.",
            "RATE_LIMIT_EXCEEDED", ErrorCategory.RATE_LIMIT,
            ErrorSeverity.WARNING, ctx, 429,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(TaskVaultError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
