"""Error Hierarchy: typed, categorized exceptions for every anchor-service failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Caller errors (400-level) are recoverable; storage/integrity errors (500-level) are critical
    - to_response() never includes internal detail for 500-level errors

Design Decisions:
    - Single hierarchy with AnchorServiceError base: one FastAPI handler catches all
    - Classification happens once, in the repository; routes only raise what they receive
"""

from dataclasses import dataclass, field
from enum import Enum
from datetime import datetime, timezone


GENERIC_FAILURE_MESSAGE = "An unexpected error occurred"


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
    """Context attached to an error for logs."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    anchor_id: str | None = None
    account_reference: str | None = None


class AnchorServiceError(Exception):
    """Base exception for all anchor-service errors."""

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

    @property
    def is_internal(self) -> bool:
        return self.http_status >= 500

    def to_response(self) -> dict:
        """Convert to the REST error envelope."""
        if self.is_internal:
            return {
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": GENERIC_FAILURE_MESSAGE,
                    "category": ErrorCategory.INTERNAL.value,
                    "severity": self.severity.value,
                    "timestamp": self.context.timestamp.isoformat(),
                }
            }
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
            }
        }


# ─── Caller Errors (400-level) ──────────────────────────────────

class InvalidInputError(AnchorServiceError):
    """Caller-supplied data failed validation."""
    def __init__(
        self, message: str, field: str | None = None, context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "INVALID_INPUT", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


class NotFoundError(AnchorServiceError):
    """Referenced entity does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class ConflictError(AnchorServiceError):
    """Uniqueness constraint rejected the write."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class StorageUnavailableError(AnchorServiceError):
    """Store unreachable or the statement failed for infrastructure reasons."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "STORAGE_UNAVAILABLE", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.operation = operation


class InvariantViolationError(AnchorServiceError):
    """Stored data contradicts a documented invariant. Always a defect."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVARIANT_VIOLATION", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context, 500,
        )
