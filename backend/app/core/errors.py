"""Error Hierarchy — typed, categorized exceptions for all sleep tracker failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are terminal for the request and never retried
    - Infrastructure errors (500-level) propagate from the store untouched by retries
    - to_response() produces the REST envelope; details never carry internal state

Design Decisions:
    - Single hierarchy with SleepTrackerError base: FastAPI global handler catches all
      (ADR: uniform error shape)
    - InvalidParameterError names the offending field plus its allowed range or values,
      so clients can fix the request without reading docs
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    INTERNAL = "internal"


class SleepTrackerError(Exception):
    """Base exception for all sleep tracker errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        details: dict[str, Any] | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.details = details or {}
        self.http_status = http_status
        self.timestamp = datetime.now(timezone.utc)

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.timestamp.isoformat(),
                "details": self.details,
            }
        }


# ─── Request Errors (400-level) ─────────────────────────────────

class InvalidParameterError(SleepTrackerError):
    """A query parameter is malformed or out of range."""
    def __init__(
        self, field: str, message: str, code: str, **allowed: Any,
    ):
        super().__init__(
            message, code, ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, {"field": field, **allowed}, 400,
        )
        self.field = field


class AuthenticationError(SleepTrackerError):
    """X-USER-ID header missing or unparseable."""
    def __init__(self, message: str, code: str = "MISSING_USER_ID"):
        super().__init__(
            message, code, ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, None, 400,
        )


class ResourceNotFoundError(SleepTrackerError):
    """Requested resource does not exist (or is not visible to the caller)."""
    def __init__(self, resource_type: str, resource_id: object, code: str):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            code, ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, None, 404,
        )
        self.resource_type = resource_type


class BusinessRuleError(SleepTrackerError):
    """Request is well-formed but violates a domain rule."""
    def __init__(
        self, message: str, code: str, details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, details, 422,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(SleepTrackerError):
    """Record store unavailable or a database operation failed."""
    def __init__(self, message: str, operation: str):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, None, 503,
        )
        self.operation = operation
