"""Error Hierarchy — typed, categorized exceptions for all Tutor Network failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the REST envelope used by every error handler
    - No internal details leaked in user-facing messages
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    AUTHENTICATION = "authentication"
    PERMISSION = "permission"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: str | None = None
    booking_id: str | None = None
    availability_id: str | None = None
    retry_after_ms: int | None = None
    debug_info: dict[str, Any] | None = None


class TutorNetworkError(Exception):
    """Base exception for all Tutor Network errors."""

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
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "user_id": self.context.user_id,
                    "booking_id": self.context.booking_id,
                    "availability_id": self.context.availability_id,
                    "retry_after_ms": self.context.retry_after_ms,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class BusinessRuleError(TutorNetworkError):
    """Request is well-formed but violates a booking rule."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "BUSINESS_RULE_VIOLATION", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )


class AuthenticationError(TutorNetworkError):
    """Missing, invalid or expired credentials."""
    def __init__(
        self, message: str = "Invalid credentials", context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "AUTHENTICATION_FAILED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class PermissionDeniedError(TutorNetworkError):
    """Authenticated user may not perform this action."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "PERMISSION_DENIED", ErrorCategory.PERMISSION,
            ErrorSeverity.WARNING, context, 403,
        )


class ResourceNotFoundError(TutorNetworkError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type


class EmailAlreadyRegisteredError(TutorNetworkError):
    """Signup with an email that already has an account."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "An account with this email already exists",
            "EMAIL_ALREADY_REGISTERED", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )


class UsernameTakenError(TutorNetworkError):
    """Profile update chose a username owned by someone else."""
    def __init__(self, username: str, context: ErrorContext | None = None):
        super().__init__(
            f"Username '{username}' is already taken",
            "USERNAME_TAKEN", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )


class AvailabilityExistsError(TutorNetworkError):
    """Tutor already published availability for the date."""
    def __init__(self, date: str, context: ErrorContext | None = None):
        super().__init__(
            f"Availability already exists for {date}. Please select a different date.",
            "AVAILABILITY_EXISTS", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )


class SlotUnavailableError(TutorNetworkError):
    """Slot is no longer open (claimed by someone else or withdrawn)."""
    def __init__(self, date: str, time: str, context: ErrorContext | None = None):
        super().__init__(
            f"The {time} slot on {date} is no longer available. Please select another time.",
            "SLOT_UNAVAILABLE", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )


class BookingNotActiveError(TutorNetworkError):
    """Booking is already cancelled."""
    def __init__(self, booking_id: str, context: ErrorContext | None = None):
        super().__init__(
            f"Booking '{booking_id}' is not active",
            "BOOKING_NOT_ACTIVE", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(TutorNetworkError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class LLMNotConfiguredError(TutorNetworkError):
    """AI feature requested but no model API key is configured."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "AI assistance is not configured on this server",
            "LLM_NOT_CONFIGURED", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.ERROR, context, 503,
        )


class AnthropicAPIError(TutorNetworkError):
    """Anthropic API call failed or returned unusable output."""
    def __init__(
        self,
        message: str,
        api_error_type: str,
        retry_after_ms: int | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.retry_after_ms = retry_after_ms
        super().__init__(
            f"Anthropic API error ({api_error_type}): {message}",
            "ANTHROPIC_API_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, ctx,
            502 if api_error_type == "bad_output" else 503,
        )
        self.api_error_type = api_error_type
