"""Error Hierarchy — typed, categorized exceptions for all LamontAI failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Client errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the REST envelope used by every error handler
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with LamontError base: FastAPI global handler catches all (ADR: uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
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
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    RATE_LIMIT = "rate_limit"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"
    CONFLICT = "conflict"
    TIMEOUT = "timeout"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: str | None = None
    resource_id: str | None = None
    url: str | None = None
    debug_info: dict[str, Any] | None = None
    retry_after_ms: int | None = None


class LamontError(Exception):
    """Base exception for all LamontAI errors."""

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
            "success": False,
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "resource_id": self.context.resource_id,
                    "url": self.context.url,
                    "retry_after_ms": self.context.retry_after_ms,
                },
            },
        }


# ─── Client Errors (400-level) ──────────────────────────────────

class RequestValidationFailed(LamontError):
    """Request data failed a check that Pydantic cannot express."""
    def __init__(self, message: str, field: str | None = None, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


class BusinessRuleError(LamontError):
    """Operation is well-formed but not allowed in the current state."""
    def __init__(self, message: str, code: str = "BUSINESS_RULE_VIOLATION", context: ErrorContext | None = None):
        super().__init__(
            message, code, ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )


class AuthenticationError(LamontError):
    """Missing, invalid, expired or revoked credentials."""
    def __init__(self, message: str = "Not authorized", context: ErrorContext | None = None):
        super().__init__(
            message, "AUTHENTICATION_FAILED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class AuthorizationError(LamontError):
    """Authenticated user lacks the required role."""
    def __init__(self, message: str = "Forbidden", context: ErrorContext | None = None):
        super().__init__(
            message, "FORBIDDEN", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403,
        )


class InsufficientCreditsError(LamontError):
    """User has no credits left for a paid action."""
    def __init__(self, action: str, context: ErrorContext | None = None):
        super().__init__(
            f"You do not have enough credits to {action}",
            "INSUFFICIENT_CREDITS", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, context, 403,
        )
        self.action = action


class PlanLimitExceededError(LamontError):
    """User reached the article allowance of their plan."""
    def __init__(self, limit: int, plan: str, context: ErrorContext | None = None):
        super().__init__(
            f"You have reached your limit of {limit} articles for your {plan} plan",
            "PLAN_LIMIT_REACHED", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, context, 403,
        )
        self.limit = limit
        self.plan = plan


class ResourceNotFoundError(LamontError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.resource_id = resource_id
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )


class ConflictError(LamontError):
    """Unique constraint on a business key would be violated."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


class RateLimitExceededError(LamontError):
    """Client exceeded the request budget of its window."""
    def __init__(self, retry_after_seconds: int, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.retry_after_ms = retry_after_seconds * 1000
        super().__init__(
            "Too many requests, please try again later.",
            "RATE_LIMITED", ErrorCategory.RATE_LIMIT,
            ErrorSeverity.WARNING, ctx, 429,
        )
        self.retry_after_seconds = retry_after_seconds


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(LamontError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class LLMAPIError(LamontError):
    """Language model API call failed or returned an unusable payload."""
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
            f"Language model error ({api_error_type}): {message}",
            "LLM_API_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, ctx, 503,
        )
        self.api_error_type = api_error_type


class UpstreamFetchError(LamontError):
    """Fetching a third-party URL (sitemap, page) failed."""
    def __init__(self, message: str, url: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.url = url
        super().__init__(
            message, "UPSTREAM_FETCH_FAILED", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.ERROR, ctx, 502,
        )


class ServiceUnavailableError(LamontError):
    """A dependency is short-circuited by its breaker."""
    def __init__(self, service: str, context: ErrorContext | None = None):
        super().__init__(
            f"Service {service} is unavailable",
            "SERVICE_UNAVAILABLE", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.ERROR, context, 503,
        )
        self.service = service


class RequestTimeoutError(LamontError):
    """Request processing exceeded the configured deadline."""
    def __init__(self, timeout_seconds: float, context: ErrorContext | None = None):
        super().__init__(
            f"The server took too long to respond (>{timeout_seconds:g}s)",
            "REQUEST_TIMEOUT", ErrorCategory.TIMEOUT,
            ErrorSeverity.ERROR, context, 504,
        )
