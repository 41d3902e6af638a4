"""
Custom exceptions for the FlowFast coaching app.

This module defines a hierarchy of exceptions used throughout the
application. Each exception includes:
- A descriptive message
- An error code for API responses
- HTTP status code mapping
- Optional details for debugging
"""

from typing import Any, Dict, Optional
from enum import Enum


class ErrorCode(str, Enum):
    """Error codes for consistent API error responses."""

    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"

    # Input errors
    PLAN_REQUEST_INVALID = "PLAN_REQUEST_INVALID"
    FEEDBACK_INVALID = "FEEDBACK_INVALID"
    GOALS_INVALID = "GOALS_INVALID"

    # Session / player errors
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    PLAYER_STATE_ERROR = "PLAYER_STATE_ERROR"

    # Plan generation errors
    PLAN_GENERATION_FAILED = "PLAN_GENERATION_FAILED"

    # LLM errors
    LLM_SERVICE_UNAVAILABLE = "LLM_SERVICE_UNAVAILABLE"
    LLM_RATE_LIMITED = "LLM_RATE_LIMITED"
    LLM_RESPONSE_INVALID = "LLM_RESPONSE_INVALID"
    LLM_TIMEOUT = "LLM_TIMEOUT"
    LLM_API_ERROR = "LLM_API_ERROR"

    # Persistence errors
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"


class FlowFastError(Exception):
    """
    Base exception for all FlowFast errors.

    Attributes:
        message: Human-readable error message
        code: Error code from ErrorCode enum
        status_code: HTTP status code for API responses
        details: Optional dictionary with additional error details
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API response."""
        result: Dict[str, Any] = {
            "error": {
                "code": self.code.value,
                "message": self.message,
            }
        }
        if self.details:
            result["error"]["details"] = self.details
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code.value}, message={self.message!r})"


# ============================================================================
# Validation Errors (400)
# ============================================================================

class ValidationError(FlowFastError):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = details or {}
        if field:
            error_details["field"] = field
        super().__init__(
            message=message,
            code=ErrorCode.VALIDATION_ERROR,
            status_code=400,
            details=error_details,
        )


class PlanRequestValidationError(ValidationError):
    """Raised when a plan request is rejected before any network call."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message=message, field=field, details=details)
        self.code = ErrorCode.PLAN_REQUEST_INVALID


class FeedbackValidationError(ValidationError):
    """Raised when post-workout feedback is out of range."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message=message, field=field, details=details)
        self.code = ErrorCode.FEEDBACK_INVALID


class GoalsValidationError(ValidationError):
    """Raised when weekly goals are out of range."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message=message, field=field, details=details)
        self.code = ErrorCode.GOALS_INVALID


# ============================================================================
# Not Found Errors (404)
# ============================================================================

class NotFoundError(FlowFastError):
    """Raised when a requested resource is not found."""

    def __init__(
        self,
        resource_type: str,
        resource_id: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        message = f"{resource_type} with ID '{resource_id}' not found"
        error_details = details or {}
        error_details["resource_type"] = resource_type
        error_details["resource_id"] = resource_id
        super().__init__(
            message=message,
            code=ErrorCode.NOT_FOUND,
            status_code=404,
            details=error_details,
        )


class SessionNotFoundError(NotFoundError):
    """Raised when no stored workout session matches the requested id."""

    def __init__(self, session_id: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(
            resource_type="Workout session",
            resource_id=session_id,
            details=details,
        )
        self.code = ErrorCode.SESSION_NOT_FOUND


# ============================================================================
# Player Errors (409)
# ============================================================================

class PlayerStateError(FlowFastError):
    """Raised when a player transition is not allowed from the current state."""

    def __init__(
        self,
        action: str,
        state: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = details or {}
        error_details["action"] = action
        error_details["state"] = state
        super().__init__(
            message=f"Cannot {action} while timer is {state}",
            code=ErrorCode.PLAYER_STATE_ERROR,
            status_code=409,
            details=error_details,
        )


# ============================================================================
# LLM Service Errors (500/503)
# ============================================================================

class LLMError(FlowFastError):
    """Base class for LLM-related errors."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.LLM_API_ERROR,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            code=code,
            status_code=status_code,
            details=details,
        )


class LLMServiceUnavailableError(LLMError):
    """Raised when the LLM service is unavailable."""

    def __init__(
        self,
        message: str = "LLM service is currently unavailable",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCode.LLM_SERVICE_UNAVAILABLE,
            status_code=503,
            details=details,
        )


class LLMRateLimitError(LLMError):
    """Raised when LLM rate limits or usage quotas are hit."""

    def __init__(
        self,
        message: str = "LLM service rate limit exceeded. Please try again later.",
        retry_after: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = details or {}
        if retry_after:
            error_details["retry_after_seconds"] = retry_after
        super().__init__(
            message=message,
            code=ErrorCode.LLM_RATE_LIMITED,
            status_code=429,
            details=error_details,
        )


class LLMTimeoutError(LLMError):
    """Raised when LLM request times out."""

    def __init__(
        self,
        timeout_seconds: Optional[float] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = details or {}
        if timeout_seconds:
            error_details["timeout_seconds"] = timeout_seconds
        super().__init__(
            message="LLM request timed out",
            code=ErrorCode.LLM_TIMEOUT,
            status_code=504,
            details=error_details,
        )


class LLMResponseInvalidError(LLMError):
    """Raised when an LLM response is malformed or incomplete."""

    def __init__(
        self,
        message: str = "Failed to parse LLM response",
        raw_response: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = details or {}
        if raw_response:
            error_details["raw_response_preview"] = raw_response[:500]
        super().__init__(
            message=message,
            code=ErrorCode.LLM_RESPONSE_INVALID,
            status_code=500,
            details=error_details,
        )


# ============================================================================
# Plan Generation Errors
# ============================================================================

class PlanGenerationError(FlowFastError):
    """Raised when plan generation fails."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCode.PLAN_GENERATION_FAILED,
            status_code=500,
            details=details,
        )


# ============================================================================
# Persistence Errors (503)
# ============================================================================

class StoreError(FlowFastError):
    """Raised when a history/goals/session store cannot be reached."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        user_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = details or {}
        if operation:
            error_details["operation"] = operation
        if user_id:
            error_details["user_id"] = user_id
        super().__init__(
            message=message,
            code=ErrorCode.STORE_UNAVAILABLE,
            status_code=503,
            details=error_details,
        )
