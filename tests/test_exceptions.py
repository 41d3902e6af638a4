"""Tests for the exception hierarchy."""

import pytest

from flowfast.exceptions import (
    ErrorCode,
    FeedbackValidationError,
    FlowFastError,
    GoalsValidationError,
    LLMError,
    LLMRateLimitError,
    LLMResponseInvalidError,
    LLMServiceUnavailableError,
    LLMTimeoutError,
    NotFoundError,
    PlanGenerationError,
    PlanRequestValidationError,
    PlayerStateError,
    SessionNotFoundError,
    StoreError,
    ValidationError,
)


ERRORS = [
    (FlowFastError("boom"), ErrorCode.INTERNAL_ERROR, 500),
    (ValidationError("bad", field="x"), ErrorCode.VALIDATION_ERROR, 400),
    (PlanRequestValidationError("bad"), ErrorCode.PLAN_REQUEST_INVALID, 400),
    (FeedbackValidationError("bad"), ErrorCode.FEEDBACK_INVALID, 400),
    (GoalsValidationError("bad"), ErrorCode.GOALS_INVALID, 400),
    (NotFoundError("Thing", "1"), ErrorCode.NOT_FOUND, 404),
    (SessionNotFoundError("workout-1"), ErrorCode.SESSION_NOT_FOUND, 404),
    (PlayerStateError("pause", "idle"), ErrorCode.PLAYER_STATE_ERROR, 409),
    (LLMError("llm"), ErrorCode.LLM_API_ERROR, 500),
    (LLMServiceUnavailableError(), ErrorCode.LLM_SERVICE_UNAVAILABLE, 503),
    (LLMRateLimitError(), ErrorCode.LLM_RATE_LIMITED, 429),
    (LLMTimeoutError(60), ErrorCode.LLM_TIMEOUT, 504),
    (LLMResponseInvalidError(), ErrorCode.LLM_RESPONSE_INVALID, 500),
    (PlanGenerationError("failed"), ErrorCode.PLAN_GENERATION_FAILED, 500),
    (StoreError("down", operation="list_history"), ErrorCode.STORE_UNAVAILABLE, 503),
]


class TestErrorCodes:
    """Every error code belongs to an exception the app raises."""

    @pytest.mark.parametrize("error,code,status", ERRORS)
    def test_code_and_status(self, error, code, status):
        assert error.code == code
        assert error.status_code == status
        assert error.to_dict()["error"]["code"] == code.value

    def test_no_unused_codes(self):
        assert {code for _, code, _ in ERRORS} == set(ErrorCode)


def test_details_are_included_only_when_present():
    assert "details" not in FlowFastError("boom").to_dict()["error"]
    details = SessionNotFoundError("workout-1").to_dict()["error"]["details"]
    assert details == {"resource_type": "Workout session", "resource_id": "workout-1"}
