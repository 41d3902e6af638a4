"""Tests for log sanitization filter."""

import logging

import pytest

from flowfast.utils.log_sanitizer import (
    LogSanitizationFilter,
    install_log_sanitizer,
    sanitize_string,
)


class TestLogSanitizationFilter:
    """Test cases for LogSanitizationFilter."""

    @pytest.fixture
    def sanitizer(self) -> LogSanitizationFilter:
        return LogSanitizationFilter()

    def test_redacts_openai_api_key(self, sanitizer: LogSanitizationFilter) -> None:
        text = "Using API key sk-1234567890abcdefghijklmnopqrstuvwxyz"
        result = sanitizer._sanitize(text)
        assert "sk-1234567890" not in result
        assert "[REDACTED_API_KEY]" in result

    def test_redacts_bearer_token(self, sanitizer: LogSanitizationFilter) -> None:
        result = sanitizer._sanitize("header Bearer abc.def-123")
        assert result == "header Bearer [REDACTED_TOKEN]"

    def test_redacts_api_key_field(self, sanitizer: LogSanitizationFilter) -> None:
        result = sanitizer._sanitize("config api_key=secret123 model=gpt")
        assert "secret123" not in result
        assert "model=gpt" in result

    def test_redacts_email(self, sanitizer: LogSanitizationFilter) -> None:
        result = sanitizer._sanitize("Plan generated for runner@example.com")
        assert result == "Plan generated for [REDACTED_EMAIL]"

    def test_leaves_plain_text_alone(self, sanitizer: LogSanitizationFilter) -> None:
        text = "Generated plan workout-abc123 with 4 exercises"
        assert sanitizer._sanitize(text) == text

    def test_sanitizes_record_args(self, sanitizer: LogSanitizationFilter) -> None:
        record = logging.LogRecord(
            name="test", level=logging.INFO, pathname=__file__, lineno=1,
            msg="user %s key %s", args=("a@b.io", "sk-" + "x" * 24), exc_info=None,
        )
        assert sanitizer.filter(record) is True
        assert record.getMessage() == "user [REDACTED_EMAIL] key [REDACTED_API_KEY]"


def test_sanitize_string():
    assert "secret" not in sanitize_string("password: secret")


def test_install_is_idempotent():
    logger = logging.getLogger("flowfast.test.sanitizer")
    install_log_sanitizer("flowfast.test.sanitizer")
    install_log_sanitizer("flowfast.test.sanitizer")
    assert sum(isinstance(f, LogSanitizationFilter) for f in logger.filters) == 1
