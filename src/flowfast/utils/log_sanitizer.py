"""Log sanitization filter to keep credentials and PII out of logs.

Recoverable errors are logged with their inputs (user id, request
parameters), so records pass through this filter before being emitted.
Redacts:
- OpenAI-style API keys
- Bearer tokens and authorization headers
- api_key / token / password style fields
- Email addresses

Usage:
    from flowfast.utils.log_sanitizer import install_log_sanitizer

    install_log_sanitizer()
"""

import logging
import re
from typing import Any


class LogSanitizationFilter(logging.Filter):
    """Logging filter that redacts sensitive information from log records."""

    # Order matters - more specific patterns come before general ones
    PATTERNS: list[tuple[re.Pattern, str]] = [
        (re.compile(r'\bsk-[a-zA-Z0-9_-]{20,}'), '[REDACTED_API_KEY]'),
        (re.compile(r'\beyJ[a-zA-Z0-9_-]+\.eyJ[a-zA-Z0-9_-]+\.[a-zA-Z0-9_-]+'), '[REDACTED_JWT]'),
        (re.compile(r'Bearer\s+[a-zA-Z0-9_\-\.]+', re.IGNORECASE), 'Bearer [REDACTED_TOKEN]'),
        (re.compile(r'(Authorization["\']?\s*[:=]\s*["\']?)[^"\'&\s]+', re.IGNORECASE), r'\1[REDACTED]'),
        (re.compile(r'(api_key["\']?\s*[:=]\s*["\']?)[^"\'&\s]+', re.IGNORECASE), r'\1[REDACTED]'),
        (re.compile(r'(password["\']?\s*[:=]\s*["\']?)[^"\'&\s]+', re.IGNORECASE), r'\1[REDACTED]'),
        (re.compile(r'(token["\']?\s*[:=]\s*["\']?)[^"\'&\s]+', re.IGNORECASE), r'\1[REDACTED]'),
        (re.compile(r'\b[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}\b'), '[REDACTED_EMAIL]'),
    ]

    def filter(self, record: logging.LogRecord) -> bool:
        """Sanitize the record in place; always lets it through."""
        if record.msg:
            record.msg = self._sanitize(str(record.msg))
        if record.args:
            record.args = self._sanitize_args(record.args)
        return True

    def _sanitize(self, text: str) -> str:
        for pattern, replacement in self.PATTERNS:
            text = pattern.sub(replacement, text)
        return text

    def _sanitize_args(self, args: Any) -> Any:
        if isinstance(args, str):
            return self._sanitize(args)
        if isinstance(args, tuple):
            return tuple(self._sanitize_args(a) for a in args)
        if isinstance(args, list):
            return [self._sanitize_args(a) for a in args]
        if isinstance(args, dict):
            return {k: self._sanitize_args(v) for k, v in args.items()}
        return args


_filter = LogSanitizationFilter()


def install_log_sanitizer(logger_name: str | None = None) -> None:
    """Attach the sanitization filter to a logger's handlers.

    Args:
        logger_name: Logger to attach to. None means the root logger,
            which covers every handler created by logging.basicConfig.
    """
    target = logging.getLogger(logger_name)
    if _filter not in target.filters:
        target.addFilter(_filter)
    for handler in target.handlers:
        if _filter not in handler.filters:
            handler.addFilter(_filter)


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging and install the sanitizer."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    install_log_sanitizer()


def sanitize_string(text: str) -> str:
    """Redact sensitive data from an arbitrary string."""
    return _filter._sanitize(text)
