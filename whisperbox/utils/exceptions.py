"""
Exception hierarchy and error handling utilities for whisperbox.

Provides:
- Custom exception classes with error codes
- Error categorization (recoverable, retryable, fatal)
- Safe error message formatting (no sensitive data leak)
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any


class ErrorCategory(Enum):
    """Error categories for classification."""
    RECOVERABLE = "recoverable"
    RETRYABLE = "retryable"
    FATAL = "fatal"
    VALIDATION = "validation"
    TIMEOUT = "timeout"


class WhisperBoxError(Exception):
    """Base exception for all whisperbox errors."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        category: ErrorCategory = ErrorCategory.FATAL,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "category": self.category.value,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class ValidationError(WhisperBoxError):
    """Input validation error."""

    def __init__(self, message: str, field: str | None = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", category=ErrorCategory.VALIDATION, details=details)


class TransportError(WhisperBoxError):
    """Network failure, non-200 status or undecodable body on an RPC call."""

    def __init__(
        self,
        message: str,
        *,
        method: str,
        status_code: int | None = None,
        body: str | None = None,
        is_retryable: bool = False,
    ):
        category = ErrorCategory.RETRYABLE if is_retryable else ErrorCategory.FATAL
        super().__init__(
            message,
            code="TRANSPORT_ERROR",
            category=category,
            details={"method": method, "status_code": status_code, "body": body},
        )
        self.method = method
        self.status_code = status_code
        self.body = body

    @property
    def retryable(self) -> bool:
        return self.category is ErrorCategory.RETRYABLE


class ClassificationError(WhisperBoxError):
    """Response decoded into a variant the invoked method does not produce."""

    def __init__(self, *, method: str, expected: str, actual: str, body: Any = None):
        super().__init__(
            f"Unexpected response for {method}: expected {expected}, got {actual}",
            code="UNEXPECTED_RESPONSE",
            category=ErrorCategory.FATAL,
            details={"method": method, "expected": expected, "actual": actual, "body": body},
        )
        self.method = method
        self.expected = expected
        self.actual = actual


class FilterExpired(WhisperBoxError):
    """The node answered a poll with a null result: the filter is gone."""

    def __init__(self, filter_id: str):
        super().__init__(
            f"Filter {filter_id} expired on the node",
            code="FILTER_EXPIRED",
            category=ErrorCategory.RECOVERABLE,
            details={"filter_id": filter_id},
        )
        self.filter_id = filter_id


_SENSITIVE_PATTERNS = [
    re.compile(r"(api[_-]?key|token|secret|password|auth)[=:]\s*['\"]?([^\s'\"]+)['\"]?", re.IGNORECASE),
    re.compile(r"bearer\s+[a-zA-Z0-9\-._~+/]+=*", re.IGNORECASE),
]


def sanitize_error_message(message: str, replacement: str = "[REDACTED]") -> str:
    """Remove sensitive information from error messages."""
    sanitized = message
    for pattern in _SENSITIVE_PATTERNS:
        sanitized = pattern.sub(replacement, sanitized)
    return sanitized


def classify_exception(exc: Exception) -> tuple[str, ErrorCategory, bool]:
    """
    Classify an exception and return (error_code, category, should_retry).

    Callers use this to decide their own retry policy; the engine never retries.
    """
    if isinstance(exc, WhisperBoxError):
        return exc.code, exc.category, exc.category in (ErrorCategory.RETRYABLE, ErrorCategory.RECOVERABLE)

    if isinstance(exc, TimeoutError):
        return "TIMEOUT", ErrorCategory.TIMEOUT, True

    if isinstance(exc, ConnectionError):
        return "CONNECTION_ERROR", ErrorCategory.RETRYABLE, True

    return "INTERNAL_ERROR", ErrorCategory.FATAL, False
