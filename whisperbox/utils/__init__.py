"""Utility functions for whisperbox."""

from whisperbox.utils.exceptions import (
    WhisperBoxError,
    ValidationError,
    TransportError,
    ClassificationError,
    FilterExpired,
    ErrorCategory,
    classify_exception,
    sanitize_error_message,
)

__all__ = [
    "WhisperBoxError",
    "ValidationError",
    "TransportError",
    "ClassificationError",
    "FilterExpired",
    "ErrorCategory",
    "classify_exception",
    "sanitize_error_message",
]
