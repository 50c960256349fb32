"""
Exception hierarchy and error handling utilities for remnotebridge.

Provides:
- Custom exception classes with error codes
- The exchange failure taxonomy (transport, protocol, application, timeout)
- Safe error message formatting (no sensitive data leak)
"""

from __future__ import annotations

import json
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


class FailureKind(Enum):
    """Terminal failure kinds of a single request exchange."""
    TRANSPORT_ERROR = "TransportError"
    PROTOCOL_ERROR = "ProtocolError"
    APPLICATION_ERROR = "ApplicationError"
    TIMEOUT = "Timeout"


class RemBridgeError(Exception):
    """Base exception for all remnotebridge errors."""

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


class ValidationError(RemBridgeError):
    """Input validation error."""

    def __init__(self, message: str, field: str | None = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", category=ErrorCategory.VALIDATION, details=details)


class ExchangeError(RemBridgeError):
    """Terminal failure of one request/reply exchange."""

    kind: FailureKind = FailureKind.TRANSPORT_ERROR

    def __init__(
        self,
        message: str,
        *,
        code: str,
        category: ErrorCategory,
        port: int | None = None,
    ):
        details: dict[str, Any] = {"kind": self.kind.value}
        if port is not None:
            details["port"] = port
        super().__init__(message, code=code, category=category, details=details)
        self.port = port


class TransportError(ExchangeError):
    """Connection-level failure (refused, reset, name resolution...)."""

    kind = FailureKind.TRANSPORT_ERROR

    def __init__(self, message: str, *, port: int | None = None):
        super().__init__(message, code="TRANSPORT_ERROR", category=ErrorCategory.RETRYABLE, port=port)


class ProtocolError(ExchangeError):
    """Reply frame could not be parsed as the expected structure."""

    kind = FailureKind.PROTOCOL_ERROR

    def __init__(self, message: str, *, port: int | None = None):
        super().__init__(message, code="PROTOCOL_ERROR", category=ErrorCategory.FATAL, port=port)


class ApplicationError(ExchangeError):
    """Remote side explicitly reported failure."""

    kind = FailureKind.APPLICATION_ERROR

    def __init__(self, message: str, *, port: int | None = None):
        super().__init__(message, code="APPLICATION_ERROR", category=ErrorCategory.RECOVERABLE, port=port)


class RequestTimeoutError(ExchangeError):
    """No terminal event within the exchange deadline."""

    kind = FailureKind.TIMEOUT
    MESSAGE = "connection timed out."

    def __init__(self, *, port: int | None = None, timeout_ms: int | None = None):
        super().__init__(self.MESSAGE, code="TIMEOUT", category=ErrorCategory.TIMEOUT, port=port)
        if timeout_ms is not None:
            self.details["timeout_ms"] = timeout_ms


_SENSITIVE_PATTERNS = [
    re.compile(r"(api[_-]?key|token|secret|password|auth)[=:]\s*['\"]?([^\s'\"]+)['\"]?", re.IGNORECASE),
    re.compile(r"bearer\s+[a-zA-Z0-9\-._~+/]+=*", re.IGNORECASE),
    re.compile(r"[a-zA-Z0-9]{32,}"),
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

    Returns:
        Tuple of (error_code, category, should_retry)
    """
    if isinstance(exc, RemBridgeError):
        return exc.code, exc.category, exc.category is ErrorCategory.RETRYABLE

    if isinstance(exc, FileNotFoundError):
        return "FILE_NOT_FOUND", ErrorCategory.VALIDATION, False

    if isinstance(exc, json.JSONDecodeError):
        return "JSON_PARSE_ERROR", ErrorCategory.VALIDATION, False

    if isinstance(exc, ValueError):
        return "INVALID_VALUE", ErrorCategory.VALIDATION, False

    if isinstance(exc, OSError):
        return "IO_ERROR", ErrorCategory.RECOVERABLE, False

    return "INTERNAL_ERROR", ErrorCategory.FATAL, False
