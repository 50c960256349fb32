"""Utility functions for remnotebridge."""

from remnotebridge.utils.exceptions import (
    ApplicationError,
    ErrorCategory,
    ExchangeError,
    FailureKind,
    ProtocolError,
    RemBridgeError,
    RequestTimeoutError,
    TransportError,
    ValidationError,
    classify_exception,
    sanitize_error_message,
)

__all__ = [
    "RemBridgeError",
    "ValidationError",
    "ExchangeError",
    "TransportError",
    "ProtocolError",
    "ApplicationError",
    "RequestTimeoutError",
    "ErrorCategory",
    "FailureKind",
    "classify_exception",
    "sanitize_error_message",
]
