"""Exception Hierarchy for AskMyCar.

Structured exceptions for the service: configuration, upstream HTTP
lookups (vehicle manuals, web search, NHTSA, Wikipedia) and the chat
event channel.

Design Principles:
    - All exceptions inherit from AskMyCarError
    - Exceptions preserve context (original error, timestamps, details)
    - Exceptions are categorized by recoverability

Exception Hierarchy:
    AskMyCarError (base)
    ├── ConfigurationError (unrecoverable - fix config)
    ├── UpstreamError (third-party API returned an error status)
    │   └── UpstreamTimeoutError
    ├── VINDecodeError
    └── ChannelClosedError (event sent after the stream closed)
"""
from datetime import datetime, timezone
from typing import Any, Optional

# ============================================
# Base Exception
# ============================================


class AskMyCarError(Exception):
    """Base exception for all AskMyCar errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code (e.g., "UPSTREAM_ERROR_503")
        details: Additional context as a dictionary
        timestamp: When the error occurred
        cause: The original exception that caused this error
        recoverable: Whether this error might be recoverable with retry
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        recoverable: bool = False,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__.upper()
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc)
        self.cause = cause
        self.recoverable = recoverable

        if cause:
            self.__cause__ = cause

    def __str__(self) -> str:
        parts = [self.message]
        if self.code:
            parts.insert(0, f"[{self.code}]")
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            parts.append(f"({detail_str})")
        return " ".join(parts)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code!r}, "
            f"details={self.details!r}, "
            f"recoverable={self.recoverable})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "code": self.code,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
            "recoverable": self.recoverable,
            "cause": str(self.cause) if self.cause else None,
        }


# ============================================
# Configuration Errors (Unrecoverable)
# ============================================


class ConfigurationError(AskMyCarError):
    """Raised when configuration is missing or invalid."""

    def __init__(
        self,
        message: str,
        missing_keys: Optional[list[str]] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if missing_keys:
            details["missing_keys"] = missing_keys
        super().__init__(
            message,
            code="CONFIGURATION_ERROR",
            details=details,
            recoverable=False,
            **kwargs,
        )


# ============================================
# Upstream Errors
# ============================================


class UpstreamError(AskMyCarError):
    """Raised when a third-party API call fails.

    Attributes:
        service: Short name of the upstream service ("brave", "nhtsa", ...)
        status_code: HTTP status code, if a response was received
    """

    def __init__(
        self,
        message: str,
        service: str,
        status_code: Optional[int] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        details["service"] = service
        if status_code is not None:
            details["status_code"] = status_code

        kwargs.setdefault(
            "recoverable", status_code in (429, 500, 502, 503, 504)
        )
        kwargs.setdefault(
            "code",
            f"UPSTREAM_ERROR_{status_code}" if status_code else "UPSTREAM_ERROR",
        )
        super().__init__(message, details=details, **kwargs)
        self.service = service
        self.status_code = status_code


class UpstreamTimeoutError(UpstreamError):
    """Raised when a third-party API call exceeds its timeout."""

    def __init__(
        self,
        service: str,
        timeout_seconds: float,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        details["timeout_seconds"] = timeout_seconds
        super().__init__(
            f"{service} request timed out after {timeout_seconds}s",
            service=service,
            code="UPSTREAM_TIMEOUT",
            details=details,
            recoverable=True,
            **kwargs,
        )
        self.timeout_seconds = timeout_seconds


# ============================================
# Domain Errors
# ============================================


class VINDecodeError(AskMyCarError):
    """Raised when a VIN cannot be decoded into a make and model."""

    def __init__(self, vin: str, message: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        details["vin"] = vin
        super().__init__(
            message or f"Could not decode VIN '{vin}'",
            code="VIN_DECODE_ERROR",
            details=details,
            recoverable=False,
            **kwargs,
        )
        self.vin = vin


class ChannelClosedError(AskMyCarError):
    """Raised when an event is sent on an already-closed stream."""

    def __init__(self, message: str = "Event channel is closed", **kwargs):
        super().__init__(message, code="CHANNEL_CLOSED", **kwargs)
