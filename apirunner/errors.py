"""
Typed error classes for apirunner.

- APIRunnerError: Base exception for all apirunner errors
- TransportError: No HTTP response could be obtained
- ValidationError: Collection, workflow or option input is invalid
- LoaderError: A definition file could not be read
- AuthConfigurationError: An auth descriptor cannot be applied
"""

from typing import Any


class APIRunnerError(Exception):
    """Base exception class for all apirunner errors.

    Attributes:
        message: Human-readable error message
        code: Optional error code for programmatic handling
        details: Optional dictionary with additional error context
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert error to a dictionary for serialization."""
        result: dict[str, Any] = {
            "type": self.__class__.__name__,
            "message": self.message,
        }
        if self.code:
            result["code"] = self.code
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        return self.message


class TransportError(APIRunnerError):
    """Raised when a request produced no response.

    Raised when:
    - DNS resolution or the TCP/TLS connection fails
    - The transport-level timeout fires
    - Redirects exceed the configured maximum

    A response with any status code, 4xx and 5xx included, is never a
    TransportError.
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.url = url
        details = details or {}
        if url:
            details["url"] = url
        super().__init__(message, code="TRANSPORT_FAILED", details=details)


class ValidationError(APIRunnerError):
    """Input validation errors for collections, workflows and run options."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.field = field
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, code="VALIDATION_FAILED", details=details)


class LoaderError(APIRunnerError):
    """Raised when a definition file is missing or not valid JSON."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.path = path
        details = details or {}
        if path:
            details["path"] = path
        super().__init__(message, code="LOAD_FAILED", details=details)


class AuthConfigurationError(APIRunnerError):
    """Raised when an auth descriptor is incomplete or of an unsupported type."""

    def __init__(
        self,
        message: str,
        auth_type: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.auth_type = auth_type
        details = details or {}
        if auth_type:
            details["auth_type"] = auth_type
        super().__init__(message, code="AUTH_CONFIG_INVALID", details=details)
