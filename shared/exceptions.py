"""
Base exception classes for the Hive client.

Each module should define its own exceptions that inherit from these bases.
This enables consistent error handling across the application.
"""

from typing import Optional, Any


class HiveError(Exception):
    """
    Base exception for all Hive errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for display or logging."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(HiveError):
    """Input validation failed."""

    pass


class AuthenticationError(HiveError):
    """Authentication failed (invalid or missing credentials)."""

    pass


class RateLimitError(HiveError):
    """An action was attempted again before its minimum interval elapsed."""

    pass


class ExternalServiceError(HiveError):
    """Error communicating with an external service."""

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.details["service"] = service


class ApiError(ExternalServiceError):
    """The backend answered with a non-success status or was unreachable."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        payload: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            message,
            service="api",
            code="API_ERROR",
            details={"status_code": status_code},
        )
        self.status_code = status_code
        self.payload = payload or {}

    @property
    def server_message(self) -> Optional[str]:
        """The ``message`` field of the error body, if the server sent one."""
        message = self.payload.get("message")
        return message if isinstance(message, str) and message else None


class SessionExpiredError(AuthenticationError):
    """The access token could not be refreshed; the user must log in again."""

    def __init__(self, message: str = "Session expired, please log in again"):
        super().__init__(message, code="SESSION_EXPIRED")
