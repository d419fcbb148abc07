"""
Authentication module exceptions.

These exceptions are raised by the session manager and can be caught
by calling views to adjust their own state (e.g., keep a form enabled).
"""

from typing import Optional

from shared.exceptions import (
    AuthenticationError,
    RateLimitError,
    SessionExpiredError,
)


class RateLimitExceededError(RateLimitError):
    """Raised when an auth action is retried before its minimum interval."""

    def __init__(self, action: str, retry_after: float):
        super().__init__(
            f"Please wait before trying to {action} again",
            code="RATE_LIMIT_EXCEEDED",
            details={"action": action, "retry_after": retry_after},
        )
        self.action = action
        self.retry_after = retry_after


class AuthenticationFailedError(AuthenticationError):
    """Raised when the backend rejects credentials, a 2FA code, or a registration."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(
            message,
            code="AUTHENTICATION_FAILED",
            details={"status_code": status_code},
        )
        self.status_code = status_code


class TwoFactorNotPendingError(AuthenticationError):
    """Raised when a 2FA code is submitted without a pending challenge."""

    def __init__(self, message: str = "No two-factor challenge is pending"):
        super().__init__(message, code="TWO_FACTOR_NOT_PENDING")


__all__ = [
    "RateLimitExceededError",
    "AuthenticationFailedError",
    "TwoFactorNotPendingError",
    "SessionExpiredError",
]
