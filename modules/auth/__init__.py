"""
Authentication module.

Handles the client session: login with optional 2FA, registration, logout,
token refresh, and client-side rate limiting of those actions.

Public API:
- ISessionManager: Interface for session operations
- SessionManager: Default implementation
- SessionState, SessionSnapshot, LoginResult: Session models
- RateLimiter: Minimum-interval gate used for auth actions
- Auth exceptions: RateLimitExceededError, AuthenticationFailedError, etc.
"""

from .interfaces import ISessionManager
from .models import (
    SessionState,
    SessionSnapshot,
    TwoFactorChallenge,
    TokenPair,
    AuthResponse,
    LoginResult,
)
from .exceptions import (
    RateLimitExceededError,
    AuthenticationFailedError,
    TwoFactorNotPendingError,
    SessionExpiredError,
)
from .notifier import INotifier, LoggingNotifier
from .rate_limit import RateLimiter
from .realtime import IRealtimeConnection, SocketIORealtimeConnection
from .service import SessionManager, get_session_manager, reset_session_manager

__all__ = [
    # Interfaces
    "ISessionManager",
    "INotifier",
    "IRealtimeConnection",
    # Models
    "SessionState",
    "SessionSnapshot",
    "TwoFactorChallenge",
    "TokenPair",
    "AuthResponse",
    "LoginResult",
    # Exceptions
    "RateLimitExceededError",
    "AuthenticationFailedError",
    "TwoFactorNotPendingError",
    "SessionExpiredError",
    # Implementations
    "LoggingNotifier",
    "RateLimiter",
    "SocketIORealtimeConnection",
    "SessionManager",
    "get_session_manager",
    "reset_session_manager",
]
