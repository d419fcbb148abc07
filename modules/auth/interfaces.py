"""
Authentication module interface.

Views and other modules should depend on ISessionManager, not the concrete
implementation. This enables testing with mocks and swapping the storage
or transport without touching callers.
"""

from typing import Any, Optional, Protocol, runtime_checkable

from shared.models import User

from .models import LoginResult, SessionSnapshot, SessionState


@runtime_checkable
class ISessionManager(Protocol):
    """
    Interface for the authenticated-session lifecycle.

    The session manager is the only writer of the tokens and the current
    user. Consumers read them through the properties below or snapshot().
    """

    @property
    def user(self) -> Optional[User]:
        ...

    @property
    def token(self) -> Optional[str]:
        ...

    @property
    def loading(self) -> bool:
        """True while an existing token is being verified."""
        ...

    @property
    def is_authenticated(self) -> bool:
        ...

    @property
    def state(self) -> SessionState:
        ...

    def snapshot(self) -> SessionSnapshot:
        ...

    async def initialize(self) -> Optional[User]:
        """
        Restore the session from stored tokens.

        Returns:
            The verified user, or None if no usable session was stored
        """
        ...

    async def login(self, email: str, password: str) -> LoginResult:
        """
        Log in with email and password.

        Returns:
            LoginResult, with requires_2fa set when a code is still needed

        Raises:
            RateLimitExceededError: Called again within the login interval
            AuthenticationFailedError: The backend rejected the attempt
        """
        ...

    async def verify_two_factor(
        self,
        code: Optional[str],
        backup_code: Optional[str] = None,
    ) -> LoginResult:
        """
        Complete a pending 2FA challenge with a one-time or backup code.

        Raises:
            TwoFactorNotPendingError: No challenge is pending
            AuthenticationFailedError: The code was rejected
        """
        ...

    async def register(self, user_data: dict[str, Any]) -> LoginResult:
        """
        Create an account and start a session for it.

        Raises:
            RateLimitExceededError: Called again within the register interval
            AuthenticationFailedError: The backend rejected the registration
        """
        ...

    async def logout(self) -> bool:
        """
        End the session. Local state is cleared even if the server call fails.

        Returns:
            False if the call was rate limited and nothing happened
        """
        ...

    def update_user(self, partial: dict[str, Any]) -> Optional[User]:
        """Merge fields into the current user locally, without a server call."""
        ...

    async def refresh_user(self) -> Optional[User]:
        """Re-fetch the current user, at most once per refresh interval."""
        ...

    async def refresh_tokens(self) -> str:
        """
        Exchange the refresh token for a new access token.

        Raises:
            SessionExpiredError: The refresh failed; the session was ended
        """
        ...
