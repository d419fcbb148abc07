"""
Session manager implementation.

Owns the authenticated-user lifecycle: login (with optional 2FA),
registration, logout, token refresh, and restoring a stored session.
Tokens and the user are persisted in an IKeyValueStore and mutated only
through the methods below.
"""

import json
import logging
import time
from typing import Any, Callable, Optional

from pydantic import ValidationError as PydanticValidationError

from shared.api_client import ApiClient
from shared.config import Settings, get_settings
from shared.exceptions import ApiError, HiveError, SessionExpiredError
from shared.models import User
from shared.storage import (
    IKeyValueStore,
    LAST_VISITED_PATH_KEY,
    REFRESH_TOKEN_KEY,
    TOKEN_KEY,
    USER_KEY,
    get_store,
)

from .exceptions import (
    AuthenticationFailedError,
    RateLimitExceededError,
    TwoFactorNotPendingError,
)
from .models import (
    AuthResponse,
    LoginResult,
    SessionSnapshot,
    SessionState,
    TwoFactorChallenge,
)
from .notifier import INotifier, LoggingNotifier
from .rate_limit import RateLimiter
from .realtime import IRealtimeConnection, SocketIORealtimeConnection
from .tokens import is_token_expired

logger = logging.getLogger(__name__)


class SessionManager:
    """
    Implementation of the session manager.

    Collaborators are injected so the same manager runs against a file
    store and the live API in production, and in-memory fakes in tests.
    """

    LOGIN_PATH = "/auth/login"
    VERIFY_2FA_PATH = "/auth/2fa/verify-login"
    REGISTER_PATH = "/auth/register"
    LOGOUT_PATH = "/auth/logout"
    CURRENT_USER_PATH = "/users/me"

    def __init__(
        self,
        api: ApiClient,
        store: IKeyValueStore,
        notifier: Optional[INotifier] = None,
        realtime: Optional[IRealtimeConnection] = None,
        clock: Optional[Callable[[], float]] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Initialize the session manager.

        Args:
            api: Client for the platform API. Must share ``store``.
            store: Where tokens, the user, and rate-limit timestamps live.
            notifier: Receives user-facing messages. Defaults to logging.
            realtime: Channel opened on login. Defaults to Socket.IO.
            clock: Returns the current time in seconds. Defaults to time.time.
            settings: Overrides the cached application settings.
        """
        self._api = api
        self._store = store
        self._notifier = notifier or LoggingNotifier()
        self._realtime = realtime or SocketIORealtimeConnection()
        self._clock = clock or time.time
        self._settings = settings or get_settings()
        self._rate_limiter = RateLimiter(store, self._clock)

        # user is set iff token is set; both start empty until initialize()
        self._user: Optional[User] = None
        self._token: Optional[str] = None
        self._two_factor: Optional[TwoFactorChallenge] = None
        self._verifying = False

        # Refreshes and expiries detected by the client on any request
        # come back through the manager
        self._api.set_session_hooks(
            on_token_refreshed=self._on_token_refreshed,
            on_session_expired=self._end_session,
        )

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def user(self) -> Optional[User]:
        return self._user

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def loading(self) -> bool:
        return self._verifying

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    @property
    def requires_2fa(self) -> bool:
        return self._two_factor is not None and self._two_factor.pending

    @property
    def two_factor_user_id(self) -> Optional[str]:
        return self._two_factor.user_id if self._two_factor else None

    @property
    def state(self) -> SessionState:
        if self._user is not None:
            return SessionState.AUTHENTICATED
        if self._verifying:
            return SessionState.VERIFYING
        if self.requires_2fa:
            return SessionState.PENDING_2FA
        return SessionState.ANONYMOUS

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            state=self.state,
            user=self._user,
            token=self._token,
            loading=self._verifying,
            two_factor=self._two_factor,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def initialize(self) -> Optional[User]:
        """Restore the session from stored tokens, verifying it with the server."""
        token = self._store.get(TOKEN_KEY)
        if token and is_token_expired(token, self._clock):
            logger.info("Stored access token has expired")
            token = None

        if not token and self._store.get(REFRESH_TOKEN_KEY):
            try:
                token = await self.refresh_tokens()
            except SessionExpiredError:
                return None

        if not token:
            # A cached user without a token is not a session
            self._store.remove(TOKEN_KEY)
            self._store.remove(USER_KEY)
            return None

        self._verifying = True
        try:
            await self._realtime.connect(token)
            body = await self._api.get(self.CURRENT_USER_PATH)
            user = self._extract_user(body)
        except (HiveError, PydanticValidationError) as e:
            logger.warning(f"Stored session is no longer valid: {e}")
            await self._end_session()
            return None
        finally:
            self._verifying = False

        # The fetch may have refreshed the token
        self._token = self._store.get(TOKEN_KEY) or token
        self._set_user(user)
        logger.info(f"Session restored for user {user.id}")
        return user

    async def login(self, email: str, password: str) -> LoginResult:
        """Log in, returning a 2FA challenge if the backend requires one."""
        self._acquire("login", self._settings.login_min_interval_seconds)

        try:
            body = await self._api.post(
                self.LOGIN_PATH,
                json={"email": email, "password": password},
                retry_on_401=False,
            )
        except ApiError as e:
            raise self._failure(e, "Login failed") from e

        data = body.get("data")
        if isinstance(data, dict) and data.get("requires2FA"):
            user_id = data.get("userId")
            if not user_id:
                logger.error("2FA challenge response did not include a userId")
                self._notifier.error("Login failed")
                raise AuthenticationFailedError("Login failed")
            user_id = str(user_id)
            self._two_factor = TwoFactorChallenge(user_id=user_id)
            logger.info(f"Login for user {user_id} requires 2FA")
            return LoginResult(requires_2fa=True, user_id=user_id)

        auth = self._parse_auth(body, "Login failed")
        await self._start_session(auth)
        self._notifier.success("Welcome back!")
        return LoginResult(user=auth.user, tokens=auth.tokens)

    async def verify_two_factor(
        self,
        code: Optional[str],
        backup_code: Optional[str] = None,
    ) -> LoginResult:
        """Exchange the pending challenge and a code for tokens."""
        if not self.requires_2fa:
            raise TwoFactorNotPendingError()

        try:
            body = await self._api.post(
                self.VERIFY_2FA_PATH,
                json={
                    "userId": self._two_factor.user_id,
                    "token": code,
                    "backupCode": backup_code,
                },
                retry_on_401=False,
            )
        except ApiError as e:
            raise self._failure(e, "2FA verification failed") from e

        auth = self._parse_auth(body, "2FA verification failed")
        await self._start_session(auth)
        self._notifier.success("Welcome back!")
        return LoginResult(user=auth.user, tokens=auth.tokens)

    async def register(self, user_data: dict[str, Any]) -> LoginResult:
        """Create an account and log straight into it."""
        self._acquire("register", self._settings.register_min_interval_seconds)

        try:
            body = await self._api.post(
                self.REGISTER_PATH,
                json=user_data,
                retry_on_401=False,
            )
        except ApiError as e:
            raise self._failure(e, "Registration failed") from e

        auth = self._parse_auth(body, "Registration failed")
        await self._start_session(auth)
        self._notifier.success("Account created successfully!")
        return LoginResult(user=auth.user, tokens=auth.tokens)

    async def logout(self) -> bool:
        """Notify the server (best effort) and clear the local session."""
        try:
            self._acquire("logout", self._settings.logout_min_interval_seconds)
        except RateLimitExceededError:
            return False

        try:
            await self._api.post(self.LOGOUT_PATH, retry_on_401=False)
        except Exception:
            logger.warning("Logout request failed", exc_info=True)
        finally:
            await self._end_session()
            self._notifier.success("Logged out successfully")
        return True

    def update_user(self, partial: dict[str, Any]) -> Optional[User]:
        """Shallow-merge ``partial`` into the current user and persist it."""
        if self._user is None:
            return None
        self._set_user(self._user.merge(partial))
        return self._user

    async def refresh_user(self) -> Optional[User]:
        """
        Re-fetch the current user from the server.

        Within the refresh interval the current user is returned without a
        request. A failed fetch also falls back to the current user; only a
        failed token refresh ends the session.
        """
        if self._token is None:
            return None

        interval = self._settings.user_refresh_min_interval_seconds
        if self._user is not None and self._rate_limiter.remaining("userRefresh", interval) > 0:
            return self._user

        try:
            body = await self._api.get(self.CURRENT_USER_PATH)
            user = self._extract_user(body)
        except SessionExpiredError:
            await self._end_session()
            raise
        except (HiveError, PydanticValidationError) as e:
            logger.warning(f"Failed to refresh user data: {e}")
            if self._user is not None:
                return self._user
            raise

        self._rate_limiter.record("userRefresh")
        self._set_user(user)
        return user

    async def refresh_tokens(self) -> str:
        """
        Exchange the stored refresh token for a new access token.

        The client reports the new tokens through ``_on_token_refreshed``.
        """
        try:
            return await self._api.refresh_access_token()
        except ApiError as e:
            logger.warning(f"Failed to refresh token: {e.message}")
            await self._end_session()
            raise SessionExpiredError() from e

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _acquire(self, action: str, min_interval_seconds: float) -> None:
        try:
            self._rate_limiter.acquire(action, min_interval_seconds)
        except RateLimitExceededError as e:
            self._notifier.error(e.message)
            raise

    def _failure(self, error: ApiError, default_message: str) -> AuthenticationFailedError:
        message = error.server_message or default_message
        self._notifier.error(message)
        return AuthenticationFailedError(message, status_code=error.status_code)

    def _parse_auth(self, body: dict[str, Any], default_message: str) -> AuthResponse:
        try:
            return AuthResponse.model_validate(body)
        except PydanticValidationError as e:
            logger.error(f"Malformed auth response: {e}")
            self._notifier.error(default_message)
            raise AuthenticationFailedError(default_message) from e

    @staticmethod
    def _extract_user(body: dict[str, Any]) -> User:
        """Pull the user out of ``{data: {user}}`` (or ``{data: user}``)."""
        data = body.get("data")
        if isinstance(data, dict) and isinstance(data.get("user"), dict):
            data = data["user"]
        return User.model_validate(data)

    def _set_user(self, user: User) -> None:
        self._user = user
        self._store.set(USER_KEY, json.dumps(user.to_storage()))

    async def _start_session(self, auth: AuthResponse) -> None:
        self._store.set(TOKEN_KEY, auth.tokens.access_token)
        if auth.tokens.refresh_token:
            self._store.set(REFRESH_TOKEN_KEY, auth.tokens.refresh_token)
        self._token = auth.tokens.access_token
        self._set_user(auth.user)
        self._two_factor = None
        await self._realtime.connect(auth.tokens.access_token)
        logger.info(f"Session started for user {auth.user.id}")

    async def _on_token_refreshed(self, token: str, refresh_token: Optional[str]) -> None:
        self._store.set(TOKEN_KEY, token)
        if refresh_token:
            self._store.set(REFRESH_TOKEN_KEY, refresh_token)
        if self._user is not None:
            self._token = token
        if self._user is not None or self._verifying:
            await self._realtime.connect(token)
        logger.debug("Session token refreshed")

    async def _end_session(self) -> None:
        for key in (TOKEN_KEY, REFRESH_TOKEN_KEY, USER_KEY, LAST_VISITED_PATH_KEY):
            self._store.remove(key)
        self._token = None
        self._user = None
        self._two_factor = None
        await self._realtime.disconnect()


# Module-level instance getter
_manager_instance: Optional[SessionManager] = None


def get_session_manager() -> SessionManager:
    """Get the session manager singleton, backed by the configured file store."""
    global _manager_instance
    if _manager_instance is None:
        store = get_store()
        _manager_instance = SessionManager(ApiClient(store), store)
    return _manager_instance


def reset_session_manager() -> None:
    """Reset the session manager singleton (for testing)."""
    global _manager_instance
    _manager_instance = None
