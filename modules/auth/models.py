"""
Authentication module data models.

These models define the session state owned by the session manager
and the backend payloads it consumes.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, model_validator

from shared.models import User


class SessionState(str, Enum):
    """Lifecycle states of the client session."""

    ANONYMOUS = "anonymous"
    VERIFYING = "verifying"  # existing token is being checked against /users/me
    PENDING_2FA = "pending_2fa"
    AUTHENTICATED = "authenticated"


class TwoFactorChallenge(BaseModel):
    """Transient state created when login requires a second factor."""

    user_id: str = Field(..., description="User the challenge was issued for")
    pending: bool = Field(default=True, description="Whether a code is still expected")

    model_config = {"frozen": True}


class TokenPair(BaseModel):
    """Bearer tokens issued by the backend."""

    access_token: str = Field(..., description="Short-lived access token")
    refresh_token: Optional[str] = Field(None, description="Long-lived refresh token")

    model_config = {"frozen": True}


class AuthResponse(BaseModel):
    """
    Successful login, registration, or 2FA verification payload.

    Backend shape: ``{token, refreshToken, data: {user}}``.
    """

    tokens: TokenPair
    user: User

    @model_validator(mode="before")
    @classmethod
    def from_backend(cls, value: Any) -> Any:
        """Accept the raw backend body as well as the parsed field layout."""
        if not isinstance(value, dict) or "tokens" in value:
            return value
        data = value.get("data") or {}
        return {
            "tokens": {
                "access_token": value.get("token"),
                "refresh_token": value.get("refreshToken"),
            },
            "user": data.get("user") if isinstance(data, dict) else None,
        }


class LoginResult(BaseModel):
    """
    Outcome of a login attempt that the backend accepted.

    Either a second factor is required (``requires_2fa`` with ``user_id``),
    or the session is now authenticated (``user`` and ``tokens`` set).
    """

    requires_2fa: bool = Field(default=False)
    user_id: Optional[str] = Field(None, description="User awaiting a 2FA code")
    user: Optional[User] = Field(None)
    tokens: Optional[TokenPair] = Field(None)

    model_config = {"frozen": True}


class SessionSnapshot(BaseModel):
    """Read-only view of the session handed to consumers."""

    state: SessionState
    user: Optional[User] = None
    token: Optional[str] = None
    loading: bool = False
    two_factor: Optional[TwoFactorChallenge] = None

    model_config = {"frozen": True}

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None
