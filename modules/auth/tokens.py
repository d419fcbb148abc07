"""Helpers for inspecting access tokens held by the client."""

import time
from typing import Callable, Optional

import jwt


def token_expiry(token: str) -> Optional[int]:
    """
    Read the ``exp`` claim of a JWT without verifying its signature.

    The client cannot verify tokens (it does not hold the signing key);
    the claim is only used to skip a request that would certainly 401.

    Returns:
        Expiry as a Unix timestamp, or None for opaque tokens or tokens
        without an ``exp`` claim
    """
    try:
        claims = jwt.decode(token, options={"verify_signature": False})
    except jwt.InvalidTokenError:
        return None
    exp = claims.get("exp")
    return int(exp) if isinstance(exp, (int, float)) else None


def is_token_expired(
    token: str,
    clock: Optional[Callable[[], float]] = None,
    leeway: float = 0,
) -> bool:
    """True if ``token`` is a JWT whose expiry has passed."""
    exp = token_expiry(token)
    if exp is None:
        return False
    now = (clock or time.time)()
    return exp <= now - leeway
