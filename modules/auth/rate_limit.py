"""
Client-side minimum-interval gate for auth actions.

Each action keeps its last attempt as a millisecond epoch string in the
key-value store (e.g. ``lastLoginAttempt``), so the gate survives restarts
and works with any IKeyValueStore backend.
"""

import logging
import time
from typing import Callable, Optional

from shared.storage import IKeyValueStore

from .exceptions import RateLimitExceededError

logger = logging.getLogger(__name__)


def timestamp_key(action: str) -> str:
    """Storage key for an action's last attempt: "login" -> "lastLoginAttempt"."""
    return f"last{action[:1].upper()}{action[1:]}Attempt"


class RateLimiter:
    """Minimum-interval check backed by a persisted timestamp per action."""

    def __init__(
        self,
        store: IKeyValueStore,
        clock: Optional[Callable[[], float]] = None,
    ):
        """
        Initialize the rate limiter.

        Args:
            store: Where last-attempt timestamps are kept.
            clock: Returns the current time in seconds. Defaults to time.time.
        """
        self._store = store
        self._clock = clock or time.time

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def last_attempt_ms(self, action: str) -> Optional[int]:
        raw = self._store.get(timestamp_key(action))
        if raw is None:
            return None
        try:
            return int(raw)
        except ValueError:
            logger.warning(f"Discarding malformed timestamp for {action}: {raw!r}")
            self._store.remove(timestamp_key(action))
            return None

    def remaining(self, action: str, min_interval_seconds: float) -> float:
        """Seconds left before ``action`` is allowed again (0 when allowed)."""
        last = self.last_attempt_ms(action)
        if last is None:
            return 0.0
        elapsed_ms = self._now_ms() - last
        remaining_ms = min_interval_seconds * 1000 - elapsed_ms
        return max(0.0, remaining_ms / 1000)

    def check(self, action: str, min_interval_seconds: float) -> None:
        """
        Reject the action if its minimum interval has not elapsed.

        Raises:
            RateLimitExceededError: With the seconds left in ``retry_after``
        """
        retry_after = self.remaining(action, min_interval_seconds)
        if retry_after > 0:
            raise RateLimitExceededError(action, retry_after)

    def record(self, action: str) -> None:
        """Store now as the last attempt of ``action``."""
        self._store.set(timestamp_key(action), str(self._now_ms()))

    def acquire(self, action: str, min_interval_seconds: float) -> None:
        """Check then record in one step."""
        self.check(action, min_interval_seconds)
        self.record(action)
