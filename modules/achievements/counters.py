"""
Normalisation of a user snapshot into activity counters.

User snapshots come straight from the backend and are incomplete more
often than not: collections may be missing or null, posts may be bare ids
or embedded documents, timestamps may be absent. Everything is resolved
here, once, so predicates never have to guard against missing data.
"""

import logging
from collections.abc import Mapping
from datetime import date, datetime, timedelta
from typing import Any, Iterable, Optional

from dateutil.parser import isoparse
from pydantic import BaseModel

from .models import ActivityCounters

logger = logging.getLogger(__name__)

VIDEO_CATEGORIES = frozenset({"short", "long"})


def _as_mapping(user: Any) -> Optional[Mapping]:
    if user is None:
        return None
    if isinstance(user, BaseModel):
        return user.model_dump(by_alias=True)
    if isinstance(user, Mapping):
        return user
    return None


def _field(data: Mapping, *names: str) -> Any:
    """First non-None value among ``names`` (camelCase and snake_case spellings)."""
    for name in names:
        value = data.get(name)
        if value is not None:
            return value
    return None


def _as_list(value: Any) -> list:
    return list(value) if isinstance(value, (list, tuple)) else []


def _as_count(value: Any) -> int:
    """Length of a collection, or a non-negative number; anything else is 0."""
    if isinstance(value, (list, tuple)):
        return len(value)
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return max(0, int(value))
    return 0


def _post_date(post: Any) -> Optional[date]:
    if not isinstance(post, Mapping):
        return None
    raw = _field(post, "createdAt", "created_at")
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, str):
        try:
            return isoparse(raw).date()
        except ValueError:
            logger.debug(f"Ignoring unparseable post date: {raw!r}")
    return None


def longest_daily_streak(days: Iterable[date]) -> int:
    """Length of the longest run of consecutive calendar days."""
    ordered = sorted(set(days))
    longest = current = 0
    previous: Optional[date] = None
    for day in ordered:
        if previous is not None and day - previous == timedelta(days=1):
            current += 1
        else:
            current = 1
        longest = max(longest, current)
        previous = day
    return longest


def normalize(user: Any) -> ActivityCounters:
    """
    Convert a user snapshot into fully-defaulted counters.

    Args:
        user: A User model, a raw backend mapping, or None

    Returns:
        ActivityCounters with every absent value resolved to zero/False
    """
    data = _as_mapping(user)
    if data is None:
        return ActivityCounters()

    posts = _as_list(data.get("posts"))
    documents = [post for post in posts if isinstance(post, Mapping)]

    return ActivityCounters(
        posts=len(posts),
        video_posts=sum(1 for post in documents if post.get("category") in VIDEO_CATEGORIES),
        likes_received=sum(_as_count(post.get("likes")) for post in documents),
        subscribers=_as_count(data.get("subscriber")),
        subscribed=_as_count(data.get("subscribed")),
        comments=_as_count(data.get("comments")),
        shared=_as_count(data.get("shared")),
        liked=_as_count(data.get("liked")),
        watched=_as_count(data.get("watched")),
        days_active=_as_count(_field(data, "daysActive", "days_active")),
        joined_early=_field(data, "joinedEarly", "joined_early") is True,
        posting_streak=longest_daily_streak(
            day for day in (_post_date(post) for post in posts) if day is not None
        ),
    )
