"""
Achievements module data models.

Badge definitions are static catalog data; counters and results are
derived from a user snapshot on every evaluation and never persisted.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Rarity(str, Enum):
    """Cosmetic tier of a badge. Not used in scoring."""

    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


# Metrics computed from other badges rather than from the user snapshot
BADGES_EARNED = "badges_earned"
POINTS_EARNED = "points_earned"
DERIVED_METRICS = frozenset({BADGES_EARNED, POINTS_EARNED})


class ActivityCounters(BaseModel):
    """
    Fully-defaulted activity counters for one user snapshot.

    Produced by ``normalize``; every badge predicate and progress
    computation reads these instead of the raw user.
    """

    posts: int = 0
    video_posts: int = 0
    likes_received: int = 0
    subscribers: int = 0
    subscribed: int = 0
    comments: int = 0
    shared: int = 0
    liked: int = 0
    watched: int = 0
    days_active: int = 0
    joined_early: bool = False
    posting_streak: int = Field(default=0, description="Longest run of consecutive posting days")

    model_config = {"frozen": True}

    def metrics(self) -> dict[str, int]:
        """Counter values keyed by metric name, booleans as 0/1."""
        return {name: int(value) for name, value in self.model_dump().items()}


COUNTER_METRICS = frozenset(ActivityCounters.model_fields)


class BadgeDefinition(BaseModel):
    """
    A badge in the catalog.

    A badge is earned when its metric reaches the threshold (inclusive).
    Metrics are either ActivityCounters fields or one of the derived
    metrics, which are computed from the other badges' results.
    """

    id: str = Field(..., description="Unique key")
    name: str = Field(..., description="Display name")
    description: str = Field(default="", description="What the user did to earn it")
    icon: str = Field(default="", description="Icon reference for the presentation layer")
    rarity: Rarity = Field(default=Rarity.COMMON)
    points: int = Field(default=0, ge=0, description="Points awarded when earned")
    metric: str = Field(..., description="Counter or derived metric compared to threshold")
    threshold: float = Field(..., description="Inclusive minimum value of the metric")
    tracks_progress: bool = Field(
        default=True,
        description="False when partial progress is meaningless (e.g. a flag)",
    )

    model_config = {"frozen": True}

    @property
    def is_dependent(self) -> bool:
        """Whether the predicate depends on other badges' results."""
        return self.metric in DERIVED_METRICS


class EvaluationResult(BaseModel):
    """Earned badges for one user snapshot."""

    earned_badges: list[BadgeDefinition] = Field(default_factory=list)
    total_points: int = 0

    model_config = {"frozen": True}

    @property
    def earned_ids(self) -> list[str]:
        return [badge.id for badge in self.earned_badges]

    def find(self, badge_id: str) -> Optional[BadgeDefinition]:
        for badge in self.earned_badges:
            if badge.id == badge_id:
                return badge
        return None


class BadgeStatus(BaseModel):
    """A catalog entry with the user's standing against it."""

    badge: BadgeDefinition
    earned: bool = False
    progress: float = Field(default=0.0, ge=0.0, le=100.0, description="Percent complete")

    model_config = {"frozen": True}
