"""
Badge evaluation against a user snapshot.

Evaluation runs in two passes. The first pass decides every badge whose
metric is an activity counter. The second pass decides dependent badges
(those counting other badges or their points) from the first pass's
result only, so a dependent badge never counts itself or another
dependent badge.
"""

from collections.abc import Sequence
from typing import Any, Optional, Union

from .catalog import DEFAULT_CATALOG
from .counters import normalize
from .exceptions import InvalidCatalogError, UnknownBadgeError
from .models import (
    BADGES_EARNED,
    COUNTER_METRICS,
    DERIVED_METRICS,
    POINTS_EARNED,
    ActivityCounters,
    BadgeDefinition,
    BadgeStatus,
    EvaluationResult,
)


def validate_catalog(catalog: Sequence[BadgeDefinition]) -> None:
    """
    Check that a catalog can be evaluated.

    Raises:
        InvalidCatalogError: Duplicate id, unknown metric, or a threshold
            that is not positive
    """
    seen: set[str] = set()
    for badge in catalog:
        if badge.id in seen:
            raise InvalidCatalogError(f"Duplicate badge id: {badge.id}", badge.id)
        seen.add(badge.id)

        if badge.metric not in COUNTER_METRICS and badge.metric not in DERIVED_METRICS:
            raise InvalidCatalogError(
                f"Badge {badge.id} uses unknown metric: {badge.metric}",
                badge.id,
            )
        if badge.threshold <= 0:
            raise InvalidCatalogError(
                f"Badge {badge.id} threshold must be positive",
                badge.id,
            )


class AchievementEvaluator:
    """Evaluates a fixed badge catalog against user snapshots."""

    def __init__(self, catalog: Optional[Sequence[BadgeDefinition]] = None):
        """
        Args:
            catalog: Badges to evaluate, in display order. Defaults to
                DEFAULT_CATALOG.

        Raises:
            InvalidCatalogError: If the catalog is inconsistent
        """
        self._catalog = tuple(DEFAULT_CATALOG if catalog is None else catalog)
        validate_catalog(self._catalog)
        self._by_id = {badge.id: badge for badge in self._catalog}

    @property
    def catalog(self) -> tuple[BadgeDefinition, ...]:
        return self._catalog

    def get_badge(self, badge_id: str) -> BadgeDefinition:
        try:
            return self._by_id[badge_id]
        except KeyError:
            raise UnknownBadgeError(badge_id)

    def _metrics(self, counters: ActivityCounters) -> dict[str, int]:
        """Counter metrics plus the derived metrics from the first pass."""
        metrics = counters.metrics()
        independent = [
            badge for badge in self._catalog
            if not badge.is_dependent and metrics[badge.metric] >= badge.threshold
        ]
        metrics[BADGES_EARNED] = len(independent)
        metrics[POINTS_EARNED] = sum(badge.points for badge in independent)
        return metrics

    @staticmethod
    def _is_earned(badge: BadgeDefinition, metrics: dict[str, int]) -> bool:
        return metrics[badge.metric] >= badge.threshold

    @staticmethod
    def _progress(badge: BadgeDefinition, metrics: dict[str, int]) -> float:
        if not badge.tracks_progress:
            return 0.0
        return min(100.0, 100.0 * metrics[badge.metric] / badge.threshold)

    def evaluate(self, user: Any) -> EvaluationResult:
        """Compute the earned badges and total points for ``user``."""
        metrics = self._metrics(normalize(user))
        earned = [badge for badge in self._catalog if self._is_earned(badge, metrics)]
        return EvaluationResult(
            earned_badges=earned,
            total_points=sum(badge.points for badge in earned),
        )

    def progress(self, badge: Union[str, BadgeDefinition], user: Any) -> float:
        """Percent progress of ``user`` towards ``badge``, clamped to 100."""
        if isinstance(badge, str):
            badge = self.get_badge(badge)
        return self._progress(badge, self._metrics(normalize(user)))

    def badge_statuses(self, user: Any) -> list[BadgeStatus]:
        metrics = self._metrics(normalize(user))
        return [
            BadgeStatus(
                badge=badge,
                earned=self._is_earned(badge, metrics),
                progress=self._progress(badge, metrics),
            )
            for badge in self._catalog
        ]


# Module-level instance getter
_evaluator_instance: Optional[AchievementEvaluator] = None


def get_achievement_evaluator() -> AchievementEvaluator:
    """Get the evaluator singleton for the default catalog."""
    global _evaluator_instance
    if _evaluator_instance is None:
        _evaluator_instance = AchievementEvaluator()
    return _evaluator_instance


def reset_achievement_evaluator() -> None:
    """Reset the evaluator singleton (for testing)."""
    global _evaluator_instance
    _evaluator_instance = None


def evaluate(user: Any) -> EvaluationResult:
    """Evaluate ``user`` against the default catalog."""
    return get_achievement_evaluator().evaluate(user)


def progress(badge: Union[str, BadgeDefinition], user: Any) -> float:
    """Progress of ``user`` towards a default-catalog badge."""
    return get_achievement_evaluator().progress(badge, user)
