"""
Achievements module interface.

Presentation code should depend on IAchievementEvaluator, not the concrete
implementation, so alternative catalogs can be swapped in.
"""

from typing import Any, Protocol, Union, runtime_checkable

from .models import BadgeDefinition, BadgeStatus, EvaluationResult


@runtime_checkable
class IAchievementEvaluator(Protocol):
    """
    Interface for badge evaluation.

    All operations are pure: no I/O, no side effects, and they never raise
    for a missing or partial user snapshot.
    """

    @property
    def catalog(self) -> tuple[BadgeDefinition, ...]:
        ...

    def evaluate(self, user: Any) -> EvaluationResult:
        """
        Compute the badges a user has earned.

        Args:
            user: User model, raw backend mapping, or None

        Returns:
            Earned badges in catalog order and their total points
        """
        ...

    def progress(self, badge: Union[str, BadgeDefinition], user: Any) -> float:
        """
        Percent progress towards a badge, clamped to [0, 100].

        Args:
            badge: Badge id or definition
            user: User model, raw backend mapping, or None

        Raises:
            UnknownBadgeError: If ``badge`` is an id not in the catalog
        """
        ...

    def badge_statuses(self, user: Any) -> list[BadgeStatus]:
        """Every catalog badge with earned flag and progress, in catalog order."""
        ...
