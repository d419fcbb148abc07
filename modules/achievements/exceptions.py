"""
Achievements module exceptions.

Evaluation itself never raises; these cover catalog mistakes and
lookups of badges that do not exist.
"""

from shared.exceptions import HiveError, ValidationError


class AchievementError(HiveError):
    """Base exception for achievement-related errors."""

    pass


class UnknownBadgeError(AchievementError):
    """Raised when a badge id is not in the catalog."""

    def __init__(self, badge_id: str):
        super().__init__(
            f"Unknown badge: {badge_id}",
            code="UNKNOWN_BADGE",
            details={"badge_id": badge_id},
        )


class InvalidCatalogError(ValidationError):
    """Raised when a badge catalog is inconsistent."""

    def __init__(self, message: str, badge_id: str):
        super().__init__(
            message,
            code="INVALID_CATALOG",
            details={"badge_id": badge_id},
        )
