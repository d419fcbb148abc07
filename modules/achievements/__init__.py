"""
Achievements module.

Maps a user's activity counters to earned badges, point totals, and
progress towards unearned badges. Pure computation: no I/O.

Public API:
- IAchievementEvaluator: Interface for badge evaluation
- AchievementEvaluator: Default implementation
- evaluate / progress: Shortcuts using the default catalog
- BadgeDefinition, Rarity, EvaluationResult, BadgeStatus: Models
- DEFAULT_CATALOG: The built-in badge catalog
"""

from .interfaces import IAchievementEvaluator
from .models import (
    Rarity,
    ActivityCounters,
    BadgeDefinition,
    EvaluationResult,
    BadgeStatus,
)
from .exceptions import (
    AchievementError,
    UnknownBadgeError,
    InvalidCatalogError,
)
from .catalog import DEFAULT_CATALOG
from .counters import normalize
from .evaluator import (
    AchievementEvaluator,
    validate_catalog,
    get_achievement_evaluator,
    reset_achievement_evaluator,
    evaluate,
    progress,
)

__all__ = [
    # Interface
    "IAchievementEvaluator",
    # Models
    "Rarity",
    "ActivityCounters",
    "BadgeDefinition",
    "EvaluationResult",
    "BadgeStatus",
    # Exceptions
    "AchievementError",
    "UnknownBadgeError",
    "InvalidCatalogError",
    # Catalog
    "DEFAULT_CATALOG",
    "validate_catalog",
    # Evaluation
    "normalize",
    "AchievementEvaluator",
    "get_achievement_evaluator",
    "reset_achievement_evaluator",
    "evaluate",
    "progress",
]
