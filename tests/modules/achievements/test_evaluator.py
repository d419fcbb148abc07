"""
Tests for the achievement evaluator.
"""

import pytest

from modules.achievements.catalog import DEFAULT_CATALOG
from modules.achievements.evaluator import (
    AchievementEvaluator,
    evaluate,
    get_achievement_evaluator,
    progress,
    reset_achievement_evaluator,
)
from modules.achievements.exceptions import InvalidCatalogError, UnknownBadgeError
from modules.achievements.interfaces import IAchievementEvaluator
from modules.achievements.models import BadgeDefinition
from shared.models import User


def posts(count: int, **fields) -> list[dict]:
    return [dict(fields) for _ in range(count)]


def dated_posts(days: int, **fields) -> list[dict]:
    return [dict(fields, createdAt=f"2024-01-{day:02d}T12:00:00Z") for day in range(1, days + 1)]


def everything_user(**overrides) -> dict:
    """A user who qualifies for every counter badge."""
    user = {
        "posts": dated_posts(10, category="short", likes=50),
        "subscriber": list(range(1000)),
        "subscribed": list(range(50)),
        "comments": list(range(50)),
        "shared": list(range(20)),
        "liked": list(range(200)),
        "watched": list(range(100)),
        "daysActive": 30,
        "joinedEarly": True,
    }
    user.update(overrides)
    return user


@pytest.fixture
def evaluator() -> AchievementEvaluator:
    return AchievementEvaluator()


class TestEvaluate:
    @pytest.mark.parametrize("user", [None, {}])
    def test_empty_user_earns_nothing(self, evaluator, user):
        """An absent or empty user should earn no badges and no points."""
        result = evaluator.evaluate(user)
        assert result.earned_badges == []
        assert result.total_points == 0

    def test_first_post(self, evaluator):
        result = evaluator.evaluate({"posts": posts(1)})
        assert result.earned_ids == ["first_post"]
        assert result.total_points == 10

    def test_thresholds_are_inclusive(self, evaluator):
        """A metric exactly at the threshold should earn the badge."""
        result = evaluator.evaluate({"subscriber": list(range(100))})
        assert "popular" in result.earned_ids
        assert "superstar" not in result.earned_ids

        result = evaluator.evaluate({"subscriber": list(range(99))})
        assert "popular" not in result.earned_ids

    def test_posts_and_subscribers(self, evaluator):
        """Ten posts and 150 subscribers should be worth 110 points."""
        result = evaluator.evaluate({"posts": posts(10), "subscriber": list(range(150))})

        assert result.earned_ids == ["first_post", "content_creator", "popular"]
        assert result.total_points == 110

    def test_earned_in_catalog_order(self, evaluator):
        result = evaluator.evaluate({"joinedEarly": True, "posts": posts(1)})
        assert result.earned_ids == ["first_post", "early_bird"]

    def test_video_star(self, evaluator):
        user = {"posts": posts(3, category="short") + posts(2, category="long") + posts(5, category="image")}
        result = evaluator.evaluate(user)
        assert "video_star" in result.earned_ids

    def test_heart_throb_sums_likes(self, evaluator):
        result = evaluator.evaluate({"posts": posts(4, likes=125)})
        assert "heart_throb" in result.earned_ids

    def test_consistent_needs_seven_day_streak(self, evaluator):
        assert "consistent" in evaluator.evaluate({"posts": dated_posts(7)}).earned_ids
        assert "consistent" not in evaluator.evaluate({"posts": dated_posts(6)}).earned_ids

    def test_undated_posts_do_not_earn_consistent(self, evaluator):
        assert "consistent" not in evaluator.evaluate({"posts": posts(30)}).earned_ids

    def test_is_deterministic(self, evaluator):
        """The same snapshot should always produce the same result."""
        user = everything_user()
        assert evaluator.evaluate(user) == evaluator.evaluate(user)

    def test_does_not_modify_input(self, evaluator):
        user = {"posts": posts(10), "subscriber": list(range(150))}
        before = repr(user)
        evaluator.evaluate(user)
        assert repr(user) == before

    def test_accepts_user_model(self, evaluator):
        user = User.model_validate({"_id": "u1", "posts": posts(10), "subscriber": list(range(150))})
        assert evaluator.evaluate(user).total_points == 110


class TestDependentBadges:
    def test_champion_after_five_badges(self, evaluator):
        """Five counter badges should also earn champion."""
        user = {
            "posts": posts(10),
            "subscriber": list(range(150)),
            "subscribed": list(range(50)),
            "comments": list(range(50)),
        }
        result = evaluator.evaluate(user)

        assert result.earned_ids == [
            "first_post",
            "content_creator",
            "popular",
            "social_butterfly",
            "champion",
            "commentator",
        ]
        assert result.total_points == 10 + 25 + 75 + 30 + 200 + 40

    def test_champion_not_earned_with_four_badges(self, evaluator):
        user = {"posts": posts(10), "subscriber": list(range(150)), "subscribed": list(range(50))}
        assert "champion" not in evaluator.evaluate(user).earned_ids

    def test_everything(self, evaluator):
        """Every counter badge is worth 1080 points, enough for gem_collector."""
        result = evaluator.evaluate(everything_user())

        assert result.earned_ids == [badge.id for badge in DEFAULT_CATALOG]
        assert result.total_points == 1080 + 200

    def test_gem_collector_counts_first_pass_points_only(self, evaluator):
        """Champion's own points should not push a user over 1000."""
        result = evaluator.evaluate(everything_user(joinedEarly=False))

        assert "champion" in result.earned_ids
        assert "gem_collector" not in result.earned_ids
        assert result.total_points == 780 + 200


class TestProgress:
    def test_partial_progress(self, evaluator):
        user = {"posts": posts(3), "subscriber": list(range(150))}
        assert evaluator.progress("content_creator", user) == pytest.approx(30.0)
        assert evaluator.progress("superstar", user) == pytest.approx(15.0)

    def test_progress_is_clamped(self, evaluator):
        """Progress should never exceed 100."""
        user = {"subscriber": list(range(150))}
        assert evaluator.progress("popular", user) == 100.0

    def test_first_post_progress(self, evaluator):
        assert evaluator.progress("first_post", {"posts": posts(1)}) == 100.0
        assert evaluator.progress("first_post", {}) == 0.0

    def test_untracked_badge_has_no_progress(self, evaluator):
        """Flag badges report zero progress even once earned."""
        assert evaluator.progress("early_bird", {"joinedEarly": True}) == 0.0

    def test_dependent_badge_progress(self, evaluator):
        user = {"posts": posts(10), "subscriber": list(range(150))}
        assert evaluator.progress("champion", user) == pytest.approx(60.0)

    def test_zero_for_empty_user(self, evaluator):
        for badge in evaluator.catalog:
            assert evaluator.progress(badge, None) == 0.0

    def test_accepts_definition(self, evaluator):
        badge = evaluator.get_badge("viewer")
        assert evaluator.progress(badge, {"watched": list(range(25))}) == pytest.approx(25.0)

    def test_unknown_badge(self, evaluator):
        with pytest.raises(UnknownBadgeError) as exc_info:
            evaluator.progress("not_a_badge", {})
        assert exc_info.value.code == "UNKNOWN_BADGE"


class TestBadgeStatuses:
    def test_lists_whole_catalog(self, evaluator):
        """Every catalog badge should appear once, in catalog order."""
        statuses = evaluator.badge_statuses({"posts": posts(3)})

        assert [status.badge.id for status in statuses] == [b.id for b in DEFAULT_CATALOG]
        by_id = {status.badge.id: status for status in statuses}
        assert by_id["first_post"].earned is True
        assert by_id["first_post"].progress == 100.0
        assert by_id["content_creator"].earned is False
        assert by_id["content_creator"].progress == pytest.approx(30.0)

    def test_statuses_match_evaluate(self, evaluator):
        user = everything_user(joinedEarly=False)
        earned = [s.badge.id for s in evaluator.badge_statuses(user) if s.earned]
        assert earned == evaluator.evaluate(user).earned_ids


class TestCustomCatalog:
    def test_custom_catalog(self):
        catalog = [
            BadgeDefinition(id="talker", name="Talker", metric="comments", threshold=2, points=5),
            BadgeDefinition(id="collector", name="Collector", metric="badges_earned", threshold=1, points=1),
        ]
        evaluator = AchievementEvaluator(catalog)

        result = evaluator.evaluate({"comments": ["a", "b"]})

        assert result.earned_ids == ["talker", "collector"]
        assert result.total_points == 6

    def test_invalid_catalog_rejected(self):
        catalog = [BadgeDefinition(id="x", name="X", metric="unknown", threshold=1)]
        with pytest.raises(InvalidCatalogError):
            AchievementEvaluator(catalog)

    def test_implements_interface(self, evaluator):
        assert isinstance(evaluator, IAchievementEvaluator)


class TestModuleFunctions:
    def test_evaluate_uses_default_catalog(self):
        result = evaluate({"posts": posts(10), "subscriber": list(range(150))})
        assert result.total_points == 110

    def test_progress_shortcut(self):
        assert progress("content_creator", {"posts": posts(5)}) == pytest.approx(50.0)

    def test_singleton(self):
        first = get_achievement_evaluator()
        assert get_achievement_evaluator() is first
        reset_achievement_evaluator()
        assert get_achievement_evaluator() is not first
