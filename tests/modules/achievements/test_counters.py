"""Tests for user snapshot normalisation."""

from datetime import date

import pytest

from modules.achievements.counters import longest_daily_streak, normalize
from modules.achievements.models import ActivityCounters
from shared.models import User


class TestNormalizeEmpty:
    @pytest.mark.parametrize("user", [None, {}, "not-a-user", 42])
    def test_absent_user_is_all_zero(self, user):
        """Missing or unusable snapshots should produce zero counters."""
        assert normalize(user) == ActivityCounters()

    def test_null_collections(self):
        """Backend nulls should count as empty."""
        counters = normalize({
            "posts": None,
            "subscriber": None,
            "comments": None,
            "daysActive": None,
            "joinedEarly": None,
        })
        assert counters == ActivityCounters()


class TestNormalizeCounts:
    def test_collection_lengths(self):
        counters = normalize({
            "posts": ["p1", "p2"],
            "subscriber": ["a", "b", "c"],
            "subscribed": ["d"],
            "comments": ["c1", "c2"],
            "shared": ["s1"],
            "liked": ["l1", "l2", "l3", "l4"],
            "watched": ["w1"],
        })
        assert counters.posts == 2
        assert counters.subscribers == 3
        assert counters.subscribed == 1
        assert counters.comments == 2
        assert counters.shared == 1
        assert counters.liked == 4
        assert counters.watched == 1

    def test_numeric_counts_accepted(self):
        """Counts may arrive as numbers instead of id lists."""
        counters = normalize({"subscriber": 150, "watched": 7.9})
        assert counters.subscribers == 150
        assert counters.watched == 7

    def test_negative_and_boolean_counts_are_zero(self):
        counters = normalize({"subscriber": -5, "comments": True})
        assert counters.subscribers == 0
        assert counters.comments == 0

    def test_video_posts_by_category(self):
        """Only short and long posts count as videos."""
        counters = normalize({
            "posts": [
                {"category": "short"},
                {"category": "long"},
                {"category": "image"},
                {},
                "bare-id",
            ],
        })
        assert counters.posts == 5
        assert counters.video_posts == 2

    def test_likes_summed_across_posts(self):
        """Likes may be id lists or counts; missing likes count as zero."""
        counters = normalize({
            "posts": [
                {"likes": ["u1", "u2"]},
                {"likes": 10},
                {"likes": None},
                {},
            ],
        })
        assert counters.likes_received == 12

    def test_days_active_either_spelling(self):
        assert normalize({"daysActive": 30}).days_active == 30
        assert normalize({"days_active": 12}).days_active == 12

    def test_joined_early_must_be_true(self):
        """Only a literal true sets the flag."""
        assert normalize({"joinedEarly": True}).joined_early is True
        assert normalize({"joinedEarly": "true"}).joined_early is False
        assert normalize({"joinedEarly": 1}).joined_early is False
        assert normalize({"joined_early": True}).joined_early is True

    def test_accepts_user_model(self):
        """A parsed User should normalise like the raw payload."""
        payload = {
            "_id": "u1",
            "posts": [{"category": "short", "likes": 3}],
            "subscriber": ["a", "b"],
            "daysActive": 5,
            "joinedEarly": True,
        }
        assert normalize(User.model_validate(payload)) == normalize(payload)


class TestPostingStreak:
    def test_streak_from_post_dates(self):
        counters = normalize({
            "posts": [
                {"createdAt": "2024-03-01T10:00:00Z"},
                {"createdAt": "2024-03-02T23:59:00Z"},
                {"createdAt": "2024-03-03T08:00:00.000Z"},
                {"createdAt": "2024-03-05T08:00:00Z"},
            ],
        })
        assert counters.posting_streak == 3

    def test_same_day_posts_count_once(self):
        counters = normalize({
            "posts": [
                {"createdAt": "2024-03-01T08:00:00Z"},
                {"createdAt": "2024-03-01T20:00:00Z"},
            ],
        })
        assert counters.posting_streak == 1

    def test_undated_and_unparseable_posts_ignored(self):
        counters = normalize({
            "posts": [
                {"createdAt": "yesterday"},
                {"createdAt": 12345},
                {},
                "bare-id",
            ],
        })
        assert counters.posts == 4
        assert counters.posting_streak == 0

    def test_longest_daily_streak(self):
        days = [date(2024, 1, d) for d in (1, 2, 3, 10, 11, 12, 13, 20)]
        assert longest_daily_streak(days) == 4

    def test_longest_daily_streak_empty(self):
        assert longest_daily_streak([]) == 0

    def test_streak_across_month_boundary(self):
        days = [date(2024, 1, 31), date(2024, 2, 1), date(2024, 2, 2)]
        assert longest_daily_streak(days) == 3
