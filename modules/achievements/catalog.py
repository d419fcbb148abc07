"""
The default badge catalog.

Thresholds are inclusive. Point values and rarities are fixed per id.
"""

from .models import BADGES_EARNED, POINTS_EARNED, BadgeDefinition, Rarity


DEFAULT_CATALOG: tuple[BadgeDefinition, ...] = (
    BadgeDefinition(
        id="first_post",
        name="First Post",
        description="Made your first post",
        icon="check-circle",
        rarity=Rarity.COMMON,
        points=10,
        metric="posts",
        threshold=1,
    ),
    BadgeDefinition(
        id="content_creator",
        name="Content Creator",
        description="Posted 10 times",
        icon="camera",
        rarity=Rarity.COMMON,
        points=25,
        metric="posts",
        threshold=10,
    ),
    BadgeDefinition(
        id="video_star",
        name="Video Star",
        description="Posted 5 videos",
        icon="video-camera",
        rarity=Rarity.UNCOMMON,
        points=50,
        metric="video_posts",
        threshold=5,
    ),
    BadgeDefinition(
        id="popular",
        name="Popular",
        description="Reached 100 subscribers",
        icon="fire",
        rarity=Rarity.UNCOMMON,
        points=75,
        metric="subscribers",
        threshold=100,
    ),
    BadgeDefinition(
        id="superstar",
        name="Superstar",
        description="Reached 1000 subscribers",
        icon="star",
        rarity=Rarity.RARE,
        points=150,
        metric="subscribers",
        threshold=1000,
    ),
    BadgeDefinition(
        id="heart_throb",
        name="Heart Throb",
        description="Received 500 likes",
        icon="heart",
        rarity=Rarity.RARE,
        points=100,
        metric="likes_received",
        threshold=500,
    ),
    BadgeDefinition(
        id="social_butterfly",
        name="Social Butterfly",
        description="Subscribed to 50 users",
        icon="usergroup-add",
        rarity=Rarity.UNCOMMON,
        points=30,
        metric="subscribed",
        threshold=50,
    ),
    BadgeDefinition(
        id="consistent",
        name="Consistent",
        description="Posted for 7 consecutive days",
        icon="lightning",
        rarity=Rarity.RARE,
        points=80,
        metric="posting_streak",
        threshold=7,
    ),
    BadgeDefinition(
        id="champion",
        name="Champion",
        description="Earned 5 different badges",
        icon="trophy",
        rarity=Rarity.EPIC,
        points=200,
        metric=BADGES_EARNED,
        threshold=5,
    ),
    BadgeDefinition(
        id="commentator",
        name="Commentator",
        description="Commented on 50 posts",
        icon="comment",
        rarity=Rarity.UNCOMMON,
        points=40,
        metric="comments",
        threshold=50,
    ),
    BadgeDefinition(
        id="sharer",
        name="Sharer",
        description="Shared 20 posts",
        icon="share",
        rarity=Rarity.UNCOMMON,
        points=35,
        metric="shared",
        threshold=20,
    ),
    BadgeDefinition(
        id="viewer",
        name="Viewer",
        description="Watched 100 videos",
        icon="eye",
        rarity=Rarity.COMMON,
        points=20,
        metric="watched",
        threshold=100,
    ),
    BadgeDefinition(
        id="like_master",
        name="Like Master",
        description="Liked 200 posts",
        icon="like",
        rarity=Rarity.UNCOMMON,
        points=45,
        metric="liked",
        threshold=200,
    ),
    BadgeDefinition(
        id="early_bird",
        name="Early Bird",
        description="Joined in the first 1000 users",
        icon="calendar",
        rarity=Rarity.LEGENDARY,
        points=300,
        metric="joined_early",
        threshold=1,
        tracks_progress=False,
    ),
    BadgeDefinition(
        id="happy_user",
        name="Happy User",
        description="Used the app for 30 days",
        icon="smile",
        rarity=Rarity.RARE,
        points=120,
        metric="days_active",
        threshold=30,
    ),
    BadgeDefinition(
        id="gem_collector",
        name="Gem Collector",
        description="Earned 1000 points",
        icon="gem",
        rarity=Rarity.EPIC,
        points=0,  # based on points, so it awards none itself
        metric=POINTS_EARNED,
        threshold=1000,
    ),
)
