"""
Tests for dashboard usage accounting.
"""
import pytest

from inmoapp.core.errors import NotFoundError
from inmoapp.features.properties.service import add_images, create_property, replace_videos, set_featured
from inmoapp.features.usage.service import (
    combine_usage_with_limits,
    get_usage_limits,
    get_usage_percentage,
    get_usage_summary,
    get_user_usage_stats,
    get_warning_level,
)
from inmoapp.models.property import VideoInput, VideoPlatform
from inmoapp.models.subscription import SubscriptionTier
from inmoapp.models.usage import UsageStats


def test_usage_stats_counts_everything(make_user):
    user = make_user("AGENT")
    first = create_property(user.id, "Uno")
    create_property(user.id, "Dos")
    add_images(user.id, first.id, ["a.jpg", "b.jpg"])
    replace_videos(user.id, first.id, [VideoInput(url="https://vimeo.com/1", platform=VideoPlatform.VIMEO)])
    set_featured(user.id, first.id, True)

    stats = get_user_usage_stats(user.id)
    assert stats == UsageStats(properties=2, images=2, videos=1, featured=1)


def test_usage_limits_unlimited_featured():
    limits = get_usage_limits("PRO")
    assert limits.properties == 20
    assert limits.featured is None


def test_combined_limits_scale_with_listings():
    stats = UsageStats(properties=3, images=10, videos=0, featured=0)
    combined = combine_usage_with_limits(stats, get_usage_limits("PLUS"))
    assert combined.images.limit == 30
    assert combined.videos.limit == 3

    empty = UsageStats(properties=0, images=0, videos=0, featured=0)
    assert combine_usage_with_limits(empty, get_usage_limits("PLUS")).images.limit == 10


@pytest.mark.parametrize(
    "current,limit,expected",
    [(1, 2, 50.0), (5, 0, 0.0), (5, None, 0.0), (12, 10, 100.0)],
)
def test_usage_percentage(current, limit, expected):
    assert get_usage_percentage(current, limit) == expected


@pytest.mark.parametrize("pct,level", [(0, "safe"), (69.9, "safe"), (70, "warning"), (90, "danger"), (100, "danger")])
def test_warning_level(pct, level):
    assert get_warning_level(pct) == level


def test_usage_summary(make_user):
    user = make_user("FREE")
    create_property(user.id, "Casa")
    summary = get_usage_summary(user.id)
    assert summary.tier == SubscriptionTier.FREE
    assert summary.properties.current == 1
    assert summary.properties.percentage == 100.0
    assert summary.properties.warning_level == "danger"
    assert summary.featured.limit == 0
    assert summary.next_tier == SubscriptionTier.PLUS


def test_usage_summary_missing_user():
    with pytest.raises(NotFoundError):
        get_usage_summary("ghost")
