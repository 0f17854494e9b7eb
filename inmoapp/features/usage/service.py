"""
inmoapp/features/usage/service.py

Dashboard usage accounting.

Handles:
- Current usage per account (properties, images, videos, featured)
- Usage vs. tier limits, percentage and warning level
"""

from typing import Optional

from inmoapp.core.errors import NotFoundError
from inmoapp.features.properties.repository import (
    count_properties,
    count_images_for_agent,
    count_videos_for_agent,
)
from inmoapp.features.tiers.limits import (
    TierInput,
    get_featured_limit,
    get_image_limit,
    get_next_tier_upgrade,
    get_property_limit,
    get_video_limit,
)
from inmoapp.features.users.service import get_user_tier
from inmoapp.models.subscription import limit_to_optional
from inmoapp.models.usage import (
    UsageItem,
    UsageLimits,
    UsageMeter,
    UsageStats,
    UsageSummary,
    UsageWithLimits,
    WarningLevel,
)


def get_user_usage_stats(user_id: str) -> UsageStats:
    return UsageStats(
        properties=count_properties(user_id),
        images=count_images_for_agent(user_id),
        videos=count_videos_for_agent(user_id),
        featured=count_properties(user_id, featured=True),
    )


def get_usage_limits(tier: TierInput) -> UsageLimits:
    return UsageLimits(
        properties=get_property_limit(tier),
        images_per_property=get_image_limit(tier),
        videos_per_property=get_video_limit(tier),
        featured=limit_to_optional(get_featured_limit(tier)),
    )


def combine_usage_with_limits(stats: UsageStats, limits: UsageLimits) -> UsageWithLimits:
    """
    Pair usage with limits.

    Image and video limits are per property, so the account-wide total is
    the per-property limit times the number of properties (at least one).
    """
    listings = max(stats.properties, 1)
    return UsageWithLimits(
        properties=UsageItem(current=stats.properties, limit=limits.properties),
        images=UsageItem(current=stats.images, limit=limits.images_per_property * listings),
        videos=UsageItem(current=stats.videos, limit=limits.videos_per_property * listings),
        featured=UsageItem(current=stats.featured, limit=limits.featured),
    )


def get_usage_percentage(current: int, limit: Optional[int]) -> float:
    """Percentage used, capped at 100. Zero and unlimited limits report 0."""
    if not limit:
        return 0.0
    return min(current / limit * 100, 100.0)


def get_warning_level(percentage: float) -> WarningLevel:
    if percentage >= 90:
        return "danger"
    if percentage >= 70:
        return "warning"
    return "safe"


def _meter(item: UsageItem) -> UsageMeter:
    percentage = get_usage_percentage(item.current, item.limit)
    return UsageMeter(
        current=item.current,
        limit=item.limit,
        percentage=percentage,
        warning_level=get_warning_level(percentage),
    )


def get_usage_summary(user_id: str) -> UsageSummary:
    tier = get_user_tier(user_id)
    if tier is None:
        raise NotFoundError(f"User not found: {user_id}")

    combined = combine_usage_with_limits(get_user_usage_stats(user_id), get_usage_limits(tier))
    return UsageSummary(
        user_id=user_id,
        tier=tier,
        properties=_meter(combined.properties),
        images=_meter(combined.images),
        videos=_meter(combined.videos),
        featured=_meter(combined.featured),
        next_tier=get_next_tier_upgrade(tier),
    )
