"""
inmoapp/features/tiers/limits.py

Static tier table and per-resource limit lookups.

Handles:
- Tier parsing (unknown values fall back to FREE)
- Property / image / video / featured limits per tier
- Tier ranking and upgrade path
"""

from types import MappingProxyType
from typing import Mapping, Optional, Union

from inmoapp.models.subscription import (
    SubscriptionTier,
    TierLimits,
    Limit,
    Limited,
    UNLIMITED,
)


# Deploy-time configuration. Each lookup below reads from this table only.
TIER_LIMITS: Mapping[SubscriptionTier, TierLimits] = MappingProxyType({
    SubscriptionTier.FREE: TierLimits(
        property_limit=1,
        image_limit=6,
        video_limit=0,
        featured_limit=Limited(0),
    ),
    SubscriptionTier.PLUS: TierLimits(
        property_limit=3,
        image_limit=10,
        video_limit=1,
        featured_limit=Limited(1),
    ),
    SubscriptionTier.AGENT: TierLimits(
        property_limit=10,
        image_limit=15,
        video_limit=3,
        featured_limit=Limited(5),
    ),
    SubscriptionTier.PRO: TierLimits(
        property_limit=20,
        image_limit=25,
        video_limit=10,
        featured_limit=UNLIMITED,
    ),
})

# Most restrictive tier; used whenever a tier value can't be resolved
FALLBACK_TIER = SubscriptionTier.FREE

TIER_RANK: Mapping[SubscriptionTier, int] = MappingProxyType({
    SubscriptionTier.FREE: 0,
    SubscriptionTier.PLUS: 1,
    SubscriptionTier.AGENT: 2,
    SubscriptionTier.PRO: 3,
})

TIER_DISPLAY_NAMES: Mapping[SubscriptionTier, str] = MappingProxyType({
    SubscriptionTier.FREE: "Gratuito",
    SubscriptionTier.PLUS: "Plus",
    SubscriptionTier.AGENT: "Agente",
    SubscriptionTier.PRO: "Pro",
})

TierInput = Union[SubscriptionTier, str, None]


def parse_tier(value: TierInput) -> SubscriptionTier:
    """Normalize a tier value; anything unrecognized resolves to FREE."""
    if isinstance(value, SubscriptionTier):
        return value
    if isinstance(value, str):
        try:
            return SubscriptionTier(value.strip().upper())
        except ValueError:
            pass
    return FALLBACK_TIER


def get_tier_limits(tier: TierInput) -> TierLimits:
    return TIER_LIMITS[parse_tier(tier)]


def get_property_limit(tier: TierInput) -> int:
    """Maximum properties an account may own at once."""
    return get_tier_limits(tier).property_limit


def get_image_limit(tier: TierInput) -> int:
    """Maximum images per property."""
    return get_tier_limits(tier).image_limit


def get_video_limit(tier: TierInput) -> int:
    """Maximum linked videos per property (0 = none allowed)."""
    return get_tier_limits(tier).video_limit


def get_featured_limit(tier: TierInput) -> Limit:
    """Maximum featured properties: Limited(n) or UNLIMITED."""
    return get_tier_limits(tier).featured_limit


def get_tier_display_name(tier: TierInput) -> str:
    return TIER_DISPLAY_NAMES[parse_tier(tier)]


def get_tier_rank(tier: TierInput) -> int:
    return TIER_RANK[parse_tier(tier)]


def tier_meets_minimum(tier: TierInput, required: TierInput) -> bool:
    return get_tier_rank(tier) >= get_tier_rank(required)


def get_next_tier_upgrade(tier: TierInput) -> Optional[SubscriptionTier]:
    """Next tier up, or None when already at the top."""
    rank = get_tier_rank(tier)
    for candidate, candidate_rank in TIER_RANK.items():
        if candidate_rank == rank + 1:
            return candidate
    return None


def tiers_in_rank_order() -> list[SubscriptionTier]:
    return sorted(TIER_RANK, key=TIER_RANK.__getitem__)
