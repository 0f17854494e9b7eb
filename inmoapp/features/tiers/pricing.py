"""
inmoapp/features/tiers/pricing.py

Display-ready feature bundles and pricing per tier.

Pure functions over the static tier table; no storage access.
"""

from decimal import Decimal
from types import MappingProxyType
from typing import Mapping

from inmoapp.core.config import settings
from inmoapp.features.tiers.limits import (
    TierInput,
    get_tier_limits,
    get_tier_display_name,
    parse_tier,
    tier_meets_minimum,
    tiers_in_rank_order,
)
from inmoapp.models.subscription import (
    SubscriptionTier,
    TierFeatures,
    TierPricing,
    Limited,
    Unlimited,
    limit_to_optional,
)


TIER_PRICES: Mapping[SubscriptionTier, Decimal] = MappingProxyType({
    SubscriptionTier.FREE: Decimal("0.00"),
    SubscriptionTier.PLUS: Decimal("9.99"),
    SubscriptionTier.AGENT: Decimal("29.99"),
    SubscriptionTier.PRO: Decimal("59.99"),
})

BILLING_PERIOD = "mes"

TIER_SUPPORT: Mapping[SubscriptionTier, str] = MappingProxyType({
    SubscriptionTier.FREE: "Digital (72h)",
    SubscriptionTier.PLUS: "Digital (48h)",
    SubscriptionTier.AGENT: "Prioritario (24h)",
    SubscriptionTier.PRO: "WhatsApp (12h)",
})


def get_tier_features(tier: TierInput) -> TierFeatures:
    """
    Assemble everything a tier unlocks.

    Capacity flags (featured, videos) are derived from the limits so the
    two can't drift apart.
    """
    resolved = parse_tier(tier)
    limits = get_tier_limits(resolved)
    featured = limits.featured_limit

    return TierFeatures(
        tier=resolved,
        display_name=get_tier_display_name(resolved),
        property_limit=limits.property_limit,
        image_limit=limits.image_limit,
        video_limit=limits.video_limit,
        featured_limit=limit_to_optional(featured),
        has_featured=featured != Limited(0),
        has_unlimited_featured=isinstance(featured, Unlimited),
        has_videos=limits.video_limit > 0,
        has_analytics=resolved != SubscriptionTier.FREE,
        has_ai_description=tier_meets_minimum(resolved, SubscriptionTier.AGENT),
        has_crm=tier_meets_minimum(resolved, SubscriptionTier.AGENT),
        support=TIER_SUPPORT[resolved],
    )


def get_tier_pricing(tier: TierInput) -> TierPricing:
    resolved = parse_tier(tier)
    return TierPricing(
        price=TIER_PRICES[resolved],
        currency=settings.DEFAULT_CURRENCY,
        period=BILLING_PERIOD,
    )


def list_tier_catalog() -> list[dict]:
    """Features and pricing for every tier, least to most capable."""
    return [
        {"features": get_tier_features(tier), "pricing": get_tier_pricing(tier)}
        for tier in tiers_in_rank_order()
    ]
