"""
Tests for tier feature bundles and pricing.
"""
from decimal import Decimal

from inmoapp.features.tiers.limits import get_featured_limit, get_video_limit
from inmoapp.features.tiers.pricing import get_tier_features, get_tier_pricing, list_tier_catalog
from inmoapp.models.subscription import SubscriptionTier, Unlimited


def test_unlimited_featured_flag_matches_limit():
    for tier in SubscriptionTier:
        features = get_tier_features(tier)
        assert features.has_unlimited_featured == isinstance(get_featured_limit(tier), Unlimited)


def test_capacity_flags_derived_from_limits():
    for tier in SubscriptionTier:
        features = get_tier_features(tier)
        assert features.has_videos == (get_video_limit(tier) > 0)
        assert features.has_featured == (features.featured_limit is None or features.featured_limit > 0)


def test_free_features():
    features = get_tier_features("FREE")
    assert features.display_name == "Gratuito"
    assert features.property_limit == 1
    assert features.featured_limit == 0
    assert features.has_featured is False
    assert features.has_videos is False
    assert features.has_analytics is False
    assert features.has_crm is False
    assert features.support == "Digital (72h)"


def test_pro_features():
    features = get_tier_features("PRO")
    assert features.featured_limit is None
    assert features.has_featured is True
    assert features.has_unlimited_featured is True
    assert features.has_analytics is True
    assert features.has_ai_description is True


def test_plus_has_analytics_but_no_crm():
    features = get_tier_features("PLUS")
    assert features.has_analytics is True
    assert features.has_crm is False
    assert features.has_ai_description is False


def test_pricing_constants():
    assert get_tier_pricing("FREE").price == Decimal("0.00")
    assert get_tier_pricing("PLUS").price == Decimal("9.99")
    assert get_tier_pricing("AGENT").price == Decimal("29.99")
    assert get_tier_pricing("PRO").price == Decimal("59.99")
    pricing = get_tier_pricing("PRO")
    assert pricing.currency == "USD"
    assert pricing.period == "mes"


def test_pricing_is_deterministic():
    for tier in SubscriptionTier:
        assert get_tier_pricing(tier) == get_tier_pricing(tier)


def test_unknown_tier_priced_as_free():
    assert get_tier_pricing("ENTERPRISE") == get_tier_pricing("FREE")


def test_catalog_in_rank_order():
    catalog = list_tier_catalog()
    assert [entry["features"].tier for entry in catalog] == [
        SubscriptionTier.FREE,
        SubscriptionTier.PLUS,
        SubscriptionTier.AGENT,
        SubscriptionTier.PRO,
    ]
