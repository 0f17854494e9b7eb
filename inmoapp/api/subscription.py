"""
Subscription API routes.

- GET  /api/subscription/tiers: Feature + pricing catalog
- GET  /api/subscription/tiers/{tier}: One tier
- GET  /api/subscription/usage: Caller's usage vs. limits
- GET  /api/subscription/permissions: Caller's create/feature checks
- POST /api/subscription/upgrade: Manual plan upgrade
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from inmoapp.core.auth import get_current_user_id
from inmoapp.features.permissions.service import can_create_property, can_feature_property
from inmoapp.features.tiers.pricing import get_tier_features, get_tier_pricing, list_tier_catalog
from inmoapp.features.usage.service import get_usage_summary
from inmoapp.features.users.service import upgrade_subscription
from inmoapp.models.subscription import (
    PermissionCheckResult,
    SubscriptionTier,
    TierFeatures,
    TierPricing,
)
from inmoapp.models.usage import UsageSummary
from inmoapp.models.user import User


router = APIRouter(prefix="/subscription", tags=["subscription"])


class TierCatalogEntry(BaseModel):
    features: TierFeatures
    pricing: TierPricing


class PermissionsResponse(BaseModel):
    create_property: PermissionCheckResult
    feature_property: PermissionCheckResult


class UpgradeRequest(BaseModel):
    plan: str


@router.get("/tiers", response_model=List[TierCatalogEntry])
def get_tiers():
    return list_tier_catalog()


@router.get("/tiers/{tier}", response_model=TierCatalogEntry)
def get_tier(tier: str):
    """Lookups elsewhere fall back to FREE; here an unknown tier is a 404."""
    resolved: Optional[SubscriptionTier]
    try:
        resolved = SubscriptionTier(tier.upper())
    except ValueError:
        resolved = None
    if resolved is None:
        raise HTTPException(status_code=404, detail=f"Unknown tier: {tier}")
    return {"features": get_tier_features(resolved), "pricing": get_tier_pricing(resolved)}


@router.get("/usage", response_model=UsageSummary)
def get_usage(user_id: str = Depends(get_current_user_id)):
    return get_usage_summary(user_id)


@router.get("/permissions", response_model=PermissionsResponse)
def get_permissions(user_id: str = Depends(get_current_user_id)):
    return {
        "create_property": can_create_property(user_id),
        "feature_property": can_feature_property(user_id),
    }


@router.post("/upgrade", response_model=User)
def upgrade(request: UpgradeRequest, user_id: str = Depends(get_current_user_id)):
    return upgrade_subscription(user_id, request.plan)
