"""
inmoapp/models/usage.py

Dashboard usage models: what an account uses vs. what its tier allows.
"""

from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict

from inmoapp.models.subscription import SubscriptionTier

WarningLevel = Literal["safe", "warning", "danger"]


class UsageStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    properties: int
    images: int
    videos: int
    featured: int


class UsageLimits(BaseModel):
    model_config = ConfigDict(frozen=True)

    properties: int
    images_per_property: int
    videos_per_property: int
    featured: Optional[int]  # None = unlimited


class UsageItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    current: int
    limit: Optional[int]  # None = unlimited


class UsageWithLimits(BaseModel):
    model_config = ConfigDict(frozen=True)

    properties: UsageItem
    images: UsageItem
    videos: UsageItem
    featured: UsageItem


class UsageMeter(BaseModel):
    model_config = ConfigDict(frozen=True)

    current: int
    limit: Optional[int]
    percentage: float
    warning_level: WarningLevel


class UsageSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: str
    tier: SubscriptionTier
    properties: UsageMeter
    images: UsageMeter
    videos: UsageMeter
    featured: UsageMeter
    next_tier: Optional[SubscriptionTier] = None
