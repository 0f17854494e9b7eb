"""
inmoapp/models/subscription.py

Subscription tier models.

Tiers gate how many listings an account may own, how many images and
videos each listing holds, and how many listings can be featured.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional, Union
from pydantic import BaseModel, ConfigDict


class SubscriptionTier(str, Enum):
    """Subscription levels, least to most capable."""
    FREE = "FREE"
    PLUS = "PLUS"
    AGENT = "AGENT"
    PRO = "PRO"


class UserRole(str, Enum):
    CLIENT = "CLIENT"
    AGENT = "AGENT"
    ADMIN = "ADMIN"


@dataclass(frozen=True)
class Limited:
    """A finite cap (may be zero)."""
    count: int

    def __post_init__(self):
        if self.count < 0:
            raise ValueError("limit count must be >= 0")


@dataclass(frozen=True)
class Unlimited:
    """No cap applies."""

    def __repr__(self) -> str:
        return "UNLIMITED"


UNLIMITED = Unlimited()

Limit = Union[Limited, Unlimited]


def limit_to_optional(limit: Limit) -> Optional[int]:
    """Serializable form of a Limit: the count, or None when unlimited."""
    if isinstance(limit, Unlimited):
        return None
    return limit.count


@dataclass(frozen=True)
class TierLimits:
    property_limit: int
    image_limit: int
    video_limit: int
    featured_limit: Limit


class PermissionCheckResult(BaseModel):
    """
    Outcome of a permission check.

    `reason` is set only when denied. `limit` is the evaluated limit;
    None means unlimited (or the account was not found).
    """
    model_config = ConfigDict(frozen=True)

    allowed: bool
    reason: Optional[str] = None
    limit: Optional[int] = None


class TierFeatures(BaseModel):
    """Everything a tier unlocks, for pricing pages and upgrade prompts."""
    model_config = ConfigDict(frozen=True)

    tier: SubscriptionTier
    display_name: str
    property_limit: int
    image_limit: int
    video_limit: int
    featured_limit: Optional[int]  # None = unlimited
    has_featured: bool
    has_unlimited_featured: bool
    has_videos: bool
    has_analytics: bool
    has_ai_description: bool
    has_crm: bool
    support: str


class TierPricing(BaseModel):
    model_config = ConfigDict(frozen=True)

    price: Decimal
    currency: str
    period: str
