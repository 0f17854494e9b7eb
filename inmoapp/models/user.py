"""
inmoapp/models/user.py

Account model. subscription_tier is read from the users table only.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict

from inmoapp.models.subscription import SubscriptionTier, UserRole


class User(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    email: str
    name: Optional[str] = None
    role: UserRole = UserRole.CLIENT
    subscription_tier: SubscriptionTier = SubscriptionTier.FREE
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
