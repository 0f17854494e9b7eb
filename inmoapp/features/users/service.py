"""
inmoapp/features/users/service.py

Account repository and tier manager.

Handles:
- Account creation and lookup
- Subscription tier reads (users.subscription_tier is the source of truth)
- Tier changes: set, promote to AGENT, downgrade to FREE, manual upgrade
"""

import logging
from datetime import datetime, timezone
from typing import Optional, Union
from uuid import uuid4
from sqlalchemy import select, insert, update

from inmoapp.core.database import get_db_session, users
from inmoapp.core.errors import NotFoundError, ValidationError
from inmoapp.features.tiers.limits import parse_tier, tier_meets_minimum
from inmoapp.models.subscription import SubscriptionTier, UserRole
from inmoapp.models.user import User


logger = logging.getLogger(__name__)

PAID_TIERS = (SubscriptionTier.PLUS, SubscriptionTier.AGENT, SubscriptionTier.PRO)


def _row_to_user(row) -> User:
    return User(
        id=row.id,
        email=row.email,
        name=row.name,
        role=UserRole(row.role),
        # Stored values outside the enum degrade to FREE rather than failing the read
        subscription_tier=parse_tier(row.subscription_tier),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _strict_tier(value: Union[SubscriptionTier, str]) -> SubscriptionTier:
    """Parse a tier for writes. Unlike parse_tier, unknown values are rejected."""
    if isinstance(value, SubscriptionTier):
        return value
    try:
        return SubscriptionTier(str(value).strip().upper())
    except ValueError:
        valid = ", ".join(t.value for t in SubscriptionTier)
        raise ValidationError(f"Invalid tier: {value}. Must be one of {valid}")


def create_user(
    email: str,
    name: Optional[str] = None,
    role: UserRole = UserRole.CLIENT,
    tier: Union[SubscriptionTier, str] = SubscriptionTier.FREE,
    user_id: Optional[str] = None,
) -> User:
    user_id = user_id or str(uuid4())
    now = datetime.now(timezone.utc)
    with get_db_session() as session:
        session.execute(
            insert(users).values(
                id=user_id,
                email=email,
                name=name,
                role=UserRole(role).value,
                subscription_tier=_strict_tier(tier).value,
                created_at=now,
                updated_at=now,
            )
        )
    return get_user(user_id)


def get_user(user_id: str) -> Optional[User]:
    with get_db_session() as session:
        row = session.execute(select(users).where(users.c.id == user_id)).first()
        if not row:
            return None
        return _row_to_user(row)


def get_user_tier(user_id: str) -> Optional[SubscriptionTier]:
    """
    Get the account's current tier.

    Returns None when the account doesn't exist (not-found signal, not an error).
    """
    with get_db_session() as session:
        row = session.execute(
            select(users.c.subscription_tier).where(users.c.id == user_id)
        ).first()
        if not row:
            return None
        return parse_tier(row.subscription_tier)


def _require_user(user_id: str) -> User:
    user = get_user(user_id)
    if not user:
        raise NotFoundError(f"User not found: {user_id}")
    return user


def _update_user(user_id: str, **values) -> User:
    values["updated_at"] = datetime.now(timezone.utc)
    with get_db_session() as session:
        result = session.execute(
            update(users).where(users.c.id == user_id).values(**values)
        )
        if result.rowcount == 0:
            raise NotFoundError(f"User not found: {user_id}")
    return get_user(user_id)


def set_user_tier(
    user_id: str,
    tier: Union[SubscriptionTier, str],
    reason: str = "manual_change",
) -> User:
    """
    Change an account's tier.

    Raises:
        ValidationError: tier is not one of the known tiers
        NotFoundError: account doesn't exist
    """
    new_tier = _strict_tier(tier)
    user = _update_user(user_id, subscription_tier=new_tier.value)
    logger.info(
        "[tiers] subscription tier updated",
        extra={"user_id": user_id, "tier": new_tier.value, "reason": reason},
    )
    return user


def has_minimum_tier(user_id: str, required: Union[SubscriptionTier, str]) -> bool:
    """True if the account's tier ranks at or above `required`."""
    tier = get_user_tier(user_id)
    if tier is None:
        raise NotFoundError(f"User not found: {user_id}")
    return tier_meets_minimum(tier, required)


def promote_to_agent(user_id: str, tier: Union[SubscriptionTier, str]) -> User:
    """Make a client a seller: role AGENT plus the purchased paid tier."""
    new_tier = _strict_tier(tier)
    if new_tier == SubscriptionTier.FREE:
        raise ValidationError("Cannot promote to AGENT with FREE tier")

    user = _update_user(user_id, role=UserRole.AGENT.value, subscription_tier=new_tier.value)
    logger.info(
        "[tiers] user promoted to AGENT",
        extra={"user_id": user_id, "tier": new_tier.value},
    )
    return user


def downgrade_to_free(user_id: str, reason: str = "subscription_cancelled") -> User:
    """Drop to FREE limits. The role is kept; sellers stay sellers."""
    user = _update_user(user_id, subscription_tier=SubscriptionTier.FREE.value)
    logger.warning(
        "[tiers] user downgraded to FREE",
        extra={"user_id": user_id, "reason": reason},
    )
    return user


def upgrade_subscription(user_id: str, plan: Union[SubscriptionTier, str]) -> User:
    """
    Manual plan upgrade from the dashboard.

    Only paid plans are accepted. A CLIENT is promoted to AGENT; other
    roles (AGENT, ADMIN) are left as they are.
    """
    try:
        new_tier = _strict_tier(plan)
    except ValidationError:
        raise ValidationError("Plan inválido")
    if new_tier not in PAID_TIERS:
        raise ValidationError("Plan inválido")

    user = _require_user(user_id)
    role = UserRole.AGENT if user.role == UserRole.CLIENT else user.role
    updated = _update_user(user_id, subscription_tier=new_tier.value, role=role.value)
    logger.info(
        "[tiers] subscription upgraded",
        extra={"user_id": user_id, "tier": new_tier.value, "role": role.value},
    )
    return updated
