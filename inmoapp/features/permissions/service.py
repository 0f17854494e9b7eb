"""
inmoapp/features/permissions/service.py

Tier permission checks.

Handles:
- Property creation (can_create_property)
- Image / video attachment (can_upload_image, can_add_video)
- Featuring a property (can_feature_property)

Every check returns a PermissionCheckResult; routine denials are never raised.
Negative counts are caller bugs and raise ValidationError.
One rule applies everywhere: allowed iff current + requested <= limit.
"""

import logging

from inmoapp.core.errors import ValidationError
from inmoapp.features.properties.repository import count_properties
from inmoapp.features.tiers.limits import (
    TierInput,
    get_featured_limit,
    get_image_limit,
    get_property_limit,
    get_video_limit,
    parse_tier,
)
from inmoapp.features.users.service import get_user_tier
from inmoapp.models.subscription import PermissionCheckResult, Unlimited


logger = logging.getLogger(__name__)

USER_NOT_FOUND = "User not found"


def _noun(limit: int, singular: str, plural: str) -> str:
    return singular if limit == 1 else plural


def _require_non_negative(**counts: int) -> None:
    for name, value in counts.items():
        if value < 0:
            raise ValidationError(f"{name} must be >= 0, got {value}")


def _within_limit(current: int, requested: int, limit: int) -> bool:
    return current + requested <= limit


def _denied(reason: str, limit: int, **fields) -> PermissionCheckResult:
    logger.warning("[permissions] DENIED", extra={"limit": limit, "reason": reason, **fields})
    return PermissionCheckResult(allowed=False, reason=reason, limit=limit)


def can_create_property(user_id: str) -> PermissionCheckResult:
    """
    Check whether an account may create one more property.

    Tier lookup and count are two separate reads with no transaction, so
    concurrent creates can both pass and overshoot the limit. The limit is
    advisory; closing the gap needs an atomic count-and-insert in storage.
    """
    tier = get_user_tier(user_id)
    if tier is None:
        logger.warning("[permissions] account not found", extra={"user_id": user_id})
        return PermissionCheckResult(allowed=False, reason=USER_NOT_FOUND)

    limit = get_property_limit(tier)
    current = count_properties(user_id)

    if not _within_limit(current, 1, limit):
        noun = _noun(limit, "propiedad", "propiedades")
        return _denied(
            f"Has alcanzado el límite de {limit} {noun}. Actualiza tu plan para publicar más.",
            limit,
            user_id=user_id,
            tier=tier.value,
            current_count=current,
        )

    logger.info(
        "[permissions] property creation ALLOWED",
        extra={"user_id": user_id, "tier": tier.value, "limit": limit, "current_count": current},
    )
    return PermissionCheckResult(allowed=True, limit=limit)


def can_upload_image(tier: TierInput, current_count: int, requested: int = 1) -> PermissionCheckResult:
    """
    Check whether `requested` more images fit on a property.

    Args:
        tier: Owner's tier, already resolved by the caller
        current_count: Images already attached
        requested: Images about to be added
    """
    _require_non_negative(current_count=current_count, requested=requested)
    resolved = parse_tier(tier)
    limit = get_image_limit(resolved)

    if not _within_limit(current_count, requested, limit):
        noun = _noun(limit, "imagen", "imágenes")
        return _denied(
            f"Has alcanzado el límite de {limit} {noun}. Actualiza tu plan para agregar más.",
            limit,
            tier=resolved.value,
            current_count=current_count,
            requested=requested,
        )
    return PermissionCheckResult(allowed=True, limit=limit)


def can_add_video(tier: TierInput, current_count: int, requested: int = 1) -> PermissionCheckResult:
    """
    Check whether `requested` more videos fit on a property.

    Tiers without any video allowance get an upgrade message rather than
    a limit-reached one.
    """
    _require_non_negative(current_count=current_count, requested=requested)
    resolved = parse_tier(tier)
    limit = get_video_limit(resolved)

    if limit == 0:
        return _denied(
            "Tu plan actual no incluye videos. Actualiza a Plus o superior para agregar videos.",
            limit,
            tier=resolved.value,
        )

    if not _within_limit(current_count, requested, limit):
        noun = _noun(limit, "video", "videos")
        return _denied(
            f"Has alcanzado el límite de {limit} {noun}. Actualiza tu plan para agregar más.",
            limit,
            tier=resolved.value,
            current_count=current_count,
            requested=requested,
        )
    return PermissionCheckResult(allowed=True, limit=limit)


def can_feature_property(user_id: str) -> PermissionCheckResult:
    """
    Check whether an account may feature one more property.

    Three outcomes: unlimited (always allowed), zero allowance (always
    denied) and a finite cap compared against the featured count. The first
    two return before any count query. Same advisory caveat as
    can_create_property.
    """
    tier = get_user_tier(user_id)
    if tier is None:
        logger.warning("[permissions] account not found", extra={"user_id": user_id})
        return PermissionCheckResult(allowed=False, reason=USER_NOT_FOUND)

    featured_limit = get_featured_limit(tier)

    if isinstance(featured_limit, Unlimited):
        return PermissionCheckResult(allowed=True, limit=None)

    limit = featured_limit.count
    if limit == 0:
        return _denied(
            "Tu plan actual no incluye propiedades destacadas. Actualiza tu plan para destacar propiedades.",
            limit,
            user_id=user_id,
            tier=tier.value,
        )

    current = count_properties(user_id, featured=True)
    if not _within_limit(current, 1, limit):
        noun = _noun(limit, "propiedad destacada", "propiedades destacadas")
        return _denied(
            f"Has alcanzado el límite de {limit} {noun}. Actualiza tu plan para destacar más.",
            limit,
            user_id=user_id,
            tier=tier.value,
            current_count=current,
        )
    return PermissionCheckResult(allowed=True, limit=limit)
