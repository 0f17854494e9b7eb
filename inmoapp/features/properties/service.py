"""
inmoapp/features/properties/service.py

Property mutation handlers.

Only sellers (AGENT or ADMIN) may use them. Each handler runs the matching
tier permission check before writing and raises LimitExceededError when it
is denied. Limits are always those of the listing's owner, so an ADMIN acting
on someone else's listing is held to that owner's tier.
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional, Sequence
from uuid import uuid4
from sqlalchemy import insert, update, delete

from inmoapp.core.database import get_db_session, properties, property_images, property_videos
from inmoapp.core.errors import LimitExceededError, NotFoundError, PermissionError, ValidationError
from inmoapp.features.permissions.service import (
    USER_NOT_FOUND,
    can_add_video,
    can_create_property,
    can_feature_property,
    can_upload_image,
)
from inmoapp.features.properties.repository import (
    get_image,
    get_property,
    list_images,
    list_videos,
)
from inmoapp.features.users.service import get_user
from inmoapp.models.property import Property, PropertyImage, PropertyVideo, VideoInput
from inmoapp.models.subscription import PermissionCheckResult, UserRole
from inmoapp.models.user import User


logger = logging.getLogger(__name__)

SELLER_ROLES = (UserRole.AGENT, UserRole.ADMIN)
NOT_SELLER_MESSAGE = "Necesitas una cuenta de agente para gestionar propiedades"
NOT_OWNER_MESSAGE = "No tienes permiso para modificar esta propiedad"


def _raise_if_denied(check: PermissionCheckResult) -> None:
    if check.allowed:
        return
    if check.reason == USER_NOT_FOUND:
        raise NotFoundError(USER_NOT_FOUND)
    raise LimitExceededError(check.reason or "Límite del plan alcanzado", limit=check.limit)


def _require_seller(user_id: str) -> User:
    user = get_user(user_id)
    if not user:
        raise NotFoundError(USER_NOT_FOUND)
    if user.role not in SELLER_ROLES:
        logger.warning(
            "[properties] non-seller refused",
            extra={"user_id": user_id, "role": user.role.value},
        )
        raise PermissionError(NOT_SELLER_MESSAGE)
    return user


def _require_owner(user_id: str, property_id: str) -> tuple[User, Property]:
    """
    Resolve a listing the caller may modify.

    Returns the listing's owner (whose tier governs limits) and the listing.
    ADMIN may act on any listing; everyone else only on their own.
    """
    actor = _require_seller(user_id)
    prop = get_property(property_id)
    if not prop:
        raise NotFoundError(f"Property not found: {property_id}")
    if prop.agent_id == actor.id:
        return actor, prop
    if actor.role != UserRole.ADMIN:
        raise PermissionError(NOT_OWNER_MESSAGE)
    owner = get_user(prop.agent_id)
    if not owner:
        raise NotFoundError(USER_NOT_FOUND)
    return owner, prop


def create_property(
    user_id: str,
    title: str,
    price: Optional[Decimal] = None,
    city: Optional[str] = None,
) -> Property:
    """
    Create a listing for `user_id` if their tier allows one more.

    Raises:
        ValidationError: empty title
        NotFoundError: account doesn't exist
        PermissionError: account is not a seller
        LimitExceededError: property limit reached
    """
    if not title or not title.strip():
        raise ValidationError("El título es obligatorio")

    _require_seller(user_id)
    _raise_if_denied(can_create_property(user_id))

    property_id = str(uuid4())
    with get_db_session() as session:
        session.execute(
            insert(properties).values(
                id=property_id,
                agent_id=user_id,
                title=title.strip(),
                price=price,
                city=city,
                is_featured=False,
                created_at=datetime.now(timezone.utc),
            )
        )

    logger.info("[properties] created", extra={"user_id": user_id, "property_id": property_id})
    return get_property(property_id)


def delete_property(user_id: str, property_id: str) -> None:
    """Delete a listing with its images and videos, freeing its slots."""
    owner, _ = _require_owner(user_id, property_id)

    with get_db_session() as session:
        session.execute(delete(property_images).where(property_images.c.property_id == property_id))
        session.execute(delete(property_videos).where(property_videos.c.property_id == property_id))
        session.execute(delete(properties).where(properties.c.id == property_id))

    logger.info(
        "[properties] deleted",
        extra={"user_id": user_id, "owner_id": owner.id, "property_id": property_id},
    )


def set_featured(user_id: str, property_id: str, featured: bool) -> Property:
    """
    Feature or un-feature a listing.

    Un-featuring is always allowed; featuring an already featured listing
    is a no-op and does not consume a slot.
    """
    owner, prop = _require_owner(user_id, property_id)

    if featured and not prop.is_featured:
        _raise_if_denied(can_feature_property(owner.id))
    elif featured == prop.is_featured:
        return prop

    with get_db_session() as session:
        session.execute(
            update(properties)
            .where(properties.c.id == property_id)
            .values(is_featured=featured)
        )

    logger.info(
        "[properties] featured flag changed",
        extra={"user_id": user_id, "property_id": property_id, "featured": featured},
    )
    return get_property(property_id)


def add_images(user_id: str, property_id: str, urls: Sequence[str]) -> List[PropertyImage]:
    """Append images to a listing, keeping the total within the owner's image limit."""
    owner, prop = _require_owner(user_id, property_id)

    cleaned = [url.strip() for url in urls if url and url.strip()]
    if not cleaned:
        raise ValidationError("No se enviaron imágenes")

    current = list_images(property_id)
    _raise_if_denied(can_upload_image(owner.subscription_tier, len(current), requested=len(cleaned)))
    # Continue after the highest position; deletions can leave gaps
    next_order = max((img.order for img in current), default=-1) + 1

    with get_db_session() as session:
        session.execute(
            insert(property_images),
            [
                {"property_id": property_id, "url": url, "alt": prop.title, "order": next_order + index}
                for index, url in enumerate(cleaned)
            ],
        )

    logger.info(
        "[properties] images added",
        extra={"user_id": user_id, "property_id": property_id, "count": len(cleaned)},
    )
    return list_images(property_id)


def delete_image(user_id: str, image_id: int) -> List[PropertyImage]:
    """Remove one image; returns the listing's remaining images."""
    _require_seller(user_id)
    image = get_image(image_id)
    if not image:
        raise NotFoundError(f"Image not found: {image_id}")
    _require_owner(user_id, image.property_id)

    with get_db_session() as session:
        session.execute(delete(property_images).where(property_images.c.id == image_id))

    logger.info(
        "[properties] image deleted",
        extra={"user_id": user_id, "property_id": image.property_id, "image_id": image_id},
    )
    return list_images(image.property_id)


def replace_videos(user_id: str, property_id: str, videos: Sequence[VideoInput]) -> List[PropertyVideo]:
    """
    Replace the listing's linked videos with `videos`.

    An empty list clears them and needs no video allowance.
    """
    owner, _ = _require_owner(user_id, property_id)

    if videos:
        # The whole set is replaced, so nothing already attached counts
        _raise_if_denied(can_add_video(owner.subscription_tier, 0, requested=len(videos)))

    with get_db_session() as session:
        session.execute(delete(property_videos).where(property_videos.c.property_id == property_id))
        if videos:
            session.execute(
                insert(property_videos),
                [
                    {
                        "property_id": property_id,
                        "url": video.url,
                        "platform": video.platform.value,
                        "title": video.title,
                        "order": index,
                    }
                    for index, video in enumerate(videos)
                ],
            )

    logger.info(
        "[properties] videos replaced",
        extra={"user_id": user_id, "property_id": property_id, "count": len(videos)},
    )
    return list_videos(property_id)
