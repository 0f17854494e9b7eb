"""
inmoapp/features/properties/repository.py

Property reads and counts. Counts are always scoped by owner or property.
"""

from typing import List, Optional
from sqlalchemy import select, func

from inmoapp.core.database import get_db_session, properties, property_images, property_videos
from inmoapp.models.property import Property, PropertyImage, PropertyVideo, VideoPlatform


def _row_to_property(row) -> Property:
    return Property(
        id=row.id,
        agent_id=row.agent_id,
        title=row.title,
        price=row.price,
        city=row.city,
        is_featured=bool(row.is_featured),
        created_at=row.created_at,
    )


def _row_to_image(row) -> PropertyImage:
    return PropertyImage(
        id=row.id,
        property_id=row.property_id,
        url=row.url,
        alt=row.alt,
        order=row.order,
    )


def _row_to_video(row) -> PropertyVideo:
    return PropertyVideo(
        id=row.id,
        property_id=row.property_id,
        url=row.url,
        platform=VideoPlatform(row.platform),
        title=row.title,
        order=row.order,
    )


def count_properties(agent_id: str, *, featured: Optional[bool] = None) -> int:
    """
    Count properties owned by an agent.

    Args:
        agent_id: Owner
        featured: None counts all; True/False filters on is_featured
    """
    with get_db_session() as session:
        query = select(func.count()).select_from(properties).where(properties.c.agent_id == agent_id)
        if featured is not None:
            query = query.where(properties.c.is_featured == featured)
        return int(session.execute(query).scalar_one())


def count_images(property_id: str) -> int:
    with get_db_session() as session:
        return int(session.execute(
            select(func.count()).select_from(property_images)
            .where(property_images.c.property_id == property_id)
        ).scalar_one())


def count_videos(property_id: str) -> int:
    with get_db_session() as session:
        return int(session.execute(
            select(func.count()).select_from(property_videos)
            .where(property_videos.c.property_id == property_id)
        ).scalar_one())


def count_images_for_agent(agent_id: str) -> int:
    with get_db_session() as session:
        return int(session.execute(
            select(func.count()).select_from(
                property_images.join(properties, property_images.c.property_id == properties.c.id)
            ).where(properties.c.agent_id == agent_id)
        ).scalar_one())


def count_videos_for_agent(agent_id: str) -> int:
    with get_db_session() as session:
        return int(session.execute(
            select(func.count()).select_from(
                property_videos.join(properties, property_videos.c.property_id == properties.c.id)
            ).where(properties.c.agent_id == agent_id)
        ).scalar_one())


def get_property(property_id: str) -> Optional[Property]:
    with get_db_session() as session:
        row = session.execute(select(properties).where(properties.c.id == property_id)).first()
        if not row:
            return None
        return _row_to_property(row)


def list_properties(agent_id: str) -> List[Property]:
    with get_db_session() as session:
        rows = session.execute(
            select(properties)
            .where(properties.c.agent_id == agent_id)
            .order_by(properties.c.created_at, properties.c.id)
        ).all()
        return [_row_to_property(row) for row in rows]


def list_images(property_id: str) -> List[PropertyImage]:
    with get_db_session() as session:
        rows = session.execute(
            select(property_images)
            .where(property_images.c.property_id == property_id)
            .order_by(property_images.c.order, property_images.c.id)
        ).all()
        return [_row_to_image(row) for row in rows]


def list_videos(property_id: str) -> List[PropertyVideo]:
    with get_db_session() as session:
        rows = session.execute(
            select(property_videos)
            .where(property_videos.c.property_id == property_id)
            .order_by(property_videos.c.order, property_videos.c.id)
        ).all()
        return [_row_to_video(row) for row in rows]


def get_image(image_id: int) -> Optional[PropertyImage]:
    with get_db_session() as session:
        row = session.execute(select(property_images).where(property_images.c.id == image_id)).first()
        if not row:
            return None
        return _row_to_image(row)
