"""
inmoapp/models/property.py

Property listing models (listing, images, linked videos).
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class VideoPlatform(str, Enum):
    YOUTUBE = "YOUTUBE"
    TIKTOK = "TIKTOK"
    INSTAGRAM = "INSTAGRAM"
    FACEBOOK = "FACEBOOK"
    VIMEO = "VIMEO"


class Property(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    agent_id: str
    title: str
    price: Optional[Decimal] = None
    city: Optional[str] = None
    is_featured: bool = False
    created_at: Optional[datetime] = None


class PropertyImage(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    property_id: str
    url: str
    alt: Optional[str] = None
    order: int = 0


class VideoInput(BaseModel):
    """A linked external video as submitted by the dashboard form."""
    url: str = Field(min_length=1)
    platform: VideoPlatform
    title: Optional[str] = None


class PropertyVideo(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    property_id: str
    url: str
    platform: VideoPlatform
    title: Optional[str] = None
    order: int = 0
