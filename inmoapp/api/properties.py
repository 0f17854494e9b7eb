"""
Property API routes.

- POST /api/properties: Create listing (tier property limit)
- POST /api/properties/{id}/featured: Feature / un-feature (tier featured limit)
- POST /api/properties/{id}/images: Append images (tier image limit)
- PUT  /api/properties/{id}/videos: Replace linked videos (tier video limit)
- DELETE /api/properties/{id}: Delete listing (frees its slots)
- DELETE /api/properties/images/{image_id}: Delete one image

Only AGENT and ADMIN accounts may call these; ADMIN may act on any listing.

Limit denials surface as 403 limit_exceeded with the limit in the payload.
"""
from decimal import Decimal
from typing import List, Optional
from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, Field

from inmoapp.core.auth import get_current_user_id
from inmoapp.features.properties.service import (
    add_images,
    create_property,
    delete_image,
    delete_property,
    replace_videos,
    set_featured,
)
from inmoapp.models.property import Property, PropertyImage, PropertyVideo, VideoInput


router = APIRouter(prefix="/properties", tags=["properties"])


class CreatePropertyRequest(BaseModel):
    title: str = Field(min_length=1)
    price: Optional[Decimal] = None
    city: Optional[str] = None


class FeaturedRequest(BaseModel):
    featured: bool


class ImagesRequest(BaseModel):
    urls: List[str]


class VideosRequest(BaseModel):
    videos: List[VideoInput]


@router.post("", response_model=Property, status_code=201)
def post_property(request: CreatePropertyRequest, user_id: str = Depends(get_current_user_id)):
    return create_property(user_id, request.title, price=request.price, city=request.city)


@router.post("/{property_id}/featured", response_model=Property)
def post_featured(property_id: str, request: FeaturedRequest, user_id: str = Depends(get_current_user_id)):
    return set_featured(user_id, property_id, request.featured)


@router.post("/{property_id}/images", response_model=List[PropertyImage], status_code=201)
def post_images(property_id: str, request: ImagesRequest, user_id: str = Depends(get_current_user_id)):
    return add_images(user_id, property_id, request.urls)


@router.put("/{property_id}/videos", response_model=List[PropertyVideo])
def put_videos(property_id: str, request: VideosRequest, user_id: str = Depends(get_current_user_id)):
    return replace_videos(user_id, property_id, request.videos)


@router.delete("/{property_id}", status_code=204)
def remove_property(property_id: str, user_id: str = Depends(get_current_user_id)):
    delete_property(user_id, property_id)
    return Response(status_code=204)


@router.delete("/images/{image_id}", response_model=List[PropertyImage])
def remove_image(image_id: int, user_id: str = Depends(get_current_user_id)):
    return delete_image(user_id, image_id)
