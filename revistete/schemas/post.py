from pydantic import BaseModel
from typing import Optional, List
from uuid import UUID
from datetime import datetime
from revistete.models.post import GarmentCategory, GarmentSize, GarmentGender, GarmentState
from revistete.schemas.common import Envelope, GeoPoint
from revistete.schemas.user import UserContact, UserResponse


class PostResponse(BaseModel):
    id: UUID
    title: str
    description: str
    category: GarmentCategory
    size: GarmentSize
    gender: GarmentGender
    state: GarmentState
    photos: List[str]
    location: Optional[GeoPoint] = None
    owner_id: UUID
    owner: Optional[UserContact] = None
    is_available: bool
    is_featured: bool
    views: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class PostEnvelope(Envelope):
    post: PostResponse


class PostListResponse(Envelope):
    count: int
    total: int
    page: int
    pages: int
    posts: List[PostResponse]


class UserPostsResponse(Envelope):
    count: int
    posts: List[PostResponse]


class ProfileResponse(Envelope):
    user: UserResponse
    posts_count: int
    posts: List[PostResponse]
