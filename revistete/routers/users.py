from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from revistete.core.database import get_db
from revistete.core.errors import NotFoundError
from revistete.models.post import Post
from revistete.models.user import User
from revistete.schemas.post import PostResponse, ProfileResponse
from revistete.schemas.user import UserUpdate, UserResponse, UserEnvelope
from revistete.api.deps import get_current_active_user
from uuid import UUID

router = APIRouter(prefix="/users", tags=["Users"])

PROFILE_POSTS_LIMIT = 20


@router.put("/update", response_model=UserEnvelope)
async def update_profile(
    payload: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    if payload.name:
        current_user.name = payload.name.strip()
    if payload.phone:
        current_user.phone = payload.phone
    if payload.address:
        current_user.address = payload.address
    if payload.location:
        loc = payload.location
        current_user.location = {
            "type": "Point",
            "coordinates": [loc.longitude, loc.latitude],
            "city": loc.city,
            "country": loc.country,
        }

    db.commit()
    db.refresh(current_user)
    return UserEnvelope(user=UserResponse.model_validate(current_user))


@router.get("/{user_id}", response_model=ProfileResponse)
async def get_user_profile(user_id: UUID, db: Session = Depends(get_db)):
    """Public profile with the user's latest available posts."""
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")

    posts = (
        db.query(Post)
        .filter(Post.owner_id == user.id, Post.is_available.is_(True))
        .order_by(Post.created_at.desc())
        .limit(PROFILE_POSTS_LIMIT)
        .all()
    )
    return ProfileResponse(
        user=UserResponse.model_validate(user),
        posts_count=len(posts),
        posts=[PostResponse.model_validate(p) for p in posts],
    )
