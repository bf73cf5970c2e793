import json
import logging
import math
from fastapi import APIRouter, Depends, status, Query, Form, UploadFile, File
from sqlalchemy import or_
from sqlalchemy.orm import Session
from revistete.core.database import get_db
from revistete.core.errors import AuthorizationError, NotFoundError, ValidationError
from revistete.models.post import Post, GarmentCategory, GarmentSize, GarmentGender, GarmentState
from revistete.models.user import User
from revistete.schemas.common import MessageEnvelope, build_geo_point
from revistete.schemas.post import PostResponse, PostEnvelope, PostListResponse, UserPostsResponse
from revistete.api.deps import get_current_active_user
from revistete.utils.file_storage import (
    MAX_IMAGES_PER_POST, real_uploads, save_post_images, delete_post_image, delete_post_images,
    is_local_image,
)
from typing import List, Optional
from uuid import UUID

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/posts", tags=["Posts"])


# ─── Helpers ──────────────────────────────────────────────────────────────────

def _required_text(value: str, field: str) -> str:
    value = value.strip()
    if not value:
        raise ValidationError(errors=[{"field": field, "message": f"{field} is required"}])
    return value


def _clean_urls(urls: Optional[List[str]]) -> List[str]:
    return [u.strip() for u in (urls or []) if u and u.strip()]


def _parse_photo_list(raw: str) -> List[str]:
    """Parse the 'existing_photos' field: a JSON array of URLs or one bare URL."""
    try:
        parsed = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        parsed = raw
    if isinstance(parsed, str):
        parsed = [parsed]
    if not isinstance(parsed, list) or not all(isinstance(u, str) for u in parsed):
        raise ValidationError("'existing_photos' must be a JSON array of URLs.")
    return _clean_urls(parsed)


def _parse_location(raw: Optional[str]):
    """Decode the JSON-encoded 'location' form field. Malformed input counts as absent."""
    if not raw or not raw.strip():
        return None
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        logger.info("Ignoring malformed location payload")
        return None


def _check_local_urls(urls: List[str], allowed: List[str]):
    """Locally stored photos can only be referenced by the post that uploaded them."""
    foreign = [u for u in urls if is_local_image(u) and u not in allowed]
    if foreign:
        raise ValidationError("Photos stored on this server must be uploaded, not linked")


def _commit_or_discard(db: Session, new_urls: List[str]):
    """Commit; on failure roll back and remove the files written for this request."""
    try:
        db.commit()
    except Exception:
        db.rollback()
        delete_post_images(new_urls)
        raise


def _check_photo_count(count: int):
    if count == 0:
        raise ValidationError("You must provide at least one photo")
    if count > MAX_IMAGES_PER_POST:
        raise ValidationError(f"A post can have at most {MAX_IMAGES_PER_POST} photos")


def _get_post(db: Session, post_id: UUID) -> Post:
    post = db.query(Post).filter(Post.id == post_id).first()
    if not post:
        raise NotFoundError("Post not found")
    return post


def _get_owned_post(db: Session, post_id: UUID, user: User, action: str) -> Post:
    post = _get_post(db, post_id)
    if post.owner_id != user.id:
        raise AuthorizationError(f"You do not have permission to {action} this post")
    return post


# ─── CREATE: multipart form + photo uploads ───────────────────────────────────

@router.post("", response_model=PostEnvelope, status_code=status.HTTP_201_CREATED)
async def create_post(
    title: str = Form(..., max_length=100),
    description: str = Form(..., max_length=1000),
    category: GarmentCategory = Form(...),
    size: GarmentSize = Form(...),
    gender: GarmentGender = Form(...),
    state: GarmentState = Form(GarmentState.USED),

    # JSON-encoded {"coordinates": [lng, lat], "city", "country", "address"}
    location: Optional[str] = Form(None),
    # External URLs, used only when no files are uploaded
    photo_urls: Optional[List[str]] = Form(None),
    photos: Optional[List[UploadFile]] = File(None),

    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    """Create a garment listing. Uploaded files take precedence over photo_urls."""
    title = _required_text(title, "title")
    description = _required_text(description, "description")

    uploads = real_uploads(photos)
    external = [] if uploads else _clean_urls(photo_urls)
    _check_local_urls(external, allowed=[])
    _check_photo_count(len(uploads) or len(external))

    location_data = build_geo_point(_parse_location(location))

    photo_list = await save_post_images(uploads) if uploads else external

    post = Post(
        title=title,
        description=description,
        category=category,
        size=size,
        gender=gender,
        state=state,
        photos=photo_list,
        location=location_data,
        owner_id=current_user.id,
    )
    db.add(post)
    _commit_or_discard(db, photo_list if uploads else [])
    db.refresh(post)
    logger.info("Post created", extra={"post_id": post.id, "user_id": current_user.id})

    return PostEnvelope(post=PostResponse.model_validate(post))


# ─── LIST (public) ────────────────────────────────────────────────────────────

@router.get("", response_model=PostListResponse)
async def list_posts(
    db: Session = Depends(get_db),
    category: Optional[GarmentCategory] = Query(None),
    size: Optional[GarmentSize] = Query(None),
    gender: Optional[GarmentGender] = Query(None),
    state: Optional[GarmentState] = Query(None),
    featured: Optional[bool] = Query(None),
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
):
    """Available listings, newest first, with equality filters and text search."""
    query = db.query(Post).filter(Post.is_available.is_(True))

    if category:
        query = query.filter(Post.category == category)
    if size:
        query = query.filter(Post.size == size)
    if gender:
        query = query.filter(Post.gender == gender)
    if state:
        query = query.filter(Post.state == state)
    if featured:
        query = query.filter(Post.is_featured.is_(True))
    if search and search.strip():
        search_term = f"%{search.strip()}%"
        query = query.filter(or_(Post.title.ilike(search_term), Post.description.ilike(search_term)))

    total = query.count()
    posts = (
        query.order_by(Post.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    return PostListResponse(
        count=len(posts),
        total=total,
        page=page,
        pages=math.ceil(total / limit),
        posts=[PostResponse.model_validate(p) for p in posts],
    )


# ─── LIST by owner (public) ───────────────────────────────────────────────────

@router.get("/user/{user_id}", response_model=UserPostsResponse)
async def list_user_posts(user_id: UUID, db: Session = Depends(get_db)):
    posts = (
        db.query(Post)
        .filter(Post.owner_id == user_id, Post.is_available.is_(True))
        .order_by(Post.created_at.desc())
        .all()
    )
    return UserPostsResponse(count=len(posts), posts=[PostResponse.model_validate(p) for p in posts])


# ─── GET single post (public) ─────────────────────────────────────────────────

@router.get("/{post_id}", response_model=PostEnvelope)
async def get_post(post_id: UUID, db: Session = Depends(get_db)):
    """Get a single post. Every read bumps the view counter."""
    post = _get_post(db, post_id)

    # read-modify-write: concurrent reads can lose increments
    post.views = (post.views or 0) + 1
    db.commit()
    db.refresh(post)
    return PostEnvelope(post=PostResponse.model_validate(post))


# ─── UPDATE: multipart, owner only ────────────────────────────────────────────

@router.put("/{post_id}", response_model=PostEnvelope)
async def update_post(
    post_id: UUID,

    title: Optional[str] = Form(None, max_length=100),
    description: Optional[str] = Form(None, max_length=1000),
    category: Optional[GarmentCategory] = Form(None),
    size: Optional[GarmentSize] = Form(None),
    gender: Optional[GarmentGender] = Form(None),
    state: Optional[GarmentState] = Form(None),
    is_available: Optional[bool] = Form(None),

    # JSON array of the URLs to keep; omit to keep the current photos
    existing_photos: Optional[str] = Form(None),
    photo_urls: Optional[List[str]] = Form(None),
    # JSON point, or the literal "null" to clear the location
    location: Optional[str] = Form(None),
    photos: Optional[List[UploadFile]] = File(None),

    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    """Update a post. New uploads are appended to the kept photos."""
    post = _get_owned_post(db, post_id, current_user, "edit")

    if title is not None:
        post.title = _required_text(title, "title")
    if description is not None:
        post.description = _required_text(description, "description")
    if category is not None:
        post.category = category
    if size is not None:
        post.size = size
    if gender is not None:
        post.gender = gender
    if state is not None:
        post.state = state
    if is_available is not None:
        post.is_available = is_available

    # ── Photos ────────────────────────────────────────────────────────────────
    old_photos = list(post.photos or [])
    uploads = real_uploads(photos)
    if existing_photos is not None:
        kept = _parse_photo_list(existing_photos)
    elif photo_urls and not uploads:
        kept = _clean_urls(photo_urls)
    else:
        kept = old_photos
    _check_local_urls(kept, allowed=old_photos)
    _check_photo_count(len(kept) + len(uploads))

    # ── Location ──────────────────────────────────────────────────────────────
    if location is not None and location.strip() == "null":
        post.location = None
    else:
        new_location = build_geo_point(_parse_location(location), fallback=post.location)
        if new_location:
            post.location = new_location

    new_urls = await save_post_images(uploads) if uploads else []
    post.photos = kept + new_urls

    _commit_or_discard(db, new_urls)
    db.refresh(post)

    for url in old_photos:
        if url not in post.photos:
            delete_post_image(url)

    return PostEnvelope(post=PostResponse.model_validate(post))


# ─── DELETE: owner only ───────────────────────────────────────────────────────

@router.delete("/{post_id}", response_model=MessageEnvelope)
async def delete_post(
    post_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    post = _get_owned_post(db, post_id, current_user, "delete")
    photos = list(post.photos or [])

    db.delete(post)
    db.commit()

    delete_post_images(photos)
    logger.info("Post deleted", extra={"post_id": post_id, "user_id": current_user.id})

    return MessageEnvelope(message="Post deleted successfully")
