"""
utils/file_storage.py

Saves uploaded garment photos to local disk and maps them to public URLs
under the ``/media`` static mount. Routers only see URLs, so the storage
backend can change without touching them.
"""

import logging
import uuid
import aiofiles
from fastapi import UploadFile
from pathlib import Path
from revistete.core.config import settings
from revistete.core.errors import ValidationError

logger = logging.getLogger(__name__)

# ─── Config ───────────────────────────────────────────────────────────────────

MEDIA_ROOT = Path(settings.MEDIA_ROOT)
POST_IMAGES_DIR = MEDIA_ROOT / "posts"
POST_IMAGES_URL_PREFIX = f"{settings.BASE_URL}/media/posts/"

ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/png", "image/webp", "image/gif"}
ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp", ".gif"}
MAX_IMAGE_SIZE_MB = 5
MAX_IMAGE_SIZE_BYTES = MAX_IMAGE_SIZE_MB * 1024 * 1024
MAX_IMAGES_PER_POST = 10

_EXT_TO_CONTENT_TYPE = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".webp": "image/webp",
    ".gif": "image/gif",
}

_CONTENT_TYPE_TO_EXT = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
    "image/gif": ".gif",
}


def ensure_media_dirs():
    POST_IMAGES_DIR.mkdir(parents=True, exist_ok=True)


def real_uploads(files) -> list:
    """Drop the empty parts browsers send for an untouched file input."""
    return [f for f in (files or []) if f is not None and f.filename]


def _resolve_content_type(file: UploadFile) -> tuple[str, str]:
    """
    Return (content_type, extension) for the uploaded file.

    Some mobile clients send 'application/octet-stream', so the filename
    extension is used as a fallback.
    """
    content_type = (file.content_type or "").lower()

    if content_type in ALLOWED_IMAGE_TYPES:
        return content_type, _CONTENT_TYPE_TO_EXT[content_type]

    filename = file.filename or ""
    ext = Path(filename).suffix.lower()
    if ext in ALLOWED_EXTENSIONS:
        resolved_type = _EXT_TO_CONTENT_TYPE[ext]
        return resolved_type, ext if ext != ".jpeg" else ".jpg"

    raise ValidationError(
        f"Cannot determine image type for '{filename}'. "
        "Please upload a JPEG, PNG, WebP or GIF image."
    )


async def _read_valid_upload(file: UploadFile) -> tuple[str, bytes]:
    """Type and size checks for one upload; returns (extension, contents)."""
    _content_type, ext = _resolve_content_type(file)

    contents = await file.read()
    if len(contents) > MAX_IMAGE_SIZE_BYTES:
        raise ValidationError(f"Image '{file.filename}' exceeds {MAX_IMAGE_SIZE_MB}MB limit.")
    return ext, contents


async def _write_image(ext: str, contents: bytes) -> str:
    filename = f"{uuid.uuid4().hex}{ext}"
    async with aiofiles.open(POST_IMAGES_DIR / filename, "wb") as out:
        await out.write(contents)
    return f"{POST_IMAGES_URL_PREFIX}{filename}"


async def save_post_image(file: UploadFile) -> str:
    """Validate and store one upload; returns its public URL."""
    ensure_media_dirs()
    ext, contents = await _read_valid_upload(file)
    return await _write_image(ext, contents)


async def save_post_images(files: list[UploadFile]) -> list[str]:
    """Save multiple images and return their URLs in upload order.

    Every file is validated before any is written; if a write fails, the
    files already written in this call are removed.
    """
    if len(files) > MAX_IMAGES_PER_POST:
        raise ValidationError(f"You can upload at most {MAX_IMAGES_PER_POST} photos.")
    ensure_media_dirs()
    validated = [await _read_valid_upload(f) for f in files]

    urls = []
    try:
        for ext, contents in validated:
            urls.append(await _write_image(ext, contents))
    except OSError:
        delete_post_images(urls)
        raise
    return urls


def is_local_image(image_url: str) -> bool:
    return image_url.startswith(POST_IMAGES_URL_PREFIX)


def delete_post_image(image_url: str):
    """Remove a locally stored image. External URLs and missing files are ignored."""
    if not is_local_image(image_url):
        return
    file_path = POST_IMAGES_DIR / Path(image_url[len(POST_IMAGES_URL_PREFIX):]).name
    try:
        file_path.unlink(missing_ok=True)
    except OSError:
        logger.warning(f"Could not delete image file {file_path}", exc_info=True)


def delete_post_images(image_urls: list[str]):
    for url in image_urls:
        delete_post_image(url)
