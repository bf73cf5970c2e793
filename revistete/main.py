import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from revistete.core.config import settings
from revistete.core.database import init_db
from revistete.core.observability import setup_logging
from revistete.api.error_handlers import register_error_handlers
from revistete.routers import auth, users, posts, messages, notifications, geocoding
from revistete.utils.file_storage import MEDIA_ROOT, ensure_media_dirs

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
    init_db()
    logger.info(f"{settings.APP_NAME} started")
    yield
    logger.info(f"{settings.APP_NAME} shutting down")


app = FastAPI(
    title=settings.APP_NAME,
    description="Peer-to-peer clothing exchange marketplace",
    version="1.0.0",
    lifespan=lifespan,
)

# Uploaded garment photos are served from here
ensure_media_dirs()
app.mount("/media", StaticFiles(directory=MEDIA_ROOT), name="media")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Include routers
app.include_router(auth.router, prefix="/api/v1")
app.include_router(users.router, prefix="/api/v1")
app.include_router(posts.router, prefix="/api/v1")
app.include_router(messages.router, prefix="/api/v1")
app.include_router(notifications.router, prefix="/api/v1")
app.include_router(geocoding.router, prefix="/api/v1")

@app.get("/")
def root():
    return {
        "success": True,
        "message": "ReVistete API",
        "version": "1.0.0",
        "documentation": "/docs"
    }

@app.get("/health")
def health_check():
    return {
        "success": True,
        "status": "healthy",
        "service": settings.APP_NAME,
        "timestamp": datetime.now(timezone.utc)
    }
