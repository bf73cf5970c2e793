from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from revistete.core.config import settings


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    timeout = settings.DATABASE_TIMEOUT_SECONDS
    return {
        "pool_pre_ping": True,
        "pool_timeout": timeout,
        "connect_args": {
            "connect_timeout": timeout,
            "options": f"-c statement_timeout={timeout * 1000}",
        },
    }


engine = create_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Create tables for every model imported into the metadata."""
    from revistete.models import user, post, message, notification  # noqa: F401

    Base.metadata.create_all(bind=engine)
