"""Shared fixtures: fresh in-memory SQLite per test, FastAPI TestClient with get_db overridden.

The background-task session factory (``database.SessionLocal``) is patched
to the same engine so message notifications land in the test database.
"""

import os
import tempfile

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOG_FORMAT", "text")
os.environ["MEDIA_ROOT"] = tempfile.mkdtemp(prefix="revistete-media-")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import revistete.core.database as db_module
from revistete.core.database import Base, get_db
from revistete.models import user, post, message, notification  # noqa: F401
from revistete.main import app

API = "/api/v1"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory, monkeypatch):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    monkeypatch.setattr(db_module, "SessionLocal", session_factory)

    yield TestClient(app)

    app.dependency_overrides.clear()


def register(client, name, email, password="secret123"):
    response = client.post(f"{API}/auth/register", json={
        "name": name,
        "email": email,
        "password": password,
        "phone": "+34 600 000 000",
        "address": "Calle Mayor 1, Madrid",
    })
    assert response.status_code == 201, response.text
    body = response.json()
    return {
        "id": body["user"]["id"],
        "token": body["token"],
        "headers": {"Authorization": f"Bearer {body['token']}"},
    }


def create_post(client, owner, **overrides):
    data = {
        "title": "Chaqueta vaquera",
        "description": "Apenas usada, talla M",
        "category": "abrigos",
        "size": "M",
        "gender": "unisex",
        "state": "used",
        "photo_urls": ["https://cdn.example.org/a.jpg"],
    }
    data.update(overrides)
    response = client.post(f"{API}/posts", data=data, headers=owner["headers"])
    assert response.status_code == 201, response.text
    return response.json()["post"]


@pytest.fixture
def ana(client):
    return register(client, "Ana", "ana@revistete.es")


@pytest.fixture
def bruno(client):
    return register(client, "Bruno", "bruno@revistete.es")


@pytest.fixture
def carla(client):
    return register(client, "Carla", "carla@revistete.es")
