"""
Test configuration and fixtures.

Every test gets a fresh FastAPI app wired to an in-memory SQLite store
through the connection cache's engine_factory hook.
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Generator

import pytest
from faker import Faker
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from app import repo
from app.config import Settings
from app.main import create_app
from app.models import BLOG, CAMPAIGNS, EVENTS, GALLERY, NEWS, TESTIMONIALS
from app.tables import metadata

fake = Faker()

TEST_DATABASE_URL = "sqlite://"


def sqlite_factory(url: str, **_: Any) -> Engine:
    engine = create_engine(
        url,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    metadata.create_all(engine)
    return engine


def utc(days: int = 0) -> datetime:
    return datetime.now(timezone.utc) + timedelta(days=days)


@pytest.fixture
def settings() -> Settings:
    return Settings(database_url=TEST_DATABASE_URL)


@pytest.fixture
def app(settings: Settings):
    application = create_app(settings, engine_factory=sqlite_factory)
    yield application
    application.state.connections.dispose()


@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c


@pytest.fixture
def engine(app) -> Engine:
    return app.state.connections.acquire()


# -----------------------------
# Seed helpers
# -----------------------------
@pytest.fixture
def make_event(engine: Engine):
    def _make(slug: str, **overrides: Any) -> Dict[str, Any]:
        values = {
            "title": fake.sentence(nb_words=4),
            "slug": slug,
            "description": fake.sentence(),
            "featured_image": fake.image_url(),
            "date": utc(days=7),
            "time": "05:00",
            "location": fake.city(),
            "category": "Religious",
            "status": "published",
        }
        values.update(overrides)
        return repo.create(engine, EVENTS, values)

    return _make


@pytest.fixture
def make_news(engine: Engine):
    def _make(slug: str, **overrides: Any) -> Dict[str, Any]:
        values = {
            "title": fake.sentence(nb_words=5),
            "slug": slug,
            "excerpt": fake.sentence(),
            "content": fake.paragraph(),
            "author": {"name": fake.name()},
            "category": "Academic",
            "status": "published",
        }
        values.update(overrides)
        return repo.create(engine, NEWS, values)

    return _make


@pytest.fixture
def make_blog(engine: Engine):
    def _make(slug: str, **overrides: Any) -> Dict[str, Any]:
        values = {
            "title": fake.sentence(nb_words=5),
            "slug": slug,
            "excerpt": fake.sentence(),
            "content": fake.paragraph(nb_sentences=10),
            "featured_image": fake.image_url(),
            "author": {"name": fake.name()},
            "category": "Stories",
            "status": "published",
        }
        values.update(overrides)
        return repo.create(engine, BLOG, values)

    return _make


@pytest.fixture
def make_gallery(engine: Engine):
    def _make(slug: str, **overrides: Any) -> Dict[str, Any]:
        values = {
            "title": fake.sentence(nb_words=3),
            "slug": slug,
            "cover_image": fake.image_url(),
            "category": "Daily Life",
            "status": "published",
        }
        values.update(overrides)
        return repo.create(engine, GALLERY, values)

    return _make


@pytest.fixture
def make_campaign(engine: Engine):
    def _make(slug: str, **overrides: Any) -> Dict[str, Any]:
        values = {
            "title": fake.sentence(nb_words=4),
            "slug": slug,
            "description": fake.paragraph(),
            "goal": 1_000_000,
            "collected": 250_000,
            "start_date": utc(days=-10),
            "category": "Education",
            "status": "active",
        }
        values.update(overrides)
        return repo.create(engine, CAMPAIGNS, values)

    return _make


@pytest.fixture
def make_testimonial(engine: Engine):
    def _make(**overrides: Any) -> Dict[str, Any]:
        values = {
            "name": fake.name(),
            "content": fake.paragraph(),
            "rating": 5,
            "category": "Parent",
            "email": fake.email(),
            "phone": fake.phone_number(),
            "status": "approved",
        }
        values.update(overrides)
        return repo.create(engine, TESTIMONIALS, values)

    return _make
