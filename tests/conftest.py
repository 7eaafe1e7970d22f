# tests/conftest.py
import os
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

# Tests never touch the configured database; every test gets its own SQLite file.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("CACHE_BACKEND", "memory")

from blog.database import Base, build_engine  # import after env is set
from blog.main import create_app
from blog.services.cache_backends import InProcessLRUCache
from blog.services.store import SqlDataStore

ADMIN_TEST_PASSWORD = "let-me-in"
PUBLISHED = datetime(2026, 1, 15, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def engine(tmp_path):
    """A fresh SQLite database file with the blog tables created."""
    eng = build_engine(f"sqlite:///{tmp_path / 'blog.db'}")
    Base.metadata.create_all(eng)
    try:
        yield eng
    finally:
        eng.dispose()


@pytest.fixture
def store(engine):
    return SqlDataStore(engine)


@pytest.fixture
def make_post(store):
    """Insert a post; published unless published_at=None is passed."""
    def _make(slug, **fields):
        row = {
            "slug": slug,
            "title": fields.pop("title", f"Title of {slug}"),
            "content": fields.pop("content", f"Body of {slug}"),
            "published_at": fields.pop("published_at", PUBLISHED),
        }
        row.update(fields)
        return store.insert("posts", row)
    return _make


@pytest.fixture
def app(store):
    return create_app(store=store, cache=InProcessLRUCache(capacity=64), admin_password=ADMIN_TEST_PASSWORD)


@pytest.fixture(scope="function")
def client(app):
    """A FastAPI TestClient for calling the site."""
    with TestClient(app) as c:
        yield c


@pytest.fixture
def admin_client(client):
    """TestClient holding a valid admin cookie."""
    res = client.post("/admin/login", json={"password": ADMIN_TEST_PASSWORD})
    assert res.status_code == 200
    return client
