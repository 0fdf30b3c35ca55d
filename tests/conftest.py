"""
tests/conftest.py -- Shared test fixtures for the E-Library API tests.

This module provides:
  - make_engine(): isolated named shared-memory SQLite engine
  - _patch_lifespan(): wires test stores into app.state, bypassing real startup
  - api: TestClient plus admin and regular-user tokens (ApiContext)
  - user_store / catalog_store: per-test stores for unit tests
  - seed_catalog(): inserts a small known catalog and returns its ids

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because TestClient runs sync route handlers in a thread pool. Plain :memory:
DBs are per-connection and would present a blank schema to each worker
thread. The named URI format (file:name?mode=memory&cache=shared&uri=true)
shares one in-memory instance across all connections in the same process.

DEBUG and LOGIN_RATE_LIMIT must be set before any auth/api import: the
settings singleton is read at module load, DEBUG lets it auto-generate a
signing secret and the raised limit keeps repeated signins from hitting 429.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import Generator
from contextlib import asynccontextmanager
from dataclasses import dataclass

# CRITICAL: Set these before any auth/core import.
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("LOGIN_RATE_LIMIT", "1000/minute")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine

from api.main import app
from auth.models import User
from auth.store import UserStore
from auth.tokens import create_access_token, hash_password
from catalog.models import Author, Book, Publisher
from catalog.store import CatalogStore
from core.database import create_db_engine

ADMIN_USERNAME = "testadmin"
ADMIN_PASSWORD = "testpass123"
USER_USERNAME = "testuser"
USER_PASSWORD = "userpass123"


# ---------------------------------------------------------------------------
# Store helpers
# ---------------------------------------------------------------------------


def make_engine(db_name: str) -> Engine:
    """Create an engine on a named shared-memory SQLite database."""
    return create_db_engine(f"sqlite:///file:test_{db_name}?mode=memory&cache=shared&uri=true")


@dataclass
class SeededCatalog:
    penguin_id: int
    orbit_id: int
    herbert_id: int
    austen_id: int
    dune_id: int
    messiah_id: int
    pride_id: int


def seed_catalog(store: CatalogStore) -> SeededCatalog:
    """Insert two publishers, two authors and three books.

    Penguin publishes Pride and Prejudice (Austen); Orbit publishes both
    Dune books (Herbert).
    """
    penguin = store.create_publisher(Publisher(name="Penguin Classics", city="London"))
    orbit = store.create_publisher(Publisher(name="Orbit Books", city="New York"))
    herbert = store.create_author(
        Author(first_name="Frank", last_name="Herbert", country="USA", city="Tacoma", address="1 Arrakis Way")
    )
    austen = store.create_author(
        Author(first_name="Jane", last_name="Austen", country="UK", city="Steventon", address="2 Rectory Lane")
    )
    dune = store.create_book(Book(title="Dune", type="novel", price=9.99, publisher_id=orbit, author_id=herbert))
    messiah = store.create_book(
        Book(title="Dune Messiah", type="novel", price=8.5, publisher_id=orbit, author_id=herbert)
    )
    pride = store.create_book(
        Book(title="Pride and Prejudice", type="classic", price=5.0, publisher_id=penguin, author_id=austen)
    )
    return SeededCatalog(penguin, orbit, herbert, austen, dune, messiah, pride)


def _patch_lifespan(user_store: UserStore, catalog: CatalogStore):
    """Return an async context manager that replaces the real lifespan.

    Wires pre-created test stores into app.state so TestClient routes see
    isolated test DBs rather than the configured database.
    """

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.user_store = user_store
        app.state.catalog = catalog
        yield

    return test_lifespan


# ---------------------------------------------------------------------------
# Unit-test fixtures -- fresh database per test
# ---------------------------------------------------------------------------


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    eng = make_engine(f"unit_{uuid.uuid4().hex}")
    yield eng
    eng.dispose()


@pytest.fixture
def user_store(engine: Engine) -> UserStore:
    return UserStore(engine)


@pytest.fixture
def catalog_store(engine: Engine) -> CatalogStore:
    return CatalogStore(engine)


# ---------------------------------------------------------------------------
# Integration fixture -- one TestClient per test module for speed
# ---------------------------------------------------------------------------


@dataclass
class ApiContext:
    client: TestClient
    admin_token: str
    user_token: str
    seeded: SeededCatalog
    catalog: CatalogStore
    user_store: UserStore

    def auth(self, token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}

    @property
    def admin_headers(self) -> dict[str, str]:
        return self.auth(self.admin_token)

    @property
    def user_headers(self) -> dict[str, str]:
        return self.auth(self.user_token)


@pytest.fixture(scope="module")
def api() -> Generator[ApiContext, None, None]:
    """Yield an ApiContext for integration tests.

    The TestClient uses the real FastAPI app with a patched lifespan so
    tests hit real route handlers, middleware and exception handlers but use
    an isolated in-memory database. One admin and one regular user exist
    before the client starts, and the catalog is seeded with seed_catalog().
    """
    engine = make_engine(f"api_{uuid.uuid4().hex}")
    user_store = UserStore(engine)
    catalog = CatalogStore(engine)

    admin_id = user_store.create_user(
        User(
            username=ADMIN_USERNAME,
            hashed_password=hash_password(ADMIN_PASSWORD),
            first_name="Ada",
            last_name="Admin",
            role="admin",
        )
    )
    user_id = user_store.create_user(
        User(
            username=USER_USERNAME,
            hashed_password=hash_password(USER_PASSWORD),
            first_name="Uma",
            last_name="User",
        )
    )
    seeded = seed_catalog(catalog)

    admin_token = create_access_token(user_id=admin_id, username=ADMIN_USERNAME, role="admin")
    user_token = create_access_token(user_id=user_id, username=USER_USERNAME, role="user")

    app.router.lifespan_context = _patch_lifespan(user_store, catalog)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield ApiContext(client, admin_token, user_token, seeded, catalog, user_store)

    engine.dispose()
