"""
tests/conftest.py -- Shared test fixtures for Stockroom tests.

This module provides:
  - FrozenClock: a settable clock for TokenService expiry tests
  - settings / user_store / item_store / hasher / tokens: isolated unit fixtures
  - _patch_lifespan(): wires test stores into app.state, bypassing real startup
  - api_client: TestClient over the real FastAPI app with a temp-file database
  - make_user: registers and logs in a fresh identity, returning auth headers

Design: stores use a SQLite file under pytest's tmp_path rather than
:memory:. TestClient runs sync route handlers on a thread pool and the
concurrency tests use their own threads; a file database gives every
connection the same schema and real locking.

Environment variables must be set before any api/ import: api/main.py reads
Settings at import time for its middleware configuration.
"""

from __future__ import annotations

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-0123456789abcdef-0123456789")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import itertools
from collections.abc import Callable, Generator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from api.limiter import limiter
from api.main import app, configure_state
from auth.passwords import PasswordHasher
from auth.store import UserStore
from auth.tokens import TokenService
from core.config import Settings
from items.store import ItemStore

TEST_SECRET = "test-secret-key-0123456789abcdef-0123456789"
TEST_PASSWORD = "correct horse battery staple"

_counter = itertools.count(1)


def unique(prefix: str) -> str:
    """Return a per-session unique name so module-scoped databases never collide."""
    return f"{prefix}{next(_counter)}"


# ---------------------------------------------------------------------------
# Clock
# ---------------------------------------------------------------------------


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc))


# ---------------------------------------------------------------------------
# Unit fixtures
# ---------------------------------------------------------------------------


def _db_url(directory: Path) -> str:
    return f"sqlite:///{directory / 'stockroom_test.db'}"


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        _env_file=None,
        secret_key=TEST_SECRET,
        bcrypt_rounds=4,
        database_url=_db_url(tmp_path),
    )


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture
def tokens(settings: Settings, clock: FrozenClock) -> TokenService:
    return TokenService(settings, clock=clock)


@pytest.fixture
def user_store(settings: Settings) -> Generator[UserStore, None, None]:
    store = UserStore(settings.database_url)
    yield store
    store.close()


@pytest.fixture
def item_store(settings: Settings) -> Generator[ItemStore, None, None]:
    store = ItemStore(settings.database_url)
    yield store
    store.close()


# ---------------------------------------------------------------------------
# API fixtures
# ---------------------------------------------------------------------------


def _patch_lifespan(settings: Settings, user_store: UserStore, item_store: ItemStore):
    """Return an async context manager that replaces the real lifespan.

    Routes see the isolated temp-file stores instead of DATABASE_URL.
    """

    @asynccontextmanager
    async def test_lifespan(app):
        configure_state(app, settings, user_store, item_store)
        yield

    return test_lifespan


@pytest.fixture(scope="module")
def api_client(tmp_path_factory: pytest.TempPathFactory) -> Generator[TestClient, None, None]:
    """Yield a TestClient over the real app backed by a fresh database.

    Rate limiting is switched off: tests log in far more often than the
    per-IP login limit allows.
    """
    directory = tmp_path_factory.mktemp("api")
    settings = Settings(
        _env_file=None,
        secret_key=TEST_SECRET,
        bcrypt_rounds=4,
        database_url=_db_url(directory),
    )
    user_store = UserStore(settings.database_url)
    item_store = ItemStore(settings.database_url)

    original_lifespan = app.router.lifespan_context
    app.router.lifespan_context = _patch_lifespan(settings, user_store, item_store)
    limiter.enabled = False

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client

    limiter.enabled = True
    app.router.lifespan_context = original_lifespan
    item_store.close()
    user_store.close()


@dataclass
class ApiUser:
    username: str
    email: str
    password: str
    token: str

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


@pytest.fixture
def make_user(api_client: TestClient) -> Callable[[], ApiUser]:
    """Factory: register a brand-new identity over HTTP and log it in."""

    def _make() -> ApiUser:
        username = unique("user")
        email = f"{username}@example.com"
        resp = api_client.post(
            "/register",
            json={"username": username, "email": email, "password": TEST_PASSWORD},
        )
        assert resp.status_code == 201, resp.text
        resp = api_client.post("/login", json={"username": username, "password": TEST_PASSWORD})
        assert resp.status_code == 200, resp.text
        return ApiUser(username=username, email=email, password=TEST_PASSWORD, token=resp.json()["token"])

    return _make
