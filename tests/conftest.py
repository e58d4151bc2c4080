"""
tests/conftest.py -- Shared test fixtures for catalog integration tests.

This module provides:
  - memory_url: a fresh named shared-memory SQLite URL
  - engine: isolated in-memory SQLite engine with the schema created
  - client_for: context manager factory -- TestClient whose stores use a
    given engine, bypassing the real startup (which would connect to
    PostgreSQL)
  - client: client_for(engine) for the common case

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because TestClient runs sync route handlers in a thread pool. Plain :memory:
DBs are per-connection and would present a blank schema to each worker
thread. The named URI format (file:name?mode=memory&cache=shared&uri=true)
shares one in-memory instance across all connections in the same process.
Each test gets its own name so "first user is admin" starts from scratch.

BCRYPT_ROUNDS and STATIC_DIR must be set before any app import so the
lru_cached Settings picks them up.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import Callable, Generator, Iterator
from contextlib import asynccontextmanager, contextmanager
from pathlib import Path

# CRITICAL: set before any core/auth import. Cost 4 keeps bcrypt fast in tests.
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("STATIC_DIR", str(Path(__file__).resolve().parent.parent / "public"))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine

from asgi import app
from auth.store import UserStore
from catalog.store import ProductStore, SettingsStore
from core.database import create_db_engine, init_schema

# ---------------------------------------------------------------------------
# Lifespan patch
# ---------------------------------------------------------------------------


def _patch_lifespan(engine: Engine):
    """Return an async context manager that replaces the real lifespan.

    Wires stores over the test engine into app.state so TestClient routes see
    an isolated database rather than the configured PostgreSQL server. The
    engine is owned by the fixture, so nothing is disposed on exit.
    """

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.engine = engine
        app.state.user_store = UserStore(engine)
        app.state.product_store = ProductStore(engine)
        app.state.settings_store = SettingsStore(engine)
        yield

    return test_lifespan


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def memory_url() -> str:
    return f"sqlite:///file:test_catalog_{uuid.uuid4().hex}?mode=memory&cache=shared&uri=true"


@pytest.fixture
def engine(memory_url: str) -> Generator[Engine, None, None]:
    """Engine over a fresh in-memory database with all three tables created."""
    eng = create_db_engine(memory_url)
    init_schema(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def client_for() -> Callable[[Engine], Iterator[TestClient]]:
    """Return a context manager that yields a TestClient bound to an engine.

    raise_server_exceptions=False so the catch-all 500 handler's response is
    observable instead of the exception being re-raised into the test.
    """

    @contextmanager
    def _client_for(engine: Engine) -> Iterator[TestClient]:
        original = app.router.lifespan_context
        app.router.lifespan_context = _patch_lifespan(engine)
        try:
            with TestClient(app, raise_server_exceptions=False) as test_client:
                yield test_client
        finally:
            app.router.lifespan_context = original

    return _client_for


@pytest.fixture
def client(engine: Engine, client_for) -> Generator[TestClient, None, None]:
    with client_for(engine) as test_client:
        yield test_client
