"""
core/database.py -- Shared engine and schema for the catalog database.

Uses SQLAlchemy Core (not ORM) so the dataclasses in auth/models.py and
catalog/models.py remain the authoritative domain representation. Swapping
PostgreSQL for SQLite (tests) is a connection string change, not a rewrite.

One engine per process. The engine owns the connection pool; it is created
in the FastAPI lifespan, parked on app.state.engine and handed to every store
by reference. Stores check connections out per call with engine.connect() or
engine.begin(), so release is automatic.

Schema notes:
  Tables are created with checkfirst=True, one at a time, in the order
  users -> products -> settings. MetaData.create_all() would sort them by
  name, and there are no foreign keys to impose an order of their own.

  Timestamps use server-side CURRENT_TIMESTAMP defaults so the database
  clock is the single source of truth for created_at / updated_at.

Layer rule: core/ is the kernel. No imports from api/, web/, auth/, or catalog/.
"""

from __future__ import annotations

import logging

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    create_engine,
    false,
    func,
)
from sqlalchemy.engine import Engine

logger = logging.getLogger("catalog.db")

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

users = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("username", String(255), nullable=False, unique=True),
    Column("password", String(255), nullable=False),  # bcrypt hash, never plaintext
    Column("is_admin", Boolean, server_default=false()),
    Column("created_at", DateTime, server_default=func.current_timestamp()),
)

products = Table(
    "products",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(255), nullable=False),
    Column("price", Numeric(10, 2), nullable=False),
    Column("description", Text),
    Column("created_at", DateTime, server_default=func.current_timestamp()),
)

settings = Table(
    "settings",
    metadata,
    Column("key", String(255), primary_key=True),
    Column("value", Text),
    Column("updated_at", DateTime, server_default=func.current_timestamp()),
)

# Creation order is part of the startup contract.
_CREATE_ORDER: tuple[Table, ...] = (users, products, settings)


# ---------------------------------------------------------------------------
# Engine lifecycle
# ---------------------------------------------------------------------------


def create_db_engine(db_url: str, pool_size: int = 5, max_overflow: int = 5) -> Engine:
    """Build the process-wide engine.

    SQLite gets check_same_thread=False because FastAPI runs sync handlers in
    a thread pool; its pool class is left to the dialect (pool sizing
    arguments are rejected by SingletonThreadPool). Every other backend gets
    a bounded QueuePool with pre-ping so stale connections are replaced
    instead of surfacing as request errors.
    """
    if db_url.startswith("sqlite"):
        return create_engine(db_url, connect_args={"check_same_thread": False})
    return create_engine(
        db_url,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_pre_ping=True,
    )


def init_schema(engine: Engine) -> None:
    """Create users, products and settings if they do not exist yet.

    Idempotent -- safe to call on every startup. Raises whatever the driver
    raises when the database is unreachable; the caller decides that this is
    fatal.
    """
    with engine.begin() as conn:
        for table in _CREATE_ORDER:
            table.create(conn, checkfirst=True)
    logger.info("Database initialized")


def dispose_engine(engine: Engine) -> None:
    """Close every pooled connection. Called once on shutdown."""
    engine.dispose()
    logger.info("Database pool closed")
