"""
auth/store.py -- SQLAlchemy Core persistence layer for users.

Pattern: Repository + Data Mapper (same as catalog/store.py).
UserStore is the repository; _row_to_user is the mapper.
Route code never touches SQL directly.

Security:
  All queries use bound parameters. No f-strings in SQL.
  UNIQUE(username) is enforced by the database; a duplicate insert raises
  sqlalchemy.exc.IntegrityError and the caller reports it.

First-user-admin:
  create_user() counts existing rows and inserts inside a single transaction.
  That does not serialize concurrent first registrations under READ COMMITTED:
  two requests racing on an empty table can both see a zero count, and both
  rows are then marked admin. There is no "only one admin" constraint.

Layer rule: no imports from api/, web/, or catalog/.
"""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.engine import Engine

from auth.models import User
from core.database import users as _users


class UserStore:
    """Repository for User entities.

    The engine is shared with the other stores; UserStore never creates or
    disposes it.

    Usage:
        store = UserStore(engine)
        user = store.create_user("alice", hash_password("secret"))
        same = store.get_by_username("alice")
    """

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def create_user(self, username: str, hashed_password: str) -> User:
        """Insert a new user and return the stored record.

        The first user ever inserted is marked admin. Raises
        sqlalchemy.exc.IntegrityError if the username already exists, and
        leaves the table untouched in that case.
        """
        with self.engine.begin() as conn:
            existing = conn.execute(select(func.count()).select_from(_users)).scalar() or 0
            result = conn.execute(
                _users.insert().values(
                    username=username,
                    password=hashed_password,
                    is_admin=existing == 0,
                )
            )
            user_id = result.inserted_primary_key[0]
            row = conn.execute(_users.select().where(_users.c.id == user_id)).fetchone()
        return _row_to_user(row)

    def get_by_username(self, username: str) -> User | None:
        """Look up a user by exact username (case-sensitive). Returns None if not found."""
        with self.engine.connect() as conn:
            row = conn.execute(_users.select().where(_users.c.username == username)).fetchone()
        return _row_to_user(row) if row is not None else None


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_user(row) -> User:
    return User(
        id=row.id,
        username=row.username,
        hashed_password=row.password,
        is_admin=bool(row.is_admin),
        created_at=row.created_at,
    )
