"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Mirrors the approach
in catalog/models.py -- dataclasses own domain shape; stores and routes do
the work.

Layer rule: no imports from api/, web/, or catalog/.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class User:
    """A registered account.

    hashed_password holds the bcrypt digest from the users.password column.
    It never leaves the server: route handlers build the response from id,
    username and is_admin only.

    id and created_at are None before the record is written to the database.
    """

    username: str
    hashed_password: str
    is_admin: bool = False
    id: int | None = None
    created_at: datetime | None = None
