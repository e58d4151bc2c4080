"""
auth/security.py -- Password hashing, registration and login checks.

Security design decisions:
  Passwords: bcrypt with a fixed work factor (Settings.bcrypt_rounds, default
       10). Bcrypt is the right choice for low-entropy secrets because its
       cost factor makes brute-force expensive. Salts are generated per hash
       and embedded in the digest.

  Login: authenticate_user() returns None for an unknown username and for a
       wrong password alike, and runs bcrypt in both cases (against
       _DUMMY_HASH for unknown users) so neither the response nor its timing
       reveals whether a username exists.

  Registration: no complexity rules. Any non-null password is accepted,
       including the empty string.

Layer rule: no imports from api/, web/, or catalog/. Import from core/
is allowed -- core/ is the kernel and has no reverse dependencies.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import bcrypt

from core.config import get_settings

if TYPE_CHECKING:
    from auth.models import User
    from auth.store import UserStore

logger = logging.getLogger("catalog.auth")

_settings = get_settings()

# ---------------------------------------------------------------------------
# Password hashing (bcrypt -- direct usage, no passlib wrapper)
# ---------------------------------------------------------------------------


def hash_password(plain: str, rounds: int | None = None) -> str:
    """Return a salted bcrypt hash of the given plaintext password.

    rounds defaults to Settings.bcrypt_rounds. Passwords longer than 72 bytes
    are truncated before hashing (bcrypt 4.x rejects longer input outright).
    """
    cost = rounds if rounds is not None else _settings.bcrypt_rounds
    return bcrypt.hashpw(plain.encode("utf-8")[:72], bcrypt.gensalt(rounds=cost)).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash.

    A malformed stored hash counts as a mismatch rather than an error.
    """
    try:
        return bcrypt.checkpw(plain.encode("utf-8")[:72], hashed.encode("utf-8"))
    except ValueError:
        return False


# Computed once at module load so the first login attempt is not measurably
# slower than subsequent ones.
_DUMMY_HASH: str = hash_password("catalog_timing_dummy")


# ---------------------------------------------------------------------------
# Register / authenticate
# ---------------------------------------------------------------------------


def register_user(store: UserStore, username: str, password: str) -> User:
    """Hash the password and create the account.

    The store decides the admin flag (first user wins). Raises
    sqlalchemy.exc.IntegrityError when the username is taken; the router turns
    that into a 400.
    """
    user = store.create_user(username, hash_password(password))
    logger.info("Registered user %r (id=%s, admin=%s)", user.username, user.id, user.is_admin)
    return user


def authenticate_user(store: UserStore, username: str, password: str) -> User | None:
    """Check a username/password pair with timing equalization.

    Returns the User on success, None on any failure. Do NOT return early
    before running bcrypt for unknown usernames.
    """
    user = store.get_by_username(username)
    if user is None:
        verify_password(password, _DUMMY_HASH)
        logger.warning("Failed login for %r", username)
        return None
    if not verify_password(password, user.hashed_password):
        logger.warning("Failed login for %r", username)
        return None
    return user
