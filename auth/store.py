"""
auth/store.py -- SQLAlchemy Core persistence layer for identities.

Pattern: Repository + Data Mapper (same as items/store.py).
UserStore is the repository; _row_to_user is the mapper.
Service and route code never touches SQL directly.

Security:
  All queries use bound parameters. No f-strings in SQL.

Uniqueness:
  username and email each carry a UNIQUE constraint. create_user() inserts
  without a prior existence check and lets the database reject collisions,
  so two concurrent registrations with the same email cannot both succeed.
  The losing insert is reported as DuplicateError naming exactly one field.

  Emails are normalized (trimmed, lowercased) on the way in and on lookup,
  which makes the UNIQUE(email) constraint case-insensitive in effect.

Layer rule: no imports from api/ or items/. Import from core/ is allowed.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, MetaData, String, Table, Text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from auth.models import User
from core.db import make_engine
from core.db import ping as db_ping

logger = logging.getLogger("stockroom.auth")

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_users = Table(
    "users",
    _metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("username", String(255), nullable=False, unique=True),
    Column("email", String(320), nullable=False, unique=True),
    Column("password_hash", Text, nullable=False),
    Column("created_at", String(32), nullable=False),
)


class DuplicateError(Exception):
    """Raised by create_user() when a UNIQUE constraint rejects the insert.

    field is "username" or "email" -- never both.
    """

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"duplicate {field}")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class UserStore:
    """Repository for User entities.

    Usage:
        store = UserStore("sqlite:///./stockroom.db")
        user = store.create_user("alice", "alice@example.com", hasher.hash("secret"))
        user = store.get_by_email("Alice@Example.com")
        store.close()
    """

    def __init__(self, db_url: str) -> None:
        self.engine: Engine = make_engine(db_url)
        _metadata.create_all(self.engine)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create_user(self, username: str, email: str, password_hash: str) -> User:
        """Insert a new identity and return it with its assigned id.

        Raises DuplicateError if username or email is already taken. When a
        single insert collides on both, the username collision is reported.
        """
        email = normalize_email(email)
        created_at = _now_iso()
        try:
            with self.engine.begin() as conn:
                result = conn.execute(
                    _users.insert().values(
                        username=username,
                        email=email,
                        password_hash=password_hash,
                        created_at=created_at,
                    )
                )
                user_id = result.inserted_primary_key[0]
        except IntegrityError as exc:
            field = self._duplicate_field(username, email, exc)
            logger.info("Registration rejected: duplicate %s", field)
            raise DuplicateError(field) from exc

        return User(
            id=user_id,
            username=username,
            email=email,
            password_hash=password_hash,
            created_at=created_at,
        )

    def _duplicate_field(self, username: str, email: str, exc: IntegrityError) -> str:
        """Work out which UNIQUE constraint rejected the insert.

        The conflicting row is committed by the time the insert fails, so a
        lookup finds it. Username is checked first. The driver message is
        only consulted if neither lookup matches.
        """
        if self.get_by_username(username) is not None:
            return "username"
        if self.get_by_email(email) is not None:
            return "email"
        message = str(exc.orig).lower()
        return "username" if "username" in message else "email"

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_by_username(self, username: str) -> User | None:
        """Look up a user by exact username (case-sensitive). Returns None if not found."""
        with self.engine.connect() as conn:
            row = conn.execute(_users.select().where(_users.c.username == username)).fetchone()
        return _row_to_user(row) if row is not None else None

    def get_by_email(self, email: str) -> User | None:
        """Look up a user by email after trimming and lowercasing it."""
        with self.engine.connect() as conn:
            row = conn.execute(_users.select().where(_users.c.email == normalize_email(email))).fetchone()
        return _row_to_user(row) if row is not None else None

    def get_by_id(self, user_id: int) -> User | None:
        with self.engine.connect() as conn:
            row = conn.execute(_users.select().where(_users.c.id == user_id)).fetchone()
        return _row_to_user(row) if row is not None else None

    def ping(self) -> bool:
        """Return True if the database answers SELECT 1."""
        return db_ping(self.engine)

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mappers (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_user(row) -> User:
    return User(
        id=row.id,
        username=row.username,
        email=row.email,
        password_hash=row.password_hash,
        created_at=row.created_at,
    )
