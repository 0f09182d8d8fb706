"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Mirrors the approach
in items/models.py -- dataclasses own domain shape; stores, services and
routes do the work.

Layer rule: no imports from api/, core/, or items/.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class User:
    """A registered identity.

    username is unique and compared case-sensitively. email is unique and
    always stored trimmed and lowercased, so lookups normalize the same way.

    password_hash is a bcrypt string. It stays inside auth/ -- no API
    response model has a field for it.

    The record is immutable after registration; there is no update path.
    """

    username: str
    email: str
    password_hash: str
    id: int | None = None
    created_at: str | None = None  # ISO 8601, set by store on insert


@dataclass(frozen=True)
class TokenPayload:
    """Decoded and verified claim set of an access token."""

    subject_id: int
    username: str
    email: str
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True)
class CurrentIdentity:
    """The authenticated caller, attached to the request by the auth guard.

    Built from the token payload alone -- no store round trip. Every item
    query is scoped by id.
    """

    id: int
    username: str
    email: str
