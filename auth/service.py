"""
auth/service.py -- Registration and login.

Each operation is a short state machine that stops at the first failure:

  register: validate -> normalize -> hash -> insert (store enforces uniqueness)
  login:    resolve identifier -> look up -> verify password -> issue token

Login failures are uniform. An unknown identifier and a wrong password both
raise UnauthorizedError("Invalid credentials"), and both run exactly one
bcrypt verification (against a dummy hash when the user does not exist), so
neither the response body nor the response time tells them apart.

Registration never issues a token; the client logs in as a separate step.

Layer rule: no imports from api/ or items/.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from auth.models import User
from auth.passwords import PasswordHasher
from auth.store import DuplicateError, UserStore, normalize_email
from auth.tokens import TokenService
from core.errors import BadRequestError, ConflictError, UnauthorizedError

logger = logging.getLogger("stockroom.auth")

INVALID_CREDENTIALS = "Invalid credentials"

_CONFLICT_MESSAGES = {
    "username": "Username already taken",
    "email": "Email already registered",
}


@dataclass(frozen=True)
class LoginResult:
    token: str
    username: str
    email: str


def _clean(value: str | None) -> str:
    return value.strip() if isinstance(value, str) else ""


def resolve_identifier(
    identifier: str | None = None,
    username: str | None = None,
    email: str | None = None,
) -> str:
    """Pick the login identifier: identifier, then username, then email.

    The first value that is non-empty after trimming wins. Returns "" when
    none is usable.
    """
    for candidate in (identifier, username, email):
        cleaned = _clean(candidate)
        if cleaned:
            return cleaned
    return ""


def is_email_shaped(identifier: str) -> bool:
    return "@" in identifier


class AuthService:
    """Orchestrates the credential store, password hasher and token service."""

    def __init__(self, store: UserStore, hasher: PasswordHasher, tokens: TokenService) -> None:
        self.store = store
        self.hasher = hasher
        self.tokens = tokens
        # Timing equalization target for unknown identifiers. Hashed once per
        # service so every failed lookup pays the same bcrypt cost.
        self._dummy_hash = hasher.hash("stockroom-timing-equalizer")

    def register(self, username: str | None, email: str | None, password: str | None) -> User:
        """Create a new identity. Raises BadRequestError or ConflictError."""
        username = _clean(username)
        email = normalize_email(email) if isinstance(email, str) else ""
        if not username or not email or not password:
            raise BadRequestError("Username, email and password are required")

        password_hash = self.hasher.hash(password)
        try:
            user = self.store.create_user(username, email, password_hash)
        except DuplicateError as exc:
            raise ConflictError(_CONFLICT_MESSAGES[exc.field]) from exc

        logger.info("Registered user id=%s username=%s", user.id, user.username)
        return user

    def login(self, identifier: str | None, password: str | None) -> LoginResult:
        """Verify credentials and issue a token. Raises BadRequestError or UnauthorizedError."""
        identifier = _clean(identifier)
        if not identifier or not password:
            raise BadRequestError("Identifier and password are required")

        if is_email_shaped(identifier):
            user = self.store.get_by_email(identifier)
        else:
            user = self.store.get_by_username(identifier)

        if user is None:
            # Equalize timing -- do NOT return before running bcrypt.
            self.hasher.verify(password, self._dummy_hash)
            logger.info("Login failed: unknown identifier")
            raise UnauthorizedError(INVALID_CREDENTIALS)

        if not self.hasher.verify(password, user.password_hash):
            logger.info("Login failed: bad password for user id=%s", user.id)
            raise UnauthorizedError(INVALID_CREDENTIALS)

        token = self.tokens.issue(user)
        logger.info("Login succeeded for user id=%s", user.id)
        return LoginResult(token=token, username=user.username, email=user.email)
