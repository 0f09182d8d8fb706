"""
auth/tokens.py -- JWT issue and verification.

Security design decisions:
  JWT: python-jose with HS256. Tokens are signed with Settings.secret_key and
       carry the subject id, username, email, issue time and expiry. There is
       no server-side token state: a token is valid exactly while its
       signature checks out and the clock is before its expiry.

  Lifetime: fixed at one hour (TOKEN_TTL). Not configurable.

  Expiry: checked here against the injected clock, not by jose. jose's own
       check compares against the wall clock and accepts a token whose exp
       equals the current second; here current time >= exp is expired, with
       no leeway.

  The secret and the clock are constructor arguments. Nothing in this module
  reads configuration at import time.

Layer rule: no imports from api/ or items/. Import from core/ is allowed --
core/ is the kernel and has no reverse dependencies.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable

from jose import JWTError, jwt

from auth.models import TokenPayload, User
from core.config import Settings

_ALGORITHM = "HS256"

TOKEN_TTL = timedelta(hours=1)

# Subject ids are INTEGER primary keys.
_MAX_SUBJECT_ID = 2**63 - 1

Clock = Callable[[], datetime]


class InvalidTokenError(Exception):
    """Signature mismatch, malformed claims, or expired token."""


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    """Mint and verify signed, time-bounded identity assertions.

    Usage:
        tokens = TokenService(settings)
        raw = tokens.issue(user)
        payload = tokens.verify(raw)   # raises InvalidTokenError
    """

    def __init__(self, settings: Settings, clock: Clock | None = None) -> None:
        self._secret_key = settings.secret_key
        self._clock: Clock = clock or _utc_now

    def issue(self, user: User) -> str:
        """Encode a signed JWT for a stored user. Expires TOKEN_TTL after issue."""
        if user.id is None:
            raise ValueError("Cannot issue a token for an unsaved user.")
        issued_at = int(self._clock().timestamp())
        payload = {
            "sub": str(user.id),
            "username": user.username,
            "email": user.email,
            "iat": issued_at,
            "exp": issued_at + int(TOKEN_TTL.total_seconds()),
        }
        return jwt.encode(payload, self._secret_key, algorithm=_ALGORITHM)

    def verify(self, token: str) -> TokenPayload:
        """Verify signature and expiry, returning the decoded payload.

        Raises InvalidTokenError on any failure.
        """
        if not token:
            raise InvalidTokenError("Token is empty.")
        try:
            claims = jwt.decode(
                token,
                self._secret_key,
                algorithms=[_ALGORITHM],
                options={"verify_exp": False},
            )
        except JWTError as exc:
            raise InvalidTokenError("Token signature or format is invalid.") from exc

        payload = _payload_from_claims(claims)
        if self._clock() >= payload.expires_at:
            raise InvalidTokenError("Token has expired.")
        return payload


def _payload_from_claims(claims: dict) -> TokenPayload:
    sub = claims.get("sub")
    username = claims.get("username")
    email = claims.get("email")
    iat = claims.get("iat")
    exp = claims.get("exp")

    if not isinstance(sub, str) or not (sub.isascii() and sub.isdigit()):
        raise InvalidTokenError("Token subject is malformed.")
    if len(sub) > len(str(_MAX_SUBJECT_ID)) or int(sub) > _MAX_SUBJECT_ID:
        raise InvalidTokenError("Token subject is out of range.")
    if not isinstance(username, str) or not isinstance(email, str):
        raise InvalidTokenError("Token identity claims are malformed.")
    # bool is an int subclass; a boolean timestamp is still malformed.
    for value in (iat, exp):
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidTokenError("Token timestamps are malformed.")

    try:
        issued_at = datetime.fromtimestamp(iat, tz=timezone.utc)
        expires_at = datetime.fromtimestamp(exp, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as exc:
        raise InvalidTokenError("Token timestamps are out of range.") from exc

    return TokenPayload(
        subject_id=int(sub),
        username=username,
        email=email,
        issued_at=issued_at,
        expires_at=expires_at,
    )
