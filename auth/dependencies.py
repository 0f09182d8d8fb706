"""
auth/dependencies.py -- Bearer token guard for protected routes.

authenticate() is the pure guard: header string in, CurrentIdentity out, or
UnauthorizedError. It knows nothing about FastAPI, which keeps it unit
testable without a request object.

get_current_identity() is the FastAPI Depends() adapter. The items router
declares it as a router-level dependency, so no item route can run without
a verified identity.

Failure messages are deliberately coarse:
  "Missing token" -- no header, wrong scheme, or empty token.
  "Invalid token" -- bad signature, malformed claims, or expired.

Layer rule: no imports from items/. auth/dependencies.py may import from
fastapi because this module is part of the FastAPI dependency injection
system.
"""

from __future__ import annotations

from fastapi import Request

from auth.models import CurrentIdentity
from auth.tokens import InvalidTokenError, TokenService
from core.errors import UnauthorizedError

_SCHEME_PREFIX = "Bearer "


def authenticate(authorization: str | None, tokens: TokenService) -> CurrentIdentity:
    """Turn an Authorization header value into the caller's identity.

    The header must be exactly "Bearer <token>". The scheme is case-sensitive.
    """
    if not authorization or not authorization.startswith(_SCHEME_PREFIX):
        raise UnauthorizedError("Missing token")
    token = authorization[len(_SCHEME_PREFIX) :]
    if not token:
        raise UnauthorizedError("Missing token")

    try:
        payload = tokens.verify(token)
    except InvalidTokenError as exc:
        raise UnauthorizedError("Invalid token") from exc

    return CurrentIdentity(id=payload.subject_id, username=payload.username, email=payload.email)


def get_current_identity(request: Request) -> CurrentIdentity:
    """Require a valid Bearer token. Raises UnauthorizedError (401) otherwise.

    Use as a FastAPI dependency:
        @router.get("/protected")
        def route(identity: CurrentIdentity = Depends(get_current_identity)): ...

    The identity is also stored on request.state.identity for middleware and
    logging further down the chain.
    """
    tokens: TokenService = request.app.state.tokens
    identity = authenticate(request.headers.get("Authorization"), tokens)
    request.state.identity = identity
    return identity
