"""
api/routes/v1/auth.py -- Registration and login endpoints.

Routes:
  POST /register  -- create an identity; 201 {"success": true}; no token issued
  POST /login     -- verify credentials; 200 {"token", "username", "email"}

Security:
  Both routes are rate-limited per client IP (Settings.login_rate_limit).
  Login failures are uniform: unknown account and wrong password produce the
  same 401 body ("Invalid credentials") and the same bcrypt cost.
  Cache-Control: no-store on login responses so tokens are never cached.

Handlers are plain def functions. FastAPI runs them on its thread pool, so
the deliberately slow bcrypt work never blocks the event loop.
"""

from __future__ import annotations

from fastapi import APIRouter, Request, Response

from api.limiter import credential_rate_limit, limiter
from api.models import LoginRequest, LoginResponse, RegisterRequest, RegisterResponse
from auth.service import AuthService, resolve_identifier

# Auth policy:
# - POST /register: public -- account creation must be unauthenticated
# - POST /login:    public -- login endpoint must be unauthenticated
router = APIRouter()


@limiter.limit(credential_rate_limit)  # must be ABOVE @router to preserve FastAPI introspection
@router.post("/register", response_model=RegisterResponse, status_code=201)
def register(request: Request, body: RegisterRequest) -> RegisterResponse:
    """Register a new identity.

    400 when username, email or password is missing or blank.
    409 when the username or the (case-insensitive) email is already taken.
    """
    auth_service: AuthService = request.app.state.auth_service
    auth_service.register(body.username, body.email, body.password)
    return RegisterResponse()


@limiter.limit(credential_rate_limit)
@router.post("/login", response_model=LoginResponse)
def login(request: Request, response: Response, body: LoginRequest) -> LoginResponse:
    """Exchange credentials for a one hour access token.

    An identifier containing "@" is looked up as an email, anything else as a
    username.
    """
    auth_service: AuthService = request.app.state.auth_service
    identifier = resolve_identifier(body.identifier, body.username, body.email)
    result = auth_service.login(identifier, body.password)
    response.headers["Cache-Control"] = "no-store"
    return LoginResponse(token=result.token, username=result.username, email=result.email)
