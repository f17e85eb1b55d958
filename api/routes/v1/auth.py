"""
api/routes/v1/auth.py -- Registration and login REST endpoints.

Routes:
  POST /api/v1/auth/register   -- create a user; 200 with {errors} or {user}
  POST /api/v1/auth/login      -- check credentials; 200 with {errors} or {user}

Field errors (short username, taken username, unknown user, wrong password)
are part of the normal response body, not HTTP errors. Only transport-level
problems (422 body validation, 429 rate limit, 403 registration disabled,
500 storage failure) use the ErrorResponse envelope.

Concurrency:
  Both handlers are plain `def`, so FastAPI runs them on its bounded worker
  thread pool. argon2 is CPU- and memory-heavy; running it inline in an
  `async def` would stall the event loop for every other request.

Security:
  Both routes are rate-limited per client IP (LOGIN_RATE_LIMIT,
  REGISTER_RATE_LIMIT) as brute-force mitigation.
  Cache-Control: no-store on every response -- bodies contain account data.
  The user payload never includes password_hash (see api.models.UserModel).
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse

from api.limiter import limiter
from api.models import UsernamePasswordInput, UserResponse
from auth.service import AuthService
from core.config import get_settings

_settings = get_settings()

# Auth policy: both endpoints are public -- they are how a caller gets an identity.
router = APIRouter()


@router.post("/auth/register", response_model=UserResponse)
@limiter.limit(_settings.register_rate_limit)
def register(request: Request, body: UsernamePasswordInput) -> JSONResponse:
    """Create an account from a username and password.

    Returns {errors: [...]} when validation fails or the username is taken,
    otherwise {user: {...}}.
    """
    if not request.app.state.registration_enabled:
        raise HTTPException(
            status_code=403,
            detail={"code": "registration_disabled", "message": "Self-registration is disabled."},
        )
    service: AuthService = request.app.state.auth_service
    result = service.register(body.username, body.password)
    return _no_store(UserResponse.from_result(result))


@router.post("/auth/login", response_model=UserResponse)
@limiter.limit(_settings.login_rate_limit)
def login(request: Request, body: UsernamePasswordInput) -> JSONResponse:
    """Check a username and password.

    Returns {errors: [...]} for an unknown username or wrong password,
    otherwise {user: {...}}. No session or token is issued.
    """
    service: AuthService = request.app.state.auth_service
    result = service.login(body.username, body.password)
    return _no_store(UserResponse.from_result(result))


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _no_store(payload: UserResponse) -> JSONResponse:
    resp = JSONResponse(status_code=200, content=payload.model_dump())
    resp.headers["Cache-Control"] = "no-store"
    return resp
