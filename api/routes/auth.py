"""
api/routes/auth.py -- Registration and login endpoints.

Routes:
  POST /api/auth/register  -- create an account; role=admin needs an admin token
  POST /api/auth/login     -- email/password login; returns {accessToken}

Both handlers are plain `def` so FastAPI runs them in its thread pool: bcrypt
and the store calls would otherwise block the event loop.

Security:
  Cache-Control: no-store on successful login responses.
  The admin-elevation check lives in auth.accounts.register(), not here, so
  the raw bearer token is passed through untouched.
"""

from __future__ import annotations

from fastapi import APIRouter, Request, Response

from api.models import LoginRequest, LoginResponse, PublicUser, RegisterRequest
from auth import accounts
from auth.dependencies import bearer_token
from auth.store import UserStore
from auth.tokens import TokenService

# Auth policy:
# - POST /api/auth/register: public, except role=admin which needs an admin bearer token
# - POST /api/auth/login:    public
router = APIRouter()


@router.post("/auth/register", response_model=PublicUser, status_code=201)
def register(request: Request, body: RegisterRequest) -> PublicUser:
    """Register a new account and return it without the password hash."""
    user_store: UserStore = request.app.state.user_store
    tokens: TokenService = request.app.state.tokens
    user = accounts.register(
        user_store,
        tokens,
        full_name=body.full_name,
        birth_date=body.birth_date.isoformat() if body.birth_date else None,
        email=body.email,
        password=body.password,
        role=body.role,
        bearer_token=bearer_token(request),
    )
    return PublicUser.from_user(user)


@router.post("/auth/login", response_model=LoginResponse)
def login(request: Request, body: LoginRequest, response: Response) -> LoginResponse:
    """Authenticate with email and password.

    The three failure cases (unknown email, blocked account, wrong password)
    all answer 401; the message says which one it was.
    """
    user_store: UserStore = request.app.state.user_store
    tokens: TokenService = request.app.state.tokens
    token = accounts.login(user_store, tokens, body.email, body.password)
    response.headers["Cache-Control"] = "no-store"
    return LoginResponse(access_token=token)
