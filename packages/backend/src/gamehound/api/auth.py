"""Auth API — registration, login, current user.

Learn: Routes for user authentication:
- POST /register → create a user, return a token right away
- POST /login → email/password → token
- GET /me → the current user's profile (protected)

Register and login both answer {message, token, user} so the frontend
can treat them identically (store token, store user, go to dashboard).
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from gamehound.auth.dependencies import get_current_user, get_token_codec
from gamehound.auth.jwt import Identity, TokenCodec
from gamehound.db.engine import get_db
from gamehound.errors import NotFoundError
from gamehound.schemas.auth import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    UserMe,
    UserPublic,
)
from gamehound.services.user_service import UserService

router = APIRouter()


def _svc(request: Request, db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db, bcrypt_rounds=request.app.state.settings.bcrypt_rounds)


# ─── Register ────────────────────────────────────────────


@router.post("/register", response_model=AuthResponse)
async def register(
    body: RegisterRequest,
    svc: UserService = Depends(_svc),
    codec: TokenCodec = Depends(get_token_codec),
):
    """Create a new user account and log it in."""
    user = await svc.register(email=body.email, password=body.password, name=body.name)
    return AuthResponse(
        message="User registered successfully",
        token=codec.issue(user.id, user.email),
        user=UserPublic.model_validate(user),
    )


# ─── Login ───────────────────────────────────────────────


@router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    svc: UserService = Depends(_svc),
    codec: TokenCodec = Depends(get_token_codec),
):
    """Login with email and password → bearer token."""
    user = await svc.authenticate(email=body.email, password=body.password)
    return AuthResponse(
        message="Login successful",
        token=codec.issue(user.id, user.email),
        user=UserPublic.model_validate(user),
    )


# ─── Current user ───────────────────────────────────────


@router.get("/me", response_model=UserMe)
async def get_me(
    identity: Identity = Depends(get_current_user),
    svc: UserService = Depends(_svc),
):
    """Get the current authenticated user's info."""
    user = await svc.get_user(identity.user_id)
    if not user:
        raise NotFoundError("User not found")
    return user
