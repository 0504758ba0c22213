"""Authentication router: all /api/auth/* endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from skillswap.auth.dependencies import get_current_user
from skillswap.auth.jwt import create_access_token
from skillswap.auth.schemas import (
    AuthResponse,
    LoginRequest,
    MeResponse,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from skillswap.auth.service import authenticate_user, register_user, touch_last_active
from skillswap.dependencies import get_record_store
from skillswap.store import RecordStore
from skillswap.store.records import UserRecord

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(
    body: RegisterRequest,
    store: RecordStore = Depends(get_record_store),
) -> AuthResponse:
    """Create an account and sign it in."""
    user = await register_user(store, body.name, body.email, body.password)
    return AuthResponse(
        message="User registered successfully",
        token=create_access_token(user.id),
        user=UserResponse.model_validate(user),
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    store: RecordStore = Depends(get_record_store),
) -> AuthResponse:
    """Email + password login."""
    user = await authenticate_user(store, body.email, body.password)
    return AuthResponse(
        message="Login successful",
        token=create_access_token(user.id),
        user=UserResponse.model_validate(user),
    )


@router.get("/me", response_model=MeResponse)
async def me(user: UserRecord = Depends(get_current_user)) -> MeResponse:
    """Return the caller's own profile."""
    return MeResponse(user=UserResponse.model_validate(user))


@router.post("/refresh", response_model=TokenResponse)
async def refresh(
    user: UserRecord = Depends(get_current_user),
    store: RecordStore = Depends(get_record_store),
) -> TokenResponse:
    """Issue a fresh token for a still-valid one."""
    await touch_last_active(store, user)
    return TokenResponse(token=create_access_token(user.id))
