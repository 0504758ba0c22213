"""FastAPI authentication dependencies."""

from __future__ import annotations

import jwt
from fastapi import Depends, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from skillswap.auth.jwt import verify_token
from skillswap.dependencies import get_record_store
from skillswap.errors import ForbiddenError, UnauthorizedError
from skillswap.store import RecordStore
from skillswap.store.records import UserRecord

_bearer = HTTPBearer(auto_error=False)


async def _resolve_user(token: str, store: RecordStore) -> UserRecord:
    try:
        payload = verify_token(token, expected_type="access")
    except jwt.InvalidTokenError as e:
        raise UnauthorizedError(f"Invalid token: {e}") from e

    user = await store.users.find_by_id(str(payload["sub"]))
    if user is None:
        raise UnauthorizedError("Invalid token: user not found")
    return user


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Security(_bearer),
    store: RecordStore = Depends(get_record_store),
) -> UserRecord:
    """
    Verify the bearer token and return the caller's user record.

    Raises UnauthorizedError when the token is missing, invalid, expired or
    names a user that no longer exists, and ForbiddenError for banned users.
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("No token provided, access denied")

    user = await _resolve_user(credentials.credentials, store)
    if user.is_banned:
        raise ForbiddenError("Account is banned", reason=user.ban_reason)
    return user


async def get_optional_user(
    credentials: HTTPAuthorizationCredentials | None = Security(_bearer),
    store: RecordStore = Depends(get_record_store),
) -> UserRecord | None:
    """Resolve the caller if a valid token was sent, otherwise None."""
    if credentials is None or not credentials.credentials:
        return None
    try:
        user = await _resolve_user(credentials.credentials, store)
    except UnauthorizedError:
        return None
    return None if user.is_banned else user


async def get_current_admin(
    user: UserRecord = Depends(get_current_user),
) -> UserRecord:
    """Same as get_current_user but additionally requires is_admin."""
    if not user.is_admin:
        raise ForbiddenError("Admin access required")
    return user
