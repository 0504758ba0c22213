"""
Authentication business logic.

Handles account creation, credential checks and activity tracking.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from skillswap.auth.password import (
    PasswordStrengthError,
    check_needs_rehash,
    hash_password,
    validate_password_strength,
    verify_password,
)
from skillswap.errors import ConflictError, ForbiddenError, UnauthorizedError, ValidationError
from skillswap.store.records import UserRecord, utcnow

if TYPE_CHECKING:
    from skillswap.store import RecordStore

logger = structlog.get_logger()


async def get_user_by_email(store: RecordStore, email: str) -> UserRecord | None:
    """Fetch a user by email (case-insensitive, exact)."""
    email = email.lower().strip()
    for user in await store.users.find_all({"email": email}):
        if user.email.lower() == email:
            return user
    return None


async def touch_last_active(store: RecordStore, user: UserRecord) -> UserRecord:
    """Record activity now and return the refreshed user."""
    updated = await store.users.update(user.id, {"last_active": utcnow()})
    return updated or user


async def register_user(store: RecordStore, name: str, email: str, password: str) -> UserRecord:
    """
    Create a new account.

    Raises:
        ValidationError: If the password does not meet the strength rules.
        ConflictError: If the email is already registered.
    """
    try:
        validate_password_strength(password)
    except PasswordStrengthError as e:
        raise ValidationError(str(e)) from e

    email = email.lower().strip()
    if await get_user_by_email(store, email) is not None:
        raise ConflictError("User already exists with this email")

    user = await store.users.create(
        {
            "name": name,
            "email": email,
            "password_hash": hash_password(password),
        }
    )
    logger.info("user_registered", user_id=user.id)
    return user


async def authenticate_user(store: RecordStore, email: str, password: str) -> UserRecord:
    """
    Check credentials and mark the user active.

    Raises:
        UnauthorizedError: Unknown email or wrong password.
        ForbiddenError: The account is banned.
    """
    user = await get_user_by_email(store, email)
    if user is None or not verify_password(password, user.password_hash):
        logger.info("login_failed", email=email.lower())
        raise UnauthorizedError("Invalid credentials")

    if user.is_banned:
        raise ForbiddenError("Account is banned", reason=user.ban_reason)

    patch: dict[str, object] = {"last_active": utcnow()}
    if check_needs_rehash(user.password_hash):
        patch["password_hash"] = hash_password(password)
    updated = await store.users.update(user.id, patch)
    logger.info("user_logged_in", user_id=user.id)
    return updated or user
