"""Bootstrap admin account, seeded on startup when credentials are configured."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from skillswap.auth.password import hash_password
from skillswap.auth.service import get_user_by_email

if TYPE_CHECKING:
    from skillswap.config import Settings
    from skillswap.store import RecordStore
    from skillswap.store.records import UserRecord

logger = logging.getLogger(__name__)


async def seed_admin(store: RecordStore, settings: Settings) -> UserRecord | None:
    """
    Ensure the configured admin account exists and holds admin rights.

    Idempotent: an existing account with the admin email is promoted (and
    unbanned) rather than duplicated; its password is left alone. Returns
    None when no admin credentials are configured.
    """
    if not settings.admin_email or not settings.admin_password:
        return None

    email = settings.admin_email.lower().strip()
    user = await get_user_by_email(store, email)
    if user is None:
        # create() forces is_admin False; promote in a second write.
        user = await store.users.create(
            {
                "name": settings.admin_name,
                "email": email,
                "password_hash": hash_password(settings.admin_password),
            }
        )
        logger.info("Created bootstrap admin %s", email)

    if not user.is_admin or user.is_banned:
        user = await store.users.update(user.id, {"is_admin": True, "is_banned": False, "ban_reason": ""}) or user
    return user
