"""User profile and browsing logic."""

from __future__ import annotations

import asyncio
import uuid
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog

from skillswap.config import get_settings
from skillswap.errors import ForbiddenError, NotFoundError, ValidationError
from skillswap.store.records import OfferedSkill, UserRecord, WantedSkill, utcnow
from skillswap.users.schemas import SkillKind, check_unique_skill_names

if TYPE_CHECKING:
    from skillswap.store import RecordStore

logger = structlog.get_logger()

PROFILE_FIELDS = frozenset(
    {"name", "bio", "location", "skills_offered", "skills_wanted", "is_public", "availability"}
)

_PHOTO_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}

# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------


async def update_profile(store: RecordStore, user: UserRecord, changes: dict[str, Any]) -> UserRecord:
    """
    Apply allow-listed profile changes and mark the user active.

    Keys outside the profile allow-list are dropped silently.

    Raises:
        ValidationError: If a skill list names the same skill twice.
        NotFoundError: If the user vanished between auth and update.
    """
    patch = {key: value for key, value in changes.items() if key in PROFILE_FIELDS}
    for field in ("skills_offered", "skills_wanted"):
        if field in patch:
            try:
                check_unique_skill_names(list(patch[field]))
            except ValueError as e:
                raise ValidationError(str(e)) from e
    patch["last_active"] = utcnow()

    updated = await store.users.update(user.id, patch)
    if updated is None:
        raise NotFoundError("User not found")
    logger.info("profile_updated", user_id=user.id, fields=sorted(patch))
    return updated


async def add_skill(store: RecordStore, user: UserRecord, kind: SkillKind, skill: OfferedSkill | WantedSkill) -> UserRecord:
    """Append a skill to one of the user's lists."""
    current = list(getattr(user, kind.field))
    if any(existing.name.strip().lower() == skill.name.strip().lower() for existing in current):
        raise ValidationError(f"Duplicate skill: {skill.name}")
    return await update_profile(store, user, {kind.field: [*current, skill]})


async def remove_skill(store: RecordStore, user: UserRecord, kind: SkillKind, name: str) -> UserRecord:
    """Remove a skill by name (case-insensitive)."""
    current = list(getattr(user, kind.field))
    remaining = [skill for skill in current if skill.name.strip().lower() != name.strip().lower()]
    if len(remaining) == len(current):
        raise NotFoundError("Skill not found")
    return await update_profile(store, user, {kind.field: remaining})


def _write_photo(directory: Path, filename: str, data: bytes) -> None:
    directory.mkdir(parents=True, exist_ok=True)
    (directory / filename).write_bytes(data)


async def save_profile_photo(
    store: RecordStore,
    user: UserRecord,
    content_type: str | None,
    data: bytes,
) -> UserRecord:
    """
    Store an uploaded profile photo and point the profile at it.

    Raises:
        ValidationError: Empty upload, non-image content type, or too large.
    """
    settings = get_settings()
    if not data:
        raise ValidationError("No file uploaded")
    if not content_type or not content_type.startswith("image/"):
        raise ValidationError("Only image files are allowed")
    if len(data) > settings.max_photo_bytes:
        raise ValidationError(f"File too large (max {settings.max_photo_bytes} bytes)")

    extension = _PHOTO_EXTENSIONS.get(content_type, "")
    filename = f"profile-{user.id}-{uuid.uuid4().hex[:8]}{extension}"
    await asyncio.to_thread(_write_photo, Path(settings.upload_dir) / "profiles", filename, data)

    updated = await store.users.update(
        user.id,
        {"profile_photo": f"/uploads/profiles/{filename}", "last_active": utcnow()},
    )
    if updated is None:
        raise NotFoundError("User not found")
    logger.info("profile_photo_uploaded", user_id=user.id, size=len(data))
    return updated


# ---------------------------------------------------------------------------
# Browsing
# ---------------------------------------------------------------------------


def _skill_names(user: UserRecord) -> list[str]:
    return [skill.name for skill in user.skills_offered] + [skill.name for skill in user.skills_wanted]


def _contains(haystack: str, needle: str) -> bool:
    return needle.lower() in haystack.lower()


def sort_by_reputation(users: list[UserRecord]) -> list[UserRecord]:
    """Highest rated first; ties broken by newest account."""
    return sorted(users, key=lambda u: (u.rating.average, u.created_at), reverse=True)


async def browse_users(
    store: RecordStore,
    skill: str | None = None,
    location: str | None = None,
    search: str | None = None,
) -> list[UserRecord]:
    """Public, non-banned users matching every given filter."""
    filters: dict[str, Any] = {"is_public": True, "is_banned": False}
    if location:
        filters["location"] = location
    users = await store.users.find_all(filters)

    if skill:
        users = [u for u in users if any(_contains(name, skill) for name in _skill_names(u))]
    if search:
        users = [
            u
            for u in users
            if _contains(u.name, search) or any(_contains(name, search) for name in _skill_names(u))
        ]
    return sort_by_reputation(users)


async def search_by_offered_skill(store: RecordStore, skill: str) -> list[UserRecord]:
    """Public, non-banned users offering a skill whose name contains ``skill``."""
    if not skill or not skill.strip():
        raise ValidationError("Skill parameter is required")
    users = await store.users.find_all({"is_public": True, "is_banned": False})
    matches = [u for u in users if any(_contains(s.name, skill.strip()) for s in u.skills_offered)]
    return sort_by_reputation(matches)


def can_view_private(user: UserRecord, viewer: UserRecord | None) -> bool:
    """Owners and admins see everything about a profile."""
    return viewer is not None and (viewer.id == user.id or viewer.is_admin)


async def get_visible_user(store: RecordStore, user_id: str, viewer: UserRecord | None) -> UserRecord:
    """
    Fetch a user for display.

    Raises:
        NotFoundError: No such user.
        ForbiddenError: The profile is private and the viewer is neither owner nor admin.
    """
    user = await store.users.find_by_id(user_id)
    if user is None:
        raise NotFoundError("User not found")
    if not user.is_public and not can_view_private(user, viewer):
        raise ForbiddenError("This profile is private")
    return user
