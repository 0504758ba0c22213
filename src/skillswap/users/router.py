"""User router: all /api/users/* endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, Query, UploadFile

from skillswap.auth.dependencies import get_current_user, get_optional_user
from skillswap.auth.schemas import PublicUserResponse, UserResponse
from skillswap.config import get_settings
from skillswap.dependencies import get_record_store
from skillswap.pagination import clamp_limit, paginate
from skillswap.store import RecordStore
from skillswap.store.records import UserRecord
from skillswap.swaps.schemas import SwapListResponse
from skillswap.swaps.service import get_user_swap_history, present_swaps
from skillswap.users import service
from skillswap.users.schemas import (
    AddSkillRequest,
    PhotoResponse,
    ProfileResponse,
    ProfileUpdateRequest,
    SkillKind,
    UserDetailResponse,
    UserListResponse,
    UserSearchResponse,
)

router = APIRouter(prefix="/api/users", tags=["Users"])


# ---------------------------------------------------------------------------
# Browsing
# ---------------------------------------------------------------------------


@router.get("", response_model=UserListResponse)
async def browse_users(
    skill: str | None = Query(None),
    location: str | None = Query(None),
    search: str | None = Query(None),
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    store: RecordStore = Depends(get_record_store),
) -> UserListResponse:
    """Public, non-banned users, best rated first."""
    users = await service.browse_users(store, skill=skill, location=location, search=search)
    items, pagination = paginate(users, page, clamp_limit(limit), "total_users")
    return UserListResponse(
        users=[PublicUserResponse.model_validate(u) for u in items],
        pagination=pagination,
    )


@router.get("/search/skills", response_model=UserSearchResponse)
async def search_by_skill(
    skill: str | None = Query(None),
    store: RecordStore = Depends(get_record_store),
) -> UserSearchResponse:
    """Users offering a matching skill."""
    users = await service.search_by_offered_skill(store, skill or "")
    return UserSearchResponse(users=[PublicUserResponse.model_validate(u) for u in users])


# ---------------------------------------------------------------------------
# Own profile
# ---------------------------------------------------------------------------


@router.put("/profile", response_model=ProfileResponse)
async def update_profile(
    body: ProfileUpdateRequest,
    user: UserRecord = Depends(get_current_user),
    store: RecordStore = Depends(get_record_store),
) -> ProfileResponse:
    """Update name, bio, location, skills, visibility and availability."""
    updated = await service.update_profile(store, user, body.changes())
    return ProfileResponse(message="Profile updated successfully", user=UserResponse.model_validate(updated))


@router.post("/profile/skills", response_model=ProfileResponse)
async def add_skill(
    body: AddSkillRequest,
    user: UserRecord = Depends(get_current_user),
    store: RecordStore = Depends(get_record_store),
) -> ProfileResponse:
    """Append one skill to the offered or wanted list."""
    updated = await service.add_skill(store, user, body.kind, body.to_skill())
    return ProfileResponse(message="Skill added successfully", user=UserResponse.model_validate(updated))


@router.delete("/profile/skills/{kind}/{name}", response_model=ProfileResponse)
async def remove_skill(
    kind: SkillKind,
    name: str,
    user: UserRecord = Depends(get_current_user),
    store: RecordStore = Depends(get_record_store),
) -> ProfileResponse:
    """Remove a skill by name."""
    updated = await service.remove_skill(store, user, kind, name)
    return ProfileResponse(message="Skill removed successfully", user=UserResponse.model_validate(updated))


@router.post("/profile/photo", response_model=PhotoResponse)
async def upload_photo(
    profile_photo: UploadFile = File(...),
    user: UserRecord = Depends(get_current_user),
    store: RecordStore = Depends(get_record_store),
) -> PhotoResponse:
    """Upload a profile photo (images only, size-capped)."""
    data = await profile_photo.read(get_settings().max_photo_bytes + 1)
    updated = await service.save_profile_photo(store, user, profile_photo.content_type, data)
    return PhotoResponse(message="Profile photo uploaded successfully", profile_photo=updated.profile_photo)


# ---------------------------------------------------------------------------
# Other users
# ---------------------------------------------------------------------------


@router.get("/{user_id}", response_model=UserDetailResponse)
async def get_user(
    user_id: str,
    viewer: UserRecord | None = Depends(get_optional_user),
    store: RecordStore = Depends(get_record_store),
) -> UserDetailResponse:
    """Get a user's profile. Owners and admins get the full view."""
    user = await service.get_visible_user(store, user_id, viewer)
    view = UserResponse if service.can_view_private(user, viewer) else PublicUserResponse
    return UserDetailResponse(user=view.model_validate(user))


@router.get("/{user_id}/swaps", response_model=SwapListResponse)
async def get_user_swaps(
    user_id: str,
    viewer: UserRecord = Depends(get_current_user),
    store: RecordStore = Depends(get_record_store),
) -> SwapListResponse:
    """A user's swap history (self or admin)."""
    swaps = await get_user_swap_history(store, viewer, user_id)
    return SwapListResponse(swaps=await present_swaps(store, swaps))
