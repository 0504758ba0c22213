"""Admin router: all /api/admin/* endpoints (admin only)."""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Body, Depends, Query

from skillswap.admin import service
from skillswap.admin.schemas import (
    AdminMessageListResponse,
    AdminSwapListResponse,
    AdminUserListResponse,
    BannedUser,
    BanRequest,
    BanResponse,
    CreateMessageRequest,
    DashboardResponse,
    MessageEnvelope,
    NotesRequest,
    NotesResponse,
    PlatformMessageResponse,
    ReportResponse,
)
from skillswap.auth.dependencies import get_current_admin
from skillswap.auth.schemas import UserResponse
from skillswap.dependencies import get_record_store
from skillswap.pagination import clamp_limit, paginate
from skillswap.store import RecordStore
from skillswap.store.records import UserRecord, utcnow
from skillswap.swaps.schemas import parse_status
from skillswap.swaps.service import present_swap, present_swaps

router = APIRouter(
    prefix="/api/admin",
    tags=["Admin"],
    dependencies=[Depends(get_current_admin)],
)


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(store: RecordStore = Depends(get_record_store)) -> DashboardResponse:
    """Platform counts and recent activity."""
    data = await service.dashboard(store)
    return DashboardResponse(
        stats=data["stats"],
        recent_swaps=await present_swaps(store, data["recent_swaps"]),
        recent_users=[UserResponse.model_validate(u) for u in data["recent_users"]],
    )


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


@router.get("/users", response_model=AdminUserListResponse)
async def list_users(
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    search: str | None = Query(None),
    status: Literal["banned", "active"] | None = Query(None),
    store: RecordStore = Depends(get_record_store),
) -> AdminUserListResponse:
    users = await service.list_users(store, search=search, status=status)
    items, pagination = paginate(users, page, clamp_limit(limit), "total_users")
    return AdminUserListResponse(
        users=[UserResponse.model_validate(u) for u in items],
        pagination=pagination,
    )


@router.put("/users/{user_id}/ban", response_model=BanResponse)
async def toggle_ban(
    user_id: str,
    body: BanRequest | None = Body(None),
    store: RecordStore = Depends(get_record_store),
) -> BanResponse:
    """Ban or unban a user."""
    user = await service.toggle_ban(store, user_id, reason=body.reason if body else None)
    return BanResponse(
        message=f"User {'banned' if user.is_banned else 'unbanned'} successfully",
        user=BannedUser.model_validate(user),
    )


# ---------------------------------------------------------------------------
# Swaps
# ---------------------------------------------------------------------------


@router.get("/swaps", response_model=AdminSwapListResponse)
async def list_swaps(
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    status: str | None = Query(None),
    reported: bool = Query(False),
    store: RecordStore = Depends(get_record_store),
) -> AdminSwapListResponse:
    swaps = await service.list_swaps(
        store,
        status=parse_status(status) if status else None,
        reported=reported,
    )
    items, pagination = paginate(swaps, page, clamp_limit(limit), "total_swaps")
    return AdminSwapListResponse(swaps=await present_swaps(store, items), pagination=pagination)


@router.put("/swaps/{swap_id}/notes", response_model=NotesResponse)
async def set_notes(
    swap_id: str,
    body: NotesRequest,
    store: RecordStore = Depends(get_record_store),
) -> NotesResponse:
    swap = await service.set_swap_notes(store, swap_id, body.admin_notes)
    return NotesResponse(message="Admin notes updated successfully", swap=await present_swap(store, swap))


# ---------------------------------------------------------------------------
# Platform messages
# ---------------------------------------------------------------------------


@router.post("/messages", response_model=MessageEnvelope, status_code=201)
async def create_message(
    body: CreateMessageRequest,
    admin: UserRecord = Depends(get_current_admin),
    store: RecordStore = Depends(get_record_store),
) -> MessageEnvelope:
    """Publish a platform-wide message."""
    message = await service.create_message(store, admin, body)
    return MessageEnvelope(
        message="Platform message created successfully",
        data=PlatformMessageResponse.model_validate(message),
    )


@router.get("/messages", response_model=AdminMessageListResponse)
async def list_messages(
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    active: bool = Query(False),
    store: RecordStore = Depends(get_record_store),
) -> AdminMessageListResponse:
    messages = await service.list_messages(store, active_only=active)
    items, pagination = paginate(messages, page, clamp_limit(limit), "total_messages")
    return AdminMessageListResponse(
        messages=[PlatformMessageResponse.model_validate(m) for m in items],
        pagination=pagination,
    )


@router.put("/messages/{message_id}/toggle", response_model=MessageEnvelope)
async def toggle_message(
    message_id: str,
    store: RecordStore = Depends(get_record_store),
) -> MessageEnvelope:
    message = await service.toggle_message(store, message_id)
    return MessageEnvelope(
        message=f"Message {'activated' if message.is_active else 'deactivated'} successfully",
        data=PlatformMessageResponse.model_validate(message),
    )


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------


@router.get("/reports/{report_type}", response_model=ReportResponse)
async def report(
    report_type: str,
    start_date: str | None = Query(None),
    end_date: str | None = Query(None),
    store: RecordStore = Depends(get_record_store),
) -> ReportResponse:
    """Users summary, swap counts by status, or swaps created per day."""
    data = await service.build_report(store, report_type, start_date, end_date)
    return ReportResponse(type=report_type, report=data, generated_at=utcnow())
