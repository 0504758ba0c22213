"""Swap router: all /api/swaps/* endpoints."""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, Query

from skillswap.auth.dependencies import get_current_user
from skillswap.dependencies import get_record_store
from skillswap.store import RecordStore
from skillswap.store.records import UserRecord
from skillswap.swaps import service
from skillswap.swaps.schemas import (
    CreateSwapRequest,
    FeedbackRequest,
    MessageResponse,
    ReportRequest,
    StatusUpdateRequest,
    SwapDetailResponse,
    SwapEnvelope,
    SwapListResponse,
    parse_status,
)

router = APIRouter(prefix="/api/swaps", tags=["Swaps"])


@router.post("", response_model=SwapEnvelope, status_code=201)
async def create_swap(
    body: CreateSwapRequest,
    user: UserRecord = Depends(get_current_user),
    store: RecordStore = Depends(get_record_store),
) -> SwapEnvelope:
    """Propose a skill swap to another user."""
    swap = await service.create_swap(store, user, body)
    return SwapEnvelope(
        message="Swap request created successfully",
        swap=await service.present_swap(store, swap),
    )


@router.get("/my-swaps", response_model=SwapListResponse)
async def my_swaps(
    type: Literal["sent", "received", "all"] = Query("all"),  # noqa: A002
    status: str | None = Query(None),
    user: UserRecord = Depends(get_current_user),
    store: RecordStore = Depends(get_record_store),
) -> SwapListResponse:
    """Swaps the caller sent and/or received, newest first."""
    swaps = await service.list_swaps_for_user(
        store,
        user.id,
        direction=type,
        status=parse_status(status) if status else None,
    )
    return SwapListResponse(swaps=await service.present_swaps(store, swaps))


@router.get("/{swap_id}", response_model=SwapDetailResponse)
async def get_swap(
    swap_id: str,
    user: UserRecord = Depends(get_current_user),
    store: RecordStore = Depends(get_record_store),
) -> SwapDetailResponse:
    """Get one swap (parties and admins)."""
    swap = await service.get_swap_for_viewer(store, swap_id, user)
    return SwapDetailResponse(swap=await service.present_swap(store, swap))


@router.put("/{swap_id}/status", response_model=SwapEnvelope)
async def update_status(
    swap_id: str,
    body: StatusUpdateRequest,
    user: UserRecord = Depends(get_current_user),
    store: RecordStore = Depends(get_record_store),
) -> SwapEnvelope:
    """Accept, decline, cancel or complete a swap."""
    swap = await service.change_status(store, user, swap_id, body.status)
    return SwapEnvelope(
        message=f"Swap {swap.status.value} successfully",
        swap=await service.present_swap(store, swap),
    )


@router.post("/{swap_id}/feedback", response_model=SwapEnvelope)
async def submit_feedback(
    swap_id: str,
    body: FeedbackRequest,
    user: UserRecord = Depends(get_current_user),
    store: RecordStore = Depends(get_record_store),
) -> SwapEnvelope:
    """Rate the other party of a completed swap."""
    swap = await service.submit_feedback(store, user, swap_id, body.rating, body.comment)
    return SwapEnvelope(
        message="Feedback submitted successfully",
        swap=await service.present_swap(store, swap),
    )


@router.post("/{swap_id}/report", response_model=SwapEnvelope)
async def report_swap(
    swap_id: str,
    body: ReportRequest,
    user: UserRecord = Depends(get_current_user),
    store: RecordStore = Depends(get_record_store),
) -> SwapEnvelope:
    """Flag a swap for moderators."""
    swap = await service.report_swap(store, user, swap_id, body.reason)
    return SwapEnvelope(
        message="Swap reported successfully",
        swap=await service.present_swap(store, swap),
    )


@router.delete("/{swap_id}", response_model=MessageResponse)
async def delete_swap(
    swap_id: str,
    user: UserRecord = Depends(get_current_user),
    store: RecordStore = Depends(get_record_store),
) -> MessageResponse:
    """Withdraw a swap request (requester only)."""
    await service.delete_swap(store, user, swap_id)
    return MessageResponse(message="Swap deleted successfully")
