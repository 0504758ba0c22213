"""Request/response schemas for admin endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from skillswap.auth.schemas import UserResponse
from skillswap.store.records import (
    MessageAudience,
    MessagePriority,
    MessageType,
    ReadReceipt,
)
from skillswap.swaps.schemas import SwapResponse

# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class BanRequest(BaseModel):
    reason: str | None = Field(None, max_length=500)


class NotesRequest(BaseModel):
    admin_notes: str = Field(..., max_length=1000)


class CreateMessageRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1, max_length=2000)
    type: MessageType = MessageType.ANNOUNCEMENT
    priority: MessagePriority = MessagePriority.NORMAL
    target_users: MessageAudience = MessageAudience.ALL
    specific_users: list[str] = Field(default_factory=list)
    expires_at: datetime | None = None

    @field_validator("title", "content")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            msg = "Must not be blank"
            raise ValueError(msg)
        return v

    @model_validator(mode="after")
    def audience_has_users(self) -> CreateMessageRequest:
        if self.target_users is MessageAudience.SPECIFIC and not self.specific_users:
            msg = "specific_users is required when target_users is 'specific'"
            raise ValueError(msg)
        return self


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class AdminPagination(BaseModel):
    """Pagination block; exactly one ``total_*`` key is set per listing."""

    model_config = ConfigDict(extra="allow")

    current_page: int
    total_pages: int
    has_next: bool
    has_prev: bool


class UserCounts(BaseModel):
    total: int
    active: int
    banned: int


class SwapCounts(BaseModel):
    total: int
    pending: int
    completed: int


class DashboardStats(BaseModel):
    users: UserCounts
    swaps: SwapCounts


class DashboardResponse(BaseModel):
    stats: DashboardStats
    recent_swaps: list[SwapResponse]
    recent_users: list[UserResponse]


class AdminUserListResponse(BaseModel):
    users: list[UserResponse]
    pagination: AdminPagination


class AdminSwapListResponse(BaseModel):
    swaps: list[SwapResponse]
    pagination: AdminPagination


class BannedUser(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    is_banned: bool
    ban_reason: str


class BanResponse(BaseModel):
    message: str
    user: BannedUser


class NotesResponse(BaseModel):
    message: str
    swap: SwapResponse


class PlatformMessageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    content: str
    type: MessageType
    priority: MessagePriority
    is_active: bool
    target_users: MessageAudience
    specific_users: list[str]
    created_by: str
    read_by: list[ReadReceipt]
    expires_at: datetime | None
    created_at: datetime
    updated_at: datetime


class MessageEnvelope(BaseModel):
    message: str
    data: PlatformMessageResponse


class AdminMessageListResponse(BaseModel):
    messages: list[PlatformMessageResponse]
    pagination: AdminPagination


class ReportResponse(BaseModel):
    type: str
    report: Any
    generated_at: datetime
