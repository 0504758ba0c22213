"""Request/response schemas for swap endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from skillswap.auth.schemas import UserSummary
from skillswap.errors import ValidationError
from skillswap.store.records import Feedback, SkillTerm, SwapStatus

# Legacy spellings accepted on input.
_STATUS_ALIASES = {"rejected": SwapStatus.DECLINED.value}


class CreateSwapRequest(BaseModel):
    provider_id: str = Field(..., min_length=1)
    skill_offered: SkillTerm
    skill_requested: SkillTerm
    message: str | None = Field(None, max_length=1000)
    scheduled_date: datetime | None = None
    location: str | None = Field(None, max_length=200)
    duration: float | None = Field(None, ge=0.5, le=8)


class StatusUpdateRequest(BaseModel):
    status: SwapStatus

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v: Any) -> Any:  # noqa: ANN401
        if isinstance(v, str):
            v = v.strip().lower()
            return _STATUS_ALIASES.get(v, v)
        return v


class FeedbackRequest(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    comment: str = Field("", max_length=500)


class ReportRequest(BaseModel):
    reason: str = Field(..., min_length=1, max_length=500)


class SwapResponse(BaseModel):
    """A swap with both parties summarized."""

    id: str
    requester_id: str
    provider_id: str
    requester: UserSummary | None
    provider: UserSummary | None
    skill_offered: SkillTerm
    skill_requested: SkillTerm
    message: str | None
    scheduled_date: datetime | None
    location: str | None
    duration: float | None
    status: SwapStatus
    requester_feedback: Feedback | None
    provider_feedback: Feedback | None
    admin_notes: str
    is_reported: bool
    report_reason: str
    created_at: datetime
    updated_at: datetime


class SwapEnvelope(BaseModel):
    message: str
    swap: SwapResponse


class SwapDetailResponse(BaseModel):
    swap: SwapResponse


class SwapListResponse(BaseModel):
    swaps: list[SwapResponse]


class MessageResponse(BaseModel):
    message: str


def parse_status(value: str) -> SwapStatus:
    """Parse a status query parameter, accepting legacy spellings."""
    value = value.strip().lower()
    try:
        return SwapStatus(_STATUS_ALIASES.get(value, value))
    except ValueError as e:
        raise ValidationError(f"Unknown swap status: {value}") from e
