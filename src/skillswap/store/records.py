"""Typed record models shared by every store backend.

Both backends validate into these models on read and on write, so the rest
of the application never sees backend-specific row or document types.
"""

from __future__ import annotations

import enum
from datetime import datetime, timezone
from typing import Annotated, ClassVar

from pydantic import AfterValidator, BaseModel, ConfigDict, Field


def _ensure_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UTCDateTime = Annotated[datetime, AfterValidator(_ensure_utc)]


def utcnow() -> datetime:
    """Current time in UTC."""
    return datetime.now(timezone.utc)


class Record(BaseModel):
    """Base for stored records."""

    model_config = ConfigDict(from_attributes=True)

    filterable_fields: ClassVar[frozenset[str]] = frozenset({"id"})

    id: str
    created_at: UTCDateTime
    updated_at: UTCDateTime


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class SkillLevel(str, enum.Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"
    EXPERT = "Expert"


class SkillPriority(str, enum.Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class OfferedSkill(BaseModel):
    """A skill the user can teach."""

    name: str = Field(..., min_length=1, max_length=100)
    level: SkillLevel = SkillLevel.INTERMEDIATE
    description: str = Field("", max_length=500)


class WantedSkill(BaseModel):
    """A skill the user wants to learn."""

    name: str = Field(..., min_length=1, max_length=100)
    priority: SkillPriority = SkillPriority.MEDIUM
    description: str = Field("", max_length=500)


class Availability(BaseModel):
    weekdays: bool = False
    weekends: bool = False
    evenings: bool = False
    mornings: bool = False
    afternoons: bool = False


class Rating(BaseModel):
    """Running reputation: average of received ratings and how many there were."""

    average: float = Field(0.0, ge=0, le=5)
    count: int = Field(0, ge=0)


class UserRecord(Record):
    filterable_fields: ClassVar[frozenset[str]] = frozenset(
        {"id", "email", "name", "bio", "location", "is_public", "is_admin", "is_banned"}
    )

    email: str
    name: str
    password_hash: str
    bio: str = ""
    location: str = ""
    profile_photo: str = ""
    is_public: bool = True
    availability: Availability = Field(default_factory=Availability)
    skills_offered: list[OfferedSkill] = Field(default_factory=list)
    skills_wanted: list[WantedSkill] = Field(default_factory=list)
    rating: Rating = Field(default_factory=Rating)
    is_admin: bool = False
    is_banned: bool = False
    ban_reason: str = ""
    last_active: UTCDateTime


# ---------------------------------------------------------------------------
# Swaps
# ---------------------------------------------------------------------------


class SwapStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class SkillTerm(BaseModel):
    """Snapshot of a skill named in a swap at creation time."""

    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field("", max_length=500)


class Feedback(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    comment: str = Field("", max_length=500)
    submitted_at: UTCDateTime


class SwapRecord(Record):
    filterable_fields: ClassVar[frozenset[str]] = frozenset(
        {"id", "requester_id", "provider_id", "status", "location", "is_reported"}
    )

    requester_id: str
    provider_id: str
    skill_offered: SkillTerm
    skill_requested: SkillTerm
    message: str | None = None
    scheduled_date: UTCDateTime | None = None
    location: str | None = None
    duration: float | None = None
    status: SwapStatus = SwapStatus.PENDING
    requester_feedback: Feedback | None = None
    provider_feedback: Feedback | None = None
    admin_notes: str = ""
    is_reported: bool = False
    report_reason: str = ""


# ---------------------------------------------------------------------------
# Platform messages
# ---------------------------------------------------------------------------


class MessageType(str, enum.Enum):
    ANNOUNCEMENT = "announcement"
    UPDATE = "update"
    MAINTENANCE = "maintenance"
    WARNING = "warning"


class MessagePriority(str, enum.Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


class MessageAudience(str, enum.Enum):
    ALL = "all"
    ACTIVE = "active"
    NEW = "new"
    SPECIFIC = "specific"


class ReadReceipt(BaseModel):
    user_id: str
    read_at: UTCDateTime


class MessageRecord(Record):
    filterable_fields: ClassVar[frozenset[str]] = frozenset(
        {"id", "title", "type", "priority", "is_active", "target_users", "created_by"}
    )

    title: str
    content: str
    type: MessageType = MessageType.ANNOUNCEMENT
    priority: MessagePriority = MessagePriority.NORMAL
    is_active: bool = True
    target_users: MessageAudience = MessageAudience.ALL
    specific_users: list[str] = Field(default_factory=list)
    created_by: str
    read_by: list[ReadReceipt] = Field(default_factory=list)
    expires_at: UTCDateTime | None = None
