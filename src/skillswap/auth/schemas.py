"""Request/response schemas for authentication and user views."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from skillswap.store.records import Availability, OfferedSkill, Rating, WantedSkill

# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    """Email registration request."""

    name: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Normalize email to lowercase."""
        return v.lower().strip()

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            msg = "Name cannot be blank"
            raise ValueError(msg)
        return v


class LoginRequest(BaseModel):
    """Email + password login request."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Normalize email to lowercase."""
        return v.lower().strip()


# ---------------------------------------------------------------------------
# User views
# ---------------------------------------------------------------------------


class UserSummary(BaseModel):
    """The slice of a user embedded in swap responses."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    profile_photo: str
    rating: Rating


class PublicUserResponse(UserSummary):
    """A user as seen by anyone else: no email, no moderation details."""

    bio: str
    location: str
    is_public: bool
    availability: Availability
    skills_offered: list[OfferedSkill]
    skills_wanted: list[WantedSkill]
    created_at: datetime


class UserResponse(PublicUserResponse):
    """Full user view for the owner and for admins."""

    email: str
    is_admin: bool
    is_banned: bool
    ban_reason: str
    last_active: datetime
    updated_at: datetime


# ---------------------------------------------------------------------------
# Envelopes
# ---------------------------------------------------------------------------


class AuthResponse(BaseModel):
    message: str
    token: str
    user: UserResponse


class MeResponse(BaseModel):
    user: UserResponse


class TokenResponse(BaseModel):
    token: str
