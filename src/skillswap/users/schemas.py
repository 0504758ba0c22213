"""Request/response schemas for user endpoints."""

from __future__ import annotations

import enum
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from skillswap.auth.schemas import PublicUserResponse, UserResponse
from skillswap.store.records import Availability, OfferedSkill, SkillLevel, SkillPriority, WantedSkill


def _skill_name(skill: Any) -> str:  # noqa: ANN401
    return str(skill["name"] if isinstance(skill, Mapping) else skill.name)


def check_unique_skill_names(skills: list[Any]) -> list[Any]:
    """Reject a skill list that names the same skill twice (ignoring case).

    Accepts skill models or plain mappings with a ``name`` key.
    """
    seen: set[str] = set()
    for skill in skills:
        name = _skill_name(skill)
        key = name.strip().lower()
        if key in seen:
            msg = f"Duplicate skill: {name}"
            raise ValueError(msg)
        seen.add(key)
    return skills


class SkillKind(str, enum.Enum):
    OFFERED = "offered"
    WANTED = "wanted"

    @property
    def field(self) -> str:
        """The user record field holding this list."""
        return f"skills_{self.value}"


class ProfileUpdateRequest(BaseModel):
    """Editable profile fields. Anything else in the body is ignored."""

    model_config = ConfigDict(extra="ignore")

    name: str | None = Field(None, min_length=1, max_length=50)
    bio: str | None = Field(None, max_length=500)
    location: str | None = Field(None, max_length=100)
    skills_offered: list[OfferedSkill] | None = None
    skills_wanted: list[WantedSkill] | None = None
    is_public: bool | None = None
    availability: Availability | None = None

    @field_validator("skills_offered", "skills_wanted")
    @classmethod
    def unique_names(cls, v: list[Any] | None) -> list[Any] | None:
        if v is None:
            return v
        return check_unique_skill_names(v)

    def changes(self) -> dict[str, Any]:
        """Validated values of the fields the client sent, excluding explicit nulls."""
        return {
            key: getattr(self, key)
            for key in sorted(self.model_fields_set)
            if getattr(self, key) is not None
        }


class AddSkillRequest(BaseModel):
    """Append one skill to the offered or wanted list."""

    kind: SkillKind
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field("", max_length=500)
    level: SkillLevel = SkillLevel.INTERMEDIATE
    priority: SkillPriority = SkillPriority.MEDIUM

    @model_validator(mode="after")
    def strip_name(self) -> AddSkillRequest:
        self.name = self.name.strip()
        if not self.name:
            msg = "Skill name cannot be blank"
            raise ValueError(msg)
        return self

    def to_skill(self) -> OfferedSkill | WantedSkill:
        if self.kind is SkillKind.OFFERED:
            return OfferedSkill(name=self.name, level=self.level, description=self.description)
        return WantedSkill(name=self.name, priority=self.priority, description=self.description)


class ProfileResponse(BaseModel):
    message: str
    user: UserResponse


class PhotoResponse(BaseModel):
    message: str
    profile_photo: str


class PaginationInfo(BaseModel):
    current_page: int
    total_pages: int
    total_users: int
    has_next: bool
    has_prev: bool


class UserListResponse(BaseModel):
    users: list[PublicUserResponse]
    pagination: PaginationInfo


class UserSearchResponse(BaseModel):
    users: list[PublicUserResponse]


class UserDetailResponse(BaseModel):
    """A single profile: the full view for its owner and admins, the public view otherwise."""

    user: UserResponse | PublicUserResponse
