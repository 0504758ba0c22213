"""Skill catalogue router: /api/skills/* (public)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from skillswap.dependencies import get_record_store
from skillswap.skills import service
from skillswap.store import RecordStore

router = APIRouter(prefix="/api/skills", tags=["Skills"])


class SuggestionsResponse(BaseModel):
    suggestions: list[str]


class PopularSkill(BaseModel):
    name: str
    count: int


class PopularSkillsResponse(BaseModel):
    skills: list[PopularSkill]


class SkillStats(BaseModel):
    total_skills_offered: int
    total_skills_wanted: int
    unique_skills_count: int
    average_skills_per_user: float


class SkillStatsResponse(BaseModel):
    stats: SkillStats


@router.get("/suggestions", response_model=SuggestionsResponse)
async def suggestions(
    q: str | None = Query(None),
    store: RecordStore = Depends(get_record_store),
) -> SuggestionsResponse:
    """Autocomplete skill names."""
    return SuggestionsResponse(suggestions=await service.suggest_skills(store, q))


@router.get("/popular", response_model=PopularSkillsResponse)
async def popular(store: RecordStore = Depends(get_record_store)) -> PopularSkillsResponse:
    return PopularSkillsResponse(skills=await service.popular_skills(store))


@router.get("/stats", response_model=SkillStatsResponse)
async def stats(store: RecordStore = Depends(get_record_store)) -> SkillStatsResponse:
    return SkillStatsResponse(stats=await service.skill_stats(store))
