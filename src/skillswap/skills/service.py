"""Skill catalogue derived from the skills listed on public profiles."""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING, Any

from skillswap.store.records import UserRecord
from skillswap.swaps.lifecycle import round_half_up

if TYPE_CHECKING:
    from skillswap.store import RecordStore

MIN_QUERY_LENGTH = 2
MAX_SUGGESTIONS = 10
MAX_POPULAR = 20


async def _listed_users(store: RecordStore) -> list[UserRecord]:
    return await store.users.find_all({"is_public": True, "is_banned": False})


def _all_skill_names(users: list[UserRecord]) -> list[str]:
    names: list[str] = []
    for user in users:
        names.extend(skill.name for skill in user.skills_offered)
        names.extend(skill.name for skill in user.skills_wanted)
    return names


async def suggest_skills(store: RecordStore, query: str | None) -> list[str]:
    """Distinct skill names containing ``query``, in first-seen order."""
    if not query or len(query) < MIN_QUERY_LENGTH:
        return []
    needle = query.lower()
    matches = [name for name in _all_skill_names(await _listed_users(store)) if needle in name.lower()]
    return list(dict.fromkeys(matches))[:MAX_SUGGESTIONS]


async def popular_skills(store: RecordStore) -> list[dict[str, Any]]:
    """Most listed skill names, most frequent first."""
    counts = Counter(_all_skill_names(await _listed_users(store)))
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [{"name": name, "count": count} for name, count in ranked[:MAX_POPULAR]]


async def skill_stats(store: RecordStore) -> dict[str, Any]:
    users = await _listed_users(store)
    offered = sum(len(u.skills_offered) for u in users)
    wanted = sum(len(u.skills_wanted) for u in users)
    return {
        "total_skills_offered": offered,
        "total_skills_wanted": wanted,
        "unique_skills_count": len(set(_all_skill_names(users))),
        "average_skills_per_user": round_half_up((offered + wanted) / len(users)) if users else 0.0,
    }
