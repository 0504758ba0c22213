"""Admin moderation: dashboard, user/swap listings, bans, notes, messages, reports."""

from __future__ import annotations

from collections import Counter
from datetime import datetime, time, timedelta, timezone
from typing import TYPE_CHECKING, Any, Literal, TypeVar

import structlog

from skillswap.config import get_settings
from skillswap.errors import NotFoundError, ValidationError
from skillswap.store.records import (
    MessageRecord,
    Record,
    SwapRecord,
    SwapStatus,
    UserRecord,
    utcnow,
)
from skillswap.swaps.lifecycle import round_half_up

if TYPE_CHECKING:
    from skillswap.admin.schemas import CreateMessageRequest
    from skillswap.store import RecordStore

logger = structlog.get_logger()

REPORT_TYPES = ("users", "swaps", "activity")

R = TypeVar("R", bound=Record)


def newest_first(records: list[R]) -> list[R]:
    return sorted(records, key=lambda r: r.created_at, reverse=True)


def is_active_user(user: UserRecord, now: datetime | None = None) -> bool:
    """Active means seen within the configured activity window."""
    now = now or utcnow()
    return user.last_active >= now - timedelta(days=get_settings().active_user_window_days)


def is_new_user(user: UserRecord, now: datetime | None = None) -> bool:
    """New means registered within the configured window."""
    now = now or utcnow()
    return user.created_at >= now - timedelta(days=get_settings().new_user_window_days)


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------


async def dashboard(store: RecordStore) -> dict[str, Any]:
    """Headline counts plus the most recent swaps and users."""
    settings = get_settings()
    users = await store.users.find_all()
    swaps = await store.swaps.find_all()
    now = utcnow()
    return {
        "stats": {
            "users": {
                "total": len(users),
                "active": sum(1 for u in users if is_active_user(u, now)),
                "banned": sum(1 for u in users if u.is_banned),
            },
            "swaps": {
                "total": len(swaps),
                "pending": sum(1 for s in swaps if s.status is SwapStatus.PENDING),
                "completed": sum(1 for s in swaps if s.status is SwapStatus.COMPLETED),
            },
        },
        "recent_swaps": newest_first(swaps)[: settings.dashboard_recent_items],
        "recent_users": newest_first(users)[: settings.dashboard_recent_items],
    }


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


async def list_users(
    store: RecordStore,
    search: str | None = None,
    status: Literal["banned", "active"] | None = None,
) -> list[UserRecord]:
    """All users, newest first, optionally filtered by name/email and ban status."""
    filters: dict[str, Any] = {}
    if status == "banned":
        filters["is_banned"] = True
    elif status == "active":
        filters["is_banned"] = False
    users = await store.users.find_all(filters)
    if search:
        needle = search.lower()
        users = [u for u in users if needle in u.name.lower() or needle in u.email.lower()]
    return newest_first(users)


async def toggle_ban(store: RecordStore, user_id: str, reason: str | None = None) -> UserRecord:
    """
    Ban an unbanned user or unban a banned one.

    Raises:
        NotFoundError: No such user.
        ValidationError: The target is an admin.
    """
    user = await store.users.find_by_id(user_id)
    if user is None:
        raise NotFoundError("User not found")
    if user.is_admin:
        raise ValidationError("Cannot ban admin users")

    banned = not user.is_banned
    ban_reason = ((reason or "").strip() or "No reason provided") if banned else ""
    updated = await store.users.update(user.id, {"is_banned": banned, "ban_reason": ban_reason})
    if updated is None:
        raise NotFoundError("User not found")
    logger.info("user_ban_toggled", user_id=user.id, is_banned=banned)
    return updated


# ---------------------------------------------------------------------------
# Swaps
# ---------------------------------------------------------------------------


async def list_swaps(
    store: RecordStore,
    status: SwapStatus | None = None,
    reported: bool = False,
) -> list[SwapRecord]:
    filters: dict[str, Any] = {}
    if reported:
        filters["is_reported"] = True
    swaps = await store.swaps.find_all(filters)
    if status is not None:
        swaps = [s for s in swaps if s.status is status]
    return newest_first(swaps)


async def set_swap_notes(store: RecordStore, swap_id: str, notes: str) -> SwapRecord:
    updated = await store.swaps.update(swap_id, {"admin_notes": notes})
    if updated is None:
        raise NotFoundError("Swap not found")
    logger.info("swap_notes_updated", swap_id=swap_id)
    return updated


# ---------------------------------------------------------------------------
# Platform messages
# ---------------------------------------------------------------------------


async def create_message(store: RecordStore, admin: UserRecord, body: CreateMessageRequest) -> MessageRecord:
    message = await store.messages.create({**body.model_dump(), "created_by": admin.id})
    logger.info(
        "platform_message_created",
        message_id=message.id,
        audience=message.target_users.value,
        priority=message.priority.value,
    )
    return message


async def list_messages(store: RecordStore, active_only: bool = False) -> list[MessageRecord]:
    filters = {"is_active": True} if active_only else {}
    return newest_first(await store.messages.find_all(filters))


async def toggle_message(store: RecordStore, message_id: str) -> MessageRecord:
    message = await store.messages.find_by_id(message_id)
    if message is None:
        raise NotFoundError("Message not found")
    updated = await store.messages.update(message.id, {"is_active": not message.is_active})
    if updated is None:
        raise NotFoundError("Message not found")
    logger.info("platform_message_toggled", message_id=message.id, is_active=updated.is_active)
    return updated


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------


def parse_report_date(value: str, *, end_of_day: bool = False) -> datetime:
    """
    Parse an ISO date or datetime query parameter into an aware UTC datetime.

    A bare date as the end of a range covers that whole day.
    """
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError as e:
        raise ValidationError(f"Invalid date: {value}") from e
    if end_of_day and len(value.strip()) == 10:
        parsed = datetime.combine(parsed.date(), time.max)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _in_range(records: list[R], start: datetime | None, end: datetime | None) -> list[R]:
    if start is None or end is None:
        return records
    return [r for r in records if start <= r.created_at <= end]


def _users_report(users: list[UserRecord]) -> dict[str, Any]:
    total = len(users)
    return {
        "total_users": total,
        "public_profiles": sum(1 for u in users if u.is_public),
        "banned_users": sum(1 for u in users if u.is_banned),
        "avg_skills_offered": round_half_up(sum(len(u.skills_offered) for u in users) / total) if total else 0.0,
        "avg_skills_wanted": round_half_up(sum(len(u.skills_wanted) for u in users) / total) if total else 0.0,
    }


def _swaps_report(swaps: list[SwapRecord]) -> list[dict[str, Any]]:
    counts = Counter(s.status.value for s in swaps)
    return [{"status": status, "count": count} for status, count in sorted(counts.items())]


def _activity_report(swaps: list[SwapRecord]) -> list[dict[str, Any]]:
    per_day = Counter(s.created_at.date().isoformat() for s in swaps)
    return [{"date": day, "swaps_created": count} for day, count in sorted(per_day.items())]


async def build_report(
    store: RecordStore,
    report_type: str,
    start_date: str | None = None,
    end_date: str | None = None,
) -> Any:  # noqa: ANN401
    """
    Build one of the ``users``, ``swaps`` or ``activity`` reports.

    The date range filters on ``created_at`` and applies only when both ends
    are given.

    Raises:
        ValidationError: Unknown report type or unparseable date.
    """
    if report_type not in REPORT_TYPES:
        raise ValidationError("Invalid report type")

    start = parse_report_date(start_date) if start_date and end_date else None
    end = parse_report_date(end_date, end_of_day=True) if start_date and end_date else None

    if report_type == "users":
        return _users_report(_in_range(await store.users.find_all(), start, end))
    swaps = _in_range(await store.swaps.find_all(), start, end)
    if report_type == "swaps":
        return _swaps_report(swaps)
    return _activity_report(swaps)
