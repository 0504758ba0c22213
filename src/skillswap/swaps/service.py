"""Swap lifecycle business logic."""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

import structlog

from skillswap.auth.schemas import UserSummary
from skillswap.errors import (
    ConflictError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from skillswap.store.locks import keyed_lock
from skillswap.store.records import Feedback, SwapRecord, SwapStatus, UserRecord, utcnow
from skillswap.swaps.lifecycle import (
    REQUESTER,
    authorize_transition,
    compute_new_rating,
    party_role,
)
from skillswap.swaps.schemas import CreateSwapRequest, SwapResponse

if TYPE_CHECKING:
    from skillswap.store import RecordStore

logger = structlog.get_logger()

SwapDirection = Literal["sent", "received", "all"]


# ---------------------------------------------------------------------------
# Presentation
# ---------------------------------------------------------------------------


async def present_swaps(store: RecordStore, swaps: list[SwapRecord]) -> list[SwapResponse]:
    """Attach requester/provider summaries, loading each user once."""
    users: dict[str, UserRecord | None] = {}
    for swap in swaps:
        for user_id in (swap.requester_id, swap.provider_id):
            if user_id not in users:
                users[user_id] = await store.users.find_by_id(user_id)

    def summary(user_id: str) -> UserSummary | None:
        user = users[user_id]
        return UserSummary.model_validate(user) if user is not None else None

    return [
        SwapResponse(
            **swap.model_dump(),
            requester=summary(swap.requester_id),
            provider=summary(swap.provider_id),
        )
        for swap in swaps
    ]


async def present_swap(store: RecordStore, swap: SwapRecord) -> SwapResponse:
    return (await present_swaps(store, [swap]))[0]


def newest_first(swaps: list[SwapRecord]) -> list[SwapRecord]:
    return sorted(swaps, key=lambda s: s.created_at, reverse=True)


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


async def get_swap(store: RecordStore, swap_id: str) -> SwapRecord:
    """Fetch a swap or raise NotFoundError."""
    swap = await store.swaps.find_by_id(swap_id)
    if swap is None:
        raise NotFoundError("Swap not found")
    return swap


async def get_swap_for_viewer(store: RecordStore, swap_id: str, viewer: UserRecord) -> SwapRecord:
    """Parties and admins may read a swap; anyone else gets ForbiddenError."""
    swap = await get_swap(store, swap_id)
    if party_role(swap, viewer.id) is None and not viewer.is_admin:
        raise ForbiddenError("You are not a party to this swap")
    return swap


async def list_swaps_for_user(
    store: RecordStore,
    user_id: str,
    direction: SwapDirection = "all",
    status: SwapStatus | None = None,
) -> list[SwapRecord]:
    """Swaps the user sent, received, or both; newest first."""
    swaps: list[SwapRecord] = []
    if direction in ("sent", "all"):
        swaps += [s for s in await store.swaps.find_all({"requester_id": user_id}) if s.requester_id == user_id]
    if direction in ("received", "all"):
        swaps += [s for s in await store.swaps.find_all({"provider_id": user_id}) if s.provider_id == user_id]
    if status is not None:
        swaps = [s for s in swaps if s.status is status]
    return newest_first(swaps)


async def get_user_swap_history(store: RecordStore, viewer: UserRecord, user_id: str) -> list[SwapRecord]:
    """A user's full swap history, visible to that user and to admins."""
    if viewer.id != user_id and not viewer.is_admin:
        raise ForbiddenError("You can only view your own swap history")
    if await store.users.find_by_id(user_id) is None:
        raise NotFoundError("User not found")
    return await list_swaps_for_user(store, user_id)


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------


async def create_swap(store: RecordStore, requester: UserRecord, body: CreateSwapRequest) -> SwapRecord:
    """
    Propose a swap to another user.

    Raises:
        NotFoundError: The provider does not exist.
        ValidationError: The provider is banned or is the requester.
        ConflictError: A pending swap already exists for this requester/provider pair.
    """
    provider = await store.users.find_by_id(body.provider_id)
    if provider is None:
        raise NotFoundError("Provider not found")
    if provider.is_banned:
        raise ValidationError("Cannot request a swap with a banned user")
    if provider.id == requester.id:
        raise ValidationError("Cannot create a swap with yourself")

    message = body.message or (
        f"I'd like to swap my {body.skill_offered.name} skills for your {body.skill_requested.name} skills."
    )
    async with keyed_lock(f"swap-pair:{requester.id}:{provider.id}"):
        pending = await store.swaps.find_all(
            {"requester_id": requester.id, "provider_id": provider.id, "status": SwapStatus.PENDING}
        )
        if any(s.requester_id == requester.id and s.provider_id == provider.id for s in pending):
            raise ConflictError("You already have a pending swap request with this user")

        swap = await store.swaps.create(
            {
                "requester_id": requester.id,
                "provider_id": provider.id,
                "skill_offered": body.skill_offered,
                "skill_requested": body.skill_requested,
                "message": message,
                "scheduled_date": body.scheduled_date,
                "location": body.location,
                "duration": body.duration,
            }
        )
    logger.info("swap_created", swap_id=swap.id, requester_id=requester.id, provider_id=provider.id)
    return swap


async def change_status(store: RecordStore, user: UserRecord, swap_id: str, target: SwapStatus) -> SwapRecord:
    """Move a swap to ``target`` if the caller's role and the current status allow it."""
    async with keyed_lock(f"swap:{swap_id}"):
        swap = await get_swap(store, swap_id)
        role = authorize_transition(swap, user.id, target)

        updated = await store.swaps.update(swap.id, {"status": target})
        if updated is None:
            raise NotFoundError("Swap not found")
    logger.info(
        "swap_status_changed",
        swap_id=swap.id,
        from_status=swap.status.value,
        to_status=target.value,
        role=role,
    )
    return updated


async def submit_feedback(
    store: RecordStore,
    user: UserRecord,
    swap_id: str,
    rating: int,
    comment: str = "",
) -> SwapRecord:
    """
    Record one party's feedback on a completed swap and fold the score into
    the other party's rating.

    The swap is locked from the duplicate check through the rating update, and
    the rated user's reputation is locked while it is recomputed, so each
    submission is counted exactly once.

    Raises:
        NotFoundError: No such swap.
        ForbiddenError: Caller is not a party.
        InvalidStateError: Swap is not completed.
        ConflictError: Caller already left feedback.
    """
    async with keyed_lock(f"swap:{swap_id}"):
        swap = await get_swap(store, swap_id)
        role = party_role(swap, user.id)
        if role is None:
            raise ForbiddenError("You are not a party to this swap")
        if swap.status is not SwapStatus.COMPLETED:
            raise InvalidStateError("Feedback can only be left on completed swaps")

        field = "requester_feedback" if role == REQUESTER else "provider_feedback"
        if getattr(swap, field) is not None:
            raise ConflictError("You have already submitted feedback for this swap")

        feedback = Feedback(rating=rating, comment=comment, submitted_at=utcnow())
        updated = await store.swaps.update(swap.id, {field: feedback})
        if updated is None:
            raise NotFoundError("Swap not found")

        rated_id = swap.provider_id if role == REQUESTER else swap.requester_id
        async with keyed_lock(f"rating:{rated_id}"):
            rated = await store.users.find_by_id(rated_id)
            if rated is None:
                return updated
            new_rating = compute_new_rating(rated.rating, rating)
            await store.users.update(rated.id, {"rating": new_rating})

    logger.info(
        "feedback_submitted",
        swap_id=swap.id,
        rated_user_id=rated_id,
        score=rating,
        average=new_rating.average,
        count=new_rating.count,
    )
    return updated


async def report_swap(store: RecordStore, user: UserRecord, swap_id: str, reason: str) -> SwapRecord:
    """Flag a swap for moderator attention."""
    swap = await get_swap(store, swap_id)
    if party_role(swap, user.id) is None:
        raise ForbiddenError("You are not a party to this swap")

    updated = await store.swaps.update(swap.id, {"is_reported": True, "report_reason": reason.strip()})
    if updated is None:
        raise NotFoundError("Swap not found")
    logger.info("swap_reported", swap_id=swap.id, reporter_id=user.id)
    return updated


async def delete_swap(store: RecordStore, user: UserRecord, swap_id: str) -> None:
    """The requester may withdraw any swap that has not been completed."""
    async with keyed_lock(f"swap:{swap_id}"):
        swap = await get_swap(store, swap_id)
        if swap.requester_id != user.id:
            raise ForbiddenError("Only the requester can delete a swap")
        if swap.status is SwapStatus.COMPLETED:
            raise InvalidStateError("Completed swaps cannot be deleted")

        await store.swaps.delete(swap.id)
    logger.info("swap_deleted", swap_id=swap.id, status=swap.status.value)
