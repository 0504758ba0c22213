"""
Swap status state machine and reputation arithmetic.

    pending --accept/decline (provider)--> accepted | declined
    pending --cancel (requester)--> cancelled
    accepted --complete (either party)--> completed

``declined``, ``cancelled`` and ``completed`` are terminal.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from skillswap.errors import ForbiddenError, InvalidStateError
from skillswap.store.records import Rating, SwapRecord, SwapStatus

REQUESTER = "requester"
PROVIDER = "provider"

VALID_TRANSITIONS: dict[SwapStatus, list[SwapStatus]] = {
    SwapStatus.PENDING: [SwapStatus.ACCEPTED, SwapStatus.DECLINED, SwapStatus.CANCELLED],
    SwapStatus.ACCEPTED: [SwapStatus.COMPLETED],
    SwapStatus.DECLINED: [],
    SwapStatus.COMPLETED: [],
    SwapStatus.CANCELLED: [],
}

# Which party may move a swap into each target status.
TRANSITION_ACTORS: dict[SwapStatus, frozenset[str]] = {
    SwapStatus.ACCEPTED: frozenset({PROVIDER}),
    SwapStatus.DECLINED: frozenset({PROVIDER}),
    SwapStatus.COMPLETED: frozenset({REQUESTER, PROVIDER}),
    SwapStatus.CANCELLED: frozenset({REQUESTER}),
}


def party_role(swap: SwapRecord, user_id: str) -> str | None:
    """'requester', 'provider', or None for outsiders."""
    if swap.requester_id == user_id:
        return REQUESTER
    if swap.provider_id == user_id:
        return PROVIDER
    return None


def validate_transition(current: SwapStatus, target: SwapStatus) -> None:
    """Raise InvalidStateError unless ``target`` is reachable from ``current``."""
    valid = VALID_TRANSITIONS.get(current, [])
    if target not in valid:
        raise InvalidStateError(
            f"Cannot change swap status from {current.value} to {target.value}",
            valid_transitions=[status.value for status in valid],
        )


def authorize_transition(swap: SwapRecord, user_id: str, target: SwapStatus) -> str:
    """
    Check that ``user_id`` may move ``swap`` to ``target``.

    Party membership is checked first, then the role, then reachability.
    Returns the caller's role.
    """
    role = party_role(swap, user_id)
    if role is None:
        raise ForbiddenError("You are not a party to this swap")

    allowed = TRANSITION_ACTORS.get(target)
    if allowed is not None and role not in allowed:
        who = " or ".join(sorted(allowed))
        raise ForbiddenError(f"Only the {who} can mark a swap as {target.value}")

    validate_transition(swap.status, target)
    return role


def round_half_up(value: float, places: int = 1) -> float:
    """Round to ``places`` decimals with ties going up (4.25 -> 4.3)."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def compute_new_rating(current: Rating, score: int) -> Rating:
    """Fold one more score into a running average."""
    total = current.average * current.count + score
    count = current.count + 1
    return Rating(average=round_half_up(total / count), count=count)
