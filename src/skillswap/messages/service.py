"""Reader side of platform messages: audience targeting and read receipts."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

import structlog

from skillswap.admin.service import is_active_user, is_new_user, newest_first
from skillswap.errors import NotFoundError
from skillswap.store.locks import keyed_lock
from skillswap.store.records import MessageAudience, MessageRecord, ReadReceipt, UserRecord, utcnow

if TYPE_CHECKING:
    from skillswap.store import RecordStore

logger = structlog.get_logger()


def is_addressed_to(message: MessageRecord, user: UserRecord, now: datetime) -> bool:
    """True if the message's audience includes ``user``."""
    audience = message.target_users
    if audience is MessageAudience.ALL:
        return True
    if audience is MessageAudience.ACTIVE:
        return is_active_user(user, now)
    if audience is MessageAudience.NEW:
        return is_new_user(user, now)
    return user.id in message.specific_users


def is_live(message: MessageRecord, now: datetime) -> bool:
    return message.is_active and (message.expires_at is None or message.expires_at > now)


def has_read(message: MessageRecord, user_id: str) -> bool:
    return any(receipt.user_id == user_id for receipt in message.read_by)


async def messages_for_user(store: RecordStore, user: UserRecord) -> list[MessageRecord]:
    """Active, unexpired messages addressed to the user, newest first."""
    now = utcnow()
    messages = await store.messages.find_all({"is_active": True})
    return newest_first([m for m in messages if is_live(m, now) and is_addressed_to(m, user, now)])


async def mark_read(store: RecordStore, user: UserRecord, message_id: str) -> MessageRecord:
    """
    Record that the user read a message. Repeat calls change nothing.

    Raises:
        NotFoundError: No such message, or it is inactive, expired or not
            addressed to the user.
    """
    now = utcnow()
    async with keyed_lock(f"message:{message_id}"):
        message = await store.messages.find_by_id(message_id)
        if message is None or not is_live(message, now) or not is_addressed_to(message, user, now):
            raise NotFoundError("Message not found")
        if has_read(message, user.id):
            return message

        receipt = ReadReceipt(user_id=user.id, read_at=now)
        updated = await store.messages.update(message.id, {"read_by": [*message.read_by, receipt]})
        if updated is None:
            raise NotFoundError("Message not found")
    logger.info("platform_message_read", message_id=message.id, user_id=user.id)
    return updated
