"""Platform message reader router: /api/messages/*."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from skillswap.auth.dependencies import get_current_user
from skillswap.dependencies import get_record_store
from skillswap.messages import service
from skillswap.store import RecordStore
from skillswap.store.records import MessagePriority, MessageRecord, MessageType, UserRecord

router = APIRouter(prefix="/api/messages", tags=["Messages"])


class InboxMessage(BaseModel):
    id: str
    title: str
    content: str
    type: MessageType
    priority: MessagePriority
    expires_at: datetime | None
    created_at: datetime
    is_read: bool


class InboxResponse(BaseModel):
    messages: list[InboxMessage]


class ReadResponse(BaseModel):
    message: str
    data: InboxMessage


def _inbox_item(message: MessageRecord, user: UserRecord) -> InboxMessage:
    return InboxMessage(
        id=message.id,
        title=message.title,
        content=message.content,
        type=message.type,
        priority=message.priority,
        expires_at=message.expires_at,
        created_at=message.created_at,
        is_read=service.has_read(message, user.id),
    )


@router.get("", response_model=InboxResponse)
async def inbox(
    user: UserRecord = Depends(get_current_user),
    store: RecordStore = Depends(get_record_store),
) -> InboxResponse:
    """Messages addressed to the caller."""
    messages = await service.messages_for_user(store, user)
    return InboxResponse(messages=[_inbox_item(m, user) for m in messages])


@router.post("/{message_id}/read", response_model=ReadResponse)
async def mark_read(
    message_id: str,
    user: UserRecord = Depends(get_current_user),
    store: RecordStore = Depends(get_record_store),
) -> ReadResponse:
    message = await service.mark_read(store, user, message_id)
    return ReadResponse(message="Message marked as read", data=_inbox_item(message, user))
