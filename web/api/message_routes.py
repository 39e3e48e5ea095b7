"""Direct messages: inbox, threads, sending. Poll-based."""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import Field

from talent.errors import ValidationError
from talent.services.conversations import list_conversations, open_thread
from talent.storage import Storage, get_storage
from web.api.schemas import ApiModel, MessageOut, PublicUser
from web.api.utils import public_user
from web.auth import Principal, require_user

logger = logging.getLogger("talent.api")

router = APIRouter(prefix="/api/messages", tags=["messages"])


class MessageCreate(ApiModel):
    receiver_id: int
    content: str = Field(min_length=1, max_length=5000)


class ConversationOut(ApiModel):
    partner: Optional[PublicUser] = None
    last_message: MessageOut
    unread_count: int


class ConversationList(ApiModel):
    conversations: list[ConversationOut]


class MessageList(ApiModel):
    messages: list[MessageOut]


class MessageEnvelope(ApiModel):
    message: MessageOut


@router.get("", response_model=ConversationList)
async def get_conversations(user: Principal = Depends(require_user), storage: Storage = Depends(get_storage)):
    """One entry per partner, most recent conversation first."""
    summaries = await list_conversations(storage, user.id)
    return ConversationList(
        conversations=[
            ConversationOut(
                partner=public_user(c.partner),
                last_message=MessageOut.model_validate(c.last_message),
                unread_count=c.unread_count,
            )
            for c in summaries
        ]
    )


@router.get("/{user_id}", response_model=MessageList)
async def get_thread(user_id: int, user: Principal = Depends(require_user), storage: Storage = Depends(get_storage)):
    """Full thread with user_id, oldest first. Marks their messages to the caller as read."""
    return MessageList(messages=await open_thread(storage, user.id, user_id))


@router.post("", response_model=MessageEnvelope, status_code=201)
async def send_message(
    body: MessageCreate, user: Principal = Depends(require_user), storage: Storage = Depends(get_storage)
):
    if body.receiver_id == user.id:
        raise ValidationError(
            "Cannot send a message to yourself",
            errors=[{"path": "receiverId", "message": "Receiver must be another user"}],
        )
    if not await storage.get_user(body.receiver_id):
        raise HTTPException(404, "Receiver not found")
    message = await storage.create_message(user.id, body.receiver_id, body.content)
    logger.debug("Message %s sent %s -> %s", message.id, user.id, body.receiver_id)
    return MessageEnvelope(message=message)
