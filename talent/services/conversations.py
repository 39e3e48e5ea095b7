"""Inbox view over the flat message log.

A user's messages are grouped by counterpart into one summary per partner,
carrying the latest message and the number of unread messages addressed to the
user. Read state only changes through ``open_thread``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

from talent.models import Message, User
from talent.storage import Storage


@dataclass
class ConversationSummary:
    partner_id: int
    partner: Optional[User]
    last_message: Message
    unread_count: int = 0


def _recency(message: Message) -> tuple:
    return (message.created_at, message.id)


def aggregate_conversations(
    user_id: int,
    messages: Iterable[Message],
    partners: Mapping[int, User],
) -> list[ConversationSummary]:
    """Group messages by partner, newest conversation first. Does not touch is_read."""
    conversations: dict[int, ConversationSummary] = {}
    for message in messages:
        partner_id = message.partner_of(user_id)
        unread = 1 if message.receiver_id == user_id and not message.is_read else 0
        convo = conversations.get(partner_id)
        if convo is None:
            conversations[partner_id] = ConversationSummary(
                partner_id=partner_id,
                partner=partners.get(partner_id),
                last_message=message,
                unread_count=unread,
            )
            continue
        # Equal timestamps fall back to id so the result doesn't depend on input order
        if _recency(message) > _recency(convo.last_message):
            convo.last_message = message
        convo.unread_count += unread
    return sorted(conversations.values(), key=lambda c: _recency(c.last_message), reverse=True)


async def list_conversations(storage: Storage, user_id: int) -> list[ConversationSummary]:
    messages = await storage.get_messages_by_user(user_id)
    partners = await storage.get_users(m.partner_of(user_id) for m in messages)
    return aggregate_conversations(user_id, messages, partners)


async def open_thread(storage: Storage, user_id: int, partner_id: int) -> list[Message]:
    """Return the thread oldest first, marking messages addressed to user_id as read.

    Safe to call repeatedly; already-read messages are left alone.
    """
    await storage.mark_thread_read(user_id, partner_id)
    return await storage.get_messages_between(user_id, partner_id)
