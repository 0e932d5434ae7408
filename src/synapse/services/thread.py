"""Thread store services: read receipts and per-user chat listings.

Adds not-found / participant checks on top of the repository helpers in
``synapse.repositories.thread``. Message sending lives in
``synapse.services.message``.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from sqlalchemy.ext.asyncio import AsyncSession

from synapse.core.errors import ThreadNotFoundError, NotParticipantError
from synapse.models.thread import Thread
from synapse.models.user import User
from synapse.repositories import thread as thread_repo

__all__ = [
    "ThreadNotFoundError",
    "NotParticipantError",
    "ThreadSummary",
    "get_thread_or_404",
    "mark_thread_read",
    "list_threads_for_user",
    "has_unread_messages",
]

logger = logging.getLogger("synapse.services.thread")


@dataclass(frozen=True)
class ThreadSummary:
    """One row of a user's chat list, seen from that user's side."""
    id: uuid.UUID
    other_user: User
    last_message: str
    last_message_at: datetime
    last_message_sender_id: uuid.UUID
    unread_count: int


async def get_thread_or_404(session: AsyncSession, thread_id: uuid.UUID) -> Thread:
    thread = await thread_repo.get_by_id(session, thread_id)
    if not thread:
        raise ThreadNotFoundError()
    return thread


async def mark_thread_read(session: AsyncSession, thread_id: uuid.UUID, user_id: uuid.UUID) -> int:
    """Zero ``user_id``'s unread counter on a thread.

    Returns the number of counters modified: 1 if there was something to
    clear, 0 if it was already zero (still a success). Raises
    ``ThreadNotFoundError`` for an unknown thread and ``NotParticipantError``
    when the user is not part of it.
    """
    thread = await get_thread_or_404(session, thread_id)
    if not thread.has_participant(user_id):
        raise NotParticipantError()
    modified = await thread_repo.reset_unread(session, thread_id, user_id)
    logger.info(
        "chat_info.read",
        extra={"thread_id": thread_id, "user_id": user_id, "modified": modified},
    )
    return modified


async def list_threads_for_user(session: AsyncSession, user_id: uuid.UUID) -> list[ThreadSummary]:
    rows = await thread_repo.list_for_user(session, user_id)
    return [
        ThreadSummary(
            id=thread.id,
            other_user=other,
            last_message=thread.last_message,
            last_message_at=thread.last_message_at,
            last_message_sender_id=thread.last_message_sender_id,
            unread_count=unread,
        )
        for thread, other, unread in rows
    ]


async def has_unread_messages(session: AsyncSession, user_id: uuid.UUID) -> bool:
    return await thread_repo.has_unread(session, user_id)
