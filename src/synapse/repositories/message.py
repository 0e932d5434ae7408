"""Repository helpers for the Message model.

Messages form an append-only log: there are deliberately no update or delete
helpers in this module.
"""

import uuid
from datetime import datetime
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from synapse.models.message import Message

__all__ = [
    "get_by_id",
    "append",
    "list_for_thread",
]


async def get_by_id(session: AsyncSession, message_id: uuid.UUID) -> Optional[Message]:
    """Return a Message by id or None if it does not exist."""
    res = await session.execute(select(Message).where(Message.id == message_id))
    return res.scalar_one_or_none()


async def append(
    session: AsyncSession,
    *,
    thread_id: uuid.UUID,
    sender_id: uuid.UUID,
    receiver_id: uuid.UUID,
    text: str,
    at: datetime,
    id: uuid.UUID | None = None,
) -> Message:
    """Append a Message to a thread's log.

    Parameters:
        session: active AsyncSession.
        thread_id: owning thread UUID (must exist or hit FK constraint on flush).
        sender_id / receiver_id: the two participants, in send direction.
        text: message payload.
        at: server-assigned timestamp stored as ``created_at``.
        id: optional explicit UUID.

    Returns the persisted Message (flushed, not committed).
    """
    message = Message(
        thread_id=thread_id,
        sender_id=sender_id,
        receiver_id=receiver_id,
        text=text,
        created_at=at,
        **({"id": id} if id else {})
    )
    session.add(message)
    await session.flush()
    return message


async def list_for_thread(session: AsyncSession, thread_id: uuid.UUID) -> list[Message]:
    """Return the transcript of a thread, oldest first."""
    stmt = (
        select(Message)
        .where(Message.thread_id == thread_id)
        .order_by(Message.created_at, Message.id)
    )
    res = await session.execute(stmt)
    return list(res.scalars().all())
