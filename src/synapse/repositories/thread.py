"""Repository helpers for the Thread model (the per-pair chat summary).

Every mutation here is a single statement against a single row so that
concurrent requests on the same thread never lose an update:

* creation is an insert-if-absent keyed on the canonical participant pair;
* unread counters move through ``count = count + 1`` / ``count = 0``
  updates on one ``thread_unread`` row at a time;
* summary fields are plain last-write-wins ``UPDATE`` statements.

Helpers flush but never commit; the caller owns the transaction.
"""

import uuid
from datetime import datetime
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from sqlalchemy import select, update, case, func, and_, or_
from sqlalchemy.dialects import postgresql, sqlite

from synapse.core.errors import ValidationError
from synapse.models.thread import Thread, ThreadUnread, canonical_pair
from synapse.models.user import User

__all__ = [
    "get_by_id",
    "find_by_pair",
    "create",
    "record_new_message",
    "increment_unread",
    "reset_unread",
    "get_unread_counters",
    "list_for_user",
    "has_unread",
]

_PAIR_COLUMNS = ["participant_low", "participant_high"]

# dialects offering INSERT .. ON CONFLICT DO NOTHING
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


async def get_by_id(session: AsyncSession, thread_id: uuid.UUID) -> Optional[Thread]:
    """Return a Thread by id or None if it does not exist."""
    res = await session.execute(select(Thread).where(Thread.id == thread_id))
    return res.scalar_one_or_none()


async def find_by_pair(session: AsyncSession, user_a: uuid.UUID, user_b: uuid.UUID) -> Optional[Thread]:
    """Return the Thread shared by two users, regardless of argument order."""
    low, high = canonical_pair(user_a, user_b)
    res = await session.execute(
        select(Thread).where(Thread.participant_low == low, Thread.participant_high == high)
    )
    return res.scalar_one_or_none()


async def _insert_if_absent(session: AsyncSession, values: dict) -> bool:
    insert = _UPSERT_INSERTS.get(session.get_bind().dialect.name)
    if insert is not None:
        stmt = (
            insert(Thread)
            .values(**values)
            .on_conflict_do_nothing(index_elements=_PAIR_COLUMNS)
            .returning(Thread.id)
        )
        res = await session.execute(stmt)
        return res.scalar_one_or_none() is not None
    # Other backends: let the unique constraint decide inside a savepoint.
    try:
        async with session.begin_nested():
            session.add(Thread(**values))
    except IntegrityError:
        return False
    return True


async def create(
    session: AsyncSession,
    *,
    sender_id: uuid.UUID,
    receiver_id: uuid.UUID,
    text: str,
    at: datetime,
    id: uuid.UUID | None = None,
) -> Optional[Thread]:
    """Create the thread for ``(sender_id, receiver_id)`` seeded from its first message.

    Parameters:
        session: active AsyncSession.
        sender_id: author of the first message; their counter starts at 0.
        receiver_id: the other participant; their counter starts at 1.
        text: first message text, copied into the summary.
        at: first message timestamp (also used as ``created_at``).
        id: optional explicit UUID.

    Returns the new Thread, or None when a thread for the pair already
    exists (including one created concurrently by another request). Raises
    ``ValidationError`` when both participants are the same user.
    """
    if sender_id == receiver_id:
        raise ValidationError("A chat needs two distinct participants")
    low, high = canonical_pair(sender_id, receiver_id)
    thread_id = id or uuid.uuid4()
    created = await _insert_if_absent(
        session,
        {
            "id": thread_id,
            "participant_low": low,
            "participant_high": high,
            "last_message": text,
            "last_message_at": at,
            "last_message_sender_id": sender_id,
            "created_at": at,
        },
    )
    if not created:
        return None
    session.add_all([
        ThreadUnread(thread_id=thread_id, user_id=sender_id, count=0),
        ThreadUnread(thread_id=thread_id, user_id=receiver_id, count=1),
    ])
    await session.flush()
    return await get_by_id(session, thread_id)


async def increment_unread(session: AsyncSession, thread_id: uuid.UUID, user_id: uuid.UUID) -> int:
    res = await session.execute(
        update(ThreadUnread)
        .where(ThreadUnread.thread_id == thread_id, ThreadUnread.user_id == user_id)
        .values(count=ThreadUnread.count + 1)
    )
    return res.rowcount or 0


async def reset_unread(session: AsyncSession, thread_id: uuid.UUID, user_id: uuid.UUID) -> int:
    """Zero one participant's counter; returns 0 if it was already zero."""
    res = await session.execute(
        update(ThreadUnread)
        .where(
            ThreadUnread.thread_id == thread_id,
            ThreadUnread.user_id == user_id,
            ThreadUnread.count != 0,
        )
        .values(count=0)
    )
    return res.rowcount or 0


async def record_new_message(
    session: AsyncSession,
    thread_id: uuid.UUID,
    *,
    sender_id: uuid.UUID,
    receiver_id: uuid.UUID,
    text: str,
    at: datetime,
) -> None:
    """Point the summary at a new message and move both counters.

    The receiver gains one unread message; sending implies the sender has
    read everything up to now, so their counter drops to zero.
    """
    await session.execute(
        update(Thread)
        .where(Thread.id == thread_id)
        .values(last_message=text, last_message_at=at, last_message_sender_id=sender_id)
    )
    await increment_unread(session, thread_id, receiver_id)
    await reset_unread(session, thread_id, sender_id)


async def get_unread_counters(session: AsyncSession, thread_id: uuid.UUID) -> dict[uuid.UUID, int]:
    res = await session.execute(
        select(ThreadUnread.user_id, ThreadUnread.count).where(ThreadUnread.thread_id == thread_id)
    )
    return {user_id: count for user_id, count in res.all()}


async def list_for_user(session: AsyncSession, user_id: uuid.UUID) -> list[tuple[Thread, User, int]]:
    """Return ``(Thread, other participant, own unread count)`` rows, newest first.

    Threads whose other participant is missing from ``users`` are skipped.
    Each call runs a fresh query.
    """
    other_id = case(
        (Thread.participant_low == user_id, Thread.participant_high),
        else_=Thread.participant_low,
    )
    stmt = (
        select(Thread, User, func.coalesce(ThreadUnread.count, 0))
        .join(User, User.id == other_id)
        .outerjoin(
            ThreadUnread,
            and_(ThreadUnread.thread_id == Thread.id, ThreadUnread.user_id == user_id),
        )
        .where(or_(Thread.participant_low == user_id, Thread.participant_high == user_id))
        .order_by(Thread.last_message_at.desc(), Thread.id)
    )
    res = await session.execute(stmt)
    return [(thread, other, int(unread)) for thread, other, unread in res.all()]


async def has_unread(session: AsyncSession, user_id: uuid.UUID) -> bool:
    stmt = (
        select(ThreadUnread.thread_id)
        .where(ThreadUnread.user_id == user_id, ThreadUnread.count > 0)
        .limit(1)
    )
    res = await session.execute(stmt)
    return res.first() is not None
