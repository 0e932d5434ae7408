"""Message service layer.

Hosts the send-message transaction: locate-or-create the pair's thread,
move its summary and unread counters, and append the message to the log.
All writes go through one ``AsyncSession``; the router commits them
together, so a failed append never leaves a half-updated thread behind.
"""
from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import NamedTuple
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from synapse.core.config import get_settings
from synapse.core.errors import (
    InternalError,
    MessageNotFoundError,
    ValidationError,
)
from synapse.models.message import Message
from synapse.models.thread import Thread
from synapse.repositories import message as message_repo
from synapse.repositories import thread as thread_repo
from synapse.services.user import get_user_or_404

__all__ = [
    "MessageNotFoundError",
    "SendResult",
    "send_message",
    "get_transcript",
    "get_message_or_404",
]

logger = logging.getLogger("synapse.services.messaging")


class SendResult(NamedTuple):
    thread_id: uuid.UUID
    message_id: uuid.UUID
    thread_created: bool


def _validate(sender_id: uuid.UUID | None, receiver_id: uuid.UUID | None, text: str | None) -> None:
    if not sender_id or not receiver_id or text is None or not text.strip():
        raise ValidationError()
    if sender_id == receiver_id:
        raise ValidationError("Cannot send a message to yourself")
    limit = get_settings().message_max_length
    if len(text) > limit:
        raise ValidationError(f"Message exceeds {limit} characters")


async def send_message(
    session: AsyncSession,
    *,
    sender_id: uuid.UUID | None,
    receiver_id: uuid.UUID | None,
    text: str | None,
) -> SendResult:
    """Send ``text`` from ``sender_id`` to ``receiver_id``.

    Steps, in order: validate input, resolve both users, look up the pair's
    thread, create it (first message) or record the message on it, append
    the message. The thread summary and the message share one timestamp.

    Raises ``ValidationError`` for missing/blank fields or self-messaging,
    ``UserNotFoundError`` for unknown participants and ``InternalError`` for
    any storage failure. Nothing is committed here.
    """
    _validate(sender_id, receiver_id, text)
    try:
        await get_user_or_404(session, sender_id)
        await get_user_or_404(session, receiver_id)

        at = datetime.now(timezone.utc)
        thread: Thread | None = await thread_repo.find_by_pair(session, sender_id, receiver_id)
        created = False
        if thread is None:
            thread = await thread_repo.create(
                session, sender_id=sender_id, receiver_id=receiver_id, text=text, at=at
            )
            created = thread is not None
            if thread is None:
                # lost the creation race; the pair's thread exists now
                logger.info(
                    "thread.create_conflict",
                    extra={"sender_id": sender_id, "receiver_id": receiver_id},
                )
                thread = await thread_repo.find_by_pair(session, sender_id, receiver_id)
                if thread is None:
                    raise InternalError("Chat could not be created")
        if created:
            logger.info("thread.created", extra={"thread_id": thread.id})
        else:
            await thread_repo.record_new_message(
                session,
                thread.id,
                sender_id=sender_id,
                receiver_id=receiver_id,
                text=text,
                at=at,
            )
        message = await message_repo.append(
            session,
            thread_id=thread.id,
            sender_id=sender_id,
            receiver_id=receiver_id,
            text=text,
            at=at,
        )
    except SQLAlchemyError as exc:
        logger.exception(
            "storage.failure",
            extra={"operation": "messages.send", "sender_id": sender_id, "receiver_id": receiver_id},
        )
        raise InternalError() from exc

    logger.info(
        "messages.send",
        extra={
            "thread_id": thread.id,
            "message_id": message.id,
            "sender_id": sender_id,
            "receiver_id": receiver_id,
            "chars": len(text),
        },
    )
    return SendResult(thread_id=thread.id, message_id=message.id, thread_created=created)


async def get_transcript(session: AsyncSession, user_id: uuid.UUID, friend_id: uuid.UUID) -> list[Message]:
    """All messages exchanged by two users, oldest first; empty if they never talked."""
    thread = await thread_repo.find_by_pair(session, user_id, friend_id)
    if thread is None:
        return []
    return await message_repo.list_for_thread(session, thread.id)


async def get_message_or_404(session: AsyncSession, message_id: uuid.UUID) -> Message:
    msg = await message_repo.get_by_id(session, message_id)
    if not msg:
        raise MessageNotFoundError()
    return msg
