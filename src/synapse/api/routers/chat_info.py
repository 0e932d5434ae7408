import uuid
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from synapse.api import deps
from synapse.models.user import User
from synapse.schemas.thread import ChatInfoRead, UnreadStatus, ReadReceiptResult
from synapse.services.thread import (
    list_threads_for_user,
    has_unread_messages,
    mark_thread_read,
    ThreadNotFoundError,
    NotParticipantError,
)

router = APIRouter(prefix="/chat-info", tags=["chat-info"])


@router.get("/unread/{user_id}", response_model=UnreadStatus,
            summary="Whether a user has unread messages in any chat")
async def has_unread_route(
    user_id: uuid.UUID,
    session: AsyncSession = Depends(deps.get_db),
    current_user: User | None = Depends(deps.get_current_user),
):
    deps.ensure_caller(current_user, user_id)
    return UnreadStatus(has_new_messages=await has_unread_messages(session, user_id))


@router.patch("/read/{chat_id}/{user_id}", response_model=ReadReceiptResult,
              summary="Mark a chat as read",
              description="Reset the user's unread counter on the chat. Repeating the call is a no-op.")
async def mark_read_route(
    chat_id: uuid.UUID,
    user_id: uuid.UUID,
    session: AsyncSession = Depends(deps.get_db),
    current_user: User | None = Depends(deps.get_current_user),
):
    deps.ensure_caller(current_user, user_id)
    try:
        modified = await mark_thread_read(session, chat_id, user_id)
    except ThreadNotFoundError:
        raise HTTPException(status_code=404, detail="Chat not found")
    except NotParticipantError:
        raise HTTPException(status_code=403, detail="Forbidden: Access Denied")
    await session.commit()
    message = "Unread messages cleared" if modified else "No unread messages"
    return ReadReceiptResult(message=message, modified=modified)


@router.get("/{user_id}", response_model=list[ChatInfoRead],
            summary="List a user's chats",
            description="Chats the user takes part in, most recent message first.")
async def list_chats_route(
    user_id: uuid.UUID,
    session: AsyncSession = Depends(deps.get_db),
    current_user: User | None = Depends(deps.get_current_user),
):
    return await list_threads_for_user(session, user_id)
