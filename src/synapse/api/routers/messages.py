import uuid
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from synapse.api import deps
from synapse.models.user import User
from synapse.schemas.message import MessageCreate, MessageRead, MessageSendResult
from synapse.services.message import (
    send_message,
    get_transcript,
    get_message_or_404,
    MessageNotFoundError,
)
from synapse.core.errors import ValidationError, UserNotFoundError

router = APIRouter(prefix="/messages", tags=["messages"])


@router.post("", response_model=MessageSendResult, status_code=status.HTTP_201_CREATED,
             include_in_schema=False)
@router.post("/", response_model=MessageSendResult, status_code=status.HTTP_201_CREATED,
             summary="Send a message",
             description="Send a message to another user, creating the chat on first contact.")
async def send_message_route(
    payload: MessageCreate,
    session: AsyncSession = Depends(deps.get_db),
    current_user: User | None = Depends(deps.get_current_user),
):
    deps.ensure_caller(current_user, payload.sender_id)
    try:
        result = await send_message(
            session,
            sender_id=payload.sender_id,
            receiver_id=payload.receiver_id,
            text=payload.text,
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.detail)
    except UserNotFoundError:
        raise HTTPException(status_code=404, detail="User not found")
    await session.commit()
    return MessageSendResult(thread_id=result.thread_id, message_id=result.message_id)


@router.get("/item/{message_id}", response_model=MessageRead, summary="Get a message")
async def get_message_route(
    message_id: uuid.UUID,
    session: AsyncSession = Depends(deps.get_db),
    current_user: User | None = Depends(deps.get_current_user),
):
    try:
        msg = await get_message_or_404(session, message_id)
    except MessageNotFoundError:
        raise HTTPException(status_code=404, detail="Message not found")
    deps.ensure_caller(current_user, msg.sender_id, msg.receiver_id)
    return msg  # type: ignore


@router.get("/{user_id}/{friend_id}", response_model=list[MessageRead],
            summary="Conversation transcript",
            description="All messages between two users, oldest first. Empty when they never talked.")
async def get_transcript_route(
    user_id: uuid.UUID,
    friend_id: uuid.UUID,
    session: AsyncSession = Depends(deps.get_db),
    current_user: User | None = Depends(deps.get_current_user),
):
    deps.ensure_caller(current_user, user_id, friend_id)
    return await get_transcript(session, user_id, friend_id)
