import uuid
from datetime import datetime
from pydantic import BaseModel
from .base import ORMBase
from .user import UserPublic

class ChatInfoRead(ORMBase):
    """A thread as listed for one of its participants."""
    id: uuid.UUID
    other_user: UserPublic
    last_message: str
    last_message_at: datetime
    last_message_sender_id: uuid.UUID
    unread_count: int


class UnreadStatus(BaseModel):
    has_new_messages: bool


class ReadReceiptResult(BaseModel):
    success: bool = True
    message: str
    modified: int
