import uuid
from datetime import datetime
from pydantic import BaseModel, Field, AliasChoices, field_validator
from .base import ORMBase

class MessageCreate(BaseModel):
    # Presence / blankness is checked by the send service so that a missing
    # field is reported as 400 rather than a schema 422.
    sender_id: uuid.UUID | None = Field(default=None, validation_alias=AliasChoices("senderId", "sender_id"))
    receiver_id: uuid.UUID | None = Field(default=None, validation_alias=AliasChoices("receiverId", "receiver_id"))
    text: str | None = None

    @field_validator("sender_id", "receiver_id", mode="before")
    @classmethod
    def _blank_as_missing(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class MessageRead(ORMBase):
    id: uuid.UUID
    thread_id: uuid.UUID
    sender_id: uuid.UUID
    receiver_id: uuid.UUID
    text: str
    created_at: datetime


class MessageSendResult(BaseModel):
    success: bool = True
    thread_id: uuid.UUID
    message_id: uuid.UUID
