import uuid
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, AliasChoices
from typing import Optional
from .base import ORMBase

class UserCreate(BaseModel):
    # Optional explicit id to allow deterministic user creation in tests/tools.
    # If omitted, server generates a UUID.
    id: Optional[uuid.UUID] = None
    email: EmailStr
    name: str = ""
    user_image: Optional[str] = Field(default=None, validation_alias=AliasChoices("user_image", "userImage"))
    role: str = "user"

class UserRead(ORMBase):
    id: uuid.UUID
    email: EmailStr
    name: str
    user_image: Optional[str] = None
    role: str
    created_at: datetime


class UserPublic(ORMBase):
    """Profile fields other participants get to see in chat listings."""
    id: uuid.UUID
    name: str
    user_image: Optional[str] = None
    role: str


class UserUpdate(BaseModel):
    name: Optional[str] = None
    user_image: Optional[str] = Field(default=None, validation_alias=AliasChoices("user_image", "userImage"))
    role: Optional[str] = None


class UserEmailUpdate(BaseModel):
    email: EmailStr


class UserEmailLookup(BaseModel):
    email: EmailStr
