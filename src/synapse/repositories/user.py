import uuid
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Optional
from synapse.models.user import User

async def get_by_id(session: AsyncSession, id: uuid.UUID) -> Optional[User]:
    res = await session.execute(select(User).where(User.id == id))
    return res.scalar_one_or_none()

async def get_by_email(session: AsyncSession, email: str) -> Optional[User]:
    res = await session.execute(select(User).where(User.email == email))
    return res.scalar_one_or_none()

async def create(
    session: AsyncSession,
    email: str,
    id: uuid.UUID,
    *,
    name: str = "",
    user_image: str | None = None,
    role: str = "user",
) -> User:
    user = User(email=email, id=id, name=name, user_image=user_image, role=role)
    session.add(user)
    await session.flush()
    return user

async def list_all(session: AsyncSession) -> list[User]:
    res = await session.execute(select(User).order_by(User.role, User.created_at))
    return list(res.scalars().all())
