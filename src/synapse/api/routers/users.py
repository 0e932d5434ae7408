import uuid
from fastapi import APIRouter, Depends, HTTPException, status, Response
from sqlalchemy.ext.asyncio import AsyncSession
from synapse.api import deps
from synapse.models.user import User
from synapse.schemas.user import UserCreate, UserRead, UserUpdate, UserEmailUpdate, UserEmailLookup
from synapse.services.user import (
    create_user,
    delete_user,
    get_user_or_404,
    get_user_by_email_or_404,
    update_user,
    update_user_email,
    list_users,
    DuplicateEmailError,
    UserNotFoundError,
)

router = APIRouter(prefix="/users", tags=["users"])

@router.get("/me", response_model=UserRead, summary="Get current user")
async def get_current_user_route(current_user: User | None = Depends(deps.get_current_user)):
    if not current_user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")
    return current_user  # type: ignore

@router.post("/", response_model=UserRead, status_code=status.HTTP_201_CREATED,
             summary="Create a user",
             description="Create a new user profile. Email must be unique.")
async def create_user_route(payload: UserCreate, session: AsyncSession = Depends(deps.get_db)):
    try:
        user = await create_user(session, payload)
        await session.commit()
        return user  # type: ignore
    except DuplicateEmailError:
        # Let FastAPI turn into JSON response
        raise HTTPException(status_code=409, detail="Email already registered")


@router.get("/", response_model=list[UserRead], summary="List users",
            description="List all users ordered by role, then creation time.")
async def list_users_route(session: AsyncSession = Depends(deps.get_db)):
    return await list_users(session)


@router.post("/email", response_model=UserRead, summary="Find a user by email")
async def get_user_by_email_route(payload: UserEmailLookup, session: AsyncSession = Depends(deps.get_db)):
    try:
        return await get_user_by_email_or_404(session, payload.email)
    except UserNotFoundError:
        raise HTTPException(status_code=404, detail="User not found")


@router.get("/{user_id}", response_model=UserRead, summary="Get a user")
async def get_user_route(user_id: uuid.UUID, session: AsyncSession = Depends(deps.get_db)):
    try:
        return await get_user_or_404(session, user_id)
    except UserNotFoundError:
        raise HTTPException(status_code=404, detail="User not found")


@router.patch("/{user_id}", response_model=UserRead, summary="Update a user profile")
async def update_user_route(
    user_id: uuid.UUID,
    payload: UserUpdate,
    session: AsyncSession = Depends(deps.get_db),
    current_user: User | None = Depends(deps.get_current_user),
):
    deps.ensure_caller(current_user, user_id)
    try:
        user = await update_user(
            session, user_id, name=payload.name, user_image=payload.user_image, role=payload.role
        )
        await session.commit()
        return user
    except UserNotFoundError:
        raise HTTPException(status_code=404, detail="User not found")


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user_route(
    user_id: uuid.UUID,
    session: AsyncSession = Depends(deps.get_db),
    current_user: User | None = Depends(deps.get_current_user),
):
    deps.ensure_caller(current_user, user_id)
    try:
        await delete_user(session, user_id)
        await session.commit()
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except UserNotFoundError:
        raise HTTPException(status_code=404, detail="User not found")


@router.patch("/{user_id}/email", response_model=UserRead,
              summary="Update user email",
              description="Change a user's email address. Fails if new email already exists.")
async def update_user_email_route(
    user_id: uuid.UUID,
    payload: UserEmailUpdate,
    session: AsyncSession = Depends(deps.get_db),
    current_user: User | None = Depends(deps.get_current_user),
):
    deps.ensure_caller(current_user, user_id)
    try:
        user = await update_user_email(session, user_id, payload.email)
        await session.commit()
        return user
    except UserNotFoundError:
        raise HTTPException(status_code=404, detail="User not found")
    except DuplicateEmailError:
        raise HTTPException(status_code=409, detail="Email already registered")
