"""Operator accounts. Roles are labels; there is no password check."""

import uuid

from fastapi import APIRouter, Depends, Response, status
from libs.auth.dependencies import get_current_user
from libs.auth.models import ClubUser
from services.backup_service.schemas import LoginRequest, UserCreate, UserUpdate
from services.gateway_service.app.container import ClubContainer, get_club

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/login", response_model=ClubUser)
async def login(payload: LoginRequest, club: ClubContainer = Depends(get_club)):
    """Record a login for an active user and return their permissions."""
    return club.users.login(payload.username)


@router.get("/me", response_model=ClubUser)
async def get_me(current_user: ClubUser = Depends(get_current_user)):
    return current_user


@router.get("", response_model=list[ClubUser])
async def list_users(
    current_user: ClubUser = Depends(get_current_user),
    club: ClubContainer = Depends(get_club),
):
    return club.users.get_all_users(current_user)


@router.get("/{user_id}", response_model=ClubUser)
async def get_user(
    user_id: uuid.UUID,
    current_user: ClubUser = Depends(get_current_user),
    club: ClubContainer = Depends(get_club),
):
    return club.users.get_user(current_user, user_id)


@router.post("", response_model=ClubUser, status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: UserCreate,
    current_user: ClubUser = Depends(get_current_user),
    club: ClubContainer = Depends(get_club),
):
    return club.users.create_user(current_user, **payload.model_dump())


@router.patch("/{user_id}", response_model=ClubUser)
async def update_user(
    user_id: uuid.UUID,
    payload: UserUpdate,
    current_user: ClubUser = Depends(get_current_user),
    club: ClubContainer = Depends(get_club),
):
    return club.users.update_user(
        current_user, user_id, **payload.model_dump(exclude_unset=True)
    )


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: uuid.UUID,
    current_user: ClubUser = Depends(get_current_user),
    club: ClubContainer = Depends(get_club),
):
    club.users.delete_user(current_user, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
