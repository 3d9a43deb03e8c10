"""Member roster endpoints."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from libs.auth.dependencies import require_permission
from libs.auth.models import ClubUser
from services.gateway_service.app.container import ClubContainer, get_club
from services.members_service.models import Member
from services.members_service.schemas import MemberCreate, MemberUpdate

router = APIRouter(prefix="/members", tags=["members"])


@router.get("", response_model=list[Member])
async def list_members(
    q: Optional[str] = None,
    current_user: ClubUser = Depends(require_permission("view_members")),
    club: ClubContainer = Depends(get_club),
):
    """List the roster, optionally filtered by name, email or phone."""
    if q:
        return club.members.search_members(q)
    return club.members.get_all_members()


@router.get("/{member_id}", response_model=Member)
async def get_member(
    member_id: uuid.UUID,
    current_user: ClubUser = Depends(require_permission("view_members")),
    club: ClubContainer = Depends(get_club),
):
    return club.members.get_member(member_id)


@router.post("", response_model=Member, status_code=status.HTTP_201_CREATED)
async def create_member(
    payload: MemberCreate,
    current_user: ClubUser = Depends(require_permission("edit_members")),
    club: ClubContainer = Depends(get_club),
):
    """Add a member; this month's dues obligation is generated right away."""
    return club.members.add_member(**payload.model_dump(exclude_none=True))


@router.patch("/{member_id}", response_model=Member)
async def update_member(
    member_id: uuid.UUID,
    payload: MemberUpdate,
    current_user: ClubUser = Depends(require_permission("edit_members")),
    club: ClubContainer = Depends(get_club),
):
    return club.members.update_member(member_id, **payload.model_dump(exclude_unset=True))


@router.delete("/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_member(
    member_id: uuid.UUID,
    current_user: ClubUser = Depends(require_permission("delete_members")),
    club: ClubContainer = Depends(get_club),
):
    club.members.remove_member(member_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
