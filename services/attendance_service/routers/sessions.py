"""Training session and attendance endpoints."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from libs.auth.dependencies import require_permission
from libs.auth.models import ClubUser
from libs.common.errors import ValidationError
from services.attendance_service.models import (
    MemberAttendance,
    SessionStats,
    TrainingSession,
)
from services.attendance_service.schemas import AttendanceUpdate, SessionCreate
from services.gateway_service.app.container import ClubContainer, get_club

router = APIRouter(prefix="/attendance", tags=["attendance"])


@router.get("/sessions", response_model=list[TrainingSession])
async def list_sessions(
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = None,
    current_user: ClubUser = Depends(require_permission("view_attendance")),
    club: ClubContainer = Depends(get_club),
):
    """All sessions, or those of one local calendar month when both are given."""
    if (month is None) != (year is None):
        raise ValidationError(["month and year must be given together"])
    if month is not None:
        return club.attendance.get_sessions_for_month(month, year)
    return club.attendance.get_all_sessions()


@router.get("/sessions/{session_id}", response_model=TrainingSession)
async def get_session(
    session_id: uuid.UUID,
    current_user: ClubUser = Depends(require_permission("view_attendance")),
    club: ClubContainer = Depends(get_club),
):
    return club.attendance.get_session(session_id)


@router.get("/sessions/{session_id}/stats", response_model=SessionStats)
async def get_session_stats(
    session_id: uuid.UUID,
    current_user: ClubUser = Depends(require_permission("view_attendance")),
    club: ClubContainer = Depends(get_club),
):
    return club.attendance.get_session_stats(session_id)


@router.get("/members/{member_id}", response_model=MemberAttendance)
async def get_member_attendance(
    member_id: uuid.UUID,
    current_user: ClubUser = Depends(require_permission("view_attendance")),
    club: ClubContainer = Depends(get_club),
):
    club.members.get_member(member_id)
    return club.attendance.get_member_attendance(member_id)


@router.post(
    "/sessions", response_model=TrainingSession, status_code=status.HTTP_201_CREATED
)
async def create_session(
    payload: SessionCreate,
    current_user: ClubUser = Depends(require_permission("manage_attendance")),
    club: ClubContainer = Depends(get_club),
):
    return club.attendance.create_session(
        payload.date, payload.time, payload.location, payload.notes
    )


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(
    session_id: uuid.UUID,
    current_user: ClubUser = Depends(require_permission("manage_attendance")),
    club: ClubContainer = Depends(get_club),
):
    """Idempotent: deleting an unknown session also returns 204."""
    club.attendance.delete_session(session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/sessions/{session_id}/members/{member_id}", response_model=TrainingSession)
async def set_attendance(
    session_id: uuid.UUID,
    member_id: uuid.UUID,
    payload: AttendanceUpdate,
    current_user: ClubUser = Depends(require_permission("manage_attendance")),
    club: ClubContainer = Depends(get_club),
):
    return club.attendance.set_attendance(session_id, member_id, payload.status)


@router.delete(
    "/sessions/{session_id}/members/{member_id}", response_model=TrainingSession
)
async def clear_attendance(
    session_id: uuid.UUID,
    member_id: uuid.UUID,
    current_user: ClubUser = Depends(require_permission("manage_attendance")),
    club: ClubContainer = Depends(get_club),
):
    club.attendance.clear_attendance(session_id, member_id)
    return club.attendance.get_session(session_id)
