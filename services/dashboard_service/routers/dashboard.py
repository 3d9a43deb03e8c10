"""Dashboard chart data."""

from fastapi import APIRouter, Depends, Query
from libs.auth.dependencies import require_permission
from libs.auth.models import ClubUser
from services.dashboard_service.models import (
    AttendancePoint,
    PositionCount,
    RevenuePoint,
)
from services.gateway_service.app.container import ClubContainer, get_club

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/revenue", response_model=list[RevenuePoint])
async def get_revenue(
    months: int = Query(6, ge=1, le=24),
    current_user: ClubUser = Depends(require_permission("view_dashboard")),
    club: ClubContainer = Depends(get_club),
):
    return club.dashboard.revenue(months)


@router.get("/attendance", response_model=list[AttendancePoint])
async def get_attendance(
    months: int = Query(6, ge=1, le=24),
    current_user: ClubUser = Depends(require_permission("view_dashboard")),
    club: ClubContainer = Depends(get_club),
):
    return club.dashboard.attendance_rates(months)


@router.get("/positions", response_model=list[PositionCount])
async def get_positions(
    current_user: ClubUser = Depends(require_permission("view_dashboard")),
    club: ClubContainer = Depends(get_club),
):
    return club.dashboard.positions()
