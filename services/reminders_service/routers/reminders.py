"""Reminder endpoints. Reminders are derived on demand and never stored."""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends
from libs.auth.dependencies import require_permission
from libs.auth.models import ClubUser
from pydantic import BaseModel
from services.gateway_service.app.container import ClubContainer, get_club
from services.reminders_service.models import Reminder

router = APIRouter(prefix="/reminders", tags=["reminders"])


class LatestReminders(BaseModel):
    generated_at: Optional[datetime]
    reminders: list[Reminder]


@router.get("", response_model=list[Reminder])
async def run_reminder_checks(
    current_user: ClubUser = Depends(require_permission("view_notifications")),
    club: ClubContainer = Depends(get_club),
):
    """Recompute reminders now."""
    return club.reminders.run_checks()


@router.get("/latest", response_model=LatestReminders)
async def get_latest_reminders(
    current_user: ClubUser = Depends(require_permission("view_notifications")),
    club: ClubContainer = Depends(get_club),
):
    """Result of the last check (scheduled or manual), without recomputing."""
    return LatestReminders(
        generated_at=club.reminders.latest_at, reminders=club.reminders.latest
    )
