"""Request schemas for the attendance API."""

import datetime as dt
from typing import Optional

from pydantic import BaseModel
from services.attendance_service.models import AttendanceStatus


class SessionCreate(BaseModel):
    # Missing fields are reported together by the ledger
    date: Optional[dt.date] = None
    time: Optional[dt.time] = None
    location: Optional[str] = None
    notes: str = ""


class AttendanceUpdate(BaseModel):
    status: AttendanceStatus
