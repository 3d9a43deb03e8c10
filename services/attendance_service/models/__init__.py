"""Attendance Service models package."""

from services.attendance_service.models.core import (
    MemberAttendance,
    SessionStats,
    TrainingSession,
)
from services.attendance_service.models.enums import AttendanceStatus

__all__ = [
    "AttendanceStatus",
    "MemberAttendance",
    "SessionStats",
    "TrainingSession",
]
