"""Attendance service business logic."""

from services.attendance_service.services.ledger import SESSIONS_KEY, AttendanceLedger

__all__ = ["SESSIONS_KEY", "AttendanceLedger"]
