"""Enum definitions for attendance service models."""

import enum


class AttendanceStatus(str, enum.Enum):
    PRESENT = "present"
    ABSENT = "absent"
    JUSTIFIED = "justified"
