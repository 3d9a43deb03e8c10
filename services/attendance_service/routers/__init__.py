"""Attendance service routers."""

from services.attendance_service.routers.sessions import router as attendance_router

__all__ = ["attendance_router"]
