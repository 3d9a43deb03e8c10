"""Reminders service routers."""

from services.reminders_service.routers.reminders import router as reminders_router

__all__ = ["reminders_router"]
