"""Reminders service business logic."""

from services.reminders_service.services.engine import ReminderEngine, build_reminders

__all__ = ["ReminderEngine", "build_reminders"]
