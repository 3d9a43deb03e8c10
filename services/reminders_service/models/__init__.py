"""Reminders Service models package."""

from services.reminders_service.models.core import Reminder
from services.reminders_service.models.enums import ReminderLevel, ReminderType

__all__ = ["Reminder", "ReminderLevel", "ReminderType"]
