"""Enum definitions for reminder records."""

import enum


class ReminderType(str, enum.Enum):
    PAYMENT = "payment"
    TRAINING = "training"


class ReminderLevel(str, enum.Enum):
    OVERDUE = "overdue"
    DUE_SOON = "due-soon"
    TODAY = "today"
