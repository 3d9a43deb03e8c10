"""Reminder records. Derived on every check and never persisted."""

import datetime as dt
import uuid
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel
from services.reminders_service.models.enums import ReminderLevel, ReminderType


class Reminder(BaseModel):
    type: ReminderType
    level: ReminderLevel
    title: str
    description: str
    # Days overdue for overdue payments, days left for due-soon ones
    days: Optional[int] = None
    amount: Optional[Decimal] = None
    member_id: Optional[uuid.UUID] = None
    member_name: Optional[str] = None
    payment_id: Optional[uuid.UUID] = None
    session_id: Optional[uuid.UUID] = None
    time: Optional[dt.time] = None
    location: Optional[str] = None
