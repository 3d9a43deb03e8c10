"""Request schemas for users, backups and data transfer."""

import enum
from typing import Optional

from libs.auth.models import UserRole
from pydantic import BaseModel, EmailStr


class UserCreate(BaseModel):
    username: Optional[str] = None
    email: Optional[EmailStr] = None
    role: UserRole = UserRole.USER
    permissions: Optional[list[str]] = None


class UserUpdate(BaseModel):
    username: Optional[str] = None
    email: Optional[EmailStr] = None
    role: Optional[UserRole] = None
    permissions: Optional[list[str]] = None
    active: Optional[bool] = None


class LoginRequest(BaseModel):
    username: str


class SyncSettingsUpdate(BaseModel):
    auto_backup: Optional[bool] = None
    backup_interval_hours: Optional[int] = None


class DataCollection(str, enum.Enum):
    MEMBERS = "members"
    PAYMENTS = "payments"
    SESSIONS = "sessions"
    EQUIPMENT = "equipment"
    MESSAGES = "messages"
    REMINDERS = "reminders"


class ImportResult(BaseModel):
    collection: DataCollection
    imported: int
