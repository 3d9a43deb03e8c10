"""Backup service business logic."""

from services.backup_service.services.backups import (
    BACKUP_HISTORY_KEY,
    MAX_BACKUPS,
    SYNC_SETTINGS_KEY,
    BackupManager,
)
from services.backup_service.services.users import USERS_KEY, UserDirectory

__all__ = [
    "BACKUP_HISTORY_KEY",
    "BackupManager",
    "MAX_BACKUPS",
    "SYNC_SETTINGS_KEY",
    "USERS_KEY",
    "UserDirectory",
]
