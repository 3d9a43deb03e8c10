"""Backup Service models package."""

from services.backup_service.models.core import (
    BackupData,
    BackupRecord,
    BackupSummary,
    SyncSettings,
)
from services.backup_service.models.enums import BackupType

__all__ = [
    "BackupData",
    "BackupRecord",
    "BackupSummary",
    "BackupType",
    "SyncSettings",
]
