"""Enum definitions for backup service models."""

import enum


class BackupType(str, enum.Enum):
    MANUAL = "manual"
    AUTOMATIC = "automatic"
