"""Backup snapshots and sync settings."""

import uuid
from datetime import datetime
from typing import Literal, Optional

from libs.common.datetime_utils import utc_now
from pydantic import BaseModel, Field
from services.attendance_service.models import TrainingSession
from services.backup_service.models.enums import BackupType
from services.communications_service.models import CommunicationMessage, Notification
from services.equipment_service.models import Equipment, EquipmentLoan
from services.members_service.models import Member
from services.payments_service.models import Payment


class BackupData(BaseModel):
    members: list[Member] = Field(default_factory=list)
    payments: list[Payment] = Field(default_factory=list)
    sessions: list[TrainingSession] = Field(default_factory=list)
    equipment: list[Equipment] = Field(default_factory=list)
    loans: list[EquipmentLoan] = Field(default_factory=list)
    messages: list[CommunicationMessage] = Field(default_factory=list)
    notifications: list[Notification] = Field(default_factory=list)


class BackupSummary(BaseModel):
    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    created_at: datetime = Field(default_factory=utc_now)
    # Username of the operator, or "system" for scheduled backups
    created_by: str
    type: BackupType = BackupType.MANUAL
    # Bytes of the serialized snapshot
    size: int = 0


class BackupRecord(BackupSummary):
    data: BackupData

    def summary(self) -> BackupSummary:
        return BackupSummary.model_validate(self.model_dump(exclude={"data"}))


class SyncSettings(BaseModel):
    auto_backup: bool = True
    backup_interval_hours: int = Field(default=24, gt=0)
    # Remote sync is not implemented; the flag is kept for document shape
    google_drive_enabled: Literal[False] = False
    last_backup: Optional[datetime] = None
    last_sync: Optional[datetime] = None
