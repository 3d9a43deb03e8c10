"""Point-in-time snapshots of every club collection.

A backup copies members, payments, sessions, equipment, loans, messages and
notifications into one record under ``backup_history`` (newest 20 kept).
Restoring checks the whole snapshot before replacing anything, so a bad
backup leaves the current data untouched.
"""

import json
import uuid
from datetime import timedelta
from typing import Optional

from libs.auth.models import SYSTEM_USERNAME, ClubUser
from libs.common.clock import Clock
from libs.common.errors import NotFoundError, ValidationError
from libs.common.logging import get_logger
from libs.db.repository import (
    CollectionRepository,
    DocumentRepository,
    validate_input,
)
from libs.db.store import KeyValueStore
from services.attendance_service.services import AttendanceLedger
from services.backup_service.models import (
    BackupData,
    BackupRecord,
    BackupSummary,
    BackupType,
    SyncSettings,
)
from services.communications_service.services import CommunicationCenter
from services.equipment_service.services import EquipmentInventory
from services.equipment_service.services.inventory import find_invariant_violations
from services.members_service.services import MemberDirectory, duplicate_emails
from services.payments_service.services import PaymentManager
from services.payments_service.services.obligations import duplicate_obligations

logger = get_logger(__name__)

BACKUP_HISTORY_KEY = "backup_history"
SYNC_SETTINGS_KEY = "sync_settings"
MAX_BACKUPS = 20


class BackupManager:
    def __init__(
        self,
        store: KeyValueStore,
        clock: Clock,
        *,
        members: MemberDirectory,
        payments: PaymentManager,
        attendance: AttendanceLedger,
        equipment: EquipmentInventory,
        communications: CommunicationCenter,
    ):
        self.clock = clock
        self.members = members
        self.payments = payments
        self.attendance = attendance
        self.equipment = equipment
        self.communications = communications
        self.history_repository = CollectionRepository(
            store, BACKUP_HISTORY_KEY, BackupRecord
        )
        self.settings_repository = DocumentRepository(
            store, SYNC_SETTINGS_KEY, SyncSettings, SyncSettings
        )
        self.history: list[BackupRecord] = self.history_repository.load()
        self.sync_settings: SyncSettings = self.settings_repository.load()

    def _get(self, backup_id: uuid.UUID) -> BackupRecord:
        for backup in self.history:
            if backup.id == backup_id:
                return backup
        raise NotFoundError("Backup", backup_id)

    def _snapshot(self) -> BackupData:
        return BackupData(
            members=self.members.get_all_members(),
            payments=self.payments.get_all_payments(),
            sessions=self.attendance.get_all_sessions(),
            equipment=self.equipment.get_all_equipment(),
            loans=self.equipment.get_all_loans(),
            messages=[m.model_copy(deep=True) for m in self.communications.messages],
            notifications=[
                n.model_copy() for n in self.communications.notifications
            ],
        )

    def _record(self, created_by: str, backup_type: BackupType) -> BackupRecord:
        data = self._snapshot()
        now = self.clock.now()
        backup = BackupRecord(
            created_at=now,
            created_by=created_by,
            type=backup_type,
            size=len(data.model_dump_json()),
            data=data,
        )
        self.history.append(backup)
        # Oldest first; keep the newest MAX_BACKUPS
        self.history = self.history[-MAX_BACKUPS:]
        self.history_repository.save(self.history)

        self.sync_settings.last_backup = now
        self.settings_repository.save(self.sync_settings)
        logger.info(
            "Created %s backup %s (%d bytes)", backup_type.value, backup.id, backup.size
        )
        return backup

    # Backups

    def create_backup(self, actor: ClubUser) -> BackupSummary:
        actor.require("manage_backup")
        return self._record(actor.username, BackupType.MANUAL).summary()

    def create_automatic_backup(self) -> Optional[BackupSummary]:
        """Scheduled backup; skipped while disabled or not yet due."""
        settings = self.sync_settings
        if not settings.auto_backup:
            return None
        interval = timedelta(hours=settings.backup_interval_hours)
        if settings.last_backup and self.clock.now() - settings.last_backup < interval:
            return None
        return self._record(SYSTEM_USERNAME, BackupType.AUTOMATIC).summary()

    def get_backup_history(self, actor: ClubUser) -> list[BackupSummary]:
        actor.require("manage_backup")
        return [backup.summary() for backup in reversed(self.history)]

    def delete_backup(self, actor: ClubUser, backup_id: uuid.UUID) -> BackupSummary:
        actor.require("manage_backup")
        backup = self._get(backup_id)
        self.history.remove(backup)
        self.history_repository.save(self.history)
        logger.info("User %s deleted backup %s", actor.username, backup_id)
        return backup.summary()

    def export_backup(self, actor: ClubUser, backup_id: uuid.UUID) -> dict:
        actor.require("export_data")
        return self._get(backup_id).model_dump(mode="json")

    def restore_backup(self, actor: ClubUser, backup_id: uuid.UUID) -> BackupSummary:
        """Replace every collection with the snapshot's contents."""
        actor.require("manage_backup")
        backup = self._get(backup_id)
        data = backup.data

        problems = (
            duplicate_emails(data.members)
            + duplicate_obligations(data.payments)
            + find_invariant_violations(data.equipment, data.loans)
        )
        if problems:
            raise ValidationError(problems, prefix=f"Backup {backup_id} cannot be restored")

        # Round-trip through JSON so the managers get fresh, independent copies
        document = json.loads(data.model_dump_json())
        self.members.import_members(document["members"])
        self.payments.import_payments(document["payments"])
        self.attendance.import_sessions(document["sessions"])
        self.equipment.import_equipment(
            {"equipment": document["equipment"], "loans": document["loans"]}
        )
        self.communications.import_messages(
            {"messages": document["messages"], "notifications": document["notifications"]}
        )
        logger.info("User %s restored backup %s", actor.username, backup_id)
        return backup.summary()

    # Sync settings

    def get_sync_settings(self) -> SyncSettings:
        return self.sync_settings.model_copy()

    def update_sync_settings(self, actor: ClubUser, **changes) -> SyncSettings:
        actor.require("manage_backup")
        changes = {
            k: v
            for k, v in changes.items()
            if v is not None and k in ("auto_backup", "backup_interval_hours")
        }
        settings = validate_input(
            SyncSettings,
            {**self.sync_settings.model_dump(), **changes},
            prefix="Invalid sync settings",
        )
        self.sync_settings = settings
        self.settings_repository.save(settings)
        return settings.model_copy()
