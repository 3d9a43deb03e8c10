"""Composition root: builds every club manager with explicit dependencies.

Nothing looks collaborators up globally. The FastAPI app keeps one
``ClubContainer`` on ``app.state.club`` and routers reach it through
``get_club``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from fastapi import Request

from libs.common.clock import Clock, SystemClock
from libs.common.config import Settings, get_settings
from libs.common.logging import get_logger
from libs.common.scheduler import Scheduler
from libs.db.config import make_engine, make_session_factory
from libs.db.store import KeyValueStore, SqlKeyValueStore
from services.attendance_service.services import AttendanceLedger
from services.backup_service.services import BackupManager, UserDirectory
from services.communications_service.services import CommunicationCenter
from services.dashboard_service.services import Dashboard
from services.equipment_service.services import EquipmentInventory
from services.members_service.services import MemberDirectory
from services.payments_service.services import PaymentManager
from services.reminders_service.services import ReminderEngine

logger = get_logger(__name__)


@dataclass
class ClubContainer:
    settings: Settings
    clock: Clock
    store: KeyValueStore
    members: MemberDirectory
    payments: PaymentManager
    attendance: AttendanceLedger
    equipment: EquipmentInventory
    reminders: ReminderEngine
    communications: CommunicationCenter
    users: UserDirectory
    backups: BackupManager
    dashboard: Dashboard
    scheduler: Optional[Scheduler] = None


def make_store(settings: Settings) -> SqlKeyValueStore:
    engine = make_engine(settings.DATABASE_URL)
    store = SqlKeyValueStore(make_session_factory(engine), settings.STORAGE_NAMESPACE)
    store.create_schema()
    return store


def build_scheduler(club: ClubContainer) -> Scheduler:
    """Register the periodic sweeps. Tests drive them with ``tick()``."""
    settings = club.settings
    scheduler = Scheduler(club.clock)
    scheduler.add_task(
        "generate_obligations",
        timedelta(hours=settings.OBLIGATION_SWEEP_HOURS),
        club.payments.generate_monthly_obligations,
    )
    scheduler.add_task(
        "overdue_sweep",
        timedelta(hours=settings.OVERDUE_SWEEP_HOURS),
        club.payments.sweep_overdue,
    )
    scheduler.add_task(
        "refresh_reminders",
        timedelta(hours=settings.REMINDER_REFRESH_HOURS),
        club.reminders.run_checks,
    )
    scheduler.add_task(
        "maintenance_check",
        timedelta(hours=settings.MAINTENANCE_CHECK_HOURS),
        club.equipment.check_maintenance_schedule,
    )
    scheduler.add_task(
        "purge_expired_messages",
        timedelta(hours=1),
        club.communications.purge_expired_messages,
    )
    scheduler.add_task(
        "automatic_backup",
        timedelta(hours=settings.AUTO_BACKUP_HOURS),
        club.backups.create_automatic_backup,
        run_at_startup=False,
    )
    return scheduler


def build_container(
    settings: Optional[Settings] = None,
    store: Optional[KeyValueStore] = None,
    clock: Optional[Clock] = None,
) -> ClubContainer:
    settings = settings or get_settings()
    clock = clock or SystemClock(settings.TIMEZONE)
    store = store if store is not None else make_store(settings)

    members = MemberDirectory(store, clock)
    payments = PaymentManager(store, members, clock, due_day=settings.DUES_DUE_DAY)
    attendance = AttendanceLedger(store, members, clock)
    equipment = EquipmentInventory(store, members, clock)
    communications = CommunicationCenter(store, members, clock)
    reminders = ReminderEngine(
        members,
        payments,
        attendance,
        clock,
        window_days=settings.REMINDER_WINDOW_DAYS,
        currency=settings.CURRENCY,
    )
    users = UserDirectory(store, clock)
    users.ensure_default_admin(
        settings.DEFAULT_ADMIN_USERNAME, settings.DEFAULT_ADMIN_EMAIL
    )
    backups = BackupManager(
        store,
        clock,
        members=members,
        payments=payments,
        attendance=attendance,
        equipment=equipment,
        communications=communications,
    )
    dashboard = Dashboard(members, payments, attendance, clock)

    # New members and dues changes get this month's obligation right away
    members.subscribe(lambda member: payments.generate_monthly_obligations())

    club = ClubContainer(
        settings=settings,
        clock=clock,
        store=store,
        members=members,
        payments=payments,
        attendance=attendance,
        equipment=equipment,
        reminders=reminders,
        communications=communications,
        users=users,
        backups=backups,
        dashboard=dashboard,
    )
    club.scheduler = build_scheduler(club)
    return club


def get_club(request: Request) -> ClubContainer:
    return request.app.state.club
