"""
Reminder engine: a read-only sweep over payments and training sessions.

Classification of a payment, using its live status and local "today":
- overdue:  due date before today (pending or overdue)
- due-soon: pending and due today or within the next ``window_days`` days
Sessions dated today produce one "today" reminder each.
"""

import datetime as dt
from typing import Iterable, Optional

from libs.common.clock import Clock
from libs.common.currency import format_money
from libs.common.exports import export_document
from libs.common.logging import get_logger
from services.attendance_service.models import TrainingSession
from services.attendance_service.services import AttendanceLedger
from services.members_service.models import Member
from services.members_service.services import MemberDirectory
from services.payments_service.models import Payment, PaymentStatus
from services.payments_service.services import PaymentManager, payment_rules
from services.reminders_service.models import Reminder, ReminderLevel, ReminderType

logger = get_logger(__name__)

DEFAULT_WINDOW_DAYS = 3


def payment_reminder(
    payment: Payment,
    member: Member,
    today: dt.date,
    *,
    window_days: int = DEFAULT_WINDOW_DAYS,
    currency: str = "BRL",
) -> Optional[Reminder]:
    status = payment_rules.live_status(payment, today)
    amount = format_money(payment.amount, currency)
    common = {
        "type": ReminderType.PAYMENT,
        "amount": payment.amount,
        "member_id": member.id,
        "member_name": member.name,
        "payment_id": payment.id,
    }

    if status == PaymentStatus.OVERDUE:
        days = payment_rules.days_overdue(payment, today)
        return Reminder(
            level=ReminderLevel.OVERDUE,
            title=f"Overdue payment: {member.name}",
            description=f"{days} day(s) late. Amount: {amount}.",
            days=days,
            **common,
        )

    if status == PaymentStatus.PENDING:
        days = payment_rules.days_until_due(payment, today)
        if 0 <= days <= window_days:
            return Reminder(
                level=ReminderLevel.DUE_SOON,
                title=f"Due in {days} day(s): {member.name}",
                description=f"Amount: {amount}.",
                days=days,
                **common,
            )
    return None


def session_reminder(session: TrainingSession) -> Reminder:
    description = f"Location: {session.location}"
    if session.notes:
        description += f" - {session.notes}"
    return Reminder(
        type=ReminderType.TRAINING,
        level=ReminderLevel.TODAY,
        title=f"Training today at {session.time.strftime('%H:%M')}",
        description=description,
        session_id=session.id,
        time=session.time,
        location=session.location,
    )


def build_reminders(
    payments: Iterable[Payment],
    members: Iterable[Member],
    sessions: Iterable[TrainingSession],
    today: dt.date,
    *,
    window_days: int = DEFAULT_WINDOW_DAYS,
    currency: str = "BRL",
) -> list[Reminder]:
    """One reminder per actionable payment, then one per session today.

    Payments of members that are no longer on the roster are skipped.
    """
    members_by_id = {member.id: member for member in members}
    reminders = []
    for payment in payments:
        member = members_by_id.get(payment.member_id)
        if member is None:
            continue
        reminder = payment_reminder(
            payment, member, today, window_days=window_days, currency=currency
        )
        if reminder is not None:
            reminders.append(reminder)

    for session in sorted(sessions, key=lambda s: s.time):
        if session.date == today:
            reminders.append(session_reminder(session))
    return reminders


class ReminderEngine:
    def __init__(
        self,
        members: MemberDirectory,
        payments: PaymentManager,
        attendance: AttendanceLedger,
        clock: Clock,
        *,
        window_days: int = DEFAULT_WINDOW_DAYS,
        currency: str = "BRL",
    ):
        self.members = members
        self.payments = payments
        self.attendance = attendance
        self.clock = clock
        self.window_days = window_days
        self.currency = currency
        # Last result only; rebuilt on every check
        self.latest: list[Reminder] = []
        self.latest_at: Optional[dt.datetime] = None

    def run_checks(self) -> list[Reminder]:
        today = self.clock.today()
        self.latest = build_reminders(
            self.payments.get_all_payments(),
            self.members.get_all_members(),
            self.attendance.get_sessions_on(today),
            today,
            window_days=self.window_days,
            currency=self.currency,
        )
        self.latest_at = self.clock.now()
        logger.info("Reminder check produced %d reminder(s)", len(self.latest))
        return list(self.latest)

    def export_reminders(self) -> dict:
        reminders = self.run_checks()
        return export_document("reminders", reminders, generated_at=self.latest_at)
