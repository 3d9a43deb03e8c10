"""
Month-by-month series for the dashboard charts.

Pure functions with no storage dependencies for easy testing. Every series
covers the ``months`` calendar months ending with the month of ``today``,
oldest first.
"""

import datetime as dt
from collections import Counter
from typing import Iterable

from libs.common.clock import Clock
from libs.common.currency import sum_money
from libs.common.datetime_utils import last_months, same_month
from services.attendance_service.models import AttendanceStatus, TrainingSession
from services.attendance_service.services import AttendanceLedger
from services.dashboard_service.models import AttendancePoint, PositionCount, RevenuePoint
from services.members_service.models import Member, PlayerPosition
from services.members_service.services import MemberDirectory
from services.payments_service.models import Payment, PaymentStatus
from services.payments_service.services import PaymentManager

DEFAULT_MONTHS = 6


def _label(month: dt.date) -> str:
    return month.strftime("%Y-%m")


def revenue_by_month(
    payments: Iterable[Payment], today: dt.date, months: int = DEFAULT_MONTHS
) -> list[RevenuePoint]:
    """Paid vs outstanding amounts of the obligations due in each month.

    Cancelled payments count as neither.
    """
    payments = [p for p in payments if p.status != PaymentStatus.CANCELLED]
    series = []
    for month in last_months(today, months):
        in_month = [p for p in payments if same_month(p.due_date, month)]
        series.append(
            RevenuePoint(
                month=_label(month),
                paid=sum_money(p.amount for p in in_month if p.status == PaymentStatus.PAID),
                outstanding=sum_money(
                    p.amount for p in in_month if p.status != PaymentStatus.PAID
                ),
            )
        )
    return series


def attendance_by_month(
    sessions: Iterable[TrainingSession],
    members: Iterable[Member],
    today: dt.date,
    months: int = DEFAULT_MONTHS,
) -> list[AttendancePoint]:
    """Share of present marks among the marks of current roster members."""
    roster = {member.id for member in members}
    sessions = list(sessions)
    series = []
    for month in last_months(today, months):
        in_month = [s for s in sessions if same_month(s.date, month)]
        marks = [
            status
            for session in in_month
            for member_id, status in session.attendance.items()
            if member_id in roster
        ]
        present = marks.count(AttendanceStatus.PRESENT)
        series.append(
            AttendancePoint(
                month=_label(month),
                sessions=len(in_month),
                marked=len(marks),
                present=present,
                attendance_rate=round(present / len(marks) * 100, 1) if marks else 0.0,
            )
        )
    return series


def members_by_position(members: Iterable[Member]) -> list[PositionCount]:
    counts = Counter(member.position for member in members)
    series = [
        PositionCount(position=position.value, members=counts.get(position, 0))
        for position in PlayerPosition
    ]
    if counts.get(None):
        series.append(PositionCount(position=None, members=counts[None]))
    return series


class Dashboard:
    def __init__(
        self,
        members: MemberDirectory,
        payments: PaymentManager,
        attendance: AttendanceLedger,
        clock: Clock,
    ):
        self.members = members
        self.payments = payments
        self.attendance = attendance
        self.clock = clock

    def revenue(self, months: int = DEFAULT_MONTHS) -> list[RevenuePoint]:
        return revenue_by_month(
            self.payments.get_all_payments(), self.clock.today(), months
        )

    def attendance_rates(self, months: int = DEFAULT_MONTHS) -> list[AttendancePoint]:
        return attendance_by_month(
            self.attendance.get_all_sessions(),
            self.members.get_all_members(),
            self.clock.today(),
            months,
        )

    def positions(self) -> list[PositionCount]:
        return members_by_position(self.members.get_all_members())
