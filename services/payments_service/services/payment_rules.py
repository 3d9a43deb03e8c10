"""
Payment lifecycle rules and aggregation.

Pure functions of a payment and "today"; overdue is never trusted from the
stored status alone.

States:
    pending -> overdue | paid | cancelled
    overdue -> paid | cancelled
    cancelled -> pending (reactivation only)
    paid is terminal (amount/date corrections do not change status)
"""

from datetime import date
from decimal import Decimal
from typing import Iterable

from libs.common.currency import ZERO, sum_money
from libs.common.datetime_utils import same_month
from libs.common.errors import ConflictError
from services.payments_service.models import (
    FinancialStats,
    MonthlyReport,
    Payment,
    PaymentStatus,
)

OPEN_STATUSES = (PaymentStatus.PENDING, PaymentStatus.OVERDUE)

ALLOWED_TRANSITIONS = {
    PaymentStatus.PENDING: {
        PaymentStatus.OVERDUE,
        PaymentStatus.PAID,
        PaymentStatus.CANCELLED,
    },
    PaymentStatus.OVERDUE: {PaymentStatus.PAID, PaymentStatus.CANCELLED},
    PaymentStatus.CANCELLED: {PaymentStatus.PENDING},
    PaymentStatus.PAID: set(),
}


# ---------------------------------------------------------------------------
# Live status
# ---------------------------------------------------------------------------


def live_status(payment: Payment, today: date) -> PaymentStatus:
    """Stored status with pending -> overdue applied for ``today``.

    A payment due today is still pending; it becomes overdue the day after.
    """
    if payment.status == PaymentStatus.PENDING and payment.due_date < today:
        return PaymentStatus.OVERDUE
    return payment.status


def with_live_status(payment: Payment, today: date) -> Payment:
    return payment.model_copy(update={"status": live_status(payment, today)})


def is_overdue(payment: Payment, today: date) -> bool:
    return live_status(payment, today) == PaymentStatus.OVERDUE


def days_overdue(payment: Payment, today: date) -> int:
    """Whole days past the due date while open; 0 once paid or cancelled."""
    if live_status(payment, today) not in OPEN_STATUSES:
        return 0
    return max(0, (today - payment.due_date).days)


def days_until_due(payment: Payment, today: date) -> int:
    """Negative once the due date has passed."""
    return (payment.due_date - today).days


def ensure_transition(payment: Payment, target: PaymentStatus, today: date) -> None:
    current = live_status(payment, today)
    if target not in ALLOWED_TRANSITIONS[current]:
        raise ConflictError(
            f"Payment {payment.id} cannot go from {current.value} to {target.value}"
        )


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------


def _amounts(payments: Iterable[Payment], status: PaymentStatus) -> list[Decimal]:
    return [p.amount for p in payments if p.status == status]


def financial_stats(payments: Iterable[Payment], today: date) -> FinancialStats:
    live = [with_live_status(p, today) for p in payments]
    counted = [p for p in live if p.status != PaymentStatus.CANCELLED]
    paid = _amounts(counted, PaymentStatus.PAID)
    pending = _amounts(counted, PaymentStatus.PENDING)
    overdue = _amounts(counted, PaymentStatus.OVERDUE)

    total = len(counted)
    rate = round(len(paid) / total * 100, 1) if total else 0.0

    return FinancialStats(
        total_revenue=sum_money(paid),
        pending_revenue=sum_money(pending),
        overdue_revenue=sum_money(overdue),
        total_payments=total,
        paid_payments=len(paid),
        pending_payments=len(pending),
        overdue_payments=len(overdue),
        cancelled_payments=len(live) - total,
        payment_rate=rate,
    )


def monthly_report(
    payments: Iterable[Payment], year: int, month: int, today: date
) -> MonthlyReport:
    reference = date(year, month, 1)
    in_month = [
        with_live_status(p, today)
        for p in payments
        if same_month(p.due_date, reference)
    ]
    counted = [p for p in in_month if p.status != PaymentStatus.CANCELLED]
    paid = _amounts(counted, PaymentStatus.PAID)
    expected = sum_money(p.amount for p in counted)
    paid_revenue = sum_money(paid)

    return MonthlyReport(
        year=year,
        month=month,
        total_payments=len(counted),
        paid_payments=len(paid),
        pending_payments=len(_amounts(counted, PaymentStatus.PENDING)),
        overdue_payments=len(_amounts(counted, PaymentStatus.OVERDUE)),
        cancelled_payments=len(in_month) - len(counted),
        expected_revenue=expected,
        paid_revenue=paid_revenue,
        outstanding_revenue=max(ZERO, expected - paid_revenue),
    )
