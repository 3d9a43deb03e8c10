"""
Monthly dues generation.

Pure functions with no storage dependencies for easy testing.
"""

from datetime import date, datetime
from typing import Iterable, Optional

from libs.common.datetime_utils import same_month
from services.members_service.models import Member
from services.payments_service.models import Payment, PaymentStatus

DEFAULT_DUE_DAY = 5


def obligation_due_date(reference_date: date, due_day: int = DEFAULT_DUE_DAY) -> date:
    return reference_date.replace(day=due_day)


def covered_members(payments: Iterable[Payment], reference_date: date) -> set:
    """Member ids that already have a live obligation in the reference month."""
    return {
        payment.member_id
        for payment in payments
        if payment.status != PaymentStatus.CANCELLED
        and same_month(payment.due_date, reference_date)
    }


def duplicate_obligations(payments: Iterable[Payment]) -> list[str]:
    """One problem per extra live obligation for an already covered member-month."""
    seen = set()
    problems = []
    for payment in payments:
        if payment.status == PaymentStatus.CANCELLED:
            continue
        key = (payment.member_id, payment.due_date.year, payment.due_date.month)
        if key in seen:
            problems.append(
                f"payments: member {payment.member_id} has more than one obligation"
                f" for {payment.due_date:%Y-%m}"
            )
        seen.add(key)
    return problems


def generate_monthly_obligations(
    members: Iterable[Member],
    existing_payments: Iterable[Payment],
    reference_date: date,
    *,
    due_day: int = DEFAULT_DUE_DAY,
    now: Optional[datetime] = None,
) -> list[Payment]:
    """
    Build the missing obligations for the month of ``reference_date``.

    Rules:
    - One pending payment per member whose month has no non-cancelled payment.
    - Amount is the member's current dues; due date is ``due_day`` of the month.
    - Existing payments are never touched, so a dues change only affects
      months that have not been generated yet.
    Calling it again with the result appended returns an empty list.
    """
    covered = covered_members(existing_payments, reference_date)
    due_date = obligation_due_date(reference_date, due_day)
    timestamps = {"created_at": now, "updated_at": now} if now else {}

    new_payments = []
    for member in members:
        if member.id in covered:
            continue
        new_payments.append(
            Payment(
                member_id=member.id,
                amount=member.monthly_dues,
                due_date=due_date,
                status=PaymentStatus.PENDING,
                **timestamps,
            )
        )
        covered.add(member.id)
    return new_payments
