"""Aggregates computed over the payment collection."""

from decimal import Decimal

from pydantic import BaseModel


class FinancialStats(BaseModel):
    """Totals over every payment, using live (overdue-recomputed) status.

    Cancelled payments are left out of ``total_payments`` and of every
    revenue figure; they are only counted in ``cancelled_payments``.
    """

    total_revenue: Decimal
    pending_revenue: Decimal
    overdue_revenue: Decimal
    total_payments: int
    paid_payments: int
    pending_payments: int
    overdue_payments: int
    cancelled_payments: int
    # Percent of non-cancelled payments that are paid, one decimal
    payment_rate: float


class MonthlyReport(BaseModel):
    """Obligations whose due date falls in one calendar month."""

    year: int
    month: int
    total_payments: int
    paid_payments: int
    pending_payments: int
    overdue_payments: int
    cancelled_payments: int
    expected_revenue: Decimal
    paid_revenue: Decimal
    outstanding_revenue: Decimal
