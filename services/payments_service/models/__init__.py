"""Payments Service models package."""

from services.payments_service.models.core import Payment
from services.payments_service.models.enums import PaymentMethod, PaymentStatus
from services.payments_service.models.reports import FinancialStats, MonthlyReport

__all__ = [
    "FinancialStats",
    "MonthlyReport",
    "Payment",
    "PaymentMethod",
    "PaymentStatus",
]
