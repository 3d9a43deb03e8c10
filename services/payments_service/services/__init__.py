"""Payments service business logic."""

from services.payments_service.services.manager import PAYMENTS_KEY, PaymentManager
from services.payments_service.services.obligations import (
    generate_monthly_obligations,
)

__all__ = ["PAYMENTS_KEY", "PaymentManager", "generate_monthly_obligations"]
