"""Request and response schemas for the payments API."""

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel
from services.payments_service.models import Payment, PaymentMethod


class PaymentResponse(Payment):
    """A payment with its live status and lateness."""

    is_overdue: bool = False
    days_overdue: int = 0


class PaymentCreate(BaseModel):
    member_id: uuid.UUID
    amount: Decimal
    due_date: date
    notes: str = ""


class MarkPaidRequest(BaseModel):
    method: PaymentMethod = PaymentMethod.CASH
    notes: str = ""


class CancelRequest(BaseModel):
    reason: str = ""


class PaymentCorrection(BaseModel):
    amount: Optional[Decimal] = None
    due_date: Optional[date] = None
    payment_date: Optional[datetime] = None
    notes: Optional[str] = None


class GenerateRequest(BaseModel):
    # Defaults to today in the club's timezone
    reference_date: Optional[date] = None


class GenerateResponse(BaseModel):
    created: int
    payments: list[PaymentResponse]


class SweepResponse(BaseModel):
    marked_overdue: int
