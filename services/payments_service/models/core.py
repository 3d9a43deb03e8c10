"""Payment record: one obligation of one member."""

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from libs.common.currency import to_money
from libs.common.datetime_utils import utc_now
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from services.payments_service.models.enums import PaymentMethod, PaymentStatus


class Payment(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    member_id: uuid.UUID
    amount: Decimal = Field(gt=0)
    due_date: date
    # Stored status; reads recompute pending -> overdue from the clock
    status: PaymentStatus = PaymentStatus.PENDING
    payment_date: Optional[datetime] = None
    payment_method: Optional[PaymentMethod] = None
    notes: str = ""

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator("amount")
    @classmethod
    def quantize_amount(cls, value: Decimal) -> Decimal:
        value = to_money(value)
        if value <= 0:
            raise ValueError("must be at least 0.01 after rounding to cents")
        return value

    @model_validator(mode="after")
    def paid_has_payment_date(self) -> "Payment":
        if self.status == PaymentStatus.PAID and self.payment_date is None:
            raise ValueError("a paid payment must have a payment_date")
        return self
