"""Equipment items and loans."""

import datetime as dt
import uuid
from typing import Optional

from libs.common.datetime_utils import utc_now
from pydantic import BaseModel, ConfigDict, Field, model_validator
from services.equipment_service.models.enums import (
    EquipmentCategory,
    EquipmentCondition,
    LoanStatus,
)


class Equipment(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    name: str = Field(min_length=1, max_length=120)
    category: EquipmentCategory
    quantity: int = Field(gt=0)
    available_quantity: int = Field(ge=0)
    condition: EquipmentCondition
    purchase_date: dt.date
    last_maintenance: dt.date
    next_maintenance: dt.date
    notes: str = ""

    created_at: dt.datetime = Field(default_factory=utc_now)
    updated_at: dt.datetime = Field(default_factory=utc_now)

    @model_validator(mode="after")
    def available_within_quantity(self) -> "Equipment":
        if self.available_quantity > self.quantity:
            raise ValueError(
                f"available_quantity ({self.available_quantity}) exceeds "
                f"quantity ({self.quantity})"
            )
        return self

    @property
    def loaned_quantity(self) -> int:
        return self.quantity - self.available_quantity


class EquipmentLoan(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    equipment_id: uuid.UUID
    member_id: uuid.UUID
    # Display snapshot taken when the loan was created
    member_name: str = ""
    quantity: int = Field(gt=0)
    loan_date: dt.date
    expected_return_date: dt.date
    actual_return_date: Optional[dt.date] = None
    # Overdue is derived from dates, never stored
    status: LoanStatus = LoanStatus.ACTIVE
    notes: str = ""

    created_at: dt.datetime = Field(default_factory=utc_now)
    updated_at: dt.datetime = Field(default_factory=utc_now)

    @model_validator(mode="after")
    def check_status_and_dates(self) -> "EquipmentLoan":
        if self.status == LoanStatus.OVERDUE:
            raise ValueError("overdue is derived from dates and cannot be stored")
        if self.status == LoanStatus.RETURNED and self.actual_return_date is None:
            raise ValueError("a returned loan must have an actual_return_date")
        if self.expected_return_date < self.loan_date:
            raise ValueError("expected_return_date cannot be before loan_date")
        return self

    @property
    def is_active(self) -> bool:
        return self.status == LoanStatus.ACTIVE


class EquipmentStats(BaseModel):
    equipment_types: int
    total_items: int
    available_items: int
    loaned_items: int
    needing_maintenance: int
    active_loans: int
    overdue_loans: int
