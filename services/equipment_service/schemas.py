"""Request and response schemas for the equipment API."""

import datetime as dt
import uuid
from typing import Optional

from pydantic import BaseModel
from services.equipment_service.models import (
    Equipment,
    EquipmentCategory,
    EquipmentCondition,
    EquipmentLoan,
    LoanStatus,
)


class EquipmentResponse(Equipment):
    needs_maintenance: bool = False


class LoanResponse(EquipmentLoan):
    # "overdue" for an active loan past its expected return date
    display_status: LoanStatus
    overdue_days: int = 0


class EquipmentCreate(BaseModel):
    name: Optional[str] = None
    category: Optional[EquipmentCategory] = None
    quantity: Optional[int] = None
    condition: Optional[EquipmentCondition] = None
    purchase_date: Optional[dt.date] = None
    notes: str = ""


class EquipmentUpdate(BaseModel):
    name: Optional[str] = None
    category: Optional[EquipmentCategory] = None
    quantity: Optional[int] = None
    condition: Optional[EquipmentCondition] = None
    purchase_date: Optional[dt.date] = None
    notes: Optional[str] = None


class LoanCreate(BaseModel):
    equipment_id: uuid.UUID
    member_id: uuid.UUID
    quantity: Optional[int] = None
    expected_return_date: Optional[dt.date] = None
    notes: str = ""
