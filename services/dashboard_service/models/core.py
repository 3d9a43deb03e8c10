"""Chart series served by the dashboard."""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel


class RevenuePoint(BaseModel):
    # "YYYY-MM"
    month: str
    paid: Decimal
    outstanding: Decimal


class AttendancePoint(BaseModel):
    month: str
    sessions: int
    marked: int
    present: int
    # Percent of marked entries that are present, one decimal
    attendance_rate: float


class PositionCount(BaseModel):
    position: Optional[str]
    members: int
