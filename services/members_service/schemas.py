"""Request schemas for the members API.

Field rules (length, email format, positive dues) are enforced by the member
directory so every failing field is reported together.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel
from services.members_service.models import PlayerPosition


class MemberCreate(BaseModel):
    name: str
    email: str
    phone: Optional[str] = None
    position: Optional[PlayerPosition] = None
    monthly_dues: Decimal
    join_date: Optional[date] = None
    notes: str = ""


class MemberUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    position: Optional[PlayerPosition] = None
    monthly_dues: Optional[Decimal] = None
    join_date: Optional[date] = None
    notes: Optional[str] = None
