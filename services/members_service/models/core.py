"""Member record."""

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from libs.common.currency import to_money
from libs.common.datetime_utils import utc_now
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from services.members_service.models.enums import PlayerPosition


class Member(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    name: str = Field(min_length=2, max_length=120)
    email: EmailStr
    phone: Optional[str] = None
    position: Optional[PlayerPosition] = None
    # Currency units, e.g. 50.00
    monthly_dues: Decimal = Field(gt=0)
    join_date: date
    notes: str = ""

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator("monthly_dues")
    @classmethod
    def quantize_dues(cls, value: Decimal) -> Decimal:
        value = to_money(value)
        if value <= 0:
            raise ValueError("must be at least 0.01 after rounding to cents")
        return value
