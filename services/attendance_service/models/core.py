"""Training session with its embedded attendance map."""

import datetime as dt
import uuid

from libs.common.datetime_utils import utc_now
from pydantic import BaseModel, ConfigDict, Field
from services.attendance_service.models.enums import AttendanceStatus


class TrainingSession(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    # Local calendar date of the practice
    date: dt.date
    time: dt.time
    location: str = Field(min_length=1, max_length=200)
    notes: str = ""
    # Member id -> status; a missing member is unmarked
    attendance: dict[uuid.UUID, AttendanceStatus] = Field(default_factory=dict)

    created_at: dt.datetime = Field(default_factory=utc_now)
    updated_at: dt.datetime = Field(default_factory=utc_now)


class SessionStats(BaseModel):
    """Counts for one session.

    ``roster_size`` is the member count at the time of the query, not at the
    time of the session, so removing a member changes historical totals.
    """

    session_id: uuid.UUID
    present: int
    absent: int
    justified: int
    unmarked: int
    roster_size: int
    attendance_rate: float


class MemberAttendance(BaseModel):
    member_id: uuid.UUID
    sessions_marked: int
    present: int
    absent: int
    justified: int
    # Percent of marked sessions the member attended
    attendance_rate: float
