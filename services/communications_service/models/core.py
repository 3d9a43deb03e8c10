"""Internal messages and the per-member notifications they fan out to."""

import uuid
from datetime import datetime
from typing import Literal, Optional, Union

from libs.common.datetime_utils import utc_now
from pydantic import AwareDatetime, BaseModel, ConfigDict, Field
from services.communications_service.models.enums import MessagePriority, MessageType

ALL_MEMBERS = "all"
SYSTEM_AUTHOR = "system"

# "all", one member id, or a list of member ids
MessageTarget = Union[Literal["all"], uuid.UUID, list[uuid.UUID]]


class CommunicationMessage(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    type: MessageType = MessageType.MESSAGE
    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1)
    author: Union[Literal["system"], uuid.UUID] = SYSTEM_AUTHOR
    target: MessageTarget = ALL_MEMBERS
    priority: MessagePriority = MessagePriority.MEDIUM
    expires_at: Optional[AwareDatetime] = None
    created_at: datetime = Field(default_factory=utc_now)
    read_by: list[uuid.UUID] = Field(default_factory=list)
    acknowledged_by: list[uuid.UUID] = Field(default_factory=list)

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and now > self.expires_at

    def is_for(self, member_id: uuid.UUID) -> bool:
        if self.target == ALL_MEMBERS:
            return True
        if isinstance(self.target, list):
            return member_id in self.target
        return self.target == member_id

    def is_read_by(self, member_id: uuid.UUID) -> bool:
        return member_id in self.read_by


class Notification(BaseModel):
    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    member_id: uuid.UUID
    message_id: uuid.UUID
    title: str
    content: str
    type: MessageType
    priority: MessagePriority
    created_at: datetime = Field(default_factory=utc_now)
    read: bool = False
