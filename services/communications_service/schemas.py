"""Request schemas for the communications API."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel
from services.communications_service.models import (
    MessagePriority,
    MessageTarget,
    MessageType,
)


class MessageCreate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    type: MessageType = MessageType.MESSAGE
    # Member id of the author; omitted means "system"
    author: Optional[uuid.UUID] = None
    target: MessageTarget = "all"
    priority: MessagePriority = MessagePriority.MEDIUM
    expires_at: Optional[datetime] = None


class MemberReceipt(BaseModel):
    member_id: uuid.UUID


