"""Communications Service models package."""

from services.communications_service.models.core import (
    ALL_MEMBERS,
    SYSTEM_AUTHOR,
    CommunicationMessage,
    MessageTarget,
    Notification,
)
from services.communications_service.models.enums import MessagePriority, MessageType

__all__ = [
    "ALL_MEMBERS",
    "CommunicationMessage",
    "MessagePriority",
    "MessageTarget",
    "MessageType",
    "Notification",
    "SYSTEM_AUTHOR",
]
