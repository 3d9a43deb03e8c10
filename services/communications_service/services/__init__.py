"""Communications service business logic."""

from services.communications_service.services.center import (
    MESSAGES_KEY,
    NOTIFICATIONS_KEY,
    CommunicationCenter,
)

__all__ = ["CommunicationCenter", "MESSAGES_KEY", "NOTIFICATIONS_KEY"]
