"""Message board and notification inbox.

Messages live under ``communication_messages`` and notifications under
``notifications``. Posting a message creates one unread notification for each
recipient other than its author. Expired messages stay stored until the purge
sweep removes them, but are hidden from every read.
"""

import uuid
from datetime import datetime
from typing import Any, Optional, Union

from libs.common.clock import Clock
from libs.common.errors import NotFoundError
from libs.common.exports import export_document, import_document
from libs.common.logging import get_logger
from libs.db.repository import CollectionRepository, parse_records, validate_input
from libs.db.store import KeyValueStore
from services.communications_service.models import (
    ALL_MEMBERS,
    SYSTEM_AUTHOR,
    CommunicationMessage,
    MessagePriority,
    MessageTarget,
    MessageType,
    Notification,
)
from services.members_service.services import MemberDirectory

logger = get_logger(__name__)

MESSAGES_KEY = "communication_messages"
NOTIFICATIONS_KEY = "notifications"


class CommunicationCenter:
    def __init__(self, store: KeyValueStore, members: MemberDirectory, clock: Clock):
        self.members = members
        self.clock = clock
        self.message_repository = CollectionRepository(
            store, MESSAGES_KEY, CommunicationMessage
        )
        self.notification_repository = CollectionRepository(
            store, NOTIFICATIONS_KEY, Notification
        )
        self.messages: list[CommunicationMessage] = self.message_repository.load()
        self.notifications: list[Notification] = self.notification_repository.load()

    def _get_message(self, message_id: uuid.UUID) -> CommunicationMessage:
        for message in self.messages:
            if message.id == message_id:
                return message
        raise NotFoundError("Message", message_id)

    def _visible(self) -> list[CommunicationMessage]:
        now = self.clock.now()
        return [
            message.model_copy(deep=True)
            for message in self.messages
            if not message.is_expired(now)
        ]

    def _recipients(self, message: CommunicationMessage) -> list[uuid.UUID]:
        if message.target == ALL_MEMBERS:
            recipients = [member.id for member in self.members.get_all_members()]
        elif isinstance(message.target, list):
            recipients = list(dict.fromkeys(message.target))
        else:
            recipients = [message.target]
        return [member_id for member_id in recipients if member_id != message.author]

    # Messages

    def add_message(
        self,
        title: Optional[str] = None,
        content: Optional[str] = None,
        *,
        type: MessageType = MessageType.MESSAGE,
        author: Union[str, uuid.UUID] = SYSTEM_AUTHOR,
        target: MessageTarget = ALL_MEMBERS,
        priority: MessagePriority = MessagePriority.MEDIUM,
        expires_at: Optional[datetime] = None,
    ) -> CommunicationMessage:
        message = validate_input(
            CommunicationMessage,
            {
                "type": type,
                "title": title,
                "content": content,
                "author": author,
                "target": target,
                "priority": priority,
                "expires_at": expires_at,
                "created_at": self.clock.now(),
            },
            prefix="Invalid message",
        )
        targets = message.target if isinstance(message.target, list) else [message.target]
        for member_id in targets:
            if member_id != ALL_MEMBERS:
                self.members.get_member(member_id)

        self.messages.append(message)
        notified = self._notify_recipients(message)
        self.message_repository.save(self.messages)
        self.notification_repository.save(self.notifications)
        logger.info(
            "Posted %s %s (%s); notified %d member(s)",
            message.type.value,
            message.id,
            message.priority.value,
            notified,
        )
        return message.model_copy(deep=True)

    def _notify_recipients(self, message: CommunicationMessage) -> int:
        now = self.clock.now()
        recipients = self._recipients(message)
        for member_id in recipients:
            self.notifications.append(
                Notification(
                    member_id=member_id,
                    message_id=message.id,
                    title=message.title,
                    content=message.content,
                    type=message.type,
                    priority=message.priority,
                    created_at=now,
                )
            )
        return len(recipients)

    def delete_message(self, message_id: uuid.UUID) -> bool:
        """Remove a message; an unknown id is a no-op."""
        for message in self.messages:
            if message.id == message_id:
                self.messages.remove(message)
                self.message_repository.save(self.messages)
                logger.info("Deleted message %s", message_id)
                return True
        return False

    def mark_message_read(
        self, message_id: uuid.UUID, member_id: uuid.UUID
    ) -> CommunicationMessage:
        message = self._get_message(message_id)
        if member_id not in message.read_by:
            message.read_by.append(member_id)
            self.message_repository.save(self.messages)
        return message.model_copy(deep=True)

    def mark_message_acknowledged(
        self, message_id: uuid.UUID, member_id: uuid.UUID
    ) -> CommunicationMessage:
        message = self._get_message(message_id)
        if member_id not in message.acknowledged_by:
            message.acknowledged_by.append(member_id)
            self.message_repository.save(self.messages)
        return message.model_copy(deep=True)

    def get_all_messages(self) -> list[CommunicationMessage]:
        return self._visible()

    def get_messages_by_type(self, type: MessageType) -> list[CommunicationMessage]:
        return [message for message in self._visible() if message.type == type]

    def get_messages_by_priority(
        self, priority: MessagePriority
    ) -> list[CommunicationMessage]:
        return [message for message in self._visible() if message.priority == priority]

    def get_messages_for_member(self, member_id: uuid.UUID) -> list[CommunicationMessage]:
        return [message for message in self._visible() if message.is_for(member_id)]

    def get_unread_messages_for_member(
        self, member_id: uuid.UUID
    ) -> list[CommunicationMessage]:
        return [
            message
            for message in self.get_messages_for_member(member_id)
            if not message.is_read_by(member_id)
        ]

    def purge_expired_messages(self) -> int:
        now = self.clock.now()
        kept = [message for message in self.messages if not message.is_expired(now)]
        purged = len(self.messages) - len(kept)
        if purged:
            self.messages = kept
            self.message_repository.save(self.messages)
            logger.info("Purged %d expired message(s)", purged)
        return purged

    # Notifications

    def get_notifications_for_member(
        self, member_id: uuid.UUID, unread_only: bool = False
    ) -> list[Notification]:
        return [
            notification.model_copy()
            for notification in self.notifications
            if notification.member_id == member_id
            and not (unread_only and notification.read)
        ]

    def mark_notification_read(self, notification_id: uuid.UUID) -> Notification:
        for notification in self.notifications:
            if notification.id == notification_id:
                if not notification.read:
                    notification.read = True
                    self.notification_repository.save(self.notifications)
                return notification.model_copy()
        raise NotFoundError("Notification", notification_id)

    # Export

    def export_messages(self) -> dict:
        return export_document(
            "messages",
            self.messages,
            generated_at=self.clock.now(),
            notifications=[n.model_dump(mode="json") for n in self.notifications],
        )

    def import_messages(self, document: Any) -> int:
        """Replace messages, and notifications when the document carries them."""
        messages = import_document(document, "messages", CommunicationMessage)
        notifications = None
        if isinstance(document, dict) and "notifications" in document:
            notifications = parse_records(
                NOTIFICATIONS_KEY, document["notifications"], Notification
            )

        self.messages = messages
        self.message_repository.save(self.messages)
        if notifications is not None:
            self.notifications = notifications
            self.notification_repository.save(self.notifications)
        logger.info("Imported %d messages", len(self.messages))
        return len(self.messages)
