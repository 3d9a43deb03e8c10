"""Message board and notification endpoints."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from libs.auth.dependencies import require_permission
from libs.auth.models import ClubUser
from services.communications_service.models import (
    SYSTEM_AUTHOR,
    CommunicationMessage,
    MessagePriority,
    MessageType,
    Notification,
)
from services.communications_service.schemas import MemberReceipt, MessageCreate
from services.gateway_service.app.container import ClubContainer, get_club

router = APIRouter(prefix="/communications", tags=["communications"])


@router.get("/messages", response_model=list[CommunicationMessage])
async def list_messages(
    member_id: Optional[uuid.UUID] = None,
    unread: bool = False,
    type: Optional[MessageType] = None,
    priority: Optional[MessagePriority] = None,
    current_user: ClubUser = Depends(require_permission("view_communication")),
    club: ClubContainer = Depends(get_club),
):
    """Unexpired messages, optionally only those addressed to one member."""
    center = club.communications
    if member_id is not None:
        if unread:
            messages = center.get_unread_messages_for_member(member_id)
        else:
            messages = center.get_messages_for_member(member_id)
    else:
        messages = center.get_all_messages()
    if type is not None:
        messages = [m for m in messages if m.type == type]
    if priority is not None:
        messages = [m for m in messages if m.priority == priority]
    return messages


@router.post(
    "/messages",
    response_model=CommunicationMessage,
    status_code=status.HTTP_201_CREATED,
)
async def post_message(
    payload: MessageCreate,
    current_user: ClubUser = Depends(require_permission("manage_communication")),
    club: ClubContainer = Depends(get_club),
):
    """Post a message and notify every recipient except the author."""
    return club.communications.add_message(
        payload.title,
        payload.content,
        type=payload.type,
        author=payload.author or SYSTEM_AUTHOR,
        target=payload.target,
        priority=payload.priority,
        expires_at=payload.expires_at,
    )


@router.post("/messages/{message_id}/read", response_model=CommunicationMessage)
async def mark_message_read(
    message_id: uuid.UUID,
    payload: MemberReceipt,
    current_user: ClubUser = Depends(require_permission("view_communication")),
    club: ClubContainer = Depends(get_club),
):
    return club.communications.mark_message_read(message_id, payload.member_id)


@router.post("/messages/{message_id}/acknowledge", response_model=CommunicationMessage)
async def acknowledge_message(
    message_id: uuid.UUID,
    payload: MemberReceipt,
    current_user: ClubUser = Depends(require_permission("view_communication")),
    club: ClubContainer = Depends(get_club),
):
    return club.communications.mark_message_acknowledged(message_id, payload.member_id)


@router.delete("/messages/{message_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_message(
    message_id: uuid.UUID,
    current_user: ClubUser = Depends(require_permission("manage_communication")),
    club: ClubContainer = Depends(get_club),
):
    club.communications.delete_message(message_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/notifications/{member_id}", response_model=list[Notification])
async def list_notifications(
    member_id: uuid.UUID,
    unread: bool = False,
    current_user: ClubUser = Depends(require_permission("view_notifications")),
    club: ClubContainer = Depends(get_club),
):
    return club.communications.get_notifications_for_member(member_id, unread_only=unread)


@router.post("/notifications/{notification_id}/read", response_model=Notification)
async def mark_notification_read(
    notification_id: uuid.UUID,
    current_user: ClubUser = Depends(require_permission("view_notifications")),
    club: ClubContainer = Depends(get_club),
):
    return club.communications.mark_notification_read(notification_id)
