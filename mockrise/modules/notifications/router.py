"""Notifications API router."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query

from mockrise.modules.identity.models import User
from mockrise.modules.identity.service import get_current_user
from mockrise.modules.notifications.schemas import NotificationInbox, NotificationRead
from mockrise.modules.notifications.service import NotificationsService, get_notifications_service
from mockrise.shared.pagination import PaginationParams, get_pagination_params
from mockrise.shared.schemas import ApiResponse, MessageResponse

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=ApiResponse[NotificationInbox])
async def list_notifications(
    unread_only: bool = Query(default=False, alias="unreadOnly"),
    pagination: PaginationParams = Depends(get_pagination_params),
    service: NotificationsService = Depends(get_notifications_service),
    current_user: User = Depends(get_current_user),
) -> ApiResponse[NotificationInbox]:
    """List the caller's notifications, newest first."""
    inbox = await service.get_inbox(
        current_user,
        unread_only=unread_only,
        limit=pagination.limit,
        offset=pagination.offset,
    )
    return ApiResponse(data=inbox)


@router.put("/read-all", response_model=MessageResponse)
async def mark_all_notifications_read(
    service: NotificationsService = Depends(get_notifications_service),
    current_user: User = Depends(get_current_user),
) -> MessageResponse:
    """Mark every notification of the caller as read."""
    updated = await service.mark_all_read(current_user)
    return MessageResponse(message=f"{updated} notification(s) marked as read")


@router.put("/{notification_id}/read", response_model=ApiResponse[NotificationRead])
async def mark_notification_read(
    notification_id: UUID,
    service: NotificationsService = Depends(get_notifications_service),
    current_user: User = Depends(get_current_user),
) -> ApiResponse[NotificationRead]:
    """Mark one notification as read."""
    notification = await service.mark_read(notification_id, current_user)
    return ApiResponse(data=NotificationRead.model_validate(notification))


@router.delete("/{notification_id}", response_model=MessageResponse)
async def delete_notification(
    notification_id: UUID,
    service: NotificationsService = Depends(get_notifications_service),
    current_user: User = Depends(get_current_user),
) -> MessageResponse:
    """Delete one of the caller's notifications."""
    await service.delete(notification_id, current_user)
    return MessageResponse(message="Notification deleted")
