"""In-app notification API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Query

from app.auth.auth import CurrentUser
from routers.dependencies import NotificationPage, Notifications
from schemas.common import MessageResponse, Pagination
from schemas.notification import (
    BulkAction,
    NotificationCreate,
    NotificationCreatedResponse,
    NotificationListResponse,
    NotificationOut,
    NotificationStats,
    UnreadCount,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=NotificationListResponse, summary="List my notifications")
def list_notifications(
    current_user: CurrentUser,
    service: Notifications,
    page: NotificationPage,
    unread_only: Annotated[bool, Query(alias="unreadOnly")] = False,
) -> NotificationListResponse:
    notifications, total = service.inbox(current_user, page.offset, page.limit, unread_only)
    return NotificationListResponse(
        notifications=[NotificationOut.model_validate(n) for n in notifications],
        pagination=Pagination.build(page.page, page.limit, total),
    )


@router.get("/unread-count", response_model=UnreadCount, summary="Unread notification count")
def unread_count(current_user: CurrentUser, service: Notifications) -> UnreadCount:
    return UnreadCount(count=service.unread_count(current_user))


@router.get("/stats", response_model=NotificationStats, summary="Notification statistics")
def notification_stats(current_user: CurrentUser, service: Notifications) -> NotificationStats:
    return NotificationStats.model_validate(service.stats(current_user))


@router.patch("/mark-all-read", response_model=MessageResponse, summary="Mark all as read")
def mark_all_read(current_user: CurrentUser, service: Notifications) -> MessageResponse:
    service.mark_all_read(current_user)
    return MessageResponse(message="All notifications marked as read")


@router.post("/bulk-action", response_model=MessageResponse, summary="Bulk update notifications")
def bulk_action(
    payload: BulkAction,
    current_user: CurrentUser,
    service: Notifications,
) -> MessageResponse:
    message = service.bulk_action(current_user, payload.action, payload.notification_ids)
    return MessageResponse(message=message)


@router.patch(
    "/{notification_id}/read",
    response_model=MessageResponse,
    summary="Mark a notification as read",
    responses={404: {"description": "Notification not found"}},
)
def mark_read(
    notification_id: int,
    current_user: CurrentUser,
    service: Notifications,
) -> MessageResponse:
    service.mark_read(notification_id, current_user)
    return MessageResponse(message="Notification marked as read")


@router.delete(
    "/{notification_id}",
    response_model=MessageResponse,
    summary="Delete a notification",
    responses={404: {"description": "Notification not found"}},
)
def delete_notification(
    notification_id: int,
    current_user: CurrentUser,
    service: Notifications,
) -> MessageResponse:
    service.delete(notification_id, current_user)
    return MessageResponse(message="Notification deleted successfully")


@router.post(
    "",
    response_model=NotificationCreatedResponse,
    status_code=201,
    summary="Send a notification",
    responses={404: {"description": "Recipient not found"}},
)
def create_notification(
    payload: NotificationCreate,
    current_user: CurrentUser,
    service: Notifications,
) -> NotificationCreatedResponse:
    notification = service.create_for_sender(current_user, **payload.model_dump())
    logger.info(
        "Notification id=%s sent by employee_id=%s to employee_id=%s",
        notification.id,
        current_user.id,
        notification.recipient_id,
    )
    return NotificationCreatedResponse(notification_id=notification.id)
