"""Schemas for in-app notifications."""

from datetime import datetime
from typing import Any, Literal

from pydantic import Field

from schemas.common import CamelModel, Pagination

Priority = Literal["low", "medium", "high", "urgent"]


class NotificationCreate(CamelModel):
    recipient_id: int
    type: str = Field(max_length=50)
    title: str = Field(max_length=255)
    message: str
    data: dict[str, Any] | None = None
    priority: Priority = "medium"


class NotificationOut(CamelModel):
    id: int
    recipient_id: int
    sender_id: int | None = None
    sender_name: str | None = None
    type: str
    title: str
    message: str
    data: dict[str, Any] | None = None
    priority: str
    is_read: bool
    read_at: datetime | None = None
    created_at: datetime | None = None


class NotificationListResponse(CamelModel):
    notifications: list[NotificationOut]
    pagination: Pagination


class NotificationCreatedResponse(CamelModel):
    message: str = "Notification created successfully"
    notification_id: int


class UnreadCount(CamelModel):
    count: int


class NotificationCounts(CamelModel):
    total_notifications: int
    unread_notifications: int
    high_priority_unread: int
    today_notifications: int
    week_notifications: int


class TypeCount(CamelModel):
    type: str
    count: int


class NotificationStats(CamelModel):
    stats: NotificationCounts
    type_breakdown: list[TypeCount]


class BulkAction(CamelModel):
    """Bulk operation over the caller's notifications.

    ``action`` is checked by the service so that an unknown value is reported
    as "Invalid action" rather than a schema error.
    """

    action: str
    notification_ids: list[int] = Field(default_factory=list)
