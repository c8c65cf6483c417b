"""Repository for in-app notifications."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from models.notification import Notification

logger = logging.getLogger(__name__)

URGENT_PRIORITIES = ("high", "urgent")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class NotificationRepository:
    """Data access layer for notifications, always scoped to a recipient."""

    def __init__(self, db: Session):
        """Initialize repository with database session.

        Args:
            db: SQLAlchemy database session.
        """
        self.db = db

    def create(
        self,
        recipient_id: int,
        type: str,
        title: str,
        message: str,
        sender_id: int | None = None,
        data: dict[str, Any] | None = None,
        priority: str = "medium",
    ) -> Notification:
        """Insert one notification.

        Args:
            recipient_id: Employee receiving the notification.
            type: Notification type such as ``leave_request``.
            title: Short heading.
            message: Body text.
            sender_id: Employee who triggered it, None for system messages.
            data: Structured payload for the client.
            priority: low, medium, high or urgent.

        Returns:
            The created Notification record.
        """
        notification = Notification(
            recipient_id=recipient_id,
            sender_id=sender_id,
            type=type,
            title=title,
            message=message,
            data=data,
            priority=priority,
            is_read=False,
        )
        self.db.add(notification)
        self.db.flush()
        logger.info(
            "Created notification: id=%s type=%s recipient_id=%s",
            notification.id,
            type,
            recipient_id,
        )
        return notification

    def get_for_recipient(self, notification_id: int, recipient_id: int) -> Notification | None:
        return (
            self.db.query(Notification)
            .filter(Notification.id == notification_id)
            .filter(Notification.recipient_id == recipient_id)
            .first()
        )

    def list_for_recipient(
        self,
        recipient_id: int,
        offset: int,
        limit: int,
        unread_only: bool = False,
    ) -> tuple[list[Notification], int]:
        query = self.db.query(Notification).filter(Notification.recipient_id == recipient_id)
        if unread_only:
            query = query.filter(Notification.is_read.is_(False))
        total = query.count()
        notifications = (
            query.order_by(Notification.created_at.desc(), Notification.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return notifications, total

    def unread_count(self, recipient_id: int) -> int:
        return (
            self.db.query(func.count(Notification.id))
            .filter(Notification.recipient_id == recipient_id)
            .filter(Notification.is_read.is_(False))
            .scalar()
        )

    def mark_read(self, notification: Notification) -> Notification:
        notification.is_read = True
        notification.read_at = utc_now()
        self.db.flush()
        return notification

    def mark_all_read(self, recipient_id: int) -> int:
        """Mark every unread notification of a recipient as read.

        Returns:
            Number of rows updated.
        """
        updated = (
            self.db.query(Notification)
            .filter(Notification.recipient_id == recipient_id)
            .filter(Notification.is_read.is_(False))
            .update(
                {Notification.is_read: True, Notification.read_at: utc_now()},
                synchronize_session=False,
            )
        )
        logger.info("Marked %s notifications read for recipient_id=%s", updated, recipient_id)
        return updated

    def delete(self, notification: Notification) -> None:
        self.db.delete(notification)
        self.db.flush()

    def count_owned(self, notification_ids: list[int], recipient_id: int) -> int:
        return (
            self.db.query(func.count(Notification.id))
            .filter(Notification.id.in_(notification_ids))
            .filter(Notification.recipient_id == recipient_id)
            .scalar()
        )

    def set_read_state(self, notification_ids: list[int], is_read: bool) -> int:
        """Set the read flag on the given notifications.

        Args:
            notification_ids: Notifications to update.
            is_read: New read state; ``read_at`` is cleared when unread.

        Returns:
            Number of rows updated.
        """
        return (
            self.db.query(Notification)
            .filter(Notification.id.in_(notification_ids))
            .update(
                {
                    Notification.is_read: is_read,
                    Notification.read_at: utc_now() if is_read else None,
                },
                synchronize_session=False,
            )
        )

    def delete_many(self, notification_ids: list[int]) -> int:
        return (
            self.db.query(Notification)
            .filter(Notification.id.in_(notification_ids))
            .delete(synchronize_session=False)
        )

    def delete_read_before(self, cutoff: datetime) -> int:
        """Delete read notifications created before ``cutoff``.

        Returns:
            Number of rows deleted.
        """
        deleted = (
            self.db.query(Notification)
            .filter(Notification.is_read.is_(True))
            .filter(Notification.created_at < cutoff)
            .delete(synchronize_session=False)
        )
        logger.info("Deleted %s read notifications created before %s", deleted, cutoff)
        return deleted

    def stats(self, recipient_id: int) -> dict[str, int]:
        """Counters shown on the notification dashboard."""
        now = utc_now()
        unread = Notification.is_read.is_(False)
        row = (
            self.db.query(
                func.count(Notification.id),
                func.sum(case((unread, 1), else_=0)),
                func.sum(
                    case((unread & Notification.priority.in_(URGENT_PRIORITIES), 1), else_=0)
                ),
                func.sum(case((Notification.created_at >= now - timedelta(days=1), 1), else_=0)),
                func.sum(case((Notification.created_at >= now - timedelta(days=7), 1), else_=0)),
            )
            .filter(Notification.recipient_id == recipient_id)
            .one()
        )
        total, unread_count, urgent, today, week = row
        return {
            "total_notifications": total or 0,
            "unread_notifications": unread_count or 0,
            "high_priority_unread": urgent or 0,
            "today_notifications": today or 0,
            "week_notifications": week or 0,
        }

    def type_breakdown(self, recipient_id: int, days: int = 30) -> list[dict[str, Any]]:
        count = func.count(Notification.id)
        rows = (
            self.db.query(Notification.type, count)
            .filter(Notification.recipient_id == recipient_id)
            .filter(Notification.created_at >= utc_now() - timedelta(days=days))
            .group_by(Notification.type)
            .order_by(count.desc())
            .all()
        )
        return [{"type": type_, "count": total} for type_, total in rows]
