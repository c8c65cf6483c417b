"""In-app notification dispatch, optional email mirroring and scheduled reminders."""

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Any

from sqlalchemy.orm import Session

from app.errors import Forbidden, NotFound, ValidationError
from models.employee import Employee
from models.leave import LEAVE_APPROVED, LeaveApplication
from models.notification import Notification
from models.performance import PerformanceReview
from repositories.employee_repository import EmployeeRepository
from repositories.leave_repository import LeaveRepository
from repositories.notification_repository import NotificationRepository
from services.email_service import EmailDeliveryError, EmailService

logger = logging.getLogger(__name__)

LEAVE_REQUEST = "leave_request"
LEAVE_APPROVED_TYPE = "leave_approved"
LEAVE_REJECTED_TYPE = "leave_rejected"
LEAVE_REMINDER = "leave_reminder"
PERFORMANCE_REVIEW = "performance_review"
BIRTHDAY_REMINDER = "birthday_reminder"
ANNIVERSARY_REMINDER = "anniversary_reminder"


class NotificationService:
    """Creates notification rows and mirrors selected ones to email.

    Each public method commits its own unit of work. Email is sent after the
    commit and a delivery failure never undoes the notification.
    """

    def __init__(self, db: Session, email_service: EmailService):
        self.db = db
        self.email_service = email_service
        self.repo = NotificationRepository(db)

    def create_notification(
        self,
        recipient_id: int,
        type: str,
        title: str,
        message: str,
        sender_id: int | None = None,
        data: dict[str, Any] | None = None,
        priority: str = "medium",
        send_email: bool = False,
    ) -> Notification:
        """Insert a notification and optionally email the recipient.

        Args:
            recipient_id: Employee receiving the notification.
            type: Notification type.
            title: Short heading, also used as email subject.
            message: Body text.
            sender_id: Employee who triggered it.
            data: Structured payload stored as JSON.
            priority: low, medium, high or urgent.
            send_email: Also send the message by email.

        Returns:
            The committed Notification record.
        """
        notification = self.repo.create(
            recipient_id=recipient_id,
            sender_id=sender_id,
            type=type,
            title=title,
            message=message,
            data=data,
            priority=priority,
        )
        self.db.commit()

        if send_email:
            self._send_email_copy(recipient_id, title, message)
        return notification

    def _send_email_copy(self, recipient_id: int, title: str, message: str) -> None:
        recipient = self.db.get(Employee, recipient_id)
        if recipient is None:
            logger.warning("Notification recipient_id=%s vanished before email", recipient_id)
            return
        try:
            self.email_service.send_notification(
                recipient.email,
                title,
                f"Dear {recipient.full_name}, {message}",
            )
        except EmailDeliveryError:
            logger.warning(
                "Email copy of notification %r to recipient_id=%s failed",
                title,
                recipient_id,
            )

    def create_bulk_notifications(self, notifications: list[dict[str, Any]]) -> list[Notification]:
        """Create several notifications; each dict holds create_notification arguments."""
        return [self.create_notification(**notification) for notification in notifications]

    def create_for_sender(
        self,
        sender: Employee,
        recipient_id: int,
        type: str,
        title: str,
        message: str,
        data: dict[str, Any] | None = None,
        priority: str = "medium",
    ) -> Notification:
        """Create a notification on behalf of an API caller.

        Raises:
            NotFound: The recipient does not exist.
        """
        if EmployeeRepository(self.db).get_by_id(recipient_id) is None:
            raise NotFound("Recipient not found")
        return self.create_notification(
            recipient_id=recipient_id,
            sender_id=sender.id,
            type=type,
            title=title,
            message=message,
            data=data,
            priority=priority,
        )

    # Workflow notifications

    def _deliver(self, description: str, send, *args) -> None:
        try:
            send(*args)
        except EmailDeliveryError:
            logger.warning("Email for %s failed; in-app notification kept", description)

    def notify_leave_request(
        self, manager: Employee, employee: Employee, application: LeaveApplication
    ) -> Notification:
        """Tell a manager about a new leave request, in-app and by email."""
        notification = self.create_notification(
            recipient_id=manager.id,
            sender_id=employee.id,
            type=LEAVE_REQUEST,
            title="New Leave Request",
            message=(
                f"{employee.full_name} has submitted a leave request for "
                f"{application.start_date.isoformat()} to {application.end_date.isoformat()}"
            ),
            data={
                "leaveApplicationId": application.id,
                "employeeId": employee.id,
                "leaveType": application.leave_type_name,
            },
            priority="high",
        )
        self._deliver(
            f"leave application {application.id}",
            self.email_service.send_leave_request,
            manager.email,
            employee.full_name,
            employee.employee_code,
            application.leave_type_name or "",
            application.start_date,
            application.end_date,
            application.total_days,
            application.reason,
        )
        return notification

    def notify_leave_decision(self, application: LeaveApplication, approver_id: int) -> Notification:
        """Tell the applicant whether their leave was approved or rejected."""
        status = application.status
        notification = self.create_notification(
            recipient_id=application.employee_id,
            sender_id=approver_id,
            type=LEAVE_APPROVED_TYPE if status == LEAVE_APPROVED else LEAVE_REJECTED_TYPE,
            title=f"Leave Request {status}",
            message=(
                f"Your leave request for {application.start_date.isoformat()} to "
                f"{application.end_date.isoformat()} has been {status.lower()}"
            ),
            data={"leaveApplicationId": application.id, "status": status},
            priority="medium",
        )
        self._deliver(
            f"leave decision {application.id}",
            self.email_service.send_leave_decision,
            application.employee.email,
            application.leave_type_name or "",
            application.start_date,
            application.end_date,
            application.total_days,
            status,
            application.rejection_reason,
        )
        return notification

    def notify_performance_review(self, review: PerformanceReview, reviewer_id: int) -> Notification:
        notification = self.create_notification(
            recipient_id=review.employee_id,
            sender_id=reviewer_id,
            type=PERFORMANCE_REVIEW,
            title="Performance Review Available",
            message=f"Your performance review for {review.review_period} is now available",
            data={
                "performanceReviewId": review.id,
                "reviewPeriod": review.review_period,
                "overallRating": review.overall_rating,
            },
            priority="medium",
        )
        self._deliver(
            f"performance review {review.id}",
            self.email_service.send_performance_review,
            review.employee.email,
            review.review_period,
            review.overall_rating,
            review.review_date or date.today(),
        )
        return notification

    # Scheduled jobs

    def send_birthday_reminders(self, today: date) -> int:
        """Greet employees whose birthday is today and tell their managers.

        Returns:
            Number of employees celebrated.
        """
        employees = EmployeeRepository(self.db).birthdays_on(today.month, today.day)
        for employee in employees:
            if employee.manager_id:
                self.create_notification(
                    recipient_id=employee.manager_id,
                    type=BIRTHDAY_REMINDER,
                    title="Employee Birthday",
                    message=f"Today is {employee.full_name}'s birthday!",
                    data={"employeeId": employee.id},
                    priority="low",
                )
            self.create_notification(
                recipient_id=employee.id,
                type=BIRTHDAY_REMINDER,
                title="Happy Birthday!",
                message="Wishing you a wonderful birthday and a great year ahead!",
                priority="low",
            )
        logger.info("Sent birthday reminders for %s employees", len(employees))
        return len(employees)

    def send_work_anniversary_reminders(self, today: date) -> int:
        """Congratulate employees hired on this day in an earlier year.

        Returns:
            Number of employees celebrated.
        """
        celebrated = 0
        for employee in EmployeeRepository(self.db).hired_on(today.month, today.day):
            years = today.year - employee.hire_date.year
            if years <= 0:
                continue
            if employee.manager_id:
                self.create_notification(
                    recipient_id=employee.manager_id,
                    type=ANNIVERSARY_REMINDER,
                    title="Employee Work Anniversary",
                    message=(
                        f"{employee.full_name} is celebrating {years} years with the company today!"
                    ),
                    data={"employeeId": employee.id, "yearsOfService": years},
                    priority="low",
                )
            self.create_notification(
                recipient_id=employee.id,
                type=ANNIVERSARY_REMINDER,
                title="Work Anniversary!",
                message=(
                    f"Congratulations on {years} years with the company! "
                    "Thank you for your dedication and hard work."
                ),
                data={"yearsOfService": years},
                priority="low",
            )
            celebrated += 1
        logger.info("Sent anniversary reminders for %s employees", celebrated)
        return celebrated

    def send_upcoming_leave_reminders(self, today: date, days_ahead: int = 1) -> int:
        """Remind employees whose approved leave starts ``days_ahead`` days from today.

        Returns:
            Number of reminders created.
        """
        start = today + timedelta(days=days_ahead)
        applications = LeaveRepository(self.db).approved_starting_on(start)
        for application in applications:
            self.create_notification(
                recipient_id=application.employee_id,
                type=LEAVE_REMINDER,
                title="Upcoming Leave Reminder",
                message=(
                    f"Your {application.leave_type_name} leave starts on "
                    f"{application.start_date.isoformat()}"
                ),
                data={"leaveApplicationId": application.id},
                priority="medium",
            )
            self._deliver(
                f"leave reminder {application.id}",
                self.email_service.send_upcoming_leave_reminder,
                application.employee.email,
                application.leave_type_name or "",
                application.start_date,
                application.end_date,
                application.total_days,
            )
        logger.info("Sent %s upcoming leave reminders for %s", len(applications), start)
        return len(applications)

    def cleanup_old_notifications(self, days_old: int = 30) -> int:
        """Delete read notifications older than ``days_old`` days.

        Returns:
            Number of notifications deleted.
        """
        cutoff = datetime.now(timezone.utc) - timedelta(days=days_old)
        deleted = self.repo.delete_read_before(cutoff)
        self.db.commit()
        return deleted

    # Inbox

    def inbox(
        self, recipient: Employee, offset: int, limit: int, unread_only: bool = False
    ) -> tuple[list[Notification], int]:
        return self.repo.list_for_recipient(recipient.id, offset, limit, unread_only)

    def unread_count(self, recipient: Employee) -> int:
        return self.repo.unread_count(recipient.id)

    def _owned(self, notification_id: int, recipient: Employee) -> Notification:
        notification = self.repo.get_for_recipient(notification_id, recipient.id)
        if notification is None:
            raise NotFound("Notification not found")
        return notification

    def mark_read(self, notification_id: int, recipient: Employee) -> Notification:
        notification = self.repo.mark_read(self._owned(notification_id, recipient))
        self.db.commit()
        return notification

    def mark_all_read(self, recipient: Employee) -> int:
        updated = self.repo.mark_all_read(recipient.id)
        self.db.commit()
        return updated

    def delete(self, notification_id: int, recipient: Employee) -> None:
        self.repo.delete(self._owned(notification_id, recipient))
        self.db.commit()

    def stats(self, recipient: Employee) -> dict[str, Any]:
        return {
            "stats": self.repo.stats(recipient.id),
            "type_breakdown": self.repo.type_breakdown(recipient.id),
        }

    def bulk_action(self, recipient: Employee, action: str, notification_ids: list[int]) -> str:
        """Apply ``action`` to notifications owned by ``recipient``.

        Every id must belong to the caller; otherwise nothing is changed.

        Returns:
            The confirmation message for the action.

        Raises:
            ValidationError: Empty id list or unknown action.
            Forbidden: Some ids belong to another recipient or do not exist.
        """
        ids = list(set(notification_ids))
        if not ids:
            raise ValidationError("Invalid notification IDs")
        if self.repo.count_owned(ids, recipient.id) != len(ids):
            raise Forbidden("Some notifications do not belong to you")

        if action == "mark_read":
            self.repo.set_read_state(ids, True)
            message = "Notifications marked as read"
        elif action == "mark_unread":
            self.repo.set_read_state(ids, False)
            message = "Notifications marked as unread"
        elif action == "delete":
            self.repo.delete_many(ids)
            message = "Notifications deleted"
        else:
            raise ValidationError("Invalid action")

        self.db.commit()
        logger.info("Bulk %s on %s notifications for recipient_id=%s", action, len(ids), recipient.id)
        return message
