"""Transactional email over SMTP."""

import logging
import smtplib
from datetime import date
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape

from config.settings import Settings

logger = logging.getLogger(__name__)

SMTP_SSL_PORT = 465
SMTP_TIMEOUT_SECONDS = 10


class EmailDeliveryError(Exception):
    """Raised when the SMTP server rejects or cannot receive a message."""


def _rows(fields: dict[str, object]) -> str:
    return "\n".join(
        f"<p><strong>{escape(label)}:</strong> {escape(str(value))}</p>"
        for label, value in fields.items()
    )


class EmailService:
    """Sends HR emails through the configured SMTP server.

    When no SMTP host is configured the service is disabled: messages are
    logged and dropped instead of sent.
    """

    def __init__(self, settings: Settings):
        self.settings = settings

    @property
    def enabled(self) -> bool:
        return self.settings.email_enabled

    def send_email(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: str | None = None,
    ) -> bool:
        """Send one email.

        Args:
            to_email: Recipient address.
            subject: Subject line.
            html_content: HTML body.
            text_content: Plain text alternative.

        Returns:
            True when the message was handed to the server, False when email
            is disabled.

        Raises:
            EmailDeliveryError: Connecting, authenticating or sending failed.
        """
        if not self.enabled:
            logger.info("Email disabled, not sending %r to %s", subject, to_email)
            return False

        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.settings.sender_address
        msg["To"] = to_email
        if text_content:
            msg.attach(MIMEText(text_content, "plain"))
        msg.attach(MIMEText(html_content, "html"))

        try:
            with self._connect() as server:
                if self.settings.smtp_port != SMTP_SSL_PORT:
                    server.starttls()
                if self.settings.smtp_user and self.settings.smtp_password:
                    server.login(self.settings.smtp_user, self.settings.smtp_password)
                server.sendmail(self.settings.sender_address, [to_email], msg.as_string())
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Failed to send %r to %s: %s", subject, to_email, e)
            raise EmailDeliveryError(str(e)) from e

        logger.info("Email %r sent to %s", subject, to_email)
        return True

    def _connect(self) -> smtplib.SMTP:
        host = self.settings.smtp_host
        port = self.settings.smtp_port
        if port == SMTP_SSL_PORT:
            return smtplib.SMTP_SSL(host, port, timeout=SMTP_TIMEOUT_SECONDS)
        return smtplib.SMTP(host, port, timeout=SMTP_TIMEOUT_SECONDS)

    def send_leave_request(
        self,
        manager_email: str,
        employee_name: str,
        employee_code: str,
        leave_type: str,
        start_date: date,
        end_date: date,
        total_days: int,
        reason: str | None,
    ) -> bool:
        subject = f"Leave Request - {employee_name}"
        html_content = (
            "<h2>New Leave Request</h2>\n"
            + _rows(
                {
                    "Employee": employee_name,
                    "Employee ID": employee_code,
                    "Leave Type": leave_type,
                    "Dates": f"{start_date.isoformat()} to {end_date.isoformat()}",
                    "Total Days": total_days,
                    "Reason": reason or "N/A",
                    "Applied Date": date.today().isoformat(),
                }
            )
            + "\n<p>Please review and approve or reject this leave request in the "
            "Employee Management System.</p>"
        )
        return self.send_email(manager_email, subject, html_content)

    def send_leave_decision(
        self,
        employee_email: str,
        leave_type: str,
        start_date: date,
        end_date: date,
        total_days: int,
        status: str,
        rejection_reason: str | None = None,
    ) -> bool:
        fields: dict[str, object] = {
            "Leave Type": leave_type,
            "Dates": f"{start_date.isoformat()} to {end_date.isoformat()}",
            "Total Days": total_days,
            "Status": status,
        }
        if status == "Rejected" and rejection_reason:
            fields["Reason for Rejection"] = rejection_reason
        html_content = f"<h2>Leave Request {escape(status)}</h2>\n" + _rows(fields)
        return self.send_email(employee_email, f"Leave Request {status}", html_content)

    def send_upcoming_leave_reminder(
        self,
        employee_email: str,
        leave_type: str,
        start_date: date,
        end_date: date,
        total_days: int,
    ) -> bool:
        html_content = (
            "<h2>Leave Reminder</h2>\n"
            "<p>This is a reminder that your approved leave is starting soon:</p>\n"
            + _rows(
                {
                    "Leave Type": leave_type,
                    "Start Date": start_date.isoformat(),
                    "End Date": end_date.isoformat(),
                    "Total Days": total_days,
                }
            )
            + "\n<p>Please ensure all your work is properly handed over before your "
            "leave begins.</p>"
        )
        return self.send_email(employee_email, "Upcoming Leave Reminder", html_content)

    def send_performance_review(
        self,
        employee_email: str,
        review_period: str,
        overall_rating: float | None,
        review_date: date,
    ) -> bool:
        rating = f"{overall_rating:g}/5" if overall_rating is not None else "Not rated"
        html_content = (
            "<h2>Performance Review</h2>\n"
            f"<p>Your performance review for {escape(review_period)} is now available.</p>\n"
            + _rows({"Overall Rating": rating, "Review Date": review_date.isoformat()})
            + "\n<p>Please log into the Employee Management System to view your "
            "complete review.</p>"
        )
        return self.send_email(employee_email, "Performance Review Available", html_content)

    def send_notification(self, to_email: str, title: str, message: str) -> bool:
        """Generic wrapper used for in-app notifications mirrored to email."""
        html_content = f"<h2>{escape(title)}</h2>\n<p>{escape(message)}</p>"
        return self.send_email(to_email, title, html_content, text_content=message)
