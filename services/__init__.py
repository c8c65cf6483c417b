"""Services package."""

from services.email_service import EmailDeliveryError, EmailService
from services.employee_service import EmployeeService
from services.leave_service import LeaveService, calculate_leave_days
from services.notification_service import NotificationService
from services.performance_service import PerformanceService
from services.report_service import ReportService
from services.work_log_service import WorkLogService

__all__ = [
    "EmailDeliveryError",
    "EmailService",
    "EmployeeService",
    "LeaveService",
    "NotificationService",
    "PerformanceService",
    "ReportService",
    "WorkLogService",
    "calculate_leave_days",
]
