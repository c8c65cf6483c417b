"""Models package."""

from models.base import Base, TimestampMixin
from models.employee import Department, Employee, Permission, Role, role_permissions
from models.leave import LeaveApplication, LeaveBalance, LeaveType
from models.notification import AuditLog, Notification
from models.performance import PerformanceMetric, PerformanceReview, Project, WorkLog

__all__ = [
    "Base",
    "TimestampMixin",
    "Department",
    "Employee",
    "Permission",
    "Role",
    "role_permissions",
    "LeaveApplication",
    "LeaveBalance",
    "LeaveType",
    "AuditLog",
    "Notification",
    "PerformanceMetric",
    "PerformanceReview",
    "Project",
    "WorkLog",
]
