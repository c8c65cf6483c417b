"""Schemas package."""

from schemas.auth import (
    AuthenticatedUser,
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    ProfileResponse,
    TokenResponse,
)
from schemas.common import CamelModel, MessageResponse, Pagination
from schemas.employee import (
    EmployeeCreate,
    EmployeeDetail,
    EmployeeListResponse,
    EmployeeSummary,
    EmployeeUpdate,
)
from schemas.leave import LeaveApplicationCreate, LeaveDecision
from schemas.notification import BulkAction, NotificationCreate
from schemas.performance import ReviewCreate, ReviewUpdate, WorkLogCreate, WorkLogUpdate
from schemas.report import ReportRequest

__all__ = [
    "AuthenticatedUser",
    "BulkAction",
    "CamelModel",
    "ChangePasswordRequest",
    "EmployeeCreate",
    "EmployeeDetail",
    "EmployeeListResponse",
    "EmployeeSummary",
    "EmployeeUpdate",
    "LeaveApplicationCreate",
    "LeaveDecision",
    "LoginRequest",
    "LoginResponse",
    "MessageResponse",
    "NotificationCreate",
    "Pagination",
    "ProfileResponse",
    "ReportRequest",
    "ReviewCreate",
    "ReviewUpdate",
    "TokenResponse",
    "WorkLogCreate",
    "WorkLogUpdate",
]
