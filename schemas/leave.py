"""Pydantic schemas for leave applications, balances and types."""

from datetime import date, datetime
from typing import Literal

from pydantic import AliasChoices, Field, model_validator

from schemas.common import CamelModel, Pagination


class LeaveApplicationCreate(CamelModel):
    leave_type_id: int
    start_date: date
    end_date: date
    reason: str | None = Field(default=None, max_length=1000)
    attachments: list[str] = Field(default_factory=list)


class LeaveDecision(CamelModel):
    status: Literal["Approved", "Rejected"]
    rejection_reason: str | None = Field(default=None, max_length=1000)

    @model_validator(mode="after")
    def reason_required_on_rejection(self) -> "LeaveDecision":
        if self.status == "Rejected" and not (self.rejection_reason or "").strip():
            raise ValueError("rejectionReason is required when rejecting")
        return self


class LeaveApplicationOut(CamelModel):
    id: int
    employee_id: int
    employee_name: str | None = None
    employee_code: str | None = None
    leave_type_id: int
    leave_type_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("leave_type_name", "leaveType"),
        serialization_alias="leaveType",
    )
    start_date: date
    end_date: date
    total_days: int
    reason: str | None = None
    attachments: list[str] = Field(default_factory=list)
    status: str
    applied_date: date | None = None
    approved_by: int | None = None
    approved_by_name: str | None = None
    approved_date: datetime | None = None
    rejection_reason: str | None = None


class LeaveApplicationListResponse(CamelModel):
    applications: list[LeaveApplicationOut]
    pagination: Pagination


class LeaveApplicationCreatedResponse(CamelModel):
    message: str = "Leave application submitted successfully"
    application_id: int
    total_days: int


class LeaveBalanceOut(CamelModel):
    id: int
    employee_id: int
    employee_name: str | None = None
    employee_code: str | None = None
    leave_type_id: int
    leave_type_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("leave_type_name", "leaveType"),
        serialization_alias="leaveType",
    )
    max_days_per_year: int | None = None
    year: int
    total_days: float
    used_days: float
    remaining_days: float
    carry_forward_days: float


class BalanceLine(CamelModel):
    leave_type: str
    total_days: float
    used_days: float
    remaining_days: float
    carry_forward_days: float


class EmployeeBalances(CamelModel):
    employee_id: int
    employee_code: str
    employee_name: str
    department_name: str | None = None
    balances: list[BalanceLine]


class LeaveTypeOut(CamelModel):
    id: int
    name: str
    description: str | None = None
    max_days_per_year: int
    carry_forward: bool
    requires_approval: bool
