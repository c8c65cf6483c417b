"""Schemas for report templates, generation requests and dashboard analytics."""

from datetime import date
from typing import Literal

from pydantic import Field

from schemas.common import CamelModel

ReportFormat = Literal["PDF", "Excel"]


class ReportTemplate(CamelModel):
    id: str
    name: str
    description: str
    type: str
    formats: list[str]
    parameters: list[str]


class ReportRequest(CamelModel):
    """Body of a report generation call; unused filters are ignored per report."""

    format: ReportFormat = "PDF"
    department_id: int | None = None
    employee_id: int | None = None
    leave_type_id: int | None = None
    project_id: int | None = None
    period: str = "current-quarter"
    year: int | None = None
    start_date: date | None = None
    end_date: date | None = None
    status: str | None = None


class DepartmentSummary(CamelModel):
    department_name: str
    employee_count: int
    avg_performance: float | None = None
    total_hours: float = 0


class LeaveUtilization(CamelModel):
    leave_type: str
    total_allocated: float
    total_used: float
    utilization_percentage: float


class HoursTrend(CamelModel):
    year: int
    month: int
    total_hours: float
    active_employees: int


class ReportAnalytics(CamelModel):
    department_performance: list[DepartmentSummary] = Field(default_factory=list)
    leave_utilization: list[LeaveUtilization] = Field(default_factory=list)
    work_hours_trend: list[HoursTrend] = Field(default_factory=list)
