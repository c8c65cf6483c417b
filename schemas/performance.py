"""Schemas for performance reviews, work logs, projects and analytics."""

from datetime import date, datetime
from typing import Literal

from pydantic import Field, field_validator

from schemas.common import CamelModel, Pagination, reject_null

ReviewStatus = Literal["Draft", "Submitted", "Approved", "Published"]
WorkLogStatus = Literal["In Progress", "Completed", "Blocked"]


class MetricIn(CamelModel):
    metric_name: str = Field(max_length=100)
    rating: float = Field(ge=1, le=5)
    comments: str | None = Field(default=None, max_length=500)
    weight: float = Field(default=1.0, ge=0, le=1)


class MetricOut(CamelModel):
    id: int
    metric_name: str
    rating: float
    comments: str | None = None
    weight: float


class ReviewCreate(CamelModel):
    """Payload for opening a review of one employee for one period."""

    employee_id: int
    review_period: str = Field(max_length=50)
    overall_rating: float | None = Field(default=None, ge=1, le=5)
    goals: str | None = None
    achievements: str | None = None
    areas_for_improvement: str | None = None
    feedback: str | None = None
    metrics: list[MetricIn] = Field(default_factory=list)


class ReviewUpdate(CamelModel):
    overall_rating: float | None = Field(default=None, ge=1, le=5)
    goals: str | None = None
    achievements: str | None = None
    areas_for_improvement: str | None = None
    feedback: str | None = None
    employee_comments: str | None = None
    status: ReviewStatus | None = None

    @field_validator("status")
    @classmethod
    def status_not_null(cls, value):
        return reject_null(value)


class ReviewOut(CamelModel):
    id: int
    employee_id: int
    employee_name: str | None = None
    employee_code: str | None = None
    department_name: str | None = None
    reviewer_id: int
    reviewer_name: str | None = None
    review_period: str
    overall_rating: float | None = None
    goals: str | None = None
    achievements: str | None = None
    areas_for_improvement: str | None = None
    feedback: str | None = None
    employee_comments: str | None = None
    status: str
    review_date: date | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ReviewDetail(ReviewOut):
    metrics: list[MetricOut] = Field(default_factory=list)


class ReviewListResponse(CamelModel):
    reviews: list[ReviewOut]
    pagination: Pagination


class ReviewCreatedResponse(CamelModel):
    message: str = "Performance review created successfully"
    review_id: int


class WorkLogCreate(CamelModel):
    project_id: int | None = None
    log_date: date
    hours_worked: float = Field(ge=0, le=24)
    task_description: str | None = Field(default=None, max_length=1000)
    status: WorkLogStatus = "Completed"


class WorkLogUpdate(CamelModel):
    project_id: int | None = None
    hours_worked: float | None = Field(default=None, ge=0, le=24)
    task_description: str | None = Field(default=None, max_length=1000)
    status: WorkLogStatus | None = None

    @field_validator("hours_worked", "status")
    @classmethod
    def required_columns_not_null(cls, value):
        return reject_null(value)


class WorkLogOut(CamelModel):
    id: int
    employee_id: int
    employee_name: str | None = None
    employee_code: str | None = None
    project_id: int | None = None
    project_name: str | None = None
    log_date: date
    hours_worked: float
    task_description: str | None = None
    status: str
    created_at: datetime | None = None


class WorkLogListResponse(CamelModel):
    work_logs: list[WorkLogOut]
    pagination: Pagination


class WorkLogCreatedResponse(CamelModel):
    message: str = "Work log created successfully"
    work_log_id: int


class ProjectOut(CamelModel):
    id: int
    name: str
    description: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    status: str
    manager_id: int | None = None
    manager_name: str | None = None
    department_id: int | None = None
    department_name: str | None = None


class DepartmentPerformance(CamelModel):
    department_name: str
    avg_rating: float | None = None
    review_count: int
    employee_count: int


class TopPerformer(CamelModel):
    employee_id: int
    employee_code: str
    employee_name: str
    department_name: str | None = None
    avg_rating: float
    review_count: int


class MonthlyHours(CamelModel):
    year: int
    month: int
    total_hours: float
    avg_hours_per_day: float | None = None
    active_employees: int


class PerformanceAnalytics(CamelModel):
    period: str
    department_performance: list[DepartmentPerformance]
    top_performers: list[TopPerformer]
    work_hours: list[MonthlyHours]
