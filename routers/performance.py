"""Performance reviews, work logs, projects and performance analytics."""

import logging
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.auth.auth import CurrentUser
from app.auth.permissions import manager_required, require_permissions
from models.employee import Employee
from routers.dependencies import AppSettings, DbSession, Notifications, Page
from schemas.common import MessageResponse, Pagination
from schemas.performance import (
    PerformanceAnalytics,
    ProjectOut,
    ReviewCreate,
    ReviewCreatedResponse,
    ReviewDetail,
    ReviewListResponse,
    ReviewOut,
    ReviewUpdate,
    WorkLogCreate,
    WorkLogCreatedResponse,
    WorkLogListResponse,
    WorkLogOut,
    WorkLogUpdate,
)
from services.performance_service import PerformanceService
from services.work_log_service import WorkLogService

logger = logging.getLogger(__name__)

router = APIRouter()

Manager = Annotated[Employee, Depends(manager_required)]


def get_performance_service(
    db: DbSession, settings: AppSettings, notifications: Notifications
) -> PerformanceService:
    return PerformanceService(db, settings, notifications)


def get_work_log_service(db: DbSession) -> WorkLogService:
    return WorkLogService(db)


Reviews = Annotated[PerformanceService, Depends(get_performance_service)]
WorkLogs = Annotated[WorkLogService, Depends(get_work_log_service)]


# Performance reviews


@router.get("/reviews", response_model=ReviewListResponse, summary="List performance reviews")
def list_reviews(
    current_user: CurrentUser,
    service: Reviews,
    page: Page,
    employee_id: Annotated[int | None, Query(alias="employeeId")] = None,
    review_period: Annotated[str | None, Query(alias="reviewPeriod")] = None,
    status: str | None = None,
    sort_by: Annotated[str, Query(alias="sortBy")] = "reviewDate",
    sort_order: Annotated[str, Query(alias="sortOrder")] = "DESC",
) -> ReviewListResponse:
    reviews, total = service.list_reviews(
        current_user,
        page.page,
        page.limit,
        employee_id=employee_id,
        review_period=review_period,
        status=status,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return ReviewListResponse(
        reviews=[ReviewOut.model_validate(review) for review in reviews],
        pagination=Pagination.build(page.page, page.limit, total),
    )


@router.get(
    "/reviews/{review_id}",
    response_model=ReviewDetail,
    summary="Get a performance review with its metrics",
)
def get_review(review_id: int, current_user: CurrentUser, service: Reviews) -> ReviewDetail:
    return ReviewDetail.model_validate(service.get_review(review_id, current_user))


@router.post(
    "/reviews",
    response_model=ReviewCreatedResponse,
    status_code=201,
    summary="Create a performance review",
    responses={409: {"description": "Review already exists for this period"}},
)
def create_review(
    payload: ReviewCreate,
    current_user: Manager,
    service: Reviews,
) -> ReviewCreatedResponse:
    review = service.create_review(payload, reviewer=current_user)
    logger.info(
        "Performance review id=%s for employee_id=%s created by employee_id=%s",
        review.id,
        review.employee_id,
        current_user.id,
    )
    return ReviewCreatedResponse(review_id=review.id)


@router.put("/reviews/{review_id}", response_model=MessageResponse, summary="Update a review")
def update_review(
    review_id: int,
    payload: ReviewUpdate,
    current_user: Manager,
    service: Reviews,
) -> MessageResponse:
    service.update_review(review_id, payload, current_user)
    return MessageResponse(message="Performance review updated successfully")


# Work logs


@router.get("/work-logs", response_model=WorkLogListResponse, summary="List work logs")
def list_work_logs(
    current_user: CurrentUser,
    service: WorkLogs,
    page: Page,
    employee_id: Annotated[int | None, Query(alias="employeeId")] = None,
    project_id: Annotated[int | None, Query(alias="projectId")] = None,
    start_date: Annotated[date | None, Query(alias="startDate")] = None,
    end_date: Annotated[date | None, Query(alias="endDate")] = None,
    sort_by: Annotated[str, Query(alias="sortBy")] = "logDate",
    sort_order: Annotated[str, Query(alias="sortOrder")] = "DESC",
) -> WorkLogListResponse:
    work_logs, total = service.list_work_logs(
        current_user,
        page.page,
        page.limit,
        employee_id=employee_id,
        project_id=project_id,
        start_date=start_date,
        end_date=end_date,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return WorkLogListResponse(
        work_logs=[WorkLogOut.model_validate(work_log) for work_log in work_logs],
        pagination=Pagination.build(page.page, page.limit, total),
    )


@router.post(
    "/work-logs",
    response_model=WorkLogCreatedResponse,
    status_code=201,
    summary="Log work hours",
    responses={400: {"description": "Daily total would exceed 24 hours"}},
)
def create_work_log(
    payload: WorkLogCreate,
    current_user: CurrentUser,
    service: WorkLogs,
) -> WorkLogCreatedResponse:
    work_log = service.create(current_user, payload)
    return WorkLogCreatedResponse(work_log_id=work_log.id)


@router.put("/work-logs/{work_log_id}", response_model=MessageResponse, summary="Update a work log")
def update_work_log(
    work_log_id: int,
    payload: WorkLogUpdate,
    current_user: CurrentUser,
    service: WorkLogs,
) -> MessageResponse:
    service.update(work_log_id, payload, current_user)
    return MessageResponse(message="Work log updated successfully")


@router.delete(
    "/work-logs/{work_log_id}", response_model=MessageResponse, summary="Delete a work log"
)
def delete_work_log(
    work_log_id: int,
    current_user: CurrentUser,
    service: WorkLogs,
) -> MessageResponse:
    service.delete(work_log_id, current_user)
    return MessageResponse(message="Work log deleted successfully")


@router.get("/projects", response_model=list[ProjectOut], summary="Active projects")
def list_projects(current_user: CurrentUser, service: WorkLogs) -> list[ProjectOut]:
    return [ProjectOut.model_validate(project) for project in service.active_projects()]


@router.get(
    "/analytics",
    response_model=PerformanceAnalytics,
    summary="Performance analytics",
)
def performance_analytics(
    current_user: Annotated[
        Employee, Depends(require_permissions("view_all_reports", "manage_team"))
    ],
    service: Reviews,
    period: str = "current-quarter",
    department_id: Annotated[int | None, Query(alias="departmentId")] = None,
) -> PerformanceAnalytics:
    """Department averages, top performers and monthly hours.

    Only published reviews count towards ratings.
    """
    return PerformanceAnalytics.model_validate(service.analytics(period, department_id))
