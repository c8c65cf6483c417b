"""Leave management API endpoints."""

import logging
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.auth.auth import CurrentUser
from app.auth.permissions import manager_required, require_permissions
from models.employee import Employee
from routers.dependencies import AppSettings, DbSession, Notifications, Page
from schemas.common import MessageResponse, Pagination
from schemas.leave import (
    EmployeeBalances,
    LeaveApplicationCreate,
    LeaveApplicationCreatedResponse,
    LeaveApplicationListResponse,
    LeaveApplicationOut,
    LeaveBalanceOut,
    LeaveDecision,
    LeaveTypeOut,
)
from services.leave_service import LeaveService

logger = logging.getLogger(__name__)

router = APIRouter()


def get_leave_service(
    db: DbSession, settings: AppSettings, notifications: Notifications
) -> LeaveService:
    return LeaveService(db, settings, notifications)


Leave = Annotated[LeaveService, Depends(get_leave_service)]


@router.get(
    "/applications",
    response_model=LeaveApplicationListResponse,
    summary="List leave applications",
)
def list_applications(
    current_user: CurrentUser,
    service: Leave,
    page: Page,
    status: str | None = None,
    employee_id: Annotated[int | None, Query(alias="employeeId")] = None,
    start_date: Annotated[date | None, Query(alias="startDate")] = None,
    end_date: Annotated[date | None, Query(alias="endDate")] = None,
) -> LeaveApplicationListResponse:
    """List applications, newest first.

    Employees outside manager and HR roles only ever see their own.
    """
    applications, total = service.list_applications(
        current_user,
        page.page,
        page.limit,
        status=status,
        employee_id=employee_id,
        start_date=start_date,
        end_date=end_date,
    )
    return LeaveApplicationListResponse(
        applications=[LeaveApplicationOut.model_validate(a) for a in applications],
        pagination=Pagination.build(page.page, page.limit, total),
    )


@router.post(
    "/applications",
    response_model=LeaveApplicationCreatedResponse,
    status_code=201,
    summary="Apply for leave",
    responses={400: {"description": "Invalid dates or insufficient balance"}},
)
def submit_application(
    payload: LeaveApplicationCreate,
    current_user: CurrentUser,
    service: Leave,
) -> LeaveApplicationCreatedResponse:
    application = service.submit(current_user, payload)
    logger.info(
        "Leave application id=%s submitted by employee_id=%s for %s days",
        application.id,
        current_user.id,
        application.total_days,
    )
    return LeaveApplicationCreatedResponse(
        application_id=application.id,
        total_days=application.total_days,
    )


@router.patch(
    "/applications/{application_id}/status",
    response_model=MessageResponse,
    summary="Approve or reject a leave application",
    responses={
        404: {"description": "Leave application not found"},
        409: {"description": "Leave application already processed"},
    },
)
def decide_application(
    application_id: int,
    decision: LeaveDecision,
    current_user: Annotated[Employee, Depends(manager_required)],
    service: Leave,
) -> MessageResponse:
    service.decide(application_id, decision, approver=current_user)
    return MessageResponse(message=f"Leave application {decision.status.lower()} successfully")


@router.get("/balances", response_model=list[LeaveBalanceOut], summary="Leave balances")
def get_balances(
    current_user: CurrentUser,
    service: Leave,
    employee_id: Annotated[int | None, Query(alias="employeeId")] = None,
) -> list[LeaveBalanceOut]:
    balances = service.balances_for(current_user, employee_id)
    return [LeaveBalanceOut.model_validate(balance) for balance in balances]


@router.get(
    "/balances/all",
    response_model=list[EmployeeBalances],
    summary="Balances of all active employees",
)
def get_all_balances(
    current_user: Annotated[
        Employee, Depends(require_permissions("manage_employees", "view_all_reports"))
    ],
    service: Leave,
) -> list[EmployeeBalances]:
    return [EmployeeBalances.model_validate(entry) for entry in service.all_balances()]


@router.get("/types", response_model=list[LeaveTypeOut], summary="Leave types")
def get_leave_types(current_user: CurrentUser, service: Leave) -> list[LeaveTypeOut]:
    return [LeaveTypeOut.model_validate(leave_type) for leave_type in service.leave_types()]
