"""Employee directory API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.auth.auth import CurrentUser
from app.auth.permissions import require_permissions
from models.employee import Employee
from repositories.employee_repository import EmployeeRepository
from routers.dependencies import AppSettings, DbSession, Page
from schemas.common import MessageResponse, Pagination
from schemas.employee import (
    DepartmentOut,
    EmployeeCreate,
    EmployeeCreatedResponse,
    EmployeeDetail,
    EmployeeListResponse,
    EmployeeSummary,
    EmployeeUpdate,
    RoleOut,
)
from services.employee_service import EmployeeService

logger = logging.getLogger(__name__)

router = APIRouter()

DirectoryReader = Annotated[
    Employee, Depends(require_permissions("manage_employees", "view_all_reports"))
]
EmployeeManager = Annotated[Employee, Depends(require_permissions("manage_employees"))]


@router.get("", response_model=EmployeeListResponse, summary="List employees")
def list_employees(
    current_user: DirectoryReader,
    db: DbSession,
    page: Page,
    search: str | None = None,
    department: str | None = None,
    status: str | None = None,
    sort_by: Annotated[str, Query(alias="sortBy")] = "firstName",
    sort_order: Annotated[str, Query(alias="sortOrder")] = "ASC",
) -> EmployeeListResponse:
    """List employees with search, filters and sorting.

    ``search`` matches names, email and employee code; unknown ``sortBy``
    keys fall back to the first name.
    """
    employees, total = EmployeeRepository(db).list_employees(
        offset=page.offset,
        limit=page.limit,
        search=search,
        department=department,
        status=status,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return EmployeeListResponse(
        employees=[EmployeeSummary.model_validate(employee) for employee in employees],
        pagination=Pagination.build(page.page, page.limit, total),
    )


@router.get("/meta/departments", response_model=list[DepartmentOut], summary="List departments")
def list_departments(current_user: CurrentUser, db: DbSession) -> list[DepartmentOut]:
    return [DepartmentOut.model_validate(d) for d in EmployeeRepository(db).list_departments()]


@router.get("/meta/roles", response_model=list[RoleOut], summary="List roles")
def list_roles(current_user: CurrentUser, db: DbSession) -> list[RoleOut]:
    return [RoleOut.model_validate(r) for r in EmployeeRepository(db).list_roles()]


@router.get(
    "/{employee_id}",
    response_model=EmployeeDetail,
    summary="Get an employee",
    responses={404: {"description": "Employee not found"}},
)
def get_employee(
    employee_id: int,
    current_user: DirectoryReader,
    db: DbSession,
    settings: AppSettings,
) -> EmployeeDetail:
    return EmployeeDetail.model_validate(EmployeeService(db, settings).get(employee_id))


@router.post(
    "",
    response_model=EmployeeCreatedResponse,
    status_code=201,
    summary="Create an employee",
    responses={409: {"description": "Employee ID or email already exists"}},
)
def create_employee(
    payload: EmployeeCreate,
    current_user: EmployeeManager,
    db: DbSession,
    settings: AppSettings,
) -> EmployeeCreatedResponse:
    employee = EmployeeService(db, settings).create(payload, created_by=current_user)
    logger.info("Employee id=%s created by employee_id=%s", employee.id, current_user.id)
    return EmployeeCreatedResponse(employee_id=employee.id)


@router.put("/{employee_id}", response_model=MessageResponse, summary="Update an employee")
def update_employee(
    employee_id: int,
    payload: EmployeeUpdate,
    current_user: EmployeeManager,
    db: DbSession,
    settings: AppSettings,
) -> MessageResponse:
    EmployeeService(db, settings).update(employee_id, payload, updated_by=current_user)
    return MessageResponse(message="Employee updated successfully")


@router.delete("/{employee_id}", response_model=MessageResponse, summary="Terminate an employee")
def delete_employee(
    employee_id: int,
    current_user: EmployeeManager,
    db: DbSession,
    settings: AppSettings,
) -> MessageResponse:
    """Soft delete: the employee is kept with status Terminated."""
    EmployeeService(db, settings).terminate(employee_id, deleted_by=current_user)
    return MessageResponse(message="Employee deleted successfully")
