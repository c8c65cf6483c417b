"""Pydantic schemas for employee records and lookup tables."""

from datetime import date, datetime
from typing import Any, Literal

from pydantic import AliasChoices, EmailStr, Field, field_validator

from schemas.common import CamelModel, Pagination, reject_null

EmployeeStatus = Literal["Active", "Inactive", "On Leave", "Terminated"]


class EmployeeCreate(CamelModel):
    """Payload for hiring a new employee."""

    employee_id: str = Field(max_length=50, description="Human-readable employee code")
    first_name: str = Field(max_length=100)
    last_name: str = Field(max_length=100)
    email: EmailStr = Field(max_length=255)
    phone: str | None = Field(default=None, max_length=20)
    date_of_birth: date | None = None
    hire_date: date
    department_id: int
    role_id: int
    manager_id: int | None = None
    salary: float | None = Field(default=None, gt=0)
    address: str | None = Field(default=None, max_length=500)
    emergency_contact: dict[str, Any] | None = None
    password: str = Field(min_length=8)


class EmployeeUpdate(CamelModel):
    """Partial update; only fields present in the payload are written."""

    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    email: EmailStr | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=20)
    date_of_birth: date | None = None
    department_id: int | None = None
    role_id: int | None = None
    manager_id: int | None = None
    salary: float | None = Field(default=None, gt=0)
    status: EmployeeStatus | None = None
    address: str | None = Field(default=None, max_length=500)
    emergency_contact: dict[str, Any] | None = None

    @field_validator("first_name", "last_name", "email", "status")
    @classmethod
    def required_columns_not_null(cls, value):
        return reject_null(value)


class EmployeeSummary(CamelModel):
    """Row of the employee list."""

    id: int
    employee_id: str = Field(
        validation_alias=AliasChoices("employee_code", "employeeId"),
        serialization_alias="employeeId",
    )
    first_name: str
    last_name: str
    email: str
    phone: str | None = None
    hire_date: date | None = None
    status: str
    salary: float | None = None
    department_name: str | None = None
    role_name: str | None = None
    manager_name: str | None = None


class EmployeeDetail(EmployeeSummary):
    """Full employee record without credentials."""

    date_of_birth: date | None = None
    department_id: int | None = None
    role_id: int | None = None
    manager_id: int | None = None
    address: str | None = None
    emergency_contact: dict[str, Any] | None = None
    last_login: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    permissions: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("permission_names", "permissions"),
        serialization_alias="permissions",
    )


class EmployeeListResponse(CamelModel):
    employees: list[EmployeeSummary]
    pagination: Pagination


class EmployeeCreatedResponse(CamelModel):
    message: str = "Employee created successfully"
    employee_id: int


class DepartmentOut(CamelModel):
    id: int
    name: str
    description: str | None = None


class RoleOut(CamelModel):
    id: int
    name: str
    description: str | None = None
