"""Schemas for login, profile and password management."""

from datetime import date, datetime
from typing import Any

from pydantic import AliasChoices, EmailStr, Field, model_validator

from schemas.common import CamelModel


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)


class ChangePasswordRequest(CamelModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=8)
    confirm_password: str

    @model_validator(mode="after")
    def passwords_match(self) -> "ChangePasswordRequest":
        if self.confirm_password != self.new_password:
            raise ValueError("confirmPassword must match newPassword")
        return self


class AuthenticatedUser(CamelModel):
    """User block returned by login."""

    id: int
    employee_id: str = Field(
        validation_alias=AliasChoices("employee_code", "employeeId"),
        serialization_alias="employeeId",
    )
    first_name: str
    last_name: str
    email: str
    status: str
    role_name: str | None = None
    department_name: str | None = None
    permissions: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("permission_names", "permissions"),
        serialization_alias="permissions",
    )


class LoginResponse(CamelModel):
    message: str = "Login successful"
    token: str
    user: AuthenticatedUser


class TokenResponse(CamelModel):
    token: str


class ProfileResponse(AuthenticatedUser):
    phone: str | None = None
    date_of_birth: date | None = None
    hire_date: date | None = None
    address: str | None = None
    emergency_contact: dict[str, Any] | None = None
    last_login: datetime | None = None
    manager_name: str | None = None
