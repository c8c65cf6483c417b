"""Role and permission checks layered on top of token_required."""

from collections.abc import Callable

from fastapi import Depends

from app.auth.auth import token_required
from app.errors import Forbidden
from models.employee import Employee

WILDCARD_PERMISSION = "all"


def has_any_permission(employee: Employee, required: tuple[str, ...]) -> bool:
    granted = set(employee.permission_names)
    return WILDCARD_PERMISSION in granted or bool(granted.intersection(required))


def is_manager(employee: Employee) -> bool:
    if employee.role is None:
        return False
    return "Manager" in employee.role.name or WILDCARD_PERMISSION in employee.permission_names


def is_manager_or_hr(employee: Employee) -> bool:
    if employee.role is None:
        return False
    return is_manager(employee) or "HR" in employee.role.name


def is_hr(employee: Employee) -> bool:
    return employee.role is not None and "HR" in employee.role.name


def require_permissions(*permissions: str) -> Callable[..., Employee]:
    """Build a dependency accepting callers whose role grants any of ``permissions``."""

    def _dependency(current_user: Employee = Depends(token_required)) -> Employee:
        if current_user.role is None:
            raise Forbidden("Access denied - no role found")
        if not has_any_permission(current_user, permissions):
            raise Forbidden("Access denied - insufficient permissions")
        return current_user

    return _dependency


def manager_required(current_user: Employee = Depends(token_required)) -> Employee:
    """Dependency accepting only manager-class roles."""
    if not is_manager(current_user):
        raise Forbidden("Manager access required")
    return current_user
