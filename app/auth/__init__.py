"""Authentication module."""

from app.auth.auth import CurrentUser, token_required, validate_token
from app.auth.permissions import (
    is_manager,
    is_manager_or_hr,
    manager_required,
    require_permissions,
)
from app.auth.security import create_access_token, hash_password, verify_password

__all__ = [
    "CurrentUser",
    "create_access_token",
    "hash_password",
    "is_manager",
    "is_manager_or_hr",
    "manager_required",
    "require_permissions",
    "token_required",
    "validate_token",
    "verify_password",
]
