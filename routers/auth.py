"""Authentication API endpoints."""

import logging

from fastapi import APIRouter

from app.auth.auth import CurrentUser
from app.auth.security import create_access_token, hash_password, verify_password
from app.clock import local_now
from app.errors import Unauthorized, ValidationError
from repositories.employee_repository import EmployeeRepository
from routers.dependencies import AppSettings, DbSession
from schemas.auth import (
    AuthenticatedUser,
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    ProfileResponse,
    TokenResponse,
)
from schemas.common import MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Log in",
    responses={401: {"description": "Invalid credentials or inactive account"}},
)
def login(payload: LoginRequest, db: DbSession, settings: AppSettings) -> LoginResponse:
    """Exchange email and password for a bearer token.

    Args:
        payload: Login credentials.
        db: Database session.
        settings: Application settings.

    Returns:
        LoginResponse with the token and the user's profile and permissions.
    """
    employee = EmployeeRepository(db).get_by_email(payload.email)
    if employee is None:
        raise Unauthorized("Invalid credentials")
    if employee.status != "Active":
        raise Unauthorized("Account is not active")
    if not verify_password(payload.password, employee.password_hash):
        logger.info("Failed login for employee_id=%s", employee.id)
        raise Unauthorized("Invalid credentials")

    employee.last_login = local_now(settings.timezone)
    db.commit()
    logger.info("Employee id=%s logged in", employee.id)

    return LoginResponse(
        token=create_access_token(employee, settings),
        user=AuthenticatedUser.model_validate(employee),
    )


@router.get("/profile", response_model=ProfileResponse, summary="Current user's profile")
def profile(current_user: CurrentUser) -> ProfileResponse:
    return ProfileResponse.model_validate(current_user)


@router.post("/change-password", response_model=MessageResponse, summary="Change password")
def change_password(
    payload: ChangePasswordRequest,
    current_user: CurrentUser,
    db: DbSession,
) -> MessageResponse:
    if not verify_password(payload.current_password, current_user.password_hash):
        raise ValidationError("Current password is incorrect")

    current_user.password_hash = hash_password(payload.new_password)
    db.commit()
    logger.info("Employee id=%s changed password", current_user.id)
    return MessageResponse(message="Password changed successfully")


@router.post("/logout", response_model=MessageResponse, summary="Log out")
def logout(current_user: CurrentUser) -> MessageResponse:
    # Tokens are stateless; the client discards its copy.
    logger.info("Employee id=%s logged out", current_user.id)
    return MessageResponse(message="Logged out successfully")


@router.post("/refresh", response_model=TokenResponse, summary="Issue a fresh token")
def refresh(current_user: CurrentUser, settings: AppSettings) -> TokenResponse:
    return TokenResponse(token=create_access_token(current_user, settings))
