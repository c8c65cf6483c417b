"""JWT bearer token authentication.

Tokens are HS256-signed with the application secret and name the employee in
the ``sub`` claim. The token_required dependency should be used on all
protected endpoints.
"""

import logging
from typing import Annotated

import jwt
from fastapi import Depends, Header, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.errors import ServerError, Unauthorized
from config.database import get_db, get_settings
from config.settings import Settings
from models.employee import Employee

logger = logging.getLogger(__name__)


def get_active_employee(db: Session, employee_id: int) -> Employee | None:
    """Look up an active employee by primary key.

    Args:
        db: Database session.
        employee_id: Identifier taken from the token.

    Returns:
        Employee record if found and active, None otherwise.
    """
    return (
        db.query(Employee)
        .filter(Employee.id == employee_id)
        .filter(Employee.status == "Active")
        .first()
    )


def extract_bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def validate_token(token: str | None, db: Session, settings: Settings) -> Employee:
    """Validate a bearer token and resolve the employee it names.

    Args:
        token: The JWT string, or None when the header was absent.
        db: Database session for the employee lookup.
        settings: Settings holding the signing secret.

    Returns:
        The active Employee the token was issued to.

    Raises:
        Unauthorized: Missing, expired or invalid token, or inactive account.
        ServerError: The account lookup failed.
    """
    if not token:
        raise Unauthorized("Access token required")

    try:
        decoded_token = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
        )
    except jwt.ExpiredSignatureError as e:
        raise Unauthorized("Token expired") from e
    except jwt.InvalidTokenError as e:
        raise Unauthorized("Invalid token") from e

    try:
        employee_id = int(decoded_token["sub"])
    except (KeyError, TypeError, ValueError) as e:
        raise Unauthorized("Invalid token") from e

    try:
        current_user = get_active_employee(db, employee_id)
    except SQLAlchemyError as e:
        logger.exception("Employee lookup failed during authentication")
        raise ServerError("Authentication error") from e

    if current_user is None:
        raise Unauthorized("Invalid or expired token")
    return current_user


def token_required(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
    authorization: Annotated[str | None, Header()] = None,
) -> Employee:
    """FastAPI dependency for requiring valid authentication.

    Validates the Bearer token, stores the employee on ``request.state.user``
    and returns it.
    """
    employee = validate_token(extract_bearer_token(authorization), db, settings)
    request.state.user = employee
    return employee


CurrentUser = Annotated[Employee, Depends(token_required)]
