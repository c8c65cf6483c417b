"""Password hashing and access token issuing."""

from datetime import datetime, timedelta, timezone

import bcrypt
import jwt

from config.settings import Settings
from models.employee import Employee


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str | None) -> bool:
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def create_access_token(employee: Employee, settings: Settings) -> str:
    """Sign a bearer token identifying ``employee``.

    Args:
        employee: The authenticated employee.
        settings: Settings holding the signing secret and lifetime.

    Returns:
        Encoded JWT string.
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(employee.id),
        "employee_code": employee.employee_code,
        "email": employee.email,
        "role": employee.role_name,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(hours=settings.jwt_expires_hours)).timestamp()),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)
