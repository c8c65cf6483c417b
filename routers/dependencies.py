"""Shared FastAPI dependencies for the API routers."""

from typing import Annotated

from fastapi import Depends, Query
from sqlalchemy.orm import Session

from config.database import get_db, get_settings
from config.settings import Settings
from schemas.common import PageParams
from services.email_service import EmailService
from services.notification_service import NotificationService

DbSession = Annotated[Session, Depends(get_db)]
AppSettings = Annotated[Settings, Depends(get_settings)]


def get_email_service(settings: AppSettings) -> EmailService:
    return EmailService(settings)


def get_notification_service(
    db: DbSession,
    email_service: Annotated[EmailService, Depends(get_email_service)],
) -> NotificationService:
    return NotificationService(db, email_service)


Notifications = Annotated[NotificationService, Depends(get_notification_service)]


def pagination(default_limit: int | None = None):
    """Build a dependency resolving ``page`` and ``limit`` query parameters.

    The limit defaults to ``default_limit`` (or the configured page size) and
    is capped at the configured maximum.
    """

    def _dependency(
        settings: AppSettings,
        page: Annotated[int, Query(ge=1)] = 1,
        limit: Annotated[int | None, Query(ge=1)] = None,
    ) -> PageParams:
        size = limit or default_limit or settings.default_page_size
        return PageParams(page=page, limit=min(size, settings.max_page_size))

    return _dependency


Page = Annotated[PageParams, Depends(pagination())]
NotificationPage = Annotated[PageParams, Depends(pagination(default_limit=20))]
