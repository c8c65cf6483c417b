"""SQLAlchemy base class and mixins."""

from datetime import datetime

from sqlalchemy import Column, DateTime, func
from sqlalchemy.orm import DeclarativeBase, Mapped


class Base(DeclarativeBase):
    """SQLAlchemy declarative base class."""

    pass


class TimestampMixin:
    """Mixin for creation and modification timestamps.

    Every mutable table inherits from this mixin; ``updated_at`` is refreshed
    by the database on each UPDATE issued through the ORM.
    """

    created_at: Mapped[datetime] = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime] = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
