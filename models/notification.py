"""In-app notifications and the audit trail."""

from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, relationship

from models.base import Base

PRIORITIES = ("low", "medium", "high", "urgent")


class Notification(Base):
    """Message addressed to one employee."""

    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True)
    recipient_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    sender_id = Column(Integer, ForeignKey("employees.id"))
    type = Column(String(50), nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    data = Column(JSON)
    priority = Column(String(10), nullable=False, default="medium")
    is_read = Column(Boolean, nullable=False, default=False)
    read_at = Column(DateTime(timezone=True))
    created_at: Mapped[datetime] = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True,
    )

    recipient = relationship("Employee", foreign_keys=[recipient_id])
    sender = relationship("Employee", foreign_keys=[sender_id], lazy="joined")

    @property
    def sender_name(self) -> str | None:
        return self.sender.full_name if self.sender else None


class AuditLog(Base):
    """Append-only record of changes made through the API."""

    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("employees.id"))
    action = Column(String(20), nullable=False)
    table_name = Column(String(100), nullable=False)
    record_id = Column(Integer, nullable=False)
    old_values = Column(JSON)
    new_values = Column(JSON)
    created_at: Mapped[datetime] = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
