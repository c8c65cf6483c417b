"""Leave catalog, balances and applications."""

from datetime import date

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from models.base import Base, TimestampMixin

LEAVE_PENDING = "Pending"
LEAVE_APPROVED = "Approved"
LEAVE_REJECTED = "Rejected"


class LeaveType(TimestampMixin, Base):
    """Kind of leave with its yearly quota."""

    __tablename__ = "leave_types"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), unique=True, nullable=False)
    description = Column(Text)
    max_days_per_year = Column(Integer, nullable=False, default=0)
    carry_forward = Column(Boolean, nullable=False, default=False)
    requires_approval = Column(Boolean, nullable=False, default=True)


class LeaveBalance(TimestampMixin, Base):
    """Per employee, leave type and year day counters.

    ``remaining_days`` is stored for reporting and kept equal to
    ``total_days - used_days`` by :meth:`recalculate`.
    """

    __tablename__ = "leave_balances"
    __table_args__ = (
        UniqueConstraint("employee_id", "leave_type_id", "year", name="uq_leave_balance"),
    )

    id = Column(Integer, primary_key=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    leave_type_id = Column(Integer, ForeignKey("leave_types.id"), nullable=False)
    year = Column(Integer, nullable=False)
    total_days = Column(Float, nullable=False, default=0)
    used_days = Column(Float, nullable=False, default=0)
    remaining_days = Column(Float, nullable=False, default=0)
    carry_forward_days = Column(Float, nullable=False, default=0)

    employee = relationship("Employee")
    leave_type = relationship("LeaveType", lazy="joined")

    @property
    def employee_name(self) -> str | None:
        return self.employee.full_name if self.employee else None

    @property
    def employee_code(self) -> str | None:
        return self.employee.employee_code if self.employee else None

    @property
    def leave_type_name(self) -> str | None:
        return self.leave_type.name if self.leave_type else None

    @property
    def max_days_per_year(self) -> int | None:
        return self.leave_type.max_days_per_year if self.leave_type else None

    def recalculate(self) -> None:
        self.remaining_days = (self.total_days or 0) - (self.used_days or 0)

    def consume(self, days) -> None:
        self.used_days = (self.used_days or 0) + days
        self.recalculate()


class LeaveApplication(TimestampMixin, Base):
    """A leave request moving from Pending to Approved or Rejected."""

    __tablename__ = "leave_applications"

    id = Column(Integer, primary_key=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    leave_type_id = Column(Integer, ForeignKey("leave_types.id"), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    total_days = Column(Integer, nullable=False)
    reason = Column(Text)
    attachments = Column(JSON, nullable=False, default=list)
    status = Column(String(20), nullable=False, default=LEAVE_PENDING, index=True)
    applied_date = Column(Date, nullable=False, default=date.today)
    approved_by = Column(Integer, ForeignKey("employees.id"))
    approved_date = Column(DateTime(timezone=True))
    rejection_reason = Column(Text)

    employee = relationship("Employee", foreign_keys=[employee_id])
    approver = relationship("Employee", foreign_keys=[approved_by])
    leave_type = relationship("LeaveType", lazy="joined")

    @property
    def is_pending(self) -> bool:
        return self.status == LEAVE_PENDING

    @property
    def employee_name(self) -> str | None:
        return self.employee.full_name if self.employee else None

    @property
    def employee_code(self) -> str | None:
        return self.employee.employee_code if self.employee else None

    @property
    def leave_type_name(self) -> str | None:
        return self.leave_type.name if self.leave_type else None

    @property
    def approved_by_name(self) -> str | None:
        return self.approver.full_name if self.approver else None
