"""Repository for leave types, balances and applications."""

import logging
from datetime import date
from typing import Any

from sqlalchemy.orm import Session, joinedload

from models.employee import Employee
from models.leave import LEAVE_APPROVED, LeaveApplication, LeaveBalance, LeaveType

logger = logging.getLogger(__name__)


class LeaveRepository:
    """Data access layer for the leave workflow."""

    def __init__(self, db: Session):
        """Initialize repository with database session.

        Args:
            db: SQLAlchemy database session.
        """
        self.db = db

    # Leave types

    def list_leave_types(self) -> list[LeaveType]:
        return self.db.query(LeaveType).order_by(LeaveType.name).all()

    def get_leave_type(self, leave_type_id: int) -> LeaveType | None:
        return self.db.query(LeaveType).filter(LeaveType.id == leave_type_id).first()

    # Balances

    def get_balance(
        self,
        employee_id: int,
        leave_type_id: int,
        year: int,
        for_update: bool = False,
    ) -> LeaveBalance | None:
        """Get the balance row for one employee, leave type and year.

        Args:
            employee_id: The employee's ID.
            leave_type_id: The leave type's ID.
            year: Calendar year of the balance.
            for_update: Lock the row until the transaction ends.

        Returns:
            LeaveBalance record if exists, None otherwise.
        """
        query = (
            self.db.query(LeaveBalance)
            .filter(LeaveBalance.employee_id == employee_id)
            .filter(LeaveBalance.leave_type_id == leave_type_id)
            .filter(LeaveBalance.year == year)
        )
        if for_update:
            query = query.with_for_update(of=LeaveBalance)
        return query.first()

    def list_balances(self, employee_id: int, year: int) -> list[LeaveBalance]:
        return (
            self.db.query(LeaveBalance)
            .join(LeaveType, LeaveBalance.leave_type_id == LeaveType.id)
            .filter(LeaveBalance.employee_id == employee_id)
            .filter(LeaveBalance.year == year)
            .order_by(LeaveType.name)
            .all()
        )

    def list_active_balances(self, year: int) -> list[LeaveBalance]:
        """Balances of every active employee for ``year``, grouped-friendly order.

        Args:
            year: Calendar year of the balances.

        Returns:
            Balances ordered by employee name then leave type name.
        """
        return (
            self.db.query(LeaveBalance)
            .join(Employee, LeaveBalance.employee_id == Employee.id)
            .join(LeaveType, LeaveBalance.leave_type_id == LeaveType.id)
            .options(joinedload(LeaveBalance.employee).joinedload(Employee.department))
            .filter(Employee.status == "Active")
            .filter(LeaveBalance.year == year)
            .order_by(Employee.first_name, Employee.last_name, Employee.id, LeaveType.name)
            .all()
        )

    def create_default_balances(self, employee_id: int, year: int) -> list[LeaveBalance]:
        """Create a full-quota balance for every leave type with a yearly allowance.

        Args:
            employee_id: The new employee's ID.
            year: Calendar year the balances apply to.

        Returns:
            The created LeaveBalance records.
        """
        balances = []
        leave_types = self.db.query(LeaveType).filter(LeaveType.max_days_per_year > 0).all()
        for leave_type in leave_types:
            balance = LeaveBalance(
                employee_id=employee_id,
                leave_type_id=leave_type.id,
                year=year,
                total_days=leave_type.max_days_per_year,
                used_days=0,
                remaining_days=leave_type.max_days_per_year,
                carry_forward_days=0,
            )
            self.db.add(balance)
            balances.append(balance)
        self.db.flush()
        logger.info(
            "Created %s default leave balances for employee_id=%s year=%s",
            len(balances),
            employee_id,
            year,
        )
        return balances

    def consume_balance(self, balance: LeaveBalance, days: int) -> LeaveBalance:
        balance.consume(days)
        self.db.flush()
        logger.info(
            "Leave balance id=%s consumed %s days, remaining=%s",
            balance.id,
            days,
            balance.remaining_days,
        )
        return balance

    # Applications

    def get_application(self, application_id: int, for_update: bool = False) -> LeaveApplication | None:
        query = self.db.query(LeaveApplication).filter(LeaveApplication.id == application_id)
        if for_update:
            query = query.with_for_update(of=LeaveApplication)
        return query.first()

    def create_application(self, **fields: Any) -> LeaveApplication:
        """Insert a new leave application.

        Args:
            **fields: Column values for the new row.

        Returns:
            The created LeaveApplication record.
        """
        application = LeaveApplication(**fields)
        self.db.add(application)
        self.db.flush()
        logger.info(
            "Created leave application: id=%s employee_id=%s days=%s",
            application.id,
            application.employee_id,
            application.total_days,
        )
        return application

    def list_applications(
        self,
        offset: int,
        limit: int,
        employee_id: int | None = None,
        status: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> tuple[list[LeaveApplication], int]:
        """List applications newest first.

        Args:
            offset: Number of rows to skip.
            limit: Maximum number of rows returned.
            employee_id: Restrict to one employee.
            status: Exact application status.
            start_date: Only applications starting on or after this date.
            end_date: Only applications ending on or before this date.

        Returns:
            Tuple of (page of applications, total matching rows).
        """
        query = self.db.query(LeaveApplication)
        if employee_id is not None:
            query = query.filter(LeaveApplication.employee_id == employee_id)
        if status:
            query = query.filter(LeaveApplication.status == status)
        if start_date:
            query = query.filter(LeaveApplication.start_date >= start_date)
        if end_date:
            query = query.filter(LeaveApplication.end_date <= end_date)

        total = query.count()
        applications = (
            query.options(
                joinedload(LeaveApplication.employee),
                joinedload(LeaveApplication.approver),
            )
            .order_by(LeaveApplication.applied_date.desc(), LeaveApplication.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return applications, total

    def approved_starting_on(self, day: date) -> list[LeaveApplication]:
        """Approved applications whose first day is ``day``."""
        return (
            self.db.query(LeaveApplication)
            .options(joinedload(LeaveApplication.employee))
            .filter(LeaveApplication.status == LEAVE_APPROVED)
            .filter(LeaveApplication.start_date == day)
            .all()
        )
