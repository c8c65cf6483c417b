"""Repository for employee, department and role database operations."""

import logging
from typing import Any

from sqlalchemy import extract, or_
from sqlalchemy.orm import Session

from models.employee import Department, Employee, Role

logger = logging.getLogger(__name__)

# Public sort keys mapped onto columns; anything else falls back to first name.
EMPLOYEE_SORT_COLUMNS = {
    "firstName": Employee.first_name,
    "lastName": Employee.last_name,
    "email": Employee.email,
    "hireDate": Employee.hire_date,
    "employeeId": Employee.employee_code,
    "status": Employee.status,
    "salary": Employee.salary,
}


def order_clause(column, sort_order: str):
    return column.asc() if sort_order.upper() == "ASC" else column.desc()


class EmployeeRepository:
    """Data access layer for employee-related database operations."""

    def __init__(self, db: Session):
        """Initialize repository with database session.

        Args:
            db: SQLAlchemy database session.
        """
        self.db = db

    def get_by_id(self, employee_id: int) -> Employee | None:
        """Get an employee by primary key regardless of status.

        Args:
            employee_id: The employee's ID.

        Returns:
            Employee record if exists, None otherwise.
        """
        return self.db.query(Employee).filter(Employee.id == employee_id).first()

    def get_by_email(self, email: str) -> Employee | None:
        return self.db.query(Employee).filter(Employee.email == email).first()

    def find_duplicate(
        self,
        employee_code: str | None = None,
        email: str | None = None,
        exclude_id: int | None = None,
    ) -> Employee | None:
        """Find another employee already holding the code or email.

        Args:
            employee_code: Employee code to check.
            email: Email address to check.
            exclude_id: Employee being updated, ignored in the check.

        Returns:
            The clashing Employee, or None when both values are free.
        """
        conditions = []
        if employee_code:
            conditions.append(Employee.employee_code == employee_code)
        if email:
            conditions.append(Employee.email == email)
        if not conditions:
            return None

        query = self.db.query(Employee).filter(or_(*conditions))
        if exclude_id is not None:
            query = query.filter(Employee.id != exclude_id)
        return query.first()

    def list_employees(
        self,
        offset: int,
        limit: int,
        search: str | None = None,
        department: str | None = None,
        status: str | None = None,
        sort_by: str = "firstName",
        sort_order: str = "ASC",
    ) -> tuple[list[Employee], int]:
        """List employees matching the filters, one page at a time.

        Args:
            offset: Number of rows to skip.
            limit: Maximum number of rows returned.
            search: Substring matched against names, email and employee code.
            department: Exact department name.
            status: Exact employee status.
            sort_by: Public sort key, see EMPLOYEE_SORT_COLUMNS.
            sort_order: ASC or DESC.

        Returns:
            Tuple of (page of employees, total matching rows).
        """
        query = self.db.query(Employee)

        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(
                    Employee.first_name.ilike(pattern),
                    Employee.last_name.ilike(pattern),
                    Employee.email.ilike(pattern),
                    Employee.employee_code.ilike(pattern),
                )
            )
        if department:
            query = query.join(Department, Employee.department_id == Department.id).filter(
                Department.name == department
            )
        if status:
            query = query.filter(Employee.status == status)

        total = query.count()
        column = EMPLOYEE_SORT_COLUMNS.get(sort_by, Employee.first_name)
        employees = (
            query.order_by(order_clause(column, sort_order), Employee.id)
            .offset(offset)
            .limit(limit)
            .all()
        )
        return employees, total

    def create(self, **fields: Any) -> Employee:
        """Insert a new employee.

        Args:
            **fields: Column values for the new row.

        Returns:
            The created Employee record.
        """
        employee = Employee(**fields)
        self.db.add(employee)
        self.db.flush()
        logger.info(
            "Created employee: id=%s code=%s",
            employee.id,
            employee.employee_code,
        )
        return employee

    def update(self, employee: Employee, fields: dict[str, Any]) -> Employee:
        """Assign the given column values and flush.

        Args:
            employee: The employee to modify.
            fields: Mapping of attribute name to new value.

        Returns:
            The updated Employee record.
        """
        for name, value in fields.items():
            setattr(employee, name, value)
        self.db.flush()
        logger.info("Updated employee: id=%s fields=%s", employee.id, sorted(fields))
        return employee

    def list_departments(self) -> list[Department]:
        return self.db.query(Department).order_by(Department.name).all()

    def list_roles(self) -> list[Role]:
        return self.db.query(Role).order_by(Role.name).all()

    def active_employees(self) -> list[Employee]:
        return (
            self.db.query(Employee)
            .filter(Employee.status == "Active")
            .order_by(Employee.first_name, Employee.last_name)
            .all()
        )

    def birthdays_on(self, month: int, day: int) -> list[Employee]:
        """Active employees whose date of birth falls on the given month and day."""
        return (
            self.db.query(Employee)
            .filter(Employee.status == "Active")
            .filter(Employee.date_of_birth.isnot(None))
            .filter(extract("month", Employee.date_of_birth) == month)
            .filter(extract("day", Employee.date_of_birth) == day)
            .all()
        )

    def hired_on(self, month: int, day: int) -> list[Employee]:
        """Active employees whose hire date falls on the given month and day."""
        return (
            self.db.query(Employee)
            .filter(Employee.status == "Active")
            .filter(extract("month", Employee.hire_date) == month)
            .filter(extract("day", Employee.hire_date) == day)
            .all()
        )
