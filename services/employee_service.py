"""Employee lifecycle: hiring, updates and termination with an audit trail."""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.auth.security import hash_password
from app.clock import local_today
from app.errors import Conflict, NotFound, ValidationError
from config.settings import Settings
from models.employee import Employee
from repositories.audit_repository import AuditRepository
from repositories.employee_repository import EmployeeRepository
from repositories.leave_repository import LeaveRepository
from schemas.employee import EmployeeCreate, EmployeeUpdate

logger = logging.getLogger(__name__)

EMPLOYEES_TABLE = "employees"
TERMINATED = "Terminated"


class EmployeeService:
    """Writes employee records and the matching audit entries in one transaction."""

    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings
        self.repo = EmployeeRepository(db)
        self.audit = AuditRepository(db)

    def get(self, employee_id: int) -> Employee:
        employee = self.repo.get_by_id(employee_id)
        if employee is None:
            raise NotFound("Employee not found")
        return employee

    def create(self, payload: EmployeeCreate, created_by: Employee) -> Employee:
        """Hire an employee.

        The password is hashed, the account starts Active, a balance is opened
        for every leave type with a yearly allowance and a CREATE audit entry
        is written.

        Args:
            payload: Validated request body.
            created_by: The caller.

        Returns:
            The committed Employee.

        Raises:
            Conflict: The employee code or email is already in use.
        """
        if self.repo.find_duplicate(payload.employee_id, payload.email) is not None:
            raise Conflict("Employee ID or email already exists")

        fields = payload.model_dump(exclude={"employee_id", "password"})
        try:
            employee = self.repo.create(
                employee_code=payload.employee_id,
                password_hash=hash_password(payload.password),
                status="Active",
                **fields,
            )
            LeaveRepository(self.db).create_default_balances(
                employee.id, local_today(self.settings.timezone).year
            )
            self.audit.record(
                action="CREATE",
                table_name=EMPLOYEES_TABLE,
                record_id=employee.id,
                user_id=created_by.id,
                new_values=employee.snapshot(),
            )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        return employee

    def update(self, employee_id: int, payload: EmployeeUpdate, updated_by: Employee) -> Employee:
        """Apply a partial update and audit the before and after state.

        Raises:
            NotFound: No such employee.
            ValidationError: The payload carries no fields.
            Conflict: The new email belongs to another employee.
        """
        employee = self.get(employee_id)
        fields = payload.model_dump(exclude_unset=True)
        if not fields:
            raise ValidationError("No fields to update")
        if "email" in fields and self.repo.find_duplicate(email=fields["email"], exclude_id=employee.id):
            raise Conflict("Employee ID or email already exists")

        before = employee.snapshot()
        try:
            self.repo.update(employee, fields)
            self.audit.record(
                action="UPDATE",
                table_name=EMPLOYEES_TABLE,
                record_id=employee.id,
                user_id=updated_by.id,
                old_values=before,
                new_values=employee.snapshot(),
            )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        return employee

    def terminate(self, employee_id: int, deleted_by: Employee) -> Employee:
        """Soft delete: the row stays, its status becomes Terminated."""
        employee = self.get(employee_id)
        before = employee.snapshot()
        try:
            self.repo.update(employee, {"status": TERMINATED})
            self.audit.record(
                action="DELETE",
                table_name=EMPLOYEES_TABLE,
                record_id=employee.id,
                user_id=deleted_by.id,
                old_values=before,
            )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        logger.info("Employee id=%s terminated by employee_id=%s", employee.id, deleted_by.id)
        return employee
