"""Work log booking with the per-day hours ceiling."""

import logging
from datetime import date

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.auth.permissions import is_manager_or_hr
from app.errors import Forbidden, NotFound, ValidationError
from models.employee import Employee
from models.performance import Project, WorkLog
from repositories.work_log_repository import WorkLogRepository
from schemas.performance import WorkLogCreate, WorkLogUpdate

logger = logging.getLogger(__name__)

MAX_HOURS_PER_DAY = 24


def _format_hours(value: float) -> str:
    return f"{value:g}"


class WorkLogService:
    """Creates, edits and removes work logs on behalf of the caller."""

    def __init__(self, db: Session):
        self.db = db
        self.repo = WorkLogRepository(db)

    def create(self, employee: Employee, payload: WorkLogCreate) -> WorkLog:
        """Book hours for the caller.

        Args:
            employee: The caller booking the hours.
            payload: Validated request body.

        Returns:
            The committed WorkLog.

        Raises:
            ValidationError: The day's total would exceed 24 hours.
        """
        existing = self.repo.total_hours_for_day(employee.id, payload.log_date)
        if existing + payload.hours_worked > MAX_HOURS_PER_DAY:
            raise ValidationError(
                "Total hours for the day cannot exceed 24. "
                f"Current: {_format_hours(existing)}, Adding: {_format_hours(payload.hours_worked)}"
            )

        try:
            work_log = self.repo.create(employee_id=employee.id, **payload.model_dump())
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        return work_log

    def _owned_or_managed(self, work_log_id: int, current_user: Employee, verb: str) -> WorkLog:
        work_log = self.repo.get(work_log_id)
        if work_log is None:
            raise NotFound("Work log not found")
        if work_log.employee_id != current_user.id and not is_manager_or_hr(current_user):
            raise Forbidden(f"Access denied - not authorized to {verb} this work log")
        return work_log

    def update(self, work_log_id: int, payload: WorkLogUpdate, current_user: Employee) -> WorkLog:
        """Apply a partial update.

        The daily 24 hour total is only enforced when a log is created;
        edits are bounded per entry by the request schema.
        """
        work_log = self._owned_or_managed(work_log_id, current_user, "update")
        fields = payload.model_dump(exclude_unset=True)
        if not fields:
            raise ValidationError("No fields to update")
        try:
            self.repo.update(work_log, fields)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        return work_log

    def delete(self, work_log_id: int, current_user: Employee) -> None:
        work_log = self._owned_or_managed(work_log_id, current_user, "delete")
        try:
            self.repo.delete(work_log)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

    def list_work_logs(
        self,
        current_user: Employee,
        page: int,
        limit: int,
        employee_id: int | None = None,
        project_id: int | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        sort_by: str = "logDate",
        sort_order: str = "DESC",
    ) -> tuple[list[WorkLog], int]:
        if not is_manager_or_hr(current_user):
            employee_id = current_user.id
        return self.repo.list_work_logs(
            offset=(page - 1) * limit,
            limit=limit,
            employee_id=employee_id,
            project_id=project_id,
            start_date=start_date,
            end_date=end_date,
            sort_by=sort_by,
            sort_order=sort_order,
        )

    def active_projects(self) -> list[Project]:
        return self.repo.active_projects()
