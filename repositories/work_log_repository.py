"""Repository for work logs and the projects they are booked against."""

import logging
from datetime import date
from typing import Any

from sqlalchemy import func
from sqlalchemy.orm import Session

from models.performance import Project, WorkLog
from repositories.employee_repository import order_clause

logger = logging.getLogger(__name__)

WORK_LOG_SORT_COLUMNS = {
    "logDate": WorkLog.log_date,
    "hoursWorked": WorkLog.hours_worked,
    "createdAt": WorkLog.created_at,
}


class WorkLogRepository:
    """Data access layer for work log records."""

    def __init__(self, db: Session):
        self.db = db

    def total_hours_for_day(self, employee_id: int, log_date: date) -> float:
        """Sum of hours already booked by an employee on one day.

        Args:
            employee_id: The employee's ID.
            log_date: Day to total.

        Returns:
            Hours booked, 0 when nothing is logged.
        """
        total = (
            self.db.query(func.sum(WorkLog.hours_worked))
            .filter(WorkLog.employee_id == employee_id)
            .filter(WorkLog.log_date == log_date)
            .scalar()
        )
        return float(total or 0)

    def get(self, work_log_id: int) -> WorkLog | None:
        return self.db.query(WorkLog).filter(WorkLog.id == work_log_id).first()

    def create(self, **fields: Any) -> WorkLog:
        work_log = WorkLog(**fields)
        self.db.add(work_log)
        self.db.flush()
        logger.info(
            "Created work log: id=%s employee_id=%s date=%s hours=%s",
            work_log.id,
            work_log.employee_id,
            work_log.log_date,
            work_log.hours_worked,
        )
        return work_log

    def update(self, work_log: WorkLog, fields: dict[str, Any]) -> WorkLog:
        for name, value in fields.items():
            setattr(work_log, name, value)
        self.db.flush()
        logger.info("Updated work log: id=%s fields=%s", work_log.id, sorted(fields))
        return work_log

    def delete(self, work_log: WorkLog) -> None:
        self.db.delete(work_log)
        self.db.flush()
        logger.info("Deleted work log: id=%s", work_log.id)

    def list_work_logs(
        self,
        offset: int,
        limit: int,
        employee_id: int | None = None,
        project_id: int | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        sort_by: str = "logDate",
        sort_order: str = "DESC",
    ) -> tuple[list[WorkLog], int]:
        """List work logs matching the filters.

        Args:
            offset: Number of rows to skip.
            limit: Maximum number of rows returned.
            employee_id: Restrict to one employee.
            project_id: Restrict to one project.
            start_date: Only logs on or after this date.
            end_date: Only logs on or before this date.
            sort_by: Public sort key, see WORK_LOG_SORT_COLUMNS.
            sort_order: ASC or DESC.

        Returns:
            Tuple of (page of work logs, total matching rows).
        """
        query = self.db.query(WorkLog)
        if employee_id is not None:
            query = query.filter(WorkLog.employee_id == employee_id)
        if project_id is not None:
            query = query.filter(WorkLog.project_id == project_id)
        if start_date:
            query = query.filter(WorkLog.log_date >= start_date)
        if end_date:
            query = query.filter(WorkLog.log_date <= end_date)

        total = query.count()
        column = WORK_LOG_SORT_COLUMNS.get(sort_by, WorkLog.log_date)
        work_logs = (
            query.order_by(order_clause(column, sort_order), WorkLog.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return work_logs, total

    def active_projects(self) -> list[Project]:
        return (
            self.db.query(Project)
            .filter(Project.status == "Active")
            .order_by(Project.name)
            .all()
        )
