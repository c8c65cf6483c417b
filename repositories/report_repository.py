"""Read-only queries feeding generated reports and the reporting dashboard."""

import logging
from datetime import date
from typing import Any

from sqlalchemy import distinct, extract, func
from sqlalchemy.orm import Session

from models.employee import Department, Employee
from models.leave import LeaveBalance, LeaveType
from models.performance import PerformanceReview, Project, WorkLog

logger = logging.getLogger(__name__)


class ReportRepository:
    """Fetches report rows; formatting lives in the report service."""

    def __init__(self, db: Session):
        """Initialize repository with database session.

        Args:
            db: SQLAlchemy database session.
        """
        self.db = db

    def published_reviews(
        self,
        since: date | None = None,
        department_id: int | None = None,
        employee_id: int | None = None,
    ) -> list[PerformanceReview]:
        """Published reviews ordered by department and employee name.

        Args:
            since: Earliest review date included, None for all time.
            department_id: Restrict to one department.
            employee_id: Restrict to one employee.

        Returns:
            PerformanceReview records.
        """
        query = (
            self.db.query(PerformanceReview)
            .join(Employee, PerformanceReview.employee_id == Employee.id)
            .join(Department, Employee.department_id == Department.id)
            .filter(PerformanceReview.status == "Published")
        )
        if since is not None:
            query = query.filter(PerformanceReview.review_date >= since)
        if department_id is not None:
            query = query.filter(Employee.department_id == department_id)
        if employee_id is not None:
            query = query.filter(Employee.id == employee_id)
        return query.order_by(Department.name, Employee.first_name, Employee.last_name).all()

    def leave_balances(
        self,
        year: int,
        department_id: int | None = None,
        leave_type_id: int | None = None,
    ) -> list[LeaveBalance]:
        query = (
            self.db.query(LeaveBalance)
            .join(Employee, LeaveBalance.employee_id == Employee.id)
            .join(Department, Employee.department_id == Department.id)
            .join(LeaveType, LeaveBalance.leave_type_id == LeaveType.id)
            .filter(LeaveBalance.year == year)
        )
        if department_id is not None:
            query = query.filter(Employee.department_id == department_id)
        if leave_type_id is not None:
            query = query.filter(LeaveBalance.leave_type_id == leave_type_id)
        return query.order_by(
            Department.name, Employee.first_name, Employee.last_name, LeaveType.name
        ).all()

    def work_logs(
        self,
        start_date: date | None = None,
        end_date: date | None = None,
        department_id: int | None = None,
        project_id: int | None = None,
    ) -> list[WorkLog]:
        query = self.db.query(WorkLog).join(Employee, WorkLog.employee_id == Employee.id)
        if start_date:
            query = query.filter(WorkLog.log_date >= start_date)
        if end_date:
            query = query.filter(WorkLog.log_date <= end_date)
        if department_id is not None:
            query = query.filter(Employee.department_id == department_id)
        if project_id is not None:
            query = query.filter(WorkLog.project_id == project_id)
        return query.order_by(
            WorkLog.log_date.desc(), Employee.first_name, Employee.last_name
        ).all()

    def employees(
        self,
        department_id: int | None = None,
        status: str | None = None,
    ) -> list[Employee]:
        query = self.db.query(Employee).outerjoin(
            Department, Employee.department_id == Department.id
        )
        if department_id is not None:
            query = query.filter(Employee.department_id == department_id)
        if status:
            query = query.filter(Employee.status == status)
        return query.order_by(Department.name, Employee.first_name, Employee.last_name).all()

    def department_overview(self, department_id: int | None = None) -> list[dict[str, Any]]:
        """Headcount, status split, salary and project figures per department.

        Args:
            department_id: Restrict to one department.

        Returns:
            One row per department ordered by name.
        """
        departments = self.db.query(Department).order_by(Department.name)
        if department_id is not None:
            departments = departments.filter(Department.id == department_id)

        rows = []
        for department in departments.all():
            status_counts = dict(
                self.db.query(Employee.status, func.count(Employee.id))
                .filter(Employee.department_id == department.id)
                .group_by(Employee.status)
                .all()
            )
            avg_salary = (
                self.db.query(func.avg(Employee.salary))
                .filter(Employee.department_id == department.id)
                .filter(Employee.status == "Active")
                .scalar()
            )
            active_projects = (
                self.db.query(func.count(Project.id))
                .filter(Project.department_id == department.id)
                .filter(Project.status == "Active")
                .scalar()
            )
            rows.append(
                {
                    "department_name": department.name,
                    "description": department.description,
                    "total_employees": sum(status_counts.values()),
                    "active_employees": status_counts.get("Active", 0),
                    "on_leave_employees": status_counts.get("On Leave", 0),
                    "average_salary": round(float(avg_salary), 2) if avg_salary is not None else None,
                    "active_projects": active_projects or 0,
                }
            )
        return rows

    # Dashboard aggregates

    def department_summary(self, ratings_since: date, hours_since: date) -> list[dict[str, Any]]:
        """Active headcount, average published rating and booked hours per department.

        Each figure is aggregated by its own query so that joining reviews and
        work logs never multiplies rows.
        """
        headcounts = dict(
            self.db.query(Employee.department_id, func.count(Employee.id))
            .filter(Employee.status == "Active")
            .group_by(Employee.department_id)
            .all()
        )
        ratings = dict(
            self.db.query(Employee.department_id, func.avg(PerformanceReview.overall_rating))
            .select_from(PerformanceReview)
            .join(Employee, PerformanceReview.employee_id == Employee.id)
            .filter(Employee.status == "Active")
            .filter(PerformanceReview.status == "Published")
            .filter(PerformanceReview.review_date >= ratings_since)
            .group_by(Employee.department_id)
            .all()
        )
        hours = dict(
            self.db.query(Employee.department_id, func.sum(WorkLog.hours_worked))
            .select_from(WorkLog)
            .join(Employee, WorkLog.employee_id == Employee.id)
            .filter(Employee.status == "Active")
            .filter(WorkLog.log_date >= hours_since)
            .group_by(Employee.department_id)
            .all()
        )
        return [
            {
                "department_name": department.name,
                "employee_count": headcounts.get(department.id, 0),
                "avg_performance": (
                    float(ratings[department.id]) if ratings.get(department.id) is not None else None
                ),
                "total_hours": float(hours.get(department.id) or 0),
            }
            for department in self.db.query(Department).order_by(Department.name).all()
        ]

    def leave_utilization(self, year: int) -> list[dict[str, Any]]:
        rows = (
            self.db.query(
                LeaveType.name,
                func.sum(LeaveBalance.total_days),
                func.sum(LeaveBalance.used_days),
            )
            .select_from(LeaveType)
            .join(LeaveBalance, LeaveBalance.leave_type_id == LeaveType.id)
            .filter(LeaveBalance.year == year)
            .group_by(LeaveType.id, LeaveType.name)
            .all()
        )
        utilization = []
        for name, allocated, used in rows:
            allocated = float(allocated or 0)
            used = float(used or 0)
            utilization.append(
                {
                    "leave_type": name,
                    "total_allocated": allocated,
                    "total_used": used,
                    "utilization_percentage": round(used * 100 / allocated, 1) if allocated else 0,
                }
            )
        utilization.sort(key=lambda row: row["utilization_percentage"], reverse=True)
        return utilization

    def hours_trend(self, since: date) -> list[dict[str, Any]]:
        """Monthly booked hours since ``since``, oldest month first."""
        year = extract("year", WorkLog.log_date)
        month = extract("month", WorkLog.log_date)
        rows = (
            self.db.query(
                year,
                month,
                func.sum(WorkLog.hours_worked),
                func.count(distinct(WorkLog.employee_id)),
            )
            .filter(WorkLog.log_date >= since)
            .group_by(year, month)
            .order_by(year, month)
            .all()
        )
        return [
            {
                "year": int(row_year),
                "month": int(row_month),
                "total_hours": float(total or 0),
                "active_employees": active,
            }
            for row_year, row_month, total, active in rows
        ]
