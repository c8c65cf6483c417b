"""Repository for performance reviews and their aggregates."""

import logging
from datetime import date
from typing import Any

from sqlalchemy import distinct, extract, func
from sqlalchemy.orm import Session, selectinload

from models.employee import Department, Employee
from models.performance import PerformanceMetric, PerformanceReview, WorkLog
from repositories.employee_repository import order_clause

logger = logging.getLogger(__name__)

PUBLISHED = "Published"

REVIEW_SORT_COLUMNS = {
    "reviewDate": PerformanceReview.review_date,
    "overallRating": PerformanceReview.overall_rating,
    "reviewPeriod": PerformanceReview.review_period,
    "createdAt": PerformanceReview.created_at,
}


class PerformanceRepository:
    """Data access layer for performance reviews."""

    def __init__(self, db: Session):
        """Initialize repository with database session.

        Args:
            db: SQLAlchemy database session.
        """
        self.db = db

    def get_review(self, review_id: int) -> PerformanceReview | None:
        """Get a review with its metrics loaded.

        Args:
            review_id: The review's ID.

        Returns:
            PerformanceReview record if exists, None otherwise.
        """
        return (
            self.db.query(PerformanceReview)
            .options(selectinload(PerformanceReview.metrics))
            .filter(PerformanceReview.id == review_id)
            .first()
        )

    def find_review(self, employee_id: int, review_period: str) -> PerformanceReview | None:
        return (
            self.db.query(PerformanceReview)
            .filter(PerformanceReview.employee_id == employee_id)
            .filter(PerformanceReview.review_period == review_period)
            .first()
        )

    def create_review(
        self,
        metrics: list[dict[str, Any]],
        **fields: Any,
    ) -> PerformanceReview:
        """Insert a review together with its metrics.

        Args:
            metrics: Column values for each metric row.
            **fields: Column values for the review row.

        Returns:
            The created PerformanceReview record.
        """
        review = PerformanceReview(**fields)
        review.metrics = [PerformanceMetric(**metric) for metric in metrics]
        self.db.add(review)
        self.db.flush()
        logger.info(
            "Created performance review: id=%s employee_id=%s period=%s metrics=%s",
            review.id,
            review.employee_id,
            review.review_period,
            len(metrics),
        )
        return review

    def update_review(self, review: PerformanceReview, fields: dict[str, Any]) -> PerformanceReview:
        for name, value in fields.items():
            setattr(review, name, value)
        self.db.flush()
        logger.info("Updated performance review: id=%s fields=%s", review.id, sorted(fields))
        return review

    def list_reviews(
        self,
        offset: int,
        limit: int,
        employee_id: int | None = None,
        review_period: str | None = None,
        status: str | None = None,
        sort_by: str = "reviewDate",
        sort_order: str = "DESC",
    ) -> tuple[list[PerformanceReview], int]:
        """List reviews matching the filters.

        Args:
            offset: Number of rows to skip.
            limit: Maximum number of rows returned.
            employee_id: Restrict to one employee.
            review_period: Substring of the review period label.
            status: Exact review status.
            sort_by: Public sort key, see REVIEW_SORT_COLUMNS.
            sort_order: ASC or DESC.

        Returns:
            Tuple of (page of reviews, total matching rows).
        """
        query = self.db.query(PerformanceReview)
        if employee_id is not None:
            query = query.filter(PerformanceReview.employee_id == employee_id)
        if review_period:
            query = query.filter(PerformanceReview.review_period.ilike(f"%{review_period}%"))
        if status:
            query = query.filter(PerformanceReview.status == status)

        total = query.count()
        column = REVIEW_SORT_COLUMNS.get(sort_by, PerformanceReview.review_date)
        reviews = (
            query.order_by(order_clause(column, sort_order), PerformanceReview.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return reviews, total

    # Aggregates

    def _published_since(self, since: date | None, department_id: int | None):
        query = (
            self.db.query(PerformanceReview)
            .select_from(PerformanceReview)
            .join(Employee, PerformanceReview.employee_id == Employee.id)
            .join(Department, Employee.department_id == Department.id)
            .filter(PerformanceReview.status == PUBLISHED)
        )
        if since is not None:
            query = query.filter(PerformanceReview.review_date >= since)
        if department_id is not None:
            query = query.filter(Employee.department_id == department_id)
        return query

    def department_ratings(
        self, since: date | None, department_id: int | None = None
    ) -> list[dict[str, Any]]:
        """Average published rating per department.

        Args:
            since: Earliest review date included, None for all time.
            department_id: Restrict to one department.

        Returns:
            Rows with department name, average rating, review and employee counts,
            best department first.
        """
        avg_rating = func.avg(PerformanceReview.overall_rating)
        rows = (
            self._published_since(since, department_id)
            .with_entities(
                Department.name,
                avg_rating,
                func.count(PerformanceReview.id),
                func.count(distinct(PerformanceReview.employee_id)),
            )
            .group_by(Department.id, Department.name)
            .order_by(avg_rating.desc())
            .all()
        )
        return [
            {
                "department_name": name,
                "avg_rating": float(avg) if avg is not None else None,
                "review_count": review_count,
                "employee_count": employee_count,
            }
            for name, avg, review_count, employee_count in rows
        ]

    def top_performers(
        self,
        since: date | None,
        department_id: int | None = None,
        limit: int = 10,
    ) -> list[dict[str, Any]]:
        """Employees with the highest average published rating."""
        avg_rating = func.avg(PerformanceReview.overall_rating)
        rows = (
            self._published_since(since, department_id)
            .filter(PerformanceReview.overall_rating.isnot(None))
            .with_entities(
                Employee.id,
                Employee.employee_code,
                Employee.first_name,
                Employee.last_name,
                Department.name,
                avg_rating,
                func.count(PerformanceReview.id),
            )
            .group_by(
                Employee.id,
                Employee.employee_code,
                Employee.first_name,
                Employee.last_name,
                Department.name,
            )
            .order_by(avg_rating.desc())
            .limit(limit)
            .all()
        )
        return [
            {
                "employee_id": employee_id,
                "employee_code": code,
                "employee_name": f"{first} {last}",
                "department_name": department,
                "avg_rating": float(avg),
                "review_count": count,
            }
            for employee_id, code, first, last, department, avg, count in rows
        ]

    def monthly_hours(
        self, since: date, department_id: int | None = None
    ) -> list[dict[str, Any]]:
        """Work hours per calendar month since ``since``, newest month first."""
        year = extract("year", WorkLog.log_date)
        month = extract("month", WorkLog.log_date)
        query = (
            self.db.query(
                year,
                month,
                func.sum(WorkLog.hours_worked),
                func.avg(WorkLog.hours_worked),
                func.count(distinct(WorkLog.employee_id)),
            )
            .select_from(WorkLog)
            .join(Employee, WorkLog.employee_id == Employee.id)
            .filter(WorkLog.log_date >= since)
        )
        if department_id is not None:
            query = query.filter(Employee.department_id == department_id)
        rows = query.group_by(year, month).order_by(year.desc(), month.desc()).all()
        return [
            {
                "year": int(row_year),
                "month": int(row_month),
                "total_hours": float(total or 0),
                "avg_hours_per_day": float(avg) if avg is not None else None,
                "active_employees": active,
            }
            for row_year, row_month, total, avg, active in rows
        ]
