"""Performance reviews and performance analytics."""

import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.auth.permissions import is_hr, is_manager_or_hr
from app.clock import local_today, months_ago, period_start
from app.errors import Conflict, Forbidden, NotFound, ValidationError
from config.settings import Settings
from models.employee import Employee
from models.performance import PerformanceReview
from repositories.employee_repository import EmployeeRepository
from repositories.performance_repository import PerformanceRepository
from schemas.performance import ReviewCreate, ReviewUpdate
from services.notification_service import NotificationService

logger = logging.getLogger(__name__)

HOURS_TREND_MONTHS = 6


class PerformanceService:
    """Creates and edits reviews and aggregates ratings for dashboards."""

    def __init__(
        self,
        db: Session,
        settings: Settings,
        notifications: NotificationService | None = None,
    ):
        self.db = db
        self.settings = settings
        self.notifications = notifications
        self.repo = PerformanceRepository(db)

    def get_review(self, review_id: int, current_user: Employee) -> PerformanceReview:
        review = self.repo.get_review(review_id)
        if review is None:
            raise NotFound("Performance review not found")
        if review.employee_id != current_user.id and not is_manager_or_hr(current_user):
            raise Forbidden("Access denied - not authorized to view this review")
        return review

    def list_reviews(
        self,
        current_user: Employee,
        page: int,
        limit: int,
        employee_id: int | None = None,
        review_period: str | None = None,
        status: str | None = None,
        sort_by: str = "reviewDate",
        sort_order: str = "DESC",
    ) -> tuple[list[PerformanceReview], int]:
        if not is_manager_or_hr(current_user):
            employee_id = current_user.id
        return self.repo.list_reviews(
            offset=(page - 1) * limit,
            limit=limit,
            employee_id=employee_id,
            review_period=review_period,
            status=status,
            sort_by=sort_by,
            sort_order=sort_order,
        )

    def create_review(self, payload: ReviewCreate, reviewer: Employee) -> PerformanceReview:
        """Open a review for an employee and tell them about it.

        Args:
            payload: Validated request body.
            reviewer: The manager writing the review.

        Returns:
            The committed PerformanceReview.

        Raises:
            NotFound: The reviewed employee does not exist.
            Conflict: A review already exists for this employee and period.
        """
        if EmployeeRepository(self.db).get_by_id(payload.employee_id) is None:
            raise NotFound("Employee not found")
        if self.repo.find_review(payload.employee_id, payload.review_period) is not None:
            raise Conflict("Performance review already exists for this period")

        try:
            review = self.repo.create_review(
                metrics=[metric.model_dump() for metric in payload.metrics],
                reviewer_id=reviewer.id,
                review_date=local_today(self.settings.timezone),
                **payload.model_dump(exclude={"metrics"}),
            )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

        if self.notifications is not None:
            try:
                self.notifications.notify_performance_review(review, reviewer.id)
            except SQLAlchemyError:
                self.db.rollback()
                logger.exception("Could not record performance review notification")
        return review

    def update_review(
        self, review_id: int, payload: ReviewUpdate, current_user: Employee
    ) -> PerformanceReview:
        """Edit a review; only its reviewer or an HR role may do so."""
        review = self.repo.get_review(review_id)
        if review is None:
            raise NotFound("Performance review not found")
        if review.reviewer_id != current_user.id and not is_hr(current_user):
            raise Forbidden("Access denied - not authorized to update this review")

        fields = payload.model_dump(exclude_unset=True)
        if not fields:
            raise ValidationError("No fields to update")
        try:
            self.repo.update_review(review, fields)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        return review

    def analytics(self, period: str, department_id: int | None = None) -> dict[str, Any]:
        """Department averages, top performers and monthly hours.

        Args:
            period: current-month, current-quarter or current-year; anything
                else covers all time.
            department_id: Restrict every figure to one department.
        """
        today = local_today(self.settings.timezone)
        since = period_start(period, today)
        return {
            "period": period,
            "department_performance": self.repo.department_ratings(since, department_id),
            "top_performers": self.repo.top_performers(since, department_id),
            "work_hours": self.repo.monthly_hours(
                months_ago(today, HOURS_TREND_MONTHS), department_id
            ),
        }
