"""Leave application workflow: submission, approval and balance bookkeeping."""

import logging
from collections.abc import Callable
from datetime import date
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.auth.permissions import is_manager_or_hr
from app.clock import local_now, local_today
from app.errors import Conflict, Forbidden, InsufficientBalance, NotFound, ValidationError
from config.settings import Settings
from models.employee import Employee
from models.leave import LEAVE_APPROVED, LEAVE_REJECTED, LeaveApplication, LeaveBalance
from repositories.leave_repository import LeaveRepository
from schemas.leave import LeaveApplicationCreate, LeaveDecision
from services.notification_service import NotificationService

logger = logging.getLogger(__name__)

NO_BALANCE_MESSAGE = "Leave type not found or no balance available"


def calculate_leave_days(start_date: date, end_date: date) -> int:
    """Inclusive number of calendar days between two dates.

    Raises:
        ValidationError: ``end_date`` is before ``start_date``.
    """
    if end_date < start_date:
        raise ValidationError("End date cannot be before start date")
    return (end_date - start_date).days + 1


def _format_days(value: float) -> str:
    return f"{value:g}"


def ensure_sufficient_balance(balance: LeaveBalance, requested_days: int) -> None:
    remaining = balance.remaining_days or 0
    if requested_days > remaining:
        raise InsufficientBalance(
            f"Insufficient leave balance. Available: {_format_days(remaining)} days, "
            f"Requested: {requested_days} days",
            details={"available": remaining, "requested": requested_days},
        )


class LeaveService:
    """Runs the Pending to Approved/Rejected workflow for leave applications."""

    def __init__(
        self,
        db: Session,
        settings: Settings,
        notifications: NotificationService,
    ):
        self.db = db
        self.settings = settings
        self.notifications = notifications
        self.repo = LeaveRepository(db)

    def _best_effort(self, description: str, notify: Callable[..., Any], *args: Any) -> None:
        try:
            notify(*args)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Could not record %s notification", description)

    def submit(self, employee: Employee, payload: LeaveApplicationCreate) -> LeaveApplication:
        """Create a pending application after checking the current-year balance.

        Args:
            employee: The applicant.
            payload: Validated request body.

        Returns:
            The committed LeaveApplication.

        Raises:
            ValidationError: Bad date range or no balance for the leave type.
            InsufficientBalance: The request exceeds the remaining days.
        """
        total_days = calculate_leave_days(payload.start_date, payload.end_date)
        today = local_today(self.settings.timezone)

        balance = self.repo.get_balance(employee.id, payload.leave_type_id, today.year)
        if balance is None:
            raise ValidationError(NO_BALANCE_MESSAGE)
        ensure_sufficient_balance(balance, total_days)

        try:
            application = self.repo.create_application(
                employee_id=employee.id,
                leave_type_id=payload.leave_type_id,
                start_date=payload.start_date,
                end_date=payload.end_date,
                total_days=total_days,
                reason=payload.reason,
                attachments=payload.attachments,
                applied_date=today,
            )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

        if employee.manager is not None:
            self._best_effort(
                "leave request",
                self.notifications.notify_leave_request,
                employee.manager,
                employee,
                application,
            )
        return application

    def decide(
        self,
        application_id: int,
        decision: LeaveDecision,
        approver: Employee,
    ) -> LeaveApplication:
        """Approve or reject a pending application.

        Approval re-reads the balance under a row lock and consumes the days;
        an approval that would overdraw the balance fails.

        Args:
            application_id: The application to decide.
            decision: New status and optional rejection reason.
            approver: The manager deciding.

        Returns:
            The committed LeaveApplication.

        Raises:
            NotFound: No such application.
            Conflict: The application was already processed.
            InsufficientBalance: Approving would exceed the remaining days.
        """
        try:
            application = self.repo.get_application(application_id, for_update=True)
            if application is None:
                raise NotFound("Leave application not found")
            if not application.is_pending:
                raise Conflict("Leave application already processed")

            if decision.status == LEAVE_APPROVED:
                year = (application.applied_date or local_today(self.settings.timezone)).year
                balance = self.repo.get_balance(
                    application.employee_id,
                    application.leave_type_id,
                    year,
                    for_update=True,
                )
                if balance is None:
                    raise ValidationError(NO_BALANCE_MESSAGE)
                ensure_sufficient_balance(balance, application.total_days)
                self.repo.consume_balance(balance, application.total_days)

            application.status = decision.status
            application.approved_by = approver.id
            application.approved_date = local_now(self.settings.timezone)
            application.rejection_reason = (
                decision.rejection_reason if decision.status == LEAVE_REJECTED else None
            )
            self.db.flush()
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            "Leave application id=%s %s by employee_id=%s",
            application.id,
            decision.status,
            approver.id,
        )
        self._best_effort(
            "leave decision",
            self.notifications.notify_leave_decision,
            application,
            approver.id,
        )
        return application

    def list_applications(
        self,
        current_user: Employee,
        page: int,
        limit: int,
        status: str | None = None,
        employee_id: int | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> tuple[list[LeaveApplication], int]:
        if not is_manager_or_hr(current_user):
            employee_id = current_user.id
        return self.repo.list_applications(
            offset=(page - 1) * limit,
            limit=limit,
            employee_id=employee_id,
            status=status,
            start_date=start_date,
            end_date=end_date,
        )

    def balances_for(self, current_user: Employee, employee_id: int | None = None) -> list[LeaveBalance]:
        """Current-year balances of the caller, or of ``employee_id`` for managers and HR."""
        target_id = current_user.id
        if employee_id is not None and employee_id != current_user.id:
            if not is_manager_or_hr(current_user):
                raise Forbidden("Access denied - cannot view other employees' balances")
            target_id = employee_id
        year = local_today(self.settings.timezone).year
        return self.repo.list_balances(target_id, year)

    def all_balances(self) -> list[dict[str, Any]]:
        """Current-year balances of active employees grouped per employee."""
        year = local_today(self.settings.timezone).year
        grouped: dict[int, dict[str, Any]] = {}
        for balance in self.repo.list_active_balances(year):
            employee = balance.employee
            entry = grouped.setdefault(
                employee.id,
                {
                    "employee_id": employee.id,
                    "employee_code": employee.employee_code,
                    "employee_name": employee.full_name,
                    "department_name": employee.department_name,
                    "balances": [],
                },
            )
            entry["balances"].append(
                {
                    "leave_type": balance.leave_type_name,
                    "total_days": balance.total_days,
                    "used_days": balance.used_days,
                    "remaining_days": balance.remaining_days,
                    "carry_forward_days": balance.carry_forward_days,
                }
            )
        return list(grouped.values())

    def leave_types(self):
        return self.repo.list_leave_types()
