"""Report catalog, report generation and dashboard analytics."""

import logging
from collections.abc import Callable
from typing import Any

from sqlalchemy.orm import Session

from app.clock import local_today, months_ago, period_start
from app.errors import NotFound
from config.settings import Settings
from repositories.report_repository import ReportRepository
from schemas.report import ReportRequest
from services.report_renderer import Column, ReportDocument, render

logger = logging.getLogger(__name__)

FORMATS = ["PDF", "Excel"]

REPORT_TEMPLATES = [
    {
        "id": "employee-performance",
        "name": "Employee Performance Report",
        "description": "Comprehensive performance analysis with ratings and feedback",
        "type": "Performance",
        "formats": FORMATS,
        "parameters": ["departmentId", "period", "employeeId"],
    },
    {
        "id": "leave-usage",
        "name": "Leave Usage Summary",
        "description": "Leave balances and usage patterns by department",
        "type": "Leave",
        "formats": FORMATS,
        "parameters": ["departmentId", "year", "leaveTypeId"],
    },
    {
        "id": "work-hours",
        "name": "Work Hours Analysis",
        "description": "Time tracking and productivity metrics",
        "type": "Hours",
        "formats": FORMATS,
        "parameters": ["departmentId", "startDate", "endDate", "projectId"],
    },
    {
        "id": "department-overview",
        "name": "Department Overview",
        "description": "Employee distribution and departmental statistics",
        "type": "Overview",
        "formats": FORMATS,
        "parameters": ["departmentId"],
    },
    {
        "id": "employee-directory",
        "name": "Employee Directory",
        "description": "Complete employee contact and role information",
        "type": "Directory",
        "formats": FORMATS,
        "parameters": ["departmentId", "status"],
    },
]

RATINGS_WINDOW_MONTHS = 3
HOURS_WINDOW_MONTHS = 1
HOURS_TREND_MONTHS = 6


def usage_percentage(used_days: float, total_days: float) -> int:
    """Share of the allowance already used, rounded to a whole percent."""
    if not total_days:
        return 0
    return round(used_days / total_days * 100)


def _or_na(value: Any) -> Any:
    return "N/A" if value in (None, "") else value


class ReportService:
    """Builds report documents from the database and renders them."""

    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings
        self.repo = ReportRepository(db)
        self._builders: dict[str, Callable[[ReportRequest], ReportDocument]] = {
            "employee-performance": self._performance_report,
            "leave-usage": self._leave_usage_report,
            "work-hours": self._work_hours_report,
            "employee-directory": self._directory_report,
            "department-overview": self._department_overview_report,
        }

    @staticmethod
    def templates() -> list[dict[str, Any]]:
        return REPORT_TEMPLATES

    def generate(self, report_id: str, request: ReportRequest) -> tuple[bytes, str, str]:
        """Build and render one report.

        Args:
            report_id: Identifier from the template catalog.
            request: Output format and filters.

        Returns:
            Tuple of (file bytes, media type, download filename).

        Raises:
            NotFound: Unknown report id.
        """
        builder = self._builders.get(report_id)
        if builder is None:
            raise NotFound("Report template not found")

        document = builder(request)
        content, media_type, filename = render(document, request.format)
        logger.info(
            "Generated %s report: rows=%s format=%s bytes=%s",
            report_id,
            len(document.rows),
            request.format,
            len(content),
        )
        return content, media_type, filename

    def _document(self, **kwargs: Any) -> ReportDocument:
        return ReportDocument(generated_on=local_today(self.settings.timezone), **kwargs)

    def _performance_report(self, request: ReportRequest) -> ReportDocument:
        since = period_start(request.period, local_today(self.settings.timezone))
        rows = [
            {
                "employee_code": review.employee_code,
                "employee_name": review.employee_name,
                "department_name": review.department_name,
                "review_period": review.review_period,
                "overall_rating": review.overall_rating,
                "goals": review.goals,
                "achievements": review.achievements,
                "feedback": review.feedback,
                "reviewer_name": review.reviewer_name,
                "review_date": review.review_date,
            }
            for review in self.repo.published_reviews(
                since, request.department_id, request.employee_id
            )
        ]
        filters = [f"Period: {request.period}"]
        if request.department_id is not None:
            filters.append("Department Filter: Applied")
        return self._document(
            title="Employee Performance Report",
            filename="performance-report",
            columns=[
                Column("Employee ID", "employee_code", 15),
                Column("Employee Name", "employee_name", 25),
                Column("Department", "department_name", 20),
                Column("Review Period", "review_period", 15),
                Column("Overall Rating", "overall_rating", 15),
                Column("Goals", "goals", 40),
                Column("Achievements", "achievements", 40),
                Column("Feedback", "feedback", 40),
                Column("Reviewer", "reviewer_name", 25),
                Column("Review Date", "review_date", 15),
            ],
            rows=rows,
            filter_lines=filters,
            pdf_block=lambda row: [
                f"{row['employee_name']} ({row['employee_code']})",
                f"Department: {row['department_name']}",
                f"Review Period: {row['review_period']}",
                f"Overall Rating: {_or_na(row['overall_rating'])}/5",
                f"Goals: {_or_na(row['goals'])}",
                f"Achievements: {_or_na(row['achievements'])}",
                f"Feedback: {_or_na(row['feedback'])}",
                f"Reviewer: {row['reviewer_name']}",
                f"Review Date: {_or_na(row['review_date'])}",
            ],
        )

    def _leave_usage_report(self, request: ReportRequest) -> ReportDocument:
        year = request.year or local_today(self.settings.timezone).year
        rows = [
            {
                "employee_code": balance.employee_code,
                "employee_name": balance.employee_name,
                "department_name": balance.employee.department_name,
                "leave_type": balance.leave_type_name,
                "total_days": balance.total_days,
                "used_days": balance.used_days,
                "remaining_days": balance.remaining_days,
                "carry_forward_days": balance.carry_forward_days,
                "usage_percentage": usage_percentage(balance.used_days, balance.total_days),
            }
            for balance in self.repo.leave_balances(year, request.department_id, request.leave_type_id)
        ]
        return self._document(
            title="Leave Usage Report",
            filename="leave-usage-report",
            columns=[
                Column("Employee ID", "employee_code", 15),
                Column("Employee Name", "employee_name", 25),
                Column("Department", "department_name", 20),
                Column("Leave Type", "leave_type", 20),
                Column("Total Days", "total_days", 12),
                Column("Used Days", "used_days", 12),
                Column("Remaining Days", "remaining_days", 15),
                Column("Carry Forward", "carry_forward_days", 15),
                Column("Usage %", "usage_percentage", 12),
            ],
            rows=rows,
            filter_lines=[f"Year: {year}"],
            pdf_block=lambda row: [
                f"{row['employee_name']} ({row['employee_code']}) - {row['department_name']}",
                f"Leave Type: {row['leave_type']}",
                f"Total: {row['total_days']:g} | Used: {row['used_days']:g} | "
                f"Remaining: {row['remaining_days']:g}",
                f"Usage: {row['usage_percentage']}%",
            ],
        )

    def _work_hours_report(self, request: ReportRequest) -> ReportDocument:
        rows = [
            {
                "log_date": log.log_date,
                "employee_code": log.employee_code,
                "employee_name": log.employee_name,
                "department_name": log.employee.department_name,
                "project_name": log.project_name or "No Project",
                "hours_worked": log.hours_worked,
                "task_description": log.task_description,
                "status": log.status,
            }
            for log in self.repo.work_logs(
                request.start_date,
                request.end_date,
                request.department_id,
                request.project_id,
            )
        ]
        filters = []
        if request.start_date:
            filters.append(f"From: {request.start_date.isoformat()}")
        if request.end_date:
            filters.append(f"To: {request.end_date.isoformat()}")
        return self._document(
            title="Work Hours Report",
            filename="work-hours-report",
            columns=[
                Column("Date", "log_date", 12),
                Column("Employee ID", "employee_code", 15),
                Column("Employee Name", "employee_name", 25),
                Column("Department", "department_name", 20),
                Column("Project", "project_name", 25),
                Column("Hours Worked", "hours_worked", 15),
                Column("Task Description", "task_description", 40),
                Column("Status", "status", 15),
            ],
            rows=rows,
            filter_lines=filters,
            pdf_block=lambda row: [
                f"{row['log_date'].isoformat()} | {row['employee_name']} "
                f"({row['employee_code']}) | {row['department_name']}",
                f"Project: {row['project_name']} | Hours: {row['hours_worked']:g}",
                f"Task: {_or_na(row['task_description'])} | Status: {row['status']}",
            ],
        )

    def _directory_report(self, request: ReportRequest) -> ReportDocument:
        rows = [
            {
                "employee_code": employee.employee_code,
                "employee_name": employee.full_name,
                "email": employee.email,
                "phone": employee.phone,
                "department_name": employee.department_name,
                "role_name": employee.role_name,
                "manager_name": employee.manager_name,
                "hire_date": employee.hire_date,
                "status": employee.status,
            }
            for employee in self.repo.employees(request.department_id, request.status)
        ]
        filters = [f"Status: {request.status}"] if request.status else []
        return self._document(
            title="Employee Directory",
            filename="employee-directory-report",
            columns=[
                Column("Employee ID", "employee_code", 15),
                Column("Employee Name", "employee_name", 25),
                Column("Email", "email", 30),
                Column("Phone", "phone", 15),
                Column("Department", "department_name", 20),
                Column("Role", "role_name", 20),
                Column("Manager", "manager_name", 25),
                Column("Hire Date", "hire_date", 12),
                Column("Status", "status", 12),
            ],
            rows=rows,
            filter_lines=filters,
            pdf_block=lambda row: [
                f"{row['employee_name']} ({row['employee_code']})",
                f"Email: {row['email']} | Phone: {_or_na(row['phone'])}",
                f"Department: {_or_na(row['department_name'])} | Role: {_or_na(row['role_name'])}",
                f"Manager: {_or_na(row['manager_name'])} | Hired: {_or_na(row['hire_date'])} | "
                f"Status: {row['status']}",
            ],
        )

    def _department_overview_report(self, request: ReportRequest) -> ReportDocument:
        return self._document(
            title="Department Overview",
            filename="department-overview-report",
            columns=[
                Column("Department", "department_name", 25),
                Column("Description", "description", 40),
                Column("Total Employees", "total_employees", 16),
                Column("Active", "active_employees", 10),
                Column("On Leave", "on_leave_employees", 10),
                Column("Average Salary", "average_salary", 16),
                Column("Active Projects", "active_projects", 16),
            ],
            rows=self.repo.department_overview(request.department_id),
            pdf_block=lambda row: [
                row["department_name"],
                f"Description: {_or_na(row['description'])}",
                f"Employees: {row['total_employees']} | Active: {row['active_employees']} | "
                f"On Leave: {row['on_leave_employees']}",
                f"Average Salary: {_or_na(row['average_salary'])} | "
                f"Active Projects: {row['active_projects']}",
            ],
        )

    def analytics(self) -> dict[str, Any]:
        """Department summary, leave utilization and the monthly hours trend."""
        today = local_today(self.settings.timezone)
        return {
            "department_performance": self.repo.department_summary(
                ratings_since=months_ago(today, RATINGS_WINDOW_MONTHS),
                hours_since=months_ago(today, HOURS_WINDOW_MONTHS),
            ),
            "leave_utilization": self.repo.leave_utilization(today.year),
            "work_hours_trend": self.repo.hours_trend(months_ago(today, HOURS_TREND_MONTHS)),
        }
