"""Populate an empty database with reference data and a small sample company.

Usage:
    python -m scripts.seed [--create-schema]

Every sample account uses the password ``password123``.
"""

import argparse
import logging
import sys
from datetime import date

from sqlalchemy.orm import Session

from app.auth.security import hash_password
from app.clock import local_today
from config.database import Database
from config.settings import Settings, settings as default_settings
from models import (
    Base,
    Department,
    Employee,
    LeaveApplication,
    LeaveBalance,
    LeaveType,
    Notification,
    PerformanceReview,
    Permission,
    Project,
    Role,
    WorkLog,
)

logger = logging.getLogger(__name__)

DEFAULT_PASSWORD = "password123"

DEPARTMENTS = [
    ("Engineering", "Software development and technical operations"),
    ("Human Resources", "Employee relations and organizational development"),
    ("Marketing", "Brand promotion and customer acquisition"),
    ("Finance", "Financial planning and accounting"),
    ("Operations", "Business operations and process management"),
    ("Sales", "Revenue generation and customer relations"),
]

ROLES = [
    ("Admin", "System administrator with full access", ["all"]),
    ("Manager", "Department manager with team oversight", ["manage_team", "approve_leave", "view_reports"]),
    ("HR Manager", "Human resources management", ["manage_employees", "manage_leave", "view_all_reports"]),
    ("Employee", "Regular employee access", ["view_profile", "request_leave", "log_hours"]),
    ("Senior Developer", "Senior technical role", ["view_profile", "request_leave", "log_hours", "mentor_team"]),
    ("Financial Analyst", "Financial analysis and reporting", ["view_profile", "request_leave", "financial_reports"]),
]

LEAVE_TYPES = [
    ("Annual Leave", "Yearly vacation days", 25, True, True),
    ("Sick Leave", "Medical leave for illness", 10, False, False),
    ("Personal Leave", "Personal time off", 5, False, True),
    ("Maternity Leave", "Maternity leave for new mothers", 90, False, True),
    ("Paternity Leave", "Paternity leave for new fathers", 14, False, True),
    ("Emergency Leave", "Emergency situations", 3, False, True),
    ("Bereavement Leave", "Leave for family bereavement", 5, False, True),
]

# code, first, last, email, phone, hire date, department, role, manager code
EMPLOYEES = [
    ("EMP001", "John", "Doe", "john.doe@company.com", "+1-555-0101", date(2022, 1, 15), "Engineering", "Manager", None),
    ("EMP002", "Jane", "Smith", "jane.smith@company.com", "+1-555-0102", date(2021, 3, 20), "Human Resources", "HR Manager", None),
    ("EMP003", "Alice", "Johnson", "alice.johnson@company.com", "+1-555-0103", date(2022, 6, 10), "Engineering", "Senior Developer", "EMP001"),
    ("EMP004", "Bob", "Wilson", "bob.wilson@company.com", "+1-555-0104", date(2023, 2, 1), "Marketing", "Employee", "EMP001"),
    ("EMP005", "Carol", "Davis", "carol.davis@company.com", "+1-555-0105", date(2021, 11, 15), "Human Resources", "Employee", "EMP002"),
    ("EMP006", "David", "Brown", "david.brown@company.com", "+1-555-0106", date(2022, 9, 5), "Finance", "Financial Analyst", "EMP002"),
    ("EMP007", "Emma", "Taylor", "emma.taylor@company.com", "+1-555-0107", date(2023, 4, 12), "Operations", "Employee", "EMP002"),
    ("EMP008", "Frank", "Miller", "frank.miller@company.com", "+1-555-0108", date(2021, 7, 30), "Sales", "Employee", "EMP001"),
]

# name, description, start, end, status, manager code, department
PROJECTS = [
    ("React Migration", "Migrate legacy application to React", date(2024, 1, 1), date(2024, 6, 30), "Active", "EMP001", "Engineering"),
    ("HR System Upgrade", "Upgrade human resources management system", date(2024, 2, 1), date(2024, 8, 31), "Active", "EMP002", "Human Resources"),
    ("Marketing Campaign Q1", "First quarter marketing initiatives", date(2024, 1, 1), date(2024, 3, 31), "Completed", "EMP004", "Marketing"),
    ("Financial Dashboard", "Executive financial reporting dashboard", date(2024, 3, 1), date(2024, 9, 30), "Active", "EMP006", "Finance"),
    ("Mobile App Development", "Company mobile application", date(2024, 4, 1), date(2024, 12, 31), "Active", "EMP001", "Engineering"),
]

# Days already used of (Annual Leave, Sick Leave) this year
USED_DAYS = {
    "EMP001": (5, 2),
    "EMP002": (8, 1),
    "EMP003": (12, 0),
    "EMP004": (6, 3),
    "EMP005": (15, 1),
    "EMP006": (9, 2),
    "EMP007": (4, 0),
    "EMP008": (11, 1),
}


def seed_database(db: Session, today: date | None = None) -> bool:
    """Insert the sample data unless the database already holds departments.

    Args:
        db: Database session; committed on success.
        today: Reference date for the leave balance year.

    Returns:
        True when data was inserted, False when the database was not empty.
    """
    if db.query(Department).first() is not None:
        logger.info("Database already seeded; nothing to do")
        return False

    year = (today or date.today()).year

    departments = {name: Department(name=name, description=desc) for name, desc in DEPARTMENTS}
    permissions = {
        name: Permission(name=name)
        for name in sorted({perm for _, _, perms in ROLES for perm in perms})
    }
    roles = {
        name: Role(name=name, description=desc, permissions=[permissions[p] for p in perms])
        for name, desc, perms in ROLES
    }
    leave_types = {
        name: LeaveType(
            name=name,
            description=desc,
            max_days_per_year=max_days,
            carry_forward=carry,
            requires_approval=approval,
        )
        for name, desc, max_days, carry, approval in LEAVE_TYPES
    }
    db.add_all([*departments.values(), *roles.values(), *leave_types.values()])

    password_hash = hash_password(DEFAULT_PASSWORD)
    employees: dict[str, Employee] = {}
    for code, first, last, email, phone, hired, dept, role, manager in EMPLOYEES:
        employees[code] = Employee(
            employee_code=code,
            first_name=first,
            last_name=last,
            email=email,
            phone=phone,
            hire_date=hired,
            department=departments[dept],
            role=roles[role],
            manager=employees.get(manager) if manager else None,
            status="Active",
            password_hash=password_hash,
        )
    db.add_all(employees.values())

    projects = {
        name: Project(
            name=name,
            description=desc,
            start_date=start,
            end_date=end,
            status=status,
            manager=employees[manager],
            department=departments[dept],
        )
        for name, desc, start, end, status, manager, dept in PROJECTS
    }
    db.add_all(projects.values())

    for code, (annual_used, sick_used) in USED_DAYS.items():
        for leave_type, used in ((leave_types["Annual Leave"], annual_used), (leave_types["Sick Leave"], sick_used)):
            balance = LeaveBalance(
                employee=employees[code],
                leave_type=leave_type,
                year=year,
                total_days=leave_type.max_days_per_year,
                used_days=used,
            )
            balance.recalculate()
            db.add(balance)

    db.add_all(
        [
            LeaveApplication(
                employee=employees["EMP003"],
                leave_type=leave_types["Annual Leave"],
                start_date=date(2024, 12, 20),
                end_date=date(2024, 12, 24),
                total_days=5,
                reason="Holiday vacation with family",
                attachments=[],
                status="Pending",
                applied_date=date(2024, 12, 10),
            ),
            LeaveApplication(
                employee=employees["EMP004"],
                leave_type=leave_types["Sick Leave"],
                start_date=date(2024, 12, 18),
                end_date=date(2024, 12, 18),
                total_days=1,
                reason="Medical appointment",
                attachments=[],
                status="Approved",
                applied_date=date(2024, 12, 15),
                approver=employees["EMP001"],
            ),
            WorkLog(
                employee=employees["EMP001"],
                project=projects["React Migration"],
                log_date=date(2024, 12, 16),
                hours_worked=8.0,
                task_description="Code review and architecture planning",
                status="Completed",
            ),
            WorkLog(
                employee=employees["EMP003"],
                project=projects["React Migration"],
                log_date=date(2024, 12, 16),
                hours_worked=8.0,
                task_description="Frontend component development",
                status="Completed",
            ),
            WorkLog(
                employee=employees["EMP004"],
                project=projects["Marketing Campaign Q1"],
                log_date=date(2024, 12, 16),
                hours_worked=8.0,
                task_description="Campaign performance analysis",
                status="In Progress",
            ),
            PerformanceReview(
                employee=employees["EMP003"],
                reviewer=employees["EMP001"],
                review_period="Q4 2024",
                overall_rating=4.5,
                goals="Complete React migration project",
                achievements="Successfully led team migration, improved performance by 30%",
                feedback="Excellent technical leadership and communication skills",
                status="Published",
                review_date=date(2024, 12, 15),
            ),
            PerformanceReview(
                employee=employees["EMP004"],
                reviewer=employees["EMP002"],
                review_period="Q4 2024",
                overall_rating=4.0,
                goals="Increase marketing campaign ROI",
                achievements="Achieved 25% increase in campaign performance",
                feedback="Strong analytical skills, good team collaboration",
                status="Published",
                review_date=date(2024, 12, 10),
            ),
            Notification(
                recipient=employees["EMP001"],
                sender=employees["EMP003"],
                type="leave_request",
                title="New Leave Request",
                message="Alice Johnson has submitted a leave request for Dec 20-24, 2024",
                priority="high",
            ),
            Notification(
                recipient=employees["EMP001"],
                type="system",
                title="System Maintenance",
                message="Scheduled maintenance on Dec 25, 2024 from 2:00 AM - 4:00 AM",
                priority="low",
                is_read=True,
            ),
        ]
    )
    db.commit()
    logger.info(
        "Seeded %s departments, %s roles, %s leave types and %s employees",
        len(departments),
        len(roles),
        len(leave_types),
        len(employees),
    )
    return True


def main(argv: list[str] | None = None, settings: Settings | None = None) -> int:
    parser = argparse.ArgumentParser(description="Seed the employee management database")
    parser.add_argument(
        "--create-schema",
        action="store_true",
        help="create missing tables from the models before seeding",
    )
    args = parser.parse_args(argv)

    settings = settings or default_settings
    database = Database(settings)
    try:
        if args.create_schema:
            Base.metadata.create_all(database.engine)
        with database.session() as db:
            seed_database(db, local_today(settings.timezone))
    finally:
        database.dispose()
    return 0


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    sys.exit(main())
