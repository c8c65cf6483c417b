"""Shared fixtures: an application on in-memory SQLite with a small seeded company."""

from datetime import date

import pytest
from fastapi.testclient import TestClient

from app.auth.security import create_access_token, hash_password
from app.clock import local_today
from app.main import create_app
from config.settings import Settings
from models import Base, Department, Employee, LeaveType, Permission, Project, Role
from repositories.leave_repository import LeaveRepository
from routers.dependencies import get_email_service
from services.email_service import EmailDeliveryError, EmailService

PASSWORD = "password123"


class FakeEmailService(EmailService):
    """Records outgoing mail instead of talking to an SMTP server."""

    def __init__(self, settings: Settings, fail: bool = False):
        super().__init__(settings)
        self.fail = fail
        self.sent: list[dict] = []

    def send_email(self, to_email, subject, html_content, text_content=None):
        if self.fail:
            raise EmailDeliveryError("SMTP server unavailable")
        self.sent.append({"to": to_email, "subject": subject, "html": html_content})
        return True


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        database_url="sqlite://",
        jwt_secret="test-secret",
        timezone="UTC",
        smtp_host=None,
    )


@pytest.fixture
def email_service(settings):
    return FakeEmailService(settings)


@pytest.fixture
def app(settings, email_service):
    application = create_app(settings)
    engine = application.state.database.engine
    Base.metadata.create_all(engine)
    application.dependency_overrides[get_email_service] = lambda: email_service
    yield application
    Base.metadata.drop_all(engine)
    application.state.database.dispose()


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def db(app):
    with app.state.database.session() as session:
        yield session


@pytest.fixture
def company(db, settings):
    """Departments, roles, leave types and four employees.

    ``manager`` manages ``employee``; ``hr`` holds manage_employees and
    view_all_reports; ``admin`` holds the ``all`` wildcard.
    """
    permissions = {
        name: Permission(name=name)
        for name in [
            "all",
            "manage_team",
            "approve_leave",
            "view_reports",
            "manage_employees",
            "manage_leave",
            "view_all_reports",
            "view_profile",
            "request_leave",
            "log_hours",
        ]
    }
    roles = {
        "Admin": Role(name="Admin", permissions=[permissions["all"]]),
        "Manager": Role(
            name="Manager",
            permissions=[
                permissions["manage_team"],
                permissions["approve_leave"],
                permissions["view_reports"],
            ],
        ),
        "HR Manager": Role(
            name="HR Manager",
            permissions=[
                permissions["manage_employees"],
                permissions["manage_leave"],
                permissions["view_all_reports"],
            ],
        ),
        "Employee": Role(
            name="Employee",
            permissions=[
                permissions["view_profile"],
                permissions["request_leave"],
                permissions["log_hours"],
            ],
        ),
    }
    engineering = Department(name="Engineering", description="Software development")
    hr_department = Department(name="Human Resources")
    annual = LeaveType(name="Annual Leave", max_days_per_year=10, carry_forward=True)
    sick = LeaveType(name="Sick Leave", max_days_per_year=5, requires_approval=False)
    unpaid = LeaveType(name="Unpaid Leave", max_days_per_year=0)
    db.add_all([*roles.values(), engineering, hr_department, annual, sick, unpaid])

    password_hash = hash_password(PASSWORD)

    def employee(code, first, last, role, department, manager=None, **extra):
        record = Employee(
            employee_code=code,
            first_name=first,
            last_name=last,
            email=f"{first.lower()}.{last.lower()}@company.com",
            hire_date=extra.pop("hire_date", date(2022, 1, 15)),
            department=department,
            role=roles[role],
            manager=manager,
            status="Active",
            password_hash=password_hash,
            **extra,
        )
        db.add(record)
        return record

    admin = employee("EMP000", "Ada", "Admin", "Admin", engineering)
    manager = employee("EMP001", "John", "Doe", "Manager", engineering, salary=90000)
    hr = employee("EMP002", "Jane", "Smith", "HR Manager", hr_department, salary=80000)
    staff = employee("EMP003", "Alice", "Johnson", "Employee", engineering, manager=manager)
    project = Project(name="React Migration", status="Active", manager=manager, department=engineering)
    db.add(project)
    db.flush()

    year = local_today(settings.timezone).year
    leave = LeaveRepository(db)
    for person in (admin, manager, hr, staff):
        leave.create_default_balances(person.id, year)
    db.commit()

    return {
        "admin": admin,
        "manager": manager,
        "hr": hr,
        "employee": staff,
        "engineering": engineering,
        "annual": annual,
        "sick": sick,
        "unpaid": unpaid,
        "project": project,
        "year": year,
    }


@pytest.fixture
def auth_headers(company, settings):
    """Build an Authorization header for one of the seeded employees."""

    def _headers(who: str) -> dict[str, str]:
        token = create_access_token(company[who], settings)
        return {"Authorization": f"Bearer {token}"}

    return _headers
