"""Employee, department, role and permission models."""

from sqlalchemy import (
    JSON,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Table,
    Text,
)
from sqlalchemy.orm import relationship

from models.base import Base, TimestampMixin

EMPLOYEE_STATUSES = ("Active", "Inactive", "On Leave", "Terminated")

role_permissions = Table(
    "role_permissions",
    Base.metadata,
    Column("role_id", Integer, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
    Column(
        "permission_id",
        Integer,
        ForeignKey("permissions.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Department(TimestampMixin, Base):
    """Organisational unit employees belong to."""

    __tablename__ = "departments"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), unique=True, nullable=False)
    description = Column(Text)

    employees = relationship("Employee", back_populates="department")


class Permission(Base):
    """A named capability granted to roles (e.g. ``manage_employees``)."""

    __tablename__ = "permissions"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), unique=True, nullable=False)


class Role(TimestampMixin, Base):
    """Job role carrying a set of permissions."""

    __tablename__ = "roles"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), unique=True, nullable=False)
    description = Column(Text)

    permissions = relationship(
        "Permission",
        secondary=role_permissions,
        lazy="selectin",
        order_by="Permission.name",
    )

    @property
    def permission_names(self) -> list[str]:
        return [permission.name for permission in self.permissions]


class Employee(TimestampMixin, Base):
    """Employee account and HR record.

    Employees are never deleted; termination flips ``status`` to
    ``Terminated``.
    """

    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, index=True)
    employee_code = Column(String(50), unique=True, nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    phone = Column(String(20))
    date_of_birth = Column(Date)
    hire_date = Column(Date, nullable=False)
    department_id = Column(Integer, ForeignKey("departments.id"))
    role_id = Column(Integer, ForeignKey("roles.id"))
    manager_id = Column(Integer, ForeignKey("employees.id"))
    salary = Column(Numeric(12, 2))
    address = Column(String(500))
    emergency_contact = Column(JSON)
    password_hash = Column(String(255), nullable=False)
    status = Column(String(20), nullable=False, default="Active")
    last_login = Column(DateTime(timezone=True))

    department = relationship("Department", back_populates="employees")
    role = relationship("Role", lazy="joined")
    manager = relationship("Employee", remote_side=[id], foreign_keys=[manager_id])

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def permission_names(self) -> list[str]:
        return self.role.permission_names if self.role else []

    @property
    def role_name(self) -> str | None:
        return self.role.name if self.role else None

    @property
    def department_name(self) -> str | None:
        return self.department.name if self.department else None

    @property
    def manager_name(self) -> str | None:
        return self.manager.full_name if self.manager else None

    def snapshot(self) -> dict:
        """JSON-safe view of the row for audit records (no password hash)."""
        return {
            "id": self.id,
            "employee_code": self.employee_code,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "date_of_birth": self.date_of_birth.isoformat() if self.date_of_birth else None,
            "hire_date": self.hire_date.isoformat() if self.hire_date else None,
            "department_id": self.department_id,
            "role_id": self.role_id,
            "manager_id": self.manager_id,
            "salary": float(self.salary) if self.salary is not None else None,
            "address": self.address,
            "emergency_contact": self.emergency_contact,
            "status": self.status,
        }
