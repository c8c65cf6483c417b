"""Performance reviews, metrics, projects and work logs."""

from sqlalchemy import (
    Column,
    Date,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from models.base import Base, TimestampMixin

REVIEW_STATUSES = ("Draft", "Submitted", "Approved", "Published")
WORK_LOG_STATUSES = ("In Progress", "Completed", "Blocked")


class PerformanceReview(TimestampMixin, Base):
    """One review per employee and review period."""

    __tablename__ = "performance_reviews"
    __table_args__ = (
        UniqueConstraint("employee_id", "review_period", name="uq_review_employee_period"),
    )

    id = Column(Integer, primary_key=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    reviewer_id = Column(Integer, ForeignKey("employees.id"), nullable=False)
    review_period = Column(String(50), nullable=False)
    overall_rating = Column(Float)
    goals = Column(Text)
    achievements = Column(Text)
    areas_for_improvement = Column(Text)
    feedback = Column(Text)
    employee_comments = Column(Text)
    status = Column(String(20), nullable=False, default="Draft")
    review_date = Column(Date)

    employee = relationship("Employee", foreign_keys=[employee_id], lazy="joined")
    reviewer = relationship("Employee", foreign_keys=[reviewer_id], lazy="joined")
    metrics = relationship(
        "PerformanceMetric",
        back_populates="review",
        cascade="all, delete-orphan",
        order_by="PerformanceMetric.metric_name",
    )

    @property
    def employee_name(self) -> str | None:
        return self.employee.full_name if self.employee else None

    @property
    def employee_code(self) -> str | None:
        return self.employee.employee_code if self.employee else None

    @property
    def department_name(self) -> str | None:
        return self.employee.department_name if self.employee else None

    @property
    def reviewer_name(self) -> str | None:
        return self.reviewer.full_name if self.reviewer else None


class PerformanceMetric(Base):
    """A weighted, rated line item of a review."""

    __tablename__ = "performance_metrics"

    id = Column(Integer, primary_key=True)
    review_id = Column(
        Integer,
        ForeignKey("performance_reviews.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    metric_name = Column(String(100), nullable=False)
    rating = Column(Float, nullable=False)
    comments = Column(String(500))
    weight = Column(Float, nullable=False, default=1.0)

    review = relationship("PerformanceReview", back_populates="metrics")


class Project(TimestampMixin, Base):
    """Project that work logs can be booked against."""

    __tablename__ = "projects"

    id = Column(Integer, primary_key=True)
    name = Column(String(200), nullable=False)
    description = Column(Text)
    start_date = Column(Date)
    end_date = Column(Date)
    status = Column(String(20), nullable=False, default="Active")
    manager_id = Column(Integer, ForeignKey("employees.id"))
    department_id = Column(Integer, ForeignKey("departments.id"))

    manager = relationship("Employee", lazy="joined")
    department = relationship("Department", lazy="joined")

    @property
    def manager_name(self) -> str | None:
        return self.manager.full_name if self.manager else None

    @property
    def department_name(self) -> str | None:
        return self.department.name if self.department else None


class WorkLog(TimestampMixin, Base):
    """Hours an employee booked on a given day."""

    __tablename__ = "work_logs"

    id = Column(Integer, primary_key=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    project_id = Column(Integer, ForeignKey("projects.id"))
    log_date = Column(Date, nullable=False, index=True)
    hours_worked = Column(Float, nullable=False)
    task_description = Column(String(1000))
    status = Column(String(20), nullable=False, default="Completed")

    employee = relationship("Employee", lazy="joined")
    project = relationship("Project", lazy="joined")

    @property
    def employee_name(self) -> str | None:
        return self.employee.full_name if self.employee else None

    @property
    def employee_code(self) -> str | None:
        return self.employee.employee_code if self.employee else None

    @property
    def project_name(self) -> str | None:
        return self.project.name if self.project else None
