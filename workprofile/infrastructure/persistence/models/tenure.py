"""Tenure ORM: assignment workload and employment position tenures.

Partial unique indexes (WHERE ended_at IS NULL) allow at most one open
tenure per subject and scope.
"""

from datetime import date, datetime

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from workprofile.infrastructure.persistence.database import Base
from workprofile.infrastructure.persistence.models.mixins import (
    CompanyScopedModel,
    CuidMixin,
    TimestampMixin,
)

_OPEN = text("ended_at IS NULL")


class AssignmentTenure(CuidMixin, TimestampMixin, Base):
    """Energy allocation of a teammate to an assignment. Table: assignment_tenure."""

    __tablename__ = "assignment_tenure"
    __table_args__ = (
        Index(
            "uq_assignment_tenure_open",
            "subject_id",
            "assignment_id",
            unique=True,
            postgresql_where=_OPEN,
            sqlite_where=_OPEN,
        ),
        CheckConstraint(
            "anticipated_energy_percentage BETWEEN 0 AND 100",
            name="assignment_tenure_energy_check",
        ),
        CheckConstraint(
            "ended_at IS NULL OR ended_at >= started_at",
            name="assignment_tenure_span_check",
        ),
    )

    subject_id: Mapped[str] = mapped_column(
        String, ForeignKey("teammate.id", ondelete="CASCADE"), nullable=False, index=True
    )
    assignment_id: Mapped[str] = mapped_column(
        String, ForeignKey("assignment.id", ondelete="CASCADE"), nullable=False, index=True
    )
    anticipated_energy_percentage: Mapped[int] = mapped_column(Integer, nullable=False)
    started_at: Mapped[date] = mapped_column(Date, nullable=False)
    ended_at: Mapped[date | None] = mapped_column(Date, nullable=True)
    official_rating: Mapped[str | None] = mapped_column(String, nullable=True)


class EmploymentTenure(CompanyScopedModel, Base):
    """Position held by a teammate in a company. Table: employment_tenure."""

    __tablename__ = "employment_tenure"
    __table_args__ = (
        Index(
            "uq_employment_tenure_open",
            "subject_id",
            "company_id",
            unique=True,
            postgresql_where=_OPEN,
            sqlite_where=_OPEN,
        ),
        CheckConstraint(
            "ended_at IS NULL OR ended_at >= started_at",
            name="employment_tenure_span_check",
        ),
    )

    subject_id: Mapped[str] = mapped_column(
        String, ForeignKey("teammate.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position_id: Mapped[str] = mapped_column(
        String, ForeignKey("position.id", ondelete="RESTRICT"), nullable=False
    )
    # Reference by id only; hierarchy traversal happens elsewhere.
    manager_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("teammate.id", ondelete="SET NULL"), nullable=True, index=True
    )
    seat_id: Mapped[str | None] = mapped_column(String, nullable=True)
    employment_type: Mapped[str] = mapped_column(String, nullable=False)
    started_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    ended_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    official_position_rating: Mapped[int | None] = mapped_column(Integer, nullable=True)
