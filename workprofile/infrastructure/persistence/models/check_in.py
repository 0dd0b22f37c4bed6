"""Check-in ORM: position, assignment and aspiration check-ins share one table."""

from datetime import date, datetime

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from workprofile.domain.enums import CheckInScope
from workprofile.infrastructure.persistence.database import Base
from workprofile.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin

_SCOPES = ", ".join(f"'{value}'" for value in CheckInScope.values())
_OPEN = text("official_completed_at IS NULL")


class CheckIn(CuidMixin, TimestampMixin, Base):
    """Check-in for one subject and scope. Table: check_in.

    scope_id points at an employment tenure, assignment or aspiration
    depending on scope_type (no FK). At most one open check-in per scope.
    """

    __tablename__ = "check_in"
    __table_args__ = (
        Index(
            "uq_check_in_open",
            "subject_id",
            "scope_type",
            "scope_id",
            unique=True,
            postgresql_where=_OPEN,
            sqlite_where=_OPEN,
        ),
        CheckConstraint(f"scope_type IN ({_SCOPES})", name="check_in_scope_type_check"),
        CheckConstraint(
            "official_completed_at IS NULL OR "
            "(employee_completed_at IS NOT NULL AND manager_completed_at IS NOT NULL)",
            name="check_in_finalization_check",
        ),
    )

    subject_id: Mapped[str] = mapped_column(
        String, ForeignKey("teammate.id", ondelete="CASCADE"), nullable=False, index=True
    )
    scope_type: Mapped[str] = mapped_column(String, nullable=False)
    scope_id: Mapped[str] = mapped_column(String, nullable=False)
    check_in_started_on: Mapped[date | None] = mapped_column(Date, nullable=True)

    actual_energy_percentage: Mapped[int | None] = mapped_column(Integer, nullable=True)
    employee_rating: Mapped[str | None] = mapped_column(String, nullable=True)
    employee_personal_alignment: Mapped[str | None] = mapped_column(String, nullable=True)
    employee_private_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    employee_completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    manager_rating: Mapped[str | None] = mapped_column(String, nullable=True)
    manager_private_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    manager_completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    manager_completed_by_id: Mapped[str | None] = mapped_column(String, nullable=True)

    official_rating: Mapped[str | None] = mapped_column(String, nullable=True)
    shared_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    official_completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    finalized_by_id: Mapped[str | None] = mapped_column(String, nullable=True)
