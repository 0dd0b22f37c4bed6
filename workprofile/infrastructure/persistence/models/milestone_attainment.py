"""Milestone attainment ORM: one row per teammate and ability, no history."""

from datetime import date

from sqlalchemy import CheckConstraint, Date, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from workprofile.infrastructure.persistence.database import Base
from workprofile.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin


class MilestoneAttainment(CuidMixin, TimestampMixin, Base):
    """Table: milestone_attainment. Unique (subject_id, ability_id)."""

    __tablename__ = "milestone_attainment"
    __table_args__ = (
        UniqueConstraint("subject_id", "ability_id", name="uq_milestone_attainment_subject_ability"),
        CheckConstraint(
            "milestone_level BETWEEN 1 AND 5", name="milestone_attainment_level_check"
        ),
    )

    subject_id: Mapped[str] = mapped_column(
        String, ForeignKey("teammate.id", ondelete="CASCADE"), nullable=False, index=True
    )
    ability_id: Mapped[str] = mapped_column(
        String, ForeignKey("ability.id", ondelete="CASCADE"), nullable=False
    )
    milestone_level: Mapped[int] = mapped_column(Integer, nullable=False)
    certifying_subject_id: Mapped[str | None] = mapped_column(String, nullable=True)
    attained_at: Mapped[date | None] = mapped_column(Date, nullable=True)
