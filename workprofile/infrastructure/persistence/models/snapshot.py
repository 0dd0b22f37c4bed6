"""Profile snapshot ORM: append-only proposed full-profile state."""

from datetime import date, datetime
from typing import Any

from sqlalchemy import JSON, CheckConstraint, Date, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from workprofile.domain.enums import ChangeType
from workprofile.infrastructure.persistence.database import Base
from workprofile.infrastructure.persistence.models.mixins import CompanyMixin, CuidMixin

_CHANGE_TYPES = ", ".join(f"'{value}'" for value in ChangeType.values())


class ProfileSnapshot(CuidMixin, CompanyMixin, Base):
    """Many snapshots per subject. Table: profile_snapshot.

    Index (subject_id, company_id, created_at) serves previous-snapshot
    lookups and newest-first listing.
    """

    __tablename__ = "profile_snapshot"
    __table_args__ = (
        Index("ix_profile_snapshot_scope_created", "subject_id", "company_id", "created_at"),
        CheckConstraint(
            f"change_type IN ({_CHANGE_TYPES})", name="profile_snapshot_change_type_check"
        ),
    )

    subject_id: Mapped[str] = mapped_column(
        String, ForeignKey("teammate.id", ondelete="CASCADE"), nullable=False
    )
    creator_id: Mapped[str] = mapped_column(String, nullable=False)
    change_type: Mapped[str] = mapped_column(String, nullable=False)
    proposed_state: Mapped[dict[str, Any]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"), nullable=False
    )
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    effective_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    acknowledged_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
