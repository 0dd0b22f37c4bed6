"""Teammate ORM: the subject whose work profile is tracked."""

from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from workprofile.infrastructure.persistence.database import Base
from workprofile.infrastructure.persistence.models.mixins import CompanyScopedModel


class Teammate(CompanyScopedModel, Base):
    """Employee within a company. Table: teammate."""

    __tablename__ = "teammate"

    display_name: Mapped[str] = mapped_column(String, nullable=False)
    first_employed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    # Denormalized from the latest terminated employment tenure.
    last_terminated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
