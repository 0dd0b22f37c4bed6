"""Catalog ORM: positions, assignments, abilities and aspirations (read-only here)."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from workprofile.infrastructure.persistence.database import Base
from workprofile.infrastructure.persistence.models.mixins import CompanyScopedModel


class Position(CompanyScopedModel, Base):
    __tablename__ = "position"

    title: Mapped[str] = mapped_column(String, nullable=False)


class Assignment(CompanyScopedModel, Base):
    __tablename__ = "assignment"

    title: Mapped[str] = mapped_column(String, nullable=False)


class Ability(CompanyScopedModel, Base):
    __tablename__ = "ability"

    title: Mapped[str] = mapped_column(String, nullable=False)


class Aspiration(CompanyScopedModel, Base):
    __tablename__ = "aspiration"

    title: Mapped[str] = mapped_column(String, nullable=False)


# Reference kind (as used by IReferenceRepository) -> model
CATALOG_MODELS: dict[str, type[Base]] = {
    "position": Position,
    "assignment": Assignment,
    "ability": Ability,
    "aspiration": Aspiration,
}
