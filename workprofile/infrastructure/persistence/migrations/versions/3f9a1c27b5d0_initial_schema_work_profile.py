"""Initial schema: teammates, catalog, snapshots, tenures, check-ins, milestones

Revision ID: 3f9a1c27b5d0
Revises:
Create Date: 2026-10-19 09:12:41.508113

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "3f9a1c27b5d0"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_CATALOG_TABLES = ("position", "assignment", "ability", "aspiration")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Create initial schema."""
    # Create teammate table
    op.create_table(
        "teammate",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("company_id", sa.String(), nullable=False),
        sa.Column("display_name", sa.String(), nullable=False),
        sa.Column("first_employed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_terminated_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_teammate_company_id"), "teammate", ["company_id"], unique=False)

    # Create catalog tables
    for table in _CATALOG_TABLES:
        op.create_table(
            table,
            sa.Column("id", sa.String(), nullable=False),
            sa.Column("company_id", sa.String(), nullable=False),
            sa.Column("title", sa.String(), nullable=False),
            *_timestamps(),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index(op.f(f"ix_{table}_company_id"), table, ["company_id"], unique=False)

    # Create profile_snapshot table
    op.create_table(
        "profile_snapshot",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("company_id", sa.String(), nullable=False),
        sa.Column("subject_id", sa.String(), nullable=False),
        sa.Column("creator_id", sa.String(), nullable=False),
        sa.Column("change_type", sa.String(), nullable=False),
        sa.Column("proposed_state", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column("effective_date", sa.Date(), nullable=True),
        sa.Column("acknowledged_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.CheckConstraint(
            "change_type IN ('position_tenure', 'assignment_management', "
            "'milestone_management', 'aspiration_management', 'bulk_update', "
            "'bulk_check_in_finalization')",
            name="profile_snapshot_change_type_check",
        ),
        sa.ForeignKeyConstraint(["subject_id"], ["teammate.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_profile_snapshot_company_id"), "profile_snapshot", ["company_id"], unique=False
    )
    op.create_index(
        "ix_profile_snapshot_scope_created",
        "profile_snapshot",
        ["subject_id", "company_id", "created_at"],
        unique=False,
    )

    # Create assignment_tenure table
    op.create_table(
        "assignment_tenure",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("subject_id", sa.String(), nullable=False),
        sa.Column("assignment_id", sa.String(), nullable=False),
        sa.Column("anticipated_energy_percentage", sa.Integer(), nullable=False),
        sa.Column("started_at", sa.Date(), nullable=False),
        sa.Column("ended_at", sa.Date(), nullable=True),
        sa.Column("official_rating", sa.String(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "anticipated_energy_percentage BETWEEN 0 AND 100",
            name="assignment_tenure_energy_check",
        ),
        sa.CheckConstraint(
            "ended_at IS NULL OR ended_at >= started_at", name="assignment_tenure_span_check"
        ),
        sa.ForeignKeyConstraint(["subject_id"], ["teammate.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["assignment_id"], ["assignment.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_assignment_tenure_subject_id"), "assignment_tenure", ["subject_id"], unique=False
    )
    op.create_index(
        op.f("ix_assignment_tenure_assignment_id"),
        "assignment_tenure",
        ["assignment_id"],
        unique=False,
    )
    op.create_index(
        "uq_assignment_tenure_open",
        "assignment_tenure",
        ["subject_id", "assignment_id"],
        unique=True,
        postgresql_where=sa.text("ended_at IS NULL"),
    )

    # Create employment_tenure table
    op.create_table(
        "employment_tenure",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("company_id", sa.String(), nullable=False),
        sa.Column("subject_id", sa.String(), nullable=False),
        sa.Column("position_id", sa.String(), nullable=False),
        sa.Column("manager_id", sa.String(), nullable=True),
        sa.Column("seat_id", sa.String(), nullable=True),
        sa.Column("employment_type", sa.String(), nullable=False),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("ended_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("official_position_rating", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "ended_at IS NULL OR ended_at >= started_at", name="employment_tenure_span_check"
        ),
        sa.ForeignKeyConstraint(["subject_id"], ["teammate.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["manager_id"], ["teammate.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["position_id"], ["position.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_employment_tenure_company_id"), "employment_tenure", ["company_id"], unique=False
    )
    op.create_index(
        op.f("ix_employment_tenure_subject_id"), "employment_tenure", ["subject_id"], unique=False
    )
    op.create_index(
        op.f("ix_employment_tenure_manager_id"), "employment_tenure", ["manager_id"], unique=False
    )
    op.create_index(
        "uq_employment_tenure_open",
        "employment_tenure",
        ["subject_id", "company_id"],
        unique=True,
        postgresql_where=sa.text("ended_at IS NULL"),
    )

    # Create check_in table
    op.create_table(
        "check_in",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("subject_id", sa.String(), nullable=False),
        sa.Column("scope_type", sa.String(), nullable=False),
        sa.Column("scope_id", sa.String(), nullable=False),
        sa.Column("check_in_started_on", sa.Date(), nullable=True),
        sa.Column("actual_energy_percentage", sa.Integer(), nullable=True),
        sa.Column("employee_rating", sa.String(), nullable=True),
        sa.Column("employee_personal_alignment", sa.String(), nullable=True),
        sa.Column("employee_private_notes", sa.Text(), nullable=True),
        sa.Column("employee_completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("manager_rating", sa.String(), nullable=True),
        sa.Column("manager_private_notes", sa.Text(), nullable=True),
        sa.Column("manager_completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("manager_completed_by_id", sa.String(), nullable=True),
        sa.Column("official_rating", sa.String(), nullable=True),
        sa.Column("shared_notes", sa.Text(), nullable=True),
        sa.Column("official_completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("finalized_by_id", sa.String(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "scope_type IN ('position', 'assignment', 'aspiration')",
            name="check_in_scope_type_check",
        ),
        sa.CheckConstraint(
            "official_completed_at IS NULL OR "
            "(employee_completed_at IS NOT NULL AND manager_completed_at IS NOT NULL)",
            name="check_in_finalization_check",
        ),
        sa.ForeignKeyConstraint(["subject_id"], ["teammate.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_check_in_subject_id"), "check_in", ["subject_id"], unique=False)
    op.create_index(
        "uq_check_in_open",
        "check_in",
        ["subject_id", "scope_type", "scope_id"],
        unique=True,
        postgresql_where=sa.text("official_completed_at IS NULL"),
    )

    # Create milestone_attainment table
    op.create_table(
        "milestone_attainment",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("subject_id", sa.String(), nullable=False),
        sa.Column("ability_id", sa.String(), nullable=False),
        sa.Column("milestone_level", sa.Integer(), nullable=False),
        sa.Column("certifying_subject_id", sa.String(), nullable=True),
        sa.Column("attained_at", sa.Date(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "milestone_level BETWEEN 1 AND 5", name="milestone_attainment_level_check"
        ),
        sa.ForeignKeyConstraint(["subject_id"], ["teammate.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["ability_id"], ["ability.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "subject_id", "ability_id", name="uq_milestone_attainment_subject_ability"
        ),
    )
    op.create_index(
        op.f("ix_milestone_attainment_subject_id"),
        "milestone_attainment",
        ["subject_id"],
        unique=False,
    )


def downgrade() -> None:
    """Drop all work-profile tables."""
    op.drop_table("milestone_attainment")
    op.drop_table("check_in")
    op.drop_table("employment_tenure")
    op.drop_table("assignment_tenure")
    op.drop_table("profile_snapshot")
    for table in reversed(_CATALOG_TABLES):
        op.drop_table(table)
    op.drop_table("teammate")
