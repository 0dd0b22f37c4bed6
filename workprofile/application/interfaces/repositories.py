"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs or domain entities only; no infrastructure imports.
"""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from datetime import date, datetime
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from workprofile.application.dtos.check_in import CheckInResult
    from workprofile.application.dtos.milestone import MilestoneAttainmentResult
    from workprofile.application.dtos.reference import ReferenceResult
    from workprofile.application.dtos.snapshot import SnapshotCreate, SnapshotResult
    from workprofile.application.dtos.subject import SubjectResult
    from workprofile.application.dtos.tenure import (
        AssignmentTenureResult,
        EmploymentTenureResult,
    )
    from workprofile.domain.entities.check_in import CheckInEntity
    from workprofile.domain.enums import CheckInScope


class ITransactionManager(Protocol):
    """Protocol for the unit-of-work boundary.

    Every write inside one atomic() block commits together or not at all.
    Store failures surface as PersistenceException; domain exceptions
    propagate unchanged after rollback.
    """

    def atomic(self, operation: str | None = None) -> AbstractAsyncContextManager[None]:
        """Open an atomic unit (savepoint). operation names the unit in errors."""


# Snapshot repository interface
class ISnapshotRepository(Protocol):
    """Protocol for profile snapshot persistence (append-only)."""

    async def create(self, data: SnapshotCreate) -> SnapshotResult:
        """Insert a snapshot; created_at is assigned by the store."""

    async def get_by_id(self, snapshot_id: str) -> SnapshotResult | None:
        """Return snapshot by ID."""

    async def find_previous(
        self, subject_id: str, company_id: str, before: datetime
    ) -> SnapshotResult | None:
        """Return the latest snapshot in scope with created_at strictly before `before`."""

    async def list_for_subject(
        self, subject_id: str, company_id: str, skip: int = 0, limit: int = 100
    ) -> list[SnapshotResult]:
        """Return snapshots for subject in company (newest first)."""

    async def set_effective_date(self, snapshot_id: str, effective_date: date) -> SnapshotResult:
        """Mark snapshot executed as of effective_date."""

    async def set_acknowledged_at(self, snapshot_id: str, at: datetime) -> SnapshotResult:
        """Record the subject's acknowledgement."""


# Tenure repository interfaces
class IAssignmentTenureRepository(Protocol):
    """Protocol for assignment tenure persistence."""

    async def get_active(
        self, subject_id: str, assignment_id: str
    ) -> AssignmentTenureResult | None:
        """Return the open tenure (ended_at is null) for subject and assignment."""

    async def create(
        self,
        subject_id: str,
        assignment_id: str,
        anticipated_energy_percentage: int,
        started_at: date,
    ) -> AssignmentTenureResult:
        """Insert an open tenure."""

    async def end(self, tenure_id: str, ended_at: date) -> AssignmentTenureResult:
        """Set ended_at on a tenure."""

    async def list_for_subject(
        self, subject_id: str, assignment_id: str | None = None
    ) -> list[AssignmentTenureResult]:
        """Return all tenures (open and ended) for subject, oldest first."""


class IEmploymentTenureRepository(Protocol):
    """Protocol for employment tenure persistence."""

    async def get_by_id(self, tenure_id: str) -> EmploymentTenureResult | None:
        """Return tenure by ID."""

    async def get_active(
        self, subject_id: str, company_id: str
    ) -> EmploymentTenureResult | None:
        """Return the open employment tenure for subject in company."""

    async def create(
        self,
        subject_id: str,
        company_id: str,
        position_id: str,
        employment_type: str,
        started_at: datetime,
        manager_id: str | None = None,
        seat_id: str | None = None,
        official_position_rating: int | None = None,
    ) -> EmploymentTenureResult:
        """Insert an open employment tenure."""

    async def end(self, tenure_id: str, ended_at: datetime) -> EmploymentTenureResult:
        """Set ended_at on a tenure."""

    async def update_seat(self, tenure_id: str, seat_id: str | None) -> EmploymentTenureResult:
        """Change seat_id on a tenure in place."""

    async def list_for_subject(
        self, subject_id: str, company_id: str | None = None
    ) -> list[EmploymentTenureResult]:
        """Return all employment tenures for subject, oldest first."""


# Check-in repository interface
class ICheckInRepository(Protocol):
    """Protocol for check-in persistence (all scopes share one table)."""

    async def get_by_id(self, check_in_id: str) -> CheckInResult | None:
        """Return check-in by ID."""

    async def get_for_update(self, check_in_id: str) -> CheckInResult | None:
        """Return check-in by ID, locking the row until the current unit ends."""

    async def get_open(
        self, subject_id: str, scope: CheckInScope, scope_id: str
    ) -> CheckInResult | None:
        """Return the open (not officially completed) check-in for subject and scope."""

    async def save(self, entity: CheckInEntity) -> CheckInResult:
        """Insert or update a check-in from its entity."""


# Milestone repository interface
class IMilestoneRepository(Protocol):
    """Protocol for milestone attainments (upsert/delete, no history)."""

    async def get(self, subject_id: str, ability_id: str) -> MilestoneAttainmentResult | None:
        """Return the attainment for subject and ability."""

    async def upsert(
        self,
        subject_id: str,
        ability_id: str,
        milestone_level: int,
        certifying_subject_id: str | None,
        attained_at: date | None,
    ) -> MilestoneAttainmentResult:
        """Create or replace the attainment for subject and ability."""

    async def delete(self, subject_id: str, ability_id: str) -> bool:
        """Remove the attainment; return True if a row was deleted."""


# Subject and reference repositories (read-mostly)
class ISubjectRepository(Protocol):
    """Protocol for subject lookups and the denormalized termination marker."""

    async def get_by_id(self, subject_id: str) -> SubjectResult | None:
        """Return subject by ID."""

    async def set_last_terminated_at(self, subject_id: str, at: datetime) -> SubjectResult:
        """Update the subject's last_terminated_at marker."""


class IReferenceRepository(Protocol):
    """Protocol for read-only catalog lookups (position, assignment, ability, aspiration)."""

    async def get(self, kind: str, reference_id: Any) -> ReferenceResult | None:
        """Return the catalog entry of the given kind, or None when it does not resolve."""
