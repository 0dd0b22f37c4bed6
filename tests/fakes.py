"""In-memory repositories and a rollback-capable transaction manager for unit tests.

All fakes share one FakeStore. FakeTransactionManager deep-copies the store
when an atomic unit opens and restores it when the unit raises, so tests
can assert all-or-nothing behaviour without a database.
"""

import copy
from contextlib import asynccontextmanager
from dataclasses import asdict, dataclass, field, replace
from datetime import UTC, date, datetime, timedelta

from workprofile.application.dtos.check_in import CheckInResult
from workprofile.application.dtos.milestone import MilestoneAttainmentResult
from workprofile.application.dtos.reference import ReferenceResult
from workprofile.application.dtos.snapshot import SnapshotCreate, SnapshotResult
from workprofile.application.dtos.subject import SubjectResult
from workprofile.application.dtos.tenure import AssignmentTenureResult, EmploymentTenureResult
from workprofile.domain.entities.check_in import CheckInEntity
from workprofile.domain.enums import CheckInScope
from workprofile.domain.exceptions import (
    PersistenceException,
    ReferenceNotFoundException,
    WorkProfileException,
)

SUBJECT_ID = "emp1"
MANAGER_ID = "mgr1"
COMPANY_ID = "co1"
SNAPSHOT_CLOCK_START = datetime(2025, 1, 1, 9, 0, tzinfo=UTC)


class StoreFailure(RuntimeError):
    """Simulated store error (constraint violation, lost connection)."""


@dataclass
class FakeStore:
    snapshots: dict[str, SnapshotResult] = field(default_factory=dict)
    assignment_tenures: dict[str, AssignmentTenureResult] = field(default_factory=dict)
    employment_tenures: dict[str, EmploymentTenureResult] = field(default_factory=dict)
    check_ins: dict[str, CheckInResult] = field(default_factory=dict)
    milestones: dict[tuple[str, str], MilestoneAttainmentResult] = field(default_factory=dict)
    subjects: dict[str, SubjectResult] = field(default_factory=dict)
    references: dict[tuple[str, str], ReferenceResult] = field(default_factory=dict)
    # Repository method names that raise StoreFailure when called.
    fail_on: set[str] = field(default_factory=set)
    sequence: int = 0

    def next_id(self, prefix: str) -> str:
        self.sequence += 1
        return f"{prefix}{self.sequence}"

    def check(self, method: str) -> None:
        if method in self.fail_on:
            raise StoreFailure(f"{method} failed")

    def add_subject(
        self, subject_id: str, display_name: str = "Ada Lovelace", company_id: str = COMPANY_ID
    ) -> SubjectResult:
        subject = SubjectResult(id=subject_id, company_id=company_id, display_name=display_name)
        self.subjects[subject_id] = subject
        return subject

    def add_reference(self, kind: str, reference_id: str, company_id: str = COMPANY_ID) -> None:
        self.references[(kind, reference_id)] = ReferenceResult(
            id=reference_id, kind=kind, company_id=company_id, title=f"{kind} {reference_id}"
        )

    def _restore(self, saved: "FakeStore") -> None:
        fail_on = self.fail_on
        self.__dict__.update(saved.__dict__)
        self.fail_on = fail_on


class FakeTransactionManager:
    """Snapshot the store on enter, restore it when the unit raises."""

    def __init__(self, store: FakeStore) -> None:
        self.store = store
        self.units: list[str | None] = []
        self.rollbacks: list[str | None] = []

    @asynccontextmanager
    async def atomic(self, operation: str | None = None):
        saved = copy.deepcopy(self.store)
        self.units.append(operation)
        try:
            yield
        except WorkProfileException:
            self.store._restore(saved)
            self.rollbacks.append(operation)
            raise
        except StoreFailure as e:
            self.store._restore(saved)
            self.rollbacks.append(operation)
            raise PersistenceException(str(e), operation) from e


class FakeSnapshotRepository:
    def __init__(self, store: FakeStore) -> None:
        self.store = store

    async def create(self, data: SnapshotCreate) -> SnapshotResult:
        self.store.check("create_snapshot")
        snapshot_id = self.store.next_id("snap")
        snapshot = SnapshotResult(
            id=snapshot_id,
            created_at=SNAPSHOT_CLOCK_START + timedelta(minutes=self.store.sequence),
            **asdict(data),
        )
        self.store.snapshots[snapshot_id] = snapshot
        return snapshot

    async def get_by_id(self, snapshot_id: str) -> SnapshotResult | None:
        return self.store.snapshots.get(snapshot_id)

    async def find_previous(
        self, subject_id: str, company_id: str, before: datetime
    ) -> SnapshotResult | None:
        earlier = [
            s
            for s in self.store.snapshots.values()
            if s.subject_id == subject_id and s.company_id == company_id and s.created_at < before
        ]
        return max(earlier, key=lambda s: s.created_at, default=None)

    async def list_for_subject(
        self, subject_id: str, company_id: str, skip: int = 0, limit: int = 100
    ) -> list[SnapshotResult]:
        rows = sorted(
            (
                s
                for s in self.store.snapshots.values()
                if s.subject_id == subject_id and s.company_id == company_id
            ),
            key=lambda s: s.created_at,
            reverse=True,
        )
        return rows[skip : skip + limit]

    async def set_effective_date(self, snapshot_id: str, effective_date: date) -> SnapshotResult:
        updated = replace(self.store.snapshots[snapshot_id], effective_date=effective_date)
        self.store.snapshots[snapshot_id] = updated
        return updated

    async def set_acknowledged_at(self, snapshot_id: str, at: datetime) -> SnapshotResult:
        updated = replace(self.store.snapshots[snapshot_id], acknowledged_at=at)
        self.store.snapshots[snapshot_id] = updated
        return updated


class FakeAssignmentTenureRepository:
    def __init__(self, store: FakeStore) -> None:
        self.store = store

    async def get_active(
        self, subject_id: str, assignment_id: str
    ) -> AssignmentTenureResult | None:
        for tenure in self.store.assignment_tenures.values():
            if (
                tenure.subject_id == subject_id
                and tenure.assignment_id == assignment_id
                and tenure.ended_at is None
            ):
                return tenure
        return None

    async def create(
        self,
        subject_id: str,
        assignment_id: str,
        anticipated_energy_percentage: int,
        started_at: date,
    ) -> AssignmentTenureResult:
        self.store.check("create_assignment_tenure")
        tenure = AssignmentTenureResult(
            id=self.store.next_id("at"),
            subject_id=subject_id,
            assignment_id=assignment_id,
            anticipated_energy_percentage=anticipated_energy_percentage,
            started_at=started_at,
        )
        self.store.assignment_tenures[tenure.id] = tenure
        return tenure

    async def end(self, tenure_id: str, ended_at: date) -> AssignmentTenureResult:
        self.store.check("end_assignment_tenure")
        updated = replace(self.store.assignment_tenures[tenure_id], ended_at=ended_at)
        self.store.assignment_tenures[tenure_id] = updated
        return updated

    async def list_for_subject(
        self, subject_id: str, assignment_id: str | None = None
    ) -> list[AssignmentTenureResult]:
        return [
            t
            for t in self.store.assignment_tenures.values()
            if t.subject_id == subject_id and assignment_id in (None, t.assignment_id)
        ]


class FakeEmploymentTenureRepository:
    def __init__(self, store: FakeStore) -> None:
        self.store = store

    async def get_by_id(self, tenure_id: str) -> EmploymentTenureResult | None:
        return self.store.employment_tenures.get(tenure_id)

    async def get_active(self, subject_id: str, company_id: str) -> EmploymentTenureResult | None:
        for tenure in self.store.employment_tenures.values():
            if (
                tenure.subject_id == subject_id
                and tenure.company_id == company_id
                and tenure.ended_at is None
            ):
                return tenure
        return None

    async def create(self, **fields) -> EmploymentTenureResult:
        self.store.check("create_employment_tenure")
        tenure = EmploymentTenureResult(id=self.store.next_id("et"), **fields)
        self.store.employment_tenures[tenure.id] = tenure
        return tenure

    async def end(self, tenure_id: str, ended_at: datetime) -> EmploymentTenureResult:
        self.store.check("end_employment_tenure")
        updated = replace(self.store.employment_tenures[tenure_id], ended_at=ended_at)
        self.store.employment_tenures[tenure_id] = updated
        return updated

    async def update_seat(self, tenure_id: str, seat_id: str | None) -> EmploymentTenureResult:
        updated = replace(self.store.employment_tenures[tenure_id], seat_id=seat_id)
        self.store.employment_tenures[tenure_id] = updated
        return updated

    async def list_for_subject(
        self, subject_id: str, company_id: str | None = None
    ) -> list[EmploymentTenureResult]:
        return [
            t
            for t in self.store.employment_tenures.values()
            if t.subject_id == subject_id and company_id in (None, t.company_id)
        ]


class FakeCheckInRepository:
    def __init__(self, store: FakeStore) -> None:
        self.store = store

    async def get_by_id(self, check_in_id: str) -> CheckInResult | None:
        return self.store.check_ins.get(check_in_id)

    async def get_for_update(self, check_in_id: str) -> CheckInResult | None:
        return self.store.check_ins.get(check_in_id)

    async def get_open(
        self, subject_id: str, scope: CheckInScope, scope_id: str
    ) -> CheckInResult | None:
        for check_in in self.store.check_ins.values():
            if (
                check_in.subject_id == subject_id
                and check_in.scope == CheckInScope(scope).value
                and check_in.scope_id == scope_id
                and check_in.official_completed_at is None
            ):
                return check_in
        return None

    async def save(self, entity: CheckInEntity) -> CheckInResult:
        self.store.check("save_check_in")
        data = asdict(entity)
        data["scope"] = entity.scope.value
        result = CheckInResult(**data)
        self.store.check_ins[result.id] = result
        return result


class FakeMilestoneRepository:
    def __init__(self, store: FakeStore) -> None:
        self.store = store

    async def get(self, subject_id: str, ability_id: str) -> MilestoneAttainmentResult | None:
        return self.store.milestones.get((subject_id, ability_id))

    async def upsert(
        self,
        subject_id: str,
        ability_id: str,
        milestone_level: int,
        certifying_subject_id: str | None,
        attained_at: date | None,
    ) -> MilestoneAttainmentResult:
        existing = self.store.milestones.get((subject_id, ability_id))
        result = MilestoneAttainmentResult(
            id=existing.id if existing else self.store.next_id("ms"),
            subject_id=subject_id,
            ability_id=ability_id,
            milestone_level=milestone_level,
            certifying_subject_id=certifying_subject_id,
            attained_at=attained_at,
        )
        self.store.milestones[(subject_id, ability_id)] = result
        return result

    async def delete(self, subject_id: str, ability_id: str) -> bool:
        return self.store.milestones.pop((subject_id, ability_id), None) is not None


class FakeSubjectRepository:
    def __init__(self, store: FakeStore) -> None:
        self.store = store

    async def get_by_id(self, subject_id: str) -> SubjectResult | None:
        return self.store.subjects.get(subject_id)

    async def set_last_terminated_at(self, subject_id: str, at: datetime) -> SubjectResult:
        self.store.check("set_last_terminated_at")
        if subject_id not in self.store.subjects:
            raise ReferenceNotFoundException("subject", subject_id)
        updated = replace(self.store.subjects[subject_id], last_terminated_at=at)
        self.store.subjects[subject_id] = updated
        return updated


class FakeReferenceRepository:
    def __init__(self, store: FakeStore) -> None:
        self.store = store

    async def get(self, kind: str, reference_id) -> ReferenceResult | None:
        return self.store.references.get((kind, str(reference_id)))
