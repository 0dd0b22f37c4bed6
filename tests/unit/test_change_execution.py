"""Tests for ChangeExecutionService: applying snapshots under authorization gates."""

from datetime import UTC, date, datetime

import pytest

from tests.fakes import COMPANY_ID, MANAGER_ID, SUBJECT_ID, FakeStore
from workprofile.application.dtos.check_in import CheckInResult
from workprofile.application.dtos.execution import ReferenceFailure, SkippedField
from workprofile.application.dtos.milestone import MilestoneAttainmentResult
from workprofile.application.dtos.tenure import EmploymentTenureResult
from workprofile.application.use_cases.snapshots import ChangeExecutionService, SnapshotService
from workprofile.domain.enums import Capability, ChangeType, CheckInScope
from workprofile.domain.value_objects.core import Actor

MANAGER = Actor(MANAGER_ID)
EMPLOYEE = Actor(SUBJECT_ID)
EFFECTIVE = date(2025, 3, 1)
UNCOMPLETE = {"employee_completed_at": None}


@pytest.fixture(autouse=True)
def catalog(store: FakeStore) -> None:
    store.add_reference("assignment", "a1")
    store.add_reference("ability", "ab1")
    store.add_reference("aspiration", "asp1")
    store.add_reference("position", "p2")


@pytest.fixture
def active_tenure(store: FakeStore) -> EmploymentTenureResult:
    tenure = EmploymentTenureResult(
        id="et-initial",
        subject_id=SUBJECT_ID,
        company_id=COMPANY_ID,
        position_id="p1",
        employment_type="full_time",
        started_at=datetime(2024, 1, 1, tzinfo=UTC),
        manager_id=MANAGER_ID,
        seat_id="s1",
    )
    store.employment_tenures[tenure.id] = tenure
    return tenure


async def _snapshot(snapshots: SnapshotService, payload: dict):
    return await snapshots.create(
        SUBJECT_ID, COMPANY_ID, MANAGER_ID, ChangeType.BULK_UPDATE, payload, "Quarterly review"
    )


def _milestone(level) -> dict:
    return {"milestones": [{"ability_id": "ab1", "milestone_level": level}]}


def _check_ins(store: FakeStore, scope: CheckInScope, scope_id: str) -> list[CheckInResult]:
    return [
        c for c in store.check_ins.values() if c.scope == scope.value and c.scope_id == scope_id
    ]


async def test_manager_applies_tenure_and_check_in(
    change_execution: ChangeExecutionService, snapshots: SnapshotService, store: FakeStore
) -> None:
    snapshot = await _snapshot(
        snapshots,
        {
            "assignments": [
                {
                    "assignment_id": "a1",
                    "tenure": {"anticipated_energy_percentage": 50, "started_at": "2025-01-01"},
                    "manager_check_in": {
                        "manager_rating": "strong",
                        "manager_completed_at": "2025-03-01T10:00:00Z",
                    },
                }
            ]
        },
    )

    result = await change_execution.execute(snapshot, MANAGER, EFFECTIVE)

    assert result
    assert result.applied_units == 2
    assert result.skipped_fields == ()
    [tenure] = store.assignment_tenures.values()
    assert tenure.anticipated_energy_percentage == 50
    assert tenure.started_at == date(2025, 1, 1)
    [check_in] = _check_ins(store, CheckInScope.ASSIGNMENT, "a1")
    assert check_in.manager_rating == "strong"
    assert check_in.manager_completed_by_id == MANAGER_ID
    assert check_in.check_in_started_on == EFFECTIVE
    assert store.snapshots[snapshot.id].effective_date == EFFECTIVE


async def test_self_actor_cannot_write_manager_fields(
    change_execution: ChangeExecutionService, snapshots: SnapshotService, store: FakeStore
) -> None:
    snapshot = await _snapshot(
        snapshots,
        {
            "assignments": [
                {
                    "assignment_id": "a1",
                    "employee_check_in": {"employee_rating": "good", "personal_alignment": "high"},
                    "manager_check_in": {"manager_rating": "weak"},
                }
            ]
        },
    )

    result = await change_execution.execute(snapshot, EMPLOYEE)

    assert result.ok
    assert result.skipped_fields == (SkippedField("assignments", "a1", "manager_check_in"),)
    [check_in] = _check_ins(store, CheckInScope.ASSIGNMENT, "a1")
    assert check_in.employee_rating == "good"
    assert check_in.employee_personal_alignment == "high"
    assert check_in.manager_rating is None


async def test_existing_check_in_is_updated_not_duplicated(
    change_execution: ChangeExecutionService, snapshots: SnapshotService, store: FakeStore
) -> None:
    store.check_ins["ci1"] = CheckInResult(
        id="ci1",
        subject_id=SUBJECT_ID,
        scope=CheckInScope.ASSIGNMENT.value,
        scope_id="a1",
        employee_rating="good",
        employee_completed_at=datetime(2025, 2, 1, tzinfo=UTC),
    )
    snapshot = await _snapshot(
        snapshots,
        {"assignments": [{"assignment_id": "a1", "employee_check_in": UNCOMPLETE}]},
    )

    result = await change_execution.execute(snapshot, EMPLOYEE)

    assert result.ok
    assert list(store.check_ins) == ["ci1"]
    assert store.check_ins["ci1"].employee_completed_at is None
    assert store.check_ins["ci1"].employee_rating == "good"


async def test_finalization_in_one_snapshot(
    change_execution: ChangeExecutionService, snapshots: SnapshotService, store: FakeStore
) -> None:
    snapshot = await _snapshot(
        snapshots,
        {
            "aspirations": [
                {
                    "aspiration_id": "asp1",
                    "employee_check_in": {"employee_completed_at": "2025-02-27"},
                    "manager_check_in": {"manager_completed_at": "2025-02-28"},
                    "official_check_in": {
                        "official_rating": "exceeding",
                        "shared_notes": "Great quarter",
                        "official_completed_at": "2025-03-01",
                    },
                }
            ]
        },
    )

    result = await change_execution.execute(snapshot, MANAGER, EFFECTIVE)

    assert result.ok
    [check_in] = _check_ins(store, CheckInScope.ASPIRATION, "asp1")
    assert check_in.official_rating == "exceeding"
    assert check_in.shared_notes == "Great quarter"
    assert check_in.official_completed_at == datetime(2025, 3, 1, tzinfo=UTC)
    assert check_in.finalized_by_id == MANAGER_ID


async def test_finalization_without_both_sides_fails_execution(
    change_execution: ChangeExecutionService, snapshots: SnapshotService, store: FakeStore
) -> None:
    snapshot = await _snapshot(
        snapshots,
        {
            "aspirations": [
                {
                    "aspiration_id": "asp1",
                    "official_check_in": {"official_completed_at": "2025-03-01"},
                }
            ]
        },
    )

    result = await change_execution.execute(snapshot, MANAGER)

    assert not result
    assert "FinalizationNotAllowedException" in result.error
    assert store.check_ins == {}
    assert store.snapshots[snapshot.id].pending


async def test_unresolved_reference_does_not_stop_siblings(
    change_execution: ChangeExecutionService, snapshots: SnapshotService, store: FakeStore
) -> None:
    snapshot = await _snapshot(
        snapshots,
        {
            "assignments": [
                {"assignment_id": "gone", "tenure": {"anticipated_energy_percentage": 30}},
                {"assignment_id": "a1", "tenure": {"anticipated_energy_percentage": 40}},
            ]
        },
    )

    result = await change_execution.execute(snapshot, MANAGER, EFFECTIVE)

    assert result.ok
    assert result.reference_errors == (ReferenceFailure("assignments", "assignment", "gone"),)
    [tenure] = store.assignment_tenures.values()
    assert tenure.assignment_id == "a1"
    assert tenure.started_at == EFFECTIVE


class TestMilestones:
    async def test_upsert_defaults_certifier_and_date(
        self, change_execution: ChangeExecutionService, snapshots: SnapshotService, store: FakeStore
    ) -> None:
        snapshot = await _snapshot(snapshots, _milestone("3"))

        result = await change_execution.execute(snapshot, MANAGER, EFFECTIVE)

        assert result.ok
        milestone = store.milestones[(SUBJECT_ID, "ab1")]
        assert milestone.milestone_level == 3
        assert milestone.certifying_subject_id == MANAGER_ID
        assert milestone.attained_at == EFFECTIVE

    async def test_level_zero_removes_attainment(
        self, change_execution: ChangeExecutionService, snapshots: SnapshotService, store: FakeStore
    ) -> None:
        store.milestones[(SUBJECT_ID, "ab1")] = MilestoneAttainmentResult(
            id="ms0", subject_id=SUBJECT_ID, ability_id="ab1", milestone_level=2
        )
        snapshot = await _snapshot(snapshots, _milestone(0))

        assert (await change_execution.execute(snapshot, MANAGER)).ok
        assert store.milestones == {}

    async def test_unauthorized_actor_is_skipped(
        self, change_execution: ChangeExecutionService, snapshots: SnapshotService, store: FakeStore
    ) -> None:
        snapshot = await _snapshot(snapshots, _milestone(4))

        result = await change_execution.execute(snapshot, Actor("stranger"))

        assert result.ok
        assert result.skipped_fields == (SkippedField("milestones", "ab1", "milestone"),)
        assert store.milestones == {}

    async def test_admin_override_bypasses_predicate(
        self, change_execution: ChangeExecutionService, snapshots: SnapshotService, store: FakeStore
    ) -> None:
        snapshot = await _snapshot(snapshots, _milestone(4))
        admin = Actor("admin", frozenset({Capability.ADMIN_OVERRIDE}))

        result = await change_execution.execute(snapshot, admin)

        assert result.ok
        assert store.milestones[(SUBJECT_ID, "ab1")].certifying_subject_id == "admin"


class TestEmployment:
    async def test_seat_change_and_position_check_in(
        self,
        change_execution: ChangeExecutionService,
        snapshots: SnapshotService,
        store: FakeStore,
        active_tenure,
    ) -> None:
        snapshot = await _snapshot(
            snapshots,
            {"employment": {"seat_id": "s2", "employee_check_in": {"employee_rating": "ok"}}},
        )

        result = await change_execution.execute(snapshot, MANAGER)

        assert result.ok
        assert store.employment_tenures[active_tenure.id].seat_id == "s2"
        [check_in] = _check_ins(store, CheckInScope.POSITION, active_tenure.id)
        assert check_in.employee_rating == "ok"

    async def test_termination_stamps_subject(
        self,
        change_execution: ChangeExecutionService,
        snapshots: SnapshotService,
        store: FakeStore,
        active_tenure,
    ) -> None:
        snapshot = await _snapshot(
            snapshots, {"employment": {"position_id": "p2", "termination_date": "2025-02-28"}}
        )

        result = await change_execution.execute(snapshot, MANAGER)

        terminated = datetime(2025, 2, 28, tzinfo=UTC)
        assert result.ok
        assert len(store.employment_tenures) == 1
        assert store.employment_tenures[active_tenure.id].ended_at == terminated
        assert store.subjects[SUBJECT_ID].last_terminated_at == terminated

    async def test_termination_keeps_position_check_in(
        self,
        change_execution: ChangeExecutionService,
        snapshots: SnapshotService,
        store: FakeStore,
        active_tenure,
    ) -> None:
        snapshot = await _snapshot(
            snapshots,
            {
                "employment": {
                    "termination_date": "2025-02-28",
                    "manager_check_in": {"manager_rating": "solid"},
                }
            },
        )

        result = await change_execution.execute(snapshot, MANAGER)

        assert result.ok
        assert result.applied_units == 2
        assert result.skipped_fields == ()
        [check_in] = _check_ins(store, CheckInScope.POSITION, active_tenure.id)
        assert check_in.manager_rating == "solid"
        assert store.employment_tenures[active_tenure.id].ended_at == datetime(
            2025, 2, 28, tzinfo=UTC
        )

    async def test_unknown_position_is_recorded(
        self, change_execution: ChangeExecutionService, snapshots: SnapshotService, active_tenure
    ) -> None:
        snapshot = await _snapshot(snapshots, {"employment": {"position_id": "p404"}})

        result = await change_execution.execute(snapshot, MANAGER)

        assert result.ok
        assert result.reference_errors == (ReferenceFailure("employment", "position", "p404"),)


async def test_store_failure_reports_not_ok_and_keeps_snapshot_pending(
    change_execution: ChangeExecutionService, snapshots: SnapshotService, store: FakeStore
) -> None:
    snapshot = await _snapshot(
        snapshots,
        {"assignments": [{"assignment_id": "a1", "tenure": {"anticipated_energy_percentage": 40}}]},
    )
    store.fail_on = {"create_assignment_tenure"}

    result = await change_execution.execute(snapshot, MANAGER)

    assert not result.ok
    assert result.applied_units == 0
    assert "PersistenceException" in result.error
    assert store.assignment_tenures == {}
    assert store.snapshots[snapshot.id].pending
