"""Pytest configuration and fixtures for workprofile.

Unit tests run against the in-memory fakes in tests/fakes.py. Repository
tests use db_session and are marked requires_db; they skip when no
DATABASE_URL is configured.
"""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from tests.fakes import (
    COMPANY_ID,
    MANAGER_ID,
    SUBJECT_ID,
    FakeAssignmentTenureRepository,
    FakeCheckInRepository,
    FakeEmploymentTenureRepository,
    FakeMilestoneRepository,
    FakeReferenceRepository,
    FakeSnapshotRepository,
    FakeStore,
    FakeSubjectRepository,
    FakeTransactionManager,
)
from workprofile.application.services.authorization_service import AuthorizationPolicy
from workprofile.application.use_cases.check_ins import CheckInCompletionService
from workprofile.application.use_cases.snapshots import (
    ChangeDetectionService,
    ChangeExecutionService,
    SnapshotService,
)
from workprofile.application.use_cases.tenures import (
    AssignmentTenureService,
    EmploymentTenureService,
)
from workprofile.infrastructure.persistence import database


@pytest.fixture
def store() -> FakeStore:
    store = FakeStore()
    store.add_subject(SUBJECT_ID, "Ada Lovelace", COMPANY_ID)
    store.add_subject(MANAGER_ID, "Grace Hopper", COMPANY_ID)
    return store


@pytest.fixture
def transactions(store: FakeStore) -> FakeTransactionManager:
    return FakeTransactionManager(store)


@pytest.fixture
def assignment_tenures(store, transactions) -> AssignmentTenureService:
    return AssignmentTenureService(FakeAssignmentTenureRepository(store), transactions)


@pytest.fixture
def employment_tenures(store, transactions) -> EmploymentTenureService:
    return EmploymentTenureService(
        FakeEmploymentTenureRepository(store), FakeSubjectRepository(store), transactions
    )


@pytest.fixture
def check_ins(store, transactions) -> CheckInCompletionService:
    return CheckInCompletionService(FakeCheckInRepository(store), transactions)


@pytest.fixture
def snapshots(store) -> SnapshotService:
    return SnapshotService(FakeSnapshotRepository(store), FakeSubjectRepository(store))


@pytest.fixture
def change_detection(snapshots) -> ChangeDetectionService:
    return ChangeDetectionService(snapshots)


def manager_predicate(actor, subject_id, field_group) -> bool:
    """MANAGER_ID manages SUBJECT_ID for every field group."""
    return actor.id == MANAGER_ID and subject_id == SUBJECT_ID


@pytest.fixture
def policy() -> AuthorizationPolicy:
    return AuthorizationPolicy(manager_predicate)


@pytest.fixture
def change_execution(
    store, transactions, assignment_tenures, employment_tenures, snapshots, policy
) -> ChangeExecutionService:
    return ChangeExecutionService(
        assignment_tenures=assignment_tenures,
        employment_tenures=employment_tenures,
        check_in_repo=FakeCheckInRepository(store),
        milestone_repo=FakeMilestoneRepository(store),
        reference_repo=FakeReferenceRepository(store),
        snapshot_service=snapshots,
        policy=policy,
        transactions=transactions,
    )


@pytest.fixture
async def db_session() -> AsyncSession:
    """Database session for repository/integration tests. Rolls back after test.

    Requires DATABASE_URL (postgresql+asyncpg://...) with migrations applied.
    Skips (pytest.skip) when it is not configured. Use @pytest.mark.requires_db
    to mark tests that need this fixture; run without DB via: pytest -m 'not requires_db'.
    """
    database._ensure_engine()
    if database.AsyncSessionLocal is None:
        pytest.skip(
            "Postgres not configured: set DATABASE_URL, then run: alembic upgrade head"
        )
    async with database.AsyncSessionLocal() as session:
        yield session
        await session.rollback()

