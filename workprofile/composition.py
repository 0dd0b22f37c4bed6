"""Composition root: wire repositories, transaction manager and use cases on one session."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from workprofile.application.interfaces.services import AuthorizationPredicate
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
from workprofile.infrastructure.persistence.database import SqlAlchemyTransactionManager
from workprofile.infrastructure.persistence.repositories import (
    AssignmentTenureRepository,
    CheckInRepository,
    EmploymentTenureRepository,
    MilestoneRepository,
    ReferenceRepository,
    SnapshotRepository,
    SubjectRepository,
)


@dataclass(frozen=True)
class WorkProfileServices:
    """Every use case bound to one session (one request or job)."""

    assignment_tenures: AssignmentTenureService
    employment_tenures: EmploymentTenureService
    check_ins: CheckInCompletionService
    snapshots: SnapshotService
    change_detection: ChangeDetectionService
    change_execution: ChangeExecutionService


def build_services(
    db: AsyncSession, predicate: AuthorizationPredicate | None = None
) -> WorkProfileServices:
    """Build the use cases over SQLAlchemy repositories sharing db.

    predicate answers "may actor write field_group for subject"; without it
    only the subject's own employee fields and ADMIN_OVERRIDE actors pass.
    """
    transactions = SqlAlchemyTransactionManager(db)
    subject_repo = SubjectRepository(db)
    check_in_repo = CheckInRepository(db)

    assignment_tenures = AssignmentTenureService(AssignmentTenureRepository(db), transactions)
    employment_tenures = EmploymentTenureService(
        EmploymentTenureRepository(db), subject_repo, transactions
    )
    snapshots = SnapshotService(SnapshotRepository(db), subject_repo)
    return WorkProfileServices(
        assignment_tenures=assignment_tenures,
        employment_tenures=employment_tenures,
        check_ins=CheckInCompletionService(check_in_repo, transactions),
        snapshots=snapshots,
        change_detection=ChangeDetectionService(snapshots),
        change_execution=ChangeExecutionService(
            assignment_tenures=assignment_tenures,
            employment_tenures=employment_tenures,
            check_in_repo=check_in_repo,
            milestone_repo=MilestoneRepository(db),
            reference_repo=ReferenceRepository(db),
            snapshot_service=snapshots,
            policy=AuthorizationPolicy(predicate),
            transactions=transactions,
        ),
    )
