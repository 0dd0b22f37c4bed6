"""Repository implementations of the application ports."""

from workprofile.infrastructure.persistence.repositories.check_in_repo import CheckInRepository
from workprofile.infrastructure.persistence.repositories.milestone_repo import (
    MilestoneRepository,
)
from workprofile.infrastructure.persistence.repositories.reference_repo import (
    ReferenceRepository,
)
from workprofile.infrastructure.persistence.repositories.snapshot_repo import SnapshotRepository
from workprofile.infrastructure.persistence.repositories.subject_repo import SubjectRepository
from workprofile.infrastructure.persistence.repositories.tenure_repo import (
    AssignmentTenureRepository,
    EmploymentTenureRepository,
)

__all__ = [
    "AssignmentTenureRepository",
    "CheckInRepository",
    "EmploymentTenureRepository",
    "MilestoneRepository",
    "ReferenceRepository",
    "SnapshotRepository",
    "SubjectRepository",
]
