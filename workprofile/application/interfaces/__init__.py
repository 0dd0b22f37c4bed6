"""Application interfaces (ports)."""

from workprofile.application.interfaces.repositories import (
    IAssignmentTenureRepository,
    ICheckInRepository,
    IEmploymentTenureRepository,
    IMilestoneRepository,
    IReferenceRepository,
    ISnapshotRepository,
    ISubjectRepository,
    ITransactionManager,
)
from workprofile.application.interfaces.services import (
    AuthorizationPredicate,
    IAuthorizationPolicy,
)

__all__ = [
    "AuthorizationPredicate",
    "IAssignmentTenureRepository",
    "IAuthorizationPolicy",
    "ICheckInRepository",
    "IEmploymentTenureRepository",
    "IMilestoneRepository",
    "IReferenceRepository",
    "ISnapshotRepository",
    "ISubjectRepository",
    "ITransactionManager",
]
