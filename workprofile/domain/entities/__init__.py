"""Domain entities (business logic, no persistence)."""

from workprofile.domain.entities.check_in import CheckInEntity, CompletionOutcome
from workprofile.domain.entities.tenure import (
    AssignmentTenureEntity,
    EmploymentTenureEntity,
)

__all__ = [
    "AssignmentTenureEntity",
    "CheckInEntity",
    "CompletionOutcome",
    "EmploymentTenureEntity",
]
