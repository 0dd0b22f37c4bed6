"""Application DTOs (no ORM dependency)."""

from workprofile.application.dtos.change_report import (
    ChangeCounts,
    ChangeReport,
    DomainChanges,
    EntryChanges,
    FieldChange,
)
from workprofile.application.dtos.check_in import CheckInResult, CompletionResult
from workprofile.application.dtos.execution import (
    ExecutionResult,
    ReferenceFailure,
    SkippedField,
)
from workprofile.application.dtos.milestone import MilestoneAttainmentResult
from workprofile.application.dtos.reference import ReferenceResult
from workprofile.application.dtos.snapshot import SnapshotCreate, SnapshotResult
from workprofile.application.dtos.subject import SubjectResult
from workprofile.application.dtos.tenure import (
    UNSET,
    AssignmentTenureResult,
    EmploymentTenureResult,
    EmploymentTenureUpdate,
    TenureUpdateResult,
)

__all__ = [
    "UNSET",
    "AssignmentTenureResult",
    "ChangeCounts",
    "ChangeReport",
    "CheckInResult",
    "CompletionResult",
    "DomainChanges",
    "EmploymentTenureResult",
    "EmploymentTenureUpdate",
    "EntryChanges",
    "ExecutionResult",
    "FieldChange",
    "MilestoneAttainmentResult",
    "ReferenceFailure",
    "ReferenceResult",
    "SkippedField",
    "SnapshotCreate",
    "SnapshotResult",
    "SubjectResult",
    "TenureUpdateResult",
]
