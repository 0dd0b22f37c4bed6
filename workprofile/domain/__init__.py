"""Domain layer: entities, value objects, enums, and exceptions.

No dependencies on infrastructure. Used by application and
infrastructure layers.
"""

from workprofile.domain.entities import (
    AssignmentTenureEntity,
    CheckInEntity,
    CompletionOutcome,
    EmploymentTenureEntity,
)
from workprofile.domain.enums import (
    Capability,
    ChangeDomain,
    ChangeType,
    CheckInScope,
    CompletionState,
    DisplayMode,
    FieldGroup,
    TenureAction,
    ViewerRole,
)
from workprofile.domain.exceptions import (
    ActiveTenureNotFoundException,
    FinalizationNotAllowedException,
    PersistenceException,
    ReferenceNotFoundException,
    ValidationException,
    WorkProfileException,
)
from workprofile.domain.value_objects import Actor, EnergyPercentage, MilestoneLevel

__all__ = [
    # Entities
    "AssignmentTenureEntity",
    "CheckInEntity",
    "CompletionOutcome",
    "EmploymentTenureEntity",
    # Enums
    "Capability",
    "ChangeDomain",
    "ChangeType",
    "CheckInScope",
    "CompletionState",
    "DisplayMode",
    "FieldGroup",
    "TenureAction",
    "ViewerRole",
    # Exceptions
    "ActiveTenureNotFoundException",
    "FinalizationNotAllowedException",
    "PersistenceException",
    "ReferenceNotFoundException",
    "ValidationException",
    "WorkProfileException",
    # Value objects
    "Actor",
    "EnergyPercentage",
    "MilestoneLevel",
]
