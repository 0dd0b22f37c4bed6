"""ORM models. Importing this package registers every table on Base.metadata."""

from workprofile.infrastructure.persistence.models.check_in import CheckIn
from workprofile.infrastructure.persistence.models.milestone_attainment import (
    MilestoneAttainment,
)
from workprofile.infrastructure.persistence.models.reference import (
    CATALOG_MODELS,
    Ability,
    Aspiration,
    Assignment,
    Position,
)
from workprofile.infrastructure.persistence.models.snapshot import ProfileSnapshot
from workprofile.infrastructure.persistence.models.teammate import Teammate
from workprofile.infrastructure.persistence.models.tenure import (
    AssignmentTenure,
    EmploymentTenure,
)

__all__ = [
    "CATALOG_MODELS",
    "Ability",
    "Aspiration",
    "Assignment",
    "AssignmentTenure",
    "CheckIn",
    "EmploymentTenure",
    "MilestoneAttainment",
    "Position",
    "ProfileSnapshot",
    "Teammate",
]
