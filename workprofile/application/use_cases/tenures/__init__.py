"""Tenure lifecycle use cases."""

from workprofile.application.use_cases.tenures.assignment_tenure_operations import (
    AssignmentTenureService,
)
from workprofile.application.use_cases.tenures.employment_tenure_operations import (
    EmploymentTenureService,
)

__all__ = ["AssignmentTenureService", "EmploymentTenureService"]
