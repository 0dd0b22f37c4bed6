"""Check-in use cases."""

from workprofile.application.use_cases.check_ins.check_in_completion import (
    CheckInCompletionService,
    to_entity,
)

__all__ = ["CheckInCompletionService", "to_entity"]
