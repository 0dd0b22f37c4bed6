"""DTOs for milestone attainments."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class MilestoneAttainmentResult:
    """Milestone attainment read-model (one per subject and ability)."""

    id: str
    subject_id: str
    ability_id: str
    milestone_level: int
    certifying_subject_id: str | None = None
    attained_at: date | None = None
