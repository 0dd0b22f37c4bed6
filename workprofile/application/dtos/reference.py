"""DTOs for catalog reference data (positions, assignments, abilities, aspirations)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ReferenceResult:
    """Catalog entry looked up by id."""

    id: str
    kind: str
    company_id: str
    title: str
