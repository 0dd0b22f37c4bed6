"""DTOs for snapshot execution results."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SkippedField:
    """A proposed field group left untouched because the actor lacked authorization."""

    domain: str
    entry_id: str | None
    field_group: str


@dataclass(frozen=True)
class ReferenceFailure:
    """An entry whose id did not resolve; siblings were still processed."""

    domain: str
    resource_type: str
    resource_id: str


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of executing a snapshot.

    ok is False when an unexpected error stopped execution; error carries a
    loggable description. Units applied before the error stay committed.
    """

    ok: bool
    error: str | None = None
    skipped_fields: tuple[SkippedField, ...] = ()
    reference_errors: tuple[ReferenceFailure, ...] = ()
    applied_units: int = 0

    def __bool__(self) -> bool:
        return self.ok
