"""Assignment tenure lifecycle: one open energy allocation per subject and assignment."""

from __future__ import annotations

from dataclasses import asdict
from datetime import date
from typing import TYPE_CHECKING

from workprofile.application.dtos.tenure import AssignmentTenureResult, TenureUpdateResult
from workprofile.domain.entities.tenure import AssignmentTenureEntity
from workprofile.domain.enums import TenureAction
from workprofile.domain.exceptions import ValidationException
from workprofile.domain.value_objects.core import Actor, EnergyPercentage
from workprofile.shared.telemetry.logging import get_logger
from workprofile.shared.telemetry.tracing import traced
from workprofile.shared.utils.datetime import coerce_date

if TYPE_CHECKING:
    from workprofile.application.interfaces.repositories import (
        IAssignmentTenureRepository,
        ITransactionManager,
    )

logger = get_logger(__name__)


def _validated_inputs(
    subject_id: str | None,
    assignment_id: str | None,
    anticipated_energy_percentage: object,
    started_at: object,
) -> tuple[EnergyPercentage, date]:
    if not subject_id:
        raise ValidationException("Subject cannot be nil", field="subject_id")
    if not assignment_id:
        raise ValidationException("Assignment cannot be nil", field="assignment_id")
    try:
        energy = EnergyPercentage(anticipated_energy_percentage)  # type: ignore[arg-type]
    except ValueError as e:
        raise ValidationException(
            "Anticipated energy must be between 0 and 100",
            field="anticipated_energy_percentage",
        ) from e
    try:
        start = coerce_date(started_at)
    except ValueError as e:
        raise ValidationException("Started at must be a valid date", field="started_at") from e
    return energy, start


def _ensure_can_end(tenure: AssignmentTenureResult, on: date) -> None:
    """Raise ValidationException if ending on `on` would precede the tenure start."""
    AssignmentTenureEntity(**asdict(tenure)).end(on)


class AssignmentTenureService:
    """Creates, replaces and ends assignment tenures.

    Policies (evaluated against the open tenure, inside one atomic unit):
    - energy 0: end the open tenure on started_at; no-op when none is open.
    - different energy: end the open tenure on started_at and open a new
      one on the same date (same-day transitions are allowed).
    - same energy: no-op.
    - no open tenure and energy > 0: open one.
    """

    def __init__(
        self,
        tenure_repo: IAssignmentTenureRepository,
        transactions: ITransactionManager,
    ) -> None:
        self.tenure_repo = tenure_repo
        self.transactions = transactions

    @traced("assignment_tenure.update")
    async def update_tenure(
        self,
        subject_id: str,
        assignment_id: str,
        anticipated_energy_percentage: object,
        started_at: object,
        actor: Actor | None = None,
    ) -> TenureUpdateResult:
        """Apply an energy allocation for subject on assignment.

        Args:
            subject_id: Subject whose allocation changes.
            assignment_id: Assignment being allocated.
            anticipated_energy_percentage: 0-100; 0 ends the allocation.
            started_at: Effective date (date, datetime, YYYY-MM-DD or YYYYMMDD).
            actor: Who is making the change (logged only).

        Returns:
            TenureUpdateResult naming the applied policy.

        Raises:
            ValidationException: Bad percentage, unparseable date or missing ids.
            PersistenceException: The store rejected a write; nothing was applied.
        """
        energy, start = _validated_inputs(
            subject_id, assignment_id, anticipated_energy_percentage, started_at
        )
        async with self.transactions.atomic("update_assignment_tenure"):
            active = await self.tenure_repo.get_active(subject_id, assignment_id)

            if energy.is_zero:
                if active is None:
                    return TenureUpdateResult(action=TenureAction.UNCHANGED)
                _ensure_can_end(active, start)
                ended = await self.tenure_repo.end(active.id, start)
                result = TenureUpdateResult(action=TenureAction.ENDED, ended_tenure=ended)
            elif active is not None and active.anticipated_energy_percentage == energy.value:
                return TenureUpdateResult(action=TenureAction.UNCHANGED, tenure=active)
            elif active is not None:
                _ensure_can_end(active, start)
                ended = await self.tenure_repo.end(active.id, start)
                created = await self.tenure_repo.create(
                    subject_id, assignment_id, energy.value, start
                )
                result = TenureUpdateResult(
                    action=TenureAction.REPLACED, tenure=created, ended_tenure=ended
                )
            else:
                created = await self.tenure_repo.create(
                    subject_id, assignment_id, energy.value, start
                )
                result = TenureUpdateResult(action=TenureAction.CREATED, tenure=created)

        logger.info(
            "Assignment tenure %s for subject %s on %s (energy=%s, actor=%s)",
            result.action.value,
            subject_id,
            assignment_id,
            energy.value,
            actor.id if actor else None,
        )
        return result

    async def list_tenures(
        self, subject_id: str, assignment_id: str | None = None
    ) -> list[AssignmentTenureResult]:
        """Return the tenure history for subject (oldest first)."""
        return await self.tenure_repo.list_for_subject(subject_id, assignment_id)
