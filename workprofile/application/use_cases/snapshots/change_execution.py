"""Change execution: apply a snapshot's proposed state to live records.

Each tenure update, check-in upsert and milestone write is its own atomic
unit. The engine does not wrap a whole snapshot in one transaction, so a
failure part-way leaves earlier units applied; the result reports how
many units were applied before it stopped.
"""

from __future__ import annotations

from collections.abc import Awaitable
from dataclasses import dataclass, field
from datetime import date
from typing import TYPE_CHECKING

from workprofile.application.dtos.execution import (
    ExecutionResult,
    ReferenceFailure,
    SkippedField,
)
from workprofile.application.dtos.snapshot import SnapshotResult
from workprofile.application.dtos.tenure import EmploymentTenureUpdate
from workprofile.application.use_cases.check_ins.check_in_completion import to_entity
from workprofile.domain.entities.check_in import CheckInEntity
from workprofile.domain.enums import ChangeDomain, CheckInScope, FieldGroup
from workprofile.domain.exceptions import ReferenceNotFoundException, ValidationException
from workprofile.domain.value_objects.core import Actor, MilestoneLevel
from workprofile.schemas.proposed_state import (
    AspirationProposal,
    AssignmentProposal,
    CheckInSections,
    EmploymentProposal,
    MilestoneProposal,
    ProposedState,
)
from workprofile.shared.telemetry.logging import get_logger
from workprofile.shared.telemetry.tracing import (
    add_span_attributes,
    add_span_event,
    set_span_error,
    traced,
)
from workprofile.shared.utils.datetime import utc_today
from workprofile.shared.utils.generators import generate_cuid

if TYPE_CHECKING:
    from workprofile.application.interfaces.repositories import (
        ICheckInRepository,
        IMilestoneRepository,
        IReferenceRepository,
        ITransactionManager,
    )
    from workprofile.application.interfaces.services import IAuthorizationPolicy
    from workprofile.application.use_cases.snapshots.snapshot_operations import SnapshotService
    from workprofile.application.use_cases.tenures.assignment_tenure_operations import (
        AssignmentTenureService,
    )
    from workprofile.application.use_cases.tenures.employment_tenure_operations import (
        EmploymentTenureService,
    )

logger = get_logger(__name__)

_SECTION_GROUPS = (
    ("employee_check_in", FieldGroup.EMPLOYEE_CHECK_IN),
    ("manager_check_in", FieldGroup.MANAGER_CHECK_IN),
    ("official_check_in", FieldGroup.OFFICIAL_CHECK_IN),
)
_EMPLOYEE_ATTRS = {
    "actual_energy_percentage": "actual_energy_percentage",
    "employee_rating": "employee_rating",
    "personal_alignment": "employee_personal_alignment",
    "employee_private_notes": "employee_private_notes",
}
_MANAGER_ATTRS = ("manager_rating", "manager_private_notes")
_OFFICIAL_ATTRS = ("official_rating", "shared_notes")


@dataclass
class _Run:
    """Mutable bookkeeping for one execute() call."""

    snapshot: SnapshotResult
    actor: Actor
    effective_date: date
    skipped: list[SkippedField] = field(default_factory=list)
    reference_errors: list[ReferenceFailure] = field(default_factory=list)
    applied: int = 0

    @property
    def subject_id(self) -> str:
        return self.snapshot.subject_id

    def result(self, ok: bool, error: str | None = None) -> ExecutionResult:
        return ExecutionResult(
            ok=ok,
            error=error,
            skipped_fields=tuple(self.skipped),
            reference_errors=tuple(self.reference_errors),
            applied_units=self.applied,
        )


class ChangeExecutionService:
    """Applies a snapshot through the tenure lifecycle and the check-in state machine.

    Manager, official and milestone writes are gated by the authorization
    policy; a denied group is skipped (recorded in skipped_fields) and the
    existing values are left untouched. Unresolved references are recorded
    per entry and do not stop sibling entries.
    """

    def __init__(
        self,
        assignment_tenures: AssignmentTenureService,
        employment_tenures: EmploymentTenureService,
        check_in_repo: ICheckInRepository,
        milestone_repo: IMilestoneRepository,
        reference_repo: IReferenceRepository,
        snapshot_service: SnapshotService,
        policy: IAuthorizationPolicy,
        transactions: ITransactionManager,
    ) -> None:
        self.assignment_tenures = assignment_tenures
        self.employment_tenures = employment_tenures
        self.check_in_repo = check_in_repo
        self.milestone_repo = milestone_repo
        self.reference_repo = reference_repo
        self.snapshot_service = snapshot_service
        self.policy = policy
        self.transactions = transactions

    @traced("snapshot.execute")
    async def execute(
        self,
        snapshot: SnapshotResult,
        actor: Actor,
        effective_date: date | None = None,
    ) -> ExecutionResult:
        """Apply snapshot's proposed state on behalf of actor.

        On success the snapshot is marked executed with effective_date
        (default: the snapshot's own effective_date, else today). Any
        unexpected error is logged and reported as ok=False.
        """
        run = _Run(
            snapshot=snapshot,
            actor=actor,
            effective_date=effective_date or snapshot.effective_date or utc_today(),
        )
        add_span_attributes(snapshot_id=snapshot.id, subject_id=snapshot.subject_id)
        try:
            state = ProposedState.from_payload(snapshot.proposed_state)
            if state.employment is not None:
                await self._guarded(
                    run,
                    ChangeDomain.EMPLOYMENT,
                    None,
                    self._apply_employment(run, state.employment),
                )
            for assignment in state.assignments:
                await self._guarded(
                    run,
                    ChangeDomain.ASSIGNMENTS,
                    assignment.assignment_id,
                    self._apply_assignment(run, assignment),
                )
            for milestone in state.milestones:
                await self._guarded(
                    run,
                    ChangeDomain.MILESTONES,
                    milestone.ability_id,
                    self._apply_milestone(run, milestone),
                )
            for aspiration in state.aspirations:
                await self._guarded(
                    run,
                    ChangeDomain.ASPIRATIONS,
                    aspiration.aspiration_id,
                    self._apply_aspiration(run, aspiration),
                )
            await self.snapshot_service.mark_executed(snapshot.id, run.effective_date)
        except Exception as e:
            logger.exception(
                "Snapshot %s execution failed for subject %s after %d unit(s)",
                snapshot.id,
                snapshot.subject_id,
                run.applied,
            )
            set_span_error(e)
            return run.result(ok=False, error=f"{type(e).__name__}: {e}")

        logger.info(
            "Snapshot %s executed: %d unit(s), %d skipped, %d unresolved",
            snapshot.id,
            run.applied,
            len(run.skipped),
            len(run.reference_errors),
        )
        return run.result(ok=True)

    async def _guarded(
        self, run: _Run, domain: ChangeDomain, entry_id: str | None, apply: Awaitable[None]
    ) -> None:
        """Await one entry; an unresolved reference is recorded instead of aborting."""
        try:
            await apply
        except ReferenceNotFoundException as e:
            logger.warning(
                "Snapshot %s: %s entry %s skipped: %s",
                run.snapshot.id,
                domain.value,
                entry_id,
                e.message,
            )
            run.reference_errors.append(
                ReferenceFailure(
                    domain=domain.value,
                    resource_type=e.details["resource_type"],
                    resource_id=e.details["resource_id"],
                )
            )

    async def _require(self, kind: str, reference_id: str) -> None:
        if await self.reference_repo.get(kind, reference_id) is None:
            raise ReferenceNotFoundException(kind, reference_id)

    def _allowed(
        self, run: _Run, group: FieldGroup, domain: ChangeDomain, entry_id: str | None
    ) -> bool:
        if self.policy.is_allowed(run.actor, run.subject_id, group):
            return True
        logger.info(
            "Skipping %s for subject %s (%s %s): actor %s not authorized",
            group.value,
            run.subject_id,
            domain.value,
            entry_id,
            run.actor.id,
        )
        run.skipped.append(SkippedField(domain.value, entry_id, group.value))
        add_span_event(
            "authorization_skip", {"field_group": group.value, "domain": domain.value}
        )
        return False

    # Employment

    async def _apply_employment(self, run: _Run, employment: EmploymentProposal) -> None:
        company_id = run.snapshot.company_id
        if employment.provided("position_id") and employment.position_id:
            await self._require("position", employment.position_id)

        if employment.provided("termination_date") and employment.termination_date:
            active = await self.employment_tenures.get_active(run.subject_id, company_id)
            if self._has_check_in(employment):
                # Check-ins belong to the tenure being closed, so they land first.
                if active is None:
                    raise ReferenceNotFoundException("employment_tenure", run.subject_id)
                await self._apply_check_in(
                    run, CheckInScope.POSITION, active.id, employment, ChangeDomain.EMPLOYMENT, None
                )
            if active is not None:
                await self.employment_tenures.terminate_employment(
                    run.subject_id, active.id, employment.termination_date, actor=run.actor
                )
            else:
                await self.employment_tenures.update_tenure(
                    run.subject_id,
                    company_id,
                    EmploymentTenureUpdate(termination_date=employment.termination_date),
                    actor=run.actor,
                )
            run.applied += 1
            return

        supplied = {
            name: getattr(employment, name)
            for name in ("position_id", "manager_id", "seat_id", "employment_type")
            if employment.provided(name)
        }
        if supplied:
            await self.employment_tenures.update_tenure(
                run.subject_id, company_id, EmploymentTenureUpdate(**supplied), actor=run.actor
            )
            run.applied += 1

        if self._has_check_in(employment):
            active = await self.employment_tenures.get_active(run.subject_id, company_id)
            if active is None:
                raise ReferenceNotFoundException("employment_tenure", run.subject_id)
            await self._apply_check_in(
                run, CheckInScope.POSITION, active.id, employment, ChangeDomain.EMPLOYMENT, None
            )

    # Assignments

    async def _apply_assignment(self, run: _Run, assignment: AssignmentProposal) -> None:
        assignment_id = assignment.assignment_id
        await self._require("assignment", assignment_id)
        tenure = assignment.tenure
        if tenure is not None and tenure.anticipated_energy_percentage is not None:
            await self.assignment_tenures.update_tenure(
                run.subject_id,
                assignment_id,
                tenure.anticipated_energy_percentage,
                tenure.started_at or run.effective_date,
                actor=run.actor,
            )
            run.applied += 1
        await self._apply_check_in(
            run,
            CheckInScope.ASSIGNMENT,
            assignment_id,
            assignment,
            ChangeDomain.ASSIGNMENTS,
            assignment_id,
        )

    # Milestones

    async def _apply_milestone(self, run: _Run, milestone: MilestoneProposal) -> None:
        ability_id = milestone.ability_id
        if not self._allowed(run, FieldGroup.MILESTONE, ChangeDomain.MILESTONES, ability_id):
            return
        await self._require("ability", ability_id)
        try:
            level = MilestoneLevel.parse(milestone.milestone_level)
        except ValueError as e:
            raise ValidationException(str(e), field="milestone_level") from e

        async with self.transactions.atomic("apply_milestone"):
            if level.is_removal:
                await self.milestone_repo.delete(run.subject_id, ability_id)
            else:
                await self.milestone_repo.upsert(
                    run.subject_id,
                    ability_id,
                    level.value,
                    milestone.certifying_subject_id or run.actor.id,
                    milestone.attained_at or run.effective_date,
                )
        run.applied += 1

    # Aspirations

    async def _apply_aspiration(self, run: _Run, aspiration: AspirationProposal) -> None:
        aspiration_id = aspiration.aspiration_id
        await self._require("aspiration", aspiration_id)
        await self._apply_check_in(
            run,
            CheckInScope.ASPIRATION,
            aspiration_id,
            aspiration,
            ChangeDomain.ASPIRATIONS,
            aspiration_id,
        )

    # Check-ins

    @staticmethod
    def _has_check_in(sections: CheckInSections) -> bool:
        return any(getattr(sections, name) is not None for name, _ in _SECTION_GROUPS)

    async def _apply_check_in(
        self,
        run: _Run,
        scope: CheckInScope,
        scope_id: str,
        sections: CheckInSections,
        domain: ChangeDomain,
        entry_id: str | None,
    ) -> None:
        """Upsert the open check-in for scope with every authorized section."""
        allowed = {
            name
            for name, group in _SECTION_GROUPS
            if getattr(sections, name) is not None and self._allowed(run, group, domain, entry_id)
        }
        if not allowed:
            return

        async with self.transactions.atomic(f"apply_{scope.value}_check_in"):
            existing = await self.check_in_repo.get_open(run.subject_id, scope, scope_id)
            entity = (
                to_entity(existing)
                if existing is not None
                else CheckInEntity(
                    id=generate_cuid(),
                    subject_id=run.subject_id,
                    scope=scope,
                    scope_id=scope_id,
                    check_in_started_on=run.effective_date,
                )
            )
            if "employee_check_in" in allowed:
                self._apply_employee_side(entity, sections)
            if "manager_check_in" in allowed:
                self._apply_manager_side(entity, sections, run.actor)
            if "official_check_in" in allowed:
                self._apply_official(entity, sections, run.actor)
            entity.validate()
            await self.check_in_repo.save(entity)
        run.applied += 1

    @staticmethod
    def _apply_employee_side(entity: CheckInEntity, sections: CheckInSections) -> None:
        proposal = sections.employee_check_in
        for attr, target in _EMPLOYEE_ATTRS.items():
            if proposal.provided(attr):
                setattr(entity, target, getattr(proposal, attr))
        if proposal.provided("employee_completed_at"):
            if proposal.employee_completed_at is None:
                entity.uncomplete_employee_side()
            else:
                entity.complete_employee_side(proposal.employee_completed_at)

    @staticmethod
    def _apply_manager_side(entity: CheckInEntity, sections: CheckInSections, actor: Actor) -> None:
        proposal = sections.manager_check_in
        for attr in _MANAGER_ATTRS:
            if proposal.provided(attr):
                setattr(entity, attr, getattr(proposal, attr))
        if proposal.provided("manager_completed_at"):
            if proposal.manager_completed_at is None:
                entity.uncomplete_manager_side()
            else:
                entity.complete_manager_side(
                    proposal.manager_completed_by_id or actor.id, proposal.manager_completed_at
                )

    @staticmethod
    def _apply_official(entity: CheckInEntity, sections: CheckInSections, actor: Actor) -> None:
        proposal = sections.official_check_in
        completing = proposal.provided("official_completed_at")
        if completing and proposal.official_completed_at is None:
            entity.official_completed_at = None
            entity.finalized_by_id = None
        for attr in _OFFICIAL_ATTRS:
            if proposal.provided(attr):
                setattr(entity, attr, getattr(proposal, attr))
        if completing and proposal.official_completed_at is not None:
            entity.finalize(
                proposal.finalized_by_id or actor.id,
                proposal.official_completed_at,
            )
