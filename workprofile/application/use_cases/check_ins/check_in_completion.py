"""Check-in completion: employee/manager sides, corrections and finalization."""

from __future__ import annotations

from dataclasses import asdict
from datetime import date, datetime
from typing import TYPE_CHECKING

from workprofile.application.dtos.check_in import CheckInResult, CompletionResult
from workprofile.domain.entities.check_in import CheckInEntity
from workprofile.domain.enums import CheckInScope, DisplayMode, ViewerRole
from workprofile.domain.exceptions import ReferenceNotFoundException
from workprofile.domain.value_objects.core import Actor
from workprofile.shared.telemetry.logging import get_logger
from workprofile.shared.telemetry.tracing import traced
from workprofile.shared.utils.datetime import utc_now
from workprofile.shared.utils.generators import generate_cuid

if TYPE_CHECKING:
    from workprofile.application.interfaces.repositories import (
        ICheckInRepository,
        ITransactionManager,
    )

logger = get_logger(__name__)


def to_entity(result: CheckInResult) -> CheckInEntity:
    """Build the domain entity from a check-in read-model."""
    data = asdict(result)
    data["scope"] = CheckInScope(data["scope"])
    return CheckInEntity(**data)


class CheckInCompletionService:
    """Drives the check-in completion state machine against the store.

    Every transition re-reads the row under lock inside its own atomic
    unit, so racing employee and manager completions converge on
    both_complete in either order.
    """

    def __init__(
        self,
        check_in_repo: ICheckInRepository,
        transactions: ITransactionManager,
    ) -> None:
        self.check_in_repo = check_in_repo
        self.transactions = transactions

    async def open_check_in(
        self,
        subject_id: str,
        scope: CheckInScope,
        scope_id: str,
        started_on: date | None = None,
    ) -> CheckInResult:
        """Return the open check-in for subject and scope, creating an empty one if needed."""
        async with self.transactions.atomic("open_check_in"):
            existing = await self.check_in_repo.get_open(subject_id, scope, scope_id)
            if existing is not None:
                return existing
            entity = CheckInEntity(
                id=generate_cuid(),
                subject_id=subject_id,
                scope=scope,
                scope_id=scope_id,
                check_in_started_on=started_on or utc_now().date(),
            )
            return await self.check_in_repo.save(entity)

    @traced("check_in.complete_employee_side")
    async def complete_employee_side(
        self, check_in_id: str, at: datetime | None = None
    ) -> CompletionResult:
        """Mark the employee side complete.

        Returns completion_detected=False (and writes nothing) when both
        sides were already complete before the call.
        """
        async with self.transactions.atomic("complete_employee_side"):
            entity = await self._load_locked(check_in_id)
            outcome = entity.complete_employee_side(at or utc_now())
            saved = await self._save_if(outcome.completion_detected, entity, check_in_id)
        logger.info(
            "Employee side completion on check-in %s: detected=%s state=%s",
            check_in_id,
            outcome.completion_detected,
            outcome.state.value,
        )
        return CompletionResult(saved, outcome.state, outcome.completion_detected)

    @traced("check_in.complete_manager_side")
    async def complete_manager_side(
        self, check_in_id: str, actor: Actor, at: datetime | None = None
    ) -> CompletionResult:
        """Mark the manager side complete by actor. Same no-op guard as the employee side."""
        async with self.transactions.atomic("complete_manager_side"):
            entity = await self._load_locked(check_in_id)
            outcome = entity.complete_manager_side(actor.id, at or utc_now())
            saved = await self._save_if(outcome.completion_detected, entity, check_in_id)
        logger.info(
            "Manager side completion on check-in %s by %s: detected=%s state=%s",
            check_in_id,
            actor.id,
            outcome.completion_detected,
            outcome.state.value,
        )
        return CompletionResult(saved, outcome.state, outcome.completion_detected)

    async def uncomplete_employee_side(self, check_in_id: str) -> CompletionResult:
        """Clear the employee completion (before finalization only)."""
        async with self.transactions.atomic("uncomplete_employee_side"):
            entity = await self._load_locked(check_in_id)
            state = entity.uncomplete_employee_side()
            saved = await self.check_in_repo.save(entity)
        return CompletionResult(saved, state)

    async def uncomplete_manager_side(self, check_in_id: str) -> CompletionResult:
        """Clear the manager completion and the completing actor (before finalization only)."""
        async with self.transactions.atomic("uncomplete_manager_side"):
            entity = await self._load_locked(check_in_id)
            state = entity.uncomplete_manager_side()
            saved = await self.check_in_repo.save(entity)
        return CompletionResult(saved, state)

    @traced("check_in.finalize")
    async def finalize(
        self,
        check_in_id: str,
        actor: Actor,
        official_rating: str | None = None,
        shared_notes: str | None = None,
        at: datetime | None = None,
    ) -> CompletionResult:
        """Officially complete a check-in whose two sides are complete.

        Authorization is the caller's responsibility (official_check_in field group).

        Raises:
            ReferenceNotFoundException: Check-in does not exist.
            FinalizationNotAllowedException: Either side is still open.
        """
        async with self.transactions.atomic("finalize_check_in"):
            entity = await self._load_locked(check_in_id)
            finalized = entity.finalize(actor.id, at or utc_now(), official_rating, shared_notes)
            saved = await self._save_if(finalized, entity, check_in_id)
        if finalized:
            logger.info("Check-in %s finalized by %s", check_in_id, actor.id)
        return CompletionResult(saved, entity.completion_state, finalized)

    async def display_modes(
        self, check_in_id: str, viewer: ViewerRole
    ) -> tuple[DisplayMode, DisplayMode]:
        """Return (own side mode, other participant mode) for a viewer."""
        result = await self.check_in_repo.get_by_id(check_in_id)
        if result is None:
            raise ReferenceNotFoundException("check_in", check_in_id)
        entity = to_entity(result)
        return entity.viewer_display_mode(viewer), entity.other_participant_display_mode(viewer)

    async def _load_locked(self, check_in_id: str) -> CheckInEntity:
        result = await self.check_in_repo.get_for_update(check_in_id)
        if result is None:
            raise ReferenceNotFoundException("check_in", check_in_id)
        return to_entity(result)

    async def _save_if(
        self, changed: bool, entity: CheckInEntity, check_in_id: str
    ) -> CheckInResult:
        if changed:
            return await self.check_in_repo.save(entity)
        result = await self.check_in_repo.get_by_id(check_in_id)
        if result is None:
            raise ReferenceNotFoundException("check_in", check_in_id)
        return result
