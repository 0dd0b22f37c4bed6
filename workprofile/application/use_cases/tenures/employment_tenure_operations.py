"""Employment tenure lifecycle: position changes, seat moves and termination."""

from __future__ import annotations

from dataclasses import asdict
from datetime import datetime
from typing import TYPE_CHECKING

from workprofile.application.dtos.tenure import (
    EmploymentTenureResult,
    EmploymentTenureUpdate,
    TenureUpdateResult,
)
from workprofile.domain.entities.tenure import EmploymentTenureEntity
from workprofile.domain.enums import TenureAction
from workprofile.domain.exceptions import (
    ActiveTenureNotFoundException,
    ReferenceNotFoundException,
    ValidationException,
)
from workprofile.domain.value_objects.core import Actor
from workprofile.shared.telemetry.logging import get_logger
from workprofile.shared.telemetry.tracing import traced
from workprofile.shared.utils.datetime import coerce_datetime, utc_now

if TYPE_CHECKING:
    from workprofile.application.interfaces.repositories import (
        IEmploymentTenureRepository,
        ISubjectRepository,
        ITransactionManager,
    )

logger = get_logger(__name__)


def _blank(value: object) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _clearable_id(value: object) -> str | None:
    """'' and None both mean clear."""
    return None if _blank(value) else str(value)


def _parse_termination(value: object) -> datetime:
    try:
        return coerce_datetime(value)
    except ValueError as e:
        raise ValidationException(
            f"Termination date must be a valid date, got {value!r}", field="termination_date"
        ) from e


def _ensure_can_end(tenure: EmploymentTenureResult, at: datetime) -> None:
    EmploymentTenureEntity(**asdict(tenure)).end(at)


class EmploymentTenureService:
    """Applies employment changes to the open employment tenure of a subject.

    Exactly one policy applies per call, in priority order:
    1. termination_date supplied: end the open tenure on that date.
    2. manager, position or employment_type changed: end the open tenure
       now and open a new one copying every unspecified attribute.
    3. only seat changed: update the open tenure's seat in place.
    4. nothing changed: no-op.
    """

    def __init__(
        self,
        tenure_repo: IEmploymentTenureRepository,
        subject_repo: ISubjectRepository,
        transactions: ITransactionManager,
    ) -> None:
        self.tenure_repo = tenure_repo
        self.subject_repo = subject_repo
        self.transactions = transactions

    @staticmethod
    def changed_fields(
        current: EmploymentTenureResult, params: EmploymentTenureUpdate
    ) -> set[str]:
        """Return which of manager_id, position_id, employment_type, seat_id differ from current."""
        changed: set[str] = set()
        if params.supplied("manager_id") and _clearable_id(params.manager_id) != current.manager_id:
            changed.add("manager_id")
        if (
            params.supplied("position_id")
            and not _blank(params.position_id)
            and str(params.position_id) != current.position_id
        ):
            changed.add("position_id")
        if (
            params.supplied("employment_type")
            and not _blank(params.employment_type)
            and str(params.employment_type) != current.employment_type
        ):
            changed.add("employment_type")
        if params.supplied("seat_id") and _clearable_id(params.seat_id) != current.seat_id:
            changed.add("seat_id")
        return changed

    @traced("employment_tenure.update")
    async def update_tenure(
        self,
        subject_id: str,
        company_id: str,
        params: EmploymentTenureUpdate,
        actor: Actor | None = None,
        at: datetime | None = None,
    ) -> TenureUpdateResult:
        """Apply params to the subject's open employment tenure in company.

        Args:
            subject_id: Subject whose employment changes.
            company_id: Company the tenure belongs to.
            params: Supplied fields (see EmploymentTenureUpdate).
            actor: Who is making the change (logged only).
            at: Change time for policy 2; defaults to now.

        Raises:
            ValidationException: Unparseable termination date or an end before the start.
            ActiveTenureNotFoundException: Subject has no open tenure in company.
            PersistenceException: The store rejected a write; nothing was applied.
        """
        if not subject_id:
            raise ValidationException("Subject cannot be nil", field="subject_id")
        terminating = params.supplied("termination_date") and not _blank(params.termination_date)
        termination_at = _parse_termination(params.termination_date) if terminating else None
        now = at or utc_now()

        async with self.transactions.atomic("update_employment_tenure"):
            current = await self.tenure_repo.get_active(subject_id, company_id)
            if current is None:
                previous = await self._already_ended_at(subject_id, company_id, termination_at)
                if previous is not None:
                    return TenureUpdateResult(action=TenureAction.UNCHANGED, tenure=previous)
                raise ActiveTenureNotFoundException(subject_id, company_id)

            changed = self.changed_fields(current, params)
            if termination_at is not None:
                _ensure_can_end(current, termination_at)
                ended = await self.tenure_repo.end(current.id, termination_at)
                result = TenureUpdateResult(action=TenureAction.ENDED, ended_tenure=ended)
            elif changed & {"manager_id", "position_id", "employment_type"}:
                _ensure_can_end(current, now)
                ended = await self.tenure_repo.end(current.id, now)
                created = await self.tenure_repo.create(**self._successor(current, params, now))
                result = TenureUpdateResult(
                    action=TenureAction.REPLACED, tenure=created, ended_tenure=ended
                )
            elif "seat_id" in changed:
                updated = await self.tenure_repo.update_seat(
                    current.id, _clearable_id(params.seat_id)
                )
                result = TenureUpdateResult(action=TenureAction.SEAT_UPDATED, tenure=updated)
            else:
                return TenureUpdateResult(action=TenureAction.UNCHANGED, tenure=current)

        logger.info(
            "Employment tenure %s for subject %s in %s (changed=%s, actor=%s)",
            result.action.value,
            subject_id,
            company_id,
            sorted(changed),
            actor.id if actor else None,
        )
        return result

    @traced("employment_tenure.terminate")
    async def terminate_employment(
        self,
        subject_id: str,
        tenure_id: str,
        termination_date: object,
        actor: Actor | None = None,
    ) -> TenureUpdateResult:
        """End a tenure and stamp the subject's last_terminated_at, in one atomic unit.

        Repeating the call with the same date is a no-op.

        Raises:
            ValidationException: Unparseable date, tenure of another subject, or end before start.
            ReferenceNotFoundException: Subject or tenure does not exist.
            PersistenceException: The store rejected a write; neither update was applied.
        """
        terminated_at = _parse_termination(termination_date)
        async with self.transactions.atomic("terminate_employment"):
            subject = await self.subject_repo.get_by_id(subject_id)
            if subject is None:
                raise ReferenceNotFoundException("subject", subject_id)
            tenure = await self.tenure_repo.get_by_id(tenure_id)
            if tenure is None:
                raise ReferenceNotFoundException("employment_tenure", tenure_id)
            if tenure.subject_id != subject_id:
                raise ValidationException(
                    "Employment tenure does not belong to subject", field="tenure_id"
                )
            if tenure.ended_at == terminated_at and subject.last_terminated_at == terminated_at:
                return TenureUpdateResult(action=TenureAction.UNCHANGED, tenure=tenure)

            _ensure_can_end(tenure, terminated_at)
            ended = await self.tenure_repo.end(tenure.id, terminated_at)
            await self.subject_repo.set_last_terminated_at(subject_id, terminated_at)

        logger.info(
            "Employment terminated for subject %s on %s (actor=%s)",
            subject_id,
            terminated_at.date().isoformat(),
            actor.id if actor else None,
        )
        return TenureUpdateResult(action=TenureAction.TERMINATED, ended_tenure=ended)

    async def get_active(self, subject_id: str, company_id: str) -> EmploymentTenureResult | None:
        """Return the open employment tenure for subject in company."""
        return await self.tenure_repo.get_active(subject_id, company_id)

    async def list_tenures(
        self, subject_id: str, company_id: str | None = None
    ) -> list[EmploymentTenureResult]:
        """Return the employment history for subject (oldest first)."""
        return await self.tenure_repo.list_for_subject(subject_id, company_id)

    async def _already_ended_at(
        self, subject_id: str, company_id: str, termination_at: datetime | None
    ) -> EmploymentTenureResult | None:
        """Latest tenure if it already ended exactly at termination_at (repeat termination)."""
        if termination_at is None:
            return None
        history = await self.tenure_repo.list_for_subject(subject_id, company_id)
        if history and history[-1].ended_at == termination_at:
            return history[-1]
        return None

    @staticmethod
    def _successor(
        current: EmploymentTenureResult, params: EmploymentTenureUpdate, now: datetime
    ) -> dict:
        position_id = (
            str(params.position_id)
            if params.supplied("position_id") and not _blank(params.position_id)
            else current.position_id
        )
        employment_type = (
            str(params.employment_type)
            if params.supplied("employment_type") and not _blank(params.employment_type)
            else current.employment_type
        )
        return {
            "subject_id": current.subject_id,
            "company_id": current.company_id,
            "position_id": position_id,
            "employment_type": employment_type,
            "started_at": now,
            "manager_id": (
                _clearable_id(params.manager_id)
                if params.supplied("manager_id")
                else current.manager_id
            ),
            "seat_id": (
                _clearable_id(params.seat_id) if params.supplied("seat_id") else current.seat_id
            ),
            "official_position_rating": current.official_position_rating,
        }
