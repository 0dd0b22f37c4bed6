"""Tests for EmploymentTenureService: position changes, seat moves and termination."""

from datetime import UTC, datetime

import pytest

from tests.fakes import COMPANY_ID, SUBJECT_ID, FakeStore
from workprofile.application.dtos.tenure import EmploymentTenureResult, EmploymentTenureUpdate
from workprofile.application.use_cases.tenures import EmploymentTenureService
from workprofile.domain.enums import TenureAction
from workprofile.domain.exceptions import (
    ActiveTenureNotFoundException,
    PersistenceException,
    ReferenceNotFoundException,
    ValidationException,
)

STARTED = datetime(2024, 1, 1, tzinfo=UTC)
NOW = datetime(2025, 6, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def active_tenure(store: FakeStore) -> EmploymentTenureResult:
    tenure = EmploymentTenureResult(
        id="et-initial",
        subject_id=SUBJECT_ID,
        company_id=COMPANY_ID,
        position_id="p1",
        employment_type="full_time",
        started_at=STARTED,
        manager_id="mgr1",
        seat_id="s1",
        official_position_rating=4,
    )
    store.employment_tenures[tenure.id] = tenure
    return tenure


def _open(store: FakeStore) -> list[EmploymentTenureResult]:
    return [t for t in store.employment_tenures.values() if t.ended_at is None]


async def test_seat_only_change_updates_in_place(
    employment_tenures: EmploymentTenureService, store: FakeStore, active_tenure
) -> None:
    result = await employment_tenures.update_tenure(
        SUBJECT_ID, COMPANY_ID, EmploymentTenureUpdate(seat_id="s2"), at=NOW
    )

    assert result.action is TenureAction.SEAT_UPDATED
    assert result.tenure.id == active_tenure.id
    assert result.tenure.seat_id == "s2"
    assert len(store.employment_tenures) == 1


async def test_blank_seat_clears_it(
    employment_tenures: EmploymentTenureService, active_tenure
) -> None:
    result = await employment_tenures.update_tenure(
        SUBJECT_ID, COMPANY_ID, EmploymentTenureUpdate(seat_id="")
    )

    assert result.action is TenureAction.SEAT_UPDATED
    assert result.tenure.seat_id is None


async def test_position_change_replaces_and_copies_attributes(
    employment_tenures: EmploymentTenureService, store: FakeStore, active_tenure
) -> None:
    result = await employment_tenures.update_tenure(
        SUBJECT_ID, COMPANY_ID, EmploymentTenureUpdate(position_id="p2"), at=NOW
    )

    assert result.action is TenureAction.REPLACED
    assert result.ended_tenure.ended_at == NOW
    successor = result.tenure
    assert successor.started_at == NOW
    assert successor.position_id == "p2"
    assert successor.manager_id == "mgr1"
    assert successor.seat_id == "s1"
    assert successor.employment_type == "full_time"
    assert successor.official_position_rating == 4
    assert _open(store) == [successor]


async def test_manager_and_seat_change_replaces_with_new_seat(
    employment_tenures: EmploymentTenureService, active_tenure
) -> None:
    result = await employment_tenures.update_tenure(
        SUBJECT_ID,
        COMPANY_ID,
        EmploymentTenureUpdate(manager_id="mgr2", seat_id="s9"),
        at=NOW,
    )

    assert result.action is TenureAction.REPLACED
    assert result.tenure.manager_id == "mgr2"
    assert result.tenure.seat_id == "s9"


async def test_termination_takes_precedence(
    employment_tenures: EmploymentTenureService, store: FakeStore, active_tenure
) -> None:
    result = await employment_tenures.update_tenure(
        SUBJECT_ID,
        COMPANY_ID,
        EmploymentTenureUpdate(position_id="p2", seat_id="s2", termination_date="2025-05-31"),
        at=NOW,
    )

    assert result.action is TenureAction.ENDED
    assert result.ended_tenure.ended_at == datetime(2025, 5, 31, tzinfo=UTC)
    assert result.ended_tenure.position_id == "p1"
    assert result.ended_tenure.seat_id == "s1"
    assert _open(store) == []
    assert len(store.employment_tenures) == 1


async def test_unchanged_values_are_noop(
    employment_tenures: EmploymentTenureService, store: FakeStore, active_tenure
) -> None:
    result = await employment_tenures.update_tenure(
        SUBJECT_ID,
        COMPANY_ID,
        EmploymentTenureUpdate(position_id="p1", manager_id="mgr1", employment_type=""),
    )

    assert result.action is TenureAction.UNCHANGED
    assert store.employment_tenures == {active_tenure.id: active_tenure}


async def test_no_active_tenure_raises(employment_tenures: EmploymentTenureService) -> None:
    with pytest.raises(ActiveTenureNotFoundException):
        await employment_tenures.update_tenure(
            SUBJECT_ID, COMPANY_ID, EmploymentTenureUpdate(seat_id="s2")
        )


async def test_repeated_termination_is_noop(
    employment_tenures: EmploymentTenureService, active_tenure
) -> None:
    params = EmploymentTenureUpdate(termination_date="2025-05-31")
    await employment_tenures.update_tenure(SUBJECT_ID, COMPANY_ID, params)

    again = await employment_tenures.update_tenure(SUBJECT_ID, COMPANY_ID, params)

    assert again.action is TenureAction.UNCHANGED


async def test_unparseable_termination_rejected(
    employment_tenures: EmploymentTenureService, active_tenure
) -> None:
    with pytest.raises(ValidationException, match="Termination date"):
        await employment_tenures.update_tenure(
            SUBJECT_ID, COMPANY_ID, EmploymentTenureUpdate(termination_date="soon")
        )


async def test_changed_fields_ignores_unsupplied(active_tenure) -> None:
    assert EmploymentTenureService.changed_fields(active_tenure, EmploymentTenureUpdate()) == set()
    assert EmploymentTenureService.changed_fields(
        active_tenure, EmploymentTenureUpdate(manager_id=None, seat_id="s1")
    ) == {"manager_id"}


class TestTerminateEmployment:
    async def test_ends_tenure_and_stamps_subject(
        self, employment_tenures: EmploymentTenureService, store: FakeStore, active_tenure
    ) -> None:
        result = await employment_tenures.terminate_employment(
            SUBJECT_ID, active_tenure.id, "20250531"
        )

        terminated = datetime(2025, 5, 31, tzinfo=UTC)
        assert result.action is TenureAction.TERMINATED
        assert store.employment_tenures[active_tenure.id].ended_at == terminated
        assert store.subjects[SUBJECT_ID].last_terminated_at == terminated

    async def test_repeat_is_noop(
        self, employment_tenures: EmploymentTenureService, active_tenure
    ) -> None:
        await employment_tenures.terminate_employment(SUBJECT_ID, active_tenure.id, "2025-05-31")

        again = await employment_tenures.terminate_employment(
            SUBJECT_ID, active_tenure.id, "2025-05-31"
        )

        assert again.action is TenureAction.UNCHANGED

    async def test_failed_subject_update_rolls_back_tenure_end(
        self, employment_tenures: EmploymentTenureService, store: FakeStore, active_tenure
    ) -> None:
        store.fail_on = {"set_last_terminated_at"}

        with pytest.raises(PersistenceException):
            await employment_tenures.terminate_employment(
                SUBJECT_ID, active_tenure.id, "2025-05-31"
            )

        assert store.employment_tenures[active_tenure.id].ended_at is None
        assert store.subjects[SUBJECT_ID].last_terminated_at is None

    async def test_unknown_subject_or_tenure(
        self, employment_tenures: EmploymentTenureService, active_tenure
    ) -> None:
        with pytest.raises(ReferenceNotFoundException):
            await employment_tenures.terminate_employment("ghost", active_tenure.id, "2025-05-31")
        with pytest.raises(ReferenceNotFoundException):
            await employment_tenures.terminate_employment(SUBJECT_ID, "missing", "2025-05-31")

    async def test_tenure_of_other_subject_rejected(
        self, employment_tenures: EmploymentTenureService, active_tenure
    ) -> None:
        with pytest.raises(ValidationException, match="does not belong"):
            await employment_tenures.terminate_employment("mgr1", active_tenure.id, "2025-05-31")

    async def test_termination_before_start_rejected(
        self, employment_tenures: EmploymentTenureService, store: FakeStore, active_tenure
    ) -> None:
        with pytest.raises(ValidationException, match="cannot precede"):
            await employment_tenures.terminate_employment(
                SUBJECT_ID, active_tenure.id, "2023-12-31"
            )
        assert store.employment_tenures[active_tenure.id].ended_at is None
