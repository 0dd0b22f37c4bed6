"""Tests for the ProposedState payload schema."""

from datetime import UTC, date, datetime

import pytest

from workprofile.domain.exceptions import ValidationException
from workprofile.schemas.proposed_state import ProposedState


def test_absent_and_null_fields_are_distinguished() -> None:
    state = ProposedState.from_payload({"employment": {"seat_id": None, "position_id": 12}})

    employment = state.employment
    assert employment.provided("seat_id")
    assert employment.seat_id is None
    assert not employment.provided("manager_id")
    assert employment.position_id == "12"


def test_dates_accept_compact_and_iso_forms() -> None:
    state = ProposedState.from_payload(
        {
            "assignments": [
                {
                    "assignment_id": "a1",
                    "tenure": {"anticipated_energy_percentage": 50, "started_at": "20250115"},
                    "employee_check_in": {"employee_completed_at": "2025-01-20"},
                }
            ],
            "milestones": [{"ability_id": 3, "attained_at": ""}],
        }
    )

    [assignment] = state.assignments
    assert assignment.tenure.started_at == date(2025, 1, 15)
    completed = assignment.employee_check_in.employee_completed_at
    assert completed == datetime(2025, 1, 20, tzinfo=UTC)
    assert state.milestones[0].ability_id == "3"
    assert state.milestones[0].attained_at is None


def test_null_lists_and_unknown_keys_are_tolerated() -> None:
    state = ProposedState.from_payload(
        {"assignments": None, "milestones": None, "legacy_flag": True}
    )

    assert state.assignments == []
    assert state.milestones == []
    assert ProposedState.from_payload(None).to_payload() == {}


@pytest.mark.parametrize(
    "payload",
    [
        {"assignments": [{"tenure": {"anticipated_energy_percentage": 10}}]},
        {"assignments": [{"assignment_id": "a1", "tenure": {"anticipated_energy_percentage": -1}}]},
        {"employment": {"started_at": "sometime"}},
    ],
)
def test_malformed_payload_raises_validation_exception(payload) -> None:
    with pytest.raises(ValidationException, match="Invalid proposed state"):
        ProposedState.from_payload(payload)


def test_to_payload_keeps_only_provided_fields() -> None:
    state = ProposedState.from_payload(
        {"employment": {"seat_id": None, "started_at": "20250301"}}
    )

    assert state.to_payload() == {"employment": {"seat_id": None, "started_at": "2025-03-01"}}


def test_has_values_ignores_blank_fields() -> None:
    state = ProposedState.from_payload(
        {"aspirations": [{"aspiration_id": "x", "manager_check_in": {"manager_rating": " "}}]}
    )

    assert not state.aspirations[0].manager_check_in.has_values()
    assert state.aspirations[0].has_values()
