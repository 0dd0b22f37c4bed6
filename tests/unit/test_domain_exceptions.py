"""Tests for domain exceptions: codes, messages and details."""

from workprofile.domain.exceptions import (
    ActiveTenureNotFoundException,
    FinalizationNotAllowedException,
    PersistenceException,
    ReferenceNotFoundException,
    ValidationException,
    WorkProfileException,
)


def test_base_exception_defaults_code_to_class_name() -> None:
    exc = WorkProfileException("boom")
    assert exc.message == "boom"
    assert exc.error_code == "WorkProfileException"
    assert exc.details == {}
    assert str(exc) == "boom"


def test_validation_exception_carries_field() -> None:
    exc = ValidationException("Started at must be a valid date", field="started_at")
    assert exc.error_code == "VALIDATION_ERROR"
    assert exc.details == {"field": "started_at"}
    assert ValidationException("no field").details == {}


def test_reference_not_found() -> None:
    exc = ReferenceNotFoundException("assignment", "a7")
    assert exc.error_code == "REFERENCE_NOT_FOUND"
    assert exc.message == "assignment not found: a7"
    assert exc.details == {"resource_type": "assignment", "resource_id": "a7"}


def test_persistence_exception_names_operation() -> None:
    exc = PersistenceException("Constraint violation", "update_assignment_tenure")
    assert exc.error_code == "PERSISTENCE_ERROR"
    assert exc.details == {"operation": "update_assignment_tenure"}


def test_tenure_and_finalization_exceptions() -> None:
    missing = ActiveTenureNotFoundException("emp1", "co1")
    assert missing.error_code == "ACTIVE_TENURE_NOT_FOUND"
    assert missing.details == {"subject_id": "emp1", "scope_id": "co1"}

    blocked = FinalizationNotAllowedException("ci1", "employee_only")
    assert blocked.error_code == "FINALIZATION_NOT_ALLOWED"
    assert "employee_only" in blocked.message
    assert isinstance(blocked, WorkProfileException)
