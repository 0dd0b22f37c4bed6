"""Domain exceptions for the work-profile core.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns; callers map
them to their own responses using message, error_code, and details.
"""

from typing import Any


class WorkProfileException(Exception):
    """Base exception for all work-profile errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class ValidationException(WorkProfileException):
    """Raised when input validation fails (bad percentage, unparseable date, missing reference)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class ReferenceNotFoundException(WorkProfileException):
    """Raised when an id in a payload or call does not resolve."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'assignment', 'subject').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "REFERENCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class PersistenceException(WorkProfileException):
    """Raised when the store rejects a write (constraint violation, lost connection)."""

    def __init__(self, message: str, operation: str | None = None) -> None:
        """Initialize with message and the atomic unit that failed.

        Args:
            message: Description of the store failure.
            operation: Optional name of the unit (e.g. 'update_assignment_tenure').
        """
        details = {"operation": operation} if operation else {}
        super().__init__(message, "PERSISTENCE_ERROR", details)


class ActiveTenureNotFoundException(WorkProfileException):
    """Raised when an operation needs the active tenure of a subject and there is none."""

    def __init__(self, subject_id: str, scope_id: str) -> None:
        """Initialize with the subject and the scope (company or assignment) searched.

        Args:
            subject_id: Subject without an active tenure.
            scope_id: Company or assignment id the tenure was looked up in.
        """
        super().__init__(
            f"No active tenure for subject {subject_id} in {scope_id}",
            "ACTIVE_TENURE_NOT_FOUND",
            {"subject_id": subject_id, "scope_id": scope_id},
        )


class FinalizationNotAllowedException(WorkProfileException):
    """Raised when finalizing a check-in whose two sides are not both complete."""

    def __init__(self, check_in_id: str, state: str) -> None:
        super().__init__(
            f"Check-in {check_in_id} cannot be finalized in state {state}",
            "FINALIZATION_NOT_ALLOWED",
            {"check_in_id": check_in_id, "state": state},
        )
