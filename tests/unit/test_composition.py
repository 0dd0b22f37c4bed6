"""Tests for the composition root."""

from unittest.mock import AsyncMock

from workprofile.composition import build_services
from workprofile.domain.enums import FieldGroup
from workprofile.domain.value_objects.core import Actor
from workprofile.infrastructure.persistence.database import SqlAlchemyTransactionManager


def test_services_share_one_session_and_transaction_manager() -> None:
    db = AsyncMock()

    services = build_services(db, predicate=lambda actor, subject_id, group: True)

    execution = services.change_execution
    assert isinstance(execution.transactions, SqlAlchemyTransactionManager)
    assert execution.transactions is services.assignment_tenures.transactions
    assert execution.snapshot_service is services.snapshots
    assert services.change_detection.snapshot_service is services.snapshots
    assert services.snapshots.snapshot_repo.db is db
    assert execution.policy.is_allowed(Actor("mgr1"), "emp1", FieldGroup.MILESTONE)
