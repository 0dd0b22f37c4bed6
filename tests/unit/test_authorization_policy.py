"""Tests for AuthorizationPolicy field-group rules."""

from workprofile.application.services.authorization_service import AuthorizationPolicy
from workprofile.domain.enums import Capability, FieldGroup
from workprofile.domain.value_objects.core import Actor

SUBJECT = "emp1"


def _allow_all(actor, subject_id, field_group) -> bool:
    return True


def test_default_predicate_denies_others() -> None:
    policy = AuthorizationPolicy()

    for group in FieldGroup:
        assert not policy.is_allowed(Actor("mgr1"), SUBJECT, group)


def test_self_rules_override_predicate() -> None:
    denying = AuthorizationPolicy()
    allowing = AuthorizationPolicy(_allow_all)
    me = Actor(SUBJECT)

    assert denying.is_allowed(me, SUBJECT, FieldGroup.EMPLOYEE_CHECK_IN)
    assert not allowing.is_allowed(me, SUBJECT, FieldGroup.MANAGER_CHECK_IN)


def test_admin_override_allows_everything() -> None:
    policy = AuthorizationPolicy()
    admin = Actor(SUBJECT, frozenset({Capability.ADMIN_OVERRIDE}))

    for group in FieldGroup:
        assert policy.is_allowed(admin, SUBJECT, group)


def test_predicate_receives_field_group() -> None:
    seen = []

    def predicate(actor, subject_id, field_group) -> bool:
        seen.append((actor.id, subject_id, field_group))
        return field_group is FieldGroup.MILESTONE

    policy = AuthorizationPolicy(predicate)

    assert policy.is_allowed(Actor("mgr1"), SUBJECT, FieldGroup.MILESTONE)
    assert not policy.is_allowed(Actor("mgr1"), SUBJECT, FieldGroup.OFFICIAL_CHECK_IN)
    assert seen == [
        ("mgr1", SUBJECT, FieldGroup.MILESTONE),
        ("mgr1", SUBJECT, FieldGroup.OFFICIAL_CHECK_IN),
    ]
