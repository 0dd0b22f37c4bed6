"""Authorization policy: field-group checks over a caller-supplied predicate."""

from __future__ import annotations

from workprofile.application.interfaces.services import AuthorizationPredicate
from workprofile.domain.enums import Capability, FieldGroup
from workprofile.domain.value_objects.core import Actor
from workprofile.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


def _deny_all(actor: Actor, subject_id: str, field_group: FieldGroup) -> bool:
    return False


class AuthorizationPolicy:
    """Decides whether an actor may write a field group for a subject.

    Rules, in order:
    - ADMIN_OVERRIDE allows every field group.
    - The subject may always write their own employee check-in fields.
    - The subject may never write their own manager check-in fields.
    - Everything else is delegated to the predicate.
    """

    def __init__(self, predicate: AuthorizationPredicate | None = None) -> None:
        self.predicate = predicate or _deny_all

    def is_allowed(self, actor: Actor, subject_id: str, field_group: FieldGroup) -> bool:
        if actor.has(Capability.ADMIN_OVERRIDE):
            return True
        is_self = actor.id == subject_id
        if field_group is FieldGroup.EMPLOYEE_CHECK_IN and is_self:
            return True
        if field_group is FieldGroup.MANAGER_CHECK_IN and is_self:
            return False
        allowed = bool(self.predicate(actor, subject_id, field_group))
        if not allowed:
            logger.debug(
                "Actor %s denied %s for subject %s", actor.id, field_group.value, subject_id
            )
        return allowed
