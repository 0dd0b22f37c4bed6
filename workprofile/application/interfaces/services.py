"""Service interfaces (ports) for the application layer."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from workprofile.domain.enums import FieldGroup
    from workprofile.domain.value_objects.core import Actor

# Caller-supplied capability check: (actor, subject_id, field_group) -> allowed.
AuthorizationPredicate = Callable[["Actor", str, "FieldGroup"], bool]


class IAuthorizationPolicy(Protocol):
    """Decides whether an actor may write a field group for a subject."""

    def is_allowed(self, actor: Actor, subject_id: str, field_group: FieldGroup) -> bool:
        """Return True when the actor may write the field group."""
