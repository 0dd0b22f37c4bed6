"""Domain value objects for the work-profile core.

Value objects are immutable types that represent domain concepts with
self-validation. They have no identity, only value.
"""

from dataclasses import dataclass, field

from workprofile.domain.enums import Capability


def _as_int(value: object, field_name: str) -> int:
    """Coerce ints and integer strings; reject bools, floats with fractions and junk."""
    if isinstance(value, bool):
        raise ValueError(f"{field_name} must be a whole number, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    raise ValueError(f"{field_name} must be a whole number, got {value!r}")


@dataclass(frozen=True)
class EnergyPercentage:
    """Anticipated share of a subject's energy on one assignment.

    0-100 inclusive. Multiples of 5 are the convention but not enforced.
    Zero means the allocation has ended.
    """

    value: int

    def __post_init__(self) -> None:
        coerced = _as_int(self.value, "Anticipated energy")
        if not 0 <= coerced <= 100:
            raise ValueError("Anticipated energy must be between 0 and 100")
        object.__setattr__(self, "value", coerced)

    @property
    def is_zero(self) -> bool:
        return self.value == 0


@dataclass(frozen=True)
class MilestoneLevel:
    """Milestone level attained on an ability: 1-5, or 0 meaning remove the attainment."""

    value: int

    MAX_LEVEL = 5

    def __post_init__(self) -> None:
        coerced = _as_int(self.value, "Milestone level")
        if not 0 <= coerced <= self.MAX_LEVEL:
            raise ValueError(f"Milestone level must be between 0 and {self.MAX_LEVEL}")
        object.__setattr__(self, "value", coerced)

    @classmethod
    def parse(cls, raw: object) -> "MilestoneLevel":
        """Build from payload input; None and blank strings mean removal."""
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            return cls(0)
        return cls(raw)  # type: ignore[arg-type]

    @property
    def is_removal(self) -> bool:
        return self.value == 0


@dataclass(frozen=True)
class Actor:
    """The person performing an operation, with any subject-independent capabilities."""

    id: str
    capabilities: frozenset[Capability] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Actor id must be a non-empty string")

    def has(self, capability: Capability) -> bool:
        return capability in self.capabilities
