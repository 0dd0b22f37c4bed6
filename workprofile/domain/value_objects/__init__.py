"""Domain value objects."""

from workprofile.domain.value_objects.core import (
    Actor,
    EnergyPercentage,
    MilestoneLevel,
)

__all__ = ["Actor", "EnergyPercentage", "MilestoneLevel"]
