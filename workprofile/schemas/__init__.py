"""Inbound payload schemas (pydantic)."""

from workprofile.schemas.proposed_state import (
    AspirationProposal,
    AssignmentProposal,
    EmployeeCheckInProposal,
    EmploymentProposal,
    ManagerCheckInProposal,
    MilestoneProposal,
    OfficialCheckInProposal,
    ProposedState,
    RatedAssignmentProposal,
    RatedPositionProposal,
    TenureProposal,
)

__all__ = [
    "AspirationProposal",
    "AssignmentProposal",
    "EmployeeCheckInProposal",
    "EmploymentProposal",
    "ManagerCheckInProposal",
    "MilestoneProposal",
    "OfficialCheckInProposal",
    "ProposedState",
    "RatedAssignmentProposal",
    "RatedPositionProposal",
    "TenureProposal",
]
