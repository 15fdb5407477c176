"""
Roster Module

Pydantic models for the data the match engine consumes and mutates.

Models:
    - Competitor: Skills, condition, injury state and relationships
    - Referee: Officiating attributes, workload and career statistics
    - Trait / Feud / TagTeam: Read-only performance modifiers
    - Company / StaffMember: Managers, road agents and the team doctor
    - RosterContext: Container handed to every simulation call
"""

from roster.ids import (
    CompetitorId,
    FeudId,
    MatchId,
    RefereeId,
    StaffId,
    TagTeamId,
    TitleId,
    TraitId,
)
from roster.competitor import Competitor, InjurySeverity, InjuryStatus
from roster.referee import Referee, RefereeCareerStats, default_referees
from roster.context import (
    Company,
    Feud,
    RosterContext,
    StaffMember,
    StaffRole,
    TagTeam,
    Trait,
    TraitEffect,
)

__all__ = [
    # Identifiers
    "CompetitorId",
    "FeudId",
    "MatchId",
    "RefereeId",
    "StaffId",
    "TagTeamId",
    "TitleId",
    "TraitId",
    # Competitors
    "Competitor",
    "InjurySeverity",
    "InjuryStatus",
    # Referees
    "Referee",
    "RefereeCareerStats",
    "default_referees",
    # Context
    "Company",
    "Feud",
    "RosterContext",
    "StaffMember",
    "StaffRole",
    "TagTeam",
    "Trait",
    "TraitEffect",
]
