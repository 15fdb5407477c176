"""
Typed Identifiers

Every roster entity is keyed by one of these identifier types. They are
plain strings at runtime but keep lookups from mixing up, say, a
referee id with a competitor id.
"""

from typing import NewType

CompetitorId = NewType("CompetitorId", str)
RefereeId = NewType("RefereeId", str)
TitleId = NewType("TitleId", str)
TraitId = NewType("TraitId", str)
FeudId = NewType("FeudId", str)
TagTeamId = NewType("TagTeamId", str)
StaffId = NewType("StaffId", str)
MatchId = NewType("MatchId", str)
