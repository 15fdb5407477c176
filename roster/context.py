"""
Roster Context

Read-mostly modifiers (traits, feuds, tag teams, company staff) and the
RosterContext container the match engine receives explicitly on every
call.
"""

from __future__ import annotations

import threading
from enum import Enum
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator

from roster.bounds import SKILL_RANGE, clamp_int
from roster.competitor import Competitor
from roster.ids import CompetitorId, FeudId, RefereeId, StaffId, TagTeamId, TraitId
from roster.referee import Referee


class TraitEffect(str, Enum):
    """Performance rule attached to a trait."""

    CROWD_FAVOURITE = "crowd_favourite"
    HARDCORE_SPECIALIST = "hardcore_specialist"
    SUBMISSION_EXPERT = "submission_expert"
    BIG_MATCH_PERFORMER = "big_match_performer"
    LAZY_WORKER = "lazy_worker"
    CHEMISTRY_MASTER = "chemistry_master"
    NONE = "none"


class Trait(BaseModel):
    """A named competitor trait."""

    id: TraitId
    name: str
    effect: TraitEffect = TraitEffect.NONE


class Feud(BaseModel):
    """A storyline rivalry between two or more competitors."""

    model_config = ConfigDict(validate_assignment=True)

    id: FeudId
    participants: set[CompetitorId]
    heat: int = 50
    active: bool = True

    @field_validator("heat", mode="before")
    @classmethod
    def _clamp_heat(cls, value: Any) -> int:
        return clamp_int(value, *SKILL_RANGE)


class TagTeam(BaseModel):
    """An established tag team."""

    id: TagTeamId
    name: str
    members: set[CompetitorId]
    chemistry: int = 0


class StaffRole(str, Enum):
    """Backstage staff roles the engine consults."""

    MANAGER = "manager"
    ROAD_AGENT = "road_agent"
    DOCTOR = "doctor"


class StaffMember(BaseModel):
    """A backstage staff member."""

    id: StaffId
    name: str
    role: StaffRole
    charisma: int = 50
    mic: int = 50
    psychology_influence: int = 0
    injury_recovery_bonus: int = Field(default=0, ge=0, le=100)


class Company(BaseModel):
    """Company-level assignments that feed bonuses into a match."""

    name: str = "Independent"
    managers: dict[CompetitorId, StaffId] = Field(default_factory=dict)
    road_agent_id: StaffId | None = None
    doctor_id: StaffId | None = None
    favored_ids: set[CompetitorId] = Field(default_factory=set)


class RosterContext(BaseModel):
    """Everything the engine reads from, and writes back to, the roster.

    Passed explicitly to every engine call. ``lock`` guards mutation when
    the caller cannot guarantee that concurrent matches share no
    competitor or referee.
    """

    competitors: dict[CompetitorId, Competitor] = Field(default_factory=dict)
    referees: dict[RefereeId, Referee] = Field(default_factory=dict)
    traits: dict[TraitId, Trait] = Field(default_factory=dict)
    feuds: dict[FeudId, Feud] = Field(default_factory=dict)
    tag_teams: dict[TagTeamId, TagTeam] = Field(default_factory=dict)
    staff: dict[StaffId, StaffMember] = Field(default_factory=dict)
    company: Company = Field(default_factory=Company)

    _lock: Any = PrivateAttr(default_factory=threading.RLock)

    @classmethod
    def build(
        cls,
        competitors: Iterable[Competitor] = (),
        referees: Iterable[Referee] = (),
        traits: Iterable[Trait] = (),
        feuds: Iterable[Feud] = (),
        tag_teams: Iterable[TagTeam] = (),
        staff: Iterable[StaffMember] = (),
        company: Company | None = None,
    ) -> RosterContext:
        """Build a context from plain sequences, keying each item by id."""
        return cls(
            competitors={c.id: c for c in competitors},
            referees={r.id: r for r in referees},
            traits={t.id: t for t in traits},
            feuds={f.id: f for f in feuds},
            tag_teams={t.id: t for t in tag_teams},
            staff={s.id: s for s in staff},
            company=company or Company(),
        )

    @property
    def lock(self) -> Any:
        return self._lock

    # -- lookups -------------------------------------------------------------

    def competitor(self, competitor_id: CompetitorId) -> Competitor | None:
        return self.competitors.get(competitor_id)

    def referee(self, referee_id: RefereeId | None) -> Referee | None:
        if referee_id is None:
            return None
        return self.referees.get(referee_id)

    def active_referees(self) -> list[Referee]:
        return [r for r in self.referees.values() if r.active]

    def traits_for(self, competitor: Competitor) -> list[Trait]:
        """Resolve a competitor's trait ids, skipping unknown ones."""
        return [self.traits[t] for t in competitor.trait_ids if t in self.traits]

    def active_feuds_for(self, competitor_id: CompetitorId) -> list[Feud]:
        return [
            f for f in self.feuds.values()
            if f.active and competitor_id in f.participants
        ]

    def manager_for(self, competitor_id: CompetitorId) -> StaffMember | None:
        staff_id = self.company.managers.get(competitor_id)
        return self.staff.get(staff_id) if staff_id else None

    def road_agent(self) -> StaffMember | None:
        staff_id = self.company.road_agent_id
        return self.staff.get(staff_id) if staff_id else None

    def doctor(self) -> StaffMember | None:
        staff_id = self.company.doctor_id
        return self.staff.get(staff_id) if staff_id else None
