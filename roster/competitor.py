"""
Competitor Data Model

Pydantic models for wrestlers on the roster: core skills, mutable
condition (fatigue, morale, momentum, popularity), injury state and
relationships.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from roster.bounds import MOMENTUM_RANGE, SKILL_RANGE, clamp_int
from roster.ids import CompetitorId, TagTeamId, TraitId


class InjurySeverity(IntEnum):
    """Injury severity bucket."""

    MINOR = 1
    MODERATE = 2
    MAJOR = 3


class InjuryStatus(BaseModel):
    """An active injury."""

    model_config = ConfigDict(validate_assignment=True)

    severity: InjurySeverity
    weeks_remaining: int = Field(default=1, ge=0)
    description: str = ""


class Competitor(BaseModel):
    """A wrestler as seen by the match engine.

    Bounded attributes are clamped on every assignment, so callers can
    write ``competitor.fatigue += 40`` without range checks.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: CompetitorId
    name: str
    hometown: str = ""

    # Core skills
    technical: int = 50
    brawling: int = 50
    aerial: int = 50
    psychology: int = 50

    # Supporting attributes
    charisma: int = 50
    mic: int = 50
    stamina: int = 50
    toughness: int = 50

    # Condition
    fatigue: int = 0
    morale: int = 50
    momentum: int = 0
    popularity: int = 50
    injury: InjuryStatus | None = None

    # Workload
    matches_this_week: int = Field(default=0, ge=0)
    matches_this_month: int = Field(default=0, ge=0)
    booked_this_week: bool = False

    # Relationships
    friends: set[CompetitorId] = Field(default_factory=set)
    rivals: set[CompetitorId] = Field(default_factory=set)
    trait_ids: list[TraitId] = Field(default_factory=list)
    tag_team_id: TagTeamId | None = None

    retired: bool = False

    @field_validator(
        "technical",
        "brawling",
        "aerial",
        "psychology",
        "charisma",
        "mic",
        "stamina",
        "toughness",
        "fatigue",
        "morale",
        "popularity",
        mode="before",
    )
    @classmethod
    def _clamp_skill(cls, value: Any) -> int:
        return clamp_int(value, *SKILL_RANGE)

    @field_validator("momentum", mode="before")
    @classmethod
    def _clamp_momentum(cls, value: Any) -> int:
        return clamp_int(value, *MOMENTUM_RANGE)

    @property
    def is_injured(self) -> bool:
        return self.injury is not None

    @property
    def is_available(self) -> bool:
        """Healthy and not retired."""
        return not self.retired and not self.is_injured

    def mutual_friend(self, other: Competitor) -> bool:
        return other.id in self.friends and self.id in other.friends

    def mutual_rival(self, other: Competitor) -> bool:
        return other.id in self.rivals and self.id in other.rivals

    def apply_injury(self, status: InjuryStatus, stat_penalty: float) -> None:
        """Mark the competitor injured and apply the lasting stat penalty.

        Args:
            status: The new injury.
            stat_penalty: Multiplier applied to technical, brawling,
                aerial and stamina.
        """
        self.injury = status
        self.technical = self.technical * stat_penalty
        self.brawling = self.brawling * stat_penalty
        self.aerial = self.aerial * stat_penalty
        self.stamina = self.stamina * stat_penalty

    def heal(self) -> None:
        """Clear the injury entirely."""
        self.injury = None
