"""
Referee Data Model

Pydantic models for referees and their cumulative career statistics,
plus the stock referee pool used when a roster ships without one.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from roster.bounds import SKILL_RANGE, clamp_int
from roster.ids import RefereeId

RECENT_WINDOW = 10


class RefereeCareerStats(BaseModel):
    """Cumulative career record of a referee."""

    total_matches: int = 0
    title_matches: int = 0
    main_event_matches: int = 0
    hardcore_matches: int = 0
    matches_by_class: dict[str, int] = Field(default_factory=dict)

    # Finishes
    finishes: dict[str, int] = Field(default_factory=dict)
    controversies: int = 0
    perfect_matches: int = 0

    # Ratings
    average_rating: float = 0.0
    recent_ratings: list[int] = Field(default_factory=list)
    highest_rating: int = 0
    lowest_rating: int = 100

    # Incidents
    times_bumped: int = 0
    times_knocked_out: int = 0
    injuries: int = 0

    achievements: list[str] = Field(default_factory=list)

    @property
    def recent_average(self) -> float:
        if not self.recent_ratings:
            return 0.0
        return sum(self.recent_ratings) / len(self.recent_ratings)

    @property
    def current_form(self) -> str:
        """Form label from the recent rating window."""
        if len(self.recent_ratings) < 3:
            return "Unknown"
        average = self.recent_average
        if average >= 80:
            return "Excellent"
        if average >= 70:
            return "Good"
        if average >= 60:
            return "Average"
        if average >= 50:
            return "Poor"
        return "Struggling"

    @property
    def specialty(self) -> str:
        """Specialty inferred from the kind of matches worked."""
        if self.total_matches < 10:
            return "Developing"
        if self.hardcore_matches / self.total_matches > 0.4:
            return "Hardcore Specialist"
        if self.title_matches / self.total_matches > 0.3:
            return "Main Event Specialist"
        return "All-Rounder"

    def finish_count(self, finish: str) -> int:
        return self.finishes.get(finish, 0)

    def push_rating(self, rating: int) -> None:
        """Fold a rating into the running average and recent window."""
        total = self.total_matches
        if total <= 1:
            self.average_rating = float(rating)
        else:
            self.average_rating += (rating - self.average_rating) / total
        self.recent_ratings.append(rating)
        if len(self.recent_ratings) > RECENT_WINDOW:
            self.recent_ratings.pop(0)
        self.highest_rating = max(self.highest_rating, rating)
        self.lowest_rating = min(self.lowest_rating, rating)


class Referee(BaseModel):
    """A referee in the officiating pool."""

    model_config = ConfigDict(validate_assignment=True)

    id: RefereeId
    name: str

    strictness: int = 50
    corruption: int = 20
    experience: int = 50
    consistency: int = 70

    # Specialties
    main_event: bool = False
    hardcore_specialist: bool = False
    company_favored: bool = False

    # Availability
    active: bool = True
    injury_weeks: int = Field(default=0, ge=0)
    suspension_weeks: int = Field(default=0, ge=0)
    age: int = 30

    # Workload
    fatigue: int = 0
    matches_this_week: int = Field(default=0, ge=0)
    consecutive_weeks: int = Field(default=0, ge=0)

    reputation: int = 50
    career: RefereeCareerStats = Field(default_factory=RefereeCareerStats)

    @field_validator(
        "strictness",
        "corruption",
        "experience",
        "consistency",
        "fatigue",
        "reputation",
        mode="before",
    )
    @classmethod
    def _clamp_attribute(cls, value: Any) -> int:
        return clamp_int(value, *SKILL_RANGE)

    @property
    def is_injured(self) -> bool:
        return self.injury_weeks > 0

    @property
    def quality(self) -> float:
        """Overall quality: experience and consistency up, corruption down."""
        return (self.experience + self.consistency + (100 - self.corruption)) / 3

    def is_suitable_for(self, is_title_match: bool) -> bool:
        """Whether this referee may be assigned a match.

        A hardcore specialist works anything. A main-event referee
        without the experience for it is kept off title matches.
        """
        if self.hardcore_specialist:
            return True
        if self.main_event and self.experience < 70 and is_title_match:
            return False
        return self.active

    def injure(self, weeks: int) -> None:
        self.injury_weeks = max(self.injury_weeks, weeks)
        self.career.injuries += 1


def default_referees() -> list[Referee]:
    """Stock officiating crew."""
    return [
        Referee(
            id=RefereeId("ref_earl"), name="Earl Hebner",
            strictness=60, corruption=40, experience=95, consistency=85,
            main_event=True,
        ),
        Referee(
            id=RefereeId("ref_mike"), name="Mike Chioda",
            strictness=70, corruption=20, experience=90, consistency=90,
            main_event=True,
        ),
        Referee(
            id=RefereeId("ref_charles"), name="Charles Robinson",
            strictness=50, corruption=15, experience=85, consistency=80,
            main_event=True,
        ),
        Referee(
            id=RefereeId("ref_nick"), name="Nick Patrick",
            strictness=40, corruption=70, experience=75, consistency=60,
            company_favored=True,
        ),
        Referee(
            id=RefereeId("ref_tommy"), name="Tommy Young",
            strictness=80, corruption=10, experience=80, consistency=85,
        ),
        Referee(
            id=RefereeId("ref_bryce"), name="Bryce Remsburg",
            strictness=30, corruption=5, experience=70, consistency=75,
            hardcore_specialist=True,
        ),
        Referee(
            id=RefereeId("ref_rookie"), name="Rookie Ref",
            strictness=60, corruption=20, experience=25, consistency=40,
        ),
    ]
