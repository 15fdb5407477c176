"""
Match Simulation Data Models

Pydantic and dataclass models for the match simulation engine: the
match-type vocabulary, the match record handed in by booking, the
ephemeral per-call state, and the detailed outcome handed back.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from roster.ids import CompetitorId, MatchId, RefereeId, TitleId

if TYPE_CHECKING:
    from roster.competitor import Competitor, InjurySeverity
    from roster.referee import Referee


class MatchClass(str, Enum):
    """Weight/risk class a match type belongs to."""

    SINGLES = "singles"
    TAG = "tag"
    HARDCORE = "hardcore"
    CAGE = "cage"
    AERIAL = "aerial"


class MatchType(str, Enum):
    """Closed match-type vocabulary.

    ``GIMMICK`` covers any booking label the engine does not know; it is
    treated as a singles match everywhere.
    """

    SINGLES = "singles"
    TAG = "tag"
    TRIPLE_THREAT = "triple_threat"
    FATAL_FOUR_WAY = "fatal_four_way"
    HARDCORE = "hardcore"
    NO_DQ = "no_dq"
    STREET_FIGHT = "street_fight"
    FALLS_COUNT_ANYWHERE = "falls_count_anywhere"
    LAST_MAN_STANDING = "last_man_standing"
    CAGE = "cage"
    STEEL_CAGE = "steel_cage"
    HELL_IN_A_CELL = "hell_in_a_cell"
    LADDER = "ladder"
    TLC = "tlc"
    AERIAL = "aerial"
    SUBMISSION = "submission"
    I_QUIT = "i_quit"
    IRON_MAN = "iron_man"
    GIMMICK = "gimmick"

    @classmethod
    def parse(cls, label: str) -> MatchType:
        """Map a free-form booking label onto the vocabulary.

        Case, spaces and dashes are ignored. Unknown labels become GIMMICK.
        """
        key = label.strip().lower().replace("-", "_").replace(" ", "_")
        key = _ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            return cls.GIMMICK

    @property
    def match_class(self) -> MatchClass:
        return MATCH_CLASSES.get(self, MatchClass.SINGLES)

    @property
    def is_extreme(self) -> bool:
        """Anything-goes rules (referee hardcore workload, injury odds)."""
        return self in EXTREME_TYPES

    @property
    def is_high_risk(self) -> bool:
        """Types that double the referee incident chance."""
        return self in HIGH_RISK_TYPES


_ALIASES = {
    "nodq": "no_dq",
    "no_disqualification": "no_dq",
    "streetfight": "street_fight",
    "steelcage": "steel_cage",
    "hellinacell": "hell_in_a_cell",
    "hiac": "hell_in_a_cell",
    "laddermatch": "ladder",
    "lastmanstanding": "last_man_standing",
    "iquit": "i_quit",
    "ironman": "iron_man",
    "tag_team": "tag",
}

MATCH_CLASSES: dict[MatchType, MatchClass] = {
    MatchType.SINGLES: MatchClass.SINGLES,
    MatchType.TAG: MatchClass.TAG,
    MatchType.TRIPLE_THREAT: MatchClass.SINGLES,
    MatchType.FATAL_FOUR_WAY: MatchClass.SINGLES,
    MatchType.HARDCORE: MatchClass.HARDCORE,
    MatchType.NO_DQ: MatchClass.HARDCORE,
    MatchType.STREET_FIGHT: MatchClass.HARDCORE,
    MatchType.FALLS_COUNT_ANYWHERE: MatchClass.HARDCORE,
    MatchType.LAST_MAN_STANDING: MatchClass.HARDCORE,
    MatchType.CAGE: MatchClass.CAGE,
    MatchType.STEEL_CAGE: MatchClass.CAGE,
    MatchType.HELL_IN_A_CELL: MatchClass.CAGE,
    MatchType.LADDER: MatchClass.AERIAL,
    MatchType.TLC: MatchClass.HARDCORE,
    MatchType.AERIAL: MatchClass.AERIAL,
    MatchType.SUBMISSION: MatchClass.SINGLES,
    MatchType.I_QUIT: MatchClass.SINGLES,
    MatchType.IRON_MAN: MatchClass.SINGLES,
    MatchType.GIMMICK: MatchClass.SINGLES,
}

EXTREME_TYPES = frozenset({
    MatchType.HARDCORE,
    MatchType.NO_DQ,
    MatchType.STREET_FIGHT,
    MatchType.FALLS_COUNT_ANYWHERE,
    MatchType.LAST_MAN_STANDING,
    MatchType.LADDER,
    MatchType.TLC,
})

HIGH_RISK_TYPES = frozenset({
    MatchType.HARDCORE,
    MatchType.NO_DQ,
    MatchType.STREET_FIGHT,
    MatchType.LADDER,
    MatchType.TLC,
    MatchType.HELL_IN_A_CELL,
    MatchType.CAGE,
    MatchType.STEEL_CAGE,
})


class FinishType(str, Enum):
    """How a match ended."""

    PINFALL = "pinfall"
    SUBMISSION = "submission"
    KNOCKOUT = "knockout"
    COUNT_OUT = "count_out"
    DQ = "dq"
    CONTROVERSIAL = "controversial"
    BOTCHED = "botched"

    @property
    def is_clean(self) -> bool:
        return self in (FinishType.PINFALL, FinishType.SUBMISSION, FinishType.KNOCKOUT)

    @property
    def is_controversy(self) -> bool:
        return self in (FinishType.CONTROVERSIAL, FinishType.BOTCHED)


class SimulationMode(str, Enum):
    """Execution fidelity."""

    ADVANCED = "advanced"  # phase-by-phase
    SIMPLE = "simple"  # single pass for bulk work


class MatchPhase(str, Enum):
    """Phases of an advanced-mode simulation, in order."""

    PENDING = "pending"
    OPENING = "opening"
    MID_PHASE = "mid_phase"
    CLIMAX = "climax"
    AFTERMATH = "aftermath"


PHASE_ORDER = (
    MatchPhase.PENDING,
    MatchPhase.OPENING,
    MatchPhase.MID_PHASE,
    MatchPhase.CLIMAX,
    MatchPhase.AFTERMATH,
)


class IncidentType(str, Enum):
    """In-match referee incident categories."""

    BUMP = "bump"
    KNOCKOUT = "knockout"
    FAST_COUNT = "fast_count"
    SLOW_COUNT = "slow_count"
    MISSED_CALL = "missed_call"
    WRONG_CALL = "wrong_call"
    ARGUMENT = "argument"
    EJECTION = "ejection"


class WarningCode(str, Enum):
    """Recoverable conditions surfaced during a simulation."""

    UNRESOLVED_PARTICIPANT = "unresolved_participant"
    NO_SUITABLE_REFEREE = "no_suitable_referee"
    NO_ACTIVE_REFEREE = "no_active_referee"
    NO_REPLACEMENT_REFEREE = "no_replacement_referee"
    REFEREE_UNAVAILABLE = "referee_unavailable"


class MatchRecord(BaseModel):
    """A booked match.

    Created by booking with the output fields unset; the engine fills
    ``winner_id``, ``rating`` and ``finish`` together, exactly once.
    """

    id: MatchId
    competitor_ids: list[CompetitorId]
    match_type: MatchType = MatchType.SINGLES
    gimmick_label: str | None = None
    is_title_match: bool = False
    is_main_event: bool = False
    title_id: TitleId | None = None
    referee_id: RefereeId | None = None
    booking_modifier: float = 0.0
    location: str = ""

    # Results
    winner_id: CompetitorId | None = None
    rating: int | None = Field(default=None, ge=0, le=100)
    finish: FinishType | None = None

    @property
    def is_simulated(self) -> bool:
        return self.winner_id is not None

    @property
    def match_class(self) -> MatchClass:
        return self.match_type.match_class

    def apply_result(self, winner_id: CompetitorId, rating: int, finish: FinishType) -> None:
        """Write all result fields as one group."""
        self.winner_id = winner_id
        self.rating = rating
        self.finish = finish


@dataclass(frozen=True)
class WeightProfile:
    """Skill multipliers for a match class."""

    technical: float = 1.0
    brawling: float = 1.0
    psychology: float = 1.0
    aerial: float = 1.0


@dataclass
class RefereeIncident:
    """An in-match referee event."""

    incident_type: IncidentType
    description: str
    rating_impact: int
    requires_replacement: bool = False
    phase: MatchPhase = MatchPhase.MID_PHASE


@dataclass
class InjuryReport:
    """An injury sustained in a match."""

    competitor_id: CompetitorId
    severity: InjurySeverity
    weeks: int
    description: str
    risk: float


@dataclass
class SimulationWarning:
    """A recoverable condition, kept for the caller and logged."""

    code: WarningCode
    message: str


@dataclass
class PhaseEvent:
    """One line of the play-by-play log."""

    phase: MatchPhase
    description: str


@dataclass
class MatchState:
    """Working data owned by a single simulation call."""

    record: MatchRecord
    participants: list[Competitor]
    weights: WeightProfile
    mode: SimulationMode
    referee: Referee | None = None
    booking_modifier: float = 0.0

    scores: dict[CompetitorId, float] = field(default_factory=dict)
    momentum: dict[CompetitorId, float] = field(default_factory=dict)
    incidents: list[RefereeIncident] = field(default_factory=list)
    log: list[PhaseEvent] = field(default_factory=list)
    warnings: list[SimulationWarning] = field(default_factory=list)

    # Referees whose state changed during the match (original + replacement)
    officials: list[Referee] = field(default_factory=list)
    replacement_referee: Referee | None = None

    # Climax results
    winner_id: CompetitorId | None = None
    finish: FinishType | None = None
    rating: int | None = None

    # Aftermath
    injuries: list[InjuryReport] = field(default_factory=list)
    angle_triggered: bool = False

    @property
    def participant_ids(self) -> list[CompetitorId]:
        return [c.id for c in self.participants]

    def note(self, phase: MatchPhase, description: str) -> None:
        self.log.append(PhaseEvent(phase=phase, description=description))

    def warn(self, code: WarningCode, message: str) -> None:
        self.warnings.append(SimulationWarning(code=code, message=message))

    def apply_to_all(self, delta: float) -> None:
        """Add ``delta`` to every participant's score."""
        for competitor_id in self.scores:
            self.scores[competitor_id] += delta


@dataclass
class SimulationOutcome:
    """Everything a simulation produced, beyond the match record."""

    record: MatchRecord
    mode: SimulationMode
    winner_id: CompetitorId
    rating: int
    finish: FinishType
    referee_id: RefereeId | None = None
    replacement_referee_id: RefereeId | None = None
    scores: dict[CompetitorId, float] = field(default_factory=dict)
    injuries: list[InjuryReport] = field(default_factory=list)
    incidents: list[RefereeIncident] = field(default_factory=list)
    warnings: list[SimulationWarning] = field(default_factory=list)
    log: list[PhaseEvent] = field(default_factory=list)
    angle_triggered: bool = False

    @property
    def quality(self) -> str:
        return quality_band(self.rating)


def quality_band(rating: float, good: float = 50, great: float = 80) -> str:
    """Bucket a rating into "bad", "good" or "great"."""
    if rating >= great:
        return "great"
    if rating >= good:
        return "good"
    return "bad"
