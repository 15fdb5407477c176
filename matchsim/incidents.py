"""
Referee Incidents

In-match referee events (bumps, knockouts, bad counts, blown calls,
arguments, ejections). Each eligible phase gets one incident check.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from loguru import logger

from matchsim.models import (
    IncidentType,
    MatchPhase,
    MatchRecord,
    MatchState,
    RefereeIncident,
    WarningCode,
)

if TYPE_CHECKING:
    from roster.context import RosterContext
    from roster.referee import Referee
    from matchsim.referees import RefereeSystem
    from matchsim.rng import RandomSource
    from matchsim.settings import RefereeSettings


@dataclass(frozen=True)
class IncidentSpec:
    """Static description of an incident category."""

    incident_type: IncidentType
    phase: MatchPhase
    description: str
    requires_replacement: bool = False
    controversy: bool = False


INCIDENT_CATALOG: dict[IncidentType, IncidentSpec] = {
    IncidentType.BUMP: IncidentSpec(
        IncidentType.BUMP, MatchPhase.MID_PHASE,
        "{name} took a bump and was down for the count",
    ),
    IncidentType.KNOCKOUT: IncidentSpec(
        IncidentType.KNOCKOUT, MatchPhase.CLIMAX,
        "{name} was knocked out cold and had to be replaced",
        requires_replacement=True,
    ),
    IncidentType.FAST_COUNT: IncidentSpec(
        IncidentType.FAST_COUNT, MatchPhase.CLIMAX,
        "{name} made a suspiciously fast count",
        controversy=True,
    ),
    IncidentType.MISSED_CALL: IncidentSpec(
        IncidentType.MISSED_CALL, MatchPhase.MID_PHASE,
        "{name} conveniently missed an illegal move",
        controversy=True,
    ),
    IncidentType.WRONG_CALL: IncidentSpec(
        IncidentType.WRONG_CALL, MatchPhase.MID_PHASE,
        "{name} made the wrong call",
    ),
    IncidentType.SLOW_COUNT: IncidentSpec(
        IncidentType.SLOW_COUNT, MatchPhase.CLIMAX,
        "{name} was slow to make the count",
    ),
    IncidentType.ARGUMENT: IncidentSpec(
        IncidentType.ARGUMENT, MatchPhase.MID_PHASE,
        "{name} got into a heated argument with a competitor",
    ),
    IncidentType.EJECTION: IncidentSpec(
        IncidentType.EJECTION, MatchPhase.MID_PHASE,
        "{name} ejected an interfering second from ringside",
    ),
}

CORRUPTION_INCIDENTS = (IncidentType.FAST_COUNT, IncidentType.MISSED_CALL)
CONSISTENCY_INCIDENTS = (IncidentType.WRONG_CALL, IncidentType.SLOW_COUNT)
STRICTNESS_INCIDENTS = (IncidentType.ARGUMENT, IncidentType.EJECTION)


class IncidentSystem:
    """Rolls and applies referee incidents."""

    def __init__(
        self,
        settings: RefereeSettings,
        rng: RandomSource,
        referee_system: RefereeSystem,
    ) -> None:
        self.settings = settings
        self.rng = rng
        self.referee_system = referee_system

    def rating_impact(self, incident_type: IncidentType) -> int:
        return self.settings.incident_rating_impact.get(incident_type.value, 0)

    def incident_chance(self, referee: Referee, record: MatchRecord, phase: MatchPhase) -> float:
        """Incident probability for one phase check, in percent."""
        cfg = self.settings
        chance = cfg.incident_base_chance
        if phase == MatchPhase.CLIMAX:
            chance *= cfg.climax_multiplier
        if referee.consistency < cfg.incident_consistency_threshold:
            chance += (cfg.incident_consistency_threshold - referee.consistency) * cfg.incident_consistency_factor
        if referee.corruption > cfg.incident_corruption_threshold:
            chance += (referee.corruption - cfg.incident_corruption_threshold) * cfg.incident_corruption_factor
        if referee.fatigue > cfg.incident_fatigue_threshold:
            chance += (referee.fatigue - cfg.incident_fatigue_threshold) * cfg.incident_fatigue_factor
        if record.match_type.is_high_risk:
            chance *= cfg.high_risk_multiplier
        return min(chance, cfg.incident_max_chance)

    def eligible_incidents(self, referee: Referee, phase: MatchPhase) -> list[tuple[IncidentType, float]]:
        """Incident categories possible for this referee in this phase, with weights."""
        cfg = self.settings
        candidates: list[tuple[IncidentType, float]] = [
            (IncidentType.BUMP, 1.0),
            (IncidentType.KNOCKOUT, 1.0),
        ]
        if referee.corruption > cfg.incident_corruption_gate:
            weight = referee.corruption / 50 if referee.corruption > cfg.incident_corruption_threshold else 1.0
            candidates += [(t, weight) for t in CORRUPTION_INCIDENTS]
        if referee.consistency < cfg.incident_consistency_gate:
            weight = (100 - referee.consistency) / 50
            candidates += [(t, weight) for t in CONSISTENCY_INCIDENTS]
        if referee.strictness > cfg.incident_strictness_gate:
            weight = referee.strictness / 50
            candidates += [(t, weight) for t in STRICTNESS_INCIDENTS]
        return [(t, w) for t, w in candidates if INCIDENT_CATALOG[t].phase == phase]

    def check(self, state: MatchState, phase: MatchPhase, roster: RosterContext) -> RefereeIncident | None:
        """Roll for an incident in ``phase`` and apply it to the match.

        Args:
            state: Match state; scores, referee and log are updated.
            phase: The phase being simulated.
            roster: Roster context, for finding a replacement referee.

        Returns:
            The incident, or None if nothing happened.
        """
        referee = state.referee
        if referee is None:
            return None

        chance = self.incident_chance(referee, state.record, phase)
        if not self.rng.chance(chance / 100):
            return None

        candidates = self.eligible_incidents(referee, phase)
        if not candidates:
            return None
        types = [t for t, _ in candidates]
        weights = [w for _, w in candidates]
        spec = INCIDENT_CATALOG[self.rng.weighted_choice(types, weights)]

        incident = RefereeIncident(
            incident_type=spec.incident_type,
            description=spec.description.format(name=referee.name),
            rating_impact=self.rating_impact(spec.incident_type),
            requires_replacement=spec.requires_replacement,
            phase=phase,
        )
        state.incidents.append(incident)
        state.apply_to_all(incident.rating_impact)
        state.note(phase, incident.description)
        logger.debug(f"Referee incident in {phase.value}: {incident.description}")

        self._apply_to_referee(referee, spec)
        if incident.requires_replacement:
            self._replace(state, referee, roster)
        return incident

    def _apply_to_referee(self, referee: Referee, spec: IncidentSpec) -> None:
        career = referee.career
        referee.reputation -= 2 if spec.incident_type == IncidentType.KNOCKOUT else 1
        if spec.controversy:
            career.controversies += 1

        if spec.incident_type == IncidentType.BUMP:
            career.times_bumped += 1
            if self.rng.chance(self.settings.bump_injury_chance):
                referee.injure(1)
                logger.warning(f"Referee {referee.name} was hurt by a bump")
        elif spec.incident_type == IncidentType.KNOCKOUT:
            career.times_knocked_out += 1
            low, high = self.settings.knockout_injury_weeks
            referee.injure(self.rng.randint(low, high))
            logger.warning(f"Referee {referee.name} was knocked out")

    def _replace(self, state: MatchState, injured: Referee, roster: RosterContext) -> None:
        replacement = self.referee_system.find_replacement(injured, roster)
        if replacement is None:
            message = (
                f"No replacement available for {injured.name} in match "
                f"{state.record.id}; the match continues without a fresh referee"
            )
            logger.warning(message)
            state.warn(WarningCode.NO_REPLACEMENT_REFEREE, message)
            return

        state.referee = replacement
        state.replacement_referee = replacement
        if all(r.id != replacement.id for r in state.officials):
            state.officials.append(replacement)
        state.note(MatchPhase.CLIMAX, f"{replacement.name} ran in to take over")
        logger.info(f"{replacement.name} replaced {injured.name} in match {state.record.id}")
