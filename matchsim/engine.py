"""
Match Simulation Engine

Entry point for simulating a booked match: validates and resolves the
match record, assigns a referee, dispatches to the phase machine
(advanced) or the fast path (simple), runs the aftermath and writes the
result back into the record.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from loguru import logger

from diagnostics import diag
from matchsim.career import RefereeCareerManager
from matchsim.competitor_state import CompetitorStateUpdater
from matchsim.errors import MatchAlreadySimulatedError, NotEnoughParticipantsError
from matchsim.fast_path import FastPathSimulator
from matchsim.incidents import IncidentSystem
from matchsim.injuries import InjuryModel
from matchsim.models import (
    MatchPhase,
    MatchRecord,
    MatchState,
    SimulationMode,
    SimulationOutcome,
    SimulationWarning,
    WarningCode,
)
from matchsim.performance import PerformanceCalculator
from matchsim.phases import MatchPhaseMachine
from matchsim.referees import RefereeSystem
from matchsim.rng import NumpyRandomSource
from matchsim.settings import SimulationSettings

if TYPE_CHECKING:
    from roster.competitor import Competitor
    from roster.context import RosterContext
    from roster.ids import CompetitorId
    from matchsim.rng import RandomSource

AngleCallback = Callable[[SimulationOutcome], None]


class MatchSimulationEngine:
    """
    Wrestling match simulation engine.

    One engine holds the settings and the random source; the roster is
    passed explicitly on every call. Each call runs under the roster's
    lock, so matches sharing competitors or referees never interleave.
    """

    MIN_PARTICIPANTS = 2

    def __init__(
        self,
        settings: SimulationSettings | None = None,
        rng: RandomSource | None = None,
    ) -> None:
        """
        Initialize the engine.

        Args:
            settings: Tunable constants. Defaults to stock settings.
            rng: Random source. Defaults to a numpy generator seeded from
                ``settings.random_seed``.
        """
        self.settings = settings or SimulationSettings()
        self.rng = rng or NumpyRandomSource(self.settings.random_seed)

        self.performance = PerformanceCalculator(self.settings, self.rng)
        self.careers = RefereeCareerManager(self.settings.referees, self.rng)
        self.referees = RefereeSystem(self.settings.referees, self.rng, self.careers)
        self.incidents = IncidentSystem(self.settings.referees, self.rng, self.referees)
        self.injuries = InjuryModel(self.settings.injuries, self.rng)
        self.state_updater = CompetitorStateUpdater(self.settings.aftermath)
        self.fast_path = FastPathSimulator(self.settings, self.rng, self.performance, self.referees)

    # -- public API ----------------------------------------------------------

    def simulate(
        self,
        record: MatchRecord,
        roster: RosterContext,
        mode: SimulationMode | None = None,
        on_angle: AngleCallback | None = None,
    ) -> MatchRecord:
        """Simulate a match and return the populated record.

        Raises:
            NotEnoughParticipantsError: Fewer than two competitors resolve.
            MatchAlreadySimulatedError: The record already has a result.
        """
        return self.simulate_detailed(record, roster, mode, on_angle).record

    def simulate_detailed(
        self,
        record: MatchRecord,
        roster: RosterContext,
        mode: SimulationMode | None = None,
        on_angle: AngleCallback | None = None,
    ) -> SimulationOutcome:
        """Simulate a match and return the full outcome.

        Args:
            record: The booked match. Populated in place on success.
            roster: Roster context read and mutated by the simulation.
            mode: Advanced or simple. Defaults to ``settings.default_mode``.
            on_angle: Called with the outcome when a post-match storyline
                angle is triggered.

        Returns:
            SimulationOutcome with scores, injuries, incidents, warnings
            and the phase log.
        """
        mode = mode or self.settings.default_mode

        with roster.lock:
            with diag.timer("RESOLVE"):
                state = self._prepare(record, roster, mode)

            with diag.timer("SIM"):
                if mode == SimulationMode.SIMPLE:
                    self.fast_path.run(state, roster)
                    self._aftermath(state, roster)
                else:
                    MatchPhaseMachine(
                        state,
                        roster,
                        self.settings,
                        self.rng,
                        self.performance,
                        self.referees,
                        self.incidents,
                        aftermath=lambda s: self._aftermath(s, roster),
                    ).run()

            outcome = self._finish(state)

        if outcome.angle_triggered and on_angle is not None:
            on_angle(outcome)
        return outcome

    # -- steps ---------------------------------------------------------------

    def resolve_participants(
        self,
        record: MatchRecord,
        roster: RosterContext,
    ) -> tuple[list[Competitor], list[SimulationWarning]]:
        """Look up the record's competitors, skipping unknown and duplicate ids."""
        participants: list[Competitor] = []
        warnings: list[SimulationWarning] = []
        seen: set[CompetitorId] = set()

        for competitor_id in record.competitor_ids:
            competitor = roster.competitor(competitor_id)
            if competitor is None or competitor_id in seen:
                reason = "duplicate" if competitor_id in seen else "unknown"
                message = f"Skipping {reason} competitor {competitor_id} in match {record.id}"
                logger.warning(message)
                warnings.append(SimulationWarning(WarningCode.UNRESOLVED_PARTICIPANT, message))
                continue
            seen.add(competitor_id)
            participants.append(competitor)
        return participants, warnings

    def _prepare(self, record: MatchRecord, roster: RosterContext, mode: SimulationMode) -> MatchState:
        """Validate the record and build the per-call state. Mutates nothing."""
        if record.is_simulated:
            raise MatchAlreadySimulatedError(record.id)

        participants, warnings = self.resolve_participants(record, roster)
        if len(participants) < self.MIN_PARTICIPANTS:
            raise NotEnoughParticipantsError(record.id, len(participants))

        referee = roster.referee(record.referee_id)
        excluded = []
        if referee is not None and not self.referees.is_available(referee):
            message = (
                f"Assigned referee {referee.name} cannot work match {record.id}; "
                f"reassigning"
            )
            logger.warning(message)
            warnings.append(SimulationWarning(WarningCode.REFEREE_UNAVAILABLE, message))
            excluded.append(referee.id)
            referee = None
        if referee is None:
            referee, referee_warnings = self.referees.assign(record, roster, exclude=excluded)
            warnings.extend(referee_warnings)

        state = MatchState(
            record=record,
            participants=participants,
            weights=self.performance.weight_profile(record.match_type),
            mode=mode,
            referee=referee,
            booking_modifier=record.booking_modifier,
        )
        state.warnings.extend(warnings)
        if referee is not None:
            state.officials.append(referee)

        diag.event("RESOLVE", {
            "match": record.id,
            "mode": mode.value,
            "participants": len(participants),
            "referee": referee.name if referee else None,
            "warnings": len(warnings),
        }, level="normal")
        return state

    def _aftermath(self, state: MatchState, roster: RosterContext) -> None:
        """Referee careers, injuries, competitor drift and the angle roll."""
        with diag.timer("AFTERMATH"):
            record = state.record
            rating = state.rating
            finish = state.finish

            for official in state.officials:
                incidents = state.incidents if official is state.officials[0] else []
                self.careers.record_match(official, record, rating, finish, incidents)

            if self.settings.injuries_enabled:
                state.injuries = self.injuries.evaluate(
                    state.participants, record.match_type, state.mode, roster.doctor()
                )

            for competitor in state.participants:
                self.state_updater.apply(
                    competitor,
                    record,
                    won=competitor.id == state.winner_id,
                    rating=rating,
                    finish=finish,
                )

            state.angle_triggered = self.rng.chance(self.settings.aftermath.angle_chance)
            if state.angle_triggered:
                state.note(MatchPhase.AFTERMATH, "The fallout sets up a new storyline angle")

        diag.event("AFTERMATH", {
            "match": record.id,
            "injuries": len(state.injuries),
            "officials": len(state.officials),
            "angle": state.angle_triggered,
        }, level="verbose")

    def _finish(self, state: MatchState) -> SimulationOutcome:
        """Write the result into the record and build the outcome."""
        record = state.record
        original_referee = state.officials[0] if state.officials else None
        if original_referee is not None:
            record.referee_id = original_referee.id
        record.apply_result(state.winner_id, state.rating, state.finish)

        diag.assert_sanity("match_rating", state.rating, expected_range=(0, 100))
        diag.event("SIM", {
            "match": record.id,
            "winner": state.winner_id,
            "rating": state.rating,
            "finish": state.finish.value,
            "incidents": len(state.incidents),
        }, level="normal")

        winner = next(c for c in state.participants if c.id == state.winner_id)
        logger.info(
            f"Match {record.id} ({record.match_type.value}, {state.mode.value}): "
            f"{winner.name} wins by {state.finish.value}, rated {state.rating}"
        )

        return SimulationOutcome(
            record=record,
            mode=state.mode,
            winner_id=state.winner_id,
            rating=state.rating,
            finish=state.finish,
            referee_id=original_referee.id if original_referee else None,
            replacement_referee_id=(
                state.replacement_referee.id if state.replacement_referee else None
            ),
            scores=dict(state.scores),
            injuries=list(state.injuries),
            incidents=list(state.incidents),
            warnings=list(state.warnings),
            log=list(state.log),
            angle_triggered=state.angle_triggered,
        )
