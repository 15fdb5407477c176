"""
Phase State Machine

Advanced-mode simulation as a single forward pass:
Opening -> MidPhase -> Climax -> Aftermath. No phase repeats or runs
out of order.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from loguru import logger

from matchsim.errors import PhaseTransitionError
from matchsim.finishes import advanced_finish_table, roll_finish
from matchsim.models import PHASE_ORDER, MatchPhase, MatchState

if TYPE_CHECKING:
    from roster.context import RosterContext
    from matchsim.incidents import IncidentSystem
    from matchsim.performance import PerformanceCalculator
    from matchsim.referees import RefereeSystem
    from matchsim.rng import RandomSource
    from matchsim.settings import SimulationSettings


class MatchPhaseMachine:
    """
    Drives one advanced-mode match through its phases.

    The machine owns no roster data; it works on a MatchState created
    for this call and hands the finished state to ``aftermath``.
    """

    def __init__(
        self,
        state: MatchState,
        roster: RosterContext,
        settings: SimulationSettings,
        rng: RandomSource,
        performance: PerformanceCalculator,
        referees: RefereeSystem,
        incidents: IncidentSystem,
        aftermath: Callable[[MatchState], None],
    ) -> None:
        self.state = state
        self.roster = roster
        self.settings = settings
        self.rng = rng
        self.performance = performance
        self.referees = referees
        self.incidents = incidents
        self.aftermath = aftermath
        self.phase = MatchPhase.PENDING

    def enter(self, phase: MatchPhase) -> None:
        """Move to ``phase``; only the next phase in order is allowed."""
        current = PHASE_ORDER.index(self.phase)
        target = PHASE_ORDER.index(phase)
        if target != current + 1:
            raise PhaseTransitionError(
                f"Cannot move from {self.phase.value} to {phase.value}"
            )
        self.phase = phase

    def run(self) -> MatchState:
        """Run every phase in order and return the finished state."""
        self.enter(MatchPhase.OPENING)
        self.opening()
        self.enter(MatchPhase.MID_PHASE)
        self.mid_phase()
        self.enter(MatchPhase.CLIMAX)
        self.climax()
        self.enter(MatchPhase.AFTERMATH)
        self.aftermath(self.state)
        return self.state

    # -- phases --------------------------------------------------------------

    def opening(self) -> None:
        """Score everyone, set neutral momentum, let a veteran referee lift the pace."""
        state = self.state
        cfg = self.settings.phases
        self.performance.score_participants(state, self.roster)

        for competitor_id in state.scores:
            state.momentum[competitor_id] = cfg.opening_momentum

        referee = state.referee
        if referee is not None and referee.experience > cfg.veteran_referee_experience:
            state.apply_to_all(referee.experience * cfg.veteran_referee_factor)

        style = self.referees.style_descriptor(referee)
        name = referee.name if referee is not None else "nobody"
        state.note(MatchPhase.OPENING, f"The bell rings with {name} ({style}) in charge")
        logger.debug(f"Opening of {state.record.id}: referee style {style}")

    def mid_phase(self) -> None:
        """Momentum swings, a possible near fall and an incident check."""
        state = self.state
        cfg = self.settings.phases
        participants = state.participants

        shifts = self.rng.randint(cfg.min_momentum_shifts, cfg.max_momentum_shifts)
        for _ in range(shifts):
            leader = self.rng.choice(participants)
            gain = self.rng.uniform(cfg.shift_gain_min, cfg.shift_gain_max)
            state.momentum[leader.id] = min(cfg.momentum_cap, state.momentum[leader.id] + gain)
            state.scores[leader.id] += gain * cfg.shift_score_factor
            for other in participants:
                if other.id != leader.id:
                    state.momentum[other.id] = max(0.0, state.momentum[other.id] - gain / 2)
            state.note(MatchPhase.MID_PHASE, f"{leader.name} seizes control")

        if self.rng.chance(cfg.near_fall_chance):
            lucky = self.rng.choice(participants)
            state.scores[lucky.id] += cfg.near_fall_bonus
            state.note(MatchPhase.MID_PHASE, f"{lucky.name} kicks out at two and nine-tenths")

        if self.settings.referee_events_enabled:
            self.incidents.check(state, MatchPhase.MID_PHASE, self.roster)

    def climax(self) -> None:
        """Fold momentum in, pick the winner and finish, let the referee have a say."""
        state = self.state
        cfg = self.settings.phases

        for competitor_id, momentum in state.momentum.items():
            state.scores[competitor_id] += momentum * cfg.momentum_fold_weight

        winner_id = self.performance.pick_winner(state, cfg.winner_noise)
        finish = roll_finish(advanced_finish_table(state.record, self.settings.finishes), self.rng)

        if self.settings.referee_events_enabled:
            self.incidents.check(state, MatchPhase.CLIMAX, self.roster)

        finish, winner_id = self.referees.apply_finish_override(
            state.referee,
            finish,
            winner_id,
            state.participant_ids,
            self.roster.company.favored_ids,
        )
        state.winner_id = winner_id
        state.finish = finish

        modifier = self.referees.rating_modifier(state.referee, state.record)
        state.rating = self.performance.calculate_match_rating(state, self.roster, modifier)

        winner = next(c for c in state.participants if c.id == winner_id)
        state.note(MatchPhase.CLIMAX, f"{winner.name} wins by {finish.value}")
