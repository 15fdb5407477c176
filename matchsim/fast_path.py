"""
Fast-Path Simulator

Simple-mode simulation: one pass, no momentum phases and no referee
incidents. Uses the same scoring functions as the phase machine with
reduced weights, so results land in the same quality bands.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from matchsim.finishes import roll_finish, simple_finish_table
from matchsim.models import MatchPhase, MatchState

if TYPE_CHECKING:
    from roster.context import RosterContext
    from matchsim.performance import PerformanceCalculator
    from matchsim.referees import RefereeSystem
    from matchsim.rng import RandomSource
    from matchsim.settings import SimulationSettings


class FastPathSimulator:
    """Single-pass simulator for bulk and offscreen matches."""

    def __init__(
        self,
        settings: SimulationSettings,
        rng: RandomSource,
        performance: PerformanceCalculator,
        referees: RefereeSystem,
    ) -> None:
        self.settings = settings
        self.rng = rng
        self.performance = performance
        self.referees = referees

    def run(self, state: MatchState, roster: RosterContext) -> MatchState:
        """Score, pick a winner and finish, and rate the match."""
        self.performance.score_participants(state, roster)

        winner_id = self.performance.pick_winner(state, self.settings.phases.simple_winner_noise)
        finish = roll_finish(simple_finish_table(state.record, self.settings.finishes), self.rng)
        finish, winner_id = self.referees.apply_finish_override(
            state.referee,
            finish,
            winner_id,
            state.participant_ids,
            roster.company.favored_ids,
        )
        state.winner_id = winner_id
        state.finish = finish

        modifier = self.referees.rating_modifier(state.referee, state.record)
        state.rating = self.performance.calculate_match_rating(state, roster, modifier)
        state.note(MatchPhase.CLIMAX, f"{winner_id} wins by {finish.value}")
        return state
