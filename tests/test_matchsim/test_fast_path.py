"""
Tests for the Fast-Path Simulator and Finish Tables
"""

import pytest

from matchsim.fast_path import FastPathSimulator
from matchsim.finishes import advanced_finish_table, roll_finish, simple_finish_table
from matchsim.models import FinishType, MatchState, MatchType, SimulationMode
from matchsim.performance import PerformanceCalculator
from matchsim.referees import RefereeSystem


class TestFinishTables:
    """Tests for the finish weight tables."""

    def test_advanced_default(self, settings, make_record):
        """Test the stock advanced table."""
        table = advanced_finish_table(make_record(), settings.finishes)
        assert table[FinishType.PINFALL] == 60
        assert sum(table.values()) == 100

    def test_advanced_hardcore(self, settings, make_record):
        """Test hardcore-class matches favour knockouts."""
        table = advanced_finish_table(make_record(match_type=MatchType.TLC), settings.finishes)
        assert table[FinishType.KNOCKOUT] == 30

    def test_simple_no_dq(self, settings, make_record):
        """Test no-DQ types cannot end in a disqualification."""
        table = simple_finish_table(make_record(match_type=MatchType.HARDCORE), settings.finishes)
        assert table[FinishType.DQ] == 0
        assert table[FinishType.KNOCKOUT] == 23

    def test_simple_submission(self, settings, make_record):
        """Test submission matches favour submissions."""
        table = simple_finish_table(make_record(match_type=MatchType.I_QUIT), settings.finishes)
        assert table[FinishType.SUBMISSION] == 60

    def test_simple_last_man_standing(self, settings, make_record):
        """Test last man standing favours knockouts over pinfalls."""
        table = simple_finish_table(
            make_record(match_type=MatchType.LAST_MAN_STANDING), settings.finishes
        )
        assert table[FinishType.KNOCKOUT] == 38
        assert table[FinishType.PINFALL] == 10

    def test_roll_finish(self, stub_rng):
        """Test the weighted roll and the empty-table default."""
        table = {FinishType.PINFALL: 0.0, FinishType.SUBMISSION: 1.0}
        assert roll_finish(table, stub_rng(0.5)) == FinishType.SUBMISSION
        assert roll_finish({}, stub_rng(0.5)) == FinishType.PINFALL


class TestFastPathSimulator:
    """Tests for the simple-mode simulator."""

    def _run(self, settings, rng, roster, record, referee_id="ref_earl"):
        performance = PerformanceCalculator(settings, rng)
        referees = RefereeSystem(settings.referees, rng)
        state = MatchState(
            record=record,
            participants=[roster.competitors[c] for c in record.competitor_ids],
            weights=performance.weight_profile(record.match_type),
            mode=SimulationMode.SIMPLE,
            referee=roster.referee(referee_id),
        )
        return FastPathSimulator(settings, rng, performance, referees).run(state, roster)

    def test_deterministic_result(self, settings, stub_rng, roster, make_record):
        """Test the single pass with zero noise."""
        state = self._run(settings, stub_rng(0.5), roster, make_record())

        assert state.winner_id == "w1"
        assert state.finish == FinishType.PINFALL
        assert state.rating == 67
        assert state.incidents == []
        assert state.momentum == {}

    def test_no_referee(self, settings, stub_rng, roster, make_record):
        """Test the fast path works without a referee."""
        state = self._run(settings, stub_rng(0.5), roster, make_record(), referee_id=None)

        assert state.winner_id == "w1"
        assert state.rating == 63

    def test_seeded_runs_repeat(self, settings, roster, make_record):
        """Test the same seed gives the same result."""
        from matchsim.rng import NumpyRandomSource

        first = self._run(settings, NumpyRandomSource(5), roster, make_record())
        second = self._run(settings, NumpyRandomSource(5), roster, make_record())

        assert (first.winner_id, first.finish, first.rating) == (
            second.winner_id, second.finish, second.rating
        )
