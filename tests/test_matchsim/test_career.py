"""
Tests for Referee Career Management
"""

import pytest

from matchsim.career import RefereeCareerManager
from matchsim.models import FinishType, IncidentType, MatchPhase, MatchType, RefereeIncident


@pytest.fixture
def quiet_careers(settings, stub_rng):
    """Career manager whose chance rolls always fail."""
    return RefereeCareerManager(settings.referees, stub_rng(0.99))


class TestRecordMatch:
    """Tests for folding a match into a referee's career."""

    def test_clean_great_match(self, quiet_careers, make_referee, make_record):
        """Test counters, rating stats and workload after a great clean match."""
        referee = make_referee()
        record = make_record(is_title_match=True, is_main_event=True)

        earned = quiet_careers.record_match(referee, record, 90, FinishType.PINFALL)

        career = referee.career
        assert earned == []
        assert career.total_matches == 1
        assert career.title_matches == 1
        assert career.main_event_matches == 1
        assert career.hardcore_matches == 0
        assert career.matches_by_class == {"singles": 1}
        assert career.finishes == {"pinfall": 1}
        assert career.perfect_matches == 1
        assert career.average_rating == 90.0
        assert referee.reputation == 51
        assert referee.fatigue == 15
        assert referee.matches_this_week == 1
        assert not referee.is_injured

    def test_controversial_match(self, quiet_careers, make_referee, make_record):
        """Test a controversial finish counts against the referee."""
        referee = make_referee()

        quiet_careers.record_match(referee, make_record(), 40, FinishType.CONTROVERSIAL)

        assert referee.career.controversies == 1
        assert referee.career.perfect_matches == 0
        assert referee.reputation == 49

    def test_incidents_spoil_perfect_match(self, quiet_careers, make_referee, make_record):
        """Test a match with incidents is never perfect."""
        referee = make_referee()
        bump = RefereeIncident(IncidentType.BUMP, "bump", -2, phase=MatchPhase.MID_PHASE)

        quiet_careers.record_match(referee, make_record(), 95, FinishType.PINFALL, [bump])

        assert referee.career.perfect_matches == 0

    def test_extreme_match_counts_as_hardcore(self, quiet_careers, make_referee, make_record):
        """Test extreme match types are logged as hardcore work."""
        referee = make_referee()

        quiet_careers.record_match(
            referee, make_record(match_type=MatchType.LADDER), 70, FinishType.KNOCKOUT
        )

        assert referee.career.hardcore_matches == 1
        assert referee.career.matches_by_class == {"aerial": 1}

    def test_running_average(self, quiet_careers, make_referee, make_record):
        """Test the average and extremes over several matches."""
        referee = make_referee()
        for rating in (60, 80, 70):
            quiet_careers.record_match(referee, make_record(), rating, FinishType.PINFALL)

        career = referee.career
        assert career.average_rating == pytest.approx(70.0)
        assert career.highest_rating == 80
        assert career.lowest_rating == 60
        assert career.current_form == "Good"

    def test_milestone_achievement(self, quiet_careers, make_referee, make_record):
        """Test a match milestone is awarded once."""
        referee = make_referee()
        referee.career.total_matches = 99

        first = quiet_careers.record_match(referee, make_record(), 60, FinishType.PINFALL)
        second = quiet_careers.record_match(referee, make_record(), 60, FinishType.PINFALL)

        assert first == ["100 Matches"]
        assert second == []
        assert referee.career.achievements == ["100 Matches"]

    def test_milestones_from_settings(self, settings, stub_rng, make_referee, make_record):
        """Test achievement thresholds are read from settings."""
        tuned = settings.referees.model_copy(update={"match_milestones": (2,)})
        careers = RefereeCareerManager(tuned, stub_rng(0.99))
        referee = make_referee()

        first = careers.record_match(referee, make_record(), 60, FinishType.PINFALL)
        second = careers.record_match(referee, make_record(), 60, FinishType.PINFALL)

        assert first == []
        assert second == ["2 Matches"]


class TestRefereeInjury:
    """Tests for post-match referee injuries."""

    def test_injury_chance(self, quiet_careers, make_referee, make_record):
        """Test the multipliers stack."""
        referee = make_referee(fatigue=50, age=55)
        record = make_record(match_type=MatchType.HARDCORE)

        chance = quiet_careers.injury_chance(referee, record, knocked_out=True, bumped=False)

        assert chance == pytest.approx(67.5)

    def test_injured_after_match(self, settings, stub_rng, make_referee, make_record):
        """Test a successful roll sidelines the referee."""
        careers = RefereeCareerManager(settings.referees, stub_rng(0.0))
        referee = make_referee()

        careers.record_match(referee, make_record(), 70, FinishType.PINFALL)

        assert referee.injury_weeks == 1
        assert referee.career.injuries == 1

    def test_injury_length_from_settings(self, settings, stub_rng, make_referee, make_record):
        """Test the injury-week buckets are read from settings."""
        tuned = settings.referees.model_copy(update={"injury_minor_weeks": (4, 4)})
        careers = RefereeCareerManager(tuned, stub_rng(0.0))
        referee = make_referee()

        careers.record_match(referee, make_record(), 70, FinishType.PINFALL)

        assert referee.injury_weeks == 4


class TestAvailability:
    """Tests for workload checks."""

    def test_weekly_cap(self, quiet_careers, make_referee):
        """Test the weekly cap blocks further bookings."""
        assert quiet_careers.can_work_match(make_referee())
        assert not quiet_careers.can_work_match(make_referee(matches_this_week=5))

    def test_tired_referee_may_decline(self, settings, stub_rng, make_referee):
        """Test a tired referee can decline a booking."""
        tired = make_referee(fatigue=90)

        assert not RefereeCareerManager(settings.referees, stub_rng(0.0)).can_work_match(tired)
        assert RefereeCareerManager(settings.referees, stub_rng(0.99)).can_work_match(tired)

    def test_effectiveness(self, quiet_careers, make_referee):
        """Test fatigue costs up to thirty percent."""
        assert quiet_careers.effectiveness(make_referee()) == 1.0
        assert quiet_careers.effectiveness(make_referee(fatigue=100)) == pytest.approx(0.7)


class TestAdvanceWeek:
    """Tests for the weekly referee advance."""

    def test_recovery_and_reset(self, quiet_careers, make_referee):
        """Test fatigue recovery and the workload reset."""
        referee = make_referee(fatigue=50, matches_this_week=2)

        quiet_careers.advance_week(referee)

        assert referee.fatigue == 30
        assert referee.matches_this_week == 0
        assert referee.consecutive_weeks == 1

    def test_idle_week_resets_streak(self, quiet_careers, make_referee):
        """Test a week off breaks the consecutive-weeks streak."""
        referee = make_referee(consecutive_weeks=4)

        quiet_careers.advance_week(referee)

        assert referee.consecutive_weeks == 0

    def test_injury_countdown(self, quiet_careers, make_referee):
        """Test an injured referee heals instead of recovering fatigue."""
        referee = make_referee(injury_weeks=2, fatigue=50)

        quiet_careers.advance_week(referee)

        assert referee.injury_weeks == 1
        assert referee.fatigue == 50

    def test_development(self, settings, stub_rng, make_referee):
        """Test a successful development roll improves experience."""
        careers = RefereeCareerManager(settings.referees, stub_rng(0.0))
        referee = make_referee(experience=60)

        careers.advance_week(referee)

        assert referee.experience == 61

    def test_suspension_runs_out(self, quiet_careers, make_referee):
        """Test a suspended referee is reinstated when the suspension ends."""
        referee = make_referee()
        RefereeCareerManager.suspend(referee, 2, "fast counts")

        assert not referee.active
        assert referee.career.controversies == 1

        quiet_careers.advance_week(referee)
        assert not referee.active

        quiet_careers.advance_week(referee)
        assert referee.active
        assert referee.suspension_weeks == 0

    def test_retire(self, quiet_careers, make_referee):
        """Test a retired referee stays inactive."""
        referee = make_referee()
        RefereeCareerManager.retire(referee, "Knees")

        quiet_careers.advance_week(referee)

        assert not referee.active
        assert referee.career.achievements == ["Retired: Knees"]
