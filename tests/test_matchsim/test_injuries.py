"""
Tests for the Injury Model
"""

import pytest

from matchsim.injuries import InjuryModel
from matchsim.models import MatchType, SimulationMode
from matchsim.rng import NumpyRandomSource
from roster import InjurySeverity, StaffId, StaffMember, StaffRole


class TestInjuryRisk:
    """Tests for risk and severity."""

    def test_tired_competitor_in_tlc(self, settings, stub_rng, make_competitor):
        """Test the risk formula for a worn-out competitor in a TLC match."""
        model = InjuryModel(settings.injuries, stub_rng())
        competitor = make_competitor("w1", fatigue=95, toughness=20, stamina=50)

        risk = model.injury_risk(competitor, MatchType.TLC)

        assert risk == pytest.approx(56.8)
        assert model.severity_for(risk) == InjurySeverity.MAJOR

    def test_risk_is_capped(self, settings, stub_rng, make_competitor):
        """Test the ceiling holds for the worst possible competitor."""
        model = InjuryModel(settings.injuries, stub_rng())
        competitor = make_competitor("w1", fatigue=100, toughness=0, stamina=10)

        assert model.raw_risk(competitor, MatchType.TLC) == pytest.approx(114.0)
        assert model.injury_risk(competitor, MatchType.TLC) == 90

    def test_fresh_singles_is_low_risk(self, settings, stub_rng, make_competitor):
        """Test a rested competitor in a standard match."""
        model = InjuryModel(settings.injuries, stub_rng())
        competitor = make_competitor("w1")

        assert model.injury_risk(competitor, MatchType.SINGLES) == pytest.approx(1.5)

    @pytest.mark.parametrize(
        "risk,severity",
        [
            (0.0, InjurySeverity.MINOR),
            (9.99, InjurySeverity.MINOR),
            (10.0, InjurySeverity.MODERATE),
            (24.99, InjurySeverity.MODERATE),
            (25.0, InjurySeverity.MAJOR),
            (90.0, InjurySeverity.MAJOR),
        ],
    )
    def test_severity_thresholds(self, settings, stub_rng, risk, severity):
        """Test severity buckets never decrease as risk grows."""
        model = InjuryModel(settings.injuries, stub_rng())
        assert model.severity_for(risk) == severity

    def test_simple_risk(self, settings, stub_rng, make_competitor):
        """Test the reduced simple-mode risk."""
        model = InjuryModel(settings.injuries, stub_rng())
        competitor = make_competitor("w1")

        assert model.simple_injury_risk(competitor, MatchType.SINGLES) == pytest.approx(0.75)
        assert model.simple_injury_risk(competitor, MatchType.TLC) == pytest.approx(6.25)


class TestRecovery:
    """Tests for recovery time."""

    def test_doctor_shortens_recovery(self, settings, stub_rng):
        """Test the doctor's bonus scales recovery weeks down."""
        model = InjuryModel(settings.injuries, stub_rng(0.99))
        doctor = StaffMember(
            id=StaffId("doc"), name="Doc", role=StaffRole.DOCTOR, injury_recovery_bonus=50
        )

        assert model.recovery_weeks(InjurySeverity.MODERATE) == 12
        assert model.recovery_weeks(InjurySeverity.MODERATE, doctor) == 6

    def test_recovery_is_at_least_one_week(self, settings, stub_rng):
        """Test a large doctor bonus never zeroes the layoff."""
        model = InjuryModel(settings.injuries, stub_rng(0.0))
        doctor = StaffMember(
            id=StaffId("doc"), name="Doc", role=StaffRole.DOCTOR, injury_recovery_bonus=100
        )

        assert model.recovery_weeks(InjurySeverity.MINOR, doctor) == 1


class TestRolls:
    """Tests for applying injuries."""

    def test_roll_applies_major_injury(self, settings, stub_rng, make_competitor):
        """Test a successful roll injures and weakens the competitor."""
        model = InjuryModel(settings.injuries, stub_rng(0.0))
        competitor = make_competitor("w1", fatigue=95, toughness=20)

        report = model.roll(competitor, MatchType.TLC)

        assert report is not None
        assert report.severity == InjurySeverity.MAJOR
        assert report.weeks == 13
        assert report.description == "broken arm"
        assert competitor.is_injured
        assert competitor.injury.weeks_remaining == 13
        assert competitor.technical == 56
        assert competitor.brawling == 49

    def test_failed_roll(self, settings, stub_rng, make_competitor):
        """Test a failed roll changes nothing."""
        model = InjuryModel(settings.injuries, stub_rng(0.99))
        competitor = make_competitor("w1")

        assert model.roll(competitor, MatchType.SINGLES) is None
        assert competitor.injury is None
        assert competitor.technical == 80

    def test_already_injured_is_skipped(self, settings, stub_rng, make_competitor):
        """Test an injured competitor is not injured again."""
        model = InjuryModel(settings.injuries, stub_rng(0.0))
        competitor = make_competitor("w1")
        model.roll(competitor, MatchType.TLC)
        technical = competitor.technical

        assert model.roll(competitor, MatchType.TLC) is None
        assert competitor.technical == technical

    def test_simple_roll_is_minor(self, settings, stub_rng, make_competitor):
        """Test simple mode applies a short minor injury and a stamina hit."""
        model = InjuryModel(settings.injuries, stub_rng(0.0))
        competitor = make_competitor("w1")

        report = model.roll_simple(competitor, MatchType.TLC)

        assert report.severity == InjurySeverity.MINOR
        assert report.weeks == 1
        assert competitor.stamina == 47
        assert competitor.technical == 80

    def test_evaluate_by_mode(self, settings, stub_rng, make_competitor):
        """Test evaluate rolls every participant using the mode's rules."""
        model = InjuryModel(settings.injuries, stub_rng(0.0))
        participants = [make_competitor("w1"), make_competitor("w2")]

        reports = model.evaluate(participants, MatchType.SINGLES, SimulationMode.SIMPLE)

        assert [r.competitor_id for r in reports] == ["w1", "w2"]
        assert all(r.severity == InjurySeverity.MINOR for r in reports)

    def test_injury_rate_tracks_risk(self, settings, make_competitor):
        """Test the observed injury rate is close to the computed risk."""
        model = InjuryModel(settings.injuries, NumpyRandomSource(seed=7))

        injured = 0
        trials = 400
        for _ in range(trials):
            competitor = make_competitor("w1", fatigue=95, toughness=20)
            if model.roll(competitor, MatchType.TLC) is not None:
                injured += 1

        assert 0.45 <= injured / trials <= 0.68
