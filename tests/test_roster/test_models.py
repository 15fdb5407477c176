"""
Tests for Roster Data Models
"""

import pytest

from roster import (
    Company,
    CompetitorId,
    Feud,
    FeudId,
    InjurySeverity,
    InjuryStatus,
    RefereeCareerStats,
    RosterContext,
    StaffId,
    StaffMember,
    StaffRole,
    TagTeam,
    TagTeamId,
    Trait,
    TraitEffect,
    TraitId,
    default_referees,
)


class TestCompetitor:
    """Tests for the Competitor model."""

    def test_bounded_fields_clamp_on_construction(self, make_competitor):
        """Test out-of-range values are clamped when the model is built."""
        competitor = make_competitor(technical=140, fatigue=-20, momentum=-250)

        assert competitor.technical == 100
        assert competitor.fatigue == 0
        assert competitor.momentum == -100

    def test_bounded_fields_clamp_on_assignment(self, make_competitor):
        """Test in-place arithmetic never escapes the declared ranges."""
        competitor = make_competitor(fatigue=90, morale=10, momentum=90, popularity=99)

        competitor.fatigue += 40
        competitor.morale -= 25
        competitor.momentum += 30
        competitor.popularity += 5

        assert competitor.fatigue == 100
        assert competitor.morale == 0
        assert competitor.momentum == 100
        assert competitor.popularity == 100

    def test_float_assignment_rounds(self, make_competitor):
        """Test fractional values are rounded to whole points."""
        competitor = make_competitor()
        competitor.technical = 79.6
        assert competitor.technical == 80

    def test_mutual_relationships(self, make_competitor):
        """Test friendship and rivalry require both sides."""
        a = make_competitor("a", friends={CompetitorId("b")}, rivals={CompetitorId("c")})
        b = make_competitor("b", friends={CompetitorId("a")})
        c = make_competitor("c")

        assert a.mutual_friend(b)
        assert b.mutual_friend(a)
        assert not a.mutual_rival(c)

        c.rivals.add(CompetitorId("a"))
        assert a.mutual_rival(c)

    def test_apply_injury_penalizes_stats(self, make_competitor):
        """Test an injury marks the competitor and scales physical stats."""
        competitor = make_competitor(stamina=50)
        status = InjuryStatus(severity=InjurySeverity.MAJOR, weeks_remaining=20, description="torn ACL")

        competitor.apply_injury(status, 0.7)

        assert competitor.is_injured
        assert not competitor.is_available
        assert competitor.technical == 56
        assert competitor.brawling == 49
        assert competitor.aerial == 42
        assert competitor.stamina == 35
        # Psychology is untouched
        assert competitor.psychology == 75

    def test_heal_clears_injury(self, make_competitor):
        """Test healing returns the competitor to healthy."""
        competitor = make_competitor()
        competitor.apply_injury(InjuryStatus(severity=InjurySeverity.MINOR), 1.0)

        competitor.heal()

        assert competitor.injury is None
        assert competitor.is_available

    def test_retired_is_unavailable(self, make_competitor):
        """Test retired competitors are not available."""
        assert not make_competitor(retired=True).is_available


class TestReferee:
    """Tests for the Referee model."""

    def test_quality(self, make_referee):
        """Test quality combines experience, consistency and honesty."""
        referee = make_referee(experience=90, consistency=90, corruption=20)
        assert referee.quality == pytest.approx(260 / 3)

    def test_suitability(self, make_referee):
        """Test inexperienced main-event referees are kept off title matches."""
        green_main_event = make_referee(main_event=True, experience=50)
        specialist = make_referee(hardcore_specialist=True, active=False)

        assert not green_main_event.is_suitable_for(is_title_match=True)
        assert green_main_event.is_suitable_for(is_title_match=False)
        assert specialist.is_suitable_for(is_title_match=True)

    def test_injure_keeps_longest_layoff(self, make_referee):
        """Test a second injury never shortens the layoff."""
        referee = make_referee()
        referee.injure(3)
        referee.injure(1)

        assert referee.injury_weeks == 3
        assert referee.is_injured
        assert referee.career.injuries == 2

    def test_default_referees(self):
        """Test the stock crew."""
        referees = default_referees()
        by_name = {r.name: r for r in referees}

        assert len(referees) == 7
        assert len({r.id for r in referees}) == 7
        assert by_name["Earl Hebner"].main_event
        assert by_name["Nick Patrick"].company_favored
        assert by_name["Bryce Remsburg"].hardcore_specialist
        assert by_name["Rookie Ref"].experience == 25


class TestRefereeCareerStats:
    """Tests for career statistics bookkeeping."""

    def test_push_rating_running_average(self):
        """Test the running average and extremes."""
        stats = RefereeCareerStats()
        for rating in (60, 80, 70):
            stats.total_matches += 1
            stats.push_rating(rating)

        assert stats.average_rating == pytest.approx(70.0)
        assert stats.highest_rating == 80
        assert stats.lowest_rating == 60

    def test_recent_window_is_bounded(self):
        """Test only the last ten ratings are kept."""
        stats = RefereeCareerStats()
        for rating in range(12):
            stats.total_matches += 1
            stats.push_rating(rating)

        assert stats.recent_ratings == list(range(2, 12))

    def test_current_form(self):
        """Test the form label follows the recent average."""
        stats = RefereeCareerStats()
        assert stats.current_form == "Unknown"

        stats.recent_ratings = [85, 82, 90]
        assert stats.current_form == "Excellent"

        stats.recent_ratings = [40, 45, 42]
        assert stats.current_form == "Struggling"

    def test_specialty(self):
        """Test specialty inferred from match mix."""
        stats = RefereeCareerStats(total_matches=5)
        assert stats.specialty == "Developing"

        stats = RefereeCareerStats(total_matches=20, hardcore_matches=10)
        assert stats.specialty == "Hardcore Specialist"

        stats = RefereeCareerStats(total_matches=20, title_matches=8)
        assert stats.specialty == "Main Event Specialist"

        stats = RefereeCareerStats(total_matches=20)
        assert stats.specialty == "All-Rounder"


class TestRosterContext:
    """Tests for RosterContext lookups."""

    @pytest.fixture
    def context(self, make_competitor):
        a = make_competitor("a", trait_ids=[TraitId("t1"), TraitId("missing")])
        b = make_competitor("b")
        return RosterContext.build(
            competitors=[a, b],
            referees=default_referees(),
            traits=[Trait(id=TraitId("t1"), name="Lazy", effect=TraitEffect.LAZY_WORKER)],
            feuds=[
                Feud(id=FeudId("f1"), participants={CompetitorId("a"), CompetitorId("b")}, heat=60),
                Feud(id=FeudId("f2"), participants={CompetitorId("a")}, heat=90, active=False),
            ],
            tag_teams=[TagTeam(id=TagTeamId("t"), name="T", members={CompetitorId("a"), CompetitorId("b")})],
            staff=[
                StaffMember(id=StaffId("m"), name="Manager", role=StaffRole.MANAGER),
                StaffMember(id=StaffId("d"), name="Doc", role=StaffRole.DOCTOR, injury_recovery_bonus=25),
            ],
            company=Company(managers={CompetitorId("a"): StaffId("m")}, doctor_id=StaffId("d")),
        )

    def test_build_keeps_instances(self, make_competitor):
        """Test the context holds the same objects it was built from."""
        competitor = make_competitor("x")
        context = RosterContext.build(competitors=[competitor])
        assert context.competitor(CompetitorId("x")) is competitor

    def test_lookups(self, context):
        """Test id lookups and unknown ids."""
        assert context.competitor(CompetitorId("a")).name == "A"
        assert context.competitor(CompetitorId("zzz")) is None
        assert context.referee(None) is None
        assert len(context.active_referees()) == 7

    def test_traits_skip_unknown_ids(self, context):
        """Test unresolvable trait ids are ignored."""
        traits = context.traits_for(context.competitors[CompetitorId("a")])
        assert [t.id for t in traits] == ["t1"]

    def test_active_feuds_only(self, context):
        """Test inactive feuds are not returned."""
        feuds = context.active_feuds_for(CompetitorId("a"))
        assert [f.id for f in feuds] == ["f1"]

    def test_staff_lookups(self, context):
        """Test manager, road agent and doctor resolution."""
        assert context.manager_for(CompetitorId("a")).name == "Manager"
        assert context.manager_for(CompetitorId("b")) is None
        assert context.road_agent() is None
        assert context.doctor().injury_recovery_bonus == 25

    def test_lock_is_reentrant(self, context):
        """Test the roster lock can be taken twice by the same thread."""
        with context.lock:
            with context.lock:
                assert True

    def test_feud_heat_clamped(self):
        """Test feud heat stays within [0, 100]."""
        feud = Feud(id=FeudId("f"), participants=set(), heat=150)
        assert feud.heat == 100
