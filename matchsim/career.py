"""
Referee Career Management

Records officiated matches into a referee's career statistics, tracks
workload and post-match injuries, hands out achievements and advances
referees week by week.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

from loguru import logger

from matchsim.models import FinishType, IncidentType, MatchRecord, RefereeIncident

if TYPE_CHECKING:
    from roster.referee import Referee
    from matchsim.rng import RandomSource
    from matchsim.settings import RefereeSettings


class RefereeCareerManager:
    """Career bookkeeping for referees."""

    def __init__(self, settings: RefereeSettings, rng: RandomSource) -> None:
        self.settings = settings
        self.rng = rng

    # -- per match -----------------------------------------------------------

    def record_match(
        self,
        referee: Referee,
        record: MatchRecord,
        rating: int,
        finish: FinishType,
        incidents: Iterable[RefereeIncident] = (),
    ) -> list[str]:
        """Fold one officiated match into the referee's career.

        Args:
            referee: The referee who worked the match.
            record: The match.
            rating: Final match rating.
            finish: Final finish type.
            incidents: Referee incidents that happened in the match.

        Returns:
            Achievements newly earned by this match.
        """
        cfg = self.settings
        career = referee.career
        incidents = list(incidents)
        incident_types = {i.incident_type for i in incidents}

        career.total_matches += 1
        if record.is_title_match:
            career.title_matches += 1
        if record.is_main_event:
            career.main_event_matches += 1
        if record.match_type.is_extreme:
            career.hardcore_matches += 1
        match_class = record.match_class.value
        career.matches_by_class[match_class] = career.matches_by_class.get(match_class, 0) + 1

        career.finishes[finish.value] = career.finishes.get(finish.value, 0) + 1
        if finish.is_controversy:
            career.controversies += 1

        career.push_rating(rating)

        if rating >= cfg.perfect_match_rating and not incidents and finish.is_clean:
            career.perfect_matches += 1

        if rating >= cfg.reputation_up_rating:
            referee.reputation += 1
        elif rating < cfg.reputation_down_rating:
            referee.reputation -= 1

        referee.fatigue += cfg.fatigue_per_match
        referee.matches_this_week += 1

        self._check_for_injury(
            referee,
            record,
            knocked_out=IncidentType.KNOCKOUT in incident_types,
            bumped=IncidentType.BUMP in incident_types,
        )
        return self._check_achievements(referee)

    def injury_chance(self, referee: Referee, record: MatchRecord, knocked_out: bool, bumped: bool) -> float:
        """Post-match injury chance, in percent."""
        cfg = self.settings
        chance = cfg.injury_base_chance + referee.fatigue * cfg.injury_fatigue_factor
        if record.match_type.is_extreme:
            chance *= cfg.injury_extreme_multiplier
        if knocked_out:
            chance *= cfg.injury_knockout_multiplier
        elif bumped:
            chance *= cfg.injury_bump_multiplier
        if referee.age > cfg.injury_age_threshold:
            chance *= cfg.injury_age_multiplier
        return chance

    def _check_for_injury(self, referee: Referee, record: MatchRecord, knocked_out: bool, bumped: bool) -> None:
        if referee.is_injured:
            return
        chance = self.injury_chance(referee, record, knocked_out, bumped)
        if not self.rng.chance(chance / 100):
            return
        cfg = self.settings
        if chance < cfg.injury_minor_below:
            low, high = cfg.injury_minor_weeks
        elif chance < cfg.injury_moderate_below:
            low, high = cfg.injury_moderate_weeks
        else:
            low, high = cfg.injury_major_weeks
        weeks = self.rng.randint(low, high)
        referee.injure(weeks)
        logger.warning(f"Referee {referee.name} was injured and is out {weeks} weeks")

    def _check_achievements(self, referee: Referee) -> list[str]:
        cfg = self.settings
        career = referee.career
        earned = []

        def award(name: str) -> None:
            if name not in career.achievements:
                career.achievements.append(name)
                earned.append(name)
                logger.info(f"Referee {referee.name} earned achievement: {name}")

        for milestone in cfg.match_milestones:
            if career.total_matches >= milestone:
                award(f"{milestone} Matches")
        if career.perfect_matches >= cfg.perfect_match_milestone:
            award(f"{cfg.perfect_match_milestone} Perfect Matches")
        if career.total_matches >= cfg.elite_min_matches and career.average_rating >= cfg.elite_average:
            award("Elite Referee")
        if career.title_matches >= cfg.title_specialist_matches:
            award("Title Match Specialist")
        if career.finish_count(FinishType.CONTROVERSIAL.value) >= cfg.controversial_figure_finishes:
            award("Controversial Figure")
        return earned

    # -- availability --------------------------------------------------------

    def can_work_match(self, referee: Referee) -> bool:
        """Whether the referee takes another booking; tired referees may decline."""
        cfg = self.settings
        if not referee.active or referee.is_injured:
            return False
        if referee.matches_this_week >= cfg.weekly_match_cap:
            return False
        if referee.fatigue > cfg.tired_decline_threshold:
            decline = (referee.fatigue - cfg.tired_decline_threshold) * cfg.tired_decline_rate
            if self.rng.chance(decline / 100):
                return False
        return True

    def effectiveness(self, referee: Referee) -> float:
        """Multiplier on the referee's quality bonus; fatigue costs up to 30% by default."""
        return 1.0 - referee.fatigue / 100 * self.settings.fatigue_effectiveness_loss

    # -- weekly --------------------------------------------------------------

    def advance_week(self, referee: Referee) -> None:
        """Injury countdown, fatigue recovery, workload reset and development."""
        if referee.suspension_weeks > 0:
            referee.suspension_weeks -= 1
            if referee.suspension_weeks == 0:
                self.reinstate(referee)
                logger.info(f"Referee {referee.name} is back from suspension")
            return
        if not referee.active:
            return

        if referee.is_injured:
            referee.injury_weeks -= 1
            if not referee.is_injured:
                logger.info(f"Referee {referee.name} has recovered from injury")
            return

        referee.fatigue -= self.settings.weekly_fatigue_recovery
        if referee.matches_this_week > 0:
            referee.consecutive_weeks += 1
        else:
            referee.consecutive_weeks = 0
        referee.matches_this_week = 0
        self._develop(referee)

    def _develop(self, referee: Referee) -> None:
        rate = 0.02 if referee.age < 35 else 0.01
        if referee.career.current_form == "Excellent":
            rate *= 2
        if not self.rng.chance(rate):
            return
        stat = self.rng.randint(0, 2)
        if stat == 0:
            referee.experience += 1
        elif stat == 1:
            referee.consistency += 1
        elif referee.corruption > 0 and self.rng.chance(0.5):
            referee.corruption -= 1

    # -- status --------------------------------------------------------------

    @staticmethod
    def suspend(referee: Referee, weeks: int, reason: str) -> None:
        """Take a referee off the active list for ``weeks``."""
        referee.active = False
        referee.suspension_weeks = weeks
        referee.career.controversies += 1
        logger.warning(f"Referee {referee.name} suspended for {weeks} weeks: {reason}")

    @staticmethod
    def reinstate(referee: Referee) -> None:
        referee.active = True
        referee.suspension_weeks = 0

    @staticmethod
    def retire(referee: Referee, reason: str = "Career End") -> None:
        referee.active = False
        referee.career.achievements.append(f"Retired: {reason}")
        logger.info(
            f"Referee {referee.name} retired after {referee.career.total_matches} matches"
        )
