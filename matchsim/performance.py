"""
Performance & Rating Calculator

Per-competitor scoring (skills, traits, feuds, chemistry) and the
aggregate match rating. Shared by both simulation modes; the modes
differ only in the weights they pass in.
"""

from __future__ import annotations

from itertools import combinations
from typing import TYPE_CHECKING, Iterable

from roster.context import TraitEffect
from matchsim.models import (
    MatchClass,
    MatchRecord,
    MatchState,
    MatchType,
    SimulationMode,
    WeightProfile,
    quality_band,
)

if TYPE_CHECKING:
    from roster.competitor import Competitor
    from roster.context import RosterContext, Trait
    from roster.ids import CompetitorId
    from matchsim.rng import RandomSource
    from matchsim.settings import SimulationSettings

__all__ = ["PerformanceCalculator", "quality_band"]


class PerformanceCalculator:
    """
    Scores competitors and rates matches.

    Stateless apart from its settings and random source, so one instance
    can serve any number of sequential simulations.
    """

    def __init__(self, settings: SimulationSettings, rng: RandomSource) -> None:
        self.settings = settings
        self.rng = rng

    # -- weights -------------------------------------------------------------

    def weight_profile(self, match_type: MatchType) -> WeightProfile:
        """Skill weights for the match type's class, Singles if unknown."""
        profiles = self.settings.performance.weight_profiles
        values = profiles.get(match_type.match_class.value) or profiles.get(MatchClass.SINGLES.value)
        if not values:
            return WeightProfile()
        return WeightProfile(**values)

    # -- per competitor ------------------------------------------------------

    @staticmethod
    def is_home_crowd(competitor: Competitor, location: str) -> bool:
        """Hometown appears in the match location, ignoring case."""
        if not competitor.hometown or not location:
            return False
        return competitor.hometown.lower() in location.lower()

    def base_performance(
        self,
        competitor: Competitor,
        weights: WeightProfile,
        record: MatchRecord,
    ) -> float:
        """Weighted mean of the core skills with morale, home crowd and form.

        Args:
            competitor: The competitor to score.
            weights: Skill multipliers for the match class.
            record: The match being simulated (location lookup).

        Returns:
            Base performance score, roughly on the 0-100 skill scale.
        """
        cfg = self.settings.performance

        morale_factor = 1.0
        if competitor.morale >= cfg.high_morale_threshold:
            morale_factor = cfg.high_morale_multiplier
        elif competitor.morale <= cfg.low_morale_threshold:
            morale_factor = cfg.low_morale_multiplier

        technical = competitor.technical * morale_factor
        brawling = competitor.brawling * morale_factor
        psychology = competitor.psychology * morale_factor

        score = (
            technical * weights.technical
            + brawling * weights.brawling
            + psychology * weights.psychology
            + competitor.aerial * weights.aerial
        ) / 4

        if self.is_home_crowd(competitor, record.location):
            score *= cfg.hometown_bonus

        score *= 1 + self.rng.uniform(-cfg.form_variance, cfg.form_variance)
        return score

    def apply_trait_bonuses(
        self,
        score: float,
        competitor: Competitor,
        traits: Iterable[Trait],
        record: MatchRecord,
    ) -> float:
        """Apply each trait's rule to ``score``."""
        cfg = self.settings.traits
        for trait in traits:
            effect = trait.effect
            if effect == TraitEffect.CROWD_FAVOURITE:
                if self.is_home_crowd(competitor, record.location):
                    score *= cfg.crowd_favourite_multiplier
            elif effect == TraitEffect.HARDCORE_SPECIALIST:
                if record.match_class == MatchClass.HARDCORE:
                    score += cfg.hardcore_specialist_bonus
            elif effect == TraitEffect.SUBMISSION_EXPERT:
                score += self.rng.uniform(0, cfg.submission_expert_max_bonus)
            elif effect == TraitEffect.BIG_MATCH_PERFORMER:
                if record.is_title_match:
                    score *= cfg.big_match_multiplier
            elif effect == TraitEffect.LAZY_WORKER:
                if self.rng.chance(cfg.lazy_worker_chance):
                    score *= cfg.lazy_worker_multiplier
            elif effect == TraitEffect.CHEMISTRY_MASTER:
                score += cfg.chemistry_master_bonus
        return score

    def feud_heat_bonus(
        self,
        competitor: Competitor,
        roster: RosterContext,
        participant_ids: Iterable[CompetitorId],
    ) -> int:
        """Hottest active feud this competitor shares the card with, scaled down."""
        on_card = set(participant_ids)
        max_heat = 0
        for feud in roster.active_feuds_for(competitor.id):
            if len(feud.participants & on_card) >= 2:
                max_heat = max(max_heat, feud.heat)
        return max_heat // self.settings.performance.feud_heat_divisor

    def chemistry_modifiers(
        self,
        participants: list[Competitor],
        mode: SimulationMode = SimulationMode.ADVANCED,
    ) -> dict[CompetitorId, float]:
        """Pairwise friend/rival adjustments, applied once per unordered pair.

        Both sides of a mutual friendship gain the same bonus; both sides
        of a mutual rivalry lose it.
        """
        cfg = self.settings.performance
        if mode == SimulationMode.SIMPLE:
            friend_bonus = rival_penalty = cfg.simple_chemistry
        else:
            friend_bonus, rival_penalty = cfg.friends_chemistry, cfg.rivals_chemistry

        modifiers: dict[CompetitorId, float] = {c.id: 0.0 for c in participants}
        for a, b in combinations(participants, 2):
            if a.mutual_friend(b):
                modifiers[a.id] += friend_bonus
                modifiers[b.id] += friend_bonus
            elif a.mutual_rival(b):
                modifiers[a.id] -= rival_penalty
                modifiers[b.id] -= rival_penalty
        return modifiers

    def score_competitor(
        self,
        competitor: Competitor,
        state: MatchState,
        roster: RosterContext,
    ) -> float:
        """Base performance plus trait and feud bonuses."""
        score = self.base_performance(competitor, state.weights, state.record)
        score = self.apply_trait_bonuses(
            score, competitor, roster.traits_for(competitor), state.record
        )
        score += self.feud_heat_bonus(competitor, roster, state.participant_ids)
        return score

    def score_participants(self, state: MatchState, roster: RosterContext) -> None:
        """Fill ``state.scores`` for every participant, chemistry included."""
        chemistry = self.chemistry_modifiers(state.participants, state.mode)
        for competitor in state.participants:
            state.scores[competitor.id] = (
                self.score_competitor(competitor, state, roster) + chemistry[competitor.id]
            )

    # -- aggregate -----------------------------------------------------------

    @staticmethod
    def tag_chemistry_bonus(
        participant_ids: Iterable[CompetitorId],
        roster: RosterContext,
    ) -> float:
        """Sum of chemistry for each tag team with two or more members present."""
        on_card = set(participant_ids)
        return float(sum(
            team.chemistry
            for team in roster.tag_teams.values()
            if len(team.members & on_card) >= 2
        ))

    def staff_bonus(
        self,
        participant_ids: Iterable[CompetitorId],
        roster: RosterContext,
    ) -> float:
        """Manager and road-agent contributions from company staff."""
        cfg = self.settings.performance
        bonus = 0.0
        for competitor_id in participant_ids:
            manager = roster.manager_for(competitor_id)
            if manager is not None:
                bonus += (manager.charisma + manager.mic) / cfg.manager_divisor
        road_agent = roster.road_agent()
        if road_agent is not None:
            bonus += road_agent.psychology_influence / cfg.road_agent_divisor
        return bonus

    def calculate_match_rating(
        self,
        state: MatchState,
        roster: RosterContext,
        referee_modifier: float = 0.0,
    ) -> int:
        """Aggregate match quality on a 0-100 scale.

        Args:
            state: Match state with final competitor scores.
            roster: Roster context for tag teams and staff.
            referee_modifier: Referee quality modifier.

        Returns:
            Rating rounded and clamped to [0, 100].
        """
        weights = self.settings.rating_weights(state.mode)
        participants = state.participants
        count = len(participants)

        avg_score = sum(state.scores.values()) / count
        mean_psychology = sum(c.psychology for c in participants) / count
        mean_popularity = sum(c.popularity for c in participants) / count
        tag_bonus = self.tag_chemistry_bonus(state.participant_ids, roster)

        rating = (
            (avg_score + tag_bonus + referee_modifier) * weights.performance_weight
            + mean_psychology * weights.psychology_weight
            + mean_popularity * weights.popularity_weight
            + self.staff_bonus(state.participant_ids, roster)
            + state.booking_modifier
            + self.rng.uniform(-weights.noise, weights.noise)
        )
        return int(max(0, min(100, round(rating))))

    def pick_winner(self, state: MatchState, noise: float) -> CompetitorId:
        """Highest score after independent symmetric noise per competitor."""
        best_id = state.participants[0].id
        best_score = float("-inf")
        for competitor in state.participants:
            noisy = state.scores[competitor.id] + self.rng.uniform(-noise, noise)
            if noisy > best_score:
                best_id, best_score = competitor.id, noisy
        return best_id

    def quality(self, rating: float) -> str:
        cfg = self.settings.rating
        return quality_band(rating, cfg.good_threshold, cfg.great_threshold)
