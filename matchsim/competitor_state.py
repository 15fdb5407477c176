"""
Competitor State Drift

Post-match changes to a competitor's persistent condition: fatigue,
morale, momentum, popularity and workload counters. The Competitor
model clamps every value on assignment.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from matchsim.models import FinishType, MatchRecord

if TYPE_CHECKING:
    from roster.competitor import Competitor
    from matchsim.settings import AftermathSettings


class CompetitorStateUpdater:
    """Applies the aftermath of a match to each participant."""

    def __init__(self, settings: AftermathSettings) -> None:
        self.settings = settings

    def fatigue_gain(self, competitor: Competitor, record: MatchRecord) -> int:
        cfg = self.settings
        gain = cfg.fatigue_base + cfg.fatigue_type_extra.get(record.match_type.value, 0)
        if record.is_title_match:
            gain += cfg.title_fatigue
        gain -= competitor.stamina / cfg.stamina_divisor
        if competitor.fatigue > cfg.tired_threshold:
            gain += cfg.tired_extra
        return max(cfg.min_fatigue_gain, round(gain))

    def morale_change(self, won: bool, record: MatchRecord, finish: FinishType) -> int:
        cfg = self.settings
        if won:
            if record.is_main_event or record.is_title_match:
                return cfg.morale_big_win
            return cfg.morale_win
        return cfg.morale_clean_loss if finish.is_clean else cfg.morale_loss

    def momentum_change(self, won: bool, record: MatchRecord, rating: int, finish: FinishType) -> int:
        cfg = self.settings
        if won:
            if record.is_title_match:
                change = cfg.momentum_title_win
            elif rating > cfg.momentum_great_rating:
                change = cfg.momentum_great_win
            elif rating > cfg.momentum_good_rating:
                change = cfg.momentum_good_win
            else:
                change = cfg.momentum_win
        else:
            change = cfg.momentum_title_loss if record.is_title_match else cfg.momentum_loss

        if finish in (FinishType.PINFALL, FinishType.SUBMISSION):
            change *= cfg.momentum_clean_multiplier
        return round(change)

    def popularity_change(self, competitor: Competitor, record: MatchRecord, rating: int) -> int:
        cfg = self.settings
        change = next((step for floor, step in cfg.popularity_steps if rating >= floor), None)
        if change is None:
            change = cfg.popularity_flop_change if rating < cfg.popularity_flop_rating else 0
        if record.is_title_match:
            change += cfg.popularity_title_bonus
        if competitor.charisma > cfg.popularity_charisma_threshold:
            change *= cfg.popularity_charisma_multiplier
        return round(change)

    def apply(
        self,
        competitor: Competitor,
        record: MatchRecord,
        won: bool,
        rating: int,
        finish: FinishType,
    ) -> None:
        """Apply all post-match changes to one participant."""
        competitor.fatigue += self.fatigue_gain(competitor, record)
        competitor.morale += self.morale_change(won, record, finish)
        competitor.momentum += self.momentum_change(won, record, rating, finish)
        competitor.popularity += self.popularity_change(competitor, record, rating)
        competitor.matches_this_week += 1
        competitor.matches_this_month += 1
        competitor.booked_this_week = True
