"""
Weekly and Monthly Advance

Calendar resets for the roster: injury countdown, fatigue recovery,
morale and momentum decay for idle competitors, workload counters and
the referee crew's own weekly advance.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from matchsim.career import RefereeCareerManager

if TYPE_CHECKING:
    from roster.competitor import Competitor
    from roster.context import RosterContext
    from matchsim.rng import RandomSource
    from matchsim.settings import SimulationSettings


def advance_competitor_week(competitor: Competitor, settings: SimulationSettings) -> None:
    """Advance one competitor by a week."""
    cfg = settings.aftermath

    if competitor.injury is not None:
        competitor.injury.weeks_remaining = max(0, competitor.injury.weeks_remaining - 1)
        if competitor.injury.weeks_remaining == 0:
            logger.info(f"{competitor.name} has recovered from {competitor.injury.description}")
            competitor.heal()

    recovery = cfg.weekly_fatigue_recovery + competitor.stamina / 20 * cfg.weekly_stamina_recovery
    if competitor.is_injured:
        recovery /= 2
    competitor.fatigue -= recovery

    competitor.morale -= cfg.weekly_morale_decay
    if not competitor.booked_this_week:
        competitor.morale -= cfg.unbooked_morale_decay
        competitor.momentum = competitor.momentum * (1 - cfg.unbooked_momentum_decay)

    competitor.matches_this_week = 0
    competitor.booked_this_week = False


def advance_week(
    roster: RosterContext,
    settings: SimulationSettings,
    rng: RandomSource,
) -> None:
    """Advance every competitor and referee on the roster by one week.

    Holds the roster lock for the duration.
    """
    careers = RefereeCareerManager(settings.referees, rng)
    with roster.lock:
        for competitor in roster.competitors.values():
            if competitor.retired:
                continue
            advance_competitor_week(competitor, settings)
        for referee in roster.referees.values():
            careers.advance_week(referee)
    logger.debug(
        f"Advanced week for {len(roster.competitors)} competitors "
        f"and {len(roster.referees)} referees"
    )


def advance_month(roster: RosterContext) -> None:
    """Reset monthly workload counters."""
    with roster.lock:
        for competitor in roster.competitors.values():
            competitor.matches_this_month = 0
