"""
Referee Influence

Referee assignment, the referee's effect on the match rating, the
finish-type override and replacement after a knockout.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

from loguru import logger

from matchsim.career import RefereeCareerManager
from matchsim.models import (
    FinishType,
    MatchClass,
    MatchRecord,
    SimulationWarning,
    WarningCode,
)

if TYPE_CHECKING:
    from roster.context import RosterContext
    from roster.ids import CompetitorId, RefereeId
    from roster.referee import Referee
    from matchsim.rng import RandomSource
    from matchsim.settings import RefereeSettings


class RefereeSystem:
    """
    Policy for everything a referee does to a match apart from incidents.

    Override precedence is strictness, then corruption, then consistency.
    Only the first gate whose attribute crosses its threshold is rolled;
    the later gates are considered only if the earlier attribute did not
    qualify or its roll failed.
    """

    def __init__(
        self,
        settings: RefereeSettings,
        rng: RandomSource,
        careers: RefereeCareerManager | None = None,
    ) -> None:
        self.settings = settings
        self.rng = rng
        self.careers = careers or RefereeCareerManager(settings, rng)

    # -- assignment ----------------------------------------------------------

    def is_available(self, referee: Referee) -> bool:
        """Active, healthy, under the weekly cap and willing to take the booking."""
        return self.careers.can_work_match(referee)

    def assign(
        self,
        record: MatchRecord,
        roster: RosterContext,
        exclude: Iterable[RefereeId] = (),
    ) -> tuple[Referee | None, list[SimulationWarning]]:
        """Choose a referee for ``record``.

        Only available referees are ever chosen; a title match prefers
        veterans, and an unsuitable but available referee is used with a
        warning before the match goes ahead without one.

        Returns:
            The chosen referee (None if nobody can work) and any warnings.
        """
        warnings: list[SimulationWarning] = []
        excluded = set(exclude)
        available = [
            r for r in roster.active_referees()
            if r.id not in excluded and self.is_available(r)
        ]
        suitable = [r for r in available if r.is_suitable_for(record.is_title_match)]

        if suitable:
            return self._pick_suitable(record, suitable), warnings

        if not available:
            message = f"No available referees for match {record.id}; proceeding without one"
            logger.warning(message)
            warnings.append(SimulationWarning(WarningCode.NO_ACTIVE_REFEREE, message))
            return None, warnings

        fallback = available[0]
        message = (
            f"No suitable referee for match {record.id}; "
            f"falling back to {fallback.name}"
        )
        logger.warning(message)
        warnings.append(SimulationWarning(WarningCode.NO_SUITABLE_REFEREE, message))
        return fallback, warnings

    def _pick_suitable(self, record: MatchRecord, suitable: list[Referee]) -> Referee:
        if not record.is_title_match:
            return self.rng.choice(suitable)

        veterans = [
            r for r in suitable
            if r.experience >= self.settings.title_experience_threshold
        ]
        if veterans:
            return max(veterans, key=lambda r: r.quality)
        return max(suitable, key=lambda r: r.experience)

    def find_replacement(self, current: Referee, roster: RosterContext) -> Referee | None:
        """Most experienced available referee other than ``current``."""
        candidates = [
            r for r in roster.active_referees()
            if r.id != current.id and self.is_available(r)
        ]
        if not candidates:
            return None
        return max(candidates, key=lambda r: r.experience)

    # -- influence -----------------------------------------------------------

    def rating_modifier(self, referee: Referee | None, record: MatchRecord) -> float:
        """Additive rating modifier from referee quality; fatigue dulls the quality bonus."""
        if referee is None:
            return 0.0
        cfg = self.settings
        quality_bonus = (
            referee.experience / 100 * cfg.experience_bonus_max
            + referee.consistency / 100 * cfg.consistency_bonus_max
        )
        modifier = (
            quality_bonus * self.careers.effectiveness(referee)
            - referee.corruption / 100 * cfg.corruption_penalty_max
        )
        if referee.main_event and record.is_title_match:
            modifier += cfg.main_event_title_bonus
        if referee.hardcore_specialist and record.match_class == MatchClass.HARDCORE:
            modifier += cfg.hardcore_specialist_bonus
        return modifier

    def override_chances(self, referee: Referee) -> tuple[float, float, float]:
        """Per-gate override probabilities (0..1) for strictness, corruption, consistency."""
        cfg = self.settings
        strict = max(0, referee.strictness - cfg.strictness_threshold) * cfg.strictness_rate / 100
        corrupt = max(0, referee.corruption - cfg.corruption_threshold) * cfg.corruption_rate / 100
        sloppy = max(0, cfg.consistency_threshold - referee.consistency) * cfg.consistency_rate / 100
        return strict, corrupt, sloppy

    def apply_finish_override(
        self,
        referee: Referee | None,
        finish: FinishType,
        winner_id: CompetitorId,
        participant_ids: Iterable[CompetitorId],
        favored_ids: Iterable[CompetitorId] = (),
    ) -> tuple[FinishType, CompetitorId]:
        """Let the referee change how (and occasionally who) a match ends.

        Args:
            referee: Officiating referee, or None.
            finish: Finish rolled from the finish table.
            winner_id: Winner chosen by the simulation.
            participant_ids: Everyone in the match.
            favored_ids: Competitors the company favours; only a company-backed
                referee hands them a controversial win.

        Returns:
            The (finish, winner) pair after any override.
        """
        if referee is None:
            return finish, winner_id

        cfg = self.settings
        strict, corrupt, sloppy = self.override_chances(referee)

        if referee.strictness > cfg.strictness_threshold and self.rng.chance(strict):
            forced = FinishType.DQ if self.rng.chance(0.5) else FinishType.COUNT_OUT
            logger.debug(f"{referee.name} enforced the rules: {forced.value}")
            return forced, winner_id

        if referee.corruption > cfg.corruption_threshold and self.rng.chance(corrupt):
            if referee.company_favored:
                favored = [c for c in participant_ids if c in set(favored_ids)]
                if favored and winner_id not in favored:
                    winner_id = self.rng.choice(favored)
            logger.debug(f"{referee.name} produced a controversial finish")
            return FinishType.CONTROVERSIAL, winner_id

        if referee.consistency < cfg.consistency_threshold and self.rng.chance(sloppy):
            logger.debug(f"{referee.name} botched the finish")
            return FinishType.BOTCHED, winner_id

        return finish, winner_id

    @staticmethod
    def style_descriptor(referee: Referee | None) -> str:
        """Short description of how a referee calls a match."""
        if referee is None:
            return "absent"
        if referee.strictness > 70:
            return "strict"
        if referee.corruption > 60:
            return "corrupt"
        if referee.consistency < 40:
            return "erratic"
        if referee.experience >= 85:
            return "veteran"
        if referee.experience < 40:
            return "green"
        return "balanced"
