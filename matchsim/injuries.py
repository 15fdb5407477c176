"""
Injury Model

Independent per-competitor injury rolls after a match. Advanced mode
uses the full severity distribution; simple mode uses a reduced-risk
variant that only ever produces minor injuries.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from roster.competitor import InjurySeverity, InjuryStatus
from matchsim.models import InjuryReport, MatchType, SimulationMode

if TYPE_CHECKING:
    from roster.competitor import Competitor
    from roster.context import StaffMember
    from matchsim.rng import RandomSource
    from matchsim.settings import InjurySettings


class InjuryModel:
    """Evaluates and applies match injuries.

    Risks are expressed as percentages (0-100).
    """

    def __init__(self, settings: InjurySettings, rng: RandomSource) -> None:
        self.settings = settings
        self.rng = rng

    # -- risk ----------------------------------------------------------------

    def type_risk(self, match_type: MatchType) -> float:
        return self.settings.type_risk.get(match_type.value, self.settings.standard_risk)

    def raw_risk(self, competitor: Competitor, match_type: MatchType) -> float:
        """Injury risk before the ceiling is applied."""
        cfg = self.settings
        fatigue_excess = max(0, competitor.fatigue - cfg.fatigue_threshold)
        risk = cfg.base_chance + fatigue_excess * cfg.fatigue_factor + self.type_risk(match_type)
        risk *= (100 - competitor.toughness) / 100
        if competitor.stamina < cfg.low_stamina_threshold:
            risk *= cfg.low_stamina_multiplier
        return risk

    def injury_risk(self, competitor: Competitor, match_type: MatchType) -> float:
        """Advanced-mode injury risk, capped at the configured ceiling."""
        return min(self.raw_risk(competitor, match_type), self.settings.max_chance)

    def simple_injury_risk(self, competitor: Competitor, match_type: MatchType) -> float:
        cfg = self.settings
        type_risk = cfg.simple_type_risk.get(match_type.value, cfg.simple_standard_risk)
        risk = (cfg.simple_base_chance + type_risk) * (100 - competitor.toughness) / 100
        return min(risk, cfg.max_chance)

    # -- severity ------------------------------------------------------------

    def severity_for(self, risk: float) -> InjurySeverity:
        """Bucket a risk magnitude; monotonically non-decreasing in ``risk``."""
        if risk < self.settings.minor_threshold:
            return InjurySeverity.MINOR
        if risk < self.settings.moderate_threshold:
            return InjurySeverity.MODERATE
        return InjurySeverity.MAJOR

    def recovery_weeks(self, severity: InjurySeverity, doctor: StaffMember | None = None) -> int:
        """Random recovery time for ``severity``, shortened by the team doctor."""
        low, high = self.settings.recovery_weeks[severity.name.lower()]
        weeks = self.rng.randint(low, high)
        if doctor is not None and doctor.injury_recovery_bonus > 0:
            weeks = round(weeks * (100 - doctor.injury_recovery_bonus) / 100)
        return max(1, weeks)

    def label_for(self, severity: InjurySeverity) -> str:
        labels = self.settings.labels.get(severity.name.lower()) or ["unknown injury"]
        return self.rng.choice(labels)

    # -- rolls ---------------------------------------------------------------

    def roll(
        self,
        competitor: Competitor,
        match_type: MatchType,
        doctor: StaffMember | None = None,
    ) -> InjuryReport | None:
        """Advanced-mode roll for one competitor. Applies the injury if rolled."""
        if competitor.is_injured:
            return None

        risk = self.injury_risk(competitor, match_type)
        if not self.rng.chance(risk / 100):
            return None

        severity = self.severity_for(risk)
        weeks = self.recovery_weeks(severity, doctor)
        description = self.label_for(severity)
        penalty = self.settings.stat_penalties.get(severity.name.lower(), 1.0)

        competitor.apply_injury(
            InjuryStatus(severity=severity, weeks_remaining=weeks, description=description),
            penalty,
        )
        logger.warning(
            f"{competitor.name} suffered a {severity.name.lower()} injury "
            f"({description}), out {weeks} weeks"
        )
        return InjuryReport(
            competitor_id=competitor.id,
            severity=severity,
            weeks=weeks,
            description=description,
            risk=risk,
        )

    def roll_simple(self, competitor: Competitor, match_type: MatchType) -> InjuryReport | None:
        """Simple-mode roll: reduced risk, always minor."""
        if competitor.is_injured:
            return None

        risk = self.simple_injury_risk(competitor, match_type)
        if not self.rng.chance(risk / 100):
            return None

        low, high = self.settings.simple_recovery_weeks
        weeks = self.rng.randint(low, high)
        description = self.label_for(InjurySeverity.MINOR)
        competitor.apply_injury(
            InjuryStatus(severity=InjurySeverity.MINOR, weeks_remaining=weeks, description=description),
            1.0,
        )
        competitor.stamina -= self.settings.simple_stamina_loss
        logger.debug(f"{competitor.name} picked up a minor injury ({description})")
        return InjuryReport(
            competitor_id=competitor.id,
            severity=InjurySeverity.MINOR,
            weeks=weeks,
            description=description,
            risk=risk,
        )

    def evaluate(
        self,
        participants: list[Competitor],
        match_type: MatchType,
        mode: SimulationMode,
        doctor: StaffMember | None = None,
    ) -> list[InjuryReport]:
        """Roll for every participant and return the injuries sustained."""
        reports = []
        for competitor in participants:
            if mode == SimulationMode.SIMPLE:
                report = self.roll_simple(competitor, match_type)
            else:
                report = self.roll(competitor, match_type, doctor)
            if report is not None:
                reports.append(report)
        return reports
