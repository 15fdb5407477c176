"""
Simulation Settings

Every tunable constant used by the engine, grouped by subsystem. The
defaults reproduce stock behaviour; any value can be overridden from a
YAML file without touching code.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from matchsim.errors import SettingsError
from matchsim.models import SimulationMode

DEFAULT_SETTINGS_PATH = Path("config/simulation.yaml")


class PerformanceSettings(BaseModel):
    """Per-competitor scoring."""

    hometown_bonus: float = Field(default=1.05, ge=1.0, le=2.0)
    form_variance: float = Field(default=0.05, ge=0.0, le=0.5)

    high_morale_threshold: int = 80
    low_morale_threshold: int = 30
    high_morale_multiplier: float = 1.05
    low_morale_multiplier: float = 0.95

    friends_chemistry: float = 5.0
    rivals_chemistry: float = 5.0
    simple_chemistry: float = 3.0
    feud_heat_divisor: int = Field(default=10, ge=1)

    manager_divisor: float = Field(default=20.0, gt=0)
    road_agent_divisor: float = Field(default=10.0, gt=0)

    # technical / brawling / psychology / aerial per match class
    weight_profiles: dict[str, dict[str, float]] = Field(
        default_factory=lambda: {
            "singles": {"technical": 1.0, "brawling": 1.0, "psychology": 1.0, "aerial": 1.0},
            "tag": {"technical": 0.9, "brawling": 1.0, "psychology": 1.1, "aerial": 1.0},
            "hardcore": {"technical": 0.6, "brawling": 1.4, "psychology": 0.9, "aerial": 0.8},
            "cage": {"technical": 0.8, "brawling": 1.3, "psychology": 1.0, "aerial": 0.9},
            "aerial": {"technical": 0.7, "brawling": 0.8, "psychology": 1.0, "aerial": 1.3},
        }
    )


class RatingWeights(BaseModel):
    """Weights of the match rating formula for one mode."""

    performance_weight: float = Field(default=0.6, ge=0.0, le=2.0)
    psychology_weight: float = Field(default=0.15, ge=0.0, le=1.0)
    popularity_weight: float = Field(default=0.10, ge=0.0, le=1.0)
    noise: float = Field(default=10.0, ge=0.0, le=50.0)


class RatingSettings(BaseModel):
    """Rating formula weights, per mode, and quality band thresholds."""

    advanced: RatingWeights = Field(default_factory=RatingWeights)
    simple: RatingWeights = Field(
        default_factory=lambda: RatingWeights(
            performance_weight=0.7,
            psychology_weight=0.12,
            popularity_weight=0.08,
            noise=8.0,
        )
    )
    good_threshold: int = 50
    great_threshold: int = 80


class PhaseSettings(BaseModel):
    """Advanced-mode phase machine and winner selection."""

    opening_momentum: float = 50.0
    veteran_referee_experience: int = 70
    veteran_referee_factor: float = 0.02

    min_momentum_shifts: int = Field(default=2, ge=0)
    max_momentum_shifts: int = Field(default=5, ge=0)
    shift_gain_min: float = 10.0
    shift_gain_max: float = 25.0
    shift_score_factor: float = 0.3
    momentum_cap: float = 100.0

    near_fall_chance: float = Field(default=0.5, ge=0.0, le=1.0)
    near_fall_bonus: float = 5.0

    momentum_fold_weight: float = 0.1
    winner_noise: float = 10.0
    simple_winner_noise: float = 8.0


class InjurySettings(BaseModel):
    """Injury risk, severity buckets and recovery (risks are percentages)."""

    base_chance: float = 1.0
    fatigue_threshold: int = 50
    fatigue_factor: float = 1.0
    type_risk: dict[str, float] = Field(
        default_factory=lambda: {
            "hardcore": 15.0,
            "ladder": 20.0,
            "cage": 10.0,
            "steel_cage": 10.0,
            "tlc": 25.0,
            "hell_in_a_cell": 20.0,
        }
    )
    standard_risk: float = 2.0
    low_stamina_threshold: int = 30
    low_stamina_multiplier: float = 1.5
    max_chance: float = Field(default=90.0, ge=0.0, le=100.0)

    minor_threshold: float = 10.0
    moderate_threshold: float = 25.0

    # severity name -> [min_weeks, max_weeks], inclusive
    recovery_weeks: dict[str, tuple[int, int]] = Field(
        default_factory=lambda: {
            "minor": (1, 4),
            "moderate": (4, 12),
            "major": (13, 52),
        }
    )
    stat_penalties: dict[str, float] = Field(
        default_factory=lambda: {"minor": 0.95, "moderate": 0.85, "major": 0.70}
    )
    labels: dict[str, list[str]] = Field(
        default_factory=lambda: {
            "minor": ["sprained wrist", "bruised ribs", "twisted ankle"],
            "moderate": ["shoulder strain", "concussion", "knee sprain"],
            "major": ["broken arm", "torn ACL", "neck injury"],
        }
    )

    # Simple mode
    simple_base_chance: float = 0.5
    simple_type_risk: dict[str, float] = Field(
        default_factory=lambda: {
            "hardcore": 7.0,
            "ladder": 10.0,
            "steel_cage": 5.0,
            "tlc": 12.0,
            "hell_in_a_cell": 8.0,
        }
    )
    simple_standard_risk: float = 1.0
    simple_recovery_weeks: tuple[int, int] = (1, 2)
    simple_stamina_loss: int = 3


class TraitSettings(BaseModel):
    """Magnitudes of trait effects."""

    crowd_favourite_multiplier: float = 1.05
    hardcore_specialist_bonus: float = 10.0
    submission_expert_max_bonus: float = 10.0
    big_match_multiplier: float = 1.05
    lazy_worker_multiplier: float = 0.9
    lazy_worker_chance: float = Field(default=0.3, ge=0.0, le=1.0)
    chemistry_master_bonus: float = 5.0


class RefereeSettings(BaseModel):
    """Referee assignment, influence, incidents and career."""

    weekly_match_cap: int = Field(default=5, ge=1)
    title_experience_threshold: int = 70

    # Rating modifier
    experience_bonus_max: float = 5.0
    consistency_bonus_max: float = 3.0
    corruption_penalty_max: float = 4.0
    main_event_title_bonus: float = 2.0
    hardcore_specialist_bonus: float = 3.0

    # Finish override, chances in percent per attribute point
    strictness_threshold: int = 70
    strictness_rate: float = 0.5
    corruption_threshold: int = 60
    corruption_rate: float = 0.3
    consistency_threshold: int = 40
    consistency_rate: float = 0.2

    # Incident chance, percentages
    incident_base_chance: float = 5.0
    climax_multiplier: float = 1.5
    incident_consistency_threshold: int = 50
    incident_consistency_factor: float = 0.1
    incident_corruption_threshold: int = 60
    incident_corruption_factor: float = 0.1
    incident_fatigue_threshold: int = 70
    incident_fatigue_factor: float = 0.2
    high_risk_multiplier: float = 2.0
    incident_max_chance: float = 30.0
    bump_injury_chance: float = Field(default=0.05, ge=0.0, le=1.0)
    knockout_injury_weeks: tuple[int, int] = (1, 3)

    # Attribute gates that unlock the corruption, consistency and strictness incident groups
    incident_corruption_gate: int = 50
    incident_consistency_gate: int = 50
    incident_strictness_gate: int = 70
    incident_rating_impact: dict[str, int] = Field(
        default_factory=lambda: {
            "bump": -2,
            "knockout": -5,
            "fast_count": -3,
            "missed_call": -2,
            "wrong_call": -3,
            "slow_count": -1,
            "argument": 0,
            "ejection": 1,
        }
    )

    # Career
    fatigue_per_match: int = 15
    weekly_fatigue_recovery: int = 20
    tired_decline_threshold: int = 80
    tired_decline_rate: float = 2.0
    fatigue_effectiveness_loss: float = Field(default=0.3, ge=0.0, le=1.0)
    perfect_match_rating: int = 85
    reputation_up_rating: int = 80
    reputation_down_rating: int = 50
    injury_base_chance: float = 0.5
    injury_fatigue_factor: float = 0.02
    injury_extreme_multiplier: float = 3.0
    injury_knockout_multiplier: float = 10.0
    injury_bump_multiplier: float = 5.0
    injury_age_threshold: int = 50
    injury_age_multiplier: float = 1.5

    # Injury length in weeks, bucketed by the chance that produced it
    injury_minor_below: float = 5.0
    injury_moderate_below: float = 15.0
    injury_minor_weeks: tuple[int, int] = (1, 2)
    injury_moderate_weeks: tuple[int, int] = (3, 5)
    injury_major_weeks: tuple[int, int] = (6, 11)

    # Achievements
    match_milestones: tuple[int, ...] = (100, 500, 1000)
    perfect_match_milestone: int = 50
    elite_average: int = 80
    elite_min_matches: int = 50
    title_specialist_matches: int = 100
    controversial_figure_finishes: int = 25


class FinishSettings(BaseModel):
    """Finish-type weight tables."""

    advanced: dict[str, float] = Field(
        default_factory=lambda: {
            "pinfall": 60.0,
            "submission": 20.0,
            "knockout": 10.0,
            "count_out": 5.0,
            "dq": 5.0,
        }
    )
    hardcore_knockout_bonus: float = 20.0

    simple: dict[str, float] = Field(
        default_factory=lambda: {
            "pinfall": 65.0,
            "submission": 20.0,
            "knockout": 8.0,
            "count_out": 4.0,
            "dq": 3.0,
        }
    )
    simple_no_dq_knockout_bonus: float = 15.0
    simple_submission_bonus: float = 40.0
    simple_last_man_knockout_bonus: float = 30.0
    simple_last_man_pinfall: float = 10.0


class AftermathSettings(BaseModel):
    """Post-match competitor drift, angles and the weekly advance."""

    angle_chance: float = Field(default=0.15, ge=0.0, le=1.0)

    fatigue_base: int = 15
    fatigue_type_extra: dict[str, int] = Field(
        default_factory=lambda: {
            "hardcore": 20,
            "ladder": 25,
            "tlc": 30,
            "hell_in_a_cell": 25,
            "iron_man": 35,
        }
    )
    title_fatigue: int = 5
    stamina_divisor: float = 10.0
    tired_threshold: int = 60
    tired_extra: int = 10
    min_fatigue_gain: int = 5

    morale_big_win: int = 10
    morale_win: int = 5
    morale_clean_loss: int = -10
    morale_loss: int = -5

    momentum_title_win: int = 20
    momentum_great_win: int = 15
    momentum_good_win: int = 10
    momentum_win: int = 5
    momentum_title_loss: int = -10
    momentum_loss: int = -5
    momentum_clean_multiplier: float = 1.2

    momentum_great_rating: int = 80
    momentum_good_rating: int = 70

    # (minimum rating, change) pairs, best first
    popularity_steps: list[tuple[int, int]] = Field(
        default_factory=lambda: [(90, 3), (80, 2), (70, 1)]
    )
    popularity_flop_rating: int = 50
    popularity_flop_change: int = -1
    popularity_title_bonus: int = 1
    popularity_charisma_threshold: int = 80
    popularity_charisma_multiplier: float = 1.5

    weekly_fatigue_recovery: float = 70.0
    weekly_stamina_recovery: float = 7.0
    weekly_morale_decay: int = 1
    unbooked_morale_decay: int = 2
    unbooked_momentum_decay: float = 0.1


class SimulationSettings(BaseModel):
    """Top-level engine configuration."""

    default_mode: SimulationMode = SimulationMode.ADVANCED
    auto_simple_threshold: int = Field(default=100, ge=1)
    bulk_match_threshold: int = Field(default=5, ge=1)
    injuries_enabled: bool = True
    referee_events_enabled: bool = True
    random_seed: int | None = None

    performance: PerformanceSettings = Field(default_factory=PerformanceSettings)
    rating: RatingSettings = Field(default_factory=RatingSettings)
    phases: PhaseSettings = Field(default_factory=PhaseSettings)
    injuries: InjurySettings = Field(default_factory=InjurySettings)
    traits: TraitSettings = Field(default_factory=TraitSettings)
    referees: RefereeSettings = Field(default_factory=RefereeSettings)
    finishes: FinishSettings = Field(default_factory=FinishSettings)
    aftermath: AftermathSettings = Field(default_factory=AftermathSettings)

    def rating_weights(self, mode: SimulationMode) -> RatingWeights:
        return self.rating.simple if mode == SimulationMode.SIMPLE else self.rating.advanced


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively overlay ``override`` onto ``base``."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_settings(config_path: str | Path | None = None) -> SimulationSettings:
    """Load settings from a YAML file, overlaying it on the defaults.

    Args:
        config_path: Path to the YAML file. Defaults to config/simulation.yaml.

    Returns:
        Validated SimulationSettings.

    Raises:
        FileNotFoundError: If the file does not exist.
        SettingsError: If the file is not a mapping or fails validation.
    """
    config_path = Path(config_path) if config_path is not None else DEFAULT_SETTINGS_PATH
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise SettingsError(f"Settings file {config_path} must contain a mapping")

    defaults = SimulationSettings().model_dump(mode="json")
    try:
        return SimulationSettings.model_validate(_deep_merge(defaults, data))
    except ValidationError as e:
        raise SettingsError(f"Invalid settings in {config_path}: {e}") from e
