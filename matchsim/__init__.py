"""
Match Simulation Module

Simulates professional wrestling matches for a roster-management game.

Components:
    - models: Match vocabulary, match record, per-call state and outcome
    - settings: Tunable constants and the YAML settings loader
    - rng: Injectable random source
    - performance: Competitor scoring and match rating
    - injuries: Post-match injury model
    - referees / incidents / career: Referee influence, in-match incidents
      and career bookkeeping
    - phases: Advanced-mode phase state machine
    - fast_path: Simple-mode single-pass simulator
    - engine: Validation, dispatch and aftermath
    - runner: Batch simulation and mode selection
    - weekly: Weekly and monthly roster advance

Usage:
    from matchsim import MatchSimulationEngine, MatchRecord, SimulationMode
    from roster import RosterContext

    engine = MatchSimulationEngine()
    record = engine.simulate(match_record, roster, SimulationMode.ADVANCED)
    print(record.winner_id, record.rating, record.finish)
"""

from matchsim.models import (
    FinishType,
    IncidentType,
    InjuryReport,
    MatchClass,
    MatchPhase,
    MatchRecord,
    MatchState,
    MatchType,
    PhaseEvent,
    RefereeIncident,
    SimulationMode,
    SimulationOutcome,
    SimulationWarning,
    WarningCode,
    WeightProfile,
    quality_band,
)
from matchsim.errors import (
    MatchAlreadySimulatedError,
    MatchSimulationError,
    NotEnoughParticipantsError,
    PhaseTransitionError,
    SettingsError,
)
from matchsim.settings import SimulationSettings, load_settings
from matchsim.rng import NumpyRandomSource, RandomSource
from matchsim.performance import PerformanceCalculator
from matchsim.injuries import InjuryModel
from matchsim.referees import RefereeSystem
from matchsim.incidents import IncidentSystem
from matchsim.career import RefereeCareerManager
from matchsim.competitor_state import CompetitorStateUpdater
from matchsim.phases import MatchPhaseMachine
from matchsim.fast_path import FastPathSimulator
from matchsim.engine import MatchSimulationEngine
from matchsim.runner import (
    BatchProgress,
    BatchSummary,
    ModeBenchmark,
    SimulationRunner,
    benchmark_modes,
    recommended_mode,
)
from matchsim.weekly import advance_month, advance_week

__all__ = [
    # Models
    "FinishType",
    "IncidentType",
    "InjuryReport",
    "MatchClass",
    "MatchPhase",
    "MatchRecord",
    "MatchState",
    "MatchType",
    "PhaseEvent",
    "RefereeIncident",
    "SimulationMode",
    "SimulationOutcome",
    "SimulationWarning",
    "WarningCode",
    "WeightProfile",
    "quality_band",
    # Errors
    "MatchAlreadySimulatedError",
    "MatchSimulationError",
    "NotEnoughParticipantsError",
    "PhaseTransitionError",
    "SettingsError",
    # Settings & randomness
    "SimulationSettings",
    "load_settings",
    "NumpyRandomSource",
    "RandomSource",
    # Subsystems
    "PerformanceCalculator",
    "InjuryModel",
    "RefereeSystem",
    "IncidentSystem",
    "RefereeCareerManager",
    "CompetitorStateUpdater",
    "MatchPhaseMachine",
    "FastPathSimulator",
    # Engine & runner
    "MatchSimulationEngine",
    "BatchProgress",
    "BatchSummary",
    "ModeBenchmark",
    "SimulationRunner",
    "benchmark_modes",
    "recommended_mode",
    # Calendar
    "advance_month",
    "advance_week",
]
