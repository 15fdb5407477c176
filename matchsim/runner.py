"""
Batch Simulation Runner

Runs many matches one after another (a show card, a tournament, a
season of offscreen matches), reporting progress and honouring
cancellation between matches.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, Iterable

from loguru import logger

from diagnostics import count_by, diag, numeric_stats
from matchsim.engine import AngleCallback, MatchSimulationEngine
from matchsim.errors import MatchSimulationError
from matchsim.models import MatchRecord, SimulationMode, SimulationOutcome
from matchsim.rng import NumpyRandomSource
from matchsim.settings import SimulationSettings
from roster.context import RosterContext
from roster.ids import MatchId


@dataclass
class BatchProgress:
    """Progress report passed to ``on_progress`` after each match."""

    completed: int
    total: int
    elapsed_seconds: float
    outcome: SimulationOutcome | None = None

    @property
    def estimated_remaining_seconds(self) -> float:
        if self.completed == 0:
            return 0.0
        return self.elapsed_seconds / self.completed * (self.total - self.completed)


@dataclass
class BatchSummary:
    """Aggregate result of a batch run."""

    mode: SimulationMode
    total: int
    outcomes: list[SimulationOutcome] = field(default_factory=list)
    failures: dict[MatchId, str] = field(default_factory=dict)
    stopped_early: bool = False
    elapsed_seconds: float = 0.0

    @property
    def completed(self) -> int:
        return len(self.outcomes)

    @property
    def average_rating(self) -> float:
        if not self.outcomes:
            return 0.0
        return sum(o.rating for o in self.outcomes) / len(self.outcomes)

    @property
    def highest_rating(self) -> int:
        return max((o.rating for o in self.outcomes), default=0)

    @property
    def lowest_rating(self) -> int:
        return min((o.rating for o in self.outcomes), default=0)

    @property
    def injury_count(self) -> int:
        return sum(len(o.injuries) for o in self.outcomes)

    @property
    def finish_counts(self) -> dict[str, int]:
        return count_by([o.finish for o in self.outcomes])

    @property
    def ms_per_match(self) -> float:
        if not self.outcomes:
            return 0.0
        return self.elapsed_seconds / len(self.outcomes) * 1000


@dataclass
class ModeBenchmark:
    """Timing and quality of one mode over a benchmark run."""

    mode: SimulationMode
    matches: int
    average_rating: float
    ms_per_match: float


def recommended_mode(
    is_player_watching: bool,
    is_bulk: bool,
    match_count: int = 1,
    settings: SimulationSettings | None = None,
) -> SimulationMode:
    """Pick a simulation mode for the situation.

    Watched matches get the detailed simulation; bulk or large batches
    get the fast path; anything else defaults to advanced.
    """
    settings = settings or SimulationSettings()
    if is_player_watching:
        return SimulationMode.ADVANCED
    if is_bulk or match_count > settings.bulk_match_threshold:
        return SimulationMode.SIMPLE
    return SimulationMode.ADVANCED


class SimulationRunner:
    """
    Sequential batch simulation.

    Matches in a batch share roster state, so they always run one after
    another. ``should_stop`` is polled only between matches; a match
    that has started always finishes.
    """

    def __init__(self, engine: MatchSimulationEngine | None = None) -> None:
        self.engine = engine or MatchSimulationEngine()

    def simulate_batch(
        self,
        records: Iterable[MatchRecord],
        roster: RosterContext,
        mode: SimulationMode | None = None,
        on_progress: Callable[[BatchProgress], None] | None = None,
        should_stop: Callable[[], bool] | None = None,
        on_angle: AngleCallback | None = None,
    ) -> BatchSummary:
        """Simulate every record in order.

        Args:
            records: Matches to simulate.
            roster: Shared roster context.
            mode: Simulation mode; chosen by ``recommended_mode`` if None.
            on_progress: Called after every match.
            should_stop: Polled before each match; True ends the batch.
            on_angle: Forwarded to the engine for triggered angles.

        Returns:
            BatchSummary. Records that fail validation are listed in
            ``failures`` and do not abort the batch.
        """
        records = list(records)
        total = len(records)
        if mode is None:
            mode = recommended_mode(
                is_player_watching=False,
                is_bulk=total >= self.engine.settings.auto_simple_threshold,
                match_count=total,
                settings=self.engine.settings,
            )

        summary = BatchSummary(mode=mode, total=total)
        start = time.perf_counter()
        logger.info(f"Simulating {total} matches in {mode.value} mode")

        for index, record in enumerate(records):
            if should_stop is not None and should_stop():
                summary.stopped_early = True
                logger.info(f"Batch stopped after {index} of {total} matches")
                break

            outcome = None
            try:
                outcome = self.engine.simulate_detailed(record, roster, mode, on_angle)
                summary.outcomes.append(outcome)
            except MatchSimulationError as e:
                logger.warning(f"Match {record.id} skipped: {e}")
                summary.failures[record.id] = str(e)

            if on_progress is not None:
                on_progress(BatchProgress(
                    completed=index + 1,
                    total=total,
                    elapsed_seconds=time.perf_counter() - start,
                    outcome=outcome,
                ))

        summary.elapsed_seconds = time.perf_counter() - start
        with diag.timer("OUTPUT"):
            diag.event("OUTPUT", {
                "mode": mode.value,
                "completed": summary.completed,
                "failures": len(summary.failures),
                "ratings": numeric_stats([o.rating for o in summary.outcomes], "rating"),
                "finishes": summary.finish_counts,
                "injuries": summary.injury_count,
            })
        logger.info(
            f"Batch done: {summary.completed}/{total} matches, "
            f"avg rating {summary.average_rating:.1f}, {summary.ms_per_match:.3f} ms/match"
        )
        return summary


def benchmark_modes(
    roster_factory: Callable[[], RosterContext],
    record_factory: Callable[[int], MatchRecord],
    matches: int = 100,
    seed: int | None = 42,
    settings: SimulationSettings | None = None,
) -> dict[SimulationMode, ModeBenchmark]:
    """Run the same batch in each mode on fresh rosters and compare.

    Args:
        roster_factory: Builds a fresh roster for each mode.
        record_factory: Builds the i-th match record.
        matches: Matches per mode.
        seed: Seed shared by both modes.
        settings: Engine settings.

    Returns:
        ModeBenchmark per mode.
    """
    results: dict[SimulationMode, ModeBenchmark] = {}
    for mode in (SimulationMode.ADVANCED, SimulationMode.SIMPLE):
        engine = MatchSimulationEngine(settings, NumpyRandomSource(seed))
        runner = SimulationRunner(engine)
        summary = runner.simulate_batch(
            [record_factory(i) for i in range(matches)],
            roster_factory(),
            mode=mode,
        )
        results[mode] = ModeBenchmark(
            mode=mode,
            matches=summary.completed,
            average_rating=summary.average_rating,
            ms_per_match=summary.ms_per_match,
        )
    return results
