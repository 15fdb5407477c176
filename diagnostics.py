"""
Match Simulation Diagnostics Module

Structured observability for the match pipeline without changing
results. Emits checkpoint events at fixed boundaries:
RESOLVE, SIM, AFTERMATH, OUTPUT.

Usage:
    from diagnostics import diag, DiagConfig

    diag.configure(DiagConfig(enabled=True, level="normal"))

    with diag.timer("SIM"):
        outcome = engine.simulate_detailed(record, roster)
    diag.event("SIM", {"rating": outcome.rating})

    diag.print_checklist()
"""

from __future__ import annotations

import json
import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Generator

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

VALID_LEVELS = ("lite", "normal", "verbose")
STAGE_ORDER = ("RESOLVE", "SIM", "AFTERMATH", "OUTPUT")


@dataclass
class DiagConfig:
    """Central diagnostics configuration."""

    enabled: bool = False
    level: str = "lite"  # lite | normal | verbose
    strict: bool = False  # raise on sanity failures instead of warn
    jsonl_path: str | None = None

    def __post_init__(self) -> None:
        if self.level not in VALID_LEVELS:
            self.level = "lite"


# ---------------------------------------------------------------------------
# Logger setup (stdlib logging, kept apart from the loguru app log)
# ---------------------------------------------------------------------------

_diag_logger = logging.getLogger("wrestling.diagnostics")
_diag_logger.propagate = False

_console_handler: logging.StreamHandler | None = None


def _ensure_handler() -> None:
    """Attach the console handler once."""
    global _console_handler
    if _console_handler is None:
        _console_handler = logging.StreamHandler()
        _console_handler.setFormatter(
            logging.Formatter("[DIAG][%(levelname)s] %(message)s")
        )
        _diag_logger.addHandler(_console_handler)
        _diag_logger.setLevel(logging.DEBUG)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def numeric_stats(values: list[float | int], name: str) -> dict[str, Any]:
    """Compute min/max/mean for a list of numbers."""
    if not values:
        return {"name": name, "count": 0}
    return {
        "name": name,
        "count": len(values),
        "min": round(min(values), 4),
        "max": round(max(values), 4),
        "mean": round(sum(values) / len(values), 4),
    }


def count_by(values: list[Any]) -> dict[str, int]:
    """Tally values by their string form."""
    counts: dict[str, int] = {}
    for value in values:
        key = str(getattr(value, "value", value))
        counts[key] = counts.get(key, 0) + 1
    return counts


# ---------------------------------------------------------------------------
# Sanity checks
# ---------------------------------------------------------------------------


@dataclass
class SanityWarning:
    """A recorded sanity-check failure."""

    name: str
    message: str
    timestamp: float = field(default_factory=time.time)


# ---------------------------------------------------------------------------
# Core Diagnostics Engine
# ---------------------------------------------------------------------------


@dataclass
class _StageRecord:
    """Accumulated timings and events for one stage."""

    stage: str
    calls: int = 0
    total_time: float = 0.0
    events: list[dict[str, Any]] = field(default_factory=list)


class DiagnosticsEngine:
    """Singleton-style diagnostics engine.

    Stages are timed cumulatively, so a batch of matches reports the
    total time spent in each stage along with the call count.
    """

    def __init__(self) -> None:
        self._config = DiagConfig()
        self._run_start: float = 0.0
        self._stages: dict[str, _StageRecord] = {}
        self._warnings: list[SanityWarning] = []
        self._jsonl_fh: Any = None

    # -- configuration -------------------------------------------------------

    def configure(self, config: DiagConfig) -> None:
        """Apply a new diagnostics configuration."""
        self.close()
        self._config = config
        if config.enabled:
            _ensure_handler()
            self.reset()
            if config.jsonl_path:
                try:
                    self._jsonl_fh = open(config.jsonl_path, "w")
                except OSError as e:
                    _diag_logger.warning(f"Cannot open {config.jsonl_path}: {e}")

    @property
    def enabled(self) -> bool:
        return self._config.enabled

    @property
    def level(self) -> str:
        return self._config.level

    @property
    def warnings(self) -> list[SanityWarning]:
        return list(self._warnings)

    def reset(self) -> None:
        """Reset all state for a fresh run."""
        self._run_start = time.time()
        self._stages = {}
        self._warnings = []

    # -- timing --------------------------------------------------------------

    @contextmanager
    def timer(self, stage: str) -> Generator[None, None, None]:
        """Accumulate wall-clock time spent in *stage*."""
        if not self.enabled:
            yield
            return

        rec = self._stages.setdefault(stage, _StageRecord(stage=stage))
        start = time.perf_counter()
        try:
            yield
        finally:
            rec.calls += 1
            rec.total_time += time.perf_counter() - start
            if self._config.level == "verbose":
                _diag_logger.debug(f"[{stage}] call {rec.calls} done")

    # -- events --------------------------------------------------------------

    def event(self, stage: str, summary: dict[str, Any], level: str = "lite") -> None:
        """Emit a structured diagnostic event.

        Args:
            stage: Pipeline stage name (RESOLVE, SIM, AFTERMATH, OUTPUT).
            summary: Key-value summary dict.
            level: Minimum diag level required to emit.
        """
        if not self.enabled:
            return
        if VALID_LEVELS.index(level) > VALID_LEVELS.index(self._config.level):
            return

        rec = self._stages.setdefault(stage, _StageRecord(stage=stage))
        entry = {
            "stage": stage,
            "level": level,
            "elapsed": time.time() - self._run_start,
            **summary,
        }
        rec.events.append(entry)
        _diag_logger.info(f"[{stage}] {_format_summary(summary)}")

        if self._jsonl_fh:
            self._jsonl_fh.write(json.dumps(entry, default=str) + "\n")
            self._jsonl_fh.flush()

    # -- sanity checks -------------------------------------------------------

    def assert_sanity(
        self,
        name: str,
        value: Any,
        expected_range: tuple[float, float] | None = None,
        non_null: bool = True,
    ) -> None:
        """Check a value and warn (or raise in strict mode) on failure."""
        if not self.enabled:
            return

        msg = None
        if non_null and value is None:
            msg = "Expected a value, got None"
        if expected_range is not None and value is not None:
            lo, hi = expected_range
            if float(value) < lo or float(value) > hi:
                msg = f"Value {value} outside expected range [{lo}, {hi}]"

        if msg:
            self._warnings.append(SanityWarning(name, msg))
            _diag_logger.warning(f"SANITY [{name}]: {msg}")
            if self._config.strict:
                raise ValueError(f"Strict sanity failure [{name}]: {msg}")

    # -- checklist -----------------------------------------------------------

    def checklist(self) -> str:
        """Render the end-of-run checklist."""
        lines = [
            "",
            "=" * 62,
            "  DIAGNOSTICS CHECKLIST",
            "=" * 62,
            "",
            f"  Total runtime:  {time.time() - self._run_start:.3f}s",
            "",
            "  Stage timings:",
        ]
        for stage_name in STAGE_ORDER:
            rec = self._stages.get(stage_name)
            if rec and rec.calls:
                per_call = rec.total_time / rec.calls * 1000
                lines.append(
                    f"    [{stage_name:>9}]  {rec.total_time:.3f}s over {rec.calls} calls "
                    f"({per_call:.3f} ms/call)"
                )
            else:
                lines.append(f"    [{stage_name:>9}]  (not recorded)")

        lines.append("")
        if self._warnings:
            lines.append(f"  Sanity warnings: {len(self._warnings)}")
            for w in self._warnings:
                lines.append(f"    ! [{w.name}] {w.message}")
        else:
            lines.append("  Sanity warnings: 0 (all clear)")
        lines.append("")
        lines.append("=" * 62)
        return "\n".join(lines)

    def print_checklist(self) -> None:
        """Print the end-of-run checklist."""
        if not self.enabled:
            return
        print(self.checklist())

    # -- teardown ------------------------------------------------------------

    def close(self) -> None:
        """Close any open file handles."""
        if self._jsonl_fh:
            self._jsonl_fh.close()
            self._jsonl_fh = None


# ---------------------------------------------------------------------------
# Formatting helper
# ---------------------------------------------------------------------------


def _format_summary(summary: dict[str, Any], max_width: int = 200) -> str:
    """Format a summary dict into a compact, human-readable string."""
    parts = []
    for k, v in summary.items():
        if isinstance(v, dict):
            inner = ", ".join(f"{ik}={iv}" for ik, iv in list(v.items())[:4])
            parts.append(f"{k}={{{inner}}}")
        elif isinstance(v, list):
            parts.append(f"{k}=[{len(v)} items]")
        elif isinstance(v, float):
            parts.append(f"{k}={v:.4f}")
        else:
            parts.append(f"{k}={v}")
    line = " | ".join(parts)
    if len(line) > max_width:
        line = line[:max_width] + "..."
    return line


# ---------------------------------------------------------------------------
# Module-level singleton
# ---------------------------------------------------------------------------

diag = DiagnosticsEngine()
