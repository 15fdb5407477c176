"""Clamping helpers shared by the roster models."""

from __future__ import annotations

from typing import Any

SKILL_RANGE = (0, 100)
MOMENTUM_RANGE = (-100, 100)


def clamp(value: float, low: float, high: float) -> float:
    """Clamp a number into [low, high]."""
    return max(low, min(high, value))


def clamp_int(value: Any, low: int, high: int) -> int:
    """Round a numeric input and clamp it into [low, high].

    Used by before-validators so that every assignment to a bounded
    attribute lands inside its declared range.
    """
    return int(clamp(round(float(value)), low, high))
