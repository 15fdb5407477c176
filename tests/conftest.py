"""
Pytest Configuration and Fixtures

Shared fixtures for the match simulation test suite.
"""

from typing import Any, Callable, Sequence

import pytest

from matchsim.models import MatchRecord, MatchType
from matchsim.rng import NumpyRandomSource
from matchsim.settings import SimulationSettings
from roster import (
    Competitor,
    CompetitorId,
    MatchId,
    Referee,
    RefereeId,
    RosterContext,
    default_referees,
)


class StubRandom:
    """Scripted random source.

    ``random()`` cycles through the given values; every other method is
    derived from it, so a single value makes the whole source constant:
    0.5 gives zero symmetric noise, 0.0 makes every chance succeed and
    0.99 makes (almost) every chance fail.
    """

    def __init__(self, values: float | Sequence[float] = 0.5) -> None:
        self._values = list(values) if isinstance(values, (list, tuple)) else [values]
        self._index = 0

    def random(self) -> float:
        value = self._values[self._index % len(self._values)]
        self._index += 1
        return value

    def uniform(self, low: float, high: float) -> float:
        return low + (high - low) * self.random()

    def randint(self, low: int, high: int) -> int:
        return min(high, low + int((high - low + 1) * self.random()))

    def choice(self, items: Sequence[Any]) -> Any:
        return items[0]

    def weighted_choice(self, items: Sequence[Any], weights: Sequence[float]) -> Any:
        total = sum(weights)
        if total <= 0:
            return items[0]
        roll = self.random() * total
        cumulative = 0.0
        for item, weight in zip(items, weights):
            cumulative += weight
            if roll < cumulative:
                return item
        return items[-1]

    def chance(self, probability: float) -> bool:
        return self.random() < probability


@pytest.fixture
def stub_rng() -> Callable[..., StubRandom]:
    """Factory for scripted random sources."""
    return StubRandom


@pytest.fixture
def seeded_rng() -> NumpyRandomSource:
    """Deterministic numpy-backed random source."""
    return NumpyRandomSource(seed=42)


@pytest.fixture
def settings() -> SimulationSettings:
    """Stock simulation settings."""
    return SimulationSettings()


@pytest.fixture
def make_competitor() -> Callable[..., Competitor]:
    """Factory for competitors with the standard test skill line."""

    def _make(competitor_id: str = "w1", **overrides: Any) -> Competitor:
        fields: dict[str, Any] = {
            "id": CompetitorId(competitor_id),
            "name": competitor_id.upper(),
            "technical": 80,
            "brawling": 70,
            "psychology": 75,
            "aerial": 60,
        }
        fields.update(overrides)
        return Competitor(**fields)

    return _make


@pytest.fixture
def make_referee() -> Callable[..., Referee]:
    """Factory for referees."""

    def _make(referee_id: str = "ref1", **overrides: Any) -> Referee:
        fields: dict[str, Any] = {
            "id": RefereeId(referee_id),
            "name": f"Referee {referee_id}",
            "strictness": 50,
            "corruption": 20,
            "experience": 60,
            "consistency": 70,
        }
        fields.update(overrides)
        return Referee(**fields)

    return _make


@pytest.fixture
def make_roster(make_competitor) -> Callable[..., RosterContext]:
    """Factory for a two-competitor roster with the stock referee crew."""

    def _make(
        competitors: list[Competitor] | None = None,
        referees: list[Referee] | None = None,
        **kwargs: Any,
    ) -> RosterContext:
        if competitors is None:
            competitors = [make_competitor("w1"), make_competitor("w2")]
        if referees is None:
            referees = default_referees()
        return RosterContext.build(competitors=competitors, referees=referees, **kwargs)

    return _make


@pytest.fixture
def roster(make_roster) -> RosterContext:
    """Two identical competitors and the stock referee crew."""
    return make_roster()


@pytest.fixture
def make_record() -> Callable[..., MatchRecord]:
    """Factory for unsimulated match records."""
    counter = {"n": 0}

    def _make(competitor_ids: Sequence[str] = ("w1", "w2"), **overrides: Any) -> MatchRecord:
        counter["n"] += 1
        fields: dict[str, Any] = {
            "id": MatchId(f"m{counter['n']}"),
            "competitor_ids": [CompetitorId(c) for c in competitor_ids],
            "match_type": MatchType.SINGLES,
        }
        fields.update(overrides)
        return MatchRecord(**fields)

    return _make
