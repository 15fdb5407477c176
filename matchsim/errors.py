"""Exceptions raised by the match simulation engine."""

from __future__ import annotations


class MatchSimulationError(Exception):
    """Base class for match simulation failures."""


class NotEnoughParticipantsError(MatchSimulationError):
    """Fewer than two of a match's competitors could be resolved.

    The match record and roster are left untouched.
    """

    def __init__(self, match_id: str, resolved: int) -> None:
        self.match_id = match_id
        self.resolved = resolved
        super().__init__(
            f"Match {match_id} needs at least 2 resolvable competitors, got {resolved}"
        )


class MatchAlreadySimulatedError(MatchSimulationError):
    """The match record already carries a result."""

    def __init__(self, match_id: str) -> None:
        self.match_id = match_id
        super().__init__(f"Match {match_id} has already been simulated")


class PhaseTransitionError(MatchSimulationError):
    """An advanced-mode phase was skipped or repeated."""


class SettingsError(MatchSimulationError):
    """A settings file could not be parsed or validated."""
