"""Finish-type weight tables and the finish roll."""

from __future__ import annotations

from typing import TYPE_CHECKING

from matchsim.models import FinishType, MatchClass, MatchRecord, MatchType

if TYPE_CHECKING:
    from matchsim.rng import RandomSource
    from matchsim.settings import FinishSettings

NO_DQ_TYPES = (MatchType.HARDCORE, MatchType.NO_DQ, MatchType.STREET_FIGHT)
SUBMISSION_TYPES = (MatchType.SUBMISSION, MatchType.I_QUIT)


def advanced_finish_table(record: MatchRecord, settings: FinishSettings) -> dict[FinishType, float]:
    table = {FinishType(k): v for k, v in settings.advanced.items()}
    if record.match_class == MatchClass.HARDCORE:
        table[FinishType.KNOCKOUT] = table.get(FinishType.KNOCKOUT, 0.0) + settings.hardcore_knockout_bonus
    return table


def simple_finish_table(record: MatchRecord, settings: FinishSettings) -> dict[FinishType, float]:
    table = {FinishType(k): v for k, v in settings.simple.items()}
    match_type = record.match_type
    if match_type in NO_DQ_TYPES:
        table[FinishType.KNOCKOUT] = table.get(FinishType.KNOCKOUT, 0.0) + settings.simple_no_dq_knockout_bonus
        table[FinishType.DQ] = 0.0
    elif match_type in SUBMISSION_TYPES:
        table[FinishType.SUBMISSION] = table.get(FinishType.SUBMISSION, 0.0) + settings.simple_submission_bonus
    elif match_type == MatchType.LAST_MAN_STANDING:
        table[FinishType.KNOCKOUT] = table.get(FinishType.KNOCKOUT, 0.0) + settings.simple_last_man_knockout_bonus
        table[FinishType.PINFALL] = settings.simple_last_man_pinfall
    return table


def roll_finish(table: dict[FinishType, float], rng: RandomSource) -> FinishType:
    """Weighted pick from a finish table; pinfall if the table is empty."""
    if not table:
        return FinishType.PINFALL
    finishes = list(table)
    return rng.weighted_choice(finishes, [table[f] for f in finishes])
