#!/usr/bin/env python3
"""
Match Simulator Smoke Test with Diagnostics

Builds a small demo roster, simulates a card of matches and prints the
results followed by the diagnostics checklist.

Usage:
    python run_smoke.py
    python run_smoke.py --matches 20 --mode simple --seed 7
    python run_smoke.py --diag-level verbose --diag-log diag_output.jsonl
    python run_smoke.py --config config/simulation.yaml --benchmark
"""

from __future__ import annotations

import argparse
import sys

from loguru import logger

from roster import (
    Company,
    Competitor,
    CompetitorId,
    Feud,
    FeudId,
    MatchId,
    RosterContext,
    StaffId,
    StaffMember,
    StaffRole,
    TagTeam,
    TagTeamId,
    Trait,
    TraitEffect,
    TraitId,
    default_referees,
)

CARD_TYPES = ("singles", "tag", "hardcore", "steel cage", "ladder", "submission", "tlc", "singles")


def demo_roster() -> RosterContext:
    """A small self-contained roster for smoke runs."""
    competitors = [
        Competitor(id=CompetitorId("w_ace"), name="Ace Calloway", hometown="Chicago",
                   technical=85, brawling=70, aerial=55, psychology=88, charisma=82, mic=80,
                   stamina=75, toughness=70, popularity=80, trait_ids=[TraitId("big_match")]),
        Competitor(id=CompetitorId("w_blaze"), name="Blaze Ortega", hometown="San Antonio",
                   technical=70, brawling=65, aerial=90, psychology=72, charisma=75, mic=60,
                   stamina=80, toughness=55, popularity=72),
        Competitor(id=CompetitorId("w_crusher"), name="Crusher Kane", hometown="Detroit",
                   technical=55, brawling=92, aerial=30, psychology=65, charisma=60, mic=55,
                   stamina=70, toughness=90, popularity=65, trait_ids=[TraitId("hardcore")]),
        Competitor(id=CompetitorId("w_dana"), name="Dana Steele", hometown="Boston",
                   technical=88, brawling=60, aerial=60, psychology=80, charisma=70, mic=72,
                   stamina=72, toughness=60, popularity=68, trait_ids=[TraitId("submission")]),
        Competitor(id=CompetitorId("w_echo"), name="Echo Rivers", hometown="Chicago",
                   technical=65, brawling=68, aerial=75, psychology=60, charisma=85, mic=78,
                   stamina=65, toughness=50, popularity=77, trait_ids=[TraitId("crowd")],
                   friends={CompetitorId("w_flint")}, tag_team_id=TagTeamId("tt_storm")),
        Competitor(id=CompetitorId("w_flint"), name="Flint Harlow", hometown="Memphis",
                   technical=72, brawling=74, aerial=50, psychology=70, charisma=58, mic=50,
                   stamina=78, toughness=75, popularity=60, trait_ids=[TraitId("lazy")],
                   friends={CompetitorId("w_echo")}, tag_team_id=TagTeamId("tt_storm")),
    ]
    traits = [
        Trait(id=TraitId("big_match"), name="Big Match Performer", effect=TraitEffect.BIG_MATCH_PERFORMER),
        Trait(id=TraitId("hardcore"), name="Hardcore Specialist", effect=TraitEffect.HARDCORE_SPECIALIST),
        Trait(id=TraitId("submission"), name="Submission Expert", effect=TraitEffect.SUBMISSION_EXPERT),
        Trait(id=TraitId("crowd"), name="Crowd Favourite", effect=TraitEffect.CROWD_FAVOURITE),
        Trait(id=TraitId("lazy"), name="Lazy Worker", effect=TraitEffect.LAZY_WORKER),
    ]
    staff = [
        StaffMember(id=StaffId("s_heyman"), name="Paul Vance", role=StaffRole.MANAGER, charisma=90, mic=95),
        StaffMember(id=StaffId("s_agent"), name="Arn Shaw", role=StaffRole.ROAD_AGENT, psychology_influence=40),
        StaffMember(id=StaffId("s_doc"), name="Dr. Amann", role=StaffRole.DOCTOR, injury_recovery_bonus=20),
    ]
    return RosterContext.build(
        competitors=competitors,
        referees=default_referees(),
        traits=traits,
        feuds=[Feud(id=FeudId("f_ace_crusher"),
                    participants={CompetitorId("w_ace"), CompetitorId("w_crusher")}, heat=75)],
        tag_teams=[TagTeam(id=TagTeamId("tt_storm"), name="The Storm",
                           members={CompetitorId("w_echo"), CompetitorId("w_flint")}, chemistry=8)],
        staff=staff,
        company=Company(
            name="Demo Wrestling",
            managers={CompetitorId("w_ace"): StaffId("s_heyman")},
            road_agent_id=StaffId("s_agent"),
            doctor_id=StaffId("s_doc"),
            favored_ids={CompetitorId("w_ace")},
        ),
    )


def demo_card(count: int, roster: RosterContext):
    """Build ``count`` match records rotating through the roster."""
    from matchsim import MatchRecord, MatchType

    ids = list(roster.competitors)
    records = []
    for i in range(count):
        label = CARD_TYPES[i % len(CARD_TYPES)]
        match_type = MatchType.parse(label)
        size = 4 if match_type == MatchType.TAG else 2
        participants = [ids[(i + k) % len(ids)] for k in range(size)]
        records.append(MatchRecord(
            id=MatchId(f"m{i + 1:03d}"),
            competitor_ids=participants,
            match_type=match_type,
            gimmick_label=label,
            is_title_match=i % 5 == 0,
            is_main_event=i == count - 1,
            location="Chicago, IL",
        ))
    return records


def main() -> int:
    parser = argparse.ArgumentParser(description="Match Simulator Smoke Test with Diagnostics")
    parser.add_argument("--matches", type=int, default=8, help="Number of matches on the card (default: 8)")
    parser.add_argument("--mode", choices=["advanced", "simple"], default=None,
                        help="Simulation mode (default: recommended for the card size)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for a repeatable run")
    parser.add_argument("--config", default=None, help="Path to a settings YAML file")
    parser.add_argument("--benchmark", action="store_true", help="Compare both modes on a fresh roster")
    parser.add_argument("--diagnostics", action="store_true", default=True,
                        help="Enable diagnostics (default: on for smoke test)")
    parser.add_argument("--diag-level", choices=["lite", "normal", "verbose"], default="lite",
                        help="Diagnostics verbosity level (default: lite)")
    parser.add_argument("--diag-log", default=None, help="Path to write JSONL diagnostics log")
    parser.add_argument("--strict", action="store_true", help="Raise on sanity check failures")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose application logging")

    args = parser.parse_args()

    logger.remove()
    if args.verbose:
        logger.add(sys.stderr, level="DEBUG")
    else:
        logger.add(sys.stderr, level="WARNING")

    from diagnostics import DiagConfig, diag

    diag.configure(DiagConfig(
        enabled=args.diagnostics,
        level=args.diag_level,
        strict=args.strict,
        jsonl_path=args.diag_log,
    ))

    from matchsim import (
        MatchSimulationEngine,
        NumpyRandomSource,
        SimulationMode,
        SimulationRunner,
        SimulationSettings,
        benchmark_modes,
        load_settings,
    )

    try:
        settings = load_settings(args.config) if args.config else SimulationSettings()
        seed = args.seed if args.seed is not None else settings.random_seed
        engine = MatchSimulationEngine(settings, NumpyRandomSource(seed))
        roster = demo_roster()
        mode = SimulationMode(args.mode) if args.mode else None

        print()
        print("=" * 62)
        print("  MATCH SIMULATOR - SMOKE TEST")
        print("=" * 62)
        print(f"  Matches:      {args.matches}")
        print(f"  Mode:         {args.mode or 'recommended'}")
        print(f"  Seed:         {seed}")
        print(f"  Diagnostics:  {'ON' if args.diagnostics else 'OFF'} (level={args.diag_level})")
        print("=" * 62)
        print()

        summary = SimulationRunner(engine).simulate_batch(
            demo_card(args.matches, roster), roster, mode=mode
        )
        for outcome in summary.outcomes:
            record = outcome.record
            winner = roster.competitors[outcome.winner_id].name
            print(
                f"  {record.id}  {record.match_type.value:<16} {winner:<16} "
                f"{outcome.finish.value:<14} {outcome.rating:>3} ({outcome.quality})"
            )
        print()
        print(f"  Average rating: {summary.average_rating:.1f}  "
              f"Injuries: {summary.injury_count}  Time/match: {summary.ms_per_match:.3f} ms")

        if args.benchmark:
            bench_size = max(args.matches, 50)
            card = demo_card(bench_size, demo_roster())
            results = benchmark_modes(
                demo_roster,
                lambda i: card[i].model_copy(deep=True),
                matches=bench_size,
                seed=seed,
                settings=settings,
            )
            print()
            for bench in results.values():
                print(f"  {bench.mode.value:<9} avg rating {bench.average_rating:5.1f}  "
                      f"{bench.ms_per_match:.3f} ms/match")

        diag.print_checklist()

    except KeyboardInterrupt:
        print("\nInterrupted.")
        return 1
    except Exception as e:
        print(f"\nError: {e}")
        logger.exception("Smoke test error")
        return 1
    finally:
        diag.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
