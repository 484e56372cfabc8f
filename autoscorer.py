#!/usr/bin/env python3
"""
Bad QB League Autoscorer CLI

Computes standings from the league data directory:
Teams come from data/teams.json
Lineups come from data/lineups/week_{N}.json
Stats come from data/stats/week_{N}.json
Matchups come from data/schedule.txt

Usage:
    python autoscorer.py
    python autoscorer.py --week 5
    python autoscorer.py --import-stats week5_stats.json --week 5
    python autoscorer.py --fetch-nfl --week 5 --excel standings.xlsx
    python autoscorer.py --fetch-nfl --week 5 --events week5_events.json
"""

import argparse
import asyncio
import sys
from pathlib import Path

from badqb.excel_export import export_standings_workbook
from badqb.league_data import (
    LeagueData,
    import_week_stats,
    load_league,
    save_standings_json,
    save_week_results,
)
from badqb.config import CONFIG_FILENAME, save_config
from badqb.logging_config import setup_logging
from badqb.models import Matchup, MatchupScore, TeamRecord
from badqb.schedule import get_week_matchups
from badqb.schemas import EventsFile, WeeklyStatsFile
from badqb.standings import StandingsEngine
from badqb.stats_source import StatsLoadError
from badqb.utils import load_json
from badqb.validators import validate_minimum_starts


async def score_league(
    league: LeagueData, week: int | None
) -> tuple[list[TeamRecord], list[Matchup], list[MatchupScore]]:
    """
    Compute standings and (optionally) one week's matchups in one pass.

    Returns:
        Standings, the week's scheduled matchups with recomputed scores
        (None while uncounted), and the counted matchups' breakdowns
    """
    engine = StandingsEngine.from_config(league.lineups, league.stats, league.config)
    records = await engine.standings(league.matchups, league.teams)

    scheduled, week_scores = [], []
    if week is not None:
        week_matchups = get_week_matchups(league.matchups, week)
        scheduled = await engine.score_matchups(week_matchups)
        week_scores = [scored async for scored in engine.counted_matchups(week_matchups)]
    return records, scheduled, week_scores


def load_event_overrides(events_path: Path, week: int) -> dict[str, dict[str, int]]:
    """Read a hand-recorded events file (benchings, defensive TDs, ...) for one week."""
    events_file = load_json(events_path, schema=EventsFile)
    if events_file.week != week:
        raise ValueError(f'{events_path} holds week {events_file.week}, not week {week}')
    return events_file.overrides()


def fetch_nfl_rows(season: int, week: int, events: dict[str, dict[str, int]] | None = None) -> list:
    """Pull one week of franchise stats from nflreadpy, merging in recorded events."""
    from badqb.data_fetcher import NFLStatsSource

    source = NFLStatsSource(season, events={week: events} if events else None)
    stats = asyncio.run(source.get_week_stats(week))
    return list(stats.values())


def load_import_rows(stats_path: Path, week: int | None) -> tuple[int, list]:
    """Read a stats/week_N.json-format file for import."""
    stats_file = load_json(stats_path, schema=WeeklyStatsFile)
    if week is not None and week != stats_file.week:
        raise ValueError(f'{stats_path} holds week {stats_file.week}, not week {week}')
    return stats_file.week, [line.to_stats(stats_file.week) for line in stats_file.stats]


def print_week(week: int, scheduled: list[Matchup], week_scores: list[MatchupScore]) -> None:
    print(f"\nWeek {week} Matchups")
    print("-" * 60)
    if not week_scores:
        print("  No counted matchups yet (missing stats or lineups)")

    for scored in week_scores:
        m = scored.matchup
        print(f"  {m.team1} {scored.team1_score} - {scored.team2_score} {m.team2}")
        for side in (scored.team1_breakdown, scored.team2_breakdown):
            for franchise in side:
                points = 'pending' if franchise.pending else f"{franchise.score} pts"
                print(f"      {franchise.franchise}: {points}")

    for m in scheduled:
        if m.team1_score is None:
            print(f"  {m.team1} vs {m.team2} (not counted yet)")


def print_standings(records: list[TeamRecord]) -> None:
    print("\n" + "=" * 60)
    print("STANDINGS")
    print("=" * 60)
    for rank, record in enumerate(records, 1):
        weekly = ' '.join(r or '-' for r in record.weekly_results)
        print(f"  {rank}. {record.team_name:<20} {record.record:>7} {record.total_points:>6} pts  {weekly}")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Bad QB League Autoscorer")
    parser.add_argument(
        "--data-dir", "-d",
        default="data",
        help="Path to data directory",
    )
    parser.add_argument(
        "--week", "-w",
        type=int,
        default=None,
        help="Week to show matchup breakdowns for (or to import)",
    )
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Output path for standings JSON (defaults to {data-dir}/output/{season}/standings.json)",
    )
    parser.add_argument(
        "--excel",
        default=None,
        help="Also write standings to this Excel workbook",
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--import-stats",
        metavar="FILE",
        default=None,
        help="Import a week of stats from a JSON file, replacing that week",
    )
    source.add_argument(
        "--fetch-nfl",
        action="store_true",
        help="Import the week's stats from nflreadpy (requires --week)",
    )
    parser.add_argument(
        "--events",
        metavar="FILE",
        default=None,
        help="JSON file of hand-recorded events to merge into --fetch-nfl stats",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress detailed output",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    parser.add_argument(
        "--log-dir",
        default=None,
        help="Also write a timestamped log file to this directory",
    )

    args = parser.parse_args(argv)
    setup_logging(
        level=args.log_level,
        log_dir=Path(args.log_dir) if args.log_dir else None,
        log_to_file=args.log_dir is not None,
    )

    if args.fetch_nfl and args.week is None:
        parser.error("--fetch-nfl requires --week")
    if args.events and not args.fetch_nfl:
        parser.error("--events requires --fetch-nfl")

    data_dir = Path(args.data_dir)
    config_path = data_dir / CONFIG_FILENAME

    try:
        league = load_league(data_dir, strict=False)
    except (FileNotFoundError, ValueError) as e:
        print(f"❌ {e}")
        sys.exit(1)

    if league.errors:
        print("❌ League data failed validation:")
        for error in league.errors:
            print(f"   {error}")
        sys.exit(1)

    config = league.config

    # Import stats
    if args.import_stats or args.fetch_nfl:
        try:
            if args.import_stats:
                week, rows = load_import_rows(Path(args.import_stats), args.week)
            else:
                events = load_event_overrides(Path(args.events), args.week) if args.events else None
                week, rows = args.week, fetch_nfl_rows(config.season, args.week, events)
        except (FileNotFoundError, ValueError, StatsLoadError) as e:
            print(f"❌ {e}")
            sys.exit(1)

        result = import_week_stats(
            league.stats, week, rows, config.current_week, config.total_weeks
        )
        if not result.success:
            for error in result.errors:
                print(f"❌ {error}")
            sys.exit(1)

        action = "Replaced" if result.replaced_existing else "Imported"
        print(f"{action} {result.records_imported} stat lines for week {week}")

        if result.week_advanced:
            config = config.model_copy(update={'current_week': result.new_current_week})
            save_config(config, config_path)
            print(f"Current week advanced to {config.current_week}")

        if args.week is None:
            args.week = week

    try:
        records, scheduled, week_scores = asyncio.run(score_league(league, args.week))
    except StatsLoadError as e:
        print(f"❌ {e}")
        sys.exit(1)

    if args.week is not None:
        if not args.quiet:
            print_week(args.week, scheduled, week_scores)
        week_path = data_dir / "output" / str(config.season) / "weeks" / f"week_{args.week}.json"
        save_week_results(week_path, args.week, week_scores)

    if not args.quiet:
        print_standings(records)
        weeks_remaining = config.total_weeks - config.current_week + 1
        for team in league.teams:
            for warning in validate_minimum_starts(
                team, league.lineups, weeks_remaining, config.minimum_starts
            ):
                print(f"⚠️  {warning}")

    if args.output:
        standings_path = Path(args.output)
    else:
        standings_path = data_dir / "output" / str(config.season) / "standings.json"
    save_standings_json(standings_path, records)
    print(f"Standings written: {standings_path}")

    if args.excel:
        export_standings_workbook(args.excel, records, range(1, config.total_weeks + 1))
        print(f"Excel written: {args.excel}")


if __name__ == "__main__":
    main()
