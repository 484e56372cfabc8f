"""JSON-backed league data: loading snapshots, importing stats, saving results.

Expected data directory layout:

    data/
        league_config.json
        teams.json
        schedule.txt
        lineups/week_1.json ...
        stats/week_1.json ...
"""

import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Iterable, Optional

from .config import CONFIG_FILENAME, load_config
from .models import Matchup, MatchupScore, RawWeeklyStats, Team, TeamRecord, WeeklyLineup
from .schedule import parse_schedule_file
from .schemas import LeagueConfig, LineupsFile, TeamsFile
from .stats_source import JsonStatsStore, StatsSource, StatsStore
from .utils import list_week_files, load_json, save_json, utc_timestamp, week_from_filename
from .validators import validate_lineups, validate_rosters, validate_schedule

logger = logging.getLogger('badqb.league_data')


@dataclass
class LeagueData:
    """League data files loaded for one standings computation."""
    config: LeagueConfig
    teams: list[Team]
    lineups: list[WeeklyLineup]
    matchups: list[Matchup]
    stats: StatsStore
    errors: list[str] = field(default_factory=list)


@dataclass
class ImportResult:
    """Outcome of importing one week of stats."""
    week: int
    success: bool = False
    records_imported: int = 0
    replaced_existing: bool = False
    errors: list[str] = field(default_factory=list)
    new_current_week: Optional[int] = None

    @property
    def week_advanced(self) -> bool:
        return self.new_current_week is not None


def load_teams(teams_path: str | Path) -> list[Team]:
    """Load league teams and rosters from teams.json."""
    teams_file = load_json(teams_path, schema=TeamsFile)
    return [Team(name=t.name, roster=list(t.roster)) for t in teams_file.teams]


def load_lineup_file(lineup_path: str | Path) -> list[WeeklyLineup]:
    """
    Load one week's lineup submissions.

    Raises:
        ValueError: If the file fails validation, or a week_N.json file
            holds lineups for another week
    """
    lineup_path = Path(lineup_path)
    lineups_file = load_json(lineup_path, schema=LineupsFile)

    file_week = week_from_filename(lineup_path)
    if file_week is not None and file_week != lineups_file.week:
        logger.error(f'{lineup_path} holds lineups for week {lineups_file.week}')
        raise ValueError(
            f"Lineup file week ({lineups_file.week}) doesn't match file name ({lineup_path.name})"
        )

    return [
        WeeklyLineup(
            team=team,
            week=lineups_file.week,
            active_franchises=list(entry.franchises),
            locked=entry.locked,
        )
        for team, entry in lineups_file.lineups.items()
    ]


def load_lineups(lineups_dir: str | Path) -> list[WeeklyLineup]:
    """Load every lineups/week_N.json file, in week order."""
    lineups = []
    for path in list_week_files(lineups_dir).values():
        lineups.extend(load_lineup_file(path))
    return lineups


def load_league(data_dir: str | Path, strict: bool = True) -> LeagueData:
    """
    Load a complete league snapshot from a data directory.

    Args:
        data_dir: Directory containing league_config.json, teams.json, schedule.txt,
            lineups/ and stats/
        strict: Raise if rosters, lineups or schedule fail validation

    Returns:
        LeagueData snapshot (validation messages in .errors when not strict)

    Raises:
        FileNotFoundError: If a required file is missing
        ValueError: If a data file is malformed (always), or if strict and
            any validation error was found
    """
    data_dir = Path(data_dir)
    config = load_config(data_dir / CONFIG_FILENAME)
    teams = load_teams(data_dir / 'teams.json')
    lineups = load_lineups(data_dir / 'lineups')

    schedule_path = data_dir / 'schedule.txt'
    matchups = parse_schedule_file(schedule_path) if schedule_path.exists() else []

    errors = []
    errors.extend(validate_rosters(teams, config.roster_size))
    errors.extend(validate_lineups(lineups, teams, config.lineup_size, config.total_weeks))
    errors.extend(validate_schedule(matchups, teams))

    if errors and strict:
        raise ValueError('League data failed validation:\n  ' + '\n  '.join(errors))
    for error in errors:
        logger.warning(error)

    return LeagueData(
        config=config,
        teams=teams,
        lineups=lineups,
        matchups=matchups,
        stats=JsonStatsStore(data_dir / 'stats'),
        errors=errors,
    )


def import_week_stats(
    store: StatsStore,
    week: int,
    rows: Iterable[RawWeeklyStats],
    current_week: int,
    total_weeks: int,
) -> ImportResult:
    """
    Import a week of stats, replacing anything previously imported for it.

    Importing a week at or past the current week advances the current week to
    the following one (capped at the final week).

    Returns:
        ImportResult; failures are reported in .errors rather than raised
    """
    result = ImportResult(week=week)
    rows = list(rows)

    if not rows:
        result.errors.append(f'No stat lines to import for week {week}')
        return result

    result.replaced_existing = week in store.available_weeks()
    try:
        result.records_imported = store.import_week(week, rows)
    except (ValueError, OSError) as e:
        logger.error(f'Stats import for week {week} failed: {e}')
        result.errors.append(str(e))
        return result

    result.success = True
    if week >= current_week:
        new_week = min(week + 1, total_weeks)
        if new_week != current_week:
            result.new_current_week = new_week
            logger.info(f'Advancing current week from {current_week} to {new_week}')

    return result


async def detect_current_week(source: StatsSource, total_weeks: int) -> int:
    """The week after the last one with stats, capped at total_weeks (1 if none)."""
    last_scored = 0
    for week in range(1, total_weeks + 1):
        if await source.get_week_stats(week):
            last_scored = week
    return min(last_scored + 1, total_weeks)


def save_standings_json(
    standings_path: str | Path,
    records: list[TeamRecord],
) -> None:
    """Write ranked standings (with weekly W/L/T sequences) to JSON."""
    standings = []
    for rank, record in enumerate(records, 1):
        entry = asdict(record)
        entry['rank'] = rank
        entry['record'] = record.record
        standings.append(entry)

    save_json(
        standings_path,
        {
            'updated_at': utc_timestamp(),
            'standings': standings,
        },
    )


def save_week_results(
    output_path: str | Path,
    week: int,
    matchup_scores: list[MatchupScore],
) -> None:
    """Write one week's matchup scores and per-franchise breakdowns to JSON."""
    matchups = []
    for scored in matchup_scores:
        m = scored.matchup
        matchups.append(
            {
                'team1': {
                    'name': m.team1,
                    'score': scored.team1_score,
                    'franchises': [asdict(f) for f in scored.team1_breakdown],
                },
                'team2': {
                    'name': m.team2,
                    'score': scored.team2_score,
                    'franchises': [asdict(f) for f in scored.team2_breakdown],
                },
                'winner': scored.winner,
            }
        )

    save_json(
        output_path,
        {
            'week': week,
            'scored_at': utc_timestamp(),
            'matchups': matchups,
        },
    )
