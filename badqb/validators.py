"""Validation functions for rosters, lineups, schedules and scores."""

from collections import Counter

from .constants import LINEUP_SIZE, MINIMUM_STARTS, NFL_FRANCHISES, ROSTER_SIZE, TOTAL_WEEKS
from .models import Matchup, Team, WeeklyLineup


def validate_roster(team: Team, roster_size: int = ROSTER_SIZE) -> list[str]:
    """
    Validate that a team's roster complies with league rules.

    Checks:
    - Exactly roster_size franchises
    - All franchises are real NFL franchises
    - No duplicate franchises

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []

    if len(team.roster) != roster_size:
        errors.append(f'{team.name} has {len(team.roster)} franchises (expected {roster_size})')

    for franchise in team.roster:
        if franchise not in NFL_FRANCHISES:
            errors.append(f'{team.name} roster has unknown franchise: {franchise}')

    duplicates = sorted(f for f, n in Counter(team.roster).items() if n > 1)
    if duplicates:
        errors.append(f'{team.name} has duplicate franchises: {", ".join(duplicates)}')

    return errors


def validate_rosters(teams: list[Team], roster_size: int = ROSTER_SIZE) -> list[str]:
    """Validate every roster and check that no franchise is drafted twice."""
    errors = []
    owners: dict[str, str] = {}

    for team in teams:
        errors.extend(validate_roster(team, roster_size))
        for franchise in team.roster:
            if franchise in owners and owners[franchise] != team.name:
                errors.append(
                    f'{franchise} is on both {owners[franchise]} and {team.name} rosters'
                )
            owners.setdefault(franchise, team.name)

    return errors


def validate_lineup(
    lineup: WeeklyLineup,
    team: Team,
    lineup_size: int = LINEUP_SIZE,
    total_weeks: int = TOTAL_WEEKS,
) -> list[str]:
    """
    Validate a weekly lineup submission.

    Checks:
    - Week is within the season (1..total_weeks)
    - Exactly lineup_size distinct franchises
    - All starters are on the team's roster

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []
    prefix = f'{lineup.team} week {lineup.week}'

    if not (1 <= lineup.week <= total_weeks):
        errors.append(f'{prefix}: week must be 1-{total_weeks}')

    if len(lineup.active_franchises) != lineup_size:
        errors.append(
            f'{prefix}: lineup has {len(lineup.active_franchises)} franchises (expected {lineup_size})'
        )

    if len(set(lineup.active_franchises)) != len(lineup.active_franchises):
        errors.append(f'{prefix}: lineup starts the same franchise twice')

    for franchise in lineup.active_franchises:
        if franchise not in team.roster:
            errors.append(f'{prefix}: {franchise} is not on the roster')

    return errors


def validate_lineups(
    lineups: list[WeeklyLineup],
    teams: list[Team],
    lineup_size: int = LINEUP_SIZE,
    total_weeks: int = TOTAL_WEEKS,
) -> list[str]:
    """Validate all lineups, including unknown teams and duplicate team/week submissions."""
    errors = []
    teams_by_name = {team.name: team for team in teams}
    seen = set()

    for lineup in lineups:
        key = (lineup.team, lineup.week)
        if key in seen:
            errors.append(f'{lineup.team} has more than one lineup for week {lineup.week}')
        seen.add(key)

        team = teams_by_name.get(lineup.team)
        if team is None:
            errors.append(f'Lineup for unknown team: {lineup.team}')
            continue
        errors.extend(validate_lineup(lineup, team, lineup_size, total_weeks))

    return errors


def validate_schedule(matchups: list[Matchup], teams: list[Team]) -> list[str]:
    """
    Validate the matchup schedule.

    Checks:
    - Both teams exist
    - A team never plays itself
    - A pairing appears at most once per week
    - A team plays at most once per week
    """
    errors = []
    team_names = {team.name for team in teams}
    pairs_seen = set()
    teams_per_week: dict[int, Counter] = {}

    for matchup in matchups:
        prefix = f'Week {matchup.week}'
        for name in (matchup.team1, matchup.team2):
            if name not in team_names:
                errors.append(f'{prefix}: unknown team {name}')

        if matchup.team1 == matchup.team2:
            errors.append(f'{prefix}: {matchup.team1} is scheduled against itself')
            continue

        pair = (matchup.week, frozenset((matchup.team1, matchup.team2)))
        if pair in pairs_seen:
            errors.append(f'{prefix}: {matchup.team1} vs {matchup.team2} is scheduled twice')
        pairs_seen.add(pair)

        week_counts = teams_per_week.setdefault(matchup.week, Counter())
        week_counts.update((matchup.team1, matchup.team2))

    for week, counts in sorted(teams_per_week.items()):
        for name, n in sorted(counts.items()):
            if n > 1:
                errors.append(f'Week {week}: {name} has {n} matchups')

    return errors


def validate_lineup_edit(lineup: WeeklyLineup, locked_weeks: list[int]) -> list[str]:
    """Check whether a lineup may still be changed. Scoring never consults this."""
    errors = []
    if lineup.locked:
        errors.append(f'{lineup.team} week {lineup.week} lineup is locked')
    if lineup.week in locked_weeks:
        errors.append(f'Week {lineup.week} is locked')
    return errors


def franchise_start_counts(team: Team, lineups: list[WeeklyLineup]) -> dict[str, int]:
    """Count how many weeks each rostered franchise has been started."""
    counts = {franchise: 0 for franchise in team.roster}
    for lineup in lineups:
        if lineup.team != team.name:
            continue
        for franchise in lineup.active_franchises:
            if franchise in counts:
                counts[franchise] += 1
    return counts


def validate_minimum_starts(
    team: Team,
    lineups: list[WeeklyLineup],
    weeks_remaining: int,
    minimum: int = MINIMUM_STARTS,
) -> list[str]:
    """
    Warn when a rostered franchise can no longer reach the minimum number of starts.

    Every franchise must be started at least `minimum` times a season. Each
    remaining week offers one start per franchise.
    """
    warnings = []
    for franchise, starts in franchise_start_counts(team, lineups).items():
        if starts + weeks_remaining < minimum:
            warnings.append(
                f'{team.name} has started {franchise} {starts} times with {weeks_remaining} '
                f'weeks left (minimum {minimum})'
            )
    return warnings


def validate_franchise_score(franchise: str, points: int, breakdown: dict[str, int]) -> list[str]:
    """
    Check that a franchise score is internally consistent.

    Sanity checks:
    - Breakdown categories sum to the total
    - Total within the range the rules can produce (-100 to 250)
    """
    warnings = []

    breakdown_sum = sum(breakdown.values())
    if breakdown_sum != points:
        warnings.append(f'{franchise} breakdown sum ({breakdown_sum}) != total ({points})')

    if points > 250:
        warnings.append(f'{franchise} scored {points} pts (unusually high - check stat import)')
    elif points < -100:
        warnings.append(f'{franchise} scored {points} pts (unusually low - check stat import)')

    return warnings
