"""Schedule parsing for the Bad QB League.

schedule.txt lists one week per line:

    Week 1: Paul Johnson versus Max Athorn, Jacob Frush versus Devin Jones
    Week 2: Paul Johnson vs Jacob Frush, Max Athorn vs Devin Jones

Team names may contain spaces. Blank lines and lines starting with '#' are
ignored.
"""

import logging
import re
from pathlib import Path

from .constants import TOTAL_WEEKS
from .models import Matchup

logger = logging.getLogger('badqb.schedule')

WEEK_LINE = re.compile(r'^Week\s+(\d+)\s*:\s*(.*)$', re.IGNORECASE)
PAIRING = re.compile(r'^(.+?)\s+(?:versus|vs\.?)\s+(.+)$', re.IGNORECASE)


def parse_schedule_line(line: str) -> list[Matchup]:
    """
    Parse one "Week N: A versus B, C versus D" line.

    Returns:
        List of matchups (empty for blank or comment lines)

    Raises:
        ValueError: For an unrecognised line, an out-of-range week or a team playing itself
    """
    line = line.strip()
    if not line or line.startswith('#'):
        return []

    week_match = WEEK_LINE.match(line)
    if not week_match:
        raise ValueError(f'Unrecognised schedule line: {line!r}')

    week = int(week_match.group(1))
    if not (1 <= week <= TOTAL_WEEKS):
        raise ValueError(f'Week must be 1-{TOTAL_WEEKS}, got {week}')

    matchups = []
    for pairing in week_match.group(2).split(','):
        pairing = pairing.strip()
        if not pairing:
            continue
        teams_match = PAIRING.match(pairing)
        if not teams_match:
            raise ValueError(f'Week {week}: unrecognised matchup {pairing!r}')
        team1 = teams_match.group(1).strip()
        team2 = teams_match.group(2).strip()
        if team1 == team2:
            raise ValueError(f'Week {week}: {team1} cannot play itself')
        matchups.append(Matchup(week=week, team1=team1, team2=team2))

    return matchups


def parse_schedule_file(schedule_path: str | Path) -> list[Matchup]:
    """
    Parse schedule.txt into matchups.

    Args:
        schedule_path: Path to schedule.txt file

    Returns:
        List of matchups in file order
    """
    schedule_path = Path(schedule_path)
    if not schedule_path.exists():
        raise FileNotFoundError(f'Schedule file not found: {schedule_path}')

    matchups = []
    with open(schedule_path, encoding='utf-8') as f:
        for line_number, line in enumerate(f, 1):
            try:
                matchups.extend(parse_schedule_line(line))
            except ValueError as e:
                raise ValueError(f'{schedule_path}:{line_number}: {e}') from e

    logger.debug(f'Parsed {len(matchups)} matchups from {schedule_path}')
    return matchups


def get_week_matchups(matchups: list[Matchup], week: int) -> list[Matchup]:
    """Matchups scheduled for one week."""
    return [m for m in matchups if m.week == week]
