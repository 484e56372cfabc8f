"""NFL stats fetching using nflreadpy.

All of a franchise's quarterbacks are combined into one stat line, so a
mid-game benching still counts toward the drafted franchise.
"""

import asyncio
import dataclasses
import logging
from typing import Optional

import polars as pl

try:
    import nflreadpy as nfl
except ImportError:
    raise ImportError("Please install nflreadpy: pip install nflreadpy")

from .constants import ABBREV_TO_FRANCHISE
from .models import RawWeeklyStats
from .stats_source import StatsLoadError, StatsSource, WeekStats

logger = logging.getLogger('badqb.data_fetcher')

# Per-franchise event counters keyed by week, then franchise
EventOverrides = dict[int, dict[str, dict[str, int]]]

EVENT_FIELDS = (
    'defensive_td',
    'safety',
    'game_ending_fumble',
    'game_winning_drive',
    'gwd_field_goal',
    'benching',
)

SUMMED_COLUMNS = (
    'completions',
    'attempts',
    'passing_yards',
    'passing_tds',
    'passing_interceptions',
    'sack_fumbles',
    'rushing_fumbles',
    'rushing_yards',
)


def aggregate_franchise_stats(player_stats: pl.DataFrame, week: int) -> WeekStats:
    """
    Combine a week's quarterback rows into one stat line per franchise.

    Args:
        player_stats: Weekly player stats (nflreadpy load_player_stats format)
        week: Week number to aggregate

    Returns:
        Dict mapping franchise name to RawWeeklyStats (empty if no games played)
    """
    qbs = player_stats.filter((pl.col('week') == week) & (pl.col('position') == 'QB'))
    if qbs.height == 0:
        return {}

    totals = qbs.group_by('team').agg(
        [pl.col(col).fill_null(0).sum().alias(col) for col in SUMMED_COLUMNS]
    )

    stats = {}
    for row in totals.iter_rows(named=True):
        franchise = ABBREV_TO_FRANCHISE.get(row['team'])
        if franchise is None:
            logger.warning(f"Skipping unknown team abbreviation {row['team']} in week {week}")
            continue

        attempts = row['attempts']
        completion_percent = round(100 * row['completions'] / attempts, 2) if attempts else 0.0

        stats[franchise] = RawWeeklyStats(
            franchise=franchise,
            week=week,
            pass_yards=int(row['passing_yards']),
            touchdowns=int(row['passing_tds']),
            completion_percent=completion_percent,
            interceptions=int(row['passing_interceptions']),
            fumbles=int(row['sack_fumbles'] + row['rushing_fumbles']),
            rush_yards=int(row['rushing_yards']),
        )

    return stats


def apply_event_overrides(stats: WeekStats, overrides: dict[str, dict[str, int]]) -> WeekStats:
    """Merge manually recorded event counters (benchings, defensive TDs, ...) into stat lines."""
    merged = dict(stats)
    for franchise, counters in overrides.items():
        if franchise not in merged:
            logger.warning(f'Event override for {franchise}, which has no stats this week')
            continue
        unknown = set(counters) - set(EVENT_FIELDS) - {'longest_completion'}
        if unknown:
            raise ValueError(f'Unknown event fields for {franchise}: {sorted(unknown)}')
        merged[franchise] = dataclasses.replace(merged[franchise], **counters)
    return merged


class NFLStatsSource(StatsSource):
    """Fetches and caches weekly franchise stats from nflreadpy."""

    def __init__(self, season: int, events: Optional[EventOverrides] = None):
        self.season = season
        self.events = events or {}
        self._player_stats: Optional[pl.DataFrame] = None

    @property
    def player_stats(self) -> pl.DataFrame:
        """Lazy load the season's weekly player stats."""
        if self._player_stats is None:
            logger.info(f'Loading player stats for {self.season}...')
            self._player_stats = nfl.load_player_stats(seasons=self.season, summary_level='week')
        return self._player_stats

    def fetch_week(self, week: int) -> WeekStats:
        """Blocking fetch of one week's franchise stats."""
        try:
            stats = aggregate_franchise_stats(self.player_stats, week)
        except (pl.exceptions.PolarsError, OSError) as e:
            raise StatsLoadError(week, str(e)) from e
        return apply_event_overrides(stats, self.events.get(week, {}))

    async def get_week_stats(self, week: int) -> WeekStats:
        return await asyncio.to_thread(self.fetch_week, week)
