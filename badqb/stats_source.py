"""Weekly stats sources consumed by the standings engine.

A stats source answers one question: which franchises have stats for a
given week. An empty answer means the week has not been scored yet. Load
failures are raised as StatsLoadError so callers can tell "not available
yet" apart from "failed to load".
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Iterable

from .models import RawWeeklyStats
from .schemas import StatLine, WeeklyStatsFile
from .utils import list_week_files, load_json, save_json, utc_timestamp, week_file

logger = logging.getLogger('badqb.stats_source')

WeekStats = dict[str, RawWeeklyStats]


class StatsLoadError(RuntimeError):
    """Raised when a stats source fails to load a week."""

    def __init__(self, week: int, message: str):
        super().__init__(f'Failed to load stats for week {week}: {message}')
        self.week = week


class StatsSource:
    """
    Base class for weekly stats lookups.

    Subclasses implement get_week_stats().
    """

    async def get_week_stats(self, week: int) -> WeekStats:
        """
        Get all franchise stat lines for a week.

        Args:
            week: Week number

        Returns:
            Dict mapping franchise name to RawWeeklyStats (empty if not yet scored)

        Raises:
            StatsLoadError: If the underlying store cannot be read
        """
        raise NotImplementedError


class StatsStore(StatsSource):
    """A stats source that can also be written to, one full week at a time."""

    def import_week(self, week: int, rows: Iterable[RawWeeklyStats]) -> int:
        """
        Replace all stats for a week.

        Re-importing a week discards every row from the previous import.

        Returns:
            Number of rows stored
        """
        raise NotImplementedError

    def delete_week(self, week: int) -> bool:
        """Remove a week's stats. Returns True if anything was removed."""
        raise NotImplementedError

    def available_weeks(self) -> list[int]:
        """Weeks that currently have stats, ascending."""
        raise NotImplementedError


def _index_rows(week: int, rows: Iterable[RawWeeklyStats]) -> WeekStats:
    indexed = {}
    for row in rows:
        if row.week != week:
            raise ValueError(f'Stat line for {row.franchise} is week {row.week}, expected {week}')
        if row.franchise in indexed:
            logger.warning(f'Duplicate stat line for {row.franchise} in week {week}; keeping last')
        indexed[row.franchise] = row
    return indexed


class InMemoryStatsStore(StatsStore):
    """Dict-backed stats store."""

    def __init__(self, weeks: dict[int, Iterable[RawWeeklyStats]] | None = None):
        self._weeks: dict[int, WeekStats] = {}
        for week, rows in (weeks or {}).items():
            self.import_week(week, rows)

    async def get_week_stats(self, week: int) -> WeekStats:
        return dict(self._weeks.get(week, {}))

    def import_week(self, week: int, rows: Iterable[RawWeeklyStats]) -> int:
        indexed = _index_rows(week, rows)
        if indexed:
            self._weeks[week] = indexed
        else:
            self._weeks.pop(week, None)
        return len(indexed)

    def delete_week(self, week: int) -> bool:
        return self._weeks.pop(week, None) is not None

    def available_weeks(self) -> list[int]:
        return sorted(self._weeks)


class JsonStatsStore(StatsStore):
    """Stats store with one stats/week_N.json file per week."""

    def __init__(self, stats_dir: str | Path):
        self.stats_dir = Path(stats_dir)

    def week_path(self, week: int) -> Path:
        return week_file(self.stats_dir, week)

    async def get_week_stats(self, week: int) -> WeekStats:
        path = self.week_path(week)
        if not path.exists():
            return {}

        try:
            data = load_json(path, schema=WeeklyStatsFile)
        except (json.JSONDecodeError, ValueError, OSError) as e:
            raise StatsLoadError(week, str(e)) from e

        if data.week != week:
            raise StatsLoadError(week, f'{path} contains week {data.week}')

        return _index_rows(week, (line.to_stats(week) for line in data.stats))

    def import_week(self, week: int, rows: Iterable[RawWeeklyStats]) -> int:
        indexed = _index_rows(week, rows)
        if not indexed:
            self.delete_week(week)
            return 0

        stats_file = WeeklyStatsFile(
            week=week,
            imported_at=utc_timestamp(),
            stats=[
                StatLine(**{k: v for k, v in vars(row).items() if k != 'week'})
                for row in indexed.values()
            ],
        )
        save_json(self.week_path(week), stats_file)
        logger.info(f'Imported {len(indexed)} stat lines for week {week}')
        return len(indexed)

    def delete_week(self, week: int) -> bool:
        path = self.week_path(week)
        if path.exists():
            path.unlink()
            return True
        return False

    def available_weeks(self) -> list[int]:
        return list(list_week_files(self.stats_dir))


class WeekStatsCache(StatsSource):
    """
    Read-through cache in front of another stats source.

    Each week is fetched at most once; concurrent requests for the same
    week wait on the same fetch. Failed fetches are not cached.
    """

    def __init__(self, source: StatsSource):
        self.source = source
        self.fetch_count = 0
        self._cache: dict[int, WeekStats] = {}
        self._locks: dict[int, asyncio.Lock] = {}

    async def get_week_stats(self, week: int) -> WeekStats:
        if week in self._cache:
            return self._cache[week]

        lock = self._locks.setdefault(week, asyncio.Lock())
        async with lock:
            if week not in self._cache:
                logger.debug(f'Fetching stats for week {week}')
                self.fetch_count += 1
                self._cache[week] = await self.source.get_week_stats(week)
        return self._cache[week]

    def clear(self) -> None:
        self._cache.clear()
        self._locks.clear()
