"""Standings and weekly results derived from matchups, lineups and stats.

A matchup only counts once its week has stats and both teams have set a
lineup for that week. Uncounted matchups contribute nothing to standings and
leave an empty result slot rather than a loss.
"""

import dataclasses
import logging
from typing import AsyncIterator, Iterable, Optional

from .constants import LOSS, NO_RESULT, TIE, TOTAL_WEEKS, WIN
from .models import (
    FranchiseScore,
    Matchup,
    MatchupDetails,
    MatchupScore,
    Team,
    TeamRecord,
    TeamWeekScore,
    WeeklyLineup,
)
from .schemas import LeagueConfig
from .scoring import score_franchise
from .stats_source import StatsSource, WeekStatsCache

logger = logging.getLogger('badqb.standings')


def _result_for(team_score: int, opponent_score: int) -> str:
    if team_score == opponent_score:
        return TIE
    return WIN if team_score > opponent_score else LOSS


class StandingsEngine:
    """
    Derives scores, standings and results for one snapshot of league data.

    Stats are read through a per-week cache, so a week is fetched from the
    underlying source at most once per engine.
    """

    def __init__(
        self,
        lineups: Iterable[WeeklyLineup],
        stats_source: StatsSource,
        weeks: Iterable[int] = range(1, TOTAL_WEEKS + 1),
        count_turnover_events: bool = False,
    ):
        """
        Initialize engine.

        Args:
            lineups: All weekly lineups (first lineup wins for a duplicate team/week)
            stats_source: Weekly stats lookup
            weeks: Week numbers covered by weekly results
            count_turnover_events: Passed through to franchise scoring
        """
        self.lineups: dict[tuple[str, int], WeeklyLineup] = {}
        for lineup in lineups:
            key = (lineup.team, lineup.week)
            if key in self.lineups:
                logger.warning(f'Duplicate lineup for {lineup.team} week {lineup.week}; ignoring')
                continue
            self.lineups[key] = lineup

        if isinstance(stats_source, WeekStatsCache):
            self.stats = stats_source
        else:
            self.stats = WeekStatsCache(stats_source)
        self.weeks = list(weeks)
        self.count_turnover_events = count_turnover_events

    @classmethod
    def from_config(
        cls,
        lineups: Iterable[WeeklyLineup],
        stats_source: StatsSource,
        config: LeagueConfig,
    ) -> 'StandingsEngine':
        """Build an engine using the league's week range and scoring options."""
        return cls(
            lineups,
            stats_source,
            weeks=range(1, config.total_weeks + 1),
            count_turnover_events=config.count_turnover_events,
        )

    def get_lineup(self, team: str, week: int) -> Optional[WeeklyLineup]:
        return self.lineups.get((team, week))

    async def is_counted(self, matchup: Matchup) -> bool:
        """Whether a matchup has stats for its week and lineups on both sides."""
        if self.get_lineup(matchup.team1, matchup.week) is None:
            return False
        if self.get_lineup(matchup.team2, matchup.week) is None:
            return False
        return bool(await self.stats.get_week_stats(matchup.week))

    async def team_week_score(self, team: str, week: int) -> TeamWeekScore:
        """
        Score a team's lineup for a week.

        A team without a lineup scores 0 with no franchise entries. A started
        franchise without stats gets a pending entry (score None) and adds 0.
        """
        result = TeamWeekScore(team=team, week=week)
        lineup = self.get_lineup(team, week)
        if lineup is None:
            return result

        week_stats = await self.stats.get_week_stats(week)
        for franchise in lineup.active_franchises:
            stats = week_stats.get(franchise)
            if stats is None:
                result.franchises.append(FranchiseScore(franchise=franchise))
                continue
            points, breakdown = score_franchise(stats, self.count_turnover_events)
            result.score += points
            result.franchises.append(
                FranchiseScore(franchise=franchise, score=points, breakdown=breakdown)
            )
        return result

    async def matchup_score(self, matchup: Matchup) -> MatchupScore:
        """Score both sides of a matchup independently."""
        team1 = await self.team_week_score(matchup.team1, matchup.week)
        team2 = await self.team_week_score(matchup.team2, matchup.week)
        return MatchupScore(
            matchup=matchup,
            team1_score=team1.score,
            team2_score=team2.score,
            team1_breakdown=team1.franchises,
            team2_breakdown=team2.franchises,
        )

    async def counted_matchups(
        self, matchups: Iterable[Matchup]
    ) -> AsyncIterator[MatchupScore]:
        """Yield scores for the matchups that pass the data-availability check."""
        for matchup in matchups:
            if await self.is_counted(matchup):
                yield await self.matchup_score(matchup)

    async def weekly_results(
        self, matchups: Iterable[Matchup], teams: Iterable[Team]
    ) -> dict[str, list[str]]:
        """
        Build each team's W/L/T sequence over the engine's week range.

        Returns:
            Dict mapping team name to one result code per week ('' = no result)
        """
        week_index = {week: i for i, week in enumerate(self.weeks)}
        results = {team.name: [NO_RESULT] * len(self.weeks) for team in teams}

        async for scored in self.counted_matchups(matchups):
            m = scored.matchup
            if m.week not in week_index:
                continue
            slot = week_index[m.week]
            if m.team1 in results:
                results[m.team1][slot] = _result_for(scored.team1_score, scored.team2_score)
            if m.team2 in results:
                results[m.team2][slot] = _result_for(scored.team2_score, scored.team1_score)
        return results

    async def standings(
        self, matchups: Iterable[Matchup], teams: Iterable[Team]
    ) -> list[TeamRecord]:
        """
        Compute team records, ranked by wins then total points.

        Negative scores accumulate into total points. Teams tied on both
        wins and points keep their input order.
        """
        teams = list(teams)
        matchups = list(matchups)
        records = {team.name: TeamRecord(team_name=team.name) for team in teams}

        async for scored in self.counted_matchups(matchups):
            m = scored.matchup
            sides = (
                (m.team1, scored.team1_score, scored.team2_score),
                (m.team2, scored.team2_score, scored.team1_score),
            )
            for name, team_score, opponent_score in sides:
                record = records.get(name)
                if record is None:
                    logger.warning(f'Week {m.week} matchup references unknown team {name}')
                    continue
                result = _result_for(team_score, opponent_score)
                if result == WIN:
                    record.wins += 1
                elif result == LOSS:
                    record.losses += 1
                else:
                    record.ties += 1
                record.total_points += team_score

        weekly = await self.weekly_results(matchups, teams)
        for name, record in records.items():
            record.weekly_results = weekly[name]

        return sorted(records.values(), key=lambda r: (r.wins, r.total_points), reverse=True)

    def _find_matchup(self, team: str, week: int, matchups: Iterable[Matchup]) -> Optional[Matchup]:
        for matchup in matchups:
            if matchup.week == week and matchup.involves(team):
                return matchup
        return None

    async def team_week_result(
        self, team: str, week: int, matchups: Iterable[Matchup]
    ) -> Optional[str]:
        """A team's result for a week, or None if there is no counted matchup."""
        details = await self.team_week_matchup_details(team, week, matchups)
        return details.result if details else None

    async def current_record(self, team: str, matchups: Iterable[Matchup]) -> str:
        """Record string such as '5-2' or '5-2-1' (ties shown only when present)."""
        matchups = list(matchups)
        tally = {WIN: 0, LOSS: 0, TIE: 0}
        for matchup in matchups:
            if not matchup.involves(team):
                continue
            result = await self.team_week_result(team, matchup.week, matchups)
            if result is not None:
                tally[result] += 1

        record = f'{tally[WIN]}-{tally[LOSS]}'
        if tally[TIE] > 0:
            record += f'-{tally[TIE]}'
        return record

    async def team_week_matchup_details(
        self, team: str, week: int, matchups: Iterable[Matchup]
    ) -> Optional[MatchupDetails]:
        """Opponent, scores, starters and result for a team's matchup in a week."""
        matchup = self._find_matchup(team, week, matchups)
        if matchup is None or not await self.is_counted(matchup):
            return None

        scored = await self.matchup_score(matchup)
        is_team1 = matchup.team1 == team
        opponent = matchup.team2 if is_team1 else matchup.team1
        team_score = scored.team1_score if is_team1 else scored.team2_score
        opponent_score = scored.team2_score if is_team1 else scored.team1_score

        return MatchupDetails(
            opponent=opponent,
            team_score=team_score,
            opponent_score=opponent_score,
            team_franchises=list(self.get_lineup(team, week).active_franchises),
            opponent_franchises=list(self.get_lineup(opponent, week).active_franchises),
            result=_result_for(team_score, opponent_score),
        )

    async def score_matchups(self, matchups: Iterable[Matchup]) -> list[Matchup]:
        """
        Return copies of the matchups with scores and winner recomputed.

        Uncounted matchups have no scores and no winner; ties have no winner.
        """
        scored_matchups = []
        for matchup in matchups:
            if not await self.is_counted(matchup):
                scored_matchups.append(
                    dataclasses.replace(matchup, team1_score=None, team2_score=None, winner=None)
                )
                continue
            scored = await self.matchup_score(matchup)
            scored_matchups.append(
                dataclasses.replace(
                    matchup,
                    team1_score=scored.team1_score,
                    team2_score=scored.team2_score,
                    winner=scored.winner,
                )
            )
        return scored_matchups


# One-shot helpers: each builds a fresh engine, i.e. one computation pass


async def team_week_score(
    team: str, week: int, lineups: Iterable[WeeklyLineup], stats_source: StatsSource
) -> TeamWeekScore:
    return await StandingsEngine(lineups, stats_source).team_week_score(team, week)


async def matchup_score(
    matchup: Matchup, lineups: Iterable[WeeklyLineup], stats_source: StatsSource
) -> MatchupScore:
    return await StandingsEngine(lineups, stats_source).matchup_score(matchup)


async def calculate_standings(
    matchups: Iterable[Matchup],
    lineups: Iterable[WeeklyLineup],
    teams: Iterable[Team],
    stats_source: StatsSource,
) -> list[TeamRecord]:
    """Compute ranked standings for a league snapshot."""
    return await StandingsEngine(lineups, stats_source).standings(matchups, teams)


async def calculate_weekly_results(
    matchups: Iterable[Matchup],
    lineups: Iterable[WeeklyLineup],
    teams: Iterable[Team],
    stats_source: StatsSource,
    weeks: Iterable[int] = range(1, TOTAL_WEEKS + 1),
) -> dict[str, list[str]]:
    """Compute each team's weekly W/L/T sequence for a league snapshot."""
    engine = StandingsEngine(lineups, stats_source, weeks=weeks)
    return await engine.weekly_results(matchups, teams)


async def team_week_result(
    team: str,
    week: int,
    matchups: Iterable[Matchup],
    lineups: Iterable[WeeklyLineup],
    stats_source: StatsSource,
) -> Optional[str]:
    return await StandingsEngine(lineups, stats_source).team_week_result(team, week, matchups)


async def current_record(
    team: str,
    matchups: Iterable[Matchup],
    lineups: Iterable[WeeklyLineup],
    stats_source: StatsSource,
) -> str:
    return await StandingsEngine(lineups, stats_source).current_record(team, matchups)


async def team_week_matchup_details(
    team: str,
    week: int,
    matchups: Iterable[Matchup],
    lineups: Iterable[WeeklyLineup],
    stats_source: StatsSource,
) -> Optional[MatchupDetails]:
    engine = StandingsEngine(lineups, stats_source)
    return await engine.team_week_matchup_details(team, week, matchups)
