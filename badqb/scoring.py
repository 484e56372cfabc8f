"""Scoring functions for a franchise's weekly quarterback play.

Bad QB League scoring is inverted: poor quarterback performances earn points,
good ones cost points. A franchise's score is the sum of four tiered
categories plus any discrete events.
"""

from enum import Enum
from typing import Dict, Tuple

from .models import RawWeeklyStats


class ScoringEvent(Enum):
    """Discrete events, each worth a fixed number of points per occurrence."""

    GAME_ENDING_FUMBLE = ('Game-ending F Up', 50, 'Quarterback makes a game-ending mistake')
    BENCHING = ('Benching', 35, 'Quarterback gets benched during the game')
    DEFENSIVE_TD = ('Defensive TD', 20, 'Defense scores a touchdown')
    QB_SAFETY = ('QB Safety', 15, 'Quarterback gets sacked in end zone')
    NO_PASS_25_PLUS = ('No Pass 25+ Yards', 10, 'No pass completion over 25 yards')
    INTERCEPTION = ('Interception', 5, 'Quarterback throws an interception')
    FUMBLE = ('Fumble', 4, 'Quarterback fumbles the ball')
    RUSH_75_PLUS = ('≥75 Rush Yards', -8, 'Quarterback rushes for 75+ yards')
    GAME_WINNING_DRIVE = ('Game-Winning Drive', -12, 'Quarterback leads game-winning drive')
    GWD_FIELD_GOAL = ('GWD by Field Goal', -6, 'Game-winning drive ends in field goal')

    def __init__(self, label: str, points: int, description: str):
        self.label = label
        self.points = points
        self.description = description

    def count(self, stats: RawWeeklyStats) -> int:
        """Number of times this event occurred in a stat line."""
        return _EVENT_COUNTERS[self](stats)


_EVENT_COUNTERS = {
    ScoringEvent.GAME_ENDING_FUMBLE: lambda s: s.game_ending_fumble,
    ScoringEvent.BENCHING: lambda s: s.benching,
    ScoringEvent.DEFENSIVE_TD: lambda s: s.defensive_td,
    ScoringEvent.QB_SAFETY: lambda s: s.safety,
    ScoringEvent.NO_PASS_25_PLUS: lambda s: int(
        s.longest_completion is not None and s.longest_completion < 25
    ),
    ScoringEvent.INTERCEPTION: lambda s: s.interceptions,
    ScoringEvent.FUMBLE: lambda s: s.fumbles,
    ScoringEvent.RUSH_75_PLUS: lambda s: int(s.rush_yards >= 75),
    ScoringEvent.GAME_WINNING_DRIVE: lambda s: s.game_winning_drive,
    ScoringEvent.GWD_FIELD_GOAL: lambda s: s.gwd_field_goal,
}

# Already scored in aggregate by the turnover tier
TURNOVER_EVENTS = frozenset({ScoringEvent.INTERCEPTION, ScoringEvent.FUMBLE})


def score_pass_yards(pass_yards: int) -> int:
    """
    Score passing yards.

    Scoring:
        - 100 or fewer: +25
        - 101-150: +12
        - 151-200: +6
        - 201-299: 0
        - 300-349: -6
        - 350-399: -9
        - 400+: -12
    """
    if pass_yards <= 100:
        return 25
    elif pass_yards <= 150:
        return 12
    elif pass_yards <= 200:
        return 6
    elif pass_yards <= 299:
        return 0
    elif pass_yards <= 349:
        return -6
    elif pass_yards <= 399:
        return -9
    return -12


def score_touchdowns(touchdowns: int) -> int:
    """
    Score passing touchdowns.

    Scoring:
        - 0: +10
        - 1 or 2: 0
        - 3: -5
        - 4: -10
        - 5+: -20
    """
    if touchdowns == 0:
        return 10
    elif touchdowns in (1, 2):
        return 0
    elif touchdowns == 3:
        return -5
    elif touchdowns == 4:
        return -10
    return -20


def score_completion_percent(completion_percent: float) -> int:
    """
    Score completion percentage.

    Scoring:
        - 30% or lower: +25
        - 40% or lower: +15
        - 50% or lower: +5
        - above 50%: 0
    """
    if completion_percent <= 30:
        return 25
    elif completion_percent <= 40:
        return 15
    elif completion_percent <= 50:
        return 5
    return 0


def score_turnovers(turnovers: int) -> int:
    """
    Score turnovers (interceptions + fumbles).

    Only piles of turnovers are rewarded; 0-2 score nothing.

    Scoring:
        - 3: +12
        - 4: +16
        - 5: +24
        - 6+: +50
    """
    if turnovers == 3:
        return 12
    elif turnovers == 4:
        return 16
    elif turnovers == 5:
        return 24
    elif turnovers >= 6:
        return 50
    return 0


def event_counts(
    stats: RawWeeklyStats, count_turnover_events: bool = False
) -> Dict[ScoringEvent, int]:
    """
    Count the scoring events in a stat line.

    Args:
        stats: Franchise stat line
        count_turnover_events: Also count each interception and fumble as an event,
            on top of the aggregate turnover tier

    Returns:
        Dict mapping each event that occurred to its count
    """
    counts = {}
    for event in ScoringEvent:
        if event in TURNOVER_EVENTS and not count_turnover_events:
            continue
        count = event.count(stats)
        if count:
            counts[event] = count
    return counts


def score_events(
    stats: RawWeeklyStats, count_turnover_events: bool = False
) -> Tuple[int, Dict[str, int]]:
    """Score discrete events. Returns (points, points per event label)."""
    points = 0
    breakdown = {}
    for event, count in event_counts(stats, count_turnover_events).items():
        event_pts = event.points * count
        breakdown[event.label] = event_pts
        points += event_pts
    return points, breakdown


def score_franchise(
    stats: RawWeeklyStats, count_turnover_events: bool = False
) -> Tuple[int, Dict[str, int]]:
    """
    Score one franchise's week.

    Args:
        stats: Franchise stat line
        count_turnover_events: See event_counts()

    Returns:
        Tuple of (total points, breakdown by category)
    """
    events_pts, _ = score_events(stats, count_turnover_events)
    breakdown = {
        'pass_yards': score_pass_yards(stats.pass_yards),
        'touchdowns': score_touchdowns(stats.touchdowns),
        'completion_percent': score_completion_percent(stats.completion_percent),
        'turnovers': score_turnovers(stats.turnovers),
        'events': events_pts,
    }
    return sum(breakdown.values()), breakdown


def calculate_score(stats: RawWeeklyStats, count_turnover_events: bool = False) -> int:
    """Calculate a franchise's weekly score."""
    points, _ = score_franchise(stats, count_turnover_events)
    return points


def scoring_rules() -> list[dict]:
    """Event table for rules pages."""
    return [
        {'name': event.label, 'points': event.points, 'description': event.description}
        for event in ScoringEvent
    ]
