"""Data models for the Bad QB League scoring engine."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class Team:
    """A league team and the four franchises it drafted."""
    name: str
    roster: List[str] = field(default_factory=list)


@dataclass
class WeeklyLineup:
    """The two franchises a team starts in a given week."""
    team: str
    week: int
    active_franchises: List[str] = field(default_factory=list)
    locked: bool = False  # Informational; never consulted when scoring


@dataclass
class RawWeeklyStats:
    """One franchise's quarterback stat line for a week."""
    franchise: str
    week: int
    pass_yards: int = 0
    touchdowns: int = 0
    completion_percent: float = 0.0
    interceptions: int = 0
    fumbles: int = 0
    rush_yards: int = 0
    longest_completion: Optional[int] = None
    # Discrete event counters
    defensive_td: int = 0
    safety: int = 0
    game_ending_fumble: int = 0
    game_winning_drive: int = 0
    gwd_field_goal: int = 0
    benching: int = 0

    @property
    def turnovers(self) -> int:
        return self.interceptions + self.fumbles


@dataclass
class Matchup:
    """A head-to-head pairing. Scores and winner are derived, never trusted as input."""
    week: int
    team1: str
    team2: str
    team1_score: Optional[int] = None
    team2_score: Optional[int] = None
    winner: Optional[str] = None

    def involves(self, team: str) -> bool:
        return team in (self.team1, self.team2)


@dataclass
class FranchiseScore:
    """Breakdown entry for one started franchise. score is None while stats are pending."""
    franchise: str
    score: Optional[int] = None
    breakdown: Optional[Dict[str, int]] = None

    @property
    def pending(self) -> bool:
        return self.score is None


@dataclass
class TeamWeekScore:
    """A team's combined score for one week."""
    team: str
    week: int
    score: int = 0
    franchises: List[FranchiseScore] = field(default_factory=list)

    @property
    def has_lineup(self) -> bool:
        return bool(self.franchises)


@dataclass
class MatchupScore:
    """Both sides of a matchup, scored independently."""
    matchup: Matchup
    team1_score: int = 0
    team2_score: int = 0
    team1_breakdown: List[FranchiseScore] = field(default_factory=list)
    team2_breakdown: List[FranchiseScore] = field(default_factory=list)

    @property
    def winner(self) -> Optional[str]:
        """Higher-scoring team name, or None on a tie."""
        if self.team1_score > self.team2_score:
            return self.matchup.team1
        if self.team2_score > self.team1_score:
            return self.matchup.team2
        return None


@dataclass
class MatchupDetails:
    """A matchup seen from one team's side."""
    opponent: str
    team_score: int
    opponent_score: int
    team_franchises: List[str]
    opponent_franchises: List[str]
    result: str


@dataclass
class TeamRecord:
    """Derived season record for a team."""
    team_name: str
    wins: int = 0
    losses: int = 0
    ties: int = 0
    total_points: int = 0
    weekly_results: List[str] = field(default_factory=list)

    @property
    def record(self) -> str:
        if self.ties > 0:
            return f'{self.wins}-{self.losses}-{self.ties}'
        return f'{self.wins}-{self.losses}'
