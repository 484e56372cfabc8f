"""Pydantic schemas for league JSON data validation."""

from pydantic import BaseModel, Field, field_validator

from .constants import ABBREV_TO_FRANCHISE, NFL_FRANCHISES, TOTAL_WEEKS
from .models import RawWeeklyStats


def _check_franchises(franchises: list[str]) -> list[str]:
    for franchise in franchises:
        if franchise not in NFL_FRANCHISES:
            raise ValueError(f'Unknown franchise: {franchise}')
    if len(set(franchises)) != len(franchises):
        raise ValueError(f'Duplicate franchises: {franchises}')
    return franchises


def _normalize_franchise(name: str) -> str:
    name = ABBREV_TO_FRANCHISE.get(name.strip().upper(), name.strip())
    if name not in NFL_FRANCHISES:
        raise ValueError(f'Unknown franchise: {name}')
    return name


class TeamEntry(BaseModel):
    """League team with its drafted franchises."""

    name: str = Field(..., min_length=1)
    roster: list[str] = Field(..., min_length=1)

    @field_validator('roster')
    @classmethod
    def validate_roster(cls, v):
        """Ensure every rostered franchise is a real NFL franchise."""
        return _check_franchises(v)

    class Config:
        extra = 'forbid'


class TeamsFile(BaseModel):
    """Complete teams.json file structure."""

    teams: list[TeamEntry]

    class Config:
        extra = 'forbid'


class LineupEntry(BaseModel):
    """One team's starters for a week."""

    franchises: list[str] = Field(..., min_length=1)
    locked: bool = False
    submitted_at: str | None = None

    @field_validator('franchises')
    @classmethod
    def validate_franchises(cls, v):
        """Ensure starters are real, distinct franchises."""
        return _check_franchises(v)

    class Config:
        extra = 'forbid'


class LineupsFile(BaseModel):
    """Complete lineups/week_N.json file structure."""

    week: int = Field(..., ge=1, le=TOTAL_WEEKS)
    lineups: dict[str, LineupEntry]

    class Config:
        extra = 'forbid'


class StatLine(BaseModel):
    """One franchise's raw quarterback stats for a week."""

    franchise: str
    pass_yards: int = 0
    touchdowns: int = 0
    completion_percent: float = 0.0
    interceptions: int = 0
    fumbles: int = 0
    rush_yards: int = 0
    longest_completion: int | None = None
    defensive_td: int = Field(0, ge=0)
    safety: int = Field(0, ge=0)
    game_ending_fumble: int = Field(0, ge=0)
    game_winning_drive: int = Field(0, ge=0)
    gwd_field_goal: int = Field(0, ge=0)
    benching: int = Field(0, ge=0)

    @field_validator('franchise')
    @classmethod
    def normalize_franchise(cls, v):
        """Accept either a franchise name or a team abbreviation."""
        return _normalize_franchise(v)

    def to_stats(self, week: int) -> RawWeeklyStats:
        return RawWeeklyStats(week=week, **self.model_dump())

    class Config:
        extra = 'forbid'


class WeeklyStatsFile(BaseModel):
    """Complete stats/week_N.json file structure."""

    week: int = Field(..., ge=1, le=TOTAL_WEEKS)
    imported_at: str | None = None
    stats: list[StatLine]

    class Config:
        extra = 'forbid'


class EventCounts(BaseModel):
    """Game events recorded by hand for one franchise (not in the NFL stat feed)."""

    longest_completion: int | None = Field(None, ge=0)
    defensive_td: int = Field(0, ge=0)
    safety: int = Field(0, ge=0)
    game_ending_fumble: int = Field(0, ge=0)
    game_winning_drive: int = Field(0, ge=0)
    gwd_field_goal: int = Field(0, ge=0)
    benching: int = Field(0, ge=0)

    class Config:
        extra = 'forbid'


class EventsFile(BaseModel):
    """A week of hand-recorded events, keyed by franchise name or abbreviation."""

    week: int = Field(..., ge=1, le=TOTAL_WEEKS)
    events: dict[str, EventCounts]

    @field_validator('events')
    @classmethod
    def normalize_franchises(cls, v):
        """Key events by franchise name; two keys for one franchise are rejected."""
        normalized = {}
        for key, counts in v.items():
            franchise = _normalize_franchise(key)
            if franchise in normalized:
                raise ValueError(f'Events for {franchise} listed twice')
            normalized[franchise] = counts
        return normalized

    def overrides(self) -> dict[str, dict[str, int]]:
        """Only the counters actually written in the file, per franchise."""
        return {
            franchise: counts.model_dump(exclude_unset=True)
            for franchise, counts in self.events.items()
        }

    class Config:
        extra = 'forbid'


class LeagueConfig(BaseModel):
    """League configuration settings."""

    season: int = Field(..., ge=2020, le=2035)
    current_week: int = Field(1, ge=1, le=TOTAL_WEEKS)
    total_weeks: int = Field(TOTAL_WEEKS, ge=1, le=TOTAL_WEEKS)
    locked_weeks: list[int] = Field(default_factory=list)
    roster_size: int = Field(4, ge=1, le=8)
    lineup_size: int = Field(2, ge=1, le=8)
    minimum_starts: int = Field(4, ge=0, le=TOTAL_WEEKS)
    count_turnover_events: bool = False

    @field_validator('locked_weeks')
    @classmethod
    def validate_locked_weeks(cls, v):
        """Ensure locked weeks are real weeks."""
        for week in v:
            if not (1 <= week <= TOTAL_WEEKS):
                raise ValueError(f'Locked week must be 1-{TOTAL_WEEKS}, got {week}')
        return sorted(set(v))

    class Config:
        extra = 'forbid'
