from .models import (
    Team,
    WeeklyLineup,
    RawWeeklyStats,
    Matchup,
    FranchiseScore,
    TeamWeekScore,
    MatchupScore,
    MatchupDetails,
    TeamRecord,
)
from .scoring import (
    ScoringEvent,
    calculate_score,
    score_franchise,
    score_pass_yards,
    score_touchdowns,
    score_completion_percent,
    score_turnovers,
)
from .standings import (
    StandingsEngine,
    calculate_standings,
    calculate_weekly_results,
    current_record,
    matchup_score,
    team_week_matchup_details,
    team_week_result,
    team_week_score,
)
from .stats_source import (
    StatsSource,
    StatsStore,
    StatsLoadError,
    InMemoryStatsStore,
    JsonStatsStore,
    WeekStatsCache,
)
from .league_data import (
    LeagueData,
    ImportResult,
    load_league,
    import_week_stats,
    detect_current_week,
    save_standings_json,
    save_week_results,
)
from .schedule import parse_schedule_file, get_week_matchups
from .excel_export import export_standings_workbook

__all__ = [
    # Models
    'Team',
    'WeeklyLineup',
    'RawWeeklyStats',
    'Matchup',
    'FranchiseScore',
    'TeamWeekScore',
    'MatchupScore',
    'MatchupDetails',
    'TeamRecord',
    # Scoring functions
    'ScoringEvent',
    'calculate_score',
    'score_franchise',
    'score_pass_yards',
    'score_touchdowns',
    'score_completion_percent',
    'score_turnovers',
    # Standings
    'StandingsEngine',
    'calculate_standings',
    'calculate_weekly_results',
    'current_record',
    'matchup_score',
    'team_week_matchup_details',
    'team_week_result',
    'team_week_score',
    # Stats sources (NFLStatsSource lives in badqb.data_fetcher, needs nflreadpy)
    'StatsSource',
    'StatsStore',
    'StatsLoadError',
    'InMemoryStatsStore',
    'JsonStatsStore',
    'WeekStatsCache',
    # League data files
    'LeagueData',
    'ImportResult',
    'load_league',
    'import_week_stats',
    'detect_current_week',
    'save_standings_json',
    'save_week_results',
    # Schedule
    'parse_schedule_file',
    'get_week_matchups',
    # Excel output
    'export_standings_workbook',
]
