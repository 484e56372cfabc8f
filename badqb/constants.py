"""Constants and mappings for the Bad QB League."""

# Franchise names as they appear on rosters and lineups
NFL_FRANCHISES = (
    'Arizona', 'Atlanta', 'Baltimore', 'Buffalo', 'Carolina', 'Chicago', 'Cincinnati', 'Cleveland',
    'Dallas', 'Denver', 'Detroit', 'Green Bay', 'Houston', 'Indianapolis', 'Jacksonville', 'Kansas City',
    'Las Vegas', 'LA Chargers', 'LA Rams', 'Miami', 'Minnesota', 'New England', 'New Orleans', 'NY Giants',
    'NY Jets', 'Philadelphia', 'Pittsburgh', 'San Francisco', 'Seattle', 'Tampa Bay', 'Tennessee', 'Washington',
)

# Team abbreviation -> franchise name (stat feeds and nflreadpy use abbreviations)
ABBREV_TO_FRANCHISE = {
    'ARI': 'Arizona',
    'ATL': 'Atlanta',
    'BAL': 'Baltimore',
    'BUF': 'Buffalo',
    'CAR': 'Carolina',
    'CHI': 'Chicago',
    'CIN': 'Cincinnati',
    'CLE': 'Cleveland',
    'DAL': 'Dallas',
    'DEN': 'Denver',
    'DET': 'Detroit',
    'GB': 'Green Bay',
    'HOU': 'Houston',
    'IND': 'Indianapolis',
    'JAX': 'Jacksonville',
    'JAC': 'Jacksonville',
    'KC': 'Kansas City',
    'LV': 'Las Vegas',
    'LAC': 'LA Chargers',
    'LAR': 'LA Rams',
    'LA': 'LA Rams',
    'MIA': 'Miami',
    'MIN': 'Minnesota',
    'NE': 'New England',
    'NO': 'New Orleans',
    'NYG': 'NY Giants',
    'NYJ': 'NY Jets',
    'PHI': 'Philadelphia',
    'PIT': 'Pittsburgh',
    'SF': 'San Francisco',
    'SEA': 'Seattle',
    'TB': 'Tampa Bay',
    'TEN': 'Tennessee',
    'WAS': 'Washington',
    'WSH': 'Washington',
}

# Season shape
TOTAL_WEEKS = 18
ROSTER_SIZE = 4
LINEUP_SIZE = 2
MINIMUM_STARTS = 4

# Weekly result codes
WIN = 'W'
LOSS = 'L'
TIE = 'T'
NO_RESULT = ''
