PLAYER_METRICS = (
    "ppg", "apg", "rpg", "spg", "bpg",
    "fg_pct", "three_pct", "ft_pct",
    "tpm", "tpa", "ftm", "fta",
    "bpm", "off_rating", "def_rating", "net_rating", "pie", "e_pace",
    "fga_pg", "fgm_pg", "ts_pct", "ast_pct", "efg_pct", "reb_pct", "usg_pct",
    "dreb_pct", "oreb_pct", "ast_ratio", "e_tov_pct", "e_usg_pct",
)

TEAM_METRICS = (
    "team_ppg", "team_fgm", "team_fga", "team_fg_pct", "team_fta", "team_ftm",
    "team_ft_pct", "team_fg3a", "team_fg3m", "team_fg3_pct", "team_pace",
    "team_efg_pct", "team_ts_pct", "team_def_rating", "team_off_rating",
    "team_net_rating",
)

METRICS = PLAYER_METRICS + TEAM_METRICS + ("all",)

TASKS = ("rank", "leaders", "lookup", "compare", "team", "historical_comparison", "solo")

POSITIONS = ("guards", "forwards", "centers")

# Position groups as stored in players.position
POSITION_CODES = {"guards": "G", "forwards": "F", "centers": "C"}

# The five counting stats with a precomputed ranking in the `leaders` table,
# keyed by metric and mapped to leaders.stat_type.
BASIC_STATS = {
    "ppg": "pts",
    "rpg": "reb",
    "apg": "ast",
    "spg": "stl",
    "bpg": "blk",
}

# Advanced metrics are only meaningful for players with real minutes.
ADVANCED_METRICS = frozenset({
    "off_rating", "def_rating", "net_rating", "pie", "e_pace", "fga_pg", "fgm_pg",
    "ts_pct", "ast_pct", "efg_pct", "reb_pct", "usg_pct", "dreb_pct", "oreb_pct",
    "ast_ratio", "e_tov_pct", "e_usg_pct",
})
ADVANCED_MIN_GAMES = 15
ADVANCED_MIN_MINUTES = 10

# Metric -> column of season_averages / clutch_season_averages.
# bpm has no source column.
SEASON_AVERAGE_COLUMNS = {
    "ppg": "points",
    "apg": "assists",
    "rpg": "rebounds",
    "spg": "steals",
    "bpg": "blocks",
    "fg_pct": "fg_pct",
    "three_pct": "three_pct",
    "ft_pct": "ft_pct",
    "tpm": "tpm",
    "tpa": "tpa",
    "ftm": "ftm",
    "fta": "fta",
    "off_rating": "off_rating",
    "def_rating": "def_rating",
    "net_rating": "net_rating",
    "pie": "pie",
    "e_pace": "e_pace",
    "fga_pg": "fga_pg",
    "fgm_pg": "fgm_pg",
    "ts_pct": "ts_pct",
    "ast_pct": "ast_pct",
    "efg_pct": "efg_pct",
    "reb_pct": "reb_pct",
    "usg_pct": "usg_pct",
    "dreb_pct": "dreb_pct",
    "oreb_pct": "oreb_pct",
    "ast_ratio": "ast_ratio",
    "e_tov_pct": "e_tov_pct",
    "e_usg_pct": "e_usg_pct",
}

# Ordering column used when a metric cannot be ordered directly.
DEFAULT_ORDER_METRIC = "ppg"

PERCENTAGE_METRICS = frozenset({
    "fg_pct", "three_pct", "ft_pct", "ts_pct", "ast_pct", "efg_pct", "reb_pct",
    "usg_pct", "dreb_pct", "oreb_pct", "e_tov_pct", "e_usg_pct",
    "team_fg_pct", "team_ft_pct", "team_fg3_pct", "team_efg_pct", "team_ts_pct",
})

# Team metric -> team_season_averages column
TEAM_METRIC_COLUMNS = {
    "team_ppg": "points",
    "team_fgm": "fgm",
    "team_fga": "fga",
    "team_fg_pct": "fg_pct",
    "team_fta": "fta",
    "team_ftm": "ftm",
    "team_ft_pct": "ft_pct",
    "team_fg3a": "fg3a",
    "team_fg3m": "fg3m",
    "team_fg3_pct": "fg3_pct",
    "team_pace": "pace",
    "team_efg_pct": "efg_pct",
    "team_ts_pct": "ts_pct",
    "team_def_rating": "defensive_rating",
    "team_off_rating": "offensive_rating",
    "team_net_rating": "net_rating",
}

PLAYER_LIMIT_DEFAULT = 10
PLAYER_LIMIT_MAX = 25
TEAM_LIMIT_MAX = 30
COMPARE_ROW_CEILING = 100

TEAM_ABBREV = {
    "BKN": ("Brooklyn Nets", "Nets", "Brooklyn"),
    "BOS": ("Boston Celtics", "Celtics", "Boston"),
    "NYK": ("New York Knicks", "Knicks", "New York"),
    "PHI": ("Philadelphia 76ers", "76ers", "Sixers", "Philadelphia"),
    "TOR": ("Toronto Raptors", "Raptors", "Toronto"),
    "CHI": ("Chicago Bulls", "Bulls", "Chicago"),
    "CLE": ("Cleveland Cavaliers", "Cavaliers", "Cavs", "Cleveland"),
    "DET": ("Detroit Pistons", "Pistons", "Detroit"),
    "IND": ("Indiana Pacers", "Pacers", "Indiana"),
    "MIL": ("Milwaukee Bucks", "Bucks", "Milwaukee"),
    "ATL": ("Atlanta Hawks", "Hawks", "Atlanta"),
    "CHA": ("Charlotte Hornets", "Hornets", "Charlotte"),
    "MIA": ("Miami Heat", "Heat", "Miami"),
    "ORL": ("Orlando Magic", "Magic", "Orlando"),
    "WAS": ("Washington Wizards", "Wizards", "Washington"),
    "DEN": ("Denver Nuggets", "Nuggets", "Denver"),
    "MIN": ("Minnesota Timberwolves", "Timberwolves", "Wolves", "Minnesota"),
    "OKC": ("Oklahoma City Thunder", "Thunder", "Oklahoma City"),
    "POR": ("Portland Trail Blazers", "Trail Blazers", "Blazers", "Portland"),
    "UTA": ("Utah Jazz", "Jazz", "Utah"),
    "GSW": ("Golden State Warriors", "Warriors", "Golden State"),
    "LAC": ("LA Clippers", "Clippers", "Los Angeles Clippers"),
    "LAL": ("Los Angeles Lakers", "Lakers", "LA Lakers"),
    "PHX": ("Phoenix Suns", "Suns", "Phoenix"),
    "SAC": ("Sacramento Kings", "Kings", "Sacramento"),
    "DAL": ("Dallas Mavericks", "Mavericks", "Mavs", "Dallas"),
    "HOU": ("Houston Rockets", "Rockets", "Houston"),
    "MEM": ("Memphis Grizzlies", "Grizzlies", "Memphis"),
    "NOP": ("New Orleans Pelicans", "Pelicans", "New Orleans"),
    "SAS": ("San Antonio Spurs", "Spurs", "San Antonio"),
}


def resolve_team_abbrev(name: str) -> str | None:
    """Map a franchise name, nickname or city (any case) to its abbreviation."""
    needle = name.strip().lower()
    for abbrev, aliases in TEAM_ABBREV.items():
        if needle == abbrev.lower() or needle in (a.lower() for a in aliases):
            return abbrev
    return None


SUGGESTIONS = [
    "Who are the top scorers in the NBA?",
    "Compare Stephen Curry and Kevin Durant",
    "Find me a historical comparison for Anthony Edwards",
    "Who are the best Duke players in the NBA?",
    "What team has the best record?",
    "Who leads the league in assists?",
    "Show me players averaging over 25 points per game",
]
