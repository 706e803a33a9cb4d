import logging

from courtside.constants import PLAYER_LIMIT_DEFAULT, TEAM_LIMIT_MAX, TEAM_METRIC_COLUMNS
from courtside.db import fetch_rows
from courtside.schemas.query import Query
from courtside.schemas.results import TeamData, TeamPlayer

logger = logging.getLogger(__name__)

_CONFERENCE_CASE = """CASE
        WHEN t.conference = 'East' THEN 'east'
        WHEN t.conference = 'West' THEN 'west'
        ELSE 'unknown'
      END AS conference"""

TOP_SCORERS_SQL = """
SELECT
  p.full_name,
  t.abbreviation AS team,
  sa.points AS ppg,
  sa.assists AS apg,
  sa.rebounds AS rpg,
  sa.games_played
FROM season_averages sa
INNER JOIN players p ON sa.player_id = p.id
INNER JOIN teams t ON p.team_id = t.id
WHERE sa.season = $1
  AND t.abbreviation = $2
  AND sa.games_played >= 10
  AND sa.minutes >= 10
ORDER BY sa.points DESC
LIMIT 5
"""


def win_pct(wins: int, losses: int) -> float:
    games = wins + losses
    return wins / games if games > 0 else 0.0


def rank_standings(teams: list[TeamData], direction: str = "desc") -> list[TeamData]:
    """Order by win percentage, then wins, then losses.

    ``desc`` puts the best record first (more wins, fewer losses on ties);
    ``asc`` puts the worst first (fewer wins, more losses on ties).
    """
    if direction == "asc":
        return sorted(teams, key=lambda t: (t.win_pct, t.wins, -t.losses))
    return sorted(teams, key=lambda t: (-t.win_pct, -t.wins, t.losses))


def _team_condition(query: Query, column: str, params: list) -> str | None:
    if isinstance(query.team, list) and query.team:
        params.append([team.upper() for team in query.team])
        return f"{column} = ANY(${len(params)}::text[])"
    if isinstance(query.team, str):
        params.append(query.team.upper())
        return f"{column} = ${len(params)}"
    return None


def _to_float(value) -> float | None:
    return float(value) if value is not None else None


async def fetch_top_scorers(pool, season: int, team: str) -> list[TeamPlayer]:
    rows = await fetch_rows(pool, TOP_SCORERS_SQL, [season, team])
    return [
        TeamPlayer(
            full_name=row["full_name"],
            team=row["team"],
            ppg=_to_float(row["ppg"]) or 0.0,
            apg=_to_float(row["apg"]),
            rpg=_to_float(row["rpg"]),
            games_played=row["games_played"] or 0,
        )
        for row in rows
    ]


async def run_team_query(pool, query: Query) -> list[TeamData]:
    """Standings-based answer for a ``team`` task.

    A named team, or no explicit limit ("the best team"), is a single-team
    request and carries that team's top five scorers.
    """
    if query.metric and query.metric.startswith("team_"):
        return await run_team_stats_query(pool, query)

    limit = 1 if (query.team or not query.limit) else min(query.limit, TEAM_LIMIT_MAX)

    params: list = [query.season]
    where = ["s.season = $1"]
    condition = _team_condition(query, "t.abbreviation", params)
    if condition:
        where.append(condition)

    sql = f"""
    SELECT
      s.team_id,
      t.abbreviation AS team,
      t.name AS team_name,
      s.wins,
      s.losses,
      {_CONFERENCE_CASE},
      s.conference_rank AS seed
    FROM standings s
    INNER JOIN teams t ON s.team_id = t.id
    WHERE {' AND '.join(where)}
"""
    rows = await fetch_rows(pool, sql, params)
    standings = [
        TeamData(
            team_id=row["team_id"],
            team=row["team"],
            team_name=row["team_name"],
            wins=row["wins"] or 0,
            losses=row["losses"] or 0,
            win_pct=win_pct(row["wins"] or 0, row["losses"] or 0),
            conference=row["conference"],
            seed=row["seed"],
        )
        for row in rows
    ]

    ranked = rank_standings(standings, query.order_direction or "desc")[:limit]

    if limit == 1 and len(ranked) == 1:
        team = ranked[0]
        top_scorers = await fetch_top_scorers(pool, query.season, team.team)
        return [team.model_copy(update={"top_scorers": top_scorers})]

    logger.info("Team query returned %d teams", len(ranked))
    return ranked


async def run_team_stats_query(pool, query: Query) -> list[TeamData]:
    """Rank teams by a team_* statistic from team_season_averages."""
    column = TEAM_METRIC_COLUMNS[query.metric]
    limit = min(query.limit or PLAYER_LIMIT_DEFAULT, TEAM_LIMIT_MAX)

    params: list = [query.season, "regular"]
    where = ["tsa.season = $1", "tsa.season_type = $2"]
    condition = _team_condition(query, "t.abbreviation", params)
    if condition:
        where.append(condition)
    if query.filters and query.filters.min_metric_value is not None:
        params.append(float(query.filters.min_metric_value))
        where.append(f"tsa.{column} >= ${len(params)}")
    if query.filters and query.filters.max_metric_value is not None:
        params.append(float(query.filters.max_metric_value))
        where.append(f"tsa.{column} <= ${len(params)}")

    # Lower defensive rating is better.
    default_direction = "asc" if query.metric == "team_def_rating" else "desc"
    direction = (query.order_direction or default_direction).upper()

    params.append(limit)
    stat_columns = ",\n      ".join(f"tsa.{c}" for c in TEAM_METRIC_COLUMNS.values())
    sql = f"""
    SELECT
      tsa.team_id,
      t.abbreviation AS team,
      t.name AS team_name,
      s.wins,
      s.losses,
      {_CONFERENCE_CASE},
      s.conference_rank AS seed,
      {stat_columns}
    FROM team_season_averages tsa
    INNER JOIN teams t ON tsa.team_id = t.id
    LEFT JOIN standings s ON s.team_id = t.id AND s.season = tsa.season
    WHERE {' AND '.join(where)}
    ORDER BY tsa.{column} {direction} NULLS LAST
    LIMIT ${len(params)}
"""
    rows = await fetch_rows(pool, sql, params)
    teams = []
    for row in rows:
        wins = row["wins"] or 0
        losses = row["losses"] or 0
        stats = {c: _to_float(row[c]) for c in TEAM_METRIC_COLUMNS.values()}
        teams.append(
            TeamData(
                team_id=row["team_id"],
                team=row["team"],
                team_name=row["team_name"],
                wins=wins,
                losses=losses,
                win_pct=win_pct(wins, losses),
                conference=row["conference"] or "unknown",
                seed=row["seed"],
                **stats,
            )
        )
    logger.info("Team stats query (%s) returned %d teams", query.metric, len(teams))
    return teams
