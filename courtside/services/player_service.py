import logging

from courtside.db import fetch_rows
from courtside.errors import NoPlayerNameFound, PlayerNotFound
from courtside.schemas.query import Query
from courtside.services.player_names import extract_player_names
from courtside.services.stats_service import run_query

logger = logging.getLogger(__name__)

POSITION_SQL = """
SELECT p.position, p.full_name
FROM players p
WHERE LOWER(p.full_name) LIKE LOWER($1)
LIMIT 1
"""

PLAYER_INFO_SQL = """
SELECT
  p.id,
  p.full_name,
  p.first_name,
  p.last_name,
  p.college,
  p.country,
  p.draft_year,
  p.age,
  p.height,
  p.weight,
  p.position,
  p.base_salary,
  t.abbreviation AS team,
  t.name AS team_name,
  sa.games_played,
  sa.minutes,
  sa.points AS ppg,
  sa.assists AS apg,
  sa.rebounds AS rpg,
  sa.steals AS spg,
  sa.blocks AS bpg,
  sa.fg_pct,
  sa.three_pct,
  sa.ft_pct,
  sa.tpm,
  sa.tpa,
  sa.ftm,
  sa.fta,
  sa.off_rating,
  sa.def_rating,
  sa.net_rating,
  sa.pie
FROM players p
LEFT JOIN teams t ON p.team_id = t.id
LEFT JOIN season_averages sa ON sa.player_id = p.id AND sa.season = $2
WHERE LOWER(p.full_name) = LOWER($1)
LIMIT 1
"""


def resolve_single_player(query: Query, question: str, message: str | None = None) -> str:
    """First structured player name, else the first heuristic match."""
    if query.players:
        return query.players[0]
    names = extract_player_names(question)
    if names:
        return names[0]
    raise NoPlayerNameFound(message) if message else NoPlayerNameFound()


def wants_advanced(question: str) -> bool:
    return "advanced" in question.lower()


async def lookup_solo_player(pool, query: Query, question: str, season: int) -> dict:
    """Single-player card: the current-season line plus position."""
    player_name = resolve_single_player(query, question)
    lookup = Query(task="lookup", metric="all", season=season, limit=1).with_players([player_name])

    rows = await run_query(pool, lookup, [player_name])
    if not rows:
        raise PlayerNotFound(player_name)

    info = await fetch_rows(pool, POSITION_SQL, [f"%{player_name}%"])
    player = rows[0].model_dump()
    player["position"] = info[0]["position"] if info else None

    logger.info("Solo lookup resolved %s", player.get("full_name"))
    return {"player": player, "isAdvanced": wants_advanced(question)}


async def get_player_info(pool, player_name: str, season: int) -> dict | None:
    rows = await fetch_rows(pool, PLAYER_INFO_SQL, [player_name, season])
    return rows[0] if rows else None
