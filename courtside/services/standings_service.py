import logging

from courtside.db import fetch_rows
from courtside.schemas.results import StandingEntry

logger = logging.getLogger(__name__)

STANDINGS_SQL = """
SELECT
  s.team_id,
  t.abbreviation AS team,
  s.conference_rank AS seed,
  s.wins,
  s.losses,
  CASE
    WHEN t.conference = 'East' THEN 'east'
    WHEN t.conference = 'West' THEN 'west'
    ELSE 'unknown'
  END AS conference
FROM standings s
INNER JOIN teams t ON s.team_id = t.id
WHERE s.season = $1
ORDER BY t.conference, s.conference_rank ASC
"""


def games_back(leader: dict | None, team: dict, is_first: bool) -> str:
    if leader is None or is_first:
        return "-"
    diff = ((leader["wins"] - team["wins"]) + (team["losses"] - leader["losses"])) / 2
    return "-" if diff == 0 else f"{diff:.1f}"


def conference_table(rows: list[dict], conference: str) -> list[StandingEntry]:
    teams = [r for r in rows if r["conference"] == conference]
    leader = next((r for r in teams if r["seed"] == 1), None)
    return [
        StandingEntry(
            team_id=team["team_id"],
            team=team["team"],
            seed=team["seed"],
            wins=team["wins"],
            losses=team["losses"],
            games_back=games_back(leader, team, index == 0),
        )
        for index, team in enumerate(teams)
    ]


async def get_standings(pool, season: int) -> dict[str, list[StandingEntry]]:
    rows = await fetch_rows(pool, STANDINGS_SQL, [season])
    logger.info("Loaded standings for %d teams (season %d)", len(rows), season)
    return {
        "east": conference_table(rows, "east"),
        "west": conference_table(rows, "west"),
    }
