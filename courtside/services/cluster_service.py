"""Historical comparisons backed by the player-clustering service."""

import asyncio
import logging
import random

import aiohttp

from courtside.config import Settings
from courtside.db import fetch_rows
from courtside.errors import UpstreamUnavailable

logger = logging.getLogger(__name__)

DEFAULT_COMPARISON_COUNT = 3

# The clustering model has no peers for players this far past typical ages.
AGE_BREAKS_MODEL = ("lebron james", "lebron", "le bron james")

CURRENT_PLAYER_SQL = """
SELECT
  p.full_name,
  t.abbreviation AS team,
  sa.season,
  sa.points,
  sa.assists,
  sa.rebounds,
  sa.fg_pct,
  sa.three_pct,
  sa.ft_pct,
  sa.games_played,
  sa.minutes
FROM players p
LEFT JOIN teams t ON p.team_id = t.id
LEFT JOIN season_averages sa ON sa.player_id = p.id AND sa.season = $2
WHERE LOWER(p.full_name) = LOWER($1)
LIMIT 1
"""


class BackendClient:
    """HTTP client for the clustering backend, sharing one aiohttp session."""

    def __init__(self, base_url: str | None, api_key: str | None = None, timeout: float = 10.0):
        self.base_url = base_url.rstrip("/") if base_url else None
        self.api_key = api_key
        self.timeout = timeout
        self._session: aiohttp.ClientSession | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "BackendClient":
        return cls(settings.BACKEND_SERVICE, settings.BACKEND_API_KEY, settings.BACKEND_TIMEOUT)

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["X-API-Key"] = self.api_key
        return headers

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()

    async def get_json(self, path: str, params: dict) -> tuple[int, object]:
        """GET ``path`` and return (status, decoded body)."""
        if not self.base_url:
            raise UpstreamUnavailable(
                "Backend service URL not configured",
                "BACKEND_SERVICE environment variable is not set",
            )
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=self.timeout))
        url = f"{self.base_url}{path}"
        try:
            async with self._session.get(url, params=params, headers=self._headers()) as resp:
                data = await resp.json(content_type=None)
                return resp.status, data
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as exc:
            logger.error("Backend request failed: %s", url, exc_info=True)
            raise UpstreamUnavailable("Backend service request failed", str(exc) or type(exc).__name__) from exc

    async def player_cluster(self, name: str) -> tuple[int, object]:
        return await self.get_json("/api/clusters/player", {"name": name})

    async def clusters(self, age, cluster_number) -> tuple[int, object]:
        return await self.get_json("/api/clusters", {"age": str(age), "clusterNumber": str(cluster_number)})


def _cluster_rows(status: int, body, what: str) -> list[dict]:
    if status >= 400:
        raise UpstreamUnavailable(f"Failed to fetch {what}", f"Backend responded with status {status}")
    if not isinstance(body, dict) or not body.get("success") or not body.get("data"):
        return []
    return list(body["data"])


def select_comparisons(players: list[dict], count, rng: random.Random | None = None) -> list[dict]:
    """'all' keeps every peer; a number samples that many; default samples three."""
    if count == "all":
        return list(players)
    wanted = count if isinstance(count, int) and count > 0 else DEFAULT_COMPARISON_COUNT
    rng = rng or random.Random()
    return rng.sample(players, min(wanted, len(players)))


async def fetch_current_player(pool, player_name: str, season: int) -> dict | None:
    rows = await fetch_rows(pool, CURRENT_PLAYER_SQL, [player_name, season])
    if not rows:
        return None
    row = rows[0]
    # Cluster seasons are labelled by their ending year (2025-26 -> 2026).
    row_season = row["season"] or season
    return {
        "fullName": row["full_name"],
        "team": row["team"],
        "season": row_season + 1 if row_season == season else row_season,
        "points": row["points"] or 0,
        "assists": row["assists"] or 0,
        "rebounds": row["rebounds"] or 0,
        "fgPct": row["fg_pct"] or 0,
        "threePct": row["three_pct"] or 0,
        "ftPct": row["ft_pct"] or 0,
        "gamesPlayed": row["games_played"] or 0,
        "minutes": row["minutes"] or 0,
    }


async def find_historical_comparisons(
    backend: BackendClient,
    pool,
    player_name: str,
    season: int,
    count=None,
    rng: random.Random | None = None,
) -> dict:
    """Build the historicalComparison payload for ``player_name``.

    An unknown player or empty cluster is a soft failure
    (``noClusterFound``), not an error.
    """
    if any(name in player_name.lower() for name in AGE_BREAKS_MODEL):
        return {"playerName": player_name, "ageBreaksModel": True}

    not_found = {"playerName": player_name, "noClusterFound": True}

    status, body = await backend.player_cluster(player_name)
    player_clusters = _cluster_rows(status, body, "player cluster")
    if not player_clusters:
        return not_found

    age = player_clusters[0].get("age")
    cluster_number = player_clusters[0].get("clusterNumber")

    status, body = await backend.clusters(age, cluster_number)
    peers = _cluster_rows(status, body, "clusters")

    lowered = player_name.lower()
    others = [
        p for p in peers
        if (p.get("playerName") or "").lower() != lowered
        and (p.get("playerFullName") or "").lower() != lowered
    ]
    if not others:
        return not_found

    selected = select_comparisons(others, count, rng)

    try:
        current = await fetch_current_player(pool, player_name, season)
    except Exception:
        logger.error("Error fetching current player stats for %s", player_name, exc_info=True)
        current = None

    return {
        "playerName": player_name,
        "age": age,
        "clusterNumber": cluster_number,
        "currentPlayer": current,
        "comparisons": [
            {
                "playerName": p.get("playerName"),
                "playerFullName": p.get("playerFullName"),
                "season": p.get("season"),
                "points": p.get("points"),
                "assists": p.get("assists"),
                "rebounds": p.get("rebounds"),
                "fgPct": p.get("fgPct"),
                "threePct": p.get("threePct"),
                "ftPct": p.get("ftPct"),
                "gamesPlayed": p.get("gamesPlayed"),
                "minutes": p.get("minutes"),
            }
            for p in selected
        ],
    }
