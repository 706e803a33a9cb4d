from conftest import FakePool

from courtside.schemas.query import validate_query
from courtside.schemas.results import TeamData
from courtside.services.team_service import rank_standings, run_team_query, win_pct


def _standing(team_id, team, wins, losses, conference="east", seed=None):
    return {
        "team_id": team_id,
        "team": team,
        "team_name": f"{team} team",
        "wins": wins,
        "losses": losses,
        "conference": conference,
        "seed": seed,
    }


def _team(team, wins, losses):
    return TeamData(
        team_id=1, team=team, team_name=team, wins=wins, losses=losses, win_pct=win_pct(wins, losses), conference="east"
    )


LEAGUE = [
    _standing(1, "BOS", 50, 20, seed=2),
    _standing(2, "CLE", 55, 15, seed=1),
    _standing(3, "OKC", 55, 15, conference="west", seed=1),
    _standing(4, "WAS", 12, 58, seed=15),
]


def test_win_pct_handles_no_games():
    assert win_pct(0, 0) == 0.0
    assert win_pct(3, 1) == 0.75


def test_rank_standings_tie_breaks():
    teams = [_team("A", 40, 20), _team("B", 20, 10), _team("C", 10, 30)]
    assert [t.team for t in rank_standings(teams)] == ["A", "B", "C"]
    assert [t.team for t in rank_standings(teams, "asc")] == ["C", "B", "A"]


async def test_named_team_returns_one_entry_with_top_scorers():
    scorers = [
        {"full_name": "Jayson Tatum", "team": "BOS", "ppg": 27.0, "apg": 5.1, "rpg": 8.2, "games_played": 60},
        {"full_name": "Jaylen Brown", "team": "BOS", "ppg": 23.5, "apg": 3.4, "rpg": 5.6, "games_played": 58},
    ]
    pool = FakePool([LEAGUE[0]], scorers)
    query = validate_query({"task": "team", "season": 2025, "team": "bos", "limit": 10})

    teams = await run_team_query(pool, query)

    assert len(teams) == 1
    assert teams[0].team == "BOS"
    assert [p.full_name for p in teams[0].top_scorers] == ["Jayson Tatum", "Jaylen Brown"]
    standings_sql, standings_params = pool.queries[0]
    assert standings_params == [2025, "BOS"]
    scorers_sql, scorers_params = pool.queries[1]
    assert "sa.games_played >= 10" in scorers_sql
    assert "sa.minutes >= 10" in scorers_sql
    assert "ORDER BY sa.points DESC" in scorers_sql
    assert "LIMIT 5" in scorers_sql
    assert scorers_params == [2025, "BOS"]


async def test_no_limit_means_single_best_team():
    pool = FakePool(LEAGUE, [])
    teams = await run_team_query(pool, validate_query({"task": "team", "season": 2025}))
    assert len(teams) == 1
    assert teams[0].team in ("CLE", "OKC")
    assert teams[0].top_scorers == []


async def test_worst_team():
    pool = FakePool(LEAGUE, [])
    teams = await run_team_query(pool, validate_query({"task": "team", "season": 2025, "order_direction": "asc"}))
    assert teams[0].team == "WAS"


async def test_explicit_limit_returns_bare_ranked_list():
    pool = FakePool(LEAGUE)
    teams = await run_team_query(pool, validate_query({"task": "team", "season": 2025, "limit": 3}))
    assert [t.team for t in teams][2] == "BOS"
    assert len(teams) == 3
    assert all(t.top_scorers is None for t in teams)
    assert len(pool.queries) == 1


async def test_team_limit_capped_at_thirty():
    league = [_standing(i, f"T{i:02d}", 40 - i, i) for i in range(35)]
    pool = FakePool(league)
    teams = await run_team_query(pool, validate_query({"task": "team", "season": 2025, "limit": 50}))
    assert len(teams) == 30


async def test_team_metric_ranking_defaults():
    pool = FakePool([])
    await run_team_query(pool, validate_query({"task": "team", "metric": "team_def_rating", "season": 2025}))
    assert "ORDER BY tsa.defensive_rating ASC NULLS LAST" in pool.last_sql
    assert pool.last_params == [2025, "regular", 10]

    await run_team_query(pool, validate_query({"task": "team", "metric": "team_pace", "season": 2025, "limit": 5}))
    assert "ORDER BY tsa.pace DESC NULLS LAST" in pool.last_sql
    assert pool.last_params[-1] == 5


def test_team_data_serializes_camel_case():
    data = _team("BOS", 50, 20).model_dump(by_alias=True, exclude_none=True)
    assert data["winPct"] == 50 / 70
    assert data["teamName"] == "BOS"
