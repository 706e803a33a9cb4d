import pytest
from conftest import FakeBackend, FakeLLM, FakePool, player_row
from fastapi.testclient import TestClient

from courtside.config import Settings
from courtside.deps import get_backend, get_llm, get_pool, get_settings
from courtside.errors import UpstreamUnavailable
from courtside.main import app


@pytest.fixture
def make_client():
    def _make(pool=None, llm=None, backend=None):
        app.dependency_overrides[get_pool] = lambda: pool or FakePool()
        app.dependency_overrides[get_llm] = lambda: llm or FakeLLM()
        app.dependency_overrides[get_backend] = lambda: backend or FakeBackend()
        app.dependency_overrides[get_settings] = lambda: Settings(CURRENT_SEASON=2025)
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()


def test_health(make_client):
    assert make_client().get("/health").json() == {"status": "ok"}


@pytest.mark.parametrize("body", [{}, {"question": ""}, {"question": 42}])
def test_ask_requires_string_question(make_client, body):
    resp = make_client().post("/api/ask", json=body)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Question is required and must be a string"}


def test_informational_question_gets_suggestions(make_client):
    llm = FakeLLM(chat=["informational"])
    resp = make_client(llm=llm).post("/api/ask", json={"question": "What is the NBA?"})
    assert resp.status_code == 400
    body = resp.json()
    assert "2026 NBA season" in body["error"]
    assert "Who are the top scorers in the NBA?" in body["suggestions"]


def test_leaders_question_with_summary(make_client):
    llm = FakeLLM(
        chat=["data", "Shai leads the league in scoring."],
        json=[{"task": "leaders", "metric": "ppg", "season": 2025, "team": None}],
    )
    pool = FakePool([player_row("Shai Gilgeous-Alexander", "OKC", ppg=32.1, leader_rank=1)])

    resp = make_client(pool=pool, llm=llm).post(
        "/api/ask", json={"question": "who leads the league in scoring", "narrate": True}
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["query"] == {"task": "leaders", "metric": "ppg", "season": 2025}
    assert body["rows"][0]["full_name"] == "Shai Gilgeous-Alexander"
    assert body["rows"][0]["leader_rank"] == 1
    assert body["summary"] == "Shai leads the league in scoring."
    assert "FROM leaders l" in pool.queries[0][0]


def test_bad_translation_uses_fallback_query(make_client):
    llm = FakeLLM(chat=["data"], json=[RuntimeError("timeout")])
    resp = make_client(llm=llm).post("/api/ask", json={"question": "blorp"})
    assert resp.status_code == 200
    assert resp.json() == {"query": {"task": "rank", "metric": "ppg", "season": 2025, "limit": 10}, "rows": []}


def test_compare_merges_extracted_names(make_client):
    llm = FakeLLM(chat=["data"], json=[{"task": "compare", "metric": "all", "season": 2025}])
    pool = FakePool([player_row("Kevin Durant", "PHX"), player_row("Stephen Curry", "GSW")])

    resp = make_client(pool=pool, llm=llm).post("/api/ask", json={"question": "compare Stephen Curry and Kevin Durant"})

    body = resp.json()
    assert body["query"]["filters"]["players"] == ["Stephen Curry", "Kevin Durant"]
    assert [r["full_name"] for r in body["rows"]] == ["Kevin Durant", "Stephen Curry"]
    assert "summary" not in body


def test_team_question_returns_teams(make_client):
    llm = FakeLLM(chat=["data"], json=[{"task": "team", "season": 2025, "team": "BOS"}])
    pool = FakePool(
        [{"team_id": 2, "team": "BOS", "team_name": "Boston Celtics", "wins": 50, "losses": 20, "conference": "east", "seed": 2}],
        [{"full_name": "Jayson Tatum", "team": "BOS", "ppg": 27.0, "apg": 5.1, "rpg": 8.2, "games_played": 60}],
    )

    resp = make_client(pool=pool, llm=llm).post("/api/ask", json={"question": "how are the Celtics doing", "narrate": True})

    body = resp.json()
    assert "rows" not in body and "summary" not in body
    team = body["teams"][0]
    assert team["teamName"] == "Boston Celtics"
    assert team["topScorers"][0]["fullName"] == "Jayson Tatum"


def test_solo_player(make_client):
    llm = FakeLLM(
        chat=["data"],
        json=[{"task": "solo", "metric": "all", "season": 2025, "filters": {"players": ["Nikola Jokic"]}}],
    )
    pool = FakePool([player_row("Nikola Jokic", "DEN", ppg=29.0)], [{"position": "C", "full_name": "Nikola Jokic"}])

    resp = make_client(pool=pool, llm=llm).post("/api/ask", json={"question": "show me Nikola Jokic advanced stats"})

    assert resp.status_code == 200
    solo = resp.json()["soloPlayer"]
    assert solo["isAdvanced"] is True
    assert solo["player"]["full_name"] == "Nikola Jokic"
    assert solo["player"]["position"] == "C"
    assert pool.queries[0][1][-1] == 1


def test_solo_player_not_found(make_client):
    llm = FakeLLM(chat=["data"], json=[{"task": "solo", "metric": "all", "season": 2025}])
    resp = make_client(llm=llm).post("/api/ask", json={"question": "stats for Made Upname"})
    assert resp.status_code == 404
    assert resp.json()["error"] == 'Could not find player "Made Upname" in the database.'
    assert len(resp.json()["suggestions"]) == 3


def test_solo_without_name(make_client):
    llm = FakeLLM(chat=["data"], json=[{"task": "solo", "metric": "all", "season": 2025}])
    resp = make_client(llm=llm).post("/api/ask", json={"question": "how is he doing"})
    assert resp.status_code == 400
    assert "player name" in resp.json()["error"]


def test_historical_comparison(make_client):
    llm = FakeLLM(
        chat=["data"],
        json=[{"task": "historical_comparison", "metric": "all", "season": 2025, "historical_comparison_count": "all"}],
    )
    backend = FakeBackend(
        player_cluster=(200, {"success": True, "data": [{"age": 23, "clusterNumber": 4}]}),
        clusters=(200, {"success": True, "data": [{"playerName": "Tracy McGrady", "playerFullName": "Tracy McGrady"}]}),
    )

    resp = make_client(llm=llm, backend=backend).post(
        "/api/ask", json={"question": "Find me a historical comparison for Anthony Edwards"}
    )

    body = resp.json()
    assert body["query"] == {"task": "lookup", "metric": "all", "season": 2025}
    assert body["historicalComparison"]["comparisons"][0]["playerName"] == "Tracy McGrady"


def test_historical_comparison_backend_down(make_client):
    llm = FakeLLM(chat=["data"], json=[{"task": "historical_comparison", "metric": "all", "season": 2025}])
    backend = FakeBackend(player_cluster=UpstreamUnavailable("Backend service request failed", "connection refused"))

    resp = make_client(llm=llm, backend=backend).post(
        "/api/ask", json={"question": "historical comparison for Anthony Edwards"}
    )

    assert resp.status_code == 500
    assert resp.json() == {"error": "Backend service request failed", "details": "connection refused"}


def test_database_failure_is_500(make_client):
    llm = FakeLLM(chat=["data"], json=[{"task": "rank", "metric": "ppg", "season": 2025}])
    pool = FakePool(error=RuntimeError("too many connections"))
    resp = make_client(pool=pool, llm=llm).post("/api/ask", json={"question": "top scorers"})
    assert resp.status_code == 500
    assert resp.json()["details"] == "too many connections"


def test_clusters_proxy(make_client):
    backend = FakeBackend(clusters=(200, {"success": True, "data": [{"playerName": "Kobe Bryant"}]}))
    client = make_client(backend=backend)

    assert client.get("/api/clusters", params={"age": "23"}).status_code == 400
    resp = client.get("/api/clusters", params={"age": "23", "clusterNumber": "4"})
    assert resp.status_code == 200
    assert resp.json()["data"][0]["playerName"] == "Kobe Bryant"
    assert backend.calls == [("clusters", "23", "4")]


def test_player_cluster_proxy_passes_status(make_client):
    backend = FakeBackend(player_cluster=(404, {"success": False, "error": "not found"}))
    client = make_client(backend=backend)
    assert client.get("/api/clusters/player").status_code == 400
    assert client.get("/api/clusters/player", params={"name": "X"}).status_code == 404


def test_standings_endpoint(make_client):
    pool = FakePool([{"team_id": 1, "team": "CLE", "seed": 1, "wins": 50, "losses": 10, "conference": "east"}])
    client = make_client(pool=pool)
    assert client.get("/api/standings/abc").status_code == 400
    body = client.get("/api/standings/2025").json()
    assert body == {"east": [{"teamId": 1, "team": "CLE", "seed": 1, "wins": 50, "losses": 10, "gamesBack": "-"}], "west": []}


def test_player_endpoint(make_client):
    pool = FakePool([], [{"id": 7, "full_name": "Nikola Jokic", "team": "DEN", "ppg": 29.0}])
    client = make_client(pool=pool)
    assert client.get("/api/player/Nobody").status_code == 404
    resp = client.get("/api/player/Nikola%20Jokic")
    assert resp.status_code == 200
    assert resp.json()["team"] == "DEN"
    assert pool.last_params == ["Nikola Jokic", 2025]


def test_franchise_name_keeps_team_scoped_leaders_path(make_client):
    llm = FakeLLM(chat=["data"], json=[{"task": "leaders", "metric": "ppg", "season": 2025, "team": "BOS"}])
    pool = FakePool([player_row("Jayson Tatum", "BOS", ppg=27.0, leader_rank=3)])

    resp = make_client(pool=pool, llm=llm).post(
        "/api/ask", json={"question": "Who are the top scorers on the Boston Celtics"}
    )

    body = resp.json()
    assert "filters" not in body["query"]
    assert body["rows"][0]["full_name"] == "Jayson Tatum"
    sql, params = pool.queries[0]
    assert "FROM leaders l" in sql
    assert params[:2] == [2025, "pts"]
    assert "BOS" in params
    assert not any(isinstance(p, str) and "celtics" in p for p in params)


def test_rows_keep_null_stat_columns(make_client):
    llm = FakeLLM(chat=["data"], json=[{"task": "leaders", "metric": "ppg", "season": 2025}])
    pool = FakePool([player_row("Shai Gilgeous-Alexander", "OKC", ppg=32.1)])
    row = make_client(pool=pool, llm=llm).post("/api/ask", json={"question": "top scorers"}).json()["rows"][0]
    assert "apg" in row and row["apg"] is None
    assert row["three_pct"] is None


def test_ask_without_body_is_400(make_client):
    resp = make_client().post("/api/ask")
    assert resp.status_code == 400
    assert resp.json() == {"error": "Question is required and must be a string"}
