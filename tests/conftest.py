"""Shared fakes for the pipeline tests.

Nothing here touches a real database, network or model: the pool, the LLM
client and the backend client are replaced by scripted stand-ins.
"""

from contextlib import asynccontextmanager

import pytest

from courtside.errors import TranslationFailure


class FakeLLM:
    """Scripted LLM. Queued items are returned in order; exceptions are raised."""

    def __init__(self, chat=None, json=None):
        self.chat_responses = list(chat or [])
        self.json_responses = list(json or [])
        self.calls: list[dict] = []

    @staticmethod
    def _next(queue, default):
        if not queue:
            return default
        item = queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    async def chat_completion(self, messages, **kwargs):
        self.calls.append({"kind": "chat", "messages": messages, **kwargs})
        return self._next(self.chat_responses, "data")

    async def json_completion(self, messages, schema, name="nba_query", **kwargs):
        self.calls.append({"kind": "json", "messages": messages, "schema": schema, "name": name})
        return self._next(self.json_responses, TranslationFailure("no scripted response"))


class FakeConnection:
    def __init__(self, pool):
        self.pool = pool

    @asynccontextmanager
    async def transaction(self, readonly=False):
        yield

    async def fetch(self, sql, *params):
        self.pool.queries.append((sql, list(params)))
        if self.pool.error is not None:
            raise self.pool.error
        if not self.pool.results:
            return []
        return self.pool.results.pop(0)


class FakePool:
    """Records every (sql, params) pair; returns queued row lists in order."""

    def __init__(self, *results, error: Exception | None = None):
        self.results = [list(rows) for rows in results]
        self.queries: list[tuple[str, list]] = []
        self.error = error

    @asynccontextmanager
    async def acquire(self):
        yield FakeConnection(self)

    @property
    def last_sql(self) -> str:
        return self.queries[-1][0]

    @property
    def last_params(self) -> list:
        return self.queries[-1][1]


class FakeBackend:
    def __init__(self, player_cluster=(200, {"success": True, "data": []}), clusters=(200, {"success": True, "data": []})):
        self.player_cluster_response = player_cluster
        self.clusters_response = clusters
        self.calls: list[tuple] = []

    async def player_cluster(self, name):
        self.calls.append(("player_cluster", name))
        if isinstance(self.player_cluster_response, Exception):
            raise self.player_cluster_response
        return self.player_cluster_response

    async def clusters(self, age, cluster_number):
        self.calls.append(("clusters", age, cluster_number))
        if isinstance(self.clusters_response, Exception):
            raise self.clusters_response
        return self.clusters_response


def player_row(name, team="BOS", **stats):
    row = {
        "full_name": name,
        "team": team,
        "games_played": 40,
        "minutes": 34.0,
        "ppg": None,
        "apg": None,
        "rpg": None,
        "spg": None,
        "bpg": None,
        "fg_pct": None,
        "three_pct": None,
        "ft_pct": None,
    }
    row.update(stats)
    return row


@pytest.fixture
def season():
    return 2025

