"""Structured query -> parameterized SQL -> player rows.

Three physical data-access strategies exist, tried in order:

* ``compare``   named players side by side from the season-aggregate table
* ``leaders``   the precomputed per-stat ``leaders`` table for the five basic
                counting stats, completed with left joins
* ``aggregate`` a filtered scan of the season-aggregate table; handles
                everything else

Adding a storage shape means adding a strategy to ``STRATEGIES``.
"""

import logging
from dataclasses import dataclass, field

from courtside.constants import (
    ADVANCED_METRICS,
    ADVANCED_MIN_GAMES,
    ADVANCED_MIN_MINUTES,
    BASIC_STATS,
    COMPARE_ROW_CEILING,
    DEFAULT_ORDER_METRIC,
    PLAYER_LIMIT_DEFAULT,
    PLAYER_LIMIT_MAX,
    POSITION_CODES,
    SEASON_AVERAGE_COLUMNS,
)
from courtside.db import fetch_rows
from courtside.schemas.query import Query
from courtside.schemas.results import PlayerStatRow

logger = logging.getLogger(__name__)

# Columns shared by every season-aggregate projection, as (column, alias).
_AGGREGATE_SELECT = [(column, metric) for metric, column in SEASON_AVERAGE_COLUMNS.items()]


@dataclass
class SqlPlan:
    strategy: str
    sql: str
    params: list = field(default_factory=list)


class _Params:
    """Positional ($n) parameter collector."""

    def __init__(self):
        self.values: list = []

    def bind(self, value) -> str:
        self.values.append(value)
        return f"${len(self.values)}"


def _player_limit(query: Query) -> int:
    return max(1, min(query.limit or PLAYER_LIMIT_DEFAULT, PLAYER_LIMIT_MAX))


def _stats_table(query: Query) -> str:
    return "clutch_season_averages" if query.clutch else "season_averages"


def _effective_players(query: Query, player_names: list[str] | None) -> list[str]:
    names = query.players or player_names or []
    return [name.lower() for name in names]


def _aggregate_columns() -> str:
    lines = [
        "p.full_name",
        "t.abbreviation AS team",
        "sa.games_played",
        "sa.minutes",
    ]
    lines += [f"sa.{column} AS {alias}" for column, alias in _AGGREGATE_SELECT]
    return ",\n      ".join(lines)


def _name_condition(names: list[str], params: _Params) -> str:
    # Substring match tolerates punctuation and spelling variance; "Curry"
    # also matches "Seth Curry".
    conditions = [f"LOWER(p.full_name) LIKE {params.bind(f'%{name}%')}" for name in names]
    return "(" + " OR ".join(conditions) + ")"


def _add_range(where: list[str], column: str, rng, params: _Params, cast=float) -> None:
    if rng is None:
        return
    if rng.gte is not None:
        where.append(f"{column} >= {params.bind(cast(rng.gte))}")
    if rng.lte is not None:
        where.append(f"{column} <= {params.bind(cast(rng.lte))}")


def _add_team(where: list[str], query: Query, params: _Params) -> None:
    if isinstance(query.team, list) and query.team:
        where.append(f"t.abbreviation = ANY({params.bind(list(query.team))}::text[])")
    elif isinstance(query.team, str):
        where.append(f"t.abbreviation = {params.bind(query.team)}")


def _add_countries(where: list[str], query: Query, params: _Params) -> None:
    countries = [c.lower() for c in (query.filters.countries or [])] if query.filters else []
    if countries:
        where.append(f"LOWER(p.country) = ANY({params.bind(countries)}::text[])")


def _add_advanced_floor(where: list[str], query: Query, params: _Params) -> None:
    if query.metric not in ADVANCED_METRICS:
        return
    filters = query.filters
    if filters is None or filters.min_games is None:
        where.append(f"sa.games_played >= {params.bind(ADVANCED_MIN_GAMES)}")
    if filters is None or filters.minutes_range is None or filters.minutes_range.gte is None:
        where.append(f"sa.minutes >= {params.bind(float(ADVANCED_MIN_MINUTES))}")


def _add_metric_bounds(where: list[str], query: Query, params: _Params) -> bool:
    """Append min/max metric-value bounds. False means the query cannot match."""
    filters = query.filters
    if filters is None or (filters.min_metric_value is None and filters.max_metric_value is None):
        return True
    metric = filters.filter_by_metric or query.metric
    if metric is None or metric.startswith("team_"):
        return False
    column = SEASON_AVERAGE_COLUMNS.get(metric, "points")
    if filters.min_metric_value is not None:
        where.append(f"sa.{column} >= {params.bind(float(filters.min_metric_value))}")
    if filters.max_metric_value is not None:
        where.append(f"sa.{column} <= {params.bind(float(filters.max_metric_value))}")
    return True


def _add_shared_filters(where: list[str], query: Query, params: _Params) -> bool:
    """Filters every scan path can express. Returns False for an unmatchable query."""
    _add_team(where, query, params)
    if query.position:
        where.append(f"p.position = {params.bind(POSITION_CODES[query.position])}")
    filters = query.filters
    if filters is not None:
        _add_range(where, "p.age", filters.age_range, params, cast=int)
        _add_range(where, "sa.minutes", filters.minutes_range, params)
        _add_range(where, "p.base_salary", filters.salary_range, params)
        if filters.min_games is not None:
            where.append(f"sa.games_played >= {params.bind(int(filters.min_games))}")
    _add_advanced_floor(where, query, params)
    _add_countries(where, query, params)
    return _add_metric_bounds(where, query, params)


class QueryStrategy:
    name = "base"

    def matches(self, query: Query, players: list[str]) -> bool:
        raise NotImplementedError

    def build(self, query: Query, players: list[str]) -> SqlPlan | None:
        """Return the SQL plan, or None when the query cannot match any row."""
        raise NotImplementedError


class CompareStrategy(QueryStrategy):
    name = "compare"

    def matches(self, query, players):
        return query.task == "compare" and bool(players)

    def build(self, query, players):
        params = _Params()
        where = [f"sa.season = {params.bind(query.season)}"]
        _add_advanced_floor(where, query, params)
        where.append(_name_condition(players, params))
        _add_countries(where, query, params)
        sql = f"""
    SELECT
      {_aggregate_columns()}
    FROM {_stats_table(query)} sa
    INNER JOIN players p ON sa.player_id = p.id
    LEFT JOIN teams t ON p.team_id = t.id
    WHERE {' AND '.join(where)}
    ORDER BY p.full_name ASC
    LIMIT {params.bind(COMPARE_ROW_CEILING)}
"""
        return SqlPlan(self.name, sql, params.values)


class LeadersStrategy(QueryStrategy):
    """Rank straight off the precomputed per-stat table."""

    name = "leaders"

    def matches(self, query, players):
        if query.task not in ("rank", "leaders") or query.metric not in BASIC_STATS:
            return False
        if query.clutch or players:
            return False
        filters = query.filters
        if filters is not None:
            if filters.draft_year_range is not None and filters.draft_year_range.is_set:
                return False
            if filters.colleges:
                return False
        return True

    def build(self, query, players):
        params = _Params()
        primary = BASIC_STATS[query.metric]
        where = [
            f"l.season = {params.bind(query.season)}",
            f"l.stat_type = {params.bind(primary)}",
        ]

        stat_columns = []
        joins = []
        for metric, stat_type in BASIC_STATS.items():
            if stat_type == primary:
                stat_columns.append(f"l.value AS {metric}")
                continue
            alias = f"l_{stat_type}"
            stat_columns.append(f"{alias}.value AS {metric}")
            joins.append(
                f"LEFT JOIN leaders {alias} ON {alias}.player_id = l.player_id"
                f" AND {alias}.season = l.season AND {alias}.stat_type = {params.bind(stat_type)}"
            )

        if not _add_shared_filters(where, query, params):
            return None

        order_by_age = query.filters.order_by_age if query.filters else None
        extra = ""
        if order_by_age:
            order = f"p.age {order_by_age.upper()} NULLS LAST"
            extra = ",\n      p.age"
        else:
            order = f"l.value {query.direction} NULLS LAST, l.rank ASC"

        joins_sql = "\n    ".join(joins)
        stat_sql = ",\n      ".join(stat_columns)
        sql = f"""
    SELECT
      p.full_name,
      t.abbreviation AS team,
      COALESCE(sa.games_played, l.games_played) AS games_played,
      sa.minutes,
      {stat_sql},
      sa.fg_pct,
      sa.three_pct,
      sa.ft_pct,
      l.rank AS leader_rank{extra}
    FROM leaders l
    INNER JOIN players p ON l.player_id = p.id
    LEFT JOIN teams t ON p.team_id = t.id
    {joins_sql}
    LEFT JOIN {_stats_table(query)} sa ON sa.player_id = l.player_id AND sa.season = l.season
    WHERE {' AND '.join(where)}
    ORDER BY {order}
    LIMIT {params.bind(_player_limit(query))}
"""
        return SqlPlan(self.name, sql, params.values)


class AggregateStrategy(QueryStrategy):
    name = "aggregate"

    def matches(self, query, players):
        return True

    def build(self, query, players):
        params = _Params()
        where = [f"sa.season = {params.bind(query.season)}"]
        if not _add_shared_filters(where, query, params):
            return None

        filters = query.filters
        if filters is not None:
            _add_range(where, "p.draft_year", filters.draft_year_range, params, cast=int)
            colleges = [c.lower() for c in filters.colleges or []]
            if colleges:
                where.append(f"LOWER(p.college) = ANY({params.bind(colleges)}::text[])")
        if players:
            where.append(_name_condition(players, params))

        extra = []
        order_by_age = filters.order_by_age if filters else None
        if order_by_age:
            extra.append("p.age")
            order = f"p.age {order_by_age.upper()} NULLS LAST"
        else:
            metric = query.metric if query.metric in SEASON_AVERAGE_COLUMNS else DEFAULT_ORDER_METRIC
            order = f"sa.{SEASON_AVERAGE_COLUMNS[metric]} {query.direction} NULLS LAST"
        if query.limit == 1 and players:
            extra.append("p.position")

        extra_sql = "".join(f",\n      {column}" for column in extra)
        sql = f"""
    SELECT
      {_aggregate_columns()}{extra_sql}
    FROM {_stats_table(query)} sa
    INNER JOIN players p ON sa.player_id = p.id
    LEFT JOIN teams t ON p.team_id = t.id
    WHERE {' AND '.join(where)}
    ORDER BY {order}
    LIMIT {params.bind(_player_limit(query))}
"""
        return SqlPlan(self.name, sql, params.values)


STRATEGIES: tuple[QueryStrategy, ...] = (CompareStrategy(), LeadersStrategy(), AggregateStrategy())


def select_strategy(query: Query, players: list[str]) -> QueryStrategy:
    for strategy in STRATEGIES:
        if strategy.matches(query, players):
            return strategy
    raise LookupError("no strategy matched")


def plan_query(query: Query, player_names: list[str] | None = None) -> SqlPlan | None:
    """Choose a strategy and build its SQL; None when nothing can match."""
    if query.task == "team" or query.metric is None:
        return None
    players = _effective_players(query, player_names)
    return select_strategy(query, players).build(query, players)


async def run_query(pool, query: Query, player_names: list[str] | None = None) -> list[PlayerStatRow]:
    """Execute ``query``. Zero matching rows is an empty list, not an error."""
    plan = plan_query(query, player_names)
    if plan is None:
        return []
    logger.debug("Running %s plan: %s %s", plan.strategy, plan.sql, plan.params)
    rows = await fetch_rows(pool, plan.sql, plan.params)
    logger.info("%s query returned %d rows", plan.strategy, len(rows))
    return [PlayerStatRow.model_validate(row) for row in rows]
