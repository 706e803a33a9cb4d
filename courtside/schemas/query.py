"""Structured query model and the validator that guards it.

The model is the contract between the text-generation capability and the SQL
planners: anything that reaches the planners has passed ``validate_query``.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator

from courtside.constants import METRICS, PLAYER_METRICS, POSITIONS, TASKS, TEAM_METRICS
from courtside.errors import SchemaViolation

Task = Literal[TASKS]
Metric = Literal[METRICS]
FilterMetric = Literal[PLAYER_METRICS + TEAM_METRICS]
Position = Literal[POSITIONS]
Direction = Literal["asc", "desc"]


class Range(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    gte: int | float | None = None
    lte: int | float | None = None

    @property
    def is_set(self) -> bool:
        return self.gte is not None or self.lte is not None


class QueryFilters(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    players: list[str] | None = None
    min_games: int | None = None
    min_metric_value: float | None = None
    max_metric_value: float | None = None
    filter_by_metric: FilterMetric | None = None
    draft_year_range: Range | None = None
    age_range: Range | None = None
    minutes_range: Range | None = None
    salary_range: Range | None = None
    order_by_age: Direction | None = None
    colleges: list[str] | None = None
    countries: list[str] | None = None


class Query(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    task: Task
    metric: Metric | None = None
    season: int
    team: str | list[str] | None = None
    position: Position | None = None
    filters: QueryFilters | None = None
    order_direction: Direction | None = None
    limit: int | None = None
    clutch: bool | None = None
    historical_comparison_count: int | Literal["all"] | None = None

    @field_validator("team")
    @classmethod
    def _upper_team(cls, value):
        if isinstance(value, list):
            return [v.strip().upper() for v in value]
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @model_validator(mode="after")
    def _metric_required(self):
        if self.metric is None and self.task != "team":
            raise ValueError("metric is required unless task is 'team'")
        return self

    @property
    def players(self) -> list[str]:
        if self.filters and self.filters.players:
            return list(self.filters.players)
        return []

    @property
    def direction(self) -> str:
        return (self.order_direction or "desc").upper()

    def with_players(self, players: list[str]) -> "Query":
        """Return a copy whose ``filters.players`` is replaced by ``players``."""
        filters = self.filters or QueryFilters()
        return self.model_copy(update={"filters": filters.model_copy(update={"players": list(players)})})

    def to_payload(self) -> dict:
        return self.model_dump(exclude_none=True)


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, dict)):
        return len(value) == 0
    return False


def normalize_query_payload(payload: Any) -> Any:
    """Drop null, empty-string and empty-container values at every level.

    Models frequently emit ``null`` for an unused optional field instead of
    omitting it; those must read as "absent" before validation.
    """
    if not isinstance(payload, dict):
        return payload
    cleaned = {}
    for key, value in payload.items():
        if isinstance(value, dict):
            value = normalize_query_payload(value)
        elif isinstance(value, list):
            value = [v for v in value if not _is_empty(v)]
        if _is_empty(value):
            continue
        cleaned[key] = value
    return cleaned


def validate_query(payload: Any) -> Query:
    """Normalize then validate ``payload``.

    Unrecognized keys are rejected. Raises ``SchemaViolation`` naming the first
    offending field.
    """
    if isinstance(payload, Query):
        payload = payload.to_payload()
    if not isinstance(payload, dict):
        raise SchemaViolation("query", "expected a JSON object")

    payload = normalize_query_payload(payload)

    if payload.get("task") != "team" and "metric" not in payload:
        raise SchemaViolation("metric", "metric is required unless task is 'team'")

    try:
        return Query.model_validate(payload)
    except ValidationError as exc:
        error = exc.errors()[0]
        field = ".".join(str(part) for part in error["loc"]) or "query"
        raise SchemaViolation(field, error["msg"]) from exc


def _range_schema() -> dict:
    return {
        "type": "object",
        "properties": {"gte": {"type": "number"}, "lte": {"type": "number"}},
        "additionalProperties": False,
    }


def to_json_schema() -> dict:
    """JSON schema handed to the model as its response format."""
    return {
        "type": "object",
        "properties": {
            "task": {"type": "string", "enum": list(TASKS)},
            "metric": {"type": "string", "enum": list(METRICS)},
            "season": {"type": "number"},
            "team": {
                "oneOf": [
                    {"type": "string"},
                    {"type": "array", "items": {"type": "string"}},
                ]
            },
            "position": {"type": "string", "enum": list(POSITIONS)},
            "filters": {
                "type": "object",
                "properties": {
                    "min_games": {"type": "number"},
                    "min_metric_value": {"type": "number"},
                    "max_metric_value": {"type": "number"},
                    "filter_by_metric": {"type": "string", "enum": list(PLAYER_METRICS + TEAM_METRICS)},
                    "players": {"type": "array", "items": {"type": "string"}},
                    "draft_year_range": _range_schema(),
                    "age_range": _range_schema(),
                    "minutes_range": _range_schema(),
                    "salary_range": _range_schema(),
                    "order_by_age": {"type": "string", "enum": ["asc", "desc"]},
                    "colleges": {"type": "array", "items": {"type": "string"}},
                    "countries": {"type": "array", "items": {"type": "string"}},
                },
                "required": [],
                "additionalProperties": False,
            },
            "order_direction": {"type": "string", "enum": ["asc", "desc"]},
            "limit": {"type": "number"},
            "clutch": {"type": "boolean"},
            "historical_comparison_count": {
                "oneOf": [
                    {"type": "number"},
                    {"type": "string", "enum": ["all"]},
                ]
            },
        },
        "required": ["task", "season"],
        "additionalProperties": False,
    }
