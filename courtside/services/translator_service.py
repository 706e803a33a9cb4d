"""Natural-language question -> validated ``Query``.

The model is an untrusted producer: its output is repaired, validated, and
replaced by a fixed fallback query whenever anything goes wrong.
"""

import logging

from courtside.constants import METRICS, PLAYER_LIMIT_DEFAULT, resolve_team_abbrev
from courtside.errors import SchemaViolation, TranslationFailure
from courtside.prompts.translate_query import TRANSLATE_SYSTEM_PROMPT, build_translate_prompt
from courtside.schemas.query import Query, normalize_query_payload, to_json_schema, validate_query

logger = logging.getLogger(__name__)


def fallback_query(season: int) -> Query:
    return Query(task="rank", metric="ppg", season=season, limit=PLAYER_LIMIT_DEFAULT)


def repair_raw_query(raw: dict, season: int) -> dict:
    """Fill the fields the model most often gets wrong before validation."""
    repaired = normalize_query_payload(dict(raw))

    if "task" not in repaired:
        logger.warning("Model returned query without task, defaulting to rank")
        repaired["task"] = "rank"

    metric = repaired.get("metric")
    if metric not in METRICS:
        if repaired["task"] == "team":
            repaired.pop("metric", None)
        else:
            logger.warning("Model returned query without a valid metric (%r), defaulting to ppg", metric)
            repaired["metric"] = "ppg"

    if not repaired.get("season"):
        repaired["season"] = season

    # Models sometimes answer with a franchise name instead of its abbreviation.
    team = repaired.get("team")
    if isinstance(team, str):
        repaired["team"] = resolve_team_abbrev(team) or team
    elif isinstance(team, list):
        repaired["team"] = [resolve_team_abbrev(t) or t for t in team if isinstance(t, str)]

    return repaired


async def to_structured_query(llm, question: str, season: int) -> Query:
    """Translate ``question`` into a Query. Never raises."""
    messages = [
        {"role": "system", "content": TRANSLATE_SYSTEM_PROMPT},
        {"role": "user", "content": build_translate_prompt(question, season)},
    ]
    try:
        raw = await llm.json_completion(messages=messages, schema=to_json_schema(), name="nba_query")
        query = validate_query(repair_raw_query(raw, season))
    except SchemaViolation as exc:
        logger.warning("Model output failed validation on %s: %s", exc.field, exc.message)
        return fallback_query(season)
    except TranslationFailure as exc:
        logger.warning("Query translation failed: %s", exc)
        return fallback_query(season)
    except Exception:
        logger.error("Query translation errored for question: %s", question, exc_info=True)
        return fallback_query(season)

    logger.info("Parsed query: %s", query.to_payload())
    return query
