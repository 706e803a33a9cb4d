"""Question -> answer pipeline behind ``POST /api/ask``."""

import logging

from courtside.errors import InformationalQuestion
from courtside.schemas.query import Query
from courtside.services.classifier_service import is_informational_question
from courtside.services.cluster_service import find_historical_comparisons
from courtside.services.narrate_service import summarize_answer
from courtside.services.player_names import resolve_player_names
from courtside.services.player_service import lookup_solo_player, resolve_single_player
from courtside.services.stats_service import run_query
from courtside.services.team_service import run_team_query
from courtside.services.translator_service import to_structured_query

logger = logging.getLogger(__name__)


def placeholder_query(season: int) -> Query:
    return Query(task="lookup", metric="all", season=season)


async def answer_question(pool, llm, backend, question: str, season: int, narrate: bool = False) -> dict:
    """Classify, translate and execute ``question``; returns the response body.

    Raises ``InformationalQuestion`` for out-of-domain questions and lets the
    player/backend errors propagate to the exception handlers.
    """
    if await is_informational_question(llm, question):
        raise InformationalQuestion(season)

    query = await to_structured_query(llm, question, season)

    if query.task == "solo":
        solo = await lookup_solo_player(pool, query, question, season)
        return {"query": query.to_payload(), "soloPlayer": solo}

    if query.task == "historical_comparison":
        player_name = resolve_single_player(
            query,
            question,
            "Could not find a player name in your question. "
            "Please specify a player name for historical comparison.",
        )
        comparison = await find_historical_comparisons(
            backend, pool, player_name, season, count=query.historical_comparison_count
        )
        return {"query": placeholder_query(season).to_payload(), "historicalComparison": comparison}

    if query.task == "team":
        teams = await run_team_query(pool, query)
        logger.info("Team query returned %d teams", len(teams))
        return {
            "query": query.to_payload(),
            "teams": [team.model_dump(by_alias=True, exclude_none=True) for team in teams],
        }

    colleges = query.filters.colleges if query.filters else None
    player_names = resolve_player_names(query.players, question, colleges)
    if player_names and not query.players:
        query = query.with_players(player_names)

    rows = await run_query(pool, query, player_names)
    response = {
        "query": query.to_payload(),
        "rows": [row.model_dump() for row in rows],
    }
    if narrate:
        response["summary"] = await summarize_answer(llm, query, rows)
    return response
